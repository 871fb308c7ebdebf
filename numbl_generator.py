# numbl_generator.py
# Deterministic daily puzzle generation: seeded RNG, grid, constraints, givens.

import logging
from datetime import date as Date, datetime, timezone
from typing import List, Optional, Sequence, Set, Tuple, TypeVar

from numbl_types import (
    DIGITS,
    GRID_SIZE,
    Constraint,
    ContainsConstraint,
    ParityConstraint,
    Puzzle,
    RangeConstraint,
    SumConstraint,
    check_constraint,
    to_int32,
)

log = logging.getLogger(__name__)

EPOCH = "2024-01-01"
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280
MAX_RANGE_SPAN = 5
DEFAULT_GIVENS = 4

T = TypeVar("T")

# ============================ Seeded RNG ============================


def seed_from_date(date: str) -> int:
    """Fold the date string into a signed 32-bit int, then add days since EPOCH."""
    seed = 0
    for ch in date:
        seed = to_int32(seed * 31 + ord(ch))
    days = (Date.fromisoformat(date) - Date.fromisoformat(EPOCH)).days
    return seed + days


def lcg_step(state: int) -> Tuple[float, int]:
    """One LCG draw: returns (value in [0, 1), next state)."""
    state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
    return state / LCG_MODULUS, state


class SeededRandom:
    """Caller-owned LCG stream. Same seed, same draws."""

    def __init__(self, seed: int):
        self.state = seed

    @classmethod
    def from_date(cls, date: str) -> "SeededRandom":
        return cls(seed_from_date(date))

    def random(self) -> float:
        value, self.state = lcg_step(self.state)
        return value

    def choice_index(self, n: int) -> int:
        return int(self.random() * n)

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Fisher-Yates on a copy; empty input draws nothing."""
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = self.choice_index(i + 1)
            out[i], out[j] = out[j], out[i]
        return out


# ============================ Grid ============================


def synthesize_grid(rng: SeededRandom) -> List[List[int]]:
    """Cycle a shuffled 1..9 through the 16 cells, so digits repeat."""
    digits = rng.shuffle(DIGITS)
    return [
        [digits[(r * GRID_SIZE + c) % len(digits)] for c in range(GRID_SIZE)]
        for r in range(GRID_SIZE)
    ]


# ============================ Constraints ============================


def constraint_candidates(numbers: Sequence[int], rng: SeededRandom) -> List[Constraint]:
    """Every catalog constraint this line satisfies. Sum is always first."""
    evens = sum(1 for n in numbers if n % 2 == 0)
    unique = list(dict.fromkeys(numbers))
    lo, hi = min(numbers), max(numbers)

    candidates: List[Constraint] = [SumConstraint(sum(numbers))]
    if evens == len(numbers):
        candidates.append(ParityConstraint(True))
    elif evens == 0:
        candidates.append(ParityConstraint(False))
    if len(unique) >= 2:
        picked = rng.shuffle(unique)
        candidates.append(ContainsConstraint((picked[0], picked[1])))
    if hi - lo + 1 <= MAX_RANGE_SPAN:
        candidates.append(RangeConstraint(lo, hi))
    return candidates


def select_constraint(
    numbers: Sequence[int], used_types: Set[str], rng: SeededRandom
) -> Tuple[Constraint, str]:
    """Pick one constraint for a line, preferring kinds not used yet."""
    candidates = constraint_candidates(numbers, rng)
    unused = [c for c in candidates if c.kind not in used_types]
    pool = unused or candidates
    chosen = pool[rng.choice_index(len(pool))]
    return chosen, chosen.kind


def assign_constraints(
    solution: List[List[int]], rng: SeededRandom
) -> Tuple[List[Constraint], List[Constraint]]:
    """Rows and columns alternate (row 0, col 0, row 1, ...) over one used-kind set."""
    used: Set[str] = set()
    rows: List[Constraint] = []
    cols: List[Constraint] = []
    for i in range(GRID_SIZE):
        row_c, kind = select_constraint(solution[i], used, rng)
        rows.append(row_c)
        used.add(kind)

        col_c, kind = select_constraint([solution[r][i] for r in range(GRID_SIZE)], used, rng)
        cols.append(col_c)
        used.add(kind)
    return rows, cols


# ============================ Givens ============================


def _is_corner(row: int, col: int) -> bool:
    edge = (0, GRID_SIZE - 1)
    return row in edge and col in edge


def given_priority(row_c: Constraint, col_c: Constraint, row: int, col: int) -> int:
    pair = (check_constraint(row_c), check_constraint(col_c))
    priority = 0
    if any(isinstance(c, RangeConstraint) for c in pair):
        priority += 2
    if any(isinstance(c, ParityConstraint) for c in pair):
        priority += 1
    if _is_corner(row, col):
        priority += 2
    return priority


def choose_givens(
    solution: Sequence[Sequence[int]],
    row_constraints: Sequence[Constraint],
    col_constraints: Sequence[Constraint],
    count: int = DEFAULT_GIVENS,
) -> List[List[Optional[int]]]:
    """Reveal up to `count` cells, skipping lines governed by a contains constraint."""
    positions = []
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            row_c, col_c = row_constraints[r], col_constraints[c]
            if isinstance(row_c, ContainsConstraint) or isinstance(col_c, ContainsConstraint):
                continue
            positions.append((given_priority(row_c, col_c, r, c), r, c))

    # sorted() is stable, so equal priorities keep row-major order
    positions = sorted(positions, key=lambda p: -p[0])
    if len(positions) < count:
        log.warning("only %d cells eligible for givens (wanted %d)", len(positions), count)

    board: List[List[Optional[int]]] = [[None] * GRID_SIZE for _ in range(GRID_SIZE)]
    for _, r, c in positions[:count]:
        board[r][c] = solution[r][c]
    return board


# ============================ Puzzle ============================


def today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def generate_puzzle(date: Optional[str] = None, givens: int = DEFAULT_GIVENS) -> Puzzle:
    """Build the puzzle for `date` (YYYY-MM-DD, default today UTC). Deterministic per date."""
    if givens not in (4, 5):
        raise ValueError(f"givens must be 4 or 5, got {givens}")
    date = date or today()
    rng = SeededRandom.from_date(date)
    log.debug("generating puzzle for %s (seed %d)", date, rng.state)

    solution = synthesize_grid(rng)
    rows, cols = assign_constraints(solution, rng)
    starting = choose_givens(solution, rows, cols, givens)
    return Puzzle(
        solution=solution,
        starting_board=starting,
        row_constraints=rows,
        col_constraints=cols,
        date=date,
    )


def todays_puzzle(givens: int = DEFAULT_GIVENS) -> Puzzle:
    return generate_puzzle(today(), givens)
