# numbl_types.py
# Shared value types for numbl: constraints, puzzles, feedback, stats, scores.

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

GRID_SIZE = 4
DIGITS = tuple(range(1, 10))

# ============================ Errors ============================


class NumblError(Exception):
    """Base class for numbl errors."""


class InvariantViolation(NumblError):
    """Raised when core inputs are wired wrong (bad grid shape, unknown constraint)."""


def to_int32(n: int) -> int:
    """Wrap to a signed 32-bit int."""
    n &= 0xFFFFFFFF
    return n - 0x100000000 if n >= 0x80000000 else n


# ============================ Constraints ============================


@dataclass(frozen=True)
class SumConstraint:
    target: int

    @property
    def kind(self) -> str:
        return "sum"

    @property
    def name(self) -> str:
        return "Sum"

    def describe(self) -> str:
        return str(self.target)

    def is_satisfied_by(self, numbers: List[int]) -> bool:
        return sum(numbers) == self.target


@dataclass(frozen=True)
class ParityConstraint:
    want_even: bool

    @property
    def kind(self) -> str:
        return "even" if self.want_even else "odd"

    @property
    def name(self) -> str:
        return "Even" if self.want_even else "Odd"

    def describe(self) -> str:
        return "All Even" if self.want_even else "All Odd"

    def is_satisfied_by(self, numbers: List[int]) -> bool:
        want = 0 if self.want_even else 1
        return all(n % 2 == want for n in numbers)


@dataclass(frozen=True)
class ContainsConstraint:
    values: Tuple[int, int]

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))
        if len(self.values) != 2 or self.values[0] == self.values[1]:
            raise InvariantViolation(f"Contains needs two distinct values, got {self.values}")

    @property
    def kind(self) -> str:
        return "contains"

    @property
    def name(self) -> str:
        return "Contains"

    def describe(self) -> str:
        return ", ".join(str(v) for v in sorted(self.values))

    def is_satisfied_by(self, numbers: List[int]) -> bool:
        return all(v in numbers for v in self.values)


@dataclass(frozen=True)
class RangeConstraint:
    min: int
    max: int

    @property
    def kind(self) -> str:
        return "range"

    @property
    def name(self) -> str:
        return "Range"

    def describe(self) -> str:
        return f"{self.min}-{self.max}"

    def is_satisfied_by(self, numbers: List[int]) -> bool:
        return all(self.min <= n <= self.max for n in numbers)


Constraint = Union[SumConstraint, ParityConstraint, ContainsConstraint, RangeConstraint]
CONSTRAINT_CLASSES = (SumConstraint, ParityConstraint, ContainsConstraint, RangeConstraint)
CONSTRAINT_KINDS = ("sum", "even", "odd", "contains", "range")


def check_constraint(constraint) -> Constraint:
    """Return `constraint` unchanged, or raise if it is not a catalog variant."""
    if not isinstance(constraint, CONSTRAINT_CLASSES):
        raise InvariantViolation(f"Unknown constraint: {constraint!r}")
    return constraint


# ============================ Lines ============================

ROW = "row"
COL = "col"
LINE_TYPES = (ROW, COL)


def check_line(line_type: str, index: int) -> None:
    if line_type not in LINE_TYPES:
        raise InvariantViolation(f"Unknown line type: {line_type!r}")
    if not 0 <= index < GRID_SIZE:
        raise InvariantViolation(f"Line index out of range: {index}")


def line_positions(line_type: str, index: int) -> List[Tuple[int, int]]:
    """(row, col) pairs covered by a row or column."""
    check_line(line_type, index)
    if line_type == ROW:
        return [(index, c) for c in range(GRID_SIZE)]
    return [(r, index) for r in range(GRID_SIZE)]


# ============================ Puzzle ============================


def _check_square(grid, what: str) -> None:
    if len(grid) != GRID_SIZE or any(len(row) != GRID_SIZE for row in grid):
        raise InvariantViolation(f"{what} must be {GRID_SIZE}x{GRID_SIZE}")


@dataclass(frozen=True)
class Puzzle:
    """One generated puzzle. Never mutated after creation."""

    solution: Tuple[Tuple[int, ...], ...]
    starting_board: Tuple[Tuple[Optional[int], ...], ...]
    row_constraints: Tuple[Constraint, ...]
    col_constraints: Tuple[Constraint, ...]
    date: str

    def __post_init__(self):
        # Accept lists from callers but store tuples.
        object.__setattr__(self, "solution", tuple(tuple(r) for r in self.solution))
        object.__setattr__(self, "starting_board", tuple(tuple(r) for r in self.starting_board))
        object.__setattr__(self, "row_constraints", tuple(self.row_constraints))
        object.__setattr__(self, "col_constraints", tuple(self.col_constraints))

        _check_square(self.solution, "solution")
        _check_square(self.starting_board, "starting board")
        if len(self.row_constraints) != GRID_SIZE or len(self.col_constraints) != GRID_SIZE:
            raise InvariantViolation("need one constraint per row and per column")
        for c in self.row_constraints + self.col_constraints:
            check_constraint(c)
        for r in range(GRID_SIZE):
            for c in range(GRID_SIZE):
                given = self.starting_board[r][c]
                if given is not None and given != self.solution[r][c]:
                    raise InvariantViolation(f"given at ({r},{c}) disagrees with solution")

    def is_given(self, row: int, col: int) -> bool:
        return self.starting_board[row][col] is not None

    @property
    def prefilled_count(self) -> int:
        return sum(1 for row in self.starting_board for cell in row if cell is not None)

    def constraint_for(self, line_type: str, index: int) -> Constraint:
        check_line(line_type, index)
        return self.row_constraints[index] if line_type == ROW else self.col_constraints[index]

    def solution_line(self, line_type: str, index: int) -> List[int]:
        return [self.solution[r][c] for r, c in line_positions(line_type, index)]


# ============================ Feedback ============================


class Feedback(str, Enum):
    NONE = "none"
    CORRECT = "correct"
    MISPLACED = "misplaced"
    WRONG = "wrong"


class Arrow(str, Enum):
    DOWN = "down"    # value belongs elsewhere in this column
    RIGHT = "right"  # value belongs elsewhere in this row


FeedbackGrid = List[List[Feedback]]
ArrowGrid = List[List[Optional[Arrow]]]
Board = List[List[str]]


def empty_feedback() -> FeedbackGrid:
    return [[Feedback.NONE for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


def empty_arrows() -> ArrowGrid:
    return [[None for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


# ============================ Stats & Score ============================


@dataclass(frozen=True)
class GameStats:
    total_guesses: int = 0
    correct_guesses: int = 0
    wrong_guesses: int = 0
    first_time_correct_rows: int = 0
    first_time_correct_cols: int = 0
    first_time_correct_cells: int = 0
    time_in_seconds: int = 0

    def merged(self, delta: "GameStats") -> "GameStats":
        """Add a guess delta's counters; elapsed time stays ours."""
        return replace(
            self,
            total_guesses=self.total_guesses + delta.total_guesses,
            correct_guesses=self.correct_guesses + delta.correct_guesses,
            wrong_guesses=self.wrong_guesses + delta.wrong_guesses,
            first_time_correct_rows=self.first_time_correct_rows + delta.first_time_correct_rows,
            first_time_correct_cols=self.first_time_correct_cols + delta.first_time_correct_cols,
            first_time_correct_cells=self.first_time_correct_cells + delta.first_time_correct_cells,
        )

    def with_time(self, seconds: int) -> "GameStats":
        return replace(self, time_in_seconds=seconds)


@dataclass(frozen=True)
class ScoreBreakdown:
    base_score: int
    time_bonus: int
    time_multiplier: float
    first_time_correct_bonus: int
    perfect_accuracy_bonus: int
    efficiency_bonus: int
    difficulty_multiplier: float
    total_score: int


def copy_grid(grid: Iterable[Iterable]) -> List[list]:
    return [list(row) for row in grid]
