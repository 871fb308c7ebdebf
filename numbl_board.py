# numbl_board.py
# Player board helpers: building boards, duplicates, constraint checks, puzzle ids.

from collections import Counter
from typing import List, Optional, Sequence, Set, Tuple

from numbl_types import (
    COL,
    GRID_SIZE,
    ROW,
    Board,
    Constraint,
    Feedback,
    FeedbackGrid,
    Puzzle,
    check_constraint,
    line_positions,
    to_int32,
)

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# ============================ Boards ============================


def empty_board() -> Board:
    return [["" for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


def starting_board_to_board(starting_board: Sequence[Sequence[Optional[int]]]) -> Board:
    return [["" if cell is None else str(cell) for cell in row] for row in starting_board]


def line_values(grid: Sequence[Sequence], line_type: str, index: int) -> list:
    """The four entries of a row or column, from any 4x4 grid."""
    return [grid[r][c] for r, c in line_positions(line_type, index)]


def is_line_full(board: Board, line_type: str, index: int) -> bool:
    return all(cell != "" for cell in line_values(board, line_type, index))


def _to_numbers(cells: Sequence[str]) -> List[int]:
    return [int(cell) for cell in cells if cell.isdigit()]


# ============================ Duplicates ============================


def _duplicate_indexes(cells: Sequence[str]) -> List[int]:
    counts = Counter(cell for cell in cells if cell != "")
    return [i for i, cell in enumerate(cells) if cell != "" and counts[cell] > 1]


def has_duplicates_in_line(board: Board, line_type: str, index: int) -> bool:
    return bool(_duplicate_indexes(line_values(board, line_type, index)))


def get_duplicates(board: Board) -> Set[Tuple[int, int]]:
    """Cells whose value repeats within their row or column."""
    dups: Set[Tuple[int, int]] = set()
    for line_type in (ROW, COL):
        for index in range(GRID_SIZE):
            positions = line_positions(line_type, index)
            cells = [board[r][c] for r, c in positions]
            dups.update(positions[i] for i in _duplicate_indexes(cells))
    return dups


# ============================ Constraints on the board ============================


def is_constraint_satisfied(board: Board, constraint: Constraint, line_type: str, index: int) -> bool:
    """False until the line holds four digits."""
    check_constraint(constraint)
    numbers = _to_numbers(line_values(board, line_type, index))
    if len(numbers) != GRID_SIZE:
        return False
    return constraint.is_satisfied_by(numbers)


def is_line_guessed_correct(feedback: FeedbackGrid, line_type: str, index: int) -> bool:
    return all(f == Feedback.CORRECT for f in line_values(feedback, line_type, index))


def is_puzzle_complete(feedback: FeedbackGrid) -> bool:
    return all(f == Feedback.CORRECT for row in feedback for f in row)


# ============================ Puzzle id ============================


def _constraint_code(constraint: Constraint) -> str:
    kind = check_constraint(constraint).kind
    if kind == "sum":
        return f"s{constraint.target}"
    if kind in ("even", "odd"):
        return kind[0]
    if kind == "contains":
        return "c" + "".join(str(v) for v in constraint.values)
    return f"r{constraint.min}{constraint.max}"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def puzzle_hash(puzzle: Puzzle) -> str:
    """Short base-36 id of the solution and constraints."""
    text = "|".join(
        [
            "".join(str(v) for row in puzzle.solution for v in row),
            "".join(_constraint_code(c) for c in puzzle.row_constraints),
            "".join(_constraint_code(c) for c in puzzle.col_constraints),
        ]
    )
    h = 0
    for ch in text:
        h = to_int32(h * 31 + ord(ch))
    return _to_base36(abs(h))
