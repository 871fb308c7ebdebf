# numbl_guess.py
# Guess evaluation: per-cell feedback with arrows, multi-line submission, cell edits.
#
# Nothing here mutates its inputs; every call hands back fresh grids and sets.

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Set, Tuple

from numbl_board import has_duplicates_in_line, is_line_full, is_line_guessed_correct
from numbl_types import (
    COL,
    GRID_SIZE,
    ROW,
    Arrow,
    ArrowGrid,
    DIGITS,
    Board,
    Feedback,
    FeedbackGrid,
    GameStats,
    Puzzle,
    copy_grid,
    empty_arrows,
    line_positions,
)

Line = Tuple[str, int]

# ============================ Single line ============================


@dataclass(frozen=True)
class CellFeedback:
    row: int
    col: int
    value: str
    feedback: Feedback
    arrow: Optional[Arrow] = None


@dataclass(frozen=True)
class LineEvaluation:
    line_type: str
    index: int
    cells: Tuple[CellFeedback, ...]

    @property
    def correct(self) -> int:
        """Cells that earned CORRECT or MISPLACED."""
        return sum(1 for c in self.cells if c.feedback in (Feedback.CORRECT, Feedback.MISPLACED))

    @property
    def wrong(self) -> int:
        return sum(1 for c in self.cells if c.feedback == Feedback.WRONG)


def classify_cell(solution, line_type: str, row: int, col: int, value: int) -> Tuple[Feedback, Optional[Arrow]]:
    """Exact match, else row/column membership (own line first), else wrong."""
    if value == solution[row][col]:
        return Feedback.CORRECT, None
    if not any(value in sol_row for sol_row in solution):
        return Feedback.WRONG, None

    in_row = value in solution[row]
    in_col = any(sol_row[col] == value for sol_row in solution)
    checks = [(in_row, Arrow.RIGHT), (in_col, Arrow.DOWN)]
    if line_type == COL:
        checks.reverse()
    for hit, arrow in checks:
        if hit:
            return Feedback.MISPLACED, arrow
    return Feedback.WRONG, None


def evaluate_line(board: Board, solution, line_type: str, index: int) -> Optional[LineEvaluation]:
    """Score one full row or column. None if it has blanks or repeated digits."""
    positions = line_positions(line_type, index)
    if not is_line_full(board, line_type, index) or has_duplicates_in_line(board, line_type, index):
        return None

    cells = []
    for r, c in positions:
        raw = board[r][c]
        fb, arrow = classify_cell(solution, line_type, r, c, int(raw))
        cells.append(CellFeedback(r, c, raw, fb, arrow))
    return LineEvaluation(line_type, index, tuple(cells))


# ============================ Eligibility ============================


def is_line_eligible(
    board: Board,
    feedback: FeedbackGrid,
    line_type: str,
    index: int,
    guessed_rows: Set[int],
    guessed_cols: Set[int],
) -> bool:
    guessed = guessed_rows if line_type == ROW else guessed_cols
    return (
        index not in guessed
        and is_line_full(board, line_type, index)
        and not has_duplicates_in_line(board, line_type, index)
        and not is_line_guessed_correct(feedback, line_type, index)
    )


def pending_guesses(
    board: Board, feedback: FeedbackGrid, guessed_rows: Set[int], guessed_cols: Set[int]
) -> List[Line]:
    """Rows first, then columns, in index order."""
    return [
        (line_type, index)
        for line_type in (ROW, COL)
        for index in range(GRID_SIZE)
        if is_line_eligible(board, feedback, line_type, index, guessed_rows, guessed_cols)
    ]


# ============================ Submission ============================


@dataclass(frozen=True)
class GuessResult:
    feedback: FeedbackGrid
    arrows: ArrowGrid
    guessed_rows: FrozenSet[int]
    guessed_cols: FrozenSet[int]
    stats_delta: GameStats
    evaluations: Tuple[LineEvaluation, ...] = field(default_factory=tuple)

    @property
    def evaluated(self) -> bool:
        return bool(self.evaluations)


def _count_transitions(
    before: FeedbackGrid, after: FeedbackGrid, lines: List[Line]
) -> Tuple[int, int, int]:
    rows = cols = cells = 0
    for line_type, index in lines:
        now = is_line_guessed_correct(after, line_type, index)
        was = is_line_guessed_correct(before, line_type, index)
        if now and not was:
            if line_type == ROW:
                rows += 1
            else:
                cols += 1
            # whole-line credit replaces per-cell credit
            continue
        for r, c in line_positions(line_type, index):
            if after[r][c] == Feedback.CORRECT and before[r][c] != Feedback.CORRECT:
                cells += 1
    return rows, cols, cells


def submit_lines(
    board: Board,
    puzzle: Puzzle,
    feedback: FeedbackGrid,
    arrows: Optional[ArrowGrid],
    guessed_rows: Set[int],
    guessed_cols: Set[int],
    lines: List[Line],
) -> GuessResult:
    """Evaluate each listed line independently and merge results into new grids."""
    new_feedback = copy_grid(feedback)
    new_arrows = copy_grid(arrows) if arrows is not None else empty_arrows()
    rows, cols = set(guessed_rows), set(guessed_cols)

    evaluations = []
    for line_type, index in lines:
        ev = evaluate_line(board, puzzle.solution, line_type, index)
        if ev is None:
            continue
        evaluations.append(ev)
        for cell in ev.cells:
            new_feedback[cell.row][cell.col] = cell.feedback
            new_arrows[cell.row][cell.col] = cell.arrow
        (rows if line_type == ROW else cols).add(index)

    done = [(ev.line_type, ev.index) for ev in evaluations]
    ftc_rows, ftc_cols, ftc_cells = _count_transitions(feedback, new_feedback, done)
    delta = GameStats(
        total_guesses=len(evaluations),
        correct_guesses=sum(ev.correct for ev in evaluations),
        wrong_guesses=sum(ev.wrong for ev in evaluations),
        first_time_correct_rows=ftc_rows,
        first_time_correct_cols=ftc_cols,
        first_time_correct_cells=ftc_cells,
    )
    return GuessResult(
        feedback=new_feedback,
        arrows=new_arrows,
        guessed_rows=frozenset(rows),
        guessed_cols=frozenset(cols),
        stats_delta=delta,
        evaluations=tuple(evaluations),
    )


def submit_guess(
    board: Board,
    puzzle: Puzzle,
    feedback: FeedbackGrid,
    line_type: str,
    index: int,
    arrows: Optional[ArrowGrid] = None,
    guessed_rows: Optional[Set[int]] = None,
    guessed_cols: Optional[Set[int]] = None,
) -> GuessResult:
    """Submit a single row or column."""
    return submit_lines(
        board, puzzle, feedback, arrows, guessed_rows or set(), guessed_cols or set(),
        [(line_type, index)],
    )


def submit_guesses(
    board: Board,
    puzzle: Puzzle,
    feedback: FeedbackGrid,
    arrows: ArrowGrid,
    guessed_rows: Set[int],
    guessed_cols: Set[int],
) -> GuessResult:
    """Submit every pending line at once, the way the Guess button does."""
    lines = pending_guesses(board, feedback, guessed_rows, guessed_cols)
    return submit_lines(board, puzzle, feedback, arrows, guessed_rows, guessed_cols, lines)


# ============================ Editing ============================

VALID_ENTRIES = frozenset(str(d) for d in DIGITS)


@dataclass(frozen=True)
class CellEdit:
    board: Board
    feedback: FeedbackGrid
    arrows: ArrowGrid
    guessed_rows: FrozenSet[int]
    guessed_cols: FrozenSet[int]
    changed: bool


def is_cell_locked(puzzle: Puzzle, feedback: FeedbackGrid, row: int, col: int) -> bool:
    return puzzle.is_given(row, col) or feedback[row][col] == Feedback.CORRECT


def enter_value(
    board: Board,
    puzzle: Puzzle,
    feedback: FeedbackGrid,
    arrows: ArrowGrid,
    guessed_rows: Set[int],
    guessed_cols: Set[int],
    row: int,
    col: int,
    value: str,
) -> CellEdit:
    """Write a digit (or "" to clear). Givens and CORRECT cells stay put."""
    if value and value not in VALID_ENTRIES:
        raise ValueError(f"cell value must be a digit 1-9 or empty, got {value!r}")
    unchanged = CellEdit(
        copy_grid(board), copy_grid(feedback), copy_grid(arrows),
        frozenset(guessed_rows), frozenset(guessed_cols), False,
    )
    if is_cell_locked(puzzle, feedback, row, col) or board[row][col] == value:
        return unchanged

    new_board, new_feedback, new_arrows = unchanged.board, unchanged.feedback, unchanged.arrows
    new_board[row][col] = value
    new_feedback[row][col] = Feedback.NONE
    new_arrows[row][col] = None
    return CellEdit(
        new_board,
        new_feedback,
        new_arrows,
        frozenset(guessed_rows) - {row},
        frozenset(guessed_cols) - {col},
        True,
    )
