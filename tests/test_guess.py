# tests/test_guess.py
import pytest
from conftest import SOLUTION, make_puzzle

from numbl_guess import (
    enter_value,
    evaluate_line,
    is_line_eligible,
    pending_guesses,
    submit_guess,
    submit_guesses,
)
from numbl_types import Arrow, Feedback, GameStats, empty_arrows, empty_feedback

C, M, W, N = Feedback.CORRECT, Feedback.MISPLACED, Feedback.WRONG, Feedback.NONE


def _board(rows):
    return [[str(v) if v else "" for v in row] for row in rows]


def _fb(ev):
    return [(cell.feedback, cell.arrow) for cell in ev.cells]


# ============================ Single line ============================


def test_row_guess_correct_misplaced_wrong():
    board = _board([[1, 3, 2, 5], [0] * 4, [0] * 4, [0] * 4])
    ev = evaluate_line(board, SOLUTION, "row", 0)
    assert _fb(ev) == [(C, None), (M, Arrow.RIGHT), (M, Arrow.RIGHT), (W, None)]
    assert ev.correct == 3
    assert ev.wrong == 1


def test_column_guess_checks_column_before_row():
    # solution column 0 is 1, 6, 9, 4
    board = _board([[2, 0, 0, 0], [1, 0, 0, 0], [9, 0, 0, 0], [7, 0, 0, 0]])
    ev = evaluate_line(board, SOLUTION, "col", 0)
    assert _fb(ev) == [(M, Arrow.RIGHT), (M, Arrow.DOWN), (C, None), (W, None)]


def test_value_in_both_row_and_column_follows_guess_direction():
    # 9 sits in solution row 1 and solution column 0
    board = _board([[6, 0, 0, 0], [9, 6, 7, 8], [1, 0, 0, 0], [4, 0, 0, 0]])
    row_ev = evaluate_line(board, SOLUTION, "row", 1)
    col_ev = evaluate_line(board, SOLUTION, "col", 0)
    assert row_ev.cells[0].arrow == Arrow.RIGHT
    assert col_ev.cells[1].arrow == Arrow.DOWN


def test_value_elsewhere_in_grid_but_unreachable_is_wrong():
    # 7 is in the solution, but not in row 0 nor column 0
    board = _board([[7, 2, 3, 4], [0] * 4, [0] * 4, [0] * 4])
    ev = evaluate_line(board, SOLUTION, "row", 0)
    assert ev.cells[0].feedback == W
    assert ev.cells[0].arrow is None


def test_refuses_incomplete_or_duplicate_lines():
    assert evaluate_line(_board([[1, 2, 3, 0]] + [[0] * 4] * 3), SOLUTION, "row", 0) is None
    assert evaluate_line(_board([[1, 1, 3, 4]] + [[0] * 4] * 3), SOLUTION, "row", 0) is None


# ============================ Eligibility ============================


def test_pending_guesses_lists_full_unique_unguessed_lines(solved_board):
    board = [row[:] for row in solved_board]
    board[3] = ["", "", "", ""]
    pending = pending_guesses(board, empty_feedback(), set(), set())
    assert pending == [("row", 0), ("row", 1), ("row", 2)]


def test_guessed_line_not_offered_again(solved_board):
    board = [row[:] for row in solved_board]
    assert not is_line_eligible(board, empty_feedback(), "row", 0, {0}, set())
    board[0][1] = "1"
    assert not is_line_eligible(board, empty_feedback(), "row", 0, set(), set())


# ============================ Submission ============================


def test_submit_all_correct_lines_counts_lines_not_cells(puzzle, solved_board):
    feedback = empty_feedback()
    result = submit_guesses(solved_board, puzzle, feedback, empty_arrows(), set(), set())

    assert all(f == C for row in result.feedback for f in row)
    assert result.guessed_rows == {0, 1, 2, 3}
    assert result.guessed_cols == {0, 1, 2, 3}
    assert result.stats_delta == GameStats(
        total_guesses=8,
        correct_guesses=32,
        wrong_guesses=0,
        first_time_correct_rows=4,
        first_time_correct_cols=4,
        first_time_correct_cells=0,
    )
    # inputs untouched
    assert feedback == empty_feedback()
    assert pending_guesses(solved_board, result.feedback, result.guessed_rows, result.guessed_cols) == []


def test_cells_then_line_first_time_correct(puzzle):
    board = _board([[1, 3, 2, 4], [0] * 4, [0] * 4, [0] * 4])
    first = submit_guess(board, puzzle, empty_feedback(), "row", 0)
    assert first.feedback[0] == [C, M, M, C]
    assert first.stats_delta.first_time_correct_cells == 2
    assert first.stats_delta.first_time_correct_rows == 0
    assert first.guessed_rows == {0}

    edit = enter_value(board, puzzle, first.feedback, first.arrows, first.guessed_rows, first.guessed_cols, 0, 1, "2")
    edit = enter_value(edit.board, puzzle, edit.feedback, edit.arrows, edit.guessed_rows, edit.guessed_cols, 0, 2, "3")
    assert edit.guessed_rows == frozenset()
    assert pending_guesses(edit.board, edit.feedback, edit.guessed_rows, edit.guessed_cols) == [("row", 0)]

    second = submit_guesses(edit.board, puzzle, edit.feedback, edit.arrows, edit.guessed_rows, edit.guessed_cols)
    assert second.feedback[0] == [C, C, C, C]
    assert second.stats_delta.first_time_correct_rows == 1
    assert second.stats_delta.first_time_correct_cells == 0


def test_wrong_guess_counts(puzzle):
    board = _board([[1, 3, 2, 5], [0] * 4, [0] * 4, [0] * 4])
    result = submit_guess(board, puzzle, empty_feedback(), "row", 0)
    assert result.stats_delta.wrong_guesses == 1
    assert result.stats_delta.correct_guesses == 3
    stats = GameStats(time_in_seconds=12).merged(result.stats_delta)
    assert stats.total_guesses == 1
    assert stats.time_in_seconds == 12


def test_refused_guess_changes_nothing(puzzle):
    board = _board([[1, 1, 2, 4], [0] * 4, [0] * 4, [0] * 4])
    result = submit_guess(board, puzzle, empty_feedback(), "row", 0)
    assert not result.evaluated
    assert result.feedback == empty_feedback()
    assert result.guessed_rows == frozenset()
    assert result.stats_delta == GameStats()


# ============================ Editing ============================


def test_givens_and_correct_cells_are_locked():
    puzzle = make_puzzle(givens=[(0, 0)])
    board = _board([[1, 2, 3, 4], [0] * 4, [0] * 4, [0] * 4])
    feedback = empty_feedback()
    feedback[0][1] = C

    edit = enter_value(board, puzzle, feedback, empty_arrows(), {0}, set(), 0, 0, "9")
    assert not edit.changed
    edit = enter_value(board, puzzle, feedback, empty_arrows(), {0}, set(), 0, 1, "9")
    assert not edit.changed
    assert edit.board == board


def test_edit_resets_cell_feedback_and_guessed_lines(puzzle):
    board = _board([[1, 3, 2, 5], [0] * 4, [0] * 4, [0] * 4])
    result = submit_guess(board, puzzle, empty_feedback(), "row", 0, guessed_cols={3})
    edit = enter_value(board, puzzle, result.feedback, result.arrows, result.guessed_rows, result.guessed_cols, 0, 3, "")
    assert edit.changed
    assert edit.board[0][3] == ""
    assert edit.feedback[0][3] == N
    assert edit.arrows[0][3] is None
    assert edit.feedback[0][1] == M
    assert edit.guessed_rows == frozenset()
    assert edit.guessed_cols == frozenset()


def test_edit_rejects_values_outside_one_to_nine(puzzle):
    board = _board([[0] * 4] * 4)
    for value in ("0", "12", "x"):
        with pytest.raises(ValueError):
            enter_value(board, puzzle, empty_feedback(), empty_arrows(), set(), set(), 1, 1, value)
    assert enter_value(board, puzzle, empty_feedback(), empty_arrows(), set(), set(), 1, 1, "9").changed


# ============================ Overlapping lines ============================


def test_row_and_column_in_one_submission_column_arrow_wins(puzzle):
    # row 1 and column 0 share cell (1, 0); 9 is misplaced in both
    board = _board([[6, 0, 0, 0], [9, 6, 7, 8], [1, 0, 0, 0], [4, 0, 0, 0]])
    assert pending_guesses(board, empty_feedback(), set(), set()) == [("row", 1), ("col", 0)]

    result = submit_guesses(board, puzzle, empty_feedback(), empty_arrows(), set(), set())
    assert result.feedback[1][0] == M
    assert result.arrows[1][0] == Arrow.DOWN
    assert result.arrows[1][1] == Arrow.RIGHT
    assert result.stats_delta.total_guesses == 2
    assert result.guessed_rows == {1}
    assert result.guessed_cols == {0}
