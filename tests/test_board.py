# tests/test_board.py
import pytest
from conftest import SOLUTION, make_puzzle

from numbl_board import (
    empty_board,
    get_duplicates,
    has_duplicates_in_line,
    is_constraint_satisfied,
    is_line_guessed_correct,
    is_puzzle_complete,
    puzzle_hash,
    starting_board_to_board,
)
from numbl_generator import generate_puzzle
from numbl_types import (
    ContainsConstraint,
    Feedback,
    InvariantViolation,
    ParityConstraint,
    Puzzle,
    RangeConstraint,
    SumConstraint,
    empty_feedback,
)

BOARD = [
    ["1", "2", "3", "4"],
    ["5", "6", "7", "8"],
    ["9", "1", "2", "3"],
    ["4", "5", "6", "7"],
]


def test_constraints_on_board_lines():
    assert is_constraint_satisfied(BOARD, SumConstraint(10), "row", 0)
    assert not is_constraint_satisfied(BOARD, SumConstraint(20), "row", 0)
    assert is_constraint_satisfied(BOARD, SumConstraint(19), "col", 0)
    assert is_constraint_satisfied(BOARD, ContainsConstraint((1, 2)), "row", 0)
    assert not is_constraint_satisfied(BOARD, ContainsConstraint((9, 8)), "row", 0)
    assert is_constraint_satisfied(BOARD, RangeConstraint(1, 5), "row", 0)
    assert not is_constraint_satisfied(BOARD, RangeConstraint(1, 3), "row", 0)


def test_parity_constraints():
    evens = [["2", "4", "6", "8"]] * 4
    odds = [["1", "3", "5", "7"]] * 4
    assert is_constraint_satisfied(evens, ParityConstraint(True), "row", 0)
    assert not is_constraint_satisfied(evens, ParityConstraint(False), "row", 0)
    assert is_constraint_satisfied(odds, ParityConstraint(False), "col", 2)


def test_incomplete_line_never_satisfies():
    board = [row[:] for row in BOARD]
    board[0][2] = ""
    assert not is_constraint_satisfied(board, SumConstraint(7), "row", 0)


def test_unknown_constraint_is_an_invariant_violation():
    with pytest.raises(InvariantViolation):
        is_constraint_satisfied(BOARD, {"sum": 10}, "row", 0)
    with pytest.raises(InvariantViolation):
        is_constraint_satisfied(BOARD, SumConstraint(10), "diagonal", 0)


def test_duplicates_in_rows_and_columns():
    board = empty_board()
    board[0] = ["1", "1", "3", ""]
    board[2][3] = "7"
    board[3][3] = "7"
    assert get_duplicates(board) == {(0, 0), (0, 1), (2, 3), (3, 3)}
    assert has_duplicates_in_line(board, "row", 0)
    assert has_duplicates_in_line(board, "col", 3)
    assert not has_duplicates_in_line(board, "row", 1)


def test_empty_cells_are_not_duplicates():
    assert get_duplicates(empty_board()) == set()


def test_completion_and_line_correctness():
    feedback = [[Feedback.CORRECT] * 4 for _ in range(4)]
    assert is_puzzle_complete(feedback)
    feedback[3][3] = Feedback.WRONG
    assert not is_puzzle_complete(feedback)
    assert is_line_guessed_correct(feedback, "row", 0)
    assert not is_line_guessed_correct(feedback, "col", 3)
    assert not is_puzzle_complete(empty_feedback())


def test_starting_board_to_board():
    puzzle = make_puzzle(givens=[(0, 0), (2, 1)])
    board = starting_board_to_board(puzzle.starting_board)
    assert board[0] == ["1", "", "", ""]
    assert board[2] == ["", "8", "", ""]


def test_puzzle_hash_is_stable_and_distinguishes_puzzles():
    a = puzzle_hash(generate_puzzle("2024-01-01"))
    assert a == puzzle_hash(generate_puzzle("2024-01-01"))
    assert a.isalnum() and a == a.upper()
    assert puzzle_hash(make_puzzle()) != a


# ============================ Puzzle invariants ============================


def test_puzzle_rejects_bad_shapes_and_givens():
    sums = [SumConstraint(1)] * 4
    with pytest.raises(InvariantViolation):
        Puzzle(SOLUTION[:3], [[None] * 4] * 3, sums, sums, "2024-01-01")
    with pytest.raises(InvariantViolation):
        Puzzle(SOLUTION, [[2, None, None, None]] + [[None] * 4] * 3, sums, sums, "2024-01-01")
    with pytest.raises(InvariantViolation):
        Puzzle(SOLUTION, [[None] * 4] * 4, sums[:3], sums, "2024-01-01")


def test_contains_needs_two_distinct_values():
    with pytest.raises(InvariantViolation):
        ContainsConstraint((3, 3))
    assert ContainsConstraint([8, 4]).describe() == "4, 8"


def test_puzzle_is_immutable(puzzle):
    with pytest.raises(AttributeError):
        puzzle.date = "2025-01-01"
    assert isinstance(puzzle.solution, tuple)
