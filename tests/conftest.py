# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so the numbl_* modules import without installing
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from numbl_types import Puzzle, SumConstraint  # noqa: E402

# 5 never appears in this solution
SOLUTION = [
    [1, 2, 3, 4],
    [6, 7, 8, 9],
    [9, 8, 7, 6],
    [4, 3, 2, 1],
]


def make_puzzle(solution=SOLUTION, givens=()):
    starting = [[None] * 4 for _ in range(4)]
    for r, c in givens:
        starting[r][c] = solution[r][c]
    return Puzzle(
        solution=solution,
        starting_board=starting,
        row_constraints=[SumConstraint(sum(row)) for row in solution],
        col_constraints=[SumConstraint(sum(row[c] for row in solution)) for c in range(4)],
        date="2024-01-01",
    )


@pytest.fixture
def puzzle():
    return make_puzzle()


@pytest.fixture
def solved_board():
    return [[str(v) for v in row] for row in SOLUTION]
