# numbl_scoring.py
# Score calculation: tile points, time bonus, first-time-correct bonuses, multipliers.

import math
from typing import Set, Tuple

from numbl_board import is_puzzle_complete
from numbl_types import GRID_SIZE, Feedback, FeedbackGrid, GameStats, Puzzle, ScoreBreakdown

TILE_POINTS = {
    Feedback.CORRECT: 100,
    Feedback.MISPLACED: 50,
    Feedback.WRONG: 0,
    Feedback.NONE: 0,
}
FIRST_TIME_CORRECT_BONUS = 100
PERFECT_ACCURACY_BONUS = 300
EFFICIENCY_BONUS = 200
EFFICIENCY_THRESHOLD = 8
CORRECTNESS_MULTIPLIER_PER_CELL = 0.1

MAX_TIME_BONUS = 500
TIME_BONUS_GRACE_SECONDS = 60
TIME_BONUS_STEP_SECONDS = 30
TIME_BONUS_STEP_POINTS = 100

# ============================ Components ============================


def calculate_time_bonus(seconds: int) -> Tuple[int, float]:
    """(bonus, multiplier). Full bonus up to a minute, then -100 per started 30s."""
    if seconds <= TIME_BONUS_GRACE_SECONDS:
        return MAX_TIME_BONUS, 1.0
    intervals = math.ceil((seconds - TIME_BONUS_GRACE_SECONDS) / TIME_BONUS_STEP_SECONDS)
    return max(0, MAX_TIME_BONUS - intervals * TIME_BONUS_STEP_POINTS), 1.0


def correctness_multiplier(first_time_correct_cells: int) -> float:
    return 1.0 + first_time_correct_cells * CORRECTNESS_MULTIPLIER_PER_CELL


def prefill_multiplier(prefilled: int) -> float:
    # 4 givens -> 1.0, 5 givens -> 0.75
    return 2.0 - prefilled / 4.0


def difficulty_multiplier(puzzle: Puzzle, first_time_correct_cells: int) -> float:
    return correctness_multiplier(first_time_correct_cells) * prefill_multiplier(puzzle.prefilled_count)


def calculate_base_score(
    puzzle: Puzzle, feedback: FeedbackGrid, guessed_rows: Set[int], guessed_cols: Set[int]
) -> int:
    """Tile points for non-given cells lying in a guessed row or column."""
    score = 0
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            if puzzle.is_given(r, c):
                continue
            if r not in guessed_rows and c not in guessed_cols:
                continue
            score += TILE_POINTS[feedback[r][c]]
    return score


def first_time_correct_bonus(stats: GameStats) -> int:
    return (stats.first_time_correct_rows + stats.first_time_correct_cols) * FIRST_TIME_CORRECT_BONUS


# ============================ Totals ============================


def compute_running_score(
    puzzle: Puzzle,
    feedback: FeedbackGrid,
    stats: GameStats,
    guessed_rows: Set[int],
    guessed_cols: Set[int],
) -> int:
    """Live score: tile points plus first-time-correct bonus only."""
    return calculate_base_score(puzzle, feedback, guessed_rows, guessed_cols) + first_time_correct_bonus(stats)


def compute_score(
    puzzle: Puzzle,
    feedback: FeedbackGrid,
    stats: GameStats,
    guessed_rows: Set[int],
    guessed_cols: Set[int],
) -> ScoreBreakdown:
    completed = is_puzzle_complete(feedback)
    base = calculate_base_score(puzzle, feedback, guessed_rows, guessed_cols)
    time_bonus, time_mult = calculate_time_bonus(stats.time_in_seconds)
    ftc_bonus = first_time_correct_bonus(stats)
    accuracy = PERFECT_ACCURACY_BONUS if completed and stats.wrong_guesses == 0 else 0
    efficiency = EFFICIENCY_BONUS if completed and stats.total_guesses < EFFICIENCY_THRESHOLD else 0
    difficulty = difficulty_multiplier(puzzle, stats.first_time_correct_cells)

    subtotal = base + time_bonus + ftc_bonus + accuracy + efficiency
    return ScoreBreakdown(
        base_score=base,
        time_bonus=time_bonus,
        time_multiplier=time_mult,
        first_time_correct_bonus=ftc_bonus,
        perfect_accuracy_bonus=accuracy,
        efficiency_bonus=efficiency,
        difficulty_multiplier=difficulty,
        total_score=round_half_up(subtotal * time_mult * difficulty),
    )


def round_half_up(x: float) -> int:
    # builtin round() is banker's rounding; scores round .5 up
    return int(math.floor(x + 0.5))


# ============================ Display ============================


def format_time(seconds: int) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def format_score(score: int) -> str:
    return f"{score:,}"


def share_text(seconds: int, score: int, url: str = "https://numbl.net") -> str:
    return (
        f"I finished today's numbl in {format_time(seconds)} with {format_score(score)} points!"
        f"\n\nTry and beat me: {url}"
    )
