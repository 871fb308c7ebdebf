# numbl_streamlit_app.py
# numbl: fill the 4x4 grid with digits 1-9 so every row and column meets its constraint.
# Run: streamlit run numbl_streamlit_app.py

import json
import time
from typing import List, Optional, Tuple

import streamlit as st
import streamlit.components.v1 as components

from numbl_board import get_duplicates, is_line_guessed_correct, is_puzzle_complete, starting_board_to_board
from numbl_config import NumblConfig, configure_logging
from numbl_generator import todays_puzzle
from numbl_guess import enter_value, is_cell_locked, pending_guesses, submit_guesses
from numbl_scoring import compute_running_score, compute_score, format_score, format_time, share_text
from numbl_store import LocalStore
from numbl_types import COL, GRID_SIZE, ROW, Arrow, Feedback, GameStats, empty_arrows, empty_feedback

st.set_page_config(page_title="numbl", page_icon="🔢", layout="centered")

CONFIG = NumblConfig()
configure_logging(CONFIG)
STORE = LocalStore(CONFIG.store_path)

# ============================ State ============================


def _first_open_cell(puzzle) -> Tuple[int, int]:
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            if not puzzle.is_given(r, c):
                return r, c
    return 0, 0


def init_state():
    puzzle = todays_puzzle(CONFIG.givens)
    st.session_state.puzzle = puzzle
    st.session_state.board = starting_board_to_board(puzzle.starting_board)
    st.session_state.feedback = empty_feedback()
    st.session_state.arrows = empty_arrows()
    st.session_state.guessed_rows = frozenset()
    st.session_state.guessed_cols = frozenset()
    st.session_state.stats = GameStats()
    st.session_state.started = time.time()
    st.session_state.elapsed = 0
    st.session_state.done = False
    st.session_state.breakdown = None
    st.session_state.new_high = False
    st.session_state.selected = _first_open_cell(puzzle)
    st.session_state.column_focus = False
    st.session_state.error = ""


if "puzzle" not in st.session_state:
    init_state()


def elapsed_seconds() -> int:
    if st.session_state.done:
        return st.session_state.elapsed
    return int(time.time() - st.session_state.started)


def _advance(row: int, col: int) -> Optional[Tuple[int, int]]:
    """Next open cell along the focused line, skipping givens."""
    puzzle = st.session_state.puzzle
    while True:
        if st.session_state.column_focus:
            row += 1
        else:
            col += 1
        if row >= GRID_SIZE or col >= GRID_SIZE:
            return None
        if not puzzle.is_given(row, col):
            return row, col


def type_value(value: str):
    ss = st.session_state
    if ss.done:
        return
    r, c = ss.selected
    edit = enter_value(ss.board, ss.puzzle, ss.feedback, ss.arrows, ss.guessed_rows, ss.guessed_cols, r, c, value)
    if not edit.changed:
        return
    ss.board, ss.feedback, ss.arrows = edit.board, edit.feedback, edit.arrows
    ss.guessed_rows, ss.guessed_cols = edit.guessed_rows, edit.guessed_cols
    if value:
        nxt = _advance(r, c)
        if nxt is not None:
            ss.selected = nxt


def submit_guess():
    ss = st.session_state
    if ss.done:
        return
    if get_duplicates(ss.board):
        ss.error = "Some rows or columns repeat a digit."
        return
    result = submit_guesses(ss.board, ss.puzzle, ss.feedback, ss.arrows, ss.guessed_rows, ss.guessed_cols)
    if not result.evaluated:
        ss.error = "Fill a whole row or column first."
        return
    ss.feedback, ss.arrows = result.feedback, result.arrows
    ss.guessed_rows, ss.guessed_cols = result.guessed_rows, result.guessed_cols
    ss.stats = ss.stats.merged(result.stats_delta)
    ss.error = ""

    if is_puzzle_complete(ss.feedback):
        ss.done = True
        ss.elapsed = int(time.time() - ss.started)
        ss.stats = ss.stats.with_time(ss.elapsed)
        ss.breakdown = compute_score(ss.puzzle, ss.feedback, ss.stats, ss.guessed_rows, ss.guessed_cols)
        ss.new_high = STORE.record_score(ss.breakdown.total_score)


# ============================ Styles ============================

st.markdown(
    """
    <style>
      .title {text-align:center; font-weight:800; font-size:2rem; margin: 0.2rem 0 0.2rem;}
      .subtle {text-align:center; color:#6b7280; margin-bottom: 0.4rem;}
      .leader {text-align:center; color:#374151; font-weight:600; margin-bottom: 0.6rem;}

      .board {display:grid; grid-template-columns: repeat(4, 60px) 90px; gap:8px; justify-content:center; margin: 12px 0 14px;}
      .tile {position:relative; height:60px; width:60px; border-radius:10px; display:flex; align-items:center; justify-content:center;
             font-size:1.4rem; font-weight:800; border:2px solid #e5e7eb; background:#f9fafb; color:#111827;}
      .correct {background:#16a34a; color:#fff; border-color:#16a34a;}
      .misplaced {background:#f59e0b; color:#fff; border-color:#f59e0b;}
      .wrong {background:#9ca3af; color:#fff; border-color:#9ca3af;}
      .given {background:#e5e7eb; color:#374151;}
      .duplicate {border-color:#dc2626; color:#dc2626;}
      .selected {border-color:#3b82f6; border-width:3px;}
      .focus {background:#dbeafe;}
      .arrow {position:absolute; right:4px; bottom:2px; font-size:0.8rem;}

      .clue {display:flex; align-items:center; justify-content:center; text-align:center; font-size:0.8rem;
             border-radius:8px; background:#f3f4f6; color:#111827; padding:2px;}
      .clue b {display:block;}
      .clue.done {background:#dcfce7;}
    </style>
    """,
    unsafe_allow_html=True,
)

ss = st.session_state
puzzle = ss.puzzle

st.markdown('<div class="title">numbl</div>', unsafe_allow_html=True)
st.markdown(f'<div class="subtle">Puzzle for {puzzle.date}</div>', unsafe_allow_html=True)

running = ss.breakdown.total_score if ss.breakdown else compute_running_score(
    puzzle, ss.feedback, ss.stats, ss.guessed_rows, ss.guessed_cols
)
leader_txt = [
    f"Time {format_time(elapsed_seconds())}",
    f"Score {format_score(running)}",
    f"High score {format_score(STORE.high_score)}",
]
st.markdown(f"<div class='leader'>{' | '.join(leader_txt)}</div>", unsafe_allow_html=True)

# ============================ Board ============================


def _clue_html(line_type: str, index: int) -> str:
    constraint = puzzle.constraint_for(line_type, index)
    done = " done" if is_line_guessed_correct(ss.feedback, line_type, index) else ""
    return (
        f"<div class='clue constraint-{constraint.kind}{done}'>"
        f"<span><b>{constraint.name}</b>{constraint.describe()}</span></div>"
    )


def _tile_html(r: int, c: int, duplicates) -> str:
    val = ss.board[r][c]
    fb = ss.feedback[r][c]
    css: List[str] = ["tile"]
    if fb != Feedback.NONE:
        css.append(fb.value)
    if puzzle.is_given(r, c):
        css.append("given")
    if (r, c) in duplicates:
        css.append("duplicate")
    sel_r, sel_c = ss.selected
    if (r, c) == (sel_r, sel_c) and not ss.done:
        css.append("selected")
    elif (c == sel_c if ss.column_focus else r == sel_r) and not puzzle.is_given(r, c):
        css.append("focus")
    arrow = ss.arrows[r][c]
    mark = ""
    if fb == Feedback.MISPLACED and arrow is not None:
        mark = f"<span class='arrow'>{'→' if arrow == Arrow.RIGHT else '↓'}</span>"
    return f"<div class='{' '.join(css)}' id='tile-{r}-{c}'>{val or '&nbsp;'}{mark}</div>"


duplicates = get_duplicates(ss.board)
cells_html = []
for r in range(GRID_SIZE):
    for c in range(GRID_SIZE):
        cells_html.append(_tile_html(r, c, duplicates))
    cells_html.append(_clue_html(ROW, r))
for c in range(GRID_SIZE):
    cells_html.append(_clue_html(COL, c))
cells_html.append("<div></div>")
st.markdown("<div class='board'>" + "".join(cells_html) + "</div>", unsafe_allow_html=True)

# ============================ Controls ============================

pending = pending_guesses(ss.board, ss.feedback, ss.guessed_rows, ss.guessed_cols)
open_cells = [
    (r, c) for r in range(GRID_SIZE) for c in range(GRID_SIZE)
    if not is_cell_locked(puzzle, ss.feedback, r, c)
]


def _keypad():
    keys = st.columns(3)
    for n in range(1, 10):
        if keys[(n - 1) % 3].button(str(n), key=f"num-{n}", use_container_width=True, disabled=ss.done):
            type_value(str(n))
            st.rerun()
    if st.button("Clear", use_container_width=True, disabled=ss.done):
        type_value("")
        st.rerun()
    if st.button("Guess", type="primary", use_container_width=True, disabled=ss.done or not pending or bool(duplicates)):
        submit_guess()
        st.rerun()


def _cell_controls():
    if open_cells and not ss.done:
        current = ss.selected if ss.selected in open_cells else open_cells[0]
        picked = st.selectbox(
            "Cell",
            open_cells,
            index=open_cells.index(current),
            format_func=lambda rc: f"Row {rc[0] + 1}, Column {rc[1] + 1}",
        )
        if picked != ss.selected:
            ss.selected = picked
            st.rerun()
    focus = st.toggle("Column focus", value=ss.column_focus)
    if focus != ss.column_focus:
        ss.column_focus = focus
        st.rerun()
    if pending:
        st.caption("Ready to guess: " + ", ".join(f"{t} {i + 1}" for t, i in pending))


if STORE.keyboard_position == "left":
    pad_col, side_col = st.columns([1, 1])
else:
    side_col, pad_col = st.columns([1, 1])
with pad_col:
    _keypad()
with side_col:
    _cell_controls()
    if st.button("Restart puzzle", use_container_width=True):
        init_state()
        st.rerun()

# ============================ Feedback ============================

if ss.error:
    st.error(ss.error)

if ss.done and ss.breakdown:
    b = ss.breakdown
    if ss.new_high:
        st.success("🏆 New high score!")
    st.success(f"🎉 numbl finished in {format_time(ss.elapsed)}!")
    rows = [
        ("Base score", format_score(b.base_score)),
        ("Time bonus", f"+{format_score(b.time_bonus)}"),
        ("First-time correct", f"+{format_score(b.first_time_correct_bonus)}"),
        ("Perfect accuracy", f"+{format_score(b.perfect_accuracy_bonus)}"),
        ("Efficiency", f"+{format_score(b.efficiency_bonus)}"),
        ("Difficulty multiplier", f"x{b.difficulty_multiplier:.2f}"),
        ("Total", format_score(b.total_score)),
    ]
    st.table({"": [k for k, _ in rows], "Points": [v for _, v in rows]})
    text = share_text(ss.elapsed, b.total_score, CONFIG.share_url)
    st.code(text, language=None)
    components.html(
        f"""
        <button id="copy">Copy result</button>
        <script>
        const text = {json.dumps(text)};
        document.getElementById("copy").onclick = () => navigator.clipboard.writeText(text);
        </script>
        """,
        height=40,
    )

# ============================== Sidebar ==========================

with st.sidebar:
    st.subheader("⚙️ Settings")
    side = st.radio(
        "Keypad position",
        ["left", "right"],
        index=0 if STORE.keyboard_position == "left" else 1,
        horizontal=True,
    )
    if side != STORE.keyboard_position:
        STORE.keyboard_position = side
        st.rerun()

    st.markdown("---")

    with st.expander("📋 How to Play", expanded=not STORE.seen_help):
        st.markdown("""
        • Fill every empty cell with a digit **1-9**
        • Each **row** and **column** has a constraint: Sum, All Even, All Odd, Contains or Range
        • Grey cells are **given** and cannot change
        • When a row or column is full, press **Guess**
        • **Colors mean:**
          - 🟢 **Green**: Right digit, right cell
          - 🟡 **Yellow**: Digit belongs in this row (→) or column (↓)
          - ⬜ **Gray**: Digit does not fit here
        • First-time-correct lines and a fast finish earn bonuses
        """)
        if not STORE.seen_help and st.button("Got it", key="help-seen"):
            STORE.mark_help_seen()
            st.rerun()
