from __future__ import annotations

import streamlit as st

from dotenv import load_dotenv
load_dotenv(override=False)  # Load .env into process env

# --- Core game imports ---
from src.config import Settings, load_settings
from src.core.engine import feedback_grid
from src.core.errors import GuessRejected
from src.core.keyboard import letters_with
from src.core.state import WORD_LENGTHS, RoundState
from src.core.wordlist import WordSource

# --- Services ---
from src.services.coach import suggest_next_guess     # next-guess recommendation
from src.services.game_logger import setup_logging
from src.services.hints import llm_hint               # AI hint (with local fallback)
from src.services.ledger import HighScoreLedger
from src.services.review import generate_review       # post-round review
from src.services.round_controller import RoundController
from src.services.storage import JsonFileStorage
from src.services.timer import ThreadingTicker

_TILE_COLOURS = {"exact": "#6aaa64", "present": "#c9b458", "absent": "#787c7e"}
_KEY_COLOURS = {"exact": "#6aaa64", "present": "#c9b458", "absent": "#3a3a3c", "unknown": "#d3d6da"}
_KEY_ROWS = ["qwertyuiop", "asdfghjkl", "zxcvbnm"]


# =======================================
# Session-state helpers & round management
# =======================================

@st.cache_resource
def _shared_ledger(scores_path: str) -> HighScoreLedger:
    """One ledger per score file for the whole server process, shared by all sessions."""
    return HighScoreLedger(JsonFileStorage(scores_path))


@st.cache_resource
def _shared_words(wordlist_dir: str) -> WordSource:
    return WordSource(wordlist_dir)


def _controller(settings: Settings) -> RoundController:
    """One controller per browser session, wired to the process-wide word lists and ledger."""
    if "controller" not in st.session_state:
        st.session_state["controller"] = RoundController(
            words=_shared_words(str(settings.wordlist_dir)),
            ledger=_shared_ledger(str(settings.scores_path)),
            ticker_factory=lambda: ThreadingTicker(settings.tick_seconds, max_ticks=settings.tick_limit),
        )
    return st.session_state["controller"]


def _reset_round_extras() -> None:
    st.session_state["ai_hint"] = None
    st.session_state["coach_suggestion"] = None
    st.session_state["review_text"] = None
    st.session_state["notice"] = None
    st.session_state["celebrated"] = False


def _start_new_round(settings: Settings, difficulty: str) -> None:
    _controller(settings).start(difficulty)
    _reset_round_extras()


def _ensure_round(settings: Settings, difficulty: str) -> RoundState:
    ctl = _controller(settings)
    st.session_state.setdefault("notice", None)
    if ctl.state is None:
        _start_new_round(settings, difficulty)
    return ctl.state


# =========
# Rendering
# =========

def _tile(ch: str, colour: str) -> str:
    return (
        f"<span style='display:inline-block;width:2.4em;height:2.4em;line-height:2.4em;margin:2px;"
        f"text-align:center;font-weight:700;color:white;background:{colour};border-radius:4px'>{ch}</span>"
    )


def _render_board(state: RoundState) -> None:
    rows = [
        "".join(_tile(ch.upper(), _TILE_COLOURS[m]) for ch, m in zip(rec.word, rec.feedback))
        for rec in state.history
    ]
    if not state.finished:
        rows.append("".join(_tile("", "#d3d6da") for _ in range(state.length)))
    st.markdown("<br>".join(rows), unsafe_allow_html=True)


def _render_keyboard(state: RoundState) -> None:
    for row in _KEY_ROWS:
        keys = "".join(
            f"<span style='display:inline-block;min-width:1.8em;padding:4px;margin:2px;text-align:center;"
            f"border-radius:3px;background:{_KEY_COLOURS[state.keyboard[ch]]};"
            f"color:{'black' if state.keyboard[ch] == 'unknown' else 'white'}'>{ch.upper()}</span>"
            for ch in row
        )
        st.markdown(f"<div style='text-align:center'>{keys}</div>", unsafe_allow_html=True)


# =========
# The App
# =========

def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_dir, settings.log_level)

    st.set_page_config(page_title="Wordlet", page_icon="🟩", layout="centered")
    st.title("🟩 Wordlet")

    # ---- Sidebar ----
    with st.sidebar:
        st.header("Settings")
        difficulty = st.selectbox(
            "Difficulty", list(WORD_LENGTHS), index=0,
            format_func=lambda d: f"{d} ({WORD_LENGTHS[d]} letters)",
        )
        if st.button("🔁 New Game", use_container_width=True):
            _start_new_round(settings, difficulty)
            st.rerun()

        ledger = _controller(settings).ledger
        with st.expander("🏆 High scores", expanded=True):
            for tier in WORD_LENGTHS:
                st.markdown(f"**{tier.title()}**")
                records = ledger.top(tier)
                if not records:
                    st.caption("No scores yet.")
                for i, r in enumerate(records, start=1):
                    st.caption(f"{i}. {r.score} pts · {r.guesses} guesses · {r.time}s · {r.date:%Y-%m-%d}")
            if st.button("♻️ Reset high scores"):
                ledger.clear()
                st.success("High scores reset.")

        with st.expander("Debug (env)"):
            st.write("OFFLINE_MODE:", settings.offline_mode)
            st.write("Has OPENAI_API_KEY:", bool(settings.openai_api_key))
            st.write("MODEL_NAME:", settings.model_name)

    state = _ensure_round(settings, difficulty)
    ctl = _controller(settings)

    # ---- Board ----
    st.subheader("Board")
    st.caption(f"{state.difficulty.title()} · {state.length} letters · guesses: {state.guess_count} · time: {ctl.elapsed_seconds}s")
    _render_board(state)

    # ---- Move input ----
    if not state.finished:
        with st.form("guess_form", clear_on_submit=True):
            guess_inp = st.text_input(
                f"Enter a {state.length}-letter word:",
                max_chars=state.length,
            )
            submitted = st.form_submit_button("Submit")
            if submitted and guess_inp:
                try:
                    ctl.submit_guess(guess_inp)
                    st.session_state["notice"] = None
                except GuessRejected as exc:
                    st.session_state["notice"] = exc.message
                st.rerun()

    if st.session_state.get("notice"):
        st.warning(st.session_state["notice"])

    st.subheader("Keyboard")
    _render_keyboard(state)
    absent = letters_with(state.keyboard, "absent")
    if absent:
        st.caption(f"Ruled out: {', '.join(absent.upper())}")

    # ---- Hint & Coach section ----
    if not state.finished:
        with st.expander("Need a hint or coaching?"):
            c1, c2 = st.columns(2)
            with c1:
                if st.button("✨ Generate AI Hint"):
                    with st.spinner("Thinking..."):
                        st.session_state["ai_hint"] = llm_hint(state.target, state.history)
                    st.rerun()
            with c2:
                if st.button("🤖 Coach: Next Guess"):
                    with st.spinner("Analyzing remaining words..."):
                        st.session_state["coach_suggestion"] = suggest_next_guess(
                            state.history, ctl.words.words(state.difficulty),
                        )
                    st.rerun()

            st.info(st.session_state.get("ai_hint") or "No AI hint yet.")
            coach = st.session_state.get("coach_suggestion")
            if coach:
                src = "LLM" if coach.used_llm else "local"
                st.success(
                    f"Coach suggests: **{coach.word.upper()}**  \n"
                    f"{coach.text}  \n"
                    f"*Source: {src}, candidates considered: {coach.candidates_considered}*"
                )

    # ---- Outcome banner ----
    if state.finished:
        score = ctl.last_score
        st.success(
            f"🎉 Solved in {state.guess_count} guesses and {ctl.elapsed_seconds}s"
            + (f" for {score.score} points!" if score else "!")
        )
        if ctl.last_rank is not None:
            if not st.session_state.get("celebrated"):
                st.balloons()
                st.session_state["celebrated"] = True
            st.caption(f"New #{ctl.last_rank + 1} high score on {state.difficulty}.")
        if ctl.save_error:
            st.warning(f"Your score could not be saved: {ctl.save_error}")
        st.code(feedback_grid(state.history), language=None)

        with st.expander("📝 AI Review"):
            if st.button("✨ Generate Review"):
                with st.spinner("Analyzing your round..."):
                    st.session_state["review_text"] = generate_review(
                        history=state.history,
                        target=state.target,
                        elapsed=ctl.elapsed_seconds,
                        score=score.score if score else None,
                        difficulty=state.difficulty,
                    )
                st.rerun()
            if st.session_state.get("review_text"):
                st.write(st.session_state["review_text"])

        st.button("Play again", on_click=_start_new_round, args=(settings, difficulty))

    st.divider()
    st.caption("🟩 right letter, right spot · 🟨 in the word, wrong spot · ⬛ not in the word. No guess limit.")


if __name__ == "__main__":
    main()
