from __future__ import annotations

import logging
from typing import Optional, Sequence

from openai import OpenAI

from src.config import load_settings
from src.core.engine import feedback_grid
from src.core.state import EXACT, PRESENT, GuessRecord

log = logging.getLogger("wordlet.review")


def _local_fallback_review(
    history: Sequence[GuessRecord],
    target: str,
    elapsed: int,
    score: Optional[int],
    difficulty: str,
) -> str:
    """
    Deterministic local review when LLM is unavailable or fails.
    Produces 3 short bullet points.
    """
    guesses = len(history)
    opener_hits = sum(1 for m in history[0].feedback if m in (EXACT, PRESENT)) if history else 0
    best_row = max((sum(1 for m in rec.feedback if m == EXACT) for rec in history[:-1]), default=0)
    score_text = f" for **{score}** points" if score is not None else ""

    return (
        f"**Outcome:** Solved '{target.upper()}' in {guesses} "
        f"{'guess' if guesses == 1 else 'guesses'} and {elapsed}s{score_text}.\n\n"
        f"- **Opening:** Your first word found {opener_hits} of the target's letters.\n"
        f"- **Closing in:** Your best unsolved row had {best_row} "
        f"letters in place before the finish.\n"
        f"- **Next time:** On *{difficulty}*, each extra guess costs 100 points and each second 2, "
        f"so lead with common letters and commit once the pattern is clear."
    )


def generate_review(
    history: Sequence[GuessRecord],
    target: str,
    elapsed: int,
    score: Optional[int] = None,
    difficulty: str = "easy",
    temperature: float = 0.4,
) -> str:
    """
    Generate a short post-round review.

    - OFFLINE_MODE=true or a missing key returns the local, deterministic review.
    - Otherwise asks an LLM for ~3 compact paragraphs: turning points, missed
      opportunities, and concrete tips for the next round.
    """
    settings = load_settings()
    if not settings.llm_enabled:
        return _local_fallback_review(history, target, elapsed, score, difficulty)

    client = OpenAI(api_key=settings.openai_api_key)
    rows = "\n".join(
        f"{i}) {rec.word.upper()} {row}"
        for i, (rec, row) in enumerate(zip(history, feedback_grid(history).splitlines()), start=1)
    )

    sys = "You are a concise strategy coach for Wordle. Provide clear, actionable feedback."
    user = (
        f"Difficulty: {difficulty}\n"
        f"Target word: {target}\n"
        f"Time: {elapsed}s, score: {score}\n"
        f"Guesses (🟩 right spot, 🟨 wrong spot, ⬛ not in word):\n{rows}\n\n"
        "Write a post-game review in ~3 short paragraphs:\n"
        "1) Key turning points that narrowed the word down\n"
        "2) Missed opportunities (letters or positions worth testing earlier)\n"
        "3) Concrete tips for the next round\n"
        "Keep it under 140 words total. Avoid bullet lists; use compact prose."
    )

    try:
        resp = client.chat.completions.create(
            model=settings.model_name,
            messages=[{"role": "system", "content": sys}, {"role": "user", "content": user}],
            temperature=temperature,
            max_tokens=300,
        )
        text = (resp.choices[0].message.content or "").strip()
        if not text:
            return _local_fallback_review(history, target, elapsed, score, difficulty)
        # Soft cap for verbosity
        if len(text.split()) > 160:
            text = " ".join(text.split()[:160])
        return text
    except Exception as exc:
        log.warning("LLM review failed (%s); using local review", exc)
        return _local_fallback_review(history, target, elapsed, score, difficulty)


__all__ = ["generate_review"]
