from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set

from openai import OpenAI

from src.config import load_settings
from src.core.engine import feedback_grid
from src.core.evaluator import evaluate
from src.core.state import GuessRecord

log = logging.getLogger("wordlet.coach")


@dataclass(frozen=True)
class CoachSuggestion:
    """Container for a coach suggestion."""
    word: str                   # recommended next guess (lowercase)
    text: str                   # one-sentence rationale
    used_llm: bool              # whether rationale came from the LLM
    candidates_considered: int  # candidate count after filtering


def filter_candidates(history: Sequence[GuessRecord], candidates: Iterable[str]) -> List[str]:
    """
    Keep the candidates that could still be the target.

    A candidate survives when, for every past guess, evaluating that guess
    against the candidate reproduces exactly the feedback the player saw.
    """
    out: List[str] = []
    for w in candidates:
        if all(len(w) == len(rec.word) and evaluate(w, rec.word) == rec.feedback for rec in history):
            out.append(w)
    return out


def _tested_letters(history: Sequence[GuessRecord]) -> Set[str]:
    return {ch for rec in history for ch in rec.word}


def _best_guess(remaining: List[str], tested: Set[str]) -> Optional[str]:
    """Prefer the word covering the most distinct untested letters; break ties alphabetically."""
    if not remaining:
        return None
    return min(remaining, key=lambda w: (-len(set(w) - tested), w))


def _local_reason(word: str, remaining: List[str], tested: Set[str]) -> str:
    fresh = len(set(word) - tested)
    return (
        f"Try **{word.upper()}**: it is one of {len(remaining)} words that still fit every clue, "
        f"and it tests {fresh} new {'letter' if fresh == 1 else 'letters'}."
    )


def _llm_reason(grid: str, word: str, remaining_count: int) -> Optional[str]:
    """
    Ask the LLM to phrase a short rationale for the chosen guess.

    Only the public colour grid and counts are shared, never the target.
    """
    settings = load_settings()
    if not settings.llm_enabled:
        return None

    client = OpenAI(api_key=settings.openai_api_key)
    user = (
        "You are coaching a Wordle player. "
        f"Their feedback so far is:\n{grid or '(no guesses yet)'}\n"
        f"About {remaining_count} words still fit. "
        f"Recommend guessing '{word.upper()}' and give ONE short sentence explaining why."
    )
    try:
        r = client.chat.completions.create(
            model=settings.model_name,
            messages=[{"role": "user", "content": user}],
            temperature=0.7,
            max_tokens=60,
        )
        text = (r.choices[0].message.content or "").strip()
        return text or None
    except Exception as exc:
        log.warning("LLM coach failed (%s); using local rationale", exc)
        return None


def suggest_next_guess(history: Sequence[GuessRecord], candidates: Iterable[str]) -> Optional[CoachSuggestion]:
    """
    Recommend the next guess from the word list.

    Steps
    -----
    1) Filter candidates to those consistent with every (guess, feedback) pair.
    2) Pick the one that tests the most letters not tried yet.
    3) Phrase a one-sentence rationale via the LLM; fallback to a local sentence.

    Returns None when no candidate fits (e.g. the list lacks the target).
    """
    remaining = filter_candidates(history, candidates)
    tested = _tested_letters(history)
    word = _best_guess(remaining, tested)
    if word is None:
        return None

    llm_text = _llm_reason(feedback_grid(history), word, len(remaining))
    if llm_text:
        return CoachSuggestion(word=word, text=llm_text, used_llm=True, candidates_considered=len(remaining))
    return CoachSuggestion(
        word=word,
        text=_local_reason(word, remaining, tested),
        used_llm=False,
        candidates_considered=len(remaining),
    )


__all__ = ["CoachSuggestion", "filter_candidates", "suggest_next_guess"]
