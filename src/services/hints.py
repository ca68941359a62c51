from __future__ import annotations

import logging
from typing import Optional, Sequence

from openai import OpenAI

from src.config import load_settings
from src.core.state import EXACT, PRESENT, GuessRecord

log = logging.getLogger("wordlet.hints")


# Reject only if the hint literally contains the target word (case-insensitive).
def _contains_answer(text: str, target: str) -> bool:
    return target.lower() in (text or "").lower()


def _local_fallback_hint(target: str, history: Sequence[GuessRecord] = ()) -> str:
    """Always-available local hint: first letter plus how many letters are still unseen."""
    found = {ch for rec in history for ch, m in zip(rec.word, rec.feedback) if m in (EXACT, PRESENT)}
    unseen = set(target) - found
    return (
        f"The word starts with '{target[0].upper()}'. "
        f"{len(unseen)} of its {len(set(target))} distinct letters haven't turned up yet."
    )


def llm_hint(target: str, history: Sequence[GuessRecord] = (), model: Optional[str] = None, temperature: float = 0.8) -> str:
    """
    Return ONE hint for `target` using an LLM; fallback locally on failure.

    - Accept any text as long as it does NOT contain the target itself.
    - On any error or rule violation, return a deterministic local hint.
    """
    settings = load_settings()
    if not settings.llm_enabled:
        return _local_fallback_hint(target, history)

    client = OpenAI(api_key=settings.openai_api_key)
    mdl = model or settings.model_name

    tried = ", ".join(rec.word for rec in history) or "none yet"
    system = "You are a helpful clue-giver for a Wordle-style word game."
    user = (
        f"The secret word is '{target}' ({len(target)} letters). The player has tried: {tried}. "
        "Give exactly ONE short, natural-sounding hint about its meaning. "
        "Do NOT include the word itself. Reply with the hint only."
    )

    try:
        resp = client.chat.completions.create(
            model=mdl,
            messages=[{"role": "system", "content": system},
                      {"role": "user", "content": user}],
            temperature=temperature,
            max_tokens=80,
        )
        text = (resp.choices[0].message.content or "").strip()
        if not text or _contains_answer(text, target):
            return _local_fallback_hint(target, history)
        # Trim extreme verbosity (soft cap ~25 words)
        words = text.split()
        if len(words) > 25:
            text = " ".join(words[:25])
        return text
    except Exception as exc:  # any client/network failure degrades to the local hint
        log.warning("LLM hint failed (%s); using local hint", exc)
        return _local_fallback_hint(target, history)


__all__ = ["llm_hint"]
