from __future__ import annotations

POINTS_PER_LETTER = 1000
GUESS_PENALTY = 100
SECOND_PENALTY = 2


def compute_score(guess_count: int, elapsed_seconds: int, word_length: int) -> int:
    """
    Score a solved round: longer words are worth more, every guess and every
    elapsed second costs points. Never negative.
    """
    raw = word_length * POINTS_PER_LETTER - guess_count * GUESS_PENALTY - elapsed_seconds * SECOND_PENALTY
    return max(0, raw)


__all__ = ["compute_score"]
