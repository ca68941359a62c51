from __future__ import annotations

from collections import Counter
from typing import List, Optional, Tuple

from .state import ABSENT, EXACT, PRESENT, Mark


def evaluate(target: str, guess: str) -> Tuple[Mark, ...]:
    """
    Classify each letter of `guess` against `target`.

    Algorithm
    ---------
    1) Exact pass: every position where the letters agree is "exact", and that
       occurrence is consumed from the target's letter counts.
    2) Present pass: each remaining position is "present" while the letter
       still has unconsumed occurrences in the target (consuming one),
       otherwise "absent".

    Consuming exact matches first is what keeps repeated guess letters from
    being reported more often than they occur in the target: guessing
    "eerie" against "level" credits only two of the three E's.

    Both words are compared case-insensitively. Callers must check lengths
    first; a mismatch raises ValueError.
    """
    t = target.lower()
    g = guess.lower()
    if len(t) != len(g):
        raise ValueError(f"Guess has {len(g)} letters but the target has {len(t)}.")

    marks: List[Optional[Mark]] = [None] * len(g)
    remaining = Counter(t)

    for i, (tc, gc) in enumerate(zip(t, g)):
        if tc == gc:
            marks[i] = EXACT
            remaining[gc] -= 1

    for i, gc in enumerate(g):
        if marks[i] is not None:
            continue
        if remaining[gc] > 0:
            marks[i] = PRESENT
            remaining[gc] -= 1
        else:
            marks[i] = ABSENT

    return tuple(m for m in marks if m is not None)


def is_solved(feedback: Tuple[Mark, ...]) -> bool:
    return bool(feedback) and all(m == EXACT for m in feedback)


__all__ = ["evaluate", "is_solved"]
