from __future__ import annotations

from typing import Dict, Iterable, Mapping

from .state import ABSENT, EXACT, PRESENT, UNKNOWN, KeyStatus, Mark, new_keyboard

# Higher wins; a letter's status only ever moves up this ladder.
_PRIORITY: Dict[str, int] = {UNKNOWN: 0, ABSENT: 1, PRESENT: 2, EXACT: 3}


def merge_keyboard(status: Mapping[str, KeyStatus], guess: str, feedback: Iterable[Mark]) -> Dict[str, KeyStatus]:
    """
    Fold one guess's feedback into the keyboard and return a new mapping.

    Rules
    -----
    - "exact" always wins and is never changed afterwards.
    - "present" replaces "unknown" or "absent", never "exact".
    - "absent" only replaces "unknown"; it must not hide a "present" seen at
      another position of the same or an earlier guess.

    The input mapping is left untouched.
    """
    merged: Dict[str, KeyStatus] = dict(status)
    for ch, mark in zip(guess.lower(), feedback):
        current = merged.get(ch, UNKNOWN)
        if current == EXACT:
            continue
        if mark == ABSENT:
            if current == UNKNOWN:
                merged[ch] = ABSENT
        elif _PRIORITY[mark] > _PRIORITY[current]:
            merged[ch] = mark
    return merged


def letters_with(status: Mapping[str, KeyStatus], wanted: KeyStatus) -> str:
    """Sorted string of the letters currently at `wanted`, handy for display."""
    return "".join(sorted(ch for ch, s in status.items() if s == wanted))


__all__ = ["new_keyboard", "merge_keyboard", "letters_with"]
