from __future__ import annotations

from dataclasses import dataclass, field
from string import ascii_lowercase
from typing import Dict, Literal, Mapping, Tuple


Difficulty = Literal["easy", "medium", "hard"]
RoundStatus = Literal["playing", "finished"]
Mark = Literal["exact", "present", "absent"]
KeyStatus = Literal["unknown", "absent", "present", "exact"]

EXACT: Mark = "exact"
PRESENT: Mark = "present"
ABSENT: Mark = "absent"
UNKNOWN: KeyStatus = "unknown"

WORD_LENGTHS: Dict[str, int] = {"easy": 5, "medium": 6, "hard": 7}


def new_keyboard() -> Dict[str, KeyStatus]:
    """All 26 letters, none observed yet."""
    return {ch: UNKNOWN for ch in ascii_lowercase}


def word_length(difficulty: str) -> int:
    """Return the target length for a difficulty tier; unknown tiers raise ValueError."""
    try:
        return WORD_LENGTHS[difficulty]
    except KeyError:
        raise ValueError(f"Unknown difficulty {difficulty!r}; expected one of {sorted(WORD_LENGTHS)}.") from None


@dataclass(frozen=True)
class GuessRecord:
    """One submitted guess together with its per-letter feedback."""
    word: str
    feedback: Tuple[Mark, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "word", self.word.lower())
        object.__setattr__(self, "feedback", tuple(self.feedback))
        if len(self.word) != len(self.feedback):
            raise ValueError("`feedback` must have one mark per letter of `word`.")

    @property
    def solved(self) -> bool:
        return all(m == EXACT for m in self.feedback)


@dataclass(frozen=True)
class RoundState:
    """
    Immutable snapshot of a single round.

    Notes
    -----
    - The engine never mutates a `RoundState`; every accepted guess produces
      a new snapshot with one more `GuessRecord` and a merged keyboard.
    - `keyboard` always holds all 26 lowercase letters.
    - Once `status` is "finished" the engine refuses further guesses.
    """

    target: str
    difficulty: str = "easy"
    history: Tuple[GuessRecord, ...] = ()
    keyboard: Mapping[str, KeyStatus] = field(default_factory=dict)
    status: RoundStatus = "playing"

    def __post_init__(self) -> None:
        """
        Normalize and validate fields.

        - `target` is stripped and lowercased; it must be alphabetic.
        - `difficulty` must be a known tier and agree with the target length.
        - `history` is stored as a tuple.
        - `status` must be one of {"playing", "finished"}.
        """
        tw = (self.target or "").strip().lower()
        if not tw.isalpha():
            raise ValueError("`target` must be non-empty and contain letters only (a–z).")
        object.__setattr__(self, "target", tw)

        if word_length(self.difficulty) != len(tw):
            raise ValueError(f"`target` must have {word_length(self.difficulty)} letters on {self.difficulty}.")

        object.__setattr__(self, "history", tuple(self.history))

        if not self.keyboard:
            object.__setattr__(self, "keyboard", new_keyboard())

        if self.status not in ("playing", "finished"):
            raise ValueError("`status` must be one of {'playing', 'finished'}.")

    @property
    def length(self) -> int:
        return len(self.target)

    @property
    def guess_count(self) -> int:
        return len(self.history)

    @property
    def finished(self) -> bool:
        return self.status == "finished"
