from __future__ import annotations


class GuessRejected(ValueError):
    """A guess the round refused; the round state is unchanged."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LengthMismatch(GuessRejected):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Guess must have {expected} letters (got {actual}).")
        self.expected = expected
        self.actual = actual


class InvalidWord(GuessRejected):
    def __init__(self, word: str, difficulty: str) -> None:
        super().__init__(f"'{word.upper()}' is not in the {difficulty} word list.")
        self.word = word
        self.difficulty = difficulty


class RoundFinished(GuessRejected):
    def __init__(self) -> None:
        super().__init__("This round is over. Start a new game to keep playing.")


class PersistenceCorrupt(ValueError):
    """Stored high scores could not be read; the ledger recovers as empty."""


__all__ = ["GuessRejected", "LengthMismatch", "InvalidWord", "RoundFinished", "PersistenceCorrupt"]
