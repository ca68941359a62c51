from __future__ import annotations

from typing import Callable, Iterable

from .errors import InvalidWord, LengthMismatch, RoundFinished
from .evaluator import evaluate
from .keyboard import merge_keyboard
from .state import GuessRecord, RoundState, new_keyboard, word_length


def new_round(difficulty: str, picker_fn: Callable[[str], str]) -> RoundState:
    """
    Start a new round using the provided picker function to choose the target.

    Parameters
    ----------
    difficulty : str
        Tier name ("easy" | "medium" | "hard"); decides the target length.
    picker_fn : Callable[[str], str]
        Returns a single alphabetic word of the tier's length.

    Returns
    -------
    RoundState
        A fresh round in "playing" status with an all-unknown keyboard.
    """
    word = (picker_fn(difficulty) or "").strip().lower()
    if len(word) != word_length(difficulty) or not word.isalpha():
        raise ValueError(f"Word source returned an unusable {difficulty} target.")
    return RoundState(target=word, difficulty=difficulty, history=(), keyboard=new_keyboard(), status="playing")


def normalize_guess(word: str) -> str:
    return (word or "").strip().lower()


def check_guess(state: RoundState, word: str, validator_fn: Callable[[str, str], bool]) -> str:
    """
    Validate a guess against the round and return it normalized.

    Raises
    ------
    RoundFinished   if the round is already over.
    LengthMismatch  if the guess length differs from the target length.
    InvalidWord     if `validator_fn(word, difficulty)` rejects it.
    """
    if state.finished:
        raise RoundFinished()
    attempt = normalize_guess(word)
    if len(attempt) != state.length:
        raise LengthMismatch(state.length, len(attempt))
    if not attempt.isalpha() or not validator_fn(attempt, state.difficulty):
        raise InvalidWord(attempt, state.difficulty)
    return attempt


def apply_guess(state: RoundState, word: str, validator_fn: Callable[[str, str], bool]) -> RoundState:
    """
    Apply a whole-word guess and return a new RoundState.

    Behavior
    --------
    - Rejected guesses raise (see `check_guess`); `state` is never modified.
    - Accepted guesses are evaluated, appended to the history, and merged into
      the keyboard.
    - A guess equal to the target finishes the round. There is no limit on the
      number of guesses.
    """
    attempt = check_guess(state, word, validator_fn)
    feedback = evaluate(state.target, attempt)
    record = GuessRecord(word=attempt, feedback=feedback)
    return RoundState(
        target=state.target,
        difficulty=state.difficulty,
        history=state.history + (record,),
        keyboard=merge_keyboard(state.keyboard, attempt, feedback),
        status="finished" if attempt == state.target else "playing",
    )


_SQUARES = {"exact": "\N{LARGE GREEN SQUARE}", "present": "\N{LARGE YELLOW SQUARE}", "absent": "\N{BLACK LARGE SQUARE}"}


def feedback_grid(history: Iterable[GuessRecord]) -> str:
    """
    Return the spoiler-free share grid, one row of coloured squares per guess.

    Example: a solved easy round might end with the row "🟩🟩🟩🟩🟩".
    """
    return "\n".join("".join(_SQUARES[m] for m in rec.feedback) for rec in history)
