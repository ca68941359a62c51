from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from src.core.engine import apply_guess, new_round
from src.core.errors import GuessRejected
from src.core.scoring import compute_score
from src.core.state import GuessRecord, RoundState
from src.services.ledger import HighScoreLedger, ScoreRecord
from src.services.timer import Clock, SystemClock, ThreadingTicker, Ticker

log = logging.getLogger("wordlet.round")


class WordProvider(Protocol):
    def random_word(self, difficulty: str) -> str: ...

    def is_valid_guess(self, word: str, difficulty: str) -> bool: ...


class RoundController:
    """
    Runs one round at a time: picks the target, takes guesses, keeps the
    clock, and files the score when the target is found.

    Timing
    ------
    Each round owns exactly one ticker. It is cancelled when the round is
    solved and before a new round starts, so at most one is ever live. Ticks
    carry the id of the round that scheduled them; a late tick from an old
    round is ignored.
    """

    def __init__(
        self,
        words: WordProvider,
        ledger: HighScoreLedger,
        clock: Optional[Clock] = None,
        ticker_factory: Optional[Callable[[], Ticker]] = None,
    ) -> None:
        self.words = words
        self.ledger = ledger
        self.clock = clock or SystemClock()
        self._ticker_factory = ticker_factory or (lambda: ThreadingTicker(1.0))
        self._ticker: Optional[Ticker] = None
        self._state: Optional[RoundState] = None
        self._round_id = 0
        self._started_at = 0.0
        self._elapsed = 0
        self.last_score: Optional[ScoreRecord] = None
        self.last_rank: Optional[int] = None
        self.save_error: Optional[str] = None

    # ---- read access ----

    @property
    def state(self) -> Optional[RoundState]:
        return self._state

    @property
    def elapsed_seconds(self) -> int:
        """Seconds on the clock; read live while playing, frozen once solved."""
        if self._state is not None and not self._state.finished:
            return self._seconds_since_start()
        return self._elapsed

    @property
    def is_finished(self) -> bool:
        return self._state is not None and self._state.finished

    # ---- transitions ----

    def start(self, difficulty: str) -> RoundState:
        """Begin a fresh round, abandoning whatever was in progress."""
        state = new_round(difficulty, self.words.random_word)
        self.stop()

        self._round_id += 1
        round_id = self._round_id
        self._state = state
        self._started_at = self.clock.now()
        self._elapsed = 0
        self.last_score = None
        self.last_rank = None
        self.save_error = None

        ticker = self._ticker_factory()
        ticker.start(lambda: self._on_tick(round_id))
        self._ticker = ticker
        log.info("Round %d started: difficulty=%s length=%d", round_id, difficulty, state.length)
        return state

    def submit_guess(self, word: str) -> GuessRecord:
        """
        Evaluate a guess for the live round.

        Raises a `GuessRejected` subclass (round untouched) for wrong-length
        or unknown words, or when the round is already solved.
        """
        if self._state is None:
            raise RuntimeError("No round in progress; call start() first.")
        try:
            state = apply_guess(self._state, word, self.words.is_valid_guess)
        except GuessRejected as exc:
            log.info("Round %d rejected guess %r: %s", self._round_id, word, exc.message)
            raise

        self._state = state
        record = state.history[-1]
        log.info("Round %d guess #%d accepted", self._round_id, state.guess_count)
        if state.finished:
            self._finish()
        return record

    def tick(self) -> None:
        """Refresh the elapsed-time counter for the live round."""
        self._on_tick(self._round_id)

    def stop(self) -> None:
        """Cancel the live ticker, if any."""
        ticker, self._ticker = self._ticker, None
        if ticker is not None:
            ticker.cancel()

    # ---- internals ----

    def _on_tick(self, round_id: int) -> None:
        if round_id != self._round_id or self._state is None or self._state.finished:
            return
        self._elapsed = self._seconds_since_start()

    def _seconds_since_start(self) -> int:
        return max(0, int(self.clock.now() - self._started_at))

    def _finish(self) -> None:
        assert self._state is not None
        self.stop()
        self._elapsed = self._seconds_since_start()
        guesses = self._state.guess_count
        score = compute_score(guesses, self._elapsed, self._state.length)
        self.last_score = ScoreRecord.now(score=score, guesses=guesses, time=self._elapsed)
        try:
            self.last_rank = self.ledger.record(self._state.difficulty, self.last_score)
        except OSError as exc:
            log.warning("Round %d: could not save score %d (%s)", self._round_id, score, exc)
            self.last_rank = None
            self.save_error = str(exc)
        log.info(
            "Round %d solved: guesses=%d seconds=%d score=%d",
            self._round_id, guesses, self._elapsed, score,
        )


__all__ = ["RoundController", "WordProvider"]
