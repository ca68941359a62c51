from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from src.core.errors import PersistenceCorrupt
from src.core.state import WORD_LENGTHS
from src.services.storage import Storage

log = logging.getLogger("wordlet.ledger")

LEDGER_KEY = "high_scores"
LEDGER_LIMIT = 5

Ledger = Dict[str, List["ScoreRecord"]]


def _non_negative_int(value: Any, name: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise PersistenceCorrupt(f"`{name}` must be a non-negative integer, got {value!r}")
    return value


@dataclass(frozen=True)
class ScoreRecord:
    """One finished round as it appears on the high-score table."""
    score: int
    guesses: int
    time: int
    date: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "guesses": self.guesses, "time": self.time, "date": self.date.isoformat()}

    @classmethod
    def from_dict(cls, raw: Any) -> "ScoreRecord":
        """Parse a stored entry; anything malformed raises PersistenceCorrupt."""
        if not isinstance(raw, dict):
            raise PersistenceCorrupt(f"score entry must be an object, got {type(raw).__name__}")
        guesses = _non_negative_int(raw.get("guesses"), "guesses")
        if guesses < 1:
            raise PersistenceCorrupt("`guesses` must be at least 1")
        try:
            date = datetime.fromisoformat(str(raw.get("date")))
        except ValueError as exc:
            raise PersistenceCorrupt(f"bad `date`: {raw.get('date')!r}") from exc
        return cls(
            score=_non_negative_int(raw.get("score"), "score"),
            guesses=guesses,
            time=_non_negative_int(raw.get("time"), "time"),
            date=date,
        )

    @classmethod
    def now(cls, score: int, guesses: int, time: int) -> "ScoreRecord":
        return cls(score=score, guesses=guesses, time=time, date=datetime.now(timezone.utc))


def empty_ledger() -> Ledger:
    return {difficulty: [] for difficulty in WORD_LENGTHS}


class HighScoreLedger:
    """
    Ranked, bounded high-score table per difficulty, persisted under one key.

    Invariants
    ----------
    - Each tier holds at most `limit` records, sorted by score, highest first.
      Equal scores keep insertion order (earlier first).
    - `record` re-reads storage, inserts, truncates and writes back while
      holding the storage's lock. Ledgers sharing a store (or a file) share
      that lock, so concurrent recorders never drop each other's entries.
    - Missing or corrupt stored data reads as an empty table; it is logged,
      never raised.
    """

    def __init__(self, storage: Storage, key: str = LEDGER_KEY, limit: int = LEDGER_LIMIT) -> None:
        if limit < 1:
            raise ValueError("`limit` must be >= 1.")
        self.storage = storage
        self.key = key
        self.limit = limit

    def _decode(self, blob: Any) -> Ledger:
        if not isinstance(blob, dict):
            raise PersistenceCorrupt(f"ledger must be an object, got {type(blob).__name__}")
        ledger = empty_ledger()
        for difficulty, entries in blob.items():
            if difficulty not in ledger:
                log.info("Dropping scores for unknown difficulty %r", difficulty)
                continue
            if not isinstance(entries, list):
                raise PersistenceCorrupt(f"scores for {difficulty!r} must be a list")
            records = [ScoreRecord.from_dict(e) for e in entries]
            # sorted() is stable, so stored order breaks ties
            ledger[difficulty] = sorted(records, key=lambda r: r.score, reverse=True)[: self.limit]
        return ledger

    def _encode(self, ledger: Ledger) -> Dict[str, List[Dict[str, Any]]]:
        return {difficulty: [r.to_dict() for r in records] for difficulty, records in ledger.items()}

    def load(self) -> Ledger:
        """Read the persisted table; falls back to an empty one on any read/parse problem."""
        try:
            blob = self.storage.get(self.key)
        except (OSError, ValueError) as exc:
            log.warning("Could not read high scores (%s); starting with an empty table", exc)
            return empty_ledger()
        if blob is None:
            return empty_ledger()
        try:
            return self._decode(blob)
        except PersistenceCorrupt as exc:
            log.warning("Stored high scores are corrupt (%s); starting with an empty table", exc)
            return empty_ledger()

    def record(self, difficulty: str, entry: ScoreRecord) -> Optional[int]:
        """
        Insert `entry` into `difficulty`'s table, keep the top `limit`, persist.

        Returns the 0-based rank of the new entry, or None if it did not make
        the cut.
        """
        if difficulty not in WORD_LENGTHS:
            raise ValueError(f"Unknown difficulty {difficulty!r}.")
        with self.storage.lock:
            ledger = self.load()
            ranked = sorted(ledger[difficulty] + [entry], key=lambda r: r.score, reverse=True)
            ledger[difficulty] = ranked[: self.limit]
            self.storage.set(self.key, self._encode(ledger))

        rank = next((i for i, r in enumerate(ledger[difficulty]) if r is entry), None)
        log.info("Recorded %s score %d (rank %s)", difficulty, entry.score, "-" if rank is None else rank + 1)
        return rank

    def top(self, difficulty: str) -> List[ScoreRecord]:
        return list(self.load().get(difficulty, []))

    def best(self, difficulty: str) -> Optional[ScoreRecord]:
        records = self.top(difficulty)
        return records[0] if records else None

    def clear(self, difficulty: Optional[str] = None) -> None:
        """Wipe one tier, or every tier when `difficulty` is None."""
        if difficulty is not None and difficulty not in WORD_LENGTHS:
            raise ValueError(f"Unknown difficulty {difficulty!r}.")
        with self.storage.lock:
            ledger = self.load() if difficulty else empty_ledger()
            if difficulty:
                ledger[difficulty] = []
            self.storage.set(self.key, self._encode(ledger))


__all__ = ["ScoreRecord", "HighScoreLedger", "empty_ledger", "LEDGER_KEY", "LEDGER_LIMIT"]
