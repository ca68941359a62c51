import threading
from datetime import datetime, timezone

import pytest

from src.services.ledger import LEDGER_KEY, HighScoreLedger, ScoreRecord, empty_ledger
from src.services.storage import JsonFileStorage, MemoryStorage


def rec(score, guesses=3, time=30):
    return ScoreRecord(score=score, guesses=guesses, time=time, date=datetime(2024, 5, 1, tzinfo=timezone.utc))


def test_load_empty_when_nothing_stored(ledger):
    assert ledger.load() == empty_ledger() == {"easy": [], "medium": [], "hard": []}


def test_record_persists_expected_shape(ledger, storage):
    ledger.record("easy", rec(4500, guesses=4, time=12))
    blob = storage.get(LEDGER_KEY)
    assert blob["easy"] == [{"score": 4500, "guesses": 4, "time": 12, "date": "2024-05-01T00:00:00+00:00"}]
    assert blob["medium"] == [] and blob["hard"] == []


def test_keeps_top_five_sorted(ledger):
    for s in [100, 900, 300, 700, 500, 800, 200]:
        ledger.record("easy", rec(s))
    assert [r.score for r in ledger.top("easy")] == [900, 800, 700, 500, 300]
    assert ledger.best("easy").score == 900
    assert ledger.top("medium") == []


def test_record_returns_rank_or_none(ledger):
    assert ledger.record("hard", rec(500)) == 0
    assert ledger.record("hard", rec(700)) == 0
    assert ledger.record("hard", rec(600)) == 1
    for s in (800, 900, 1000):
        ledger.record("hard", rec(s))
    assert ledger.record("hard", rec(10)) is None
    assert len(ledger.top("hard")) == 5


def test_ties_keep_earlier_entry_first(ledger):
    first = rec(500, guesses=2)
    second = rec(500, guesses=6)
    ledger.record("easy", first)
    assert ledger.record("easy", second) == 1
    assert [r.guesses for r in ledger.top("easy")] == [2, 6]


def test_tiers_are_independent(ledger):
    ledger.record("easy", rec(100))
    ledger.record("medium", rec(200))
    assert [r.score for r in ledger.top("easy")] == [100]
    assert [r.score for r in ledger.top("medium")] == [200]


@pytest.mark.parametrize("blob", [
    "not a mapping",
    {"easy": "nope"},
    {"easy": [{"score": -1, "guesses": 1, "time": 0, "date": "2024-01-01T00:00:00"}]},
    {"easy": [{"score": 5, "guesses": 0, "time": 0, "date": "2024-01-01T00:00:00"}]},
    {"easy": [{"score": 5, "guesses": 1, "time": 0, "date": "yesterday"}]},
    {"easy": [{"score": True, "guesses": 1, "time": 0, "date": "2024-01-01T00:00:00"}]},
])
def test_corrupt_blob_reads_as_empty(blob):
    storage = MemoryStorage({LEDGER_KEY: blob})
    assert HighScoreLedger(storage).load() == empty_ledger()


def test_unparsable_storage_reads_as_empty_and_recording_recovers():
    storage = MemoryStorage()
    storage.set_raw(LEDGER_KEY, "{not json")
    ledger = HighScoreLedger(storage)
    assert ledger.load() == empty_ledger()
    ledger.record("easy", rec(42))
    assert [r.score for r in ledger.top("easy")] == [42]


def test_unknown_tiers_dropped_and_oversized_lists_truncated():
    entries = [rec(s).to_dict() for s in (1, 2, 3, 4, 5, 6, 7)]
    storage = MemoryStorage({LEDGER_KEY: {"easy": entries, "nightmare": entries}})
    loaded = HighScoreLedger(storage).load()
    assert set(loaded) == {"easy", "medium", "hard"}
    assert [r.score for r in loaded["easy"]] == [7, 6, 5, 4, 3]


def test_unknown_difficulty_rejected(ledger):
    with pytest.raises(ValueError):
        ledger.record("nightmare", rec(1))


def test_clear(ledger):
    ledger.record("easy", rec(1))
    ledger.record("hard", rec(2))
    ledger.clear("easy")
    assert ledger.top("easy") == [] and len(ledger.top("hard")) == 1
    ledger.clear()
    assert ledger.load() == empty_ledger()


def test_concurrent_records_lose_nothing(ledger):
    scores = list(range(100, 900, 100))
    threads = [threading.Thread(target=ledger.record, args=("easy", rec(s))) for s in scores]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert [r.score for r in ledger.top("easy")] == [800, 700, 600, 500, 400]


def test_file_backed_ledger_round_trips(tmp_path):
    path = tmp_path / "scores.json"
    HighScoreLedger(JsonFileStorage(path)).record("medium", rec(3210))
    reopened = HighScoreLedger(JsonFileStorage(path))
    assert reopened.best("medium") == rec(3210)


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text("]]]", encoding="utf-8")
    ledger = HighScoreLedger(JsonFileStorage(path))
    assert ledger.load() == empty_ledger()
    ledger.record("easy", rec(9))
    assert ledger.best("easy").score == 9


def test_two_ledgers_on_one_file_lose_nothing(tmp_path):
    path = tmp_path / "scores.json"
    first = HighScoreLedger(JsonFileStorage(path), limit=1000)
    second = HighScoreLedger(JsonFileStorage(path), limit=1000)
    threads = [
        threading.Thread(target=(first if i % 2 else second).record, args=("easy", rec(i)))
        for i in range(200)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(HighScoreLedger(JsonFileStorage(path), limit=1000).top("easy")) == 200
