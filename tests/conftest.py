import os
import sys

import pytest

# Ensure the repo root (containing the `src` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from src.core.wordlist import WordSource
from src.services.ledger import HighScoreLedger
from src.services.round_controller import RoundController
from src.services.storage import MemoryStorage


class FakeClock:
    def __init__(self, start=1000.0):
        self.t = start

    def now(self):
        return self.t

    def advance(self, seconds):
        self.t += seconds


class ManualTicker:
    """Ticker that only fires when a test calls fire()."""

    def __init__(self):
        self.callback = None
        self.cancel_calls = 0

    @property
    def active(self):
        return self.callback is not None and self.cancel_calls == 0

    def start(self, callback):
        self.callback = callback

    def cancel(self):
        self.cancel_calls += 1

    def fire(self):
        self.callback()


class FixedWords(WordSource):
    """Word source whose next target is chosen by the test."""

    def __init__(self, lists, target=None):
        super().__init__(lists=lists)
        self.target = target

    def random_word(self, difficulty):
        return self.target or super().random_word(difficulty)


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    monkeypatch.setenv("OFFLINE_MODE", "true")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def ledger(storage):
    return HighScoreLedger(storage)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def tickers():
    return []


@pytest.fixture()
def words():
    return FixedWords(
        {
            "easy": ["apple", "alarm", "crane", "lemon", "melon", "level", "eerie"],
            "medium": ["planet", "garden", "silver"],
            "hard": ["balance", "captain"],
        },
        target="apple",
    )


@pytest.fixture()
def controller(words, ledger, clock, tickers):
    def factory():
        t = ManualTicker()
        tickers.append(t)
        return t

    return RoundController(words, ledger, clock=clock, ticker_factory=factory)
