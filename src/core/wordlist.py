from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional

from .state import word_length

log = logging.getLogger("wordlet.words")

# Project-local wordlists live here:
_DATA_DIR = Path("data/wordlists")

_DEFAULT_FILES = {
    "easy": "easy.txt",
    "medium": "medium.txt",
    "hard": "hard.txt",
}

# Last resort when a list file is missing or holds no usable words.
_BUILTIN = {
    "easy": ["apple", "crane", "light", "stone", "water"],
    "medium": ["planet", "bridge", "garden", "silver", "stream"],
    "hard": ["balance", "captain", "freedom", "journey", "program"],
}


def _read_lines(path: Path) -> List[str]:
    """
    Read a text file (UTF-8) and return non-empty, stripped, lowercase lines.

    Silently returns an empty list if the file is missing.
    """
    if not path.exists() or not path.is_file():
        return []
    raw = path.read_text(encoding="utf-8", errors="ignore").splitlines()
    return [ln.strip().lower() for ln in raw if ln.strip()]


def _keep_playable(words: Iterable[str], length: int) -> List[str]:
    """Alphabetic words of exactly `length` letters, duplicates removed, order kept."""
    seen = set()
    out: List[str] = []
    for w in words:
        if len(w) == length and w.isalpha() and w not in seen:
            seen.add(w)
            out.append(w)
    return out


def load_wordlist(difficulty: str = "easy", data_dir: Optional[Path] = None) -> List[str]:
    """
    Load the playable words for a difficulty tier.

    Fallback strategy
    -----------------
    1) Read the file mapped by `difficulty` in `_DEFAULT_FILES` under `data_dir`.
    2) Drop anything that is not alphabetic or not the tier's length.
    3) If nothing survives, use the tiny built-in list for that tier.

    Unknown difficulty names raise ValueError.
    """
    length = word_length(difficulty)
    base = Path(data_dir) if data_dir is not None else _DATA_DIR
    words = _keep_playable(_read_lines(base / _DEFAULT_FILES[difficulty]), length)
    if not words:
        log.warning("No usable %s words under %s; using built-in list", difficulty, base)
        words = list(_BUILTIN[difficulty])
    return words


class WordSource:
    """
    Word-source collaborator for a round: picks targets and validates guesses.

    Lists are loaded lazily, once per tier, and then reused.
    """

    def __init__(self, data_dir: Optional[Path] = None, lists: Optional[Dict[str, Iterable[str]]] = None) -> None:
        self._data_dir = Path(data_dir) if data_dir is not None else None
        self._lists: Dict[str, List[str]] = {}
        self._lookup: Dict[str, FrozenSet[str]] = {}
        for difficulty, words in (lists or {}).items():
            self._remember(difficulty, _keep_playable((w.strip().lower() for w in words), word_length(difficulty)))

    def _remember(self, difficulty: str, words: List[str]) -> None:
        self._lists[difficulty] = words
        self._lookup[difficulty] = frozenset(words)

    def words(self, difficulty: str) -> List[str]:
        if difficulty not in self._lists:
            self._remember(difficulty, load_wordlist(difficulty, self._data_dir))
        return self._lists[difficulty]

    def random_word(self, difficulty: str) -> str:
        """Pick one target uniformly at random using cryptographic randomness."""
        return secrets.choice(self.words(difficulty))

    def is_valid_guess(self, word: str, difficulty: str) -> bool:
        """Case- and whitespace-insensitive membership test for the tier's list."""
        self.words(difficulty)
        return (word or "").strip().lower() in self._lookup[difficulty]
