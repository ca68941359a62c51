from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

# One lock per resolved file path, shared by every JsonFileStorage in the process.
_PATH_LOCKS: Dict[Path, "threading.RLock"] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> "threading.RLock":
    key = path.resolve()
    with _PATH_LOCKS_GUARD:
        if key not in _PATH_LOCKS:
            _PATH_LOCKS[key] = threading.RLock()
        return _PATH_LOCKS[key]


class Storage(Protocol):
    """
    Opaque key-value store for JSON-serializable blobs.

    `lock` is a reentrant lock guarding the underlying data; hold it to make
    a read-modify-write sequence atomic for every user of the same store.
    """

    lock: "threading.RLock"

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStorage:
    """In-process store. Values are copied through JSON, so callers can't alias them."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, str] = {}
        self.lock = threading.RLock()
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def set_raw(self, key: str, raw: str) -> None:
        """Store text verbatim, bypassing serialization (lets tests plant corrupt blobs)."""
        self._data[key] = raw


class JsonFileStorage:
    """
    Keeps every key in one JSON object on disk.

    - A missing file reads as "no value".
    - An unparsable file makes `get` raise ValueError; callers decide how to recover.
    - Writes go to a temp file first and are moved into place with `os.replace`.
    - Instances pointing at the same file share one `lock`.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.lock = _lock_for(self.path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[Any]:
        with self.lock:
            return self._read_all().get(key)

    def set(self, key: str, value: Any) -> None:
        with self.lock:
            try:
                data = self._read_all()
            except ValueError:
                data = {}
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise


__all__ = ["Storage", "MemoryStorage", "JsonFileStorage"]
