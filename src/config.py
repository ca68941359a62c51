"""
Runtime settings.

All knobs come from environment variables (a local `.env` is loaded by the
app via python-dotenv) with defaults that work offline.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


@dataclass(frozen=True)
class Settings:
    offline_mode: bool = True
    openai_api_key: str = ""
    model_name: str = "gpt-4o-mini"
    wordlist_dir: Path = Path("data/wordlists")
    scores_path: Path = Path("data/scores.json")
    log_dir: Path = Path("logs")
    log_level: str = "INFO"
    tick_seconds: float = 1.0
    tick_limit: int = 3600

    @property
    def llm_enabled(self) -> bool:
        return not self.offline_mode and bool(self.openai_api_key)


def load_settings() -> Settings:
    """Build `Settings` from the current process environment."""
    return Settings(
        offline_mode=_flag("OFFLINE_MODE", "true"),
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        model_name=os.getenv("MODEL_NAME", "gpt-4o-mini"),
        wordlist_dir=Path(os.getenv("WORDLIST_DIR", "data/wordlists")),
        scores_path=Path(os.getenv("SCORES_PATH", "data/scores.json")),
        log_dir=Path(os.getenv("LOG_DIR", "logs")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        tick_seconds=float(os.getenv("TICK_SECONDS", "1.0")),
        tick_limit=int(os.getenv("TICK_LIMIT", "3600")),
    )
