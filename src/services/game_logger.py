"""
Logging setup for Wordlet.

Every module logs through a child of the "wordlet" logger
(`logging.getLogger("wordlet.<area>")`); `setup_logging` attaches the
handlers once per process.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Union

ROOT_LOGGER = "wordlet"


def setup_logging(log_dir: Union[str, Path] = "logs", level: str = "INFO") -> logging.Logger:
    """
    Configure the "wordlet" logger with a dated file handler and a console
    handler for warnings. Safe to call on every Streamlit rerun.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)
    log_file = path / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    # Only warnings/errors reach the console
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    logger.propagate = False
    return logger


__all__ = ["setup_logging", "ROOT_LOGGER"]
