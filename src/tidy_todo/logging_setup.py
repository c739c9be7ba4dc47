# src/tidy_todo/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Console floor per logger prefix; the longest matching prefix wins.
# Per-action model lines duplicate the command replies, so they go to the file only.
_CONSOLE_FLOORS: dict[str, int] = {
    "tidy_todo": logging.DEBUG,
    "tidy_todo.tasks": logging.WARNING,
    "tidy_todo.tasks.commit": logging.INFO,
    "tidy_todo.preferences": logging.WARNING,
    "py.warnings": logging.ERROR,
}


def _console_floor(name: str) -> int:
    best, floor = "", logging.ERROR
    for prefix, level in _CONSOLE_FLOORS.items():
        if (name == prefix or name.startswith(prefix + ".")) and len(prefix) > len(best):
            best, floor = prefix, level
    return floor


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the to-do prompt readable.

    Store, drag-and-drop and model chatter stays in tidy.log unless WARNING+.
    Rollback notices from the commit helper still reach the console, and
    third-party loggers only get through at ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= _console_floor(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/tidy",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: readable + filtered for interactive use
    - File handler: full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tidy.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
