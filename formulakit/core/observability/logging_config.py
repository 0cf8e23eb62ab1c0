"""
Logging configuration — set up once by the CLI (formulakit.main).

Every module logs through ``logging.getLogger(__name__)``. The console
shows build commands (``==> ...``) at INFO; DEBUG adds file:line.

Level precedence:
    CLI flag  >  FORMULAKIT_LOG_LEVEL env var  >  WARNING (default)

A full build log can be kept with FORMULAKIT_LOG_FILE (a path) or
FORMULAKIT_LOG_DIR (``formulakit.log`` inside that directory), at
FORMULAKIT_LOG_FILE_LEVEL (default DEBUG).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ── Format strings ──────────────────────────────────────────────

_FMT_CONSOLE = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s %(message)s", "%H:%M:%S"),
}
_FMT_MINIMAL = "%(message)s"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional build-log path; parent directories are created.
        log_file_level: Level for the build log. Defaults to DEBUG so a
            failed build can be diagnosed after the fact.
    """
    numeric_level = _parse_level(level)

    fmt, datefmt = _FMT_CONSOLE.get(
        logging.DEBUG if numeric_level <= logging.DEBUG else numeric_level,
        (_FMT_MINIMAL, None),
    )
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level, default=logging.DEBUG)
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)
        effective_level = min(effective_level, file_level)

    root.setLevel(effective_level)
    logging.raiseExceptions = False


def formula_log_file(log_dir: str | Path, formula: str) -> Path:
    """Build-log path for one formula inside ``log_dir``."""
    return Path(log_dir).expanduser() / f"{formula}.log"


def _parse_level(level: str | None, default: int = logging.WARNING) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return default
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return default
    return numeric
