"""
Logging configuration — one-time setup for the CLI entrypoint.

main.py calls ``setup_logging`` once per process; modules only ever do
``logger = logging.getLogger(__name__)``.

Console level, highest precedence first:
    --debug  >  --verbose  >  --quiet  >  RELPULL_LOG_LEVEL  >  WARNING

RELPULL_LOG_FILE adds a file handler (level RELPULL_LOG_FILE_LEVEL,
defaulting to the console level).  Below WARNING only the ``relpull``
logger hierarchy is opened up, except at DEBUG where everything is.
"""

from __future__ import annotations

import logging
import os
import sys

_APP_LOGGER = "relpull"

_TIME_ONLY = "%H:%M:%S"
_FULL_DATE = "%Y-%m-%d %H:%M:%S"

# numeric threshold → (format, datefmt); first threshold >= level wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s", _TIME_ONLY),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", _TIME_ONLY),
    (logging.CRITICAL, "%(message)s", None),
)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s"


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get("RELPULL_LOG_LEVEL", "WARNING")


def _console_formatter(level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter("%(message)s")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to ``level``.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    handlers: list[logging.Handler] = [console]
    lowest = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        to_file = logging.FileHandler(log_file, encoding="utf-8")
        to_file.setLevel(file_level)
        to_file.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FULL_DATE))
        handlers.append(to_file)
        lowest = min(lowest, file_level)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)

    # Other libraries stay at WARNING unless debugging
    root.setLevel(lowest if lowest <= logging.DEBUG else max(lowest, logging.WARNING))
    logging.getLogger(_APP_LOGGER).setLevel(lowest)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
