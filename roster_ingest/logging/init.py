from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import TextIO

from ..models.validation_warning import ValidationWarning

"""Console logging for batch roster runs.

Every line printed by the CLI is ``<LABEL> <message>`` with LABEL one of
DEBUG | INFO | WARN | ERROR | SUMMARY. Pipeline modules log through
``logging.getLogger(__name__)``; as children of ``roster_ingest`` they reach
the single console handler installed by setup_logging().
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "get_logger",
    "log_roster_warnings",
    "log_summary",
    "reset_logging",
    "setup_logging",
]

LOGGER_NAME = "roster_ingest"
SUMMARY_LEVEL = 25  # INFO と WARNING の間

_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUMMARY_LEVEL: "SUMMARY",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return f"{_LABELS.get(record.levelno, record.levelname)} {record.getMessage()}"


def _apply_level(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    for h in logger.handlers:
        h.setLevel(level)


def setup_logging(*, debug: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Install the console handler on the ``roster_ingest`` logger.

    Repeated calls return the same logger; ``debug=True`` on a later call
    still lowers the level. ``stream`` defaults to the current sys.stdout.
    """
    global _logger

    level = logging.DEBUG if debug else logging.INFO
    if _logger is not None:
        if debug:
            _apply_level(_logger, level)
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    for h in logger.handlers[:]:
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    _apply_level(logger, level)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def log_roster_warnings(logger: logging.Logger, source: str, warnings: Iterable[ValidationWarning]) -> int:
    """One WARN line per advisory warning: ``<source>: <Kind> <detail> [keys]``.

    Returns the number of lines written.
    """
    count = 0
    for w in warnings:
        keys = f" [{', '.join(w.affected_keys)}]" if w.affected_keys else ""
        logger.warning(f"{source}: {w.kind.value} {w.detail}{keys}")
        count += 1
    return count


def reset_logging() -> None:
    """Forget the configured logger (tests re-run setup against capsys)."""
    global _logger
    _logger = None
