# === FILE: a11y_scout/logger.py ===
"""Logging setup for **A11yScout**.

All output goes through one root project logger, ``"A11yScout"``. Components
log through children of it (``A11yScout.scanner``, ``A11yScout.sitemap``, ...),
obtained with :func:`get_logger`, so a single :func:`configure` call controls
discovery, scanning and reporting output together::

    from a11y_scout.logger import get_logger
    log = get_logger("scanner")
    log.info("Scanning [%d/%d] %s", n, cap, url)

Console output defaults to stdout; the CLI routes it to stderr so JSON written
to stdout stays machine-readable. An optional log file is rotated at 5 MiB
(three backups kept).
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, TextIO, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "A11yScout"

_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """The project logger, or its child for *component*."""
    if not component:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{component}")


def _build_handlers(
    formatter: logging.Formatter,
    stream: Optional[TextIO],
    log_file: str | Path | None,
) -> list[logging.Handler]:
    console = logging.StreamHandler(stream or sys.stdout)
    handlers: list[logging.Handler] = [console]
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=_MAX_LOG_BYTES,
                backupCount=_LOG_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """(Re)configure the project logger and return it.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Rotating log file; *None* → console only.
    log_format
        Format string for :class:`logging.Formatter`.
    replace_handlers
        *True* – drop (and close) existing handlers first; *False* – append.
    stream
        Console stream; *None* → ``sys.stdout``.
    """
    lg = get_logger()
    lg.setLevel(level)

    if replace_handlers:
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()

    for handler in _build_handlers(logging.Formatter(log_format), stream, log_file):
        lg.addHandler(handler)

    # children propagate up to here, nothing leaks into the root logger
    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Replace all handlers; used at import time and by the CLI group."""
    return configure(
        level=level,
        log_file=log_file,
        log_format=log_format,
        replace_handlers=True,
        stream=stream,
    )


logger: logging.Logger = init_logging()

__all__ = ["logger", "get_logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
