"""Logging for the ``order_analysis`` package.

The CLI calls :func:`configure_logging` once with the level resolved from
``Settings.log_level``; it attaches one ``StreamHandler`` to the package root
logger. Modules only call :func:`get_logger` and never attach handlers, so in
library use nothing is emitted unless the host configures logging.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

_PKG_LOGGER_NAME = "order_analysis"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_CONFIGURED = False


def parse_level(raw: str) -> int:
    """``"debug"`` / ``"DEBUG"`` / ``"10"`` → ``10``.

    Only the standard level names and non-negative integers are accepted;
    anything else raises ``ValueError``.
    """

    name = raw.strip().upper()
    if name.isdigit():
        return int(name)
    if name in _LEVEL_NAMES:
        return logging.getLevelName(name)
    raise ValueError(f"unknown log level {raw!r}; expected one of {', '.join(_LEVEL_NAMES)}")


def configure_logging(level: int = logging.INFO, *, stream: IO[str] | None = None) -> None:
    """Attach the package handler at ``level``; later calls are no-ops."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
