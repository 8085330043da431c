"""Centralized logging configuration for the ``paytrack`` package.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the
  package logger (``"paytrack"``). Entry points call it once at startup.
- ``get_logger(name)`` returns a logger and makes sure the package logger has
  a ``NullHandler`` until something configures it.

Library modules never attach their own handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "paytrack"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    if level is None:
        # Env override when explicit ``level`` is None
        env_val = os.getenv("PAYTRACK_LOG_LEVEL")
        if env_val:
            return _parse_level(env_val)
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure the package logger once; later calls only change the level.

    Parameters
    ----------
    level:
        Logging level as ``int`` or level name. If ``None``, falls back to the
        ``PAYTRACK_LOG_LEVEL`` environment variable, then ``logging.WARNING``.
    fmt:
        Optional format string. Defaults to
        ``"%(asctime)s %(name)s %(levelname)s %(message)s"``.
    stream:
        Output stream for the handler (defaults to ``sys.stderr``).
    """
    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)

    if _CONFIGURED:
        if level is not None:
            numeric_level = _parse_level(level)
            logger.setLevel(numeric_level)
            for h in logger.handlers:
                h.setLevel(numeric_level)
        return

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric_level = _parse_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"))

    logger.setLevel(numeric_level)
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name with a NullHandler fallback on the package logger."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
