"""Logging for ``finance_reports``.

Everything logs under the ``finance_reports`` logger hierarchy. Modules grab a
child logger through :func:`get_logger` and emit records; whether those
records go anywhere is decided by the entry point. The CLI calls
:func:`configure_logging` before running a command, which routes the
hierarchy to stderr so that report rows on stdout are never mixed with
diagnostics. Imported as a library, the package stays silent until the host
application sets up its own handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "finance_reports"
_LEVEL_ENV = "FINANCE_REPORTS_LOG_LEVEL"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        # "10" or "debug" both work.
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        return logging.WARNING
    from_env = os.getenv(_LEVEL_ENV)
    return _parse_level(from_env) if from_env else logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Send ``finance_reports`` records to ``stream`` (stderr by default).

    Only the first call has an effect. ``level`` may be a number or a level
    name; without one, ``FINANCE_REPORTS_LOG_LEVEL`` is consulted and
    ``WARNING`` is the fallback, which keeps command output quiet. ``fmt``
    replaces the default ``"%(asctime)s %(name)s %(levelname)s %(message)s"``
    line format.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    # get_logger may already have installed a NullHandler.
    for silent in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(silent)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return the named logger; a silent handler covers the unconfigured case."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
