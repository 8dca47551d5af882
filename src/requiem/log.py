# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup for the `requiem` logger tree."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "REQUIEM_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def resolve_level(level: str | int | None = None) -> int:
    """Map a level name (falling back to $REQUIEM_LOG_LEVEL, then WARNING) to its number."""
    if isinstance(level, int):
        return level
    name = (level or os.getenv(LOG_LEVEL_ENV) or "WARNING").strip().upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return value


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """
    Send `requiem.*` records to stderr at `level`.

    Only the package logger is touched, so applications embedding requiem keep their own
    root configuration. Calling it again changes the level without adding handlers.
    """
    global _handler
    logger = logging.getLogger("requiem")
    logger.setLevel(resolve_level(level))
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
    return logger


__all__ = ["LOG_LEVEL_ENV", "resolve_level", "setup_logging"]
