# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for requiem."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_USER_AGENT = "requiem/0.1.0 (+https://pypi.org/project/requiem/)"

# Process-wide default; never reassigned at runtime.
DEFAULT_FOLLOW_REDIRECTS = 5


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RequiemSettings:
    """Transport defaults, read from the environment when the settings are built."""

    user_agent: str = field(default_factory=lambda: os.getenv("REQUIEM_USER_AGENT", DEFAULT_USER_AGENT))
    verify_ssl: bool = field(default_factory=lambda: _bool_env("REQUIEM_VERIFY_SSL", True))
    trust_env: bool = field(default_factory=lambda: _bool_env("REQUIEM_TRUST_ENV", True))


def load_settings() -> RequiemSettings:
    """Load transport settings from environment with sensible defaults."""
    return RequiemSettings()


__all__ = ["DEFAULT_FOLLOW_REDIRECTS", "DEFAULT_USER_AGENT", "RequiemSettings", "load_settings"]
