# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Target URL resolution for direct and host-form options, and for redirect locations."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from ..errors import ErrorKind, RequiemError
from ..options import DirectTarget, HostTarget, Target

SECURE_SCHEME = "https"
SUPPORTED_SCHEMES = frozenset({"http", SECURE_SCHEME})

_MISSING_TARGET_MESSAGE = 'requiem expects either "url" or "host" option to be specified'
_INVALID_URL_MESSAGE = "URL could not be formatted properly"


@dataclass(frozen=True)
class ResolvedTarget:
    """An absolute URL and the transport scheme derived from it."""

    url: str
    scheme: str

    @property
    def secure(self) -> bool:
        return self.scheme == SECURE_SCHEME

    def __str__(self) -> str:
        return self.url


def _parse_absolute(raw: str) -> httpx.URL:
    """Parse `raw`, raising ValueError unless it is an absolute http(s) URL."""
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ValueError(str(exc)) from exc
    if url.scheme not in SUPPORTED_SCHEMES or not url.host:
        raise ValueError(f"not an absolute http(s) URL: {raw!r}")
    return url


def _host_form_url(target: HostTarget) -> str:
    if not target.host:
        raise RequiemError(ErrorKind.INVALID_URL, _MISSING_TARGET_MESSAGE)

    scheme = (target.protocol or "http:").lower().rstrip("/").rstrip(":")
    authority = target.host if target.port is None else f"{target.host}:{target.port}"
    # `path` may carry a query string, as it does for raw HTTP request lines.
    path = target.path or target.pathname or "/"
    if not path.startswith("/"):
        path = "/" + path
    return f"{scheme}://{authority}{path}"


def resolve_target(target: Target) -> ResolvedTarget:
    """
    Build the absolute URL a request is sent to.

    Raises `RequiemError(InvalidUrl)` when no target is given or the URL cannot be parsed.
    """
    if isinstance(target, DirectTarget):
        raw = target.url
    else:
        raw = _host_form_url(target)

    try:
        url = _parse_absolute(raw)
    except ValueError as exc:
        raise RequiemError(ErrorKind.INVALID_URL, _INVALID_URL_MESSAGE) from exc
    return ResolvedTarget(url=str(url), scheme=url.scheme)


def resolve_location(location: str, base: str) -> str:
    """Resolve a `Location` header value against `base`; raises ValueError when unusable."""
    try:
        joined = httpx.URL(base).join(location)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ValueError(str(exc)) from exc
    return str(_parse_absolute(str(joined)))


__all__ = ["SECURE_SCHEME", "SUPPORTED_SCHEMES", "ResolvedTarget", "resolve_location", "resolve_target"]
