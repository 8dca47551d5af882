# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Request options and their normalization.

Callers describe a request with either a bare URL string or a mapping of options. The
normalizer decides the shape of the request once, up front, and records it as tagged
variants:

- target: `DirectTarget` (a URL string) or `HostTarget` (host/path/port/protocol)
- payload: `None`, `RawPayload` (bytes) or `JsonPayload` (a value to serialize)
- redirects: `RedirectsDisabled` or `MaxRedirects(n)`
- status policy: `None`, `RejectErrorStatus` or `ExpectStatus(code)`

Orchestration-only fields (payload, redirect and status policies) never reach the
transport; `RequestOptions.transport_options()` projects the fields that do.
"""

from __future__ import annotations

import ssl
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Union

from .config import DEFAULT_FOLLOW_REDIRECTS
from .errors import ErrorKind, RequiemError


@dataclass(frozen=True)
class DirectTarget:
    url: str


@dataclass(frozen=True)
class HostTarget:
    host: str | None
    path: str | None = None
    pathname: str | None = None
    port: int | None = None
    protocol: str | None = None


Target = Union[DirectTarget, HostTarget]


@dataclass(frozen=True)
class RawPayload:
    data: bytes


@dataclass(frozen=True)
class JsonPayload:
    value: Any


Payload = Union[RawPayload, JsonPayload, None]


@dataclass(frozen=True)
class RedirectsDisabled:
    """Redirect responses are returned as-is."""


@dataclass(frozen=True)
class MaxRedirects:
    limit: int = DEFAULT_FOLLOW_REDIRECTS


RedirectPolicy = Union[RedirectsDisabled, MaxRedirects]


@dataclass(frozen=True)
class RejectErrorStatus:
    """Fail when the final status code is >= 400."""


@dataclass(frozen=True)
class ExpectStatus:
    status_code: int


StatusPolicy = Union[RejectErrorStatus, ExpectStatus, None]

# "user:password", sent as HTTP Basic credentials.
Auth = str


@dataclass(frozen=True)
class TlsOptions:
    """TLS settings handed to the transport untouched; only used for https targets."""

    verify: bool | str | ssl.SSLContext | None = None
    cert: str | tuple[str, str] | None = None
    server_hostname: str | None = None


@dataclass(frozen=True)
class TransportOptions:
    """The subset of request options the transport primitive is allowed to see."""

    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None
    auth: Auth | None = None
    agent: Any = None
    tls: TlsOptions = field(default_factory=TlsOptions)


@dataclass(frozen=True)
class RequestOptions:
    target: Target
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None
    auth: Auth | None = None
    agent: Any = None
    tls: TlsOptions = field(default_factory=TlsOptions)
    payload: Payload = None
    redirects: RedirectPolicy = field(default_factory=MaxRedirects)
    status_policy: StatusPolicy = None

    def transport_options(self) -> TransportOptions:
        return TransportOptions(
            method=self.method,
            headers=dict(self.headers),
            timeout=self.timeout,
            auth=self.auth,
            agent=self.agent,
            tls=self.tls,
        )

    def for_redirect(self, url: str) -> RequestOptions:
        """Options for a redirect hop: GET to `url`, no payload, host-form fields dropped."""
        return replace(self, target=DirectTarget(url), method="GET", payload=None)


_ALIASES = {
    "bodyJson": "body_json",
    "followRedirects": "follow_redirects",
    "throwOnErrorResponse": "throw_on_error_response",
    "serverName": "server_hostname",
    "servername": "server_hostname",
}
_HOST_FIELDS = ("host", "path", "pathname", "port", "protocol")
_KNOWN_FIELDS = frozenset(
    (
        "url",
        *_HOST_FIELDS,
        "method",
        "headers",
        "timeout",
        "auth",
        "agent",
        "verify",
        "cert",
        "server_hostname",
        "body",
        "body_json",
        "follow_redirects",
        "throw_on_error_response",
    )
)


def _invalid(message: str) -> RequiemError:
    return RequiemError(ErrorKind.INVALID_OPTIONS, message)


def _target(fields: Mapping[str, Any]) -> Target:
    url = fields.get("url")
    host_fields = [name for name in _HOST_FIELDS if fields.get(name) is not None]
    if url is not None:
        if host_fields:
            raise _invalid(f'"url" cannot be combined with host-form options: {", ".join(host_fields)}')
        if not isinstance(url, str):
            raise RequiemError(ErrorKind.INVALID_URL, "URL could not be formatted properly")
        return DirectTarget(url)

    port = fields.get("port")
    if port is not None:
        try:
            port = int(port)
        except (TypeError, ValueError):
            raise _invalid(f"Invalid port: {port!r}") from None
    return HostTarget(
        host=fields.get("host"),
        path=fields.get("path"),
        pathname=fields.get("pathname"),
        port=port,
        protocol=fields.get("protocol"),
    )


def _payload(fields: Mapping[str, Any]) -> Payload:
    # A present `body_json` key is a JSON payload even when its value is None (sent as `null`).
    body = fields.get("body")
    if "body_json" in fields:
        if body is not None:
            raise _invalid('"body" and "body_json" are mutually exclusive')
        return JsonPayload(fields["body_json"])
    if body is None:
        return None
    if isinstance(body, str):
        return RawPayload(body.encode("utf-8"))
    if isinstance(body, (bytes, bytearray, memoryview)):
        return RawPayload(bytes(body))
    raise _invalid(f"Unsupported body type: {type(body).__name__}")


def _redirects(value: Any) -> RedirectPolicy:
    if value is None or value is True:
        return MaxRedirects()
    if value is False:
        return RedirectsDisabled()
    if isinstance(value, int) and value >= 0:
        return MaxRedirects(value)
    raise _invalid(f"Invalid follow_redirects value: {value!r}")


def _status_policy(value: Any) -> StatusPolicy:
    # bool before int: True is an int in Python.
    if value is None or value is False:
        return None
    if value is True:
        return RejectErrorStatus()
    if isinstance(value, int):
        return ExpectStatus(value)
    raise _invalid(f"Invalid throw_on_error_response value: {value!r}")


def _auth(value: Any) -> Auth | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return f"{value[0]}:{value[1]}"
    raise _invalid("auth must be a 'user:password' string or a (user, password) pair")


def _timeout(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise _invalid(f"Invalid timeout: {value!r}")
    return float(value)


def normalize_options(options: str | Mapping[str, Any] | RequestOptions) -> RequestOptions:
    """
    Turn a URL string or an options mapping into a `RequestOptions`.

    The caller's mapping is only read, never modified. Mutually exclusive fields fail with
    `InvalidOptions`; a missing target is left for the URL resolver to reject.
    """
    if isinstance(options, RequestOptions):
        return options
    if isinstance(options, str):
        return RequestOptions(target=DirectTarget(options))
    if not isinstance(options, Mapping):
        raise _invalid(f"Unsupported options type: {type(options).__name__}")

    fields: dict[str, Any] = {}
    for key, value in options.items():
        name = _ALIASES.get(key, key)
        if name not in _KNOWN_FIELDS:
            raise _invalid(f"Unknown option: {key!r}")
        fields[name] = value

    headers = fields.get("headers") or {}
    if not isinstance(headers, Mapping):
        raise _invalid("headers must be a mapping")

    return RequestOptions(
        target=_target(fields),
        method=str(fields.get("method") or "GET").upper(),
        headers={str(k): str(v) for k, v in headers.items()},
        timeout=_timeout(fields.get("timeout")),
        auth=_auth(fields.get("auth")),
        agent=fields.get("agent"),
        tls=TlsOptions(
            verify=fields.get("verify"),
            cert=fields.get("cert"),
            server_hostname=fields.get("server_hostname"),
        ),
        payload=_payload(fields),
        redirects=_redirects(fields.get("follow_redirects")),
        status_policy=_status_policy(fields.get("throw_on_error_response")),
    )


__all__ = [
    "Auth",
    "DirectTarget",
    "ExpectStatus",
    "HostTarget",
    "JsonPayload",
    "MaxRedirects",
    "Payload",
    "RawPayload",
    "RedirectPolicy",
    "RedirectsDisabled",
    "RejectErrorStatus",
    "RequestOptions",
    "StatusPolicy",
    "Target",
    "TlsOptions",
    "TransportOptions",
    "normalize_options",
]
