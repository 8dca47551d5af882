# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Builds outbound requests from normalized options."""

from __future__ import annotations

import json

from ..options import JsonPayload, RawPayload, RequestOptions
from .httpx_transport import HttpxTransport
from .models import OutboundRequest
from .transport import Transport
from .url import resolve_target

_default_transport: Transport | None = None


def default_transport() -> Transport:
    """Shared httpx transport; it only holds settings, each request gets its own client."""
    global _default_transport
    if _default_transport is None:
        _default_transport = HttpxTransport()
    return _default_transport


def build_request(options: RequestOptions, transport: Transport | None = None) -> OutboundRequest:
    """
    Resolve the target and open a transport request for it without sending anything.

    URL problems raise `RequiemError(InvalidUrl)` before the transport is touched. The
    transport only sees `options.transport_options()` and picks TLS by `target.secure`.
    """
    target = resolve_target(options.target)
    transport = transport or default_transport()
    handle = transport.open(target, options.transport_options())
    return OutboundRequest(handle=handle, target=target, requested_url=target.url, transport=transport)


def encode_payload(request: OutboundRequest, options: RequestOptions) -> bytes | None:
    """
    Serialize the payload and set the matching Content-Type on the request.

    JSON serialization errors (TypeError/ValueError) propagate before anything is sent.
    """
    payload = options.payload
    if isinstance(payload, JsonPayload):
        data = json.dumps(payload.value).encode("utf-8")
        request.handle.set_header("Content-Type", "application/json")
        return data
    if isinstance(payload, RawPayload):
        return payload.data
    return None


__all__ = ["build_request", "default_transport", "encode_payload"]

