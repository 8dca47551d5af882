# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request orchestration exports."""

from .body import parse_json_body, read_body
from .builder import build_request, default_transport, encode_payload
from .client import (
    Options,
    create_request,
    request,
    request_with_buffer,
    request_with_json,
    send_request,
)
from .httpx_transport import HttpxTransport, HttpxTransportRequest, HttpxTransportResponse
from .models import OutboundChannel, OutboundRequest, Response, ResponseWithBody
from .redirect import follow_redirects, redirect_location
from .status import validate_status
from .transport import Transport, TransportEvent, TransportRequest, TransportResponse
from .url import ResolvedTarget, resolve_location, resolve_target
from .wiring import transmit, wire_request_events

__all__ = [
    "HttpxTransport",
    "HttpxTransportRequest",
    "HttpxTransportResponse",
    "Options",
    "OutboundChannel",
    "OutboundRequest",
    "ResolvedTarget",
    "Response",
    "ResponseWithBody",
    "Transport",
    "TransportEvent",
    "TransportRequest",
    "TransportResponse",
    "build_request",
    "create_request",
    "default_transport",
    "encode_payload",
    "follow_redirects",
    "parse_json_body",
    "read_body",
    "redirect_location",
    "request",
    "request_with_buffer",
    "request_with_json",
    "resolve_location",
    "resolve_target",
    "send_request",
    "transmit",
    "validate_status",
    "wire_request_events",
]
