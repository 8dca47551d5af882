# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
requiem package entrypoint.

requiem sits above a raw request/response transport and adds what the transport does not
do by itself: bounded redirect following, typed timeout/abort errors and optional status
code validation. Responses stay streamable; `request_with_buffer` and `request_with_json`
read the body for callers that want it materialized.
"""

from .config import DEFAULT_FOLLOW_REDIRECTS, RequiemSettings, load_settings
from .errors import ErrorKind, RequiemError
from .http import (
    HttpxTransport,
    OutboundChannel,
    OutboundRequest,
    Response,
    ResponseWithBody,
    Transport,
    TransportEvent,
    TransportRequest,
    create_request,
    request,
    request_with_buffer,
    request_with_json,
    send_request,
)
from .log import setup_logging
from .options import RequestOptions, normalize_options
from .runtime import Requiem

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_FOLLOW_REDIRECTS",
    "ErrorKind",
    "HttpxTransport",
    "OutboundChannel",
    "OutboundRequest",
    "RequestOptions",
    "Requiem",
    "RequiemError",
    "RequiemSettings",
    "Response",
    "ResponseWithBody",
    "Transport",
    "TransportEvent",
    "TransportRequest",
    "__version__",
    "create_request",
    "load_settings",
    "normalize_options",
    "request",
    "request_with_buffer",
    "request_with_json",
    "send_request",
    "setup_logging",
]
