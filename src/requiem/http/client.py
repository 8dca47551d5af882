# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Public request API: build, send, follow redirects, validate and materialize."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Union

from ..options import RequestOptions, normalize_options
from .body import parse_json_body, read_body
from .builder import build_request, encode_payload
from .models import OutboundRequest, Response, ResponseWithBody
from .redirect import follow_redirects
from .status import validate_status
from .transport import Transport
from .wiring import transmit

logger = logging.getLogger(__name__)

Options = Union[str, Mapping[str, Any], RequestOptions]


def create_request(options: Options, *, transport: Transport | None = None) -> OutboundRequest:
    """Build a request without sending it. The returned handle can be cancelled."""
    return build_request(normalize_options(options), transport)


async def send_request(request: OutboundRequest, options: Options) -> Response:
    """
    Send a request built by `create_request` and return the final streaming response.

    Redirect hops go through the transport that opened `request`.
    """
    normalized = normalize_options(options)
    body = encode_payload(request, normalized)
    response = await transmit(request, normalized, body)
    result = await follow_redirects(response, normalized, transport=request.transport)
    validate_status(request, result, normalized)
    logger.debug("%s %s -> %s", request.method, request.requested_url, result.status_code)
    return result


async def request(options: Options, *, transport: Transport | None = None) -> Response:
    normalized = normalize_options(options)
    return await send_request(create_request(normalized, transport=transport), normalized)


async def request_with_buffer(options: Options, *, transport: Transport | None = None) -> ResponseWithBody[bytes]:
    """Like `request`, with the whole body read into `bytes`."""
    return await read_body(await request(options, transport=transport))


async def request_with_json(options: Options, *, transport: Transport | None = None) -> ResponseWithBody[Any]:
    """Like `request`, with the body parsed as JSON (`InvalidJsonBody` on failure)."""
    return parse_json_body(await request_with_buffer(options, transport=transport))


__all__ = [
    "Options",
    "create_request",
    "request",
    "request_with_buffer",
    "request_with_json",
    "send_request",
]
