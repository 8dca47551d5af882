# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Event wiring for in-flight requests.

Every transmission settles one `asyncio.Future`: with a `Response` when the response
headers arrive, or with an exception on `error`, or on `abort` (reported as `Timeout` when
a `timeout` event caused the abort, `RequestAbort` otherwise). The future is the only
settlement guard; events arriving after it is done are ignored.
"""

from __future__ import annotations

import asyncio
import logging

from ..errors import ErrorKind, RequiemError
from ..options import RequestOptions
from .models import OutboundRequest, Response
from .transport import TransportEvent, TransportResponse

logger = logging.getLogger(__name__)

_background: set[asyncio.Task[None]] = set()


def timeout_message(options: RequestOptions) -> str:
    label = f"{options.timeout:g}s" if options.timeout is not None else "transport default"
    return f"Reached timeout limit ({label}), request aborted"


def wire_request_events(
    request: OutboundRequest,
    options: RequestOptions,
    outcome: asyncio.Future[Response],
) -> None:
    """Attach error, timeout and abort listeners that fail `outcome` at most once."""
    handle = request.handle
    timed_out = False

    def on_error(exc: BaseException) -> None:
        # Transport errors propagate unwrapped.
        if not outcome.done():
            outcome.set_exception(exc)

    def on_timeout() -> None:
        nonlocal timed_out
        timed_out = True
        if not handle.aborted:
            handle.cancel()

    def on_abort() -> None:
        if outcome.done():
            return
        if timed_out:
            logger.debug("Request to %s timed out", request.requested_url)
            outcome.set_exception(RequiemError(ErrorKind.TIMEOUT, timeout_message(options), request=request))
        else:
            logger.debug("Request to %s was aborted", request.requested_url)
            outcome.set_exception(RequiemError(ErrorKind.REQUEST_ABORT, "Request was aborted", request=request))

    handle.on(TransportEvent.ERROR, on_error)
    handle.on(TransportEvent.TIMEOUT, on_timeout)
    handle.on(TransportEvent.ABORT, on_abort)


def _discard_late_response(raw: TransportResponse) -> None:
    task = asyncio.get_running_loop().create_task(raw.aclose())
    _background.add(task)
    task.add_done_callback(_background.discard)


async def transmit(request: OutboundRequest, options: RequestOptions, body: bytes | None = None) -> Response:
    """Send `request` (with `body`, if any) and wait for its response headers."""
    handle = request.handle
    if handle.aborted:
        # Cancelled before it was sent; the abort event has already fired.
        raise RequiemError(ErrorKind.REQUEST_ABORT, "Request was aborted", request=request)
    outcome: asyncio.Future[Response] = asyncio.get_running_loop().create_future()

    def on_response(raw: TransportResponse) -> None:
        if outcome.done():
            _discard_late_response(raw)
            return
        outcome.set_result(Response(raw, request.requested_url))

    handle.on(TransportEvent.RESPONSE, on_response)
    wire_request_events(request, options, outcome)

    if body is not None:
        handle.write(body)
    handle.end()

    try:
        return await outcome
    except asyncio.CancelledError:
        request.cancel()
        raise


__all__ = ["timeout_message", "transmit", "wire_request_events"]
