# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Transport primitive interface.

A transport opens one `TransportRequest` per transmission. The request is an event
emitter: it reports exactly what happened on the wire (`response`, `error`, `timeout`,
`abort`) and leaves every policy decision to the orchestration layer above it.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import AsyncIterator, Callable
from enum import Enum
from typing import Any, Protocol

from ..options import TransportOptions
from .url import ResolvedTarget

logger = logging.getLogger(__name__)


class TransportEvent(str, Enum):
    RESPONSE = "response"
    ERROR = "error"
    TIMEOUT = "timeout"
    ABORT = "abort"


class TransportResponse(Protocol):
    """Streaming response as produced by a transport."""

    status_code: int | None
    headers: Any

    def aiter_bytes(self) -> AsyncIterator[bytes]: ...

    async def aclose(self) -> None: ...


class TransportRequest:
    """
    Base class for an in-flight request.

    Subclasses implement `_transmit()` (start sending once `end()` is called) and
    `_release()` (stop any in-flight work on cancellation). Listeners run synchronously,
    in registration order, from whichever code path emits the event.
    """

    def __init__(self, target: ResolvedTarget, options: TransportOptions):
        self.target = target
        self.options = options
        self.headers: dict[str, str] = dict(options.headers)
        self.aborted = False
        self.ended = False
        self._body = bytearray()
        self._listeners: dict[TransportEvent, list[Callable[..., None]]] = defaultdict(list)

    def on(self, event: TransportEvent | str, listener: Callable[..., None]) -> None:
        self._listeners[TransportEvent(event)].append(listener)

    def emit(self, event: TransportEvent | str, *args: Any) -> None:
        for listener in list(self._listeners.get(TransportEvent(event), ())):
            listener(*args)

    def set_header(self, name: str, value: str) -> None:
        if self.ended:
            raise RuntimeError("cannot set headers after the request has been sent")
        for existing in [key for key in self.headers if key.lower() == name.lower()]:
            del self.headers[existing]
        self.headers[name] = value

    def write(self, data: bytes) -> None:
        if self.ended:
            raise RuntimeError("cannot write after the request has been sent")
        self._body.extend(data)

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def end(self) -> None:
        """Finish the request body and start transmission."""
        if self.ended:
            return
        self.ended = True
        if self.aborted:
            return
        logger.debug("%s %s", self.options.method, self.target.url)
        self._transmit()

    def cancel(self) -> None:
        """Abort the request; emits `abort` the first time only."""
        if self.aborted:
            return
        self.aborted = True
        self._release()
        self.emit(TransportEvent.ABORT)

    def _transmit(self) -> None:
        raise NotImplementedError

    def _release(self) -> None:
        raise NotImplementedError


class Transport(Protocol):
    """Opens transport requests; one request per transmission attempt."""

    def open(self, target: ResolvedTarget, options: TransportOptions) -> TransportRequest: ...


__all__ = ["Transport", "TransportEvent", "TransportRequest", "TransportResponse"]
