# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request and response handles returned to callers."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

import httpx

from .transport import Transport, TransportRequest, TransportResponse
from .url import ResolvedTarget

T = TypeVar("T")


@dataclass(eq=False)
class OutboundRequest:
    """
    A built (not necessarily sent) request.

    `requested_url` is the URL this request was built for; redirect hops get their own
    `OutboundRequest` tagged with the hop URL.
    """

    handle: TransportRequest
    target: ResolvedTarget
    requested_url: str
    transport: Transport | None = field(default=None, repr=False)

    @property
    def method(self) -> str:
        return self.handle.options.method

    @property
    def aborted(self) -> bool:
        return self.handle.aborted

    def cancel(self) -> None:
        """Abort the request. Safe to call more than once."""
        self.handle.cancel()


class OutboundChannel(Protocol):
    """Where `Response.reverse_emit` copies a response to (e.g. a server-side response)."""

    status_code: int | None

    def set_header(self, name: str, value: str | list[str]) -> None: ...

    async def write(self, chunk: bytes) -> None: ...


class Response:
    """
    Streaming response handle.

    The body is not read until the caller iterates it (`aiter_bytes`), reads it (`aread`)
    or forwards it (`reverse_emit`). `redirect_chain` lists every URL visited, starting
    with the originally requested one and ending with `requested_url`.
    """

    def __init__(
        self,
        raw: TransportResponse,
        requested_url: str,
        redirect_chain: tuple[str, ...] | None = None,
    ):
        self.raw = raw
        self.requested_url = requested_url
        self.status_code: int | None = raw.status_code
        self.headers = httpx.Headers(raw.headers)
        self.redirect_chain: tuple[str, ...] = redirect_chain or (requested_url,)

    @property
    def redirect_count(self) -> int:
        return len(self.redirect_chain) - 1

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        async for chunk in self.raw.aiter_bytes():
            yield chunk

    async def aread(self) -> bytes:
        content = bytearray()
        try:
            async for chunk in self.raw.aiter_bytes():
                content.extend(chunk)
        finally:
            await self.aclose()
        return bytes(content)

    async def aclose(self) -> None:
        await self.raw.aclose()

    async def reverse_emit(self, channel: OutboundChannel) -> OutboundChannel:
        """
        Copy status and headers onto `channel`, then stream the body into it.

        Each header name is set once; repeated fields (e.g. `set-cookie`) are passed as a
        list of their values instead of being joined.
        """
        for name in self.headers.keys():
            values = self.headers.get_list(name)
            channel.set_header(name, values if len(values) > 1 else values[0])
        if self.status_code is not None:
            channel.status_code = self.status_code
        async for chunk in self.aiter_bytes():
            await channel.write(chunk)
        return channel

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}] {self.requested_url}>"


@dataclass(eq=False)
class ResponseWithBody(Generic[T]):
    """A fully read response: the original handle plus its materialized body."""

    response: Response
    body: T

    @property
    def status_code(self) -> int | None:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    @property
    def requested_url(self) -> str:
        return self.response.requested_url

    @property
    def redirect_chain(self) -> tuple[str, ...]:
        return self.response.redirect_chain


__all__ = ["OutboundChannel", "OutboundRequest", "Response", "ResponseWithBody"]

