# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed transport primitive."""

from __future__ import annotations

import asyncio
import base64
import logging
import ssl
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ..config import RequiemSettings, load_settings
from ..options import TransportOptions
from .transport import TransportEvent, TransportRequest
from .url import ResolvedTarget

logger = logging.getLogger(__name__)


class HttpxTransportResponse:
    """Streaming httpx response; closing it also closes the client that owns the connection."""

    def __init__(self, response: httpx.Response, client: httpx.AsyncClient | None = None):
        self._response = response
        self._client = client
        self._closed = False
        self.status_code: int | None = response.status_code
        self.headers = response.headers

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        if self._response.is_stream_consumed:
            # Built in memory (e.g. by a MockTransport agent): the body is already loaded.
            if self._response.content:
                yield self._response.content
        else:
            # Wire bytes: no content decoding, so headers and body stay consistent when proxied.
            async for chunk in self._response.aiter_raw():
                if chunk:
                    yield chunk
        await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._response.aclose()
        if self._client is not None:
            await self._client.aclose()


class HttpxTransportRequest(TransportRequest):
    """
    One request on its own `httpx.AsyncClient`.

    When the caller passes `agent` (an `httpx.AsyncBaseTransport`), connections belong to
    the caller: the client is never closed here, only the response.
    """

    def __init__(self, target: ResolvedTarget, options: TransportOptions, settings: RequiemSettings):
        super().__init__(target, options)
        self._settings = settings
        self._task: asyncio.Task[None] | None = None

    @property
    def _owns_client(self) -> bool:
        return self.options.agent is None

    def _transmit(self) -> None:
        self._task = asyncio.get_running_loop().create_task(self._send())

    def _release(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _verify(self) -> bool | ssl.SSLContext:
        tls = self.options.tls
        verify = self._settings.verify_ssl if tls.verify is None else tls.verify
        if tls.cert is None and not isinstance(verify, str):
            return verify

        if isinstance(verify, ssl.SSLContext):
            context = verify
        else:
            context = ssl.create_default_context(cafile=verify if isinstance(verify, str) else None)
            if verify is False:
                context.check_hostname = False
                context.verify_mode = ssl.CERT_NONE
        if tls.cert is not None:
            certfile, keyfile = (tls.cert, None) if isinstance(tls.cert, str) else tls.cert
            context.load_cert_chain(certfile, keyfile)
        return context

    def _build_client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {
            "follow_redirects": False,
            "trust_env": self._settings.trust_env,
        }
        if self.options.timeout is not None:
            kwargs["timeout"] = httpx.Timeout(self.options.timeout)
        if self.target.secure:
            kwargs["verify"] = self._verify()
        if self.options.agent is not None:
            kwargs["transport"] = self.options.agent
        return httpx.AsyncClient(**kwargs)

    def _build_request(self, client: httpx.AsyncClient) -> httpx.Request:
        headers = httpx.Headers(self.headers)
        headers.setdefault("User-Agent", self._settings.user_agent)
        headers.setdefault("Accept-Encoding", "identity")
        if self.options.auth is not None and "authorization" not in headers:
            token = base64.b64encode(self.options.auth.encode("utf-8")).decode("ascii")
            headers["Authorization"] = f"Basic {token}"

        extensions: dict[str, Any] = {}
        if self.target.secure and self.options.tls.server_hostname:
            extensions["sni_hostname"] = self.options.tls.server_hostname

        return client.build_request(
            self.options.method,
            self.target.url,
            headers=headers,
            content=self.body or None,
            extensions=extensions or None,
        )

    async def _close_client(self, client: httpx.AsyncClient | None) -> None:
        if client is not None and self._owns_client:
            await client.aclose()

    async def _send(self) -> None:
        client: httpx.AsyncClient | None = None
        try:
            client = self._build_client()
            response = await client.send(self._build_request(client), stream=True)
        except httpx.TimeoutException:
            await self._close_client(client)
            logger.debug("Request to %s timed out", self.target.url)
            self.emit(TransportEvent.TIMEOUT)
            return
        except asyncio.CancelledError:
            await self._close_client(client)
            raise
        except Exception as exc:  # noqa: BLE001 - handed to listeners unwrapped
            await self._close_client(client)
            logger.debug("Request to %s failed: %s", self.target.url, exc)
            self.emit(TransportEvent.ERROR, exc)
            return

        owner = client if self._owns_client else None
        self.emit(TransportEvent.RESPONSE, HttpxTransportResponse(response, owner))


class HttpxTransport:
    """Default transport: plain or TLS connections through httpx, one client per request."""

    def __init__(self, settings: RequiemSettings | None = None):
        self.settings = settings or load_settings()

    def open(self, target: ResolvedTarget, options: TransportOptions) -> HttpxTransportRequest:
        return HttpxTransportRequest(target, options, self.settings)


__all__ = ["HttpxTransport", "HttpxTransportRequest", "HttpxTransportResponse"]
