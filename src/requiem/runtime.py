# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client facade that shares a transport and default options across calls."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import RequiemSettings
from .http.client import (
    Options,
    create_request,
    request,
    request_with_buffer,
    request_with_json,
    send_request,
)
from .http.httpx_transport import HttpxTransport
from .http.models import OutboundRequest, Response, ResponseWithBody
from .http.transport import Transport
from .options import RequestOptions


class Requiem:
    """
    Convenience wrapper that applies the same transport and defaults to every call.

    Defaults use the option names accepted by `normalize_options`. Per-call options win over
    defaults, except `headers`, which are merged (per-call values win per header).

    Usable as an async context manager. Leaving the block closes nothing: every request
    owns its client, released when its response is read or closed.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        settings: RequiemSettings | None = None,
        **defaults: Any,
    ):
        self.transport = transport or HttpxTransport(settings)
        self.defaults = dict(defaults)

    async def __aenter__(self) -> Requiem:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    def _merge(self, options: Options) -> Mapping[str, Any] | RequestOptions:
        if isinstance(options, RequestOptions):
            return options
        fields = {"url": options} if isinstance(options, str) else dict(options)
        merged = {**self.defaults, **fields}
        headers = {**(self.defaults.get("headers") or {}), **(fields.get("headers") or {})}
        if headers:
            merged["headers"] = headers
        return merged

    def create_request(self, options: Options) -> OutboundRequest:
        return create_request(self._merge(options), transport=self.transport)

    async def send_request(self, outbound: OutboundRequest, options: Options) -> Response:
        return await send_request(outbound, self._merge(options))

    async def request(self, options: Options) -> Response:
        return await request(self._merge(options), transport=self.transport)

    async def request_with_buffer(self, options: Options) -> ResponseWithBody[bytes]:
        return await request_with_buffer(self._merge(options), transport=self.transport)

    async def request_with_json(self, options: Options) -> ResponseWithBody[Any]:
        return await request_with_json(self._merge(options), transport=self.transport)


__all__ = ["Requiem"]
