# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Body materializers layered on top of streaming responses."""

from __future__ import annotations

import json
from typing import Any

from ..errors import ErrorKind, RequiemError
from .models import Response, ResponseWithBody


async def read_body(response: Response) -> ResponseWithBody[bytes]:
    """Drain the response body; stream errors propagate unchanged."""
    return ResponseWithBody(response, await response.aread())


def parse_json_body(buffered: ResponseWithBody[bytes]) -> ResponseWithBody[Any]:
    """Decode a buffered body as UTF-8 JSON; failures keep the buffered response attached."""
    try:
        value = json.loads(buffered.body.decode("utf-8"))
    except ValueError as exc:
        raise RequiemError(
            ErrorKind.INVALID_JSON_BODY,
            f"Failed to parse body as JSON: {exc}",
            response=buffered,
        ) from exc
    return ResponseWithBody(buffered.response, value)


__all__ = ["parse_json_body", "read_body"]
