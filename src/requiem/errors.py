# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and the structured exception raised by requiem."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from .http.models import OutboundRequest


class ErrorKind(str, Enum):
    INVALID_URL = "InvalidUrl"
    INVALID_OPTIONS = "InvalidOptions"
    TIMEOUT = "Timeout"
    REQUEST_ABORT = "RequestAbort"
    TOO_MANY_REDIRECTS = "TooManyRedirects"
    INVALID_REDIRECT_URL = "InvalidRedirectUrl"
    INVALID_STATUS_CODE = "InvalidStatusCode"
    INVALID_JSON_BODY = "InvalidJsonBody"


class RequiemError(Exception):
    """
    Failure raised by the request lifecycle.

    `request` is the outbound request the failure belongs to (if any) and `response` the
    latest response seen before failing (if any). Raw transport errors are never wrapped
    in this type.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        request: OutboundRequest | None = None,
        response: Any = None,
    ) -> None:
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message
        self.request = request
        self.response = response

    @property
    def code(self) -> str:
        """Machine-readable kind string (e.g. ``"Timeout"``)."""
        return self.kind.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value!r}, {self.message!r})"


__all__ = ["ErrorKind", "RequiemError"]
