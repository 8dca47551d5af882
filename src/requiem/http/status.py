# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Status code validation for final responses."""

from __future__ import annotations

from ..errors import ErrorKind, RequiemError
from ..options import ExpectStatus, RejectErrorStatus, RequestOptions
from .models import OutboundRequest, Response


def validate_status(request: OutboundRequest, response: Response, options: RequestOptions) -> None:
    """Raise `InvalidStatusCode` when `response` violates the configured status policy."""
    policy = options.status_policy
    message = f'Received invalid status code from "{response.requested_url}": {response.status_code}'

    if isinstance(policy, ExpectStatus):
        if response.status_code != policy.status_code:
            raise RequiemError(
                ErrorKind.INVALID_STATUS_CODE,
                f"{message} (expected {policy.status_code})",
                request=request,
                response=response,
            )
    elif isinstance(policy, RejectErrorStatus):
        if response.status_code and response.status_code >= 400:
            raise RequiemError(ErrorKind.INVALID_STATUS_CODE, message, request=request, response=response)


__all__ = ["validate_status"]
