# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Redirect following.

Each hop is a fresh GET request to the `Location` of the previous response, resolved
against the URL that produced it. Hops run one after the other; a hop is only opened
once the previous response's headers have arrived.
"""

from __future__ import annotations

import logging

from ..errors import ErrorKind, RequiemError
from ..options import RedirectsDisabled, RequestOptions
from .builder import build_request
from .models import Response
from .transport import Transport
from .url import resolve_location
from .wiring import transmit

logger = logging.getLogger(__name__)


def redirect_location(response: Response) -> str | None:
    """Return the `Location` to follow, or None when `response` is final."""
    status = response.status_code
    if not status or status < 300 or status >= 400:
        return None
    return response.headers.get("location", "").strip() or None


async def follow_redirects(
    response: Response,
    options: RequestOptions,
    *,
    transport: Transport | None = None,
) -> Response:
    """
    Follow redirects starting from `response` and return the final response.

    With `MaxRedirects(n)` at most n hops are followed; a response that would need hop
    n + 1 fails with `TooManyRedirects`. `RedirectsDisabled` returns `response` untouched.
    Intermediate redirect responses are closed once their hop has been decided.
    """
    if isinstance(options.redirects, RedirectsDisabled):
        return response

    max_redirects = options.redirects.limit
    chain = [response.requested_url]
    depth = 0
    while True:
        location = redirect_location(response)
        if location is None:
            response.redirect_chain = tuple(chain)
            return response

        if depth >= max_redirects:
            raise RequiemError(
                ErrorKind.TOO_MANY_REDIRECTS,
                f'"{chain[0]}" redirected too many times (max redirects: {max_redirects})',
                response=response,
            )

        try:
            next_url = resolve_location(location, chain[-1])
        except ValueError:
            raise RequiemError(
                ErrorKind.INVALID_REDIRECT_URL,
                f"Invalid redirect URL: {location}",
                response=response,
            ) from None

        logger.debug("Following redirect %s -> %s (%d/%d)", chain[-1], next_url, depth + 1, max_redirects)
        await response.aclose()

        hop_options = options.for_redirect(next_url)
        hop = build_request(hop_options, transport)
        response = await transmit(hop, hop_options)
        chain.append(hop.requested_url)
        depth += 1


__all__ = ["follow_redirects", "redirect_location"]
