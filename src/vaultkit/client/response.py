"""Conversion from :class:`httpx.Response` to :class:`~vaultkit.client.base.TransportResponse`.

Shared by the sync and async transports so both decode bodies the same
way.
"""

from __future__ import annotations

from typing import Any

import httpx

from vaultkit.client.base import TransportResponse


def to_transport_response(response: httpx.Response) -> TransportResponse:
    """Wrap an :class:`httpx.Response` as a :class:`TransportResponse`."""
    return TransportResponse(
        status=response.status_code,
        body=extract_response_data(response),
        headers={k.lower(): v for k, v in response.headers.items()},
    )


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first.  If that fails (e.g. a proxy
    answered with an HTML error page), returns the raw text.  Returns
    ``None`` for responses with no content, such as the store's 204 reply
    to a write.

    Args:
        response: The :class:`httpx.Response` to extract data from.

    Returns:
        A JSON-decoded object, a ``str`` of raw text, or ``None``.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        pass

    return response.text
