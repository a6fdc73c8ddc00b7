"""Non-blocking transport -- mirrors :class:`~vaultkit.client.sync_transport.HttpxTransport`.

Wraps :class:`httpx.AsyncClient` with the same retry policy as the
blocking transport but uses :func:`asyncio.sleep` between attempts so it
can be used inside an event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx

from vaultkit.client.base import AsyncTransport, TransportError, TransportResponse
from vaultkit.client.response import to_transport_response
from vaultkit.models import RequestConfig

logger = logging.getLogger(__name__)


class AsyncHttpxTransport(AsyncTransport):
    """Asynchronous transport for the store's HTTP API.

    Args:
        base_url: The store's API prefix, e.g. ``"http://localhost:8200/v1/"``.
        request_config: Timeout, TLS verification and retry settings.
        client: Optional pre-built :class:`httpx.AsyncClient`.

    Example::

        async with AsyncHttpxTransport("http://localhost:8200/v1/") as transport:
            resp = await transport.request("GET", "sys/health")
    """

    def __init__(
        self,
        base_url: str,
        request_config: Optional[RequestConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = request_config or RequestConfig()
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
        )

    async def __aenter__(self) -> AsyncHttpxTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        body: Any = None,
    ) -> TransportResponse:
        """Send the request with retry, returning the final response.

        Raises:
            TransportError: When every attempt failed at the network level,
                or on any other httpx transport error.
        """
        merged_headers: dict[str, str] = {"Accept": "application/json"}
        merged_headers.update(headers or {})

        max_retries = self._config.max_retries
        for attempt in range(max_retries + 1):
            try:
                kwargs: dict[str, Any] = {
                    "method": method,
                    "url": url,
                    "headers": merged_headers,
                }
                if body is not None:
                    kwargs["json"] = body

                response = await self._client.request(**kwargs)

                if response.status_code >= 500 and attempt < max_retries:
                    delay = 2 ** attempt
                    logger.debug(
                        "Server error %s on %s %s, retrying in %ss (attempt %s/%s)",
                        response.status_code, method, url, delay, attempt + 1, max_retries,
                    )
                    await asyncio.sleep(delay)
                    continue

                return to_transport_response(response)

            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    logger.debug(
                        "Connection error on %s %s: %s, retrying in %ss (attempt %s/%s)",
                        method, url, exc, delay, attempt + 1, max_retries,
                    )
                    await asyncio.sleep(delay)
                    continue

                raise TransportError(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            except httpx.TransportError as exc:
                raise TransportError(f"Request to {url} failed: {exc}") from exc

        raise TransportError("Request failed after all retries")  # pragma: no cover
