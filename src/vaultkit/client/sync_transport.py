"""Blocking :class:`~vaultkit.client.base.Transport` backed by :class:`httpx.Client`.

Layers on top of httpx:

- **Base URL** -- every path is resolved against the store's ``/v1/``
  prefix produced by :func:`~vaultkit.config.resolve_address`.
- **JSON bodies** -- request bodies are sent as JSON, response bodies are
  decoded by :func:`~vaultkit.client.response.extract_response_data`.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...).  Other httpx transport errors
  (protocol, proxy, unsupported scheme) fail at once.

4xx responses are returned, not raised: telling an expired token apart
from a missing secret is the session's job.

See Also:
    :class:`~vaultkit.client.async_transport.AsyncHttpxTransport` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from vaultkit.client.base import Transport, TransportError, TransportResponse
from vaultkit.client.response import to_transport_response
from vaultkit.models import RequestConfig

logger = logging.getLogger(__name__)


class HttpxTransport(Transport):
    """Blocking transport for the store's HTTP API.

    Args:
        base_url: The store's API prefix, e.g. ``"http://localhost:8200/v1/"``.
        request_config: Timeout, TLS verification and retry settings.
        client: Optional pre-built :class:`httpx.Client`; when given its
            ``base_url`` is used as-is and it is closed by :meth:`close`.

    Example::

        with HttpxTransport("http://localhost:8200/v1/") as transport:
            resp = transport.request("GET", "sys/health")
    """

    def __init__(
        self,
        base_url: str,
        request_config: Optional[RequestConfig] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._config = request_config or RequestConfig()
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def request(
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

        response = self._execute_with_retry(method, url, merged_headers, body)
        return to_transport_response(response)

    def _execute_with_retry(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any,
    ) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times. The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        max_retries = self._config.max_retries

        for attempt in range(max_retries + 1):
            try:
                kwargs: dict[str, Any] = {
                    "method": method,
                    "url": url,
                    "headers": headers,
                }
                if body is not None:
                    kwargs["json"] = body

                response = self._client.request(**kwargs)

                if response.status_code >= 500 and attempt < max_retries:
                    delay = 2 ** attempt
                    logger.debug(
                        "Server error %s on %s %s, retrying in %ss (attempt %s/%s)",
                        response.status_code, method, url, delay, attempt + 1, max_retries,
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    logger.debug(
                        "Connection error on %s %s: %s, retrying in %ss (attempt %s/%s)",
                        method, url, exc, delay, attempt + 1, max_retries,
                    )
                    time.sleep(delay)
                    continue

                raise TransportError(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            except httpx.TransportError as exc:
                raise TransportError(f"Request to {url} failed: {exc}") from exc

        raise TransportError("Request failed after all retries")  # pragma: no cover
