"""Transport interface the session core talks to.

The session never builds sockets or URLs beyond a relative path; it hands
a method, a path under ``/v1/``, headers and a JSON-serialisable body to a
:class:`Transport` and interprets the :class:`TransportResponse` it gets
back.  :class:`~vaultkit.client.sync_transport.HttpxTransport` and
:class:`~vaultkit.client.async_transport.AsyncHttpxTransport` are the
shipped implementations; tests substitute their own.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from vaultkit.exceptions import ConnectionError_


class TransportError(ConnectionError_):
    """The request produced no HTTP response (timeout, DNS, refused connection)."""


@dataclass(frozen=True)
class TransportResponse:
    """Status code and decoded body of a completed HTTP exchange.

    Attributes:
        status: The HTTP status code.
        body: The JSON-decoded body, the raw text when it is not JSON,
            or ``None`` when the response has no content.
        headers: Response headers, lower-cased names.
    """

    status: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    def errors(self) -> Optional[list[str]]:
        """Return the store's ``errors`` list, or ``None`` if the body has none."""
        if isinstance(self.body, dict) and isinstance(self.body.get("errors"), list):
            return [str(e) for e in self.body["errors"]]
        return None


class Transport(ABC):
    """Blocking transport used by :class:`~vaultkit.session.VaultSession`."""

    @abstractmethod
    def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        body: Any = None,
    ) -> TransportResponse:
        """Send one request and return its response.

        Args:
            method: HTTP method (``GET``, ``POST``, ...).
            url: Path relative to the store's ``/v1/`` prefix, e.g.
                ``"secret/foo"`` or ``"auth/approle/login"``.
            headers: Extra request headers.
            body: JSON-serialisable request body, or ``None``.

        Returns:
            The :class:`TransportResponse`, whatever its status.

        Raises:
            TransportError: If no HTTP response was received.
        """
        ...

    def close(self) -> None:
        """Release pooled connections.  The default does nothing."""


class AsyncTransport(ABC):
    """Non-blocking counterpart of :class:`Transport`."""

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        body: Any = None,
    ) -> TransportResponse:
        """Send one request and return its response.

        Raises:
            TransportError: If no HTTP response was received.
        """
        ...

    async def aclose(self) -> None:
        """Release pooled connections.  The default does nothing."""
