"""HTTP transport module for vaultkit.

Provides the transport interface the session core calls into and two
:mod:`httpx`-backed implementations with retry and exponential backoff.

Classes:
    :class:`Transport` / :class:`AsyncTransport` -- the interface.
    :class:`TransportResponse` -- status plus decoded JSON body.
    :class:`HttpxTransport` -- blocking, backed by :class:`httpx.Client`.
    :class:`AsyncHttpxTransport` -- non-blocking, backed by :class:`httpx.AsyncClient`.

Example::

    from vaultkit.client import HttpxTransport

    with HttpxTransport("http://localhost:8200/v1/") as transport:
        resp = transport.request("GET", "secret/foo", headers={"X-Vault-Token": token})
"""

from vaultkit.client.async_transport import AsyncHttpxTransport
from vaultkit.client.base import (
    AsyncTransport,
    Transport,
    TransportError,
    TransportResponse,
)
from vaultkit.client.sync_transport import HttpxTransport

__all__ = [
    "AsyncHttpxTransport",
    "AsyncTransport",
    "HttpxTransport",
    "Transport",
    "TransportError",
    "TransportResponse",
]
