"""Secret operation executor -- a single read or write with the current token.

:class:`SecretExecutor` sends one request and classifies the response; it
never re-authenticates.  That decision belongs to
:class:`~vaultkit.session.VaultSession`, which only retries on
:class:`~vaultkit.results.AuthFailure`.

Classification:

=================  ==========================================
Response           Result
=================  ==========================================
no token held      :class:`~vaultkit.results.NotAuthenticated`
2xx                :class:`~vaultkit.results.Ok`
401 / 403          :class:`~vaultkit.results.AuthFailure`
404                :class:`~vaultkit.results.OtherFailure`
anything else      :class:`~vaultkit.results.OtherFailure`
=================  ==========================================

The pure helpers :func:`build_request` and :func:`classify_response` are
shared with :class:`AsyncSecretExecutor`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from vaultkit.auth.session_store import SessionStore
from vaultkit.client.base import AsyncTransport, Transport, TransportError, TransportResponse
from vaultkit.results import AuthFailure, Failure, NotAuthenticated, Ok, OtherFailure

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Vault-Token"

OperationResult = Union[Ok, Failure]


def build_request(
    operation: str, path: str, token: str, payload: Any = None
) -> tuple[str, str, dict[str, str], Any]:
    """Return ``(method, url, headers, body)`` for a read or write.

    Args:
        operation: ``"read"`` or ``"write"``.
        path: Secret path, with or without a leading slash.
        token: The client token to present.
        payload: The mapping to store, for writes.
    """
    method = "GET" if operation == "read" else "POST"
    body = payload if operation == "write" else None
    return method, path.lstrip("/"), {TOKEN_HEADER: token}, body


def classify_response(operation: str, response: TransportResponse) -> OperationResult:
    """Turn the store's response to a read or write into a result value.

    Reads yield the body's ``data`` field.  Writes yield ``None`` for an
    empty (204) body, otherwise the decoded body.  The store's ``errors``
    list is passed through verbatim whenever it is present.
    """
    status = response.status
    if response.is_success:
        if operation == "write":
            return Ok(value=response.body)
        if isinstance(response.body, dict) and "data" in response.body:
            return Ok(value=response.body["data"])
        return OtherFailure(
            messages=[f"Unexpected response body for read (HTTP {status})"],
            status=status,
        )

    errors = response.errors()
    if status in (401, 403):
        return AuthFailure(messages=errors or [f"permission denied (HTTP {status})"])
    if status == 404:
        return OtherFailure(messages=errors or ["Key not found"], status=status)
    return OtherFailure(messages=errors or [f"HTTP {status}"], status=status)


def _transport_failure(exc: TransportError) -> OtherFailure:
    return OtherFailure(messages=[str(exc)])


class SecretExecutor:
    """Performs single reads and writes over a blocking transport.

    Args:
        store: Where the current token is read from.
        transport: The transport requests are sent through.
    """

    def __init__(self, store: SessionStore, transport: Transport) -> None:
        self._store = store
        self._transport = transport

    def read(self, path: str, token: Optional[str] = None) -> OperationResult:
        """Read the secret at *path*.

        Args:
            path: Secret path, e.g. ``"secret/foo"``.
            token: Token to use instead of the store's current one.
        """
        return self._execute("read", path, token)

    def write(
        self, path: str, payload: dict[str, Any], token: Optional[str] = None
    ) -> OperationResult:
        """Write *payload* to *path*."""
        return self._execute("write", path, token, payload)

    def _execute(
        self, operation: str, path: str, token: Optional[str], payload: Any = None
    ) -> OperationResult:
        token = token or self._store.get()
        if token is None:
            return NotAuthenticated()
        method, url, headers, body = build_request(operation, path, token, payload)
        try:
            response = self._transport.request(method, url, headers=headers, body=body)
        except TransportError as exc:
            return _transport_failure(exc)
        result = classify_response(operation, response)
        logger.debug("%s %s -> HTTP %s (%s)", operation, url, response.status, type(result).__name__)
        return result


class AsyncSecretExecutor:
    """asyncio counterpart of :class:`SecretExecutor`."""

    def __init__(self, store: SessionStore, transport: AsyncTransport) -> None:
        self._store = store
        self._transport = transport

    async def read(self, path: str, token: Optional[str] = None) -> OperationResult:
        return await self._execute("read", path, token)

    async def write(
        self, path: str, payload: dict[str, Any], token: Optional[str] = None
    ) -> OperationResult:
        return await self._execute("write", path, token, payload)

    async def _execute(
        self, operation: str, path: str, token: Optional[str], payload: Any = None
    ) -> OperationResult:
        token = token or self._store.get()
        if token is None:
            return NotAuthenticated()
        method, url, headers, body = build_request(operation, path, token, payload)
        try:
            response = await self._transport.request(method, url, headers=headers, body=body)
        except TransportError as exc:
            return _transport_failure(exc)
        result = classify_response(operation, response)
        logger.debug("%s %s -> HTTP %s (%s)", operation, url, response.status, type(result).__name__)
        return result
