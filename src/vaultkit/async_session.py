"""asyncio session -- mirrors :class:`~vaultkit.session.VaultSession`.

Same public surface and the same ``ATTEMPT`` / ``RETRIED`` machine, with
coroutines in place of blocking calls.  Logins are serialized by an
:class:`asyncio.Lock` in :class:`~vaultkit.auth.coordinator.AsyncAuthCoordinator`.

Example::

    async with AsyncVaultSession.from_config() as session:
        result = await session.read("secret/foo", "approle", (role_id, secret_id))
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, Union

from vaultkit.auth.coordinator import AsyncAuthCoordinator, ExchangerRegistry
from vaultkit.auth.session_store import SessionStore
from vaultkit.client.async_transport import AsyncHttpxTransport
from vaultkit.client.base import AsyncTransport
from vaultkit.config import resolve_address
from vaultkit.models import GlobalConfig
from vaultkit.results import (
    AuthFailure,
    Authenticated,
    Failure,
    LoginFailed,
    NotAuthenticated,
    Ok,
)
from vaultkit.secrets import AsyncSecretExecutor
from vaultkit.session import Backend, _Attempt

logger = logging.getLogger(__name__)


class AsyncVaultSession:
    """A caller-owned asyncio session against one secret store.

    Args:
        transport: The async transport every request goes through.
        registry: Exchanger registry; defaults to all built-in backends.
        store: Session store; a fresh empty one by default.
        owns_transport: Close *transport* in :meth:`aclose`.
    """

    def __init__(
        self,
        transport: AsyncTransport,
        registry: Optional[ExchangerRegistry] = None,
        store: Optional[SessionStore] = None,
        owns_transport: bool = False,
    ) -> None:
        self._transport = transport
        self._owns_transport = owns_transport
        self._store = store or SessionStore()
        self._coordinator = AsyncAuthCoordinator(self._store, transport, registry)
        self._executor = AsyncSecretExecutor(self._store, transport)

    @classmethod
    def from_config(
        cls,
        config: Optional[GlobalConfig] = None,
        address: Optional[str] = None,
        token: Optional[str] = None,
    ) -> AsyncVaultSession:
        """Build a session with an :class:`~vaultkit.client.AsyncHttpxTransport`."""
        config = config or GlobalConfig()
        transport = AsyncHttpxTransport(resolve_address(config, address), config.request)
        return cls(transport, store=SessionStore(token=token), owns_transport=True)

    async def __aenter__(self) -> AsyncVaultSession:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if this session created it."""
        if self._owns_transport:
            await self._transport.aclose()

    async def authenticate(
        self, backend: Backend, credential: Any
    ) -> Union[Authenticated, LoginFailed]:
        """Log in, replacing any token the session holds."""
        return await self._coordinator.authenticate(backend, credential)

    def get_token(self) -> Union[str, NotAuthenticated]:
        """Return the current token, or :class:`~vaultkit.results.NotAuthenticated`."""
        token = self._store.get()
        if token is None:
            return NotAuthenticated()
        return token

    @property
    def metadata(self) -> dict[str, Any]:
        return self._store.metadata

    def snapshot(self) -> tuple[Optional[str], dict[str, Any]]:
        return self._store.snapshot()

    def clear(self) -> None:
        self._store.clear()

    async def read(
        self, path: str, backend: Backend, credential: Any
    ) -> Union[Ok, Failure]:
        """Read the secret at *path*; see :meth:`VaultSession.read <vaultkit.session.VaultSession.read>`."""
        return await self._run(
            lambda token: self._executor.read(path, token), backend, credential
        )

    async def write(
        self,
        path: str,
        payload: dict[str, Any],
        backend: Backend,
        credential: Any,
    ) -> Union[Ok, Failure]:
        """Write *payload* to *path*; see :meth:`VaultSession.write <vaultkit.session.VaultSession.write>`."""
        return await self._run(
            lambda token: self._executor.write(path, payload, token),
            backend,
            credential,
        )

    async def _run(
        self,
        operation: Callable[[Optional[str]], Awaitable[Union[Ok, Failure]]],
        backend: Backend,
        credential: Any,
    ) -> Union[Ok, Failure]:
        exchanger = self._coordinator.registry.get(backend)
        exchanger.coerce_credential(credential)

        state = _Attempt.ATTEMPT
        token: Optional[str] = None
        while True:
            result = await operation(token)
            if state is _Attempt.RETRIED or not isinstance(result, AuthFailure):
                return result

            logger.info(
                "Token missing or rejected, logging in via %s", exchanger.backend.value
            )
            login = await self._coordinator.authenticate(backend, credential)
            if isinstance(login, LoginFailed):
                return login
            token = login.token
            state = _Attempt.RETRIED
