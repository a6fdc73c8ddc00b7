"""Auth coordinator -- registry and dispatcher for backend exchangers.

:class:`ExchangerRegistry` maps each :class:`~vaultkit.models.AuthBackend`
to its :class:`~vaultkit.auth.base.Exchanger`.  :class:`AuthCoordinator`
looks up the exchanger for a login, runs the exchange and, on success,
stores the token in the :class:`~vaultkit.auth.session_store.SessionStore`.
:class:`AsyncAuthCoordinator` does the same for asyncio sessions.

Failures from the backend are returned exactly as the exchanger produced
them; the store's error list reaches the caller untouched.

See Also:
    :class:`~vaultkit.session.VaultSession` -- the public entry point.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Optional, Union

from vaultkit.auth.base import Exchanger
from vaultkit.auth.session_store import SessionStore
from vaultkit.client.base import AsyncTransport, Transport
from vaultkit.exceptions import InvalidUsageError
from vaultkit.models import AuthBackend
from vaultkit.results import Authenticated, LoginFailed

logger = logging.getLogger(__name__)


def resolve_backend(backend: Union[AuthBackend, str]) -> AuthBackend:
    """Turn a backend tag (enum member or its string value) into an :class:`AuthBackend`.

    Raises:
        InvalidUsageError: If *backend* is not one of the known tags.
    """
    if isinstance(backend, AuthBackend):
        return backend
    try:
        return AuthBackend(backend)
    except ValueError:
        available = ", ".join(b.value for b in AuthBackend)
        raise InvalidUsageError(
            f"Unknown auth backend '{backend}'. Available backends: {available}"
        ) from None


class ExchangerRegistry:
    """Registry of exchangers keyed by :attr:`~Exchanger.backend`.

    Example::

        from vaultkit.backends import UserpassExchanger

        registry = ExchangerRegistry()
        registry.register(UserpassExchanger())
        exchanger = registry.get("userpass")
    """

    def __init__(self) -> None:
        self._exchangers: dict[AuthBackend, Exchanger] = {}

    def register(self, exchanger: Exchanger) -> None:
        """Register *exchanger*, replacing any previous one for the same backend."""
        self._exchangers[exchanger.backend] = exchanger

    def get(self, backend: Union[AuthBackend, str]) -> Exchanger:
        """Return the exchanger for *backend*.

        Raises:
            InvalidUsageError: If the tag is unknown or has no exchanger
                registered.
        """
        tag = resolve_backend(backend)
        exchanger = self._exchangers.get(tag)
        if exchanger is None:
            available = ", ".join(sorted(b.value for b in self._exchangers)) or "(none)"
            raise InvalidUsageError(
                f"No exchanger registered for backend '{tag.value}'. "
                f"Available backends: {available}"
            )
        return exchanger

    def list_backends(self) -> list[str]:
        """Return the registered backend tags, sorted."""
        return sorted(b.value for b in self._exchangers)


def create_default_registry() -> ExchangerRegistry:
    """Create an :class:`ExchangerRegistry` holding every built-in backend.

    Returns:
        A registry with ``approle``, ``app_id``, ``userpass``, ``github``
        and ``token`` exchangers.
    """
    from vaultkit.backends import (
        AppIdExchanger,
        AppRoleExchanger,
        GithubExchanger,
        TokenExchanger,
        UserpassExchanger,
    )

    registry = ExchangerRegistry()
    registry.register(AppRoleExchanger())
    registry.register(AppIdExchanger())
    registry.register(UserpassExchanger())
    registry.register(GithubExchanger())
    registry.register(TokenExchanger())
    return registry


class AuthCoordinator:
    """Runs logins and records the resulting token.

    Logins are serialized by an internal lock so two threads never race
    to replace the token.  The store's own lock is only held while the
    token is written, never across the network call.

    Args:
        store: The session store to update.
        transport: Transport used for login requests.
        registry: Exchanger registry; defaults to
            :func:`create_default_registry`.
    """

    def __init__(
        self,
        store: SessionStore,
        transport: Transport,
        registry: Optional[ExchangerRegistry] = None,
    ) -> None:
        self._store = store
        self._transport = transport
        self._registry = registry or create_default_registry()
        self._lock = threading.Lock()

    @property
    def registry(self) -> ExchangerRegistry:
        return self._registry

    def authenticate(
        self, backend: Union[AuthBackend, str], credential: Any
    ) -> Union[Authenticated, LoginFailed]:
        """Log in with *credential* through *backend*'s exchanger.

        Returns:
            :class:`~vaultkit.results.Authenticated` (the store now holds
            the new token) or the exchanger's
            :class:`~vaultkit.results.LoginFailed` unchanged (the store is
            left as it was).

        Raises:
            InvalidUsageError: For an unknown backend or a credential of
                the wrong shape.
        """
        exchanger = self._registry.get(backend)
        with self._lock:
            outcome = exchanger.exchange(credential, self._transport)
            if isinstance(outcome, LoginFailed):
                logger.info("Login via %s rejected", exchanger.backend.value)
                return outcome
            self._store.set(outcome.token, outcome.metadata)
        logger.debug("Login via %s succeeded", exchanger.backend.value)
        return Authenticated(backend=exchanger.backend, token=outcome.token)


class AsyncAuthCoordinator:
    """asyncio counterpart of :class:`AuthCoordinator`.

    Serializes logins with an :class:`asyncio.Lock` instead of a thread
    lock; the :class:`SessionStore` is the same class in both cases.
    """

    def __init__(
        self,
        store: SessionStore,
        transport: AsyncTransport,
        registry: Optional[ExchangerRegistry] = None,
    ) -> None:
        self._store = store
        self._transport = transport
        self._registry = registry or create_default_registry()
        self._lock = asyncio.Lock()

    @property
    def registry(self) -> ExchangerRegistry:
        return self._registry

    async def authenticate(
        self, backend: Union[AuthBackend, str], credential: Any
    ) -> Union[Authenticated, LoginFailed]:
        """Log in with *credential*; see :meth:`AuthCoordinator.authenticate`."""
        exchanger = self._registry.get(backend)
        async with self._lock:
            outcome = await exchanger.exchange_async(credential, self._transport)
            if isinstance(outcome, LoginFailed):
                logger.info("Login via %s rejected", exchanger.backend.value)
                return outcome
            self._store.set(outcome.token, outcome.metadata)
        logger.debug("Login via %s succeeded", exchanger.backend.value)
        return Authenticated(backend=exchanger.backend, token=outcome.token)
