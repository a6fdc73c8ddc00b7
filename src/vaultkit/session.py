"""The session handle -- authentication plus read/write with one transparent re-login.

:class:`VaultSession` owns a :class:`~vaultkit.auth.session_store.SessionStore`,
an :class:`~vaultkit.auth.coordinator.AuthCoordinator` and a
:class:`~vaultkit.secrets.SecretExecutor`, all sharing one transport.
Callers construct it once and pass it around; there is no global instance.

Every :meth:`~VaultSession.read` and :meth:`~VaultSession.write` goes
through a two-state machine:

``ATTEMPT``
    Run the operation with the current token.  Success and any failure
    other than :class:`~vaultkit.results.AuthFailure` are returned as-is.
    On ``AuthFailure`` (including "no token yet") log in with the
    caller's credential; a rejected login is returned immediately.
``RETRIED``
    Run the operation once more with the token that login produced and
    return whatever it yields.

So a call makes at most one login and two operation requests, however
the store behaves.

See Also:
    :class:`~vaultkit.async_session.AsyncVaultSession` -- the asyncio
    equivalent.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Optional, Union

from vaultkit.auth.coordinator import AuthCoordinator, ExchangerRegistry
from vaultkit.auth.session_store import SessionStore
from vaultkit.client.base import Transport
from vaultkit.client.sync_transport import HttpxTransport
from vaultkit.config import resolve_address
from vaultkit.models import AuthBackend, GlobalConfig
from vaultkit.results import (
    AuthFailure,
    Authenticated,
    Failure,
    LoginFailed,
    NotAuthenticated,
    Ok,
)
from vaultkit.secrets import SecretExecutor

logger = logging.getLogger(__name__)

Backend = Union[AuthBackend, str]


class _Attempt(enum.Enum):
    ATTEMPT = "attempt"
    RETRIED = "retried"


class VaultSession:
    """A caller-owned session against one secret store.

    Args:
        transport: The transport every request goes through.
        registry: Exchanger registry; defaults to all built-in backends.
        store: Session store; a fresh empty one by default.
        owns_transport: Close *transport* in :meth:`close`.

    Example::

        with VaultSession.from_config() as session:
            session.authenticate("approle", (role_id, secret_id))
            result = session.read("secret/foo", "approle", (role_id, secret_id))
    """

    def __init__(
        self,
        transport: Transport,
        registry: Optional[ExchangerRegistry] = None,
        store: Optional[SessionStore] = None,
        owns_transport: bool = False,
    ) -> None:
        self._transport = transport
        self._owns_transport = owns_transport
        self._store = store or SessionStore()
        self._coordinator = AuthCoordinator(self._store, transport, registry)
        self._executor = SecretExecutor(self._store, transport)

    @classmethod
    def from_config(
        cls,
        config: Optional[GlobalConfig] = None,
        address: Optional[str] = None,
        token: Optional[str] = None,
    ) -> VaultSession:
        """Build a session with an :class:`~vaultkit.client.HttpxTransport`.

        Args:
            config: Global config supplying the address and request
                settings; defaults are used when ``None``.
            address: Full store address overriding the configured one.
            token: Token to start the session with.
        """
        config = config or GlobalConfig()
        transport = HttpxTransport(resolve_address(config, address), config.request)
        return cls(
            transport,
            store=SessionStore(token=token),
            owns_transport=True,
        )

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> VaultSession:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this session created it."""
        if self._owns_transport:
            self._transport.close()

    # ------------------------------------------------------------------ #
    # Session state
    # ------------------------------------------------------------------ #

    def authenticate(
        self, backend: Backend, credential: Any
    ) -> Union[Authenticated, LoginFailed]:
        """Log in, replacing any token the session holds.

        Args:
            backend: An :class:`~vaultkit.models.AuthBackend` or its tag.
            credential: The backend's credential model, or a tuple /
                mapping of its fields.

        Returns:
            :class:`~vaultkit.results.Authenticated` or the backend's
            :class:`~vaultkit.results.LoginFailed`.

        Raises:
            InvalidUsageError: For an unknown backend or a credential of
                the wrong shape.
        """
        return self._coordinator.authenticate(backend, credential)

    def get_token(self) -> Union[str, NotAuthenticated]:
        """Return the current token, or :class:`~vaultkit.results.NotAuthenticated`."""
        token = self._store.get()
        if token is None:
            return NotAuthenticated()
        return token

    @property
    def metadata(self) -> dict[str, Any]:
        """The ``auth`` section of the last successful login, minus the token."""
        return self._store.metadata

    def snapshot(self) -> tuple[Optional[str], dict[str, Any]]:
        """Return ``(token, metadata)`` from the same login; ``token`` is ``None`` before any."""
        return self._store.snapshot()

    def clear(self) -> None:
        """Forget the current token.  Nothing is revoked on the store."""
        self._store.clear()

    # ------------------------------------------------------------------ #
    # Secret operations
    # ------------------------------------------------------------------ #

    def read(
        self, path: str, backend: Backend, credential: Any
    ) -> Union[Ok, Failure]:
        """Read the secret at *path*, logging in once if the token is missing or rejected.

        Args:
            path: Secret path, e.g. ``"secret/foo"``.
            backend: Backend to log in with if needed.
            credential: Credential for *backend*.

        Returns:
            ``Ok(data)`` or a :class:`~vaultkit.results.Failure`.

        Raises:
            InvalidUsageError: For an unknown backend or a credential of
                the wrong shape, before any request is sent.
        """
        return self._run(
            lambda token: self._executor.read(path, token), backend, credential
        )

    def write(
        self,
        path: str,
        payload: dict[str, Any],
        backend: Backend,
        credential: Any,
    ) -> Union[Ok, Failure]:
        """Write *payload* to *path*, logging in once if the token is missing or rejected.

        Returns:
            ``Ok(None)`` for an empty (204) response, ``Ok(body)`` when the
            store returns data, or a :class:`~vaultkit.results.Failure`.
        """
        return self._run(
            lambda token: self._executor.write(path, payload, token),
            backend,
            credential,
        )

    def _run(
        self,
        operation: Callable[[Optional[str]], Union[Ok, Failure]],
        backend: Backend,
        credential: Any,
    ) -> Union[Ok, Failure]:
        exchanger = self._coordinator.registry.get(backend)
        exchanger.coerce_credential(credential)

        state = _Attempt.ATTEMPT
        token: Optional[str] = None
        while True:
            result = operation(token)
            if state is _Attempt.RETRIED or not isinstance(result, AuthFailure):
                return result

            logger.info(
                "Token missing or rejected, logging in via %s", exchanger.backend.value
            )
            login = self._coordinator.authenticate(backend, credential)
            if isinstance(login, LoginFailed):
                return login
            token = login.token
            state = _Attempt.RETRIED
