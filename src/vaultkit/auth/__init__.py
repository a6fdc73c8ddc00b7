"""Backend-pluggable authentication for vaultkit.

The main entry points are:

- :class:`Exchanger` -- abstract base class for an auth backend.
- :class:`ExchangerRegistry` / :func:`create_default_registry` -- maps
  each :class:`~vaultkit.models.AuthBackend` to its exchanger.
- :class:`AuthCoordinator` / :class:`AsyncAuthCoordinator` -- run a login
  and record the token in the :class:`SessionStore`.
- :class:`TokenStore` -- the CLI's on-disk token file.

Typical usage::

    from vaultkit.auth import AuthCoordinator, SessionStore

    store = SessionStore()
    coordinator = AuthCoordinator(store, transport)
    result = coordinator.authenticate("approle", (role_id, secret_id))
"""

from vaultkit.auth.base import Exchanger, LoginRequest, TokenGrant
from vaultkit.auth.coordinator import (
    AsyncAuthCoordinator,
    AuthCoordinator,
    ExchangerRegistry,
    create_default_registry,
    resolve_backend,
)
from vaultkit.auth.session_store import SessionStore
from vaultkit.auth.token_store import TokenEntry, TokenStore

__all__ = [
    "AsyncAuthCoordinator",
    "AuthCoordinator",
    "Exchanger",
    "ExchangerRegistry",
    "LoginRequest",
    "SessionStore",
    "TokenEntry",
    "TokenGrant",
    "TokenStore",
    "create_default_registry",
    "resolve_backend",
]
