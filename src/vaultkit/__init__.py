"""vaultkit -- session manager and CLI for a Vault-compatible secret store.

A :class:`VaultSession` authenticates against one of the store's auth
backends (``approle``, ``app_id``, ``userpass``, ``github``, ``token``),
keeps the issued client token, and reads or writes secrets with it.
When the store rejects the token (or none is held yet) the session
re-authenticates once with the credential supplied by the caller and
retries the operation once.

Typical usage::

    from vaultkit import VaultSession

    with VaultSession.from_config() as session:
        result = session.read("secret/foo", "userpass", ("alice", "s3cret"))
        if result.ok:
            print(result.value["value"])

Every operation returns a result value (:class:`Ok` or a
:class:`Failure` subclass) instead of raising, so callers can inspect
the store's own error messages.

Modules:
    session: :class:`VaultSession` and the retry orchestration.
    async_session: :class:`AsyncVaultSession` for asyncio callers.
    results: Result types returned by every operation.
    models: Pydantic models (backends, credentials, configuration).
    config: XDG-aware configuration and address resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from vaultkit.async_session import AsyncVaultSession
from vaultkit.models import (
    AppIdCredential,
    AppRoleCredential,
    AuthBackend,
    GithubCredential,
    TokenCredential,
    UserpassCredential,
)
from vaultkit.results import (
    AuthFailure,
    Authenticated,
    Failure,
    LoginFailed,
    NotAuthenticated,
    Ok,
    OtherFailure,
)
from vaultkit.session import VaultSession

__all__ = [
    "AppIdCredential",
    "AppRoleCredential",
    "AsyncVaultSession",
    "AuthBackend",
    "AuthFailure",
    "Authenticated",
    "Failure",
    "GithubCredential",
    "LoginFailed",
    "NotAuthenticated",
    "Ok",
    "OtherFailure",
    "TokenCredential",
    "UserpassCredential",
    "VaultSession",
]
