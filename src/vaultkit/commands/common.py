"""Helpers shared by the CLI commands.

Turns command-line options into a configured
:class:`~vaultkit.session.VaultSession` and a login credential, and keeps
the on-disk :class:`~vaultkit.auth.token_store.TokenStore` in step with
the session after a login.
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional

import typer

from vaultkit.auth.coordinator import create_default_registry, resolve_backend
from vaultkit.auth.token_store import TokenEntry, TokenStore
from vaultkit.config import (
    load_global_config,
    resolve_address,
    resolve_auth_credentials,
)
from vaultkit.exceptions import InvalidUsageError, VaultkitError
from vaultkit.models import AuthBackend, AuthConfig, GlobalConfig
from vaultkit.output import debug, error
from vaultkit.session import VaultSession


def fail(exc: VaultkitError) -> NoReturn:
    """Report *exc* on stderr and exit with its exit code."""
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def parse_assignments(items: Optional[list[str]], what: str) -> dict[str, str]:
    """Split ``key=value`` arguments into a dict.

    Raises:
        InvalidUsageError: If an item has no ``=`` or an empty key.
    """
    result: dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Invalid {what} '{item}': expected key=value")
        result[key] = value
    return result


def load_config() -> GlobalConfig:
    try:
        return load_global_config()
    except VaultkitError as exc:
        fail(exc)


def current_address(ctx: typer.Context, config: GlobalConfig) -> str:
    address = ctx.obj.get("address") if ctx.obj else None
    try:
        return resolve_address(config, address)
    except VaultkitError as exc:
        fail(exc)


def stored_entry(address: str, config: GlobalConfig, store: TokenStore) -> Optional[TokenEntry]:
    """Return the stored login if persistence is on and it was made against *address*."""
    if not config.persist_token:
        return None
    entry = store.load()
    if entry is None or entry.address != address:
        return None
    return entry


def open_session(address: str, config: GlobalConfig, store: TokenStore) -> VaultSession:
    """Create a session for *address*, seeded with the stored token when it belongs there."""
    token: Optional[str] = None
    entry = stored_entry(address, config, store)
    if entry is not None:
        token = entry.token
        debug(f"Using stored token from {entry.backend.value} login")
    return VaultSession.from_config(config, address=address, token=token)


def resolve_login(
    method: Optional[str],
    credential_items: Optional[list[str]],
    address: str,
    config: GlobalConfig,
    store: TokenStore,
) -> tuple[AuthBackend, dict[str, str]]:
    """Work out which backend and credential to log in with.

    Order of preference: an explicit ``--method`` with ``-c field=source``
    options; the config file's ``auth`` section (``-c`` options override
    its sources); the stored token, re-adopted through the ``token``
    backend, but only when it was saved for *address* and persistence is
    on.  Credential fields with no source are prompted for.

    Raises:
        InvalidUsageError: If no login can be determined, or a ``-c``
            option names a field the backend does not have.
        ConfigError: If a source cannot be resolved.
    """
    overrides = parse_assignments(credential_items, "credential")
    if method is not None:
        backend = resolve_backend(method)
        sources = overrides
    elif config.auth is not None:
        backend = config.auth.method
        sources = {**config.auth.credentials, **overrides}
    else:
        entry = stored_entry(address, config, store)
        if entry is None or overrides:
            raise InvalidUsageError(
                "No login method given. Pass --method, configure 'auth' "
                "with 'vaultkit config set', or run 'vaultkit login' first."
            )
        return AuthBackend.TOKEN, {"token": entry.token}

    exchanger = create_default_registry().get(backend)
    fields = list(exchanger.credential_type.model_fields)
    unknown = sorted(set(sources) - set(fields))
    if unknown:
        raise InvalidUsageError(
            f"Backend '{backend.value}' has no credential field(s) "
            f"{', '.join(unknown)}; expected {', '.join(fields)}"
        )
    filled = AuthConfig(
        method=backend,
        credentials={name: sources.get(name, "prompt") for name in fields},
    )
    return backend, resolve_auth_credentials(filled)


def remember_login(
    session: VaultSession,
    backend: AuthBackend,
    address: str,
    config: GlobalConfig,
    store: TokenStore,
    previous: Any = None,
) -> None:
    """Save the session's token to *store* if it changed and persistence is on."""
    if not config.persist_token:
        return
    token, metadata = session.snapshot()
    if token is None or token == previous:
        return
    store.save(TokenEntry(backend=backend, token=token, address=address, metadata=metadata))
    debug(f"Token saved to {store.path}")
