"""Auth commands -- log in, inspect and drop the stored token.

The token obtained by ``vaultkit login`` is kept in the
:class:`~vaultkit.auth.token_store.TokenStore` so later ``read`` / ``write``
invocations start already authenticated.

Typical workflow::

    vaultkit login userpass -c username=value:alice -c password=prompt
    vaultkit status
    vaultkit read secret/foo
    vaultkit logout
"""

from __future__ import annotations

from typing import Optional

import typer

from vaultkit.auth.token_store import TokenStore
from vaultkit.commands.common import (
    current_address,
    fail,
    load_config,
    remember_login,
    resolve_login,
)
from vaultkit.exceptions import AuthError, VaultkitError
from vaultkit.exit_codes import EXIT_AUTH_FAILURE
from vaultkit.output import get_output, info, print_data, success, suggest
from vaultkit.results import LoginFailed
from vaultkit.session import VaultSession


def login_command(
    ctx: typer.Context,
    method: str = typer.Argument(
        help="Auth backend: approle, app_id, userpass, github or token."
    ),
    credential: Optional[list[str]] = typer.Option(
        None,
        "--credential",
        "-c",
        help="Credential field source, e.g. 'password=env:VAULT_PASSWORD'. Repeatable.",
    ),
) -> None:
    """Log in and store the issued token.

    Each credential field takes a source (``env:VAR``, ``file:/path``,
    ``prompt`` or ``value:literal``); fields without one are prompted for.

    Example::

        vaultkit login approle -c role_id=value:web -c secret_id=file:/run/secret_id
        vaultkit login token -c token=env:VAULT_TOKEN
    """
    config = load_config()
    address = current_address(ctx, config)
    store = TokenStore()

    try:
        backend, cred = resolve_login(method, credential, address, config, store)
        with VaultSession.from_config(config, address=address) as session:
            result = session.authenticate(backend, cred)
            if isinstance(result, LoginFailed):
                fail(result.to_exception())
            remember_login(session, backend, address, config, store)
    except VaultkitError as exc:
        fail(exc)

    success(f"Logged in to {address} via {backend.value}.")
    if not config.persist_token:
        info("Token persistence is off; the token was not saved.")
    suggest("vaultkit read <path>")


def token_command() -> None:
    """Print the stored token to stdout.

    Exits with code 3 when no token is stored.

    Example::

        export VAULT_TOKEN=$(vaultkit token)
    """
    entry = TokenStore().load()
    if entry is None:
        suggest("vaultkit login <method>")
        fail(AuthError("Not logged in"))
    print_data(entry.token)


def logout_command() -> None:
    """Forget the stored token.

    The token is only removed locally; it is not revoked on the store.
    """
    if TokenStore().clear():
        success("Logged out.")
    else:
        info("No stored token.")


def status_command() -> None:
    """Show the stored login: backend, address, issue time and policies."""
    entry = TokenStore().load()
    if entry is None:
        info("Not logged in.")
        suggest("vaultkit login <method>")
        raise typer.Exit(code=EXIT_AUTH_FAILURE)

    policies = entry.metadata.get("policies") or []
    rows = [
        ["backend", entry.backend.value],
        ["address", entry.address or "-"],
        ["issued_at", entry.issued_at.isoformat()],
        ["policies", ", ".join(str(p) for p in policies) or "-"],
    ]
    lease = entry.metadata.get("lease_duration")
    if lease is not None:
        rows.append(["lease_duration", str(lease)])
    get_output().print_table(["field", "value"], rows, title="Login")
