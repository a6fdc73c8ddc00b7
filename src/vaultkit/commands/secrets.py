"""Secret commands -- ``vaultkit read`` and ``vaultkit write``.

Both run through :class:`~vaultkit.session.VaultSession`, so a missing or
rejected token triggers one login with the configured (or given) backend
before the request is retried.  A token obtained that way is stored for
the next invocation.
"""

from __future__ import annotations

from typing import Optional

import typer

from vaultkit.auth.token_store import TokenStore
from vaultkit.commands.common import (
    current_address,
    fail,
    load_config,
    open_session,
    parse_assignments,
    remember_login,
    resolve_login,
)
from vaultkit.exceptions import NotFoundError, VaultkitError
from vaultkit.output import format_secret, print_data, success

_METHOD_HELP = "Auth backend to log in with if needed (defaults to the configured one)."
_CREDENTIAL_HELP = "Credential field source for --method, e.g. 'password=prompt'. Repeatable."


def read_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Secret path, e.g. 'secret/foo'."),
    field: Optional[str] = typer.Option(
        None, "--field", "-F", help="Print only this field of the secret."
    ),
    method: Optional[str] = typer.Option(None, "--method", "-m", help=_METHOD_HELP),
    credential: Optional[list[str]] = typer.Option(
        None, "--credential", "-c", help=_CREDENTIAL_HELP
    ),
) -> None:
    """Read a secret and print its data.

    Example::

        vaultkit read secret/foo
        vaultkit read secret/foo --field value
        vaultkit --json read secret/foo | jq .
    """
    config = load_config()
    address = current_address(ctx, config)
    store = TokenStore()

    try:
        backend, cred = resolve_login(method, credential, address, config, store)
        with open_session(address, config, store) as session:
            previous = session.get_token()
            result = session.read(path, backend, cred)
            remember_login(session, backend, address, config, store, previous)
    except VaultkitError as exc:
        fail(exc)

    if not result.ok:
        fail(result.to_exception())

    data = result.value
    if field is None:
        format_secret(data)
        return
    if not isinstance(data, dict) or field not in data:
        fail(NotFoundError(f"Field '{field}' not present in {path}"))
    value = data[field]
    if isinstance(value, (dict, list)):
        format_secret(value)
    else:
        print_data(str(value))


def write_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Secret path, e.g. 'secret/foo'."),
    pairs: list[str] = typer.Argument(help="Data as key=value pairs."),
    method: Optional[str] = typer.Option(None, "--method", "-m", help=_METHOD_HELP),
    credential: Optional[list[str]] = typer.Option(
        None, "--credential", "-c", help=_CREDENTIAL_HELP
    ),
) -> None:
    """Write key=value data to a secret path.

    Example::

        vaultkit write secret/foo value=bar ttl=1h
    """
    config = load_config()
    address = current_address(ctx, config)
    store = TokenStore()

    try:
        payload = parse_assignments(pairs, "data pair")
        backend, cred = resolve_login(method, credential, address, config, store)
        with open_session(address, config, store) as session:
            previous = session.get_token()
            result = session.write(path, payload, backend, cred)
            remember_login(session, backend, address, config, store, previous)
    except VaultkitError as exc:
        fail(exc)

    if not result.ok:
        fail(result.to_exception())

    if result.value is None:
        success(f"Data written to {path}.")
    else:
        format_secret(result.value)
