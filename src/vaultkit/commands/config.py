"""Config commands -- view and modify global configuration.

Provides the ``vaultkit config`` sub-command group for reading, updating
and resetting the user's global configuration file
(:class:`~vaultkit.models.GlobalConfig`).  Settings control the store
address, request behaviour, the default login used by ``read`` /
``write``, and output format.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from vaultkit.output import error, format_secret, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Credential *sources* are shown as written; they are never resolved
    here.

    Example::

        vaultkit config show
        vaultkit --json config show
    """
    from vaultkit.config import get_config_dir, load_global_config
    from vaultkit.exceptions import VaultkitError

    try:
        config = load_global_config()
    except VaultkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_secret(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'request.timeout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys.  The value is coerced to match the
    existing field's type (bool or int); unset optional fields take the
    string as given.  ``auth.method`` and ``auth.credentials.<field>``
    create the ``auth`` section on first use.  The updated config is
    validated against :class:`~vaultkit.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        vaultkit config set vault_addr https://vault.example.com:8200
        vaultkit config set request.timeout 10
        vaultkit config set auth.method userpass
        vaultkit config set auth.credentials.password env:VAULT_PASSWORD
    """
    from vaultkit.config import load_global_config, save_global_config
    from vaultkit.exceptions import VaultkitError
    from vaultkit.models import GlobalConfig

    try:
        config = load_global_config()
    except VaultkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    if keys[0] == "auth" and data.get("auth") is None:
        data["auth"] = {"method": None, "credentials": {}}

    # Navigate the dot-separated key path.
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    free_form = keys[:-1] == ["auth", "credentials"]
    if final_key not in target and not free_form:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target.get(final_key)
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int) or (current is None and final_key == "port"):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value  # type: ignore[assignment]

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        vaultkit config reset
        vaultkit --force config reset
    """
    from vaultkit.config import save_global_config
    from vaultkit.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
