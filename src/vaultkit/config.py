"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for vaultkit:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.vaultkit/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~vaultkit.models.GlobalConfig`
  JSON file storing the store address, request settings and the default
  login.
* **Address resolution** -- :func:`resolve_address` assembles the store's
  ``scheme://host:port/v1/`` prefix from a full address, per-component
  overrides, and defaults.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from env vars, files, interactive prompts, or literals.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

from vaultkit.exceptions import ConfigError
from vaultkit.models import AuthConfig, GlobalConfig

_APP_NAME = "vaultkit"
_CONFIG_FILENAME = "config.json"
_API_VERSION = "v1"

DEFAULT_SCHEME = "http"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8200

_SCHEME_DEFAULT_PORTS = {"http": 80, "https": 443}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory layout (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/vaultkit/`` (default ``~/.config/vaultkit/``).
    On macOS/Windows: ``~/.vaultkit/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (token file, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/vaultkit/`` (default ``~/.local/share/vaultkit/``).
    On macOS/Windows: ``~/.vaultkit/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems.  When *mode* is
    given the permissions are applied before any content is written, so a
    secret is never readable by others, even momentarily.

    Args:
        path: Destination file.
        data: Text content to write.
        mode: Optional permission bits, e.g. ``0o600``.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        if mode is not None:
            os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~vaultkit.models.GlobalConfig`, or a
        default instance if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Address resolution ---


def resolve_address(
    config: Optional[GlobalConfig] = None,
    address: Optional[str] = None,
) -> str:
    """Assemble the store's API prefix, ``scheme://host:port/v1/``.

    Precedence for the full address (high to low):
        1. *address* (the ``--address`` CLI flag)
        2. ``vault_addr`` in the config file
        3. ``VAULT_ADDR`` environment variable

    Each component the full address specifies wins.  Components it leaves
    out fall back to, in order, the ``VAULT_SCHEME`` / ``VAULT_HOST`` /
    ``VAULT_PORT`` environment variables, the config file's ``scheme`` /
    ``host`` / ``port``, and the defaults ``http``, ``localhost``, ``8200``.
    A full address with a scheme but no port uses the scheme's standard
    port (80 or 443).

    Args:
        config: The loaded global config; defaults are used when ``None``.
        address: An explicit full address overriding everything else.

    Returns:
        The URL prefix, always ending in ``/v1/``.

    Raises:
        ConfigError: If an address or ``VAULT_PORT`` has an invalid port.
    """
    config = config or GlobalConfig()
    full = address or config.vault_addr or os.environ.get("VAULT_ADDR") or ""

    addr_scheme: Optional[str] = None
    addr_host: Optional[str] = None
    addr_port: Optional[int] = None
    if full:
        parsed = urlsplit(full if "://" in full else f"//{full}")
        addr_scheme = parsed.scheme or None
        addr_host = parsed.hostname
        try:
            addr_port = parsed.port
        except ValueError as exc:
            raise ConfigError(f"Invalid port in store address '{full}'") from exc
        if addr_port is None and addr_scheme in _SCHEME_DEFAULT_PORTS:
            addr_port = _SCHEME_DEFAULT_PORTS[addr_scheme]

    scheme = (
        addr_scheme
        or os.environ.get("VAULT_SCHEME")
        or config.scheme
        or DEFAULT_SCHEME
    )
    host = addr_host or os.environ.get("VAULT_HOST") or config.host or DEFAULT_HOST
    port = addr_port or _env_port() or config.port or DEFAULT_PORT

    if ":" in host:
        host = f"[{host}]"
    return f"{scheme}://{host}:{port}/{_API_VERSION}/"


def _env_port() -> Optional[int]:
    value = os.environ.get("VAULT_PORT")
    if not value:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"VAULT_PORT must be an integer, got '{value}'") from exc


# --- Credential source resolution ---


def resolve_credential(source: str, label: str = "credential") -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts the user without echo (requires a TTY)
        - ``"value:literal"`` -- the text after the prefix, as-is

    Args:
        source: The source descriptor string.
        label: Name shown in the interactive prompt.

    Returns:
        The resolved credential string.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                f"Cannot prompt for {label}: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass(f"{label}: ")

    if source.startswith("value:"):
        return source[6:]

    raise ConfigError(f"Unknown credential source format: {source}")


def resolve_auth_credentials(auth: AuthConfig) -> dict[str, str]:
    """Resolve every source in *auth.credentials* to its secret value.

    Returns:
        A mapping of credential field name to value, ready to pass as the
        credential for ``auth.method``.
    """
    return {
        name: resolve_credential(source, label=name)
        for name, source in auth.credentials.items()
    }
