"""Canonical Pydantic models shared across all vaultkit modules.

The models fall into two groups:

**Session models** -- the auth backend tag and the credential shapes each
backend accepts:
    :class:`AuthBackend`, :class:`AppRoleCredential`,
    :class:`AppIdCredential`, :class:`UserpassCredential`,
    :class:`GithubCredential`, and :class:`TokenCredential`.

**Configuration models** -- serialised as JSON in the user's config
directory:
    :class:`RequestConfig`, :class:`AuthConfig`, :class:`OutputConfig`,
    and :class:`GlobalConfig`.

Credentials are frozen and keep their secret halves in
:class:`~pydantic.SecretStr` so that a stray ``repr`` or log line never
prints them.
"""

from __future__ import annotations

import enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


# --- Auth backends ---


class AuthBackend(str, enum.Enum):
    """The closed set of auth backends a session can log in with.

    The value is the tag used in configuration files and on the command
    line (``vaultkit login userpass ...``).
    """

    APPROLE = "approle"
    APP_ID = "app_id"
    USERPASS = "userpass"
    GITHUB = "github"
    TOKEN = "token"


# --- Credentials ---


class _Credential(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("*")
    @classmethod
    def _not_empty(cls, value: Union[str, SecretStr]) -> Union[str, SecretStr]:
        raw = value.get_secret_value() if isinstance(value, SecretStr) else value
        if not raw:
            raise ValueError("must not be empty")
        return value


class AppRoleCredential(_Credential):
    """``role_id`` / ``secret_id`` pair for the ``approle`` backend."""

    role_id: str
    secret_id: SecretStr


class AppIdCredential(_Credential):
    """``app_id`` / ``user_id`` pair for the legacy ``app-id`` backend."""

    app_id: str
    user_id: SecretStr


class UserpassCredential(_Credential):
    """``username`` / ``password`` pair for the ``userpass`` backend."""

    username: str
    password: SecretStr


class GithubCredential(_Credential):
    """A GitHub personal access token for the ``github`` backend."""

    token: SecretStr


class TokenCredential(_Credential):
    """An existing store token, used as-is by the ``token`` backend."""

    token: SecretStr


Credential = Union[
    AppRoleCredential,
    AppIdCredential,
    UserpassCredential,
    GithubCredential,
    TokenCredential,
]


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP settings applied to every call the transport makes."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    max_retries: int = Field(
        default=2, description="Retries on 5xx and network errors"
    )


class AuthConfig(BaseModel):
    """Default login used by ``vaultkit read`` / ``write`` when none is given.

    ``credentials`` maps each credential field of the chosen backend to a
    *source* string resolved by :func:`~vaultkit.config.resolve_credential`
    (``env:VAR``, ``file:/path``, ``prompt``, or ``value:literal``).

    Example::

        AuthConfig(
            method="userpass",
            credentials={"username": "value:alice", "password": "env:VAULT_PASSWORD"},
        )
    """

    method: AuthBackend
    credentials: dict[str, str] = Field(default_factory=dict)


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/vaultkit/config.json``.

    The address fields feed :func:`~vaultkit.config.resolve_address`;
    ``vault_addr`` is a full address and wins over the individual
    ``scheme`` / ``host`` / ``port`` settings for every component it
    specifies.
    """

    vault_addr: Optional[str] = Field(
        default=None, description="Full store address, e.g. https://vault:8200"
    )
    scheme: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    persist_token: bool = Field(
        default=True, description="Keep the CLI token between invocations"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    auth: Optional[AuthConfig] = None
    output: OutputConfig = Field(default_factory=OutputConfig)
