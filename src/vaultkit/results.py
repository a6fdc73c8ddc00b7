"""Result values returned by every session operation.

Store-side failures are never raised: :meth:`VaultSession.read`,
:meth:`~VaultSession.write` and :meth:`~VaultSession.authenticate` return
one of the classes below so the caller can inspect the store's own error
messages, which are passed through verbatim.

Hierarchy::

    Ok(value)
    Authenticated(backend, token)
    Failure(messages)
    +-- LoginFailed         credential rejected or exchange malformed
    +-- AuthFailure         token rejected by the store (retryable once)
    |   +-- NotAuthenticated  no token held at all
    +-- OtherFailure        not found, bad request, transport error

Only :class:`AuthFailure` (and its subclass) makes the session
re-authenticate.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field

from vaultkit.exceptions import (
    AuthError,
    ConnectionError_,
    NotFoundError,
    ServerError,
    VaultkitError,
)
from vaultkit.models import AuthBackend


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: ClassVar[bool] = False


class Ok(_Result):
    """A successful read or write.

    ``value`` is the secret's ``data`` mapping for reads, and either
    ``None`` (HTTP 204) or the decoded response body for writes.
    """

    ok: ClassVar[bool] = True

    value: Any = None


class Authenticated(_Result):
    """A successful login; the session now holds ``token``."""

    ok: ClassVar[bool] = True

    backend: AuthBackend
    token: str = Field(repr=False)


class Failure(_Result):
    """Base class for every failed outcome."""

    messages: list[str] = Field(default_factory=list)

    def __str__(self) -> str:
        return "; ".join(self.messages) or type(self).__name__

    def to_exception(self) -> VaultkitError:
        """Return the :class:`~vaultkit.exceptions.VaultkitError` the CLI exits with."""
        return ServerError(str(self))


class LoginFailed(Failure):
    """The auth backend rejected the credential, or the exchange failed."""

    def to_exception(self) -> VaultkitError:
        return AuthError(str(self))


class AuthFailure(Failure):
    """The store refused the session token (invalid, expired, or revoked)."""

    def to_exception(self) -> VaultkitError:
        return AuthError(str(self))


class NotAuthenticated(AuthFailure):
    """No token is held, so no request was sent."""

    messages: list[str] = Field(default_factory=lambda: ["not authenticated"])


class OtherFailure(Failure):
    """Any failure that re-authenticating would not fix.

    ``status`` is the HTTP status code, or ``None`` when the request never
    produced a response (network error).
    """

    status: Optional[int] = None

    def to_exception(self) -> VaultkitError:
        if self.status is None:
            return ConnectionError_(str(self))
        if self.status == 404:
            return NotFoundError(str(self))
        return ServerError(str(self))
