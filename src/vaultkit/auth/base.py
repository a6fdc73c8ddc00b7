"""Abstract base class for backend credential exchangers.

This module defines the foundational types of the auth subsystem:

- :class:`LoginRequest` -- the method, path and body of a backend's login
  call.
- :class:`TokenGrant` -- the client token (and the rest of the ``auth``
  section) a successful login yields.
- :class:`Exchanger` -- the abstract base class every auth backend
  extends.

Exchangers are split into pure steps (:meth:`~Exchanger.prepare` and
:meth:`~Exchanger.parse_login`) with the single network call between
them done by :meth:`~Exchanger.exchange` or
:meth:`~Exchanger.exchange_async`, so the blocking and asyncio sessions
share one implementation per backend.

To add a backend, subclass :class:`Exchanger`, set :attr:`backend` and
:attr:`credential_type`, implement :meth:`prepare`, and register an
instance with :class:`~vaultkit.auth.coordinator.ExchangerRegistry`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ValidationError

from vaultkit.client.base import AsyncTransport, Transport, TransportError, TransportResponse
from vaultkit.exceptions import InvalidUsageError
from vaultkit.models import AuthBackend
from vaultkit.results import LoginFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginRequest:
    """A backend's login call, relative to the store's ``/v1/`` prefix."""

    path: str
    body: dict[str, Any]
    method: str = "POST"


@dataclass(frozen=True)
class TokenGrant:
    """The outcome of a successful exchange.

    Attributes:
        token: The client token to present on later requests.
        metadata: The rest of the login response's ``auth`` section
            (``policies``, ``accessor``, ``lease_duration``, ...), kept by
            the session store but never interpreted.
    """

    token: str = field(repr=False)
    metadata: dict[str, Any] = field(default_factory=dict)


ExchangeOutcome = Union[TokenGrant, LoginFailed]


class Exchanger(ABC):
    """Abstract base class for auth backend exchangers.

    Every concrete backend must provide:

    1. :attr:`backend` -- the :class:`~vaultkit.models.AuthBackend` it serves.
    2. :attr:`credential_type` -- the credential model it accepts.
    3. :meth:`prepare` -- the login request for a credential, or a
       :class:`TokenGrant` directly when no network call is needed.
    """

    backend: ClassVar[AuthBackend]
    credential_type: ClassVar[type[BaseModel]]

    def coerce_credential(self, credential: Any) -> Any:
        """Return *credential* as an instance of :attr:`credential_type`.

        Accepts an instance of the model itself, a tuple or list with one
        string per field (in declaration order), or a mapping of field names.

        Raises:
            InvalidUsageError: If the credential does not have the shape
                this backend expects.
        """
        cls = self.credential_type
        if isinstance(credential, cls):
            return credential

        names = list(cls.model_fields)
        expected = f"{cls.__name__}({', '.join(names)})"
        if isinstance(credential, BaseModel):
            raise InvalidUsageError(
                f"Backend '{self.backend.value}' expects {expected}, "
                f"got {type(credential).__name__}"
            )

        if isinstance(credential, (tuple, list)):
            if len(credential) != len(names):
                raise InvalidUsageError(
                    f"Backend '{self.backend.value}' expects a credential of "
                    f"{len(names)} value(s) {expected}, got {len(credential)}"
                )
            data: Any = dict(zip(names, credential))
        elif isinstance(credential, Mapping):
            data = dict(credential)
        else:
            raise InvalidUsageError(
                f"Backend '{self.backend.value}' expects {expected}, "
                f"got {type(credential).__name__}"
            )

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidUsageError(
                f"Invalid credential for backend '{self.backend.value}': "
                f"expected {expected} with non-empty string values"
            ) from exc

    @abstractmethod
    def prepare(self, credential: Any) -> LoginRequest | TokenGrant:
        """Build the login request for an already-coerced credential.

        Backends that need no network call return a :class:`TokenGrant`
        directly.
        """
        ...

    def parse_login(self, response: TransportResponse) -> ExchangeOutcome:
        """Interpret the login endpoint's response.

        Returns:
            A :class:`TokenGrant` when the body carries
            ``auth.client_token``; a :class:`~vaultkit.results.LoginFailed`
            with the store's ``errors`` list verbatim when there is one;
            otherwise a generic :class:`~vaultkit.results.LoginFailed`.
        """
        body = response.body
        if response.is_success and isinstance(body, dict):
            auth = body.get("auth")
            if isinstance(auth, dict) and isinstance(auth.get("client_token"), str):
                metadata = {k: v for k, v in auth.items() if k != "client_token"}
                return TokenGrant(token=auth["client_token"], metadata=metadata)

        errors = response.errors()
        if errors is not None:
            return LoginFailed(messages=errors)
        return LoginFailed(
            messages=[
                f"{self.backend.value} login failed: unexpected response "
                f"(HTTP {response.status})"
            ]
        )

    def exchange(self, credential: Any, transport: Transport) -> ExchangeOutcome:
        """Exchange *credential* for a token over a blocking transport.

        Raises:
            InvalidUsageError: If the credential has the wrong shape; no
                request is sent in that case.
        """
        step = self.prepare(self.coerce_credential(credential))
        if isinstance(step, TokenGrant):
            return step
        try:
            response = transport.request(step.method, step.path, body=step.body)
        except TransportError as exc:
            return self._transport_failure(exc)
        return self.parse_login(response)

    async def exchange_async(
        self, credential: Any, transport: AsyncTransport
    ) -> ExchangeOutcome:
        """Exchange *credential* for a token over an asyncio transport."""
        step = self.prepare(self.coerce_credential(credential))
        if isinstance(step, TokenGrant):
            return step
        try:
            response = await transport.request(step.method, step.path, body=step.body)
        except TransportError as exc:
            return self._transport_failure(exc)
        return self.parse_login(response)

    def _transport_failure(self, exc: TransportError) -> LoginFailed:
        logger.debug("%s login did not reach the store: %s", self.backend.value, exc)
        return LoginFailed(messages=[f"{self.backend.value} login failed: {exc}"])
