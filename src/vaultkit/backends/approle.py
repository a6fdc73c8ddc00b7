"""AppRole auth backend.

Exchanges a ``role_id`` / ``secret_id`` pair at ``auth/approle/login``.
This is the backend intended for machines and CI jobs.
"""

from __future__ import annotations

from vaultkit.auth.base import Exchanger, LoginRequest
from vaultkit.models import AppRoleCredential, AuthBackend


class AppRoleExchanger(Exchanger):
    """Log in with an AppRole ``role_id`` and ``secret_id``."""

    backend = AuthBackend.APPROLE
    credential_type = AppRoleCredential

    def prepare(self, credential: AppRoleCredential) -> LoginRequest:
        return LoginRequest(
            path="auth/approle/login",
            body={
                "role_id": credential.role_id,
                "secret_id": credential.secret_id.get_secret_value(),
            },
        )
