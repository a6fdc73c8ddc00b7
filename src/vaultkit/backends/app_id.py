"""App-ID auth backend.

The store's deprecated predecessor of AppRole, still found on older
deployments.  Posts ``app_id`` and ``user_id`` to ``auth/app-id/login``.
"""

from __future__ import annotations

from vaultkit.auth.base import Exchanger, LoginRequest
from vaultkit.models import AppIdCredential, AuthBackend


class AppIdExchanger(Exchanger):
    """Log in with an ``app_id`` / ``user_id`` pair."""

    backend = AuthBackend.APP_ID
    credential_type = AppIdCredential

    def prepare(self, credential: AppIdCredential) -> LoginRequest:
        return LoginRequest(
            path="auth/app-id/login",
            body={
                "app_id": credential.app_id,
                "user_id": credential.user_id.get_secret_value(),
            },
        )
