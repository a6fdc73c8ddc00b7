"""GitHub auth backend.

Trades a GitHub personal access token for a store token at
``auth/github/login``; the store checks the token's organisation and team
membership against its own mapping.
"""

from __future__ import annotations

from vaultkit.auth.base import Exchanger, LoginRequest
from vaultkit.models import AuthBackend, GithubCredential


class GithubExchanger(Exchanger):
    """Log in with a GitHub personal access token."""

    backend = AuthBackend.GITHUB
    credential_type = GithubCredential

    def prepare(self, credential: GithubCredential) -> LoginRequest:
        return LoginRequest(
            path="auth/github/login",
            body={"token": credential.token.get_secret_value()},
        )
