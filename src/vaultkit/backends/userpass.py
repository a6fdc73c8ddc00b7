"""Username/password auth backend.

The username is part of the login path (``auth/userpass/login/<username>``)
and only the password travels in the body.
"""

from __future__ import annotations

from urllib.parse import quote

from vaultkit.auth.base import Exchanger, LoginRequest
from vaultkit.models import AuthBackend, UserpassCredential


class UserpassExchanger(Exchanger):
    """Log in with a username and password."""

    backend = AuthBackend.USERPASS
    credential_type = UserpassCredential

    def prepare(self, credential: UserpassCredential) -> LoginRequest:
        return LoginRequest(
            path=f"auth/userpass/login/{quote(credential.username, safe='')}",
            body={"password": credential.password.get_secret_value()},
        )
