"""Token auth backend.

The caller already holds a store token.  It is trusted as-is: no request
is sent, and an invalid token only shows up when the store rejects the
next read or write.
"""

from __future__ import annotations

from vaultkit.auth.base import Exchanger, TokenGrant
from vaultkit.models import AuthBackend, TokenCredential


class TokenExchanger(Exchanger):
    """Adopt an existing token without contacting the store."""

    backend = AuthBackend.TOKEN
    credential_type = TokenCredential

    def prepare(self, credential: TokenCredential) -> TokenGrant:
        return TokenGrant(token=credential.token.get_secret_value())
