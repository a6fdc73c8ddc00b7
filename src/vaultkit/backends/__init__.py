"""Built-in auth backend exchangers.

One :class:`~vaultkit.auth.base.Exchanger` per
:class:`~vaultkit.models.AuthBackend` member:

- ``approle`` -- :class:`AppRoleExchanger`
- ``app_id`` -- :class:`AppIdExchanger`
- ``userpass`` -- :class:`UserpassExchanger`
- ``github`` -- :class:`GithubExchanger`
- ``token`` -- :class:`TokenExchanger` (no network call)

See Also:
    :func:`vaultkit.auth.coordinator.create_default_registry`, which
    registers all of them.
"""

from vaultkit.backends.app_id import AppIdExchanger
from vaultkit.backends.approle import AppRoleExchanger
from vaultkit.backends.github import GithubExchanger
from vaultkit.backends.token import TokenExchanger
from vaultkit.backends.userpass import UserpassExchanger

__all__ = [
    "AppIdExchanger",
    "AppRoleExchanger",
    "GithubExchanger",
    "TokenExchanger",
    "UserpassExchanger",
]
