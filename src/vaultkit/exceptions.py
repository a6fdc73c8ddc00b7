"""Exception hierarchy for vaultkit.

The session API reports store-side failures as result values (see
:mod:`vaultkit.results`); exceptions are reserved for caller contract
violations, configuration problems, and the CLI's exit-code mapping.

All exceptions inherit from :class:`VaultkitError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`vaultkit.exit_codes`.
The top-level handler in :func:`vaultkit.app.main` catches
``VaultkitError`` and exits with the appropriate code.

Subclass hierarchy::

    VaultkitError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from vaultkit.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class VaultkitError(Exception):
    """Base exception for all vaultkit errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(VaultkitError):
    """Raised for contract violations: unknown backend, credential of the wrong shape, bad CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(VaultkitError):
    """Raised when a login is rejected or the store refuses the session token."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(VaultkitError):
    """Raised when the store has no secret at the requested path."""

    exit_code = EXIT_NOT_FOUND


class ServerError(VaultkitError):
    """Raised for HTTP 5xx and any other unexpected status from the store."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(VaultkitError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(VaultkitError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
