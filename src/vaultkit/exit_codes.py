"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~vaultkit.exceptions.VaultkitError` subclass.
Shell scripts can inspect the exit code of ``vaultkit read`` to tell a
rejected login apart from a missing secret without parsing stderr.

Example::

    $ vaultkit read secret/missing
    $ echo $?
    4   # EXIT_NOT_FOUND -- the store has no secret at that path
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or a malformed credential."""

EXIT_AUTH_FAILURE = 3
"""Authentication failed or the store rejected the token."""

EXIT_NOT_FOUND = 4
"""The requested secret path does not exist (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The store returned an HTTP 5xx error or an unexpected status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
