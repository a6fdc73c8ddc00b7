"""Persistent token file shared by CLI invocations.

``vaultkit login`` writes the issued token to
``~/.local/share/vaultkit/token.json`` (XDG) or the platform-equivalent
directory, so a following ``vaultkit read`` in another process can start
its :class:`~vaultkit.session.VaultSession` with it.  The library session
itself never touches this file.

The file is written atomically with ``0o600`` permissions via
:func:`~vaultkit.config.atomic_write`.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from vaultkit.config import atomic_write, get_data_dir
from vaultkit.models import AuthBackend

_TOKEN_FILENAME = "token.json"


class TokenEntry(BaseModel):
    """A stored token and the login that produced it.

    Attributes:
        backend: The auth backend the token was obtained through.
        token: The client token.
        address: The store address the token was issued by.
        issued_at: UTC time of the login.
        metadata: The login response's ``auth`` section, minus the token.
    """

    backend: AuthBackend
    token: str = Field(repr=False)
    address: Optional[str] = None
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = Field(default_factory=dict)


class TokenStore:
    """Read/write the CLI's token file.

    Args:
        path: Optional explicit file path; defaults to ``token.json`` in
            the data directory.

    Example::

        store = TokenStore()
        store.save(TokenEntry(backend="token", token="hvs.abc"))
        assert store.load().token == "hvs.abc"
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or get_data_dir() / _TOKEN_FILENAME

    @property
    def path(self) -> Path:
        """The filesystem path of the token file."""
        return self._path

    def save(self, entry: TokenEntry) -> None:
        """Persist *entry* atomically with ``0o600`` permissions.

        Raises:
            OSError: If the file cannot be written.
        """
        data = entry.model_dump(mode="json")
        atomic_write(self._path, json.dumps(data, indent=2) + "\n", mode=0o600)

    def load(self) -> Optional[TokenEntry]:
        """Load the stored entry.

        Returns:
            The :class:`TokenEntry`, or ``None`` if the file does not exist
            or cannot be parsed.
        """
        if not self._path.is_file():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return TokenEntry.model_validate(data)
        except (json.JSONDecodeError, ValueError, OSError):
            return None

    def clear(self) -> bool:
        """Delete the token file.

        Returns:
            ``True`` if a file was removed, ``False`` if there was none.
        """
        if self._path.is_file():
            self._path.unlink()
            return True
        return False
