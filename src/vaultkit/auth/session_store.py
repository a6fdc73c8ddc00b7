"""In-memory holder of the session's single live token.

The store keeps at most one token plus the metadata its login returned.
A new :meth:`SessionStore.set` replaces both unconditionally; nothing is
merged and the old token is not revoked.  There is no local expiry
tracking: a stale token is discovered when the store rejects it.
"""

from __future__ import annotations

import threading
from typing import Any, Optional


class SessionStore:
    """Thread-safe container for the current token and its metadata.

    Every accessor takes an internal lock, so a reader never sees a new
    token paired with the previous login's metadata.

    Args:
        token: Optional token to start with (e.g. loaded from the CLI's
            token file).
        metadata: Metadata to pair with *token*.

    Example::

        store = SessionStore()
        store.set("hvs.abc", {"policies": ["default"]})
        assert store.get() == "hvs.abc"
    """

    def __init__(
        self,
        token: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._token = token
        self._metadata: dict[str, Any] = dict(metadata or {}) if token else {}

    def get(self) -> Optional[str]:
        """Return the current token, or ``None`` before any login."""
        with self._lock:
            return self._token

    def set(self, token: str, metadata: Optional[dict[str, Any]] = None) -> None:
        """Replace the current token and metadata."""
        with self._lock:
            self._token = token
            self._metadata = dict(metadata or {})

    def clear(self) -> None:
        """Forget the current token and metadata."""
        with self._lock:
            self._token = None
            self._metadata = {}

    @property
    def metadata(self) -> dict[str, Any]:
        """A copy of the metadata returned by the last login."""
        with self._lock:
            return dict(self._metadata)

    def snapshot(self) -> tuple[Optional[str], dict[str, Any]]:
        """Return ``(token, metadata)`` read under a single lock acquisition."""
        with self._lock:
            return self._token, dict(self._metadata)
