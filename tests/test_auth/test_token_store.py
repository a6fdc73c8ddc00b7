"""Tests for the CLI's persistent token file."""

from __future__ import annotations

import stat
from pathlib import Path

from vaultkit.auth.token_store import TokenEntry, TokenStore
from vaultkit.models import AuthBackend


class TestTokenStore:
    def test_load_missing_returns_none(self, tmp_path: Path) -> None:
        assert TokenStore(tmp_path / "token.json").load() is None

    def test_save_then_load(self, tmp_path: Path) -> None:
        store = TokenStore(tmp_path / "token.json")
        store.save(
            TokenEntry(
                backend=AuthBackend.APPROLE,
                token="hvs.abc",
                address="http://localhost:8200/v1/",
                metadata={"policies": ["default"]},
            )
        )
        entry = store.load()
        assert entry is not None
        assert entry.backend is AuthBackend.APPROLE
        assert entry.token == "hvs.abc"
        assert entry.address == "http://localhost:8200/v1/"
        assert entry.metadata == {"policies": ["default"]}
        assert entry.issued_at.tzinfo is not None

    def test_file_is_owner_only(self, tmp_path: Path) -> None:
        store = TokenStore(tmp_path / "nested" / "token.json")
        store.save(TokenEntry(backend="token", token="hvs.abc"))
        mode = stat.S_IMODE(store.path.stat().st_mode)
        assert mode == 0o600

    def test_corrupt_file_returns_none(self, tmp_path: Path) -> None:
        path = tmp_path / "token.json"
        path.write_text("{not json")
        assert TokenStore(path).load() is None

    def test_invalid_entry_returns_none(self, tmp_path: Path) -> None:
        path = tmp_path / "token.json"
        path.write_text('{"backend": "kerberos", "token": "x"}')
        assert TokenStore(path).load() is None

    def test_clear(self, tmp_path: Path) -> None:
        store = TokenStore(tmp_path / "token.json")
        assert store.clear() is False
        store.save(TokenEntry(backend="token", token="hvs.abc"))
        assert store.clear() is True
        assert not store.path.exists()

    def test_default_path_in_data_dir(self, isolated_config: Path) -> None:
        store = TokenStore()
        assert store.path == isolated_config / "data" / "vaultkit" / "token.json"

    def test_token_not_in_repr(self) -> None:
        entry = TokenEntry(backend="token", token="hvs.secret")
        assert "hvs.secret" not in repr(entry)
