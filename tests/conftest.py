"""Shared test fixtures for vaultkit.

Provides a scripted fake transport (sync and async), isolated config and
data directories, output-state management, and a CLI runner.  These
fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from vaultkit.client.base import AsyncTransport, Transport, TransportResponse
from vaultkit.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Fake transports
# ---------------------------------------------------------------------------


class FakeTransport(Transport):
    """Transport that records requests and answers from a script.

    ``routes`` maps ``(method, url)`` to a list of replies consumed in
    order; the last reply is repeated once the list runs out.  A reply may
    be a :class:`TransportResponse`, an exception to raise, or a callable
    taking the request headers and returning either.
    """

    def __init__(self, routes: Optional[dict[tuple[str, str], list[Any]]] = None) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = routes or {}
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def add(self, method: str, url: str, *replies: Any) -> FakeTransport:
        self.routes.setdefault((method, url), []).extend(replies)
        return self

    def calls_to(self, url: str) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["url"] == url]

    def _reply(
        self, method: str, url: str, headers: Optional[dict[str, str]], body: Any
    ) -> TransportResponse:
        self.calls.append(
            {"method": method, "url": url, "headers": dict(headers or {}), "body": body}
        )
        replies = self.routes.get((method, url))
        if not replies:
            return TransportResponse(404, {"errors": []})
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if callable(reply) and not isinstance(reply, TransportResponse):
            reply = reply(dict(headers or {}))
        if isinstance(reply, Exception):
            raise reply
        return reply

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        body: Any = None,
    ) -> TransportResponse:
        return self._reply(method, url, headers, body)

    def close(self) -> None:
        self.closed = True


class FakeAsyncTransport(AsyncTransport):
    """asyncio wrapper around a :class:`FakeTransport` script."""

    def __init__(self, inner: Optional[FakeTransport] = None) -> None:
        self.inner = inner or FakeTransport()
        self.closed = False

    @property
    def calls(self) -> list[dict[str, Any]]:
        return self.inner.calls

    def add(self, method: str, url: str, *replies: Any) -> FakeAsyncTransport:
        self.inner.add(method, url, *replies)
        return self

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        body: Any = None,
    ) -> TransportResponse:
        return self.inner._reply(method, url, headers, body)

    async def aclose(self) -> None:
        self.closed = True


def login_ok(token: str, **extra: Any) -> TransportResponse:
    """A successful login response carrying *token*."""
    return TransportResponse(200, {"auth": {"client_token": token, **extra}})


def secret_ok(data: dict[str, Any]) -> TransportResponse:
    return TransportResponse(200, {"data": data, "lease_duration": 2764800})


def errors(status: int, *messages: str) -> TransportResponse:
    return TransportResponse(status, {"errors": list(messages)})


def token_gate(valid: str, ok: TransportResponse) -> Callable[[dict[str, str]], TransportResponse]:
    """Reply *ok* only to requests presenting *valid* in ``X-Vault-Token``."""

    def reply(headers: dict[str, str]) -> TransportResponse:
        if headers.get("X-Vault-Token") == valid:
            return ok
        return errors(403, "permission denied")

    return reply


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def async_transport() -> FakeAsyncTransport:
    return FakeAsyncTransport()


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.  The ``vaultkit`` logger is restored for
    the same reason: the CLI callback binds a handler to stderr.
    """
    yield
    reset_output()
    logger = logging.getLogger("vaultkit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def quiet_output() -> OutputManager:
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# Isolated config environment
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config/data dirs at *tmp_path* and clear ``VAULT_*`` vars.

    Returns the tmp_path root so tests can inspect written files.
    """
    monkeypatch.setattr("vaultkit.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ("VAULT_ADDR", "VAULT_SCHEME", "VAULT_HOST", "VAULT_PORT", "NO_COLOR"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()

