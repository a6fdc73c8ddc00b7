"""Tests for single-shot secret reads and writes."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeAsyncTransport, FakeTransport, errors, secret_ok
from vaultkit.auth.session_store import SessionStore
from vaultkit.client.base import TransportError, TransportResponse
from vaultkit.exceptions import ConnectionError_, NotFoundError, ServerError
from vaultkit.results import AuthFailure, NotAuthenticated, Ok, OtherFailure
from vaultkit.secrets import (
    TOKEN_HEADER,
    AsyncSecretExecutor,
    SecretExecutor,
    build_request,
    classify_response,
)


class TestBuildRequest:
    def test_read(self) -> None:
        assert build_request("read", "/secret/foo", "t") == (
            "GET",
            "secret/foo",
            {TOKEN_HEADER: "t"},
            None,
        )

    def test_write(self) -> None:
        method, url, headers, body = build_request("write", "secret/foo", "t", {"v": "1"})
        assert (method, url, body) == ("POST", "secret/foo", {"v": "1"})
        assert headers == {"X-Vault-Token": "t"}


class TestClassifyResponse:
    def test_read_returns_data(self) -> None:
        assert classify_response("read", secret_ok({"value": "bar"})) == Ok(value={"value": "bar"})

    def test_read_without_data_is_other(self) -> None:
        result = classify_response("read", TransportResponse(200, {"auth": None}))
        assert isinstance(result, OtherFailure)

    def test_write_204(self) -> None:
        assert classify_response("write", TransportResponse(204)) == Ok(value=None)

    def test_write_with_body(self) -> None:
        result = classify_response("write", TransportResponse(200, {"data": {"v": 2}}))
        assert result == Ok(value={"data": {"v": 2}})

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_failures(self, status: int) -> None:
        result = classify_response("read", errors(status, "permission denied"))
        assert type(result) is AuthFailure
        assert result.messages == ["permission denied"]

    def test_403_without_errors(self) -> None:
        result = classify_response("read", TransportResponse(403))
        assert isinstance(result, AuthFailure)
        assert result.messages == ["permission denied (HTTP 403)"]

    def test_404_empty_errors_is_key_not_found(self) -> None:
        result = classify_response("read", errors(404))
        assert result == OtherFailure(messages=["Key not found"], status=404)
        assert isinstance(result.to_exception(), NotFoundError)

    def test_404_with_errors_kept(self) -> None:
        result = classify_response("read", errors(404, "no handler for route"))
        assert result.messages == ["no handler for route"]

    def test_server_error(self) -> None:
        result = classify_response("write", errors(500, "internal error"))
        assert result == OtherFailure(messages=["internal error"], status=500)
        assert isinstance(result.to_exception(), ServerError)

    def test_non_json_error_body(self) -> None:
        result = classify_response("read", TransportResponse(502, "<html/>"))
        assert result.messages == ["HTTP 502"]


class TestSecretExecutor:
    def test_no_token_sends_nothing(self, transport: FakeTransport) -> None:
        result = SecretExecutor(SessionStore(), transport).read("secret/foo")
        assert isinstance(result, NotAuthenticated)
        assert result.messages == ["not authenticated"]
        assert transport.calls == []

    def test_uses_store_token(self, transport: FakeTransport) -> None:
        transport.add("GET", "secret/foo", secret_ok({"value": "bar"}))
        result = SecretExecutor(SessionStore(token="hvs.a"), transport).read("secret/foo")
        assert result.value == {"value": "bar"}
        assert transport.calls[0]["headers"] == {"X-Vault-Token": "hvs.a"}

    def test_explicit_token_wins(self, transport: FakeTransport) -> None:
        transport.add("POST", "secret/foo", TransportResponse(204))
        executor = SecretExecutor(SessionStore(token="hvs.a"), transport)
        executor.write("secret/foo", {"value": "bar"}, token="hvs.b")
        assert transport.calls[0]["headers"] == {"X-Vault-Token": "hvs.b"}
        assert transport.calls[0]["body"] == {"value": "bar"}

    def test_transport_error_is_other_failure(self, transport: FakeTransport) -> None:
        transport.add("GET", "secret/foo", TransportError("Connection failed after 3 attempts"))
        result = SecretExecutor(SessionStore(token="t"), transport).read("secret/foo")
        assert isinstance(result, OtherFailure)
        assert result.status is None
        assert isinstance(result.to_exception(), ConnectionError_)

    def test_async_read(self, async_transport: FakeAsyncTransport) -> None:
        async_transport.add("GET", "secret/foo", secret_ok({"value": "bar"}))
        executor = AsyncSecretExecutor(SessionStore(token="t"), async_transport)
        result = asyncio.run(executor.read("secret/foo"))
        assert result == Ok(value={"value": "bar"})
