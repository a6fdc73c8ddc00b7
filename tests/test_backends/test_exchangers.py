"""Tests for the built-in backend exchangers."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeAsyncTransport, FakeTransport, errors, login_ok
from vaultkit.auth.base import LoginRequest, TokenGrant
from vaultkit.backends import (
    AppIdExchanger,
    AppRoleExchanger,
    GithubExchanger,
    TokenExchanger,
    UserpassExchanger,
)
from vaultkit.client.base import TransportError, TransportResponse
from vaultkit.exceptions import InvalidUsageError
from vaultkit.models import (
    AppRoleCredential,
    AuthBackend,
    GithubCredential,
    UserpassCredential,
)
from vaultkit.results import LoginFailed


# ---------------------------------------------------------------------------
# Request shapes
# ---------------------------------------------------------------------------


class TestPrepare:
    def test_approle(self) -> None:
        ex = AppRoleExchanger()
        req = ex.prepare(ex.coerce_credential(("web", "s3cret")))
        assert req == LoginRequest(
            path="auth/approle/login", body={"role_id": "web", "secret_id": "s3cret"}
        )

    def test_app_id(self) -> None:
        ex = AppIdExchanger()
        req = ex.prepare(ex.coerce_credential({"app_id": "app", "user_id": "u-1"}))
        assert req.path == "auth/app-id/login"
        assert req.body == {"app_id": "app", "user_id": "u-1"}

    def test_userpass_username_in_path(self) -> None:
        ex = UserpassExchanger()
        req = ex.prepare(ex.coerce_credential(("alice", "pw")))
        assert req.path == "auth/userpass/login/alice"
        assert req.body == {"password": "pw"}

    def test_userpass_username_is_escaped(self) -> None:
        ex = UserpassExchanger()
        req = ex.prepare(ex.coerce_credential(("a/b c", "pw")))
        assert req.path == "auth/userpass/login/a%2Fb%20c"

    def test_github(self) -> None:
        ex = GithubExchanger()
        req = ex.prepare(ex.coerce_credential(GithubCredential(token="ghp_x")))
        assert req.path == "auth/github/login"
        assert req.body == {"token": "ghp_x"}

    def test_token_needs_no_request(self) -> None:
        ex = TokenExchanger()
        grant = ex.prepare(ex.coerce_credential(("hvs.abc",)))
        assert grant == TokenGrant(token="hvs.abc")

    def test_all_logins_are_post(self) -> None:
        ex = AppRoleExchanger()
        assert ex.prepare(ex.coerce_credential(("r", "s"))).method == "POST"


# ---------------------------------------------------------------------------
# Credential shape validation
# ---------------------------------------------------------------------------


WRONG_SHAPES = [
    (AppRoleExchanger, ("only-role-id",)),
    (AppRoleExchanger, UserpassCredential(username="a", password="b")),
    (AppIdExchanger, ("app", "user", "extra")),
    (AppIdExchanger, {"app_id": "app"}),
    (UserpassExchanger, "alice:pw"),
    (UserpassExchanger, ("alice", 42)),
    (GithubExchanger, ("a", "b")),
    (GithubExchanger, None),
    (TokenExchanger, AppRoleCredential(role_id="r", secret_id="s")),
    (TokenExchanger, {"token": "t", "extra": "x"}),
    (TokenExchanger, ("",)),
    (UserpassExchanger, ("", "pw")),
    (AppRoleExchanger, {"role_id": "r", "secret_id": ""}),
]


class TestCoerceCredential:
    @pytest.mark.parametrize("exchanger_cls,credential", WRONG_SHAPES)
    def test_wrong_shape_rejected_without_network(
        self, exchanger_cls, credential, transport: FakeTransport
    ) -> None:
        with pytest.raises(InvalidUsageError):
            exchanger_cls().exchange(credential, transport)
        assert transport.calls == []

    def test_model_instance_passes_through(self) -> None:
        cred = AppRoleCredential(role_id="r", secret_id="s")
        assert AppRoleExchanger().coerce_credential(cred) is cred

    def test_list_accepted(self) -> None:
        cred = UserpassExchanger().coerce_credential(["alice", "pw"])
        assert cred.username == "alice"
        assert cred.password.get_secret_value() == "pw"

    def test_error_names_expected_fields(self) -> None:
        with pytest.raises(InvalidUsageError, match=r"role_id, secret_id"):
            AppRoleExchanger().coerce_credential(("x",))

    def test_secret_not_in_repr(self) -> None:
        cred = UserpassExchanger().coerce_credential(("alice", "hunter2"))
        assert "hunter2" not in repr(cred)


# ---------------------------------------------------------------------------
# Login response parsing
# ---------------------------------------------------------------------------


class TestParseLogin:
    def test_success_extracts_token_and_metadata(self) -> None:
        resp = login_ok("hvs.t1", policies=["default"], lease_duration=3600)
        grant = AppRoleExchanger().parse_login(resp)
        assert grant == TokenGrant(
            token="hvs.t1", metadata={"policies": ["default"], "lease_duration": 3600}
        )

    def test_errors_passed_through_verbatim(self) -> None:
        outcome = UserpassExchanger().parse_login(errors(400, "invalid username or password"))
        assert outcome == LoginFailed(messages=["invalid username or password"])

    def test_2xx_without_token_fails(self) -> None:
        outcome = GithubExchanger().parse_login(TransportResponse(200, {"auth": None}))
        assert isinstance(outcome, LoginFailed)
        assert "github login failed" in outcome.messages[0]

    def test_non_json_error_body(self) -> None:
        outcome = AppIdExchanger().parse_login(TransportResponse(502, "Bad Gateway"))
        assert isinstance(outcome, LoginFailed)
        assert "HTTP 502" in outcome.messages[0]


# ---------------------------------------------------------------------------
# Full exchange
# ---------------------------------------------------------------------------


class TestExchange:
    def test_sync_exchange(self, transport: FakeTransport) -> None:
        transport.add("POST", "auth/approle/login", login_ok("hvs.t1"))
        outcome = AppRoleExchanger().exchange(("r", "s"), transport)
        assert outcome.token == "hvs.t1"
        assert transport.calls[0]["body"] == {"role_id": "r", "secret_id": "s"}

    def test_token_exchange_sends_nothing(self, transport: FakeTransport) -> None:
        outcome = TokenExchanger().exchange(("hvs.given",), transport)
        assert outcome.token == "hvs.given"
        assert transport.calls == []

    def test_transport_error_becomes_login_failed(self, transport: FakeTransport) -> None:
        transport.add("POST", "auth/github/login", TransportError("connection refused"))
        outcome = GithubExchanger().exchange(("ghp",), transport)
        assert isinstance(outcome, LoginFailed)
        assert "connection refused" in outcome.messages[0]

    def test_async_exchange(self, async_transport: FakeAsyncTransport) -> None:
        async_transport.add("POST", "auth/userpass/login/alice", login_ok("hvs.a"))
        outcome = asyncio.run(UserpassExchanger().exchange_async(("alice", "pw"), async_transport))
        assert outcome.token == "hvs.a"

    def test_backend_tags(self) -> None:
        assert AppRoleExchanger.backend is AuthBackend.APPROLE
        assert AppIdExchanger.backend is AuthBackend.APP_ID
        assert UserpassExchanger.backend is AuthBackend.USERPASS
        assert GithubExchanger.backend is AuthBackend.GITHUB
        assert TokenExchanger.backend is AuthBackend.TOKEN
