"""Tests for the httpx-to-TransportResponse bridge."""

from __future__ import annotations

import httpx

from vaultkit.client.base import TransportResponse
from vaultkit.client.response import extract_response_data, to_transport_response


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_response(
    status_code: int = 200,
    content: bytes | None = None,
    json_data: object | None = None,
    text: str | None = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Build an httpx.Response bound to a dummy request."""
    request = httpx.Request("GET", "http://localhost:8200/v1/secret/foo")
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, headers=headers, request=request)
    if text is not None:
        return httpx.Response(status_code, text=text, headers=headers, request=request)
    return httpx.Response(status_code, content=content or b"", headers=headers, request=request)


# ---------------------------------------------------------------------------
# extract_response_data
# ---------------------------------------------------------------------------


class TestExtractResponseData:
    def test_json_parse(self) -> None:
        response = _make_response(json_data={"data": {"value": "bar"}})
        assert extract_response_data(response) == {"data": {"value": "bar"}}

    def test_json_list_parse(self) -> None:
        response = _make_response(json_data=[1, 2, 3])
        assert extract_response_data(response) == [1, 2, 3]

    def test_fallback_to_text(self) -> None:
        response = _make_response(status_code=502, text="<html>Bad Gateway</html>")
        assert extract_response_data(response) == "<html>Bad Gateway</html>"

    def test_empty_body_is_none(self) -> None:
        response = _make_response(status_code=204)
        assert extract_response_data(response) is None


# ---------------------------------------------------------------------------
# to_transport_response
# ---------------------------------------------------------------------------


class TestToTransportResponse:
    def test_status_and_body(self) -> None:
        response = _make_response(status_code=403, json_data={"errors": ["permission denied"]})
        result = to_transport_response(response)
        assert result.status == 403
        assert result.body == {"errors": ["permission denied"]}
        assert result.is_success is False

    def test_headers_lower_cased(self) -> None:
        response = _make_response(json_data={}, headers={"X-Vault-Request": "1"})
        result = to_transport_response(response)
        assert result.headers["x-vault-request"] == "1"


class TestTransportResponse:
    def test_is_success_range(self) -> None:
        assert TransportResponse(200).is_success
        assert TransportResponse(204).is_success
        assert not TransportResponse(301).is_success
        assert not TransportResponse(404).is_success

    def test_errors_list(self) -> None:
        resp = TransportResponse(400, {"errors": ["missing client token"]})
        assert resp.errors() == ["missing client token"]

    def test_errors_empty_list_kept(self) -> None:
        assert TransportResponse(404, {"errors": []}).errors() == []

    def test_errors_absent(self) -> None:
        assert TransportResponse(500, "oops").errors() is None
        assert TransportResponse(500, {"warnings": ["x"]}).errors() is None
