"""Tests for handler return value negotiation."""

import pytest

from switchyard.http.negotiation import negotiate
from switchyard.http.response import Redirect, Response


class TestNegotiate:
    def test_response_passes_through(self) -> None:
        response = Response("x", status=418)
        assert negotiate(response) is response

    def test_string(self) -> None:
        response = negotiate("hello")
        assert response.status == 200
        assert response.text == "hello"
        assert response.content_type.startswith("text/plain")

    def test_bytes(self) -> None:
        response = negotiate(b"\x00\x01")
        assert response.content_type == "application/octet-stream"
        assert response.body == b"\x00\x01"

    @pytest.mark.parametrize("value", [{"a": 1}, [1, 2, 3]])
    def test_json(self, value) -> None:
        response = negotiate(value)
        assert response.content_type.startswith("application/json")
        assert response.json() == value

    def test_json_stringifies_unknown_values(self) -> None:
        class Thing:
            def __str__(self) -> str:
                return "thing"

        assert negotiate({"x": Thing()}).json() == {"x": "thing"}

    def test_redirect(self) -> None:
        response = negotiate(Redirect("/next", status=303, headers=(("X-From", "old"),)))
        assert response.status == 303
        assert response.header("Location") == "/next"
        assert response.header("X-From") == "old"

    def test_tuple_with_status(self) -> None:
        response = negotiate(("created", 201))
        assert response.status == 201
        assert response.text == "created"

    def test_tuple_with_status_and_headers(self) -> None:
        response = negotiate(({"id": 1}, 201, {"Location": "/items/1"}))
        assert response.status == 201
        assert response.header("location") == "/items/1"
        assert response.json() == {"id": 1}

    @pytest.mark.parametrize("value", [None, 42, object(), ("a", "b")])
    def test_unsupported(self, value) -> None:
        with pytest.raises(TypeError, match="Cannot convert"):
            negotiate(value)
