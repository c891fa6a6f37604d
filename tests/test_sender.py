"""Tests for translating a Response into ASGI messages."""

import pytest

from switchyard.http.response import Response
from switchyard.server.sender import send_response


async def _capture(response: Response, *, head: bool = False) -> list[dict]:
    sent: list[dict] = []

    async def send(message: dict) -> None:
        sent.append(message)

    await send_response(response, send, head=head)
    return sent


class TestSendResponse:
    async def test_start_and_body(self) -> None:
        start, body = await _capture(Response("hello").with_header("X-Id", "7"))

        assert start["type"] == "http.response.start"
        assert start["status"] == 200
        assert start["headers"] == [
            (b"content-type", b"text/plain; charset=utf-8"),
            (b"x-id", b"7"),
            (b"content-length", b"5"),
        ]
        assert body == {"type": "http.response.body", "body": b"hello"}

    async def test_utf8_length(self) -> None:
        start, _ = await _capture(Response("héllo"))
        assert (b"content-length", b"6") in start["headers"]

    async def test_head_drops_body_keeps_length(self) -> None:
        start, body = await _capture(Response("hello"), head=True)
        assert (b"content-length", b"5") in start["headers"]
        assert body["body"] == b""

    @pytest.mark.parametrize("status", [204, 304, 101])
    async def test_bodiless_statuses(self, status: int) -> None:
        start, body = await _capture(Response("ignored", status=status))
        assert (b"content-length", b"0") in start["headers"]
        assert body["body"] == b""

    async def test_repeated_headers_kept(self) -> None:
        response = Response().with_added_header("Vary", "A").with_added_header("Vary", "B")
        start, _ = await _capture(response)
        assert [v for k, v in start["headers"] if k == b"vary"] == [b"A", b"B"]
