"""Tests for switchyard.context."""

from switchyard.context import Context, build_context
from switchyard.http.request import Request
from switchyard.http.response import NOT_FOUND


def _ctx(method: str = "GET", url: str = "https://example.com/posts/5?sort=new", **kw) -> Context:
    return build_context(Request.from_url(method, url, **kw))


class TestBuildContext:
    def test_url_parsed(self) -> None:
        ctx = _ctx()
        assert ctx.url.scheme == "https"
        assert ctx.url.netloc == "example.com"
        assert ctx.url.path == "/posts/5"
        assert ctx.url.query == "sort=new"

    def test_starts_without_params(self) -> None:
        assert _ctx().params == {}

    def test_request_shortcuts(self) -> None:
        ctx = _ctx(headers={"X-Trace": "abc"})
        assert ctx.method == "GET"
        assert ctx.path == "/posts/5"
        assert ctx.headers["x-trace"] == "abc"
        assert ctx.query["sort"] == "new"


class TestWithParams:
    def test_returns_new_context(self) -> None:
        ctx = _ctx()
        extended = ctx.with_params({"id": "5"})
        assert extended.params == {"id": "5"}
        assert ctx.params == {}
        assert extended.request is ctx.request

    def test_merges_over_existing(self) -> None:
        ctx = _ctx().with_params({"a": "1", "b": "2"}).with_params({"b": "3"})
        assert ctx.params == {"a": "1", "b": "3"}


class TestBody:
    async def test_json(self) -> None:
        ctx = _ctx("POST", "/", body=b'{"title": "x"}')
        assert await ctx.json() == {"title": "x"}

    async def test_body_and_text(self) -> None:
        ctx = _ctx("POST", "/", body=b"raw")
        assert await ctx.body() == b"raw"
        assert await ctx.text() == "raw"

    async def test_form(self) -> None:
        ctx = _ctx(
            "POST",
            "/",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            body=b"a=1",
        )
        assert (await ctx.form())["a"] == "1"


class TestResponseBuilders:
    def test_text_response(self) -> None:
        response = _ctx().text_response("hi", status=202, headers={"X-A": "1"})
        assert response.status == 202
        assert response.text == "hi"
        assert response.content_type.startswith("text/plain")
        assert response.header("x-a") == "1"

    def test_json_response(self) -> None:
        response = _ctx().json_response({"ok": True}, status=201)
        assert response.status == 201
        assert response.content_type.startswith("application/json")
        assert response.json() == {"ok": True}

    def test_html_response(self) -> None:
        response = _ctx().html_response("<p>hi</p>")
        assert response.content_type.startswith("text/html")

    def test_respond_bytes(self) -> None:
        response = _ctx().respond(b"\x00", content_type="application/octet-stream")
        assert response.body == b"\x00"

    def test_redirect(self) -> None:
        response = _ctx().redirect("/elsewhere", status=301)
        assert response.status == 301
        assert response.header("location") == "/elsewhere"

    def test_not_found(self) -> None:
        assert _ctx().not_found() is NOT_FOUND

    def test_not_found_with_message(self) -> None:
        response = _ctx().not_found("No such post")
        assert response.status == 404
        assert response.text == "No such post"
