"""Tests for CORS middleware."""

from switchyard.app import App
from switchyard.middleware.cors import CORSConfig, Cors
from switchyard.testing import TestClient


def _make_cors_app(config: CORSConfig | None = None) -> App:
    """Helper: create an app with CORS middleware and a simple route."""
    app = App()
    app.use(Cors(config))

    @app.get("/api/data")
    def data(ctx):
        return {"message": "hello"}

    @app.post("/api/data")
    def create_data(ctx):
        return ("created", 201)

    return app


class TestCORSDefaults:
    async def test_wildcard_origin(self) -> None:
        async with TestClient(_make_cors_app()) as client:
            response = await client.get("/api/data", headers={"Origin": "https://a.example"})
        assert response.status == 200
        assert response.header("access-control-allow-origin") == "*"
        assert response.header("vary") is None
        assert response.header("access-control-allow-credentials") is None

    async def test_body_untouched(self) -> None:
        async with TestClient(_make_cors_app()) as client:
            response = await client.get("/api/data")
        assert response.json() == {"message": "hello"}

    async def test_status_preserved(self) -> None:
        async with TestClient(_make_cors_app()) as client:
            response = await client.post("/api/data", headers={"Origin": "https://a.example"})
        assert response.status == 201
        assert response.header("access-control-allow-origin") == "*"

    async def test_not_found_still_gets_headers(self) -> None:
        async with TestClient(_make_cors_app()) as client:
            response = await client.get("/missing", headers={"Origin": "https://a.example"})
        assert response.status == 404
        assert response.header("access-control-allow-origin") == "*"


class TestCORSOrigins:
    async def test_single_origin(self) -> None:
        app = _make_cors_app(CORSConfig(origin="https://example.com"))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://example.com"})
        assert response.header("access-control-allow-origin") == "https://example.com"

    async def test_single_origin_rejects_other(self) -> None:
        app = _make_cors_app(CORSConfig(origin="https://example.com"))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://evil.example"})
        assert response.status == 200
        assert response.header("access-control-allow-origin") is None

    async def test_origin_list_echoes_match(self) -> None:
        config = CORSConfig(origin=("https://a.example", "https://b.example"))
        async with TestClient(_make_cors_app(config)) as client:
            response = await client.get("/api/data", headers={"Origin": "https://b.example"})
        assert response.header("access-control-allow-origin") == "https://b.example"
        assert response.header("vary") == "Origin"

    async def test_origin_list_rejects_other(self) -> None:
        config = CORSConfig(origin=("https://a.example",))
        async with TestClient(_make_cors_app(config)) as client:
            response = await client.get("/api/data", headers={"Origin": "https://c.example"})
        assert response.header("access-control-allow-origin") is None

    async def test_origin_predicate(self) -> None:
        config = CORSConfig(origin=lambda origin: origin.endswith(".example.com"))
        async with TestClient(_make_cors_app(config)) as client:
            allowed = await client.get("/api/data", headers={"Origin": "https://app.example.com"})
            denied = await client.get("/api/data", headers={"Origin": "https://example.org"})
        assert allowed.header("access-control-allow-origin") == "https://app.example.com"
        assert denied.header("access-control-allow-origin") is None

    async def test_credentials_with_wildcard_echoes_origin(self) -> None:
        config = CORSConfig(credentials=True)
        async with TestClient(_make_cors_app(config)) as client:
            response = await client.get("/api/data", headers={"Origin": "https://a.example"})
        assert response.header("access-control-allow-origin") == "https://a.example"
        assert response.header("access-control-allow-credentials") == "true"


class TestCORSPreflight:
    async def test_preflight_short_circuits(self) -> None:
        async with TestClient(_make_cors_app()) as client:
            response = await client.request(
                "OPTIONS", "/api/data", headers={"Origin": "https://a.example"}
            )
        assert response.status == 204
        assert response.body == b""
        assert response.header("access-control-allow-methods") == (
            "GET, HEAD, PUT, PATCH, POST, DELETE"
        )
        assert response.header("access-control-max-age") == "86400"

    async def test_preflight_on_unregistered_path(self) -> None:
        async with TestClient(_make_cors_app()) as client:
            response = await client.request("OPTIONS", "/nowhere")
        assert response.status == 204

    async def test_preflight_echoes_requested_headers(self) -> None:
        async with TestClient(_make_cors_app()) as client:
            response = await client.request(
                "OPTIONS",
                "/api/data",
                headers={
                    "Origin": "https://a.example",
                    "Access-Control-Request-Headers": "X-Custom, Content-Type",
                },
            )
        assert response.header("access-control-allow-headers") == "X-Custom, Content-Type"

    async def test_preflight_configured_headers(self) -> None:
        config = CORSConfig(
            allowed_headers=("Content-Type", "Authorization"),
            exposed_headers=("X-Total",),
            max_age=600,
            methods=("GET", "POST"),
        )
        async with TestClient(_make_cors_app(config)) as client:
            response = await client.request(
                "OPTIONS", "/api/data", headers={"Access-Control-Request-Headers": "X-Other"}
            )
        assert response.header("access-control-allow-headers") == "Content-Type, Authorization"
        assert response.header("access-control-expose-headers") == "X-Total"
        assert response.header("access-control-max-age") == "600"
        assert response.header("access-control-allow-methods") == "GET, POST"

    async def test_preflight_disabled_passes_through(self) -> None:
        config = CORSConfig(preflight=False)
        async with TestClient(_make_cors_app(config)) as client:
            response = await client.request("OPTIONS", "/api/data")
        assert response.status == 404
        assert response.header("access-control-allow-origin") == "*"
