"""Tests for app wiring: lifespan, error mapping, CORS, rate limits, frontend."""

import pytest
from fastapi.testclient import TestClient

from verbario.config.app_config import build_config
from verbario.db.database import RecordStore
from verbario.web.api import create_app
from verbario.web.rate_limit import FixedWindowLimiter


class TestLifespan:
    """Store lifecycle driven by the app."""

    def test_app_connects_and_releases_its_store(self, app_config):
        app = create_app(app_config)
        store = app.state.store
        assert not store.is_connected

        with TestClient(app) as client:
            assert store.is_connected
            assert client.post("/api/verbs", json={"word": "comer"}).status_code == 201

        assert not store.is_connected

    def test_app_leaves_supplied_connected_store_open(self, app_config, store):
        with TestClient(create_app(app_config, store=store)):
            pass
        assert store.is_connected

    def test_request_without_store_is_service_unavailable(self, app_config):
        client = TestClient(create_app(app_config, store=RecordStore(app_config.store_path)))
        response = client.get("/api/verbs")
        assert response.status_code == 503


class TestCors:
    """CORS is restricted to the configured origin."""

    def test_allowed_origin(self, app_config, store):
        client = TestClient(create_app(app_config, store=store))
        response = client.get("/health", headers={"Origin": "http://localhost:5173"})
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_other_origin_not_allowed(self, app_config, store):
        client = TestClient(create_app(app_config, store=store))
        response = client.get("/health", headers={"Origin": "http://evil.example"})
        assert "access-control-allow-origin" not in response.headers


class TestRateLimit:
    """Fixed request budget per client."""

    def test_budget_exceeded_returns_429(self, env, store):
        config = build_config(env, {"rate_limit": {"max_requests": 2, "window_seconds": 60}})
        client = TestClient(create_app(config, store=store))

        first = client.get("/health")
        assert first.headers["x-ratelimit-limit"] == "2"
        assert first.headers["x-ratelimit-remaining"] == "1"
        assert client.get("/health").status_code == 200

        blocked = client.get("/health")
        assert blocked.status_code == 429
        assert blocked.headers["x-ratelimit-remaining"] == "0"

    def test_window_resets(self):
        now = [0.0]
        limiter = FixedWindowLimiter(max_requests=1, window_seconds=10, clock=lambda: now[0])

        assert limiter.hit("1.2.3.4").allowed
        assert not limiter.hit("1.2.3.4").allowed
        assert limiter.hit("5.6.7.8").allowed

        now[0] = 10.0
        decision = limiter.hit("1.2.3.4")
        assert decision.allowed
        assert decision.reset_seconds == 10


class TestFrontend:
    """Built frontend served in production."""

    @pytest.fixture
    def static_dir(self, tmp_path):
        dist = tmp_path / "dist"
        dist.mkdir()
        (dist / "index.html").write_text("<html>verbario</html>")
        (dist / "app.js").write_text("console.log('hi')")
        return dist

    def test_production_serves_frontend(self, env, store, static_dir):
        config = build_config({**env, "APP_ENV": "production"}, {"web": {"static_dir": str(static_dir)}})
        client = TestClient(create_app(config, store=store))

        assert "verbario" in client.get("/").text
        assert "console.log" in client.get("/app.js").text
        assert "verbario" in client.get("/verbs/hablar").text
        assert client.get("/health").json()["status"] == "ok"
        assert client.get("/api/unknown").status_code == 404

    def test_development_does_not_serve_frontend(self, env, store, static_dir):
        config = build_config(env, {"web": {"static_dir": str(static_dir)}})
        client = TestClient(create_app(config, store=store))
        assert client.get("/").status_code == 404
