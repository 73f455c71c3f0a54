"""Tests for the HTTP API."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from adsnap.api import create_app
from adsnap.errors import NoRenderableScenes
from adsnap.models import AdResult


@pytest.fixture
def orchestrator():
    fake = MagicMock()
    fake.generate_ad.return_value = AdResult(title="Fresh Brew", video_url="/videos/ad_1.mp4")
    return fake


@pytest.fixture
def client(orchestrator, settings):
    return TestClient(create_app(orchestrator=orchestrator, settings=settings))


class TestGenerateEndpoint:
    def test_success(self, client, orchestrator):
        response = client.post(
            "/api/response", json={"prompt": "coffee ad", "options": {"duration": 20}}
        )
        assert response.status_code == 200
        assert response.json() == {"title": "Fresh Brew", "videoUrl": "/videos/ad_1.mp4"}
        orchestrator.generate_ad.assert_called_once_with("coffee ad", 20)

    def test_options_optional(self, client, orchestrator):
        response = client.post("/api/response", json={"prompt": "coffee ad"})
        assert response.status_code == 200
        orchestrator.generate_ad.assert_called_once_with("coffee ad", None)

    def test_null_options(self, client, orchestrator):
        response = client.post("/api/response", json={"prompt": "coffee ad", "options": None})
        assert response.status_code == 200
        orchestrator.generate_ad.assert_called_once_with("coffee ad", None)

    @pytest.mark.parametrize("options", [5, "fast", [20], True])
    def test_non_object_options_use_default_duration(self, client, orchestrator, options):
        response = client.post("/api/response", json={"prompt": "coffee ad", "options": options})
        assert response.status_code == 200
        orchestrator.generate_ad.assert_called_once_with("coffee ad", None)

    def test_unknown_option_keys_ignored(self, client, orchestrator):
        response = client.post(
            "/api/response", json={"prompt": "coffee ad", "options": {"style": "retro"}}
        )
        assert response.status_code == 200
        orchestrator.generate_ad.assert_called_once_with("coffee ad", None)

    @pytest.mark.parametrize("body", [{"prompt": 5}, {"prompt": ["a"]}, ["coffee ad"]])
    def test_malformed_body_uses_error_shape(self, client, orchestrator, body):
        response = client.post("/api/response", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Request body must contain a 'prompt' field."}
        orchestrator.generate_ad.assert_not_called()

    def test_non_json_body_uses_error_shape(self, client, orchestrator):
        response = client.post(
            "/api/response", content=b"not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Request body must contain a 'prompt' field."}
        orchestrator.generate_ad.assert_not_called()

    @pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}, {"options": {"duration": 10}}])
    def test_missing_prompt(self, client, orchestrator, body):
        response = client.post("/api/response", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Request body must contain a 'prompt' field."}
        orchestrator.generate_ad.assert_not_called()

    def test_pipeline_error(self, client, orchestrator):
        orchestrator.generate_ad.side_effect = NoRenderableScenes(
            "No scenes could be processed to create a final video."
        )
        response = client.post("/api/response", json={"prompt": "coffee ad"})
        assert response.status_code == 500
        assert response.json() == {"error": "No scenes could be processed to create a final video."}

    def test_unexpected_error(self, client, orchestrator):
        orchestrator.generate_ad.side_effect = RuntimeError("disk full")
        response = client.post("/api/response", json={"prompt": "coffee ad"})
        assert response.status_code == 500
        assert response.json() == {"error": "disk full"}

    def test_orchestrator_built_once(self, settings, orchestrator):
        factory = MagicMock(return_value=orchestrator)
        client = TestClient(create_app(settings=settings, orchestrator_factory=factory))

        client.post("/api/response", json={"prompt": "one"})
        client.post("/api/response", json={"prompt": "two"})

        factory.assert_called_once_with(settings)


class TestStaticVideos:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == "Welcome to backend adsnap"

    def test_serves_published_video(self, client, settings):
        (settings.videos_dir / "ad_1.mp4").write_bytes(b"0123456789")
        response = client.get("/videos/ad_1.mp4")
        assert response.status_code == 200
        assert response.content == b"0123456789"
        assert response.headers["cache-control"] == "no-cache"

    def test_range_requests(self, client, settings):
        (settings.videos_dir / "ad_1.mp4").write_bytes(b"0123456789")
        response = client.get("/videos/ad_1.mp4", headers={"Range": "bytes=0-3"})
        assert response.status_code == 206
        assert response.content == b"0123"

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/response",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
