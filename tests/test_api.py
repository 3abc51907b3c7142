"""Tests for the HTTP API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from resume_delivery.api.app import create_app
from resume_delivery.config import AppConfig, StoreConfig
from resume_delivery.storage.artifact_store import ArtifactStore
from resume_delivery.storage.backends import MemoryBackend


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(store=StoreConfig(ttl_seconds=60, base_dir=None))


@pytest.fixture
def client(config, store, launcher):
    app = create_app(config, store=store, launcher=launcher)
    with TestClient(app) as c:
        yield c


def _generate(client, body) -> dict:
    response = client.post("/api/resume/generate", json=body)
    assert response.status_code == 200, response.text
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "OK"


class TestGenerate:
    def test_generate(self, client, sample_request_body):
        body = _generate(client, sample_request_body)
        assert body["success"] is True
        assert body["fileName"] == "Resume_Ada_Lovelace.pdf"
        assert body["expiresInSeconds"] == 60
        assert body["downloadUrl"].startswith("/api/resume/download/")
        assert body["message"] == "Resume generated successfully"

    def test_payment_id_alias(self, client, sample_request_body):
        sample_request_body["paymentId"] = sample_request_body.pop("paymentToken")
        _generate(client, sample_request_body)

    def test_missing_payment_token(self, client, launcher, sample_request_body):
        del sample_request_body["paymentToken"]
        response = client.post("/api/resume/generate", json=sample_request_body)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Payment verification failed"}
        assert launcher.launched == 0

    def test_missing_required_field(self, client, launcher, sample_request_body):
        sample_request_body["profileData"]["email"] = ""
        response = client.post("/api/resume/generate", json=sample_request_body)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "email" in body["error"]
        assert launcher.launched == 0

    def test_invalid_body(self, client):
        response = client.post("/api/resume/generate", json={"paymentToken": "x"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid request body"}

    def test_invalid_enum(self, client, sample_request_body):
        sample_request_body["profileData"]["work_type"] = "Moon"
        response = client.post("/api/resume/generate", json=sample_request_body)
        assert response.status_code == 400

    def test_engine_failure_is_generic(self, config, store, make_launcher, sample_request_body):
        app = create_app(config, store=store, launcher=make_launcher(fail_on="launch"))
        with TestClient(app) as client:
            response = client.post("/api/resume/generate", json=sample_request_body)
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to generate resume"}
        assert "Executable" not in response.text
        assert store.stats()["active"] == 0

    def test_timeout_is_generic(self, config, store, make_launcher, sample_request_body):
        app = create_app(config, store=store, launcher=make_launcher(fail_on="timeout"))
        with TestClient(app) as client:
            response = client.post("/api/resume/generate", json=sample_request_body)
        assert response.status_code == 500
        assert response.json()["error"] == "Failed to generate resume"

    def test_unexpected_store_error_is_structured(self, config, clock, launcher, sample_request_body):
        class RejectingBackend(MemoryBackend):
            def write(self, artifact_id, data):
                raise ValueError("unsupported artifact")

        store = ArtifactStore(config.store, RejectingBackend(), clock=clock)
        app = create_app(config, store=store, launcher=launcher)
        with TestClient(app) as client:
            response = client.post("/api/resume/generate", json=sample_request_body)
        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"success": False, "error": "Failed to generate resume"}
        assert "unsupported" not in response.text
        assert launcher.live == 0


class TestDownload:
    def test_download(self, client, sample_request_body):
        url = _generate(client, sample_request_body)["downloadUrl"]
        response = client.get(url)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == (
            'attachment; filename="Resume_Ada_Lovelace.pdf"'
        )
        assert response.content[:4] == b"%PDF"

    def test_download_twice_identical(self, client, sample_request_body):
        url = _generate(client, sample_request_body)["downloadUrl"]
        first = client.get(url)
        second = client.get(url)
        assert first.status_code == second.status_code == 200
        assert first.content == second.content

    def test_download_after_expiry(self, client, clock, sample_request_body):
        url = _generate(client, sample_request_body)["downloadUrl"]
        clock.advance(61)
        response = client.get(url)
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "File not found"}

    def test_unknown_id(self, client):
        response = client.get("/api/resume/download/not-a-real-id")
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_path_traversal_is_not_found(self, client):
        response = client.get("/api/resume/download/..%2F..%2Fetc%2Fpasswd")
        assert response.status_code == 404


def test_app_state_wiring(config, store, launcher):
    app = create_app(config, store=store, launcher=launcher)
    assert app.state.store is store
    assert app.state.pipeline.store is store
    assert app.state.delivery.store is store
    assert app.state.renderer.max_sessions == config.renderer.max_sessions
