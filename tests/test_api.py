"""
Tests for the proctoring HTTP API
"""

import numpy as np
import pytest
from fastapi.testclient import TestClient

from conftest import make_face


@pytest.fixture
def client(session, monkeypatch):
    """TestClient bound to a session wired to fakes"""
    from proxyguard import main
    from proxyguard.main import app
    from proxyguard.proctor import api

    monkeypatch.setattr(api, "_session", session)
    monkeypatch.setattr(main.settings, "PRELOAD_MODELS", True)
    monkeypatch.setattr(main.settings, "LOG_TO_FILE", False)
    with TestClient(app) as test_client:
        yield test_client


class TestProctorAPI:
    """Tests for the /api/proctor endpoints"""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

        response = client.get("/api/proctor/health")
        assert response.json()["session_id"] == "PRX_TEST"

    def test_status(self, client):
        response = client.get("/api/proctor/status")
        assert response.status_code == 200

        data = response.json()
        assert data["session_id"] == "PRX_TEST"
        assert data["camera_on"] is False
        assert data["alert"] is False
        assert data["expressions"] == {}

    def test_models_loaded_on_startup(self, client):
        from proxyguard.proctor.session import MODELS_LOADED_MESSAGE

        data = client.get("/api/proctor/status").json()
        assert data["models_loaded"] is True
        assert data["status_message"] == MODELS_LOADED_MESSAGE

    def test_full_flow(self, client):
        response = client.post("/api/proctor/camera/start")
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["status"]["camera_on"] is True

        response = client.post("/api/proctor/reference/capture")
        assert response.json()["success"] is True
        assert response.json()["status"]["reference_faces"] == 1

        response = client.post("/api/proctor/monitoring/start")
        assert response.json()["success"] is True
        assert response.json()["status"]["monitoring"] is True

        response = client.post("/api/proctor/monitoring/stop")
        data = response.json()["status"]
        assert data["monitoring"] is False
        assert data["status_message"] == "Monitoring stopped."

        response = client.post("/api/proctor/camera/stop")
        data = response.json()["status"]
        assert data["camera_on"] is False
        assert data["reference_captured"] is False
        assert data["reference_faces"] == 0

    def test_monitoring_requires_reference(self, client):
        client.post("/api/proctor/camera/start")

        response = client.post("/api/proctor/monitoring/start")

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["status"]["status_message"] == "Please capture your reference photo first."

    def test_capture_without_face(self, client, face_detector):
        face_detector.faces = []
        client.post("/api/proctor/camera/start")

        response = client.post("/api/proctor/reference/capture")

        assert response.json()["success"] is False
        assert response.json()["status"]["status_message"] == "No face detected! Please try again."

    def test_overlay(self, client, session):
        assert client.get("/api/proctor/overlay").status_code == 404

        frame = np.zeros((120, 160, 3), dtype=np.uint8)
        session.context.overlay.draw(frame, [make_face(0.0)], [True], ["neutral"])

        response = client.get("/api/proctor/overlay")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.content[:2] == b"\xff\xd8"

    def test_models_status(self, client):
        from unittest.mock import patch

        with patch(
            "proxyguard.proctor.models.model_loader.check_models",
            return_value={"face_recognition": True, "deepface": False, "pyaudio": True}
        ):
            response = client.get("/api/proctor/models-status")

        assert response.status_code == 200
        assert response.json() == {"face_recognition": True, "deepface": False, "pyaudio": True}
