"""
Tests de l'API HTTP (FastAPI TestClient, sense lifespan ni motor OCR real)
"""
import pytest
from fastapi.testclient import TestClient
from docverify.config import settings
from docverify.main import app
from docverify.routes.verify import get_verification_service
from docverify.services.verification_service import DocumentVerificationService

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fake_service(make_adapter, config, aadhaar_text):
    service = DocumentVerificationService(make_adapter(text=aadhaar_text), config)
    app.dependency_overrides[get_verification_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def _post(client, content=PNG_BYTES, mime="image/png", **form):
    return client.post(
        "/verify/document",
        files={"file": ("doc.png", content, mime)},
        data=form,
    )


class TestPublicEndpoints:
    def test_root(self, client):
        assert client.get("/").json() == {"status": "ok"}

    def test_health_without_engine(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestVerifyDocument:
    def test_valid_aadhaar(self, client, fake_service):
        response = _post(client, role="tenant", declared_name="Arnav Mehta", document_number="123456789012")
        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"] is True
        assert body["document_type"] == "AADHAAR"
        assert body["extracted_name"] == "Arnav Mehta"
        assert body["passed_parameters"] == 5

    def test_default_role_is_tenant(self, client, fake_service):
        assert _post(client).json()["role"] == "tenant"

    def test_invalid_role(self, client, fake_service):
        assert _post(client, role="guest").status_code == 422

    def test_unsupported_mime(self, client, fake_service):
        assert _post(client, mime="text/plain").status_code == 400

    def test_magic_bytes_mismatch(self, client, fake_service):
        assert _post(client, content=b"not an image").status_code == 400

    def test_too_large(self, client, fake_service, monkeypatch):
        monkeypatch.setattr(settings, "max_file_size_mb", 0)
        assert _post(client).status_code == 413

    def test_no_engine(self, client):
        app.dependency_overrides.clear()
        assert _post(client).status_code == 503

    def test_api_key_required(self, client, fake_service, monkeypatch):
        monkeypatch.setattr(settings, "api_key_enabled", True)
        monkeypatch.setattr(settings, "api_key", "secret")
        assert _post(client).status_code == 401
        response = client.post(
            "/verify/document",
            files={"file": ("doc.png", PNG_BYTES, "image/png")},
            headers={"X-API-Key": "secret"},
        )
        assert response.status_code == 200
