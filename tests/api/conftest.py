"""Fixtures for API tests: app on a temporary SQLite database, fake PDF converter."""

import time

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from docgen.api.deps import get_pdf_converter
from docgen.core.config import Settings, get_settings
from docgen.interfaces.pdf import BasePDFConverter, PDFOptions
from docgen.main import create_app

SECRET = "api-test-secret"


class FakeConverter(BasePDFConverter):
    """Returns fixed bytes and remembers the HTML it received."""

    def __init__(self):
        self.calls: list[str] = []

    async def convert(self, html: str, options: PDFOptions) -> bytes:
        self.calls.append(html)
        return b"%PDF-1.7 fake"


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'docgen.db'}",
        auth_secret=SECRET,
        admin_email="admin@mairie.dz",
        admin_password="s3cret!",
        seed_default_categories=True,
    )


@pytest.fixture
def converter():
    return FakeConverter()


@pytest.fixture
def app(settings, converter):
    """Application with settings and converter overridden."""
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_pdf_converter] = lambda: converter
    return app


@pytest.fixture
def client(app):
    """Test client; entering it runs the lifespan (tables + seed)."""
    with TestClient(app) as client:
        yield client


def auth_headers(uid: str = "user-1", **claims) -> dict[str, str]:
    token = jwt.encode(
        {"sub": uid, "exp": int(time.time()) + 3600, **claims},
        SECRET,
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Build Authorization headers for any user id."""
    return auth_headers


@pytest.fixture
def user_headers():
    return auth_headers("user-1", email="amina@poste.dz", name="Amina")


@pytest.fixture
def template(client):
    """A stored template with a required name and an optional date."""
    response = client.post(
        "/api/templates",
        json={
            "name": "Attestation de résidence",
            "name_ar": "شهادة الإقامة",
            "category_id": "cat-housing",
            "markdown_content": "# Attestation\n\nJe soussigné /nom, résidant au /adresse, le /date.",
            "fields": [
                {"id": "nom", "label": "Nom", "label_ar": "الاسم", "required": True},
                {"id": "date", "type": "date", "label": "Date"},
            ],
        },
    )
    assert response.status_code == 201
    return response.json()
