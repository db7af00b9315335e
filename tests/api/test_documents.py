"""API tests for export, rendering and generation history."""

import pytest

from docgen.api.deps import get_pdf_converter
from docgen.interfaces.pdf import BasePDFConverter, PDFConversionError
from docgen.strategies.template_engine import BLANK


class TestExport:
    """Test suite for POST /api/documents/{template_id}/export."""

    def test_anonymous_export(self, client, template, converter):
        """Test that anonymous users get a PDF and no history."""
        response = client.post(
            f"/api/documents/{template['id']}/export",
            json={"values": {"nom": "Amina", "date": "2024-01-01"}},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content == b"%PDF-1.7 fake"
        assert f'filename="{template["id"]}-' in response.headers["content-disposition"]
        assert "x-history-id" not in response.headers

        html = converter.calls[0]
        assert "Amina" in html and "2024-01-01" in html
        assert BLANK in html  # adresse left empty
        assert "/nom" not in html

    def test_signed_in_export_records_history(self, client, template, user_headers):
        """Test that exports by a signed-in user are recorded."""
        response = client.post(
            f"/api/documents/{template['id']}/export",
            json={"values": {"nom": "Amina"}},
            headers={**user_headers, "X-Language": "ar"},
        )
        assert response.status_code == 200
        history_id = response.headers["x-history-id"]

        history = client.get("/api/documents/history", headers=user_headers).json()
        assert history["total"] == 1
        entry = history["documents"][0]
        assert entry["id"] == history_id
        assert entry["title"] == "شهادة الإقامة"
        assert entry["form_type"] == "cat-housing"
        assert entry["download_count"] == 1

    def test_invalid_values_are_rejected(self, client, template, converter):
        """Test that the server validates before rendering."""
        response = client.post(f"/api/documents/{template['id']}/export", json={"values": {}})

        assert response.status_code == 422
        assert "nom" in response.json()["errors"]
        assert converter.calls == []

    def test_empty_body_is_integrity_error(self, client, converter):
        """Test that a template without body fails before conversion."""
        created = client.post("/api/templates", json={"name": "Vide", "markdown_content": ""}).json()

        response = client.post(f"/api/documents/{created['id']}/export", json={"values": {}})

        assert response.status_code == 422
        assert response.json()["error_code"] == "TEMPLATE_INTEGRITY"
        assert converter.calls == []

    def test_summary_export(self, client, template, converter):
        """Test the label/value export."""
        response = client.post(
            f"/api/documents/{template['id']}/export",
            json={"values": {"nom": "Amina"}, "summary": True},
        )

        assert response.status_code == 200
        assert "Nom:" in converter.calls[0]

    def test_converter_failure(self, app, client, template):
        """Test that converter errors surface as 502."""

        class BrokenConverter(BasePDFConverter):
            async def convert(self, html, options):
                raise PDFConversionError("renderer crashed")

        app.dependency_overrides[get_pdf_converter] = BrokenConverter

        response = client.post(f"/api/documents/{template['id']}/export", json={"values": {"nom": "Amina"}})

        assert response.status_code == 502
        assert response.json()["error_code"] == "PDF_CONVERSION"

    def test_unknown_template(self, client):
        """Test 404 for a missing template."""
        assert client.post("/api/documents/missing/export", json={"values": {}}).status_code == 404


def test_render_returns_final_html(client, template):
    """Test the HTML-only rendering endpoint."""
    response = client.post(
        f"/api/documents/{template['id']}/render",
        json={"values": {"nom": "Amina"}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Attestation de résidence"
    assert "Amina" in body["html"]
    assert 'dir="ltr"' in body["html"]


class TestHistory:
    """Test suite for history, downloads and stats."""

    @pytest.fixture
    def exported(self, client, template, user_headers):
        for _ in range(2):
            client.post(
                f"/api/documents/{template['id']}/export",
                json={"values": {"nom": "Amina"}},
                headers=user_headers,
            )
        client.post(
            "/api/forms/saved",
            json={"template_id": template["id"], "form_data": {}},
            headers=user_headers,
        )
        return client.get("/api/documents/history", headers=user_headers).json()["documents"]

    def test_requires_identity(self, client):
        """Test that history and stats are private."""
        assert client.get("/api/documents/history").status_code == 401
        assert client.get("/api/documents/stats").status_code == 401

    def test_download_increments_count(self, client, exported, user_headers, headers_for):
        """Test the download counter, for the owner only."""
        document_id = exported[0]["id"]

        response = client.post(f"/api/documents/history/{document_id}/download", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["download_count"] == 2

        other = client.post(f"/api/documents/history/{document_id}/download", headers=headers_for("user-2"))
        assert other.status_code == 404

    def test_stats(self, client, exported, user_headers):
        """Test dashboard counters."""
        client.post(f"/api/documents/history/{exported[0]['id']}/download", headers=user_headers)

        stats = client.get("/api/documents/stats", headers=user_headers).json()

        assert stats == {
            "saved_forms_count": 1,
            "generated_docs_count": 2,
            "this_month_count": 2,
            "total_downloads": 3,
        }
