"""API tests for submission validation and saved forms."""


class TestValidation:
    """Test suite for POST /api/forms/{template_id}/validate."""

    def test_valid_submission(self, client, template):
        """Test that valid values come back normalised."""
        response = client.post(
            f"/api/forms/{template['id']}/validate",
            json={"values": {"nom": "Amina", "date": "2024-01-01"}},
        )

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "values": {"nom": "Amina", "adresse": "", "date": "2024-01-01"},
        }

    def test_invalid_submission(self, client, template):
        """Test the 422 body carrying per-field messages."""
        response = client.post(
            f"/api/forms/{template['id']}/validate",
            json={"values": {"date": "demain"}},
            headers={"Accept-Language": "ar-DZ,ar;q=0.9"},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "FORM_VALIDATION"
        assert body["errors"]["nom"] == "هذا الحقل مطلوب"
        assert "date" in body["errors"]

    def test_unknown_template(self, client):
        """Test 404 for a missing template."""
        response = client.post("/api/forms/missing/validate", json={"values": {}})

        assert response.status_code == 404


class TestSavedForms:
    """Test suite for /api/forms/saved."""

    def test_requires_identity(self, client, template):
        """Test that anonymous callers cannot save or list."""
        assert client.get("/api/forms/saved").status_code == 401
        response = client.post("/api/forms/saved", json={"template_id": template["id"], "form_data": {}})
        assert response.status_code == 401

    def test_invalid_token(self, client):
        """Test that a bad token is rejected rather than ignored."""
        response = client.get("/api/forms/saved", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_save_list_update_delete(self, client, template, user_headers):
        """Test the saved form lifecycle."""
        created = client.post(
            "/api/forms/saved",
            json={"template_id": template["id"], "form_data": {"nom": "Am"}},
            headers=user_headers,
        )
        assert created.status_code == 201
        saved = created.json()
        assert saved["user_id"] == "user-1"
        assert saved["form_type"] == "cat-housing"
        assert saved["title"].startswith("Attestation de résidence - ")

        listed = client.get("/api/forms/saved", headers=user_headers).json()
        assert listed["total"] == 1

        updated = client.patch(
            f"/api/forms/saved/{saved['id']}",
            json={"title": "Mon brouillon", "form_data": {"nom": "Amina"}},
            headers=user_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["title"] == "Mon brouillon"
        assert updated.json()["form_data"] == {"nom": "Amina"}

        assert client.delete(f"/api/forms/saved/{saved['id']}", headers=user_headers).status_code == 204
        assert client.get("/api/forms/saved", headers=user_headers).json()["total"] == 0

    def test_forms_are_private(self, client, template, user_headers, headers_for):
        """Test that another user can neither see nor change a saved form."""
        saved = client.post(
            "/api/forms/saved",
            json={"template_id": template["id"], "title": "A moi", "form_data": {}},
            headers=user_headers,
        ).json()
        other = headers_for("user-2")

        assert client.get("/api/forms/saved", headers=other).json()["total"] == 0
        assert client.patch(f"/api/forms/saved/{saved['id']}", json={"title": "x"}, headers=other).status_code == 404
        assert client.delete(f"/api/forms/saved/{saved['id']}", headers=other).status_code == 404
