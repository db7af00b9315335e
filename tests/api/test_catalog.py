"""API tests for categories and templates."""

from docgen.db.models import DEFAULT_CATEGORIES


# =============================================================================
# Category Tests
# =============================================================================


class TestCategories:
    """Test suite for /api/categories."""

    def test_health(self, client):
        """Test the health endpoint."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_default_categories_seeded(self, client):
        """Test that startup seeds the default categories in order."""
        categories = client.get("/api/categories/active").json()

        assert [c["name"] for c in categories] == [c["name"] for c in DEFAULT_CATEGORIES]
        assert categories[0]["name_ar"] == "العمل / التوظيف"

    def test_seed_is_idempotent(self, client):
        """Test that seeding again creates nothing."""
        response = client.post("/api/categories/seed")

        assert response.status_code == 200
        assert response.json() == {"created": 0}

    def test_crud(self, client):
        """Test create, read, update and delete of a category."""
        created = client.post("/api/categories", json={"name": "Sport", "name_ar": "رياضة", "order": 10})
        assert created.status_code == 201
        category_id = created.json()["id"]

        assert client.get(f"/api/categories/{category_id}").json()["name"] == "Sport"

        updated = client.patch(f"/api/categories/{category_id}", json={"is_active": False})
        assert updated.status_code == 200
        assert updated.json()["is_active"] is False
        assert updated.json()["name"] == "Sport"

        active_ids = [c["id"] for c in client.get("/api/categories/active").json()]
        all_ids = [c["id"] for c in client.get("/api/categories").json()]
        assert category_id not in active_ids
        assert category_id in all_ids

        assert client.delete(f"/api/categories/{category_id}").status_code == 204
        assert client.get(f"/api/categories/{category_id}").status_code == 404

    def test_unknown_category(self, client):
        """Test 404 on missing categories."""
        assert client.patch("/api/categories/missing", json={"name": "x"}).status_code == 404
        assert client.delete("/api/categories/missing").status_code == 404

    def test_name_is_required(self, client):
        """Test request validation of the category payload."""
        response = client.post("/api/categories", json={"name": ""})

        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"


# =============================================================================
# Template Tests
# =============================================================================


class TestTemplates:
    """Test suite for /api/templates."""

    def test_fields_derived_on_create(self, template):
        """Test that the stored fields follow the body, with overrides kept."""
        fields = {f["id"]: f for f in template["fields"]}

        assert list(fields) == ["nom", "adresse", "date"]
        assert fields["nom"]["required"] is True
        assert fields["date"]["type"] == "date"
        assert fields["adresse"]["label"] == "Adresse"
        assert fields["adresse"]["required"] is False

    def test_body_edit_rederives_fields(self, client, template):
        """Test that changing the body drops and adds fields."""
        response = client.patch(
            f"/api/templates/{template['id']}",
            json={"markdown_content": "Je soussigné /nom, né le /date_naissance."},
        )

        assert response.status_code == 200
        fields = response.json()["fields"]
        assert [f["id"] for f in fields] == ["nom", "date_naissance"]
        # Override carried over for the surviving token
        assert fields[0]["required"] is True

    def test_field_override_update(self, client, template):
        """Test that field settings can be changed without touching the body."""
        response = client.patch(
            f"/api/templates/{template['id']}",
            json={"fields": [{"id": "adresse", "type": "textarea", "required": True}]},
        )

        fields = {f["id"]: f for f in response.json()["fields"]}
        assert fields["adresse"]["type"] == "textarea"
        assert fields["adresse"]["required"] is True
        # Fields without an override fall back to derived defaults
        assert fields["nom"]["required"] is False

    def test_listing(self, client, template):
        """Test active, by-category and full listings."""
        client.post("/api/templates", json={"name": "Brouillon", "is_active": False})

        assert [t["id"] for t in client.get("/api/templates/by-category/cat-housing").json()] == [template["id"]]
        assert len(client.get("/api/templates/active").json()) == 1
        assert len(client.get("/api/templates").json()) == 2

    def test_delete(self, client, template):
        """Test template deletion."""
        assert client.delete(f"/api/templates/{template['id']}").status_code == 204
        assert client.get(f"/api/templates/{template['id']}").status_code == 404

    def test_extract_fields(self, client):
        """Test field extraction without storage."""
        response = client.post(
            "/api/templates/extract-fields",
            json={"markdown_content": "/full_name and /full_name2, and/or /full_name"},
        )

        body = response.json()
        assert body["count"] == 2
        assert [f["id"] for f in body["fields"]] == ["full_name", "full_name2"]

    def test_preview(self, client):
        """Test the editor preview in both languages."""
        payload = {"markdown_content": "Date: /date"}

        french = client.post("/api/templates/preview", json=payload).json()
        assert "**Date:**" in french["markdown"]
        assert "/date" not in french["markdown"]
        assert 'class="field-placeholder"' in french["html"]

        arabic = client.post("/api/templates/preview", json=payload, headers={"X-Language": "ar"}).json()
        assert "**date:**" in arabic["markdown"]
