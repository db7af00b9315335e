"""HTTP client shared by the Streamlit pages."""

import logging
from typing import Any

import httpx

from docgen.core.context import SessionContext

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Raised when the API answers with an error status.

    Attributes:
        status_code: HTTP status of the response.
        detail: ``detail`` field of the error body, if any.
        errors: Per-field messages of a 422 form validation answer.
    """

    def __init__(self, status_code: int, detail: str, errors: dict[str, str] | None = None):
        self.status_code = status_code
        self.detail = detail
        self.errors = errors or {}
        super().__init__(f"{status_code}: {detail}")


class APIClient:
    """Thin synchronous client for the document generator API."""

    def __init__(self, base_url: str, context: SessionContext | None = None):
        """Initialize the API client.

        Args:
            base_url: Base URL of the API.
            context: Session context whose token, language and theme are sent.
        """
        self.base_url = base_url.rstrip("/")
        self.context = context or SessionContext()

    @property
    def headers(self) -> dict[str, str]:
        headers = {"X-Language": self.context.language, "X-Theme": self.context.theme}
        token = self.context.extras.get("token")
        if token and self.context.is_authenticated:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, timeout: float = 10.0, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}/api{path}"
        try:
            response = httpx.request(method, url, headers=self.headers, timeout=timeout, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise APIError(0, str(e)) from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            detail = body.get("detail") or body.get("message") or response.text
            logger.error(f"{method} {path} -> {response.status_code}: {detail}")
            raise APIError(response.status_code, str(detail), body.get("errors"))
        return response

    def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._request(method, path, **kwargs)
        if response.status_code == 204:
            return None
        return response.json()

    # Categories
    def list_categories(self, active_only: bool = True) -> list[dict[str, Any]]:
        return self._json("GET", "/categories/active" if active_only else "/categories")

    def create_category(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._json("POST", "/categories", json=data)

    def update_category(self, category_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._json("PATCH", f"/categories/{category_id}", json=data)

    def delete_category(self, category_id: str) -> None:
        self._json("DELETE", f"/categories/{category_id}")

    def seed_categories(self) -> int:
        return self._json("POST", "/categories/seed")["created"]

    # Templates
    def list_templates(self, category_id: str | None = None, active_only: bool = True) -> list[dict[str, Any]]:
        if category_id:
            return self._json("GET", f"/templates/by-category/{category_id}")
        return self._json("GET", "/templates/active" if active_only else "/templates")

    def get_template(self, template_id: str) -> dict[str, Any]:
        return self._json("GET", f"/templates/{template_id}")

    def create_template(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._json("POST", "/templates", json=data)

    def update_template(self, template_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._json("PATCH", f"/templates/{template_id}", json=data)

    def delete_template(self, template_id: str) -> None:
        self._json("DELETE", f"/templates/{template_id}")

    # Forms and documents
    def save_form(self, template_id: str, values: dict[str, Any], title: str | None = None) -> dict[str, Any]:
        payload = {"template_id": template_id, "form_data": values, "title": title}
        return self._json("POST", "/forms/saved", json=payload)

    def list_saved_forms(self) -> list[dict[str, Any]]:
        return self._json("GET", "/forms/saved")["saved_forms"]

    def delete_saved_form(self, form_id: str) -> None:
        self._json("DELETE", f"/forms/saved/{form_id}")

    def export_pdf(self, template_id: str, values: dict[str, Any], summary: bool = False) -> tuple[bytes, str]:
        """Export a filled template.

        Returns:
            PDF bytes and the suggested filename.
        """
        response = self._request(
            "POST",
            f"/documents/{template_id}/export",
            json={"values": values, "summary": summary},
            timeout=60.0,
        )
        disposition = response.headers.get("content-disposition", "")
        filename = disposition.split("filename=")[-1].strip('"') or f"{template_id}.pdf"
        return response.content, filename

    def history(self) -> list[dict[str, Any]]:
        return self._json("GET", "/documents/history")["documents"]

    def record_download(self, document_id: str) -> dict[str, Any]:
        return self._json("POST", f"/documents/history/{document_id}/download")

    def stats(self) -> dict[str, Any]:
        return self._json("GET", "/documents/stats")

    # Admin
    def admin_auth(self, email: str, password: str) -> bool:
        try:
            return bool(self._json("POST", "/admin/auth", json={"email": email, "password": password})["success"])
        except APIError as e:
            if e.status_code == 401:
                return False
            raise

    def health_check(self) -> bool:
        """Check if the API is healthy."""
        try:
            response = httpx.get(f"{self.base_url}/health", timeout=5.0)
            return response.status_code == 200
        except httpx.HTTPError:
            return False
