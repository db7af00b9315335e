"""FastAPI routers and dependencies."""

from docgen.api.admin import router as admin_router
from docgen.api.categories import router as categories_router
from docgen.api.deps import (
    get_db,
    get_identity,
    get_pdf_converter,
    get_session_context,
    require_identity,
)
from docgen.api.documents import router as documents_router
from docgen.api.forms import router as forms_router
from docgen.api.profile import router as profile_router
from docgen.api.templates import router as templates_router

__all__ = [
    "get_db",
    "get_identity",
    "get_pdf_converter",
    "get_session_context",
    "require_identity",
    "admin_router",
    "categories_router",
    "documents_router",
    "forms_router",
    "profile_router",
    "templates_router",
]
