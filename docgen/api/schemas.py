"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from docgen.db.models import CategoryBase, TemplateBase
from docgen.strategies.template_engine import FieldDescriptor


# =============================================================================
# Category Schemas
# =============================================================================


class CategoryCreate(CategoryBase):
    """Request schema for creating a category."""


class CategoryUpdate(BaseModel):
    """Partial category update; omitted fields are left untouched."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    name_ar: str | None = None
    description: str | None = None
    description_ar: str | None = None
    order: int | None = None
    is_active: bool | None = None


class CategoryRead(CategoryBase):
    """Response schema for a category."""

    id: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Template Schemas
# =============================================================================


class TemplateCreate(TemplateBase):
    """Request schema for creating a template.

    When ``markdown_content`` is set, ``fields`` only carries overrides for
    tokens found in the body; the field list itself is derived.
    """

    markdown_content: str = ""
    fields: list[FieldDescriptor] = Field(default_factory=list)


class TemplateUpdate(BaseModel):
    """Partial template update; omitted fields are left untouched."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    name_ar: str | None = None
    description: str | None = None
    description_ar: str | None = None
    category_id: str | None = None
    order: int | None = None
    is_active: bool | None = None
    markdown_content: str | None = None
    fields: list[FieldDescriptor] | None = None


class TemplateRead(TemplateBase):
    """Response schema for a template."""

    id: str
    markdown_content: str
    fields: list[FieldDescriptor]
    created_at: datetime
    updated_at: datetime


class FieldExtractionRequest(BaseModel):
    """Markdown body to scan for placeholder tokens."""

    markdown_content: str


class FieldExtractionResponse(BaseModel):
    """Fields derived from a Markdown body."""

    fields: list[FieldDescriptor]
    count: int


class PreviewRequest(BaseModel):
    """Editor preview request."""

    markdown_content: str
    fields: list[FieldDescriptor] | None = None
    language: str | None = Field(default=None, description="fr or ar; defaults to the request language")


class PreviewResponse(BaseModel):
    """Editor preview as Markdown and as HTML."""

    markdown: str
    html: str


# =============================================================================
# Form Schemas
# =============================================================================


class FormValuesRequest(BaseModel):
    """Submitted values keyed by field id."""

    values: dict[str, Any] = Field(default_factory=dict)


class FormValidationResponse(BaseModel):
    """Normalised values of a valid submission."""

    valid: bool = True
    values: dict[str, str]


class SavedFormCreate(BaseModel):
    """Request schema for saving a submission."""

    template_id: str
    title: str | None = Field(default=None, max_length=512)
    form_data: dict[str, Any] = Field(default_factory=dict)


class SavedFormUpdate(BaseModel):
    """Partial saved form update."""

    title: str | None = Field(default=None, max_length=512)
    form_data: dict[str, Any] | None = None


class SavedFormRead(BaseModel):
    """Response schema for a saved form."""

    id: str
    user_id: str
    template_id: str
    form_type: str
    title: str
    form_data: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SavedFormListResponse(BaseModel):
    """Response for listing saved forms."""

    saved_forms: list[SavedFormRead]
    total: int


# =============================================================================
# Document Schemas
# =============================================================================


class ExportRequest(FormValuesRequest):
    """Export request."""

    summary: bool = Field(
        default=False,
        description="Export the field list as label/value rows instead of the Markdown body",
    )


class RenderResponse(BaseModel):
    """Final HTML of a filled template."""

    title: str
    html: str


class GeneratedDocumentRead(BaseModel):
    """Response schema for a generation history entry."""

    id: str
    user_id: str
    template_id: str
    form_type: str
    title: str
    generated_at: datetime
    download_count: int

    model_config = {"from_attributes": True}


class GeneratedDocumentListResponse(BaseModel):
    """Response for listing generation history."""

    documents: list[GeneratedDocumentRead]
    total: int


class UserStatsResponse(BaseModel):
    """Dashboard counters of a user."""

    saved_forms_count: int
    generated_docs_count: int
    this_month_count: int
    total_downloads: int


# =============================================================================
# Profile & Admin Schemas
# =============================================================================


class ProfileRead(BaseModel):
    """Response schema for a user profile."""

    id: str
    email: str | None
    display_name: str | None
    photo_url: str | None
    preferences: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    """Partial profile update."""

    display_name: str | None = Field(default=None, max_length=255)
    photo_url: str | None = Field(default=None, max_length=1024)
    language: str | None = Field(default=None, pattern="^(fr|ar)$")
    theme: str | None = Field(default=None, pattern="^(light|dark)$")


class AdminAuthRequest(BaseModel):
    """Admin credential pair."""

    email: str
    password: str


class AdminAuthResponse(BaseModel):
    """Binary admin gate answer."""

    success: bool
    message: str | None = None


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")
