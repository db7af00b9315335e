"""Database models using SQLModel.

Defines the records of the document generator:
- Category: Navigation grouping for templates
- Template: Markdown blueprint with its derived field list
- SavedForm: A named, stored submission
- GeneratedDocument: History entry written on export
- UserProfile: Profile of an identity provider user
"""

import datetime
import uuid
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Text
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _timestamp_column(**kwargs: Any) -> Column:
    return Column(DateTime(timezone=True), nullable=False, **kwargs)


# =============================================================================
# Shared Models (for API payloads, not database tables)
# =============================================================================


class CategoryBase(SQLModel):
    """Base category fields."""

    name: str = Field(min_length=1, max_length=255)
    name_ar: str = Field(default="", max_length=255)
    description: str = Field(default="", max_length=2048)
    description_ar: str = Field(default="", max_length=2048)
    order: int = Field(default=1, index=True)
    is_active: bool = Field(default=True, index=True)


class TemplateBase(SQLModel):
    """Base template fields."""

    name: str = Field(min_length=1, max_length=255)
    name_ar: str = Field(default="", max_length=255)
    description: str = Field(default="", max_length=2048)
    description_ar: str = Field(default="", max_length=2048)
    category_id: str | None = Field(default=None, max_length=64, index=True)
    order: int = Field(default=1, index=True)
    is_active: bool = Field(default=True, index=True)


# =============================================================================
# Database Models
# =============================================================================


class Category(CategoryBase, table=True):
    """Grouping label applied to templates.

    Deleting a category leaves its templates in place.
    """

    __tablename__ = "categories"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    created_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=_timestamp_column(),
    )
    updated_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=_timestamp_column(onupdate=_utcnow),
    )


class Template(TemplateBase, table=True):
    """Reusable document blueprint.

    ``fields`` is always a derivation of ``markdown_content``; it is
    rewritten whenever the body changes.
    """

    __tablename__ = "templates"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    markdown_content: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    fields: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    created_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=_timestamp_column(),
    )
    updated_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=_timestamp_column(onupdate=_utcnow),
    )


class SavedForm(SQLModel, table=True):
    """A submission stored under a title for later reuse."""

    __tablename__ = "saved_forms"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    user_id: str = Field(index=True, max_length=128)
    template_id: str = Field(index=True, max_length=64)
    form_type: str = Field(default="", max_length=64)
    title: str = Field(max_length=512)
    form_data: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )
    created_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=_timestamp_column(),
    )
    updated_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=_timestamp_column(onupdate=_utcnow),
    )


class GeneratedDocument(SQLModel, table=True):
    """One export, denormalized: kind, title and time only."""

    __tablename__ = "generated_documents"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    user_id: str = Field(index=True, max_length=128)
    template_id: str = Field(index=True, max_length=64)
    form_type: str = Field(default="", max_length=64)
    title: str = Field(max_length=512)
    download_count: int = Field(default=1, ge=0)
    generated_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=_timestamp_column(),
    )


class UserProfile(SQLModel, table=True):
    """Store-owned profile keyed by the identity provider uid."""

    __tablename__ = "user_profiles"

    id: str = Field(primary_key=True, max_length=128)
    email: str | None = Field(default=None, max_length=255)
    display_name: str | None = Field(default=None, max_length=255)
    photo_url: str | None = Field(default=None, max_length=1024)
    preferences: dict[str, Any] = Field(
        default_factory=lambda: {"language": "fr", "theme": "light"},
        sa_column=Column(JSON, nullable=False),
    )
    created_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=_timestamp_column(),
    )
    updated_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=_timestamp_column(onupdate=_utcnow),
    )


# =============================================================================
# Seed data
# =============================================================================


DEFAULT_CATEGORIES: list[dict[str, Any]] = [
    {
        "name": "Travail / Emploi",
        "name_ar": "العمل / التوظيف",
        "description": "Documents liés au travail et à l'emploi",
        "description_ar": "الوثائق المتعلقة بالعمل والتوظيف",
        "order": 1,
    },
    {
        "name": "Éducation",
        "name_ar": "التعليم",
        "description": "Documents scolaires et universitaires",
        "description_ar": "الوثائق المدرسية والجامعية",
        "order": 2,
    },
    {
        "name": "Finance / Paiement",
        "name_ar": "المالية / الدفع",
        "description": "Documents financiers et de paiement",
        "description_ar": "الوثائق المالية والدفع",
        "order": 3,
    },
    {
        "name": "Logement",
        "name_ar": "السكن",
        "description": "Documents de logement et résidence",
        "description_ar": "وثائق السكن والإقامة",
        "order": 4,
    },
    {
        "name": "Famille / État civil",
        "name_ar": "الأسرة / الحالة المدنية",
        "description": "Documents d'état civil et familiaux",
        "description_ar": "وثائق الحالة المدنية والأسرة",
        "order": 5,
    },
    {
        "name": "Justice / Légalisation",
        "name_ar": "العدالة / التوثيق",
        "description": "Documents juridiques et légalisations",
        "description_ar": "الوثائق القانونية والتوثيق",
        "order": 6,
    },
    {
        "name": "Transport / Déplacement",
        "name_ar": "النقل / التنقل",
        "description": "Documents de transport et déplacement",
        "description_ar": "وثائق النقل والتنقل",
        "order": 7,
    },
    {
        "name": "Santé",
        "name_ar": "الصحة",
        "description": "Documents médicaux et de santé",
        "description_ar": "الوثائق الطبية والصحية",
        "order": 8,
    },
    {
        "name": "Autres",
        "name_ar": "أخرى",
        "description": "Autres documents administratifs",
        "description_ar": "وثائق إدارية أخرى",
        "order": 9,
    },
]
