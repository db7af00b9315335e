"""Template engine domain models.

Pydantic models describing the fillable fields of a template.
Kept here to avoid circular imports with the API and database layers.
"""

import enum

from pydantic import BaseModel, Field


class FieldType(str, enum.Enum):
    """Control kinds a field can declare."""

    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    DATE = "date"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"


class FieldOption(BaseModel):
    """One choice of a select or radio field."""

    value: str
    label: str
    label_ar: str = ""


class FieldValidation(BaseModel):
    """Optional per-field constraints checked on submission."""

    min: int | None = Field(default=None, ge=0, description="Minimum value length")
    max: int | None = Field(default=None, ge=0, description="Maximum value length")
    pattern: str | None = Field(default=None, description="Regex searched for in the value")
    message: str | None = None
    message_ar: str | None = None


class FieldDescriptor(BaseModel):
    """A fillable slot of a template, identified by its placeholder token."""

    id: str = Field(min_length=1, description="Token name without the leading slash")
    type: FieldType = Field(default=FieldType.TEXT)
    label: str = ""
    label_ar: str = ""
    placeholder: str = ""
    placeholder_ar: str = ""
    required: bool = False
    options: list[FieldOption] | None = None
    validation: FieldValidation | None = None
