"""Dynamic form engine.

Turns a field descriptor list into control descriptions and validates
submissions against the per-field constraints. Runs unchanged in the
Streamlit frontend, so invalid submissions never reach the API.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from email_validator import EmailNotValidError, validate_email

from docgen.core.i18n import pick, t
from docgen.interfaces.form import BaseFormEngine, ControlSpec, FormValidationError
from docgen.strategies.template_engine.models import FieldDescriptor, FieldType

logger = logging.getLogger(__name__)

WIDGETS = {
    FieldType.TEXT: "text_input",
    FieldType.EMAIL: "text_input",
    FieldType.TEL: "text_input",
    FieldType.DATE: "date_input",
    FieldType.TEXTAREA: "text_area",
    FieldType.SELECT: "selectbox",
    FieldType.CHECKBOX: "checkbox",
    FieldType.RADIO: "radio",
}

TRUTHY = {"true", "1", "on", "yes"}


def normalize_value(field: FieldDescriptor, value: Any) -> str:
    """Coerce a raw control value to the string stored in a submission."""
    if field.type == FieldType.CHECKBOX:
        if isinstance(value, bool):
            return "true" if value else "false"
        return "true" if str(value or "").strip().lower() in TRUTHY else "false"
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class FormEngine(BaseFormEngine):
    """Renders control specs for, and validates, one template's fields."""

    def __init__(self, fields: Sequence[FieldDescriptor]) -> None:
        self._fields = list(fields)

    @property
    def fields(self) -> list[FieldDescriptor]:
        return list(self._fields)

    def controls(self, language: str = "fr") -> list[ControlSpec]:
        specs = []
        for field in self._fields:
            specs.append(
                ControlSpec(
                    field_id=field.id,
                    widget=WIDGETS[field.type],
                    input_type=field.type.value,
                    label=pick(language, field.label, field.label_ar) or field.id,
                    placeholder=pick(language, field.placeholder, field.placeholder_ar),
                    required=field.required,
                    options=[
                        (option.value, pick(language, option.label, option.label_ar))
                        for option in field.options or []
                    ],
                    rtl=language == "ar",
                )
            )
        return specs

    def validate(self, values: Mapping[str, Any], language: str = "fr") -> dict[str, str]:
        cleaned: dict[str, str] = {}
        errors: dict[str, str] = {}

        for field in self._fields:
            value = normalize_value(field, values.get(field.id))
            cleaned[field.id] = value
            error = self._check(field, value, language)
            if error:
                errors[field.id] = error

        if errors:
            logger.info(f"Form validation failed for fields: {sorted(errors)}")
            raise FormValidationError(errors)
        return cleaned

    def _check(self, field: FieldDescriptor, value: str, language: str) -> str | None:
        rules = field.validation
        custom = pick(language, rules.message, rules.message_ar) if rules else ""

        if field.type == FieldType.CHECKBOX:
            if field.required and value != "true":
                return t("field_required", language)
            return None

        if not value.strip():
            return t("field_required", language) if field.required else None

        if field.type == FieldType.EMAIL:
            try:
                validate_email(value, check_deliverability=False)
            except EmailNotValidError:
                return custom or t("invalid_email", language)

        if field.type == FieldType.DATE:
            try:
                date.fromisoformat(value)
            except ValueError:
                return custom or t("invalid_date", language)

        if field.type in (FieldType.SELECT, FieldType.RADIO) and field.options:
            if value not in {option.value for option in field.options}:
                return t("invalid_option", language)

        if rules is None:
            return None
        if rules.min is not None and len(value) < rules.min:
            return custom or t("min_length", language, min=rules.min)
        if rules.max is not None and len(value) > rules.max:
            return custom or t("max_length", language, max=rules.max)
        if rules.pattern:
            try:
                if re.search(rules.pattern, value) is None:
                    return custom or t("invalid_format", language)
            except re.error as e:
                logger.warning(f"Invalid pattern on field {field.id}: {e}")
        return None
