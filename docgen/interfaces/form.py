"""Form rendering and validation interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ControlSpec:
    """Description of one input control, independent of the UI toolkit.

    Attributes:
        field_id: Field the control writes to.
        widget: Control kind: text_input, date_input, text_area, selectbox,
            checkbox or radio.
        input_type: HTML-style input type for text inputs (text, email, tel).
        label: Label in the requested language.
        placeholder: Placeholder in the requested language.
        required: Whether the label carries a required marker.
        options: (value, label) pairs for selectbox and radio controls.
        rtl: Whether the control text runs right-to-left.
    """

    field_id: str
    widget: str
    input_type: str
    label: str
    placeholder: str
    required: bool
    options: list[tuple[str, str]] = field(default_factory=list)
    rtl: bool = False


class BaseFormEngine(ABC):
    """Abstract base class for dynamic form engines."""

    @abstractmethod
    def controls(self, language: str = "fr") -> list[ControlSpec]:
        """Describe one control per field, in field order."""

    @abstractmethod
    def validate(self, values: Mapping[str, Any], language: str = "fr") -> dict[str, str]:
        """Validate submitted values.

        Args:
            values: Raw submitted values keyed by field id.
            language: Language of the error messages.

        Returns:
            Normalised string value for every declared field.

        Raises:
            FormValidationError: If any field fails validation.
        """


class FormValidationError(Exception):
    """Raised when submitted values fail field validation.

    Attributes:
        errors: Field id to localized error message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__(f"{len(errors)} field(s) failed validation: {', '.join(errors)}")
