"""Dynamic form strategies."""

from docgen.strategies.forms.engine import FormEngine, normalize_value

__all__ = [
    "FormEngine",
    "normalize_value",
]
