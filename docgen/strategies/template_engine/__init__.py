"""Template engine strategies.

Implements placeholder extraction and rendering for Markdown templates.
"""

from docgen.strategies.template_engine.extractor import (
    FieldExtractor,
    extract_fields,
    merge_fields,
)
from docgen.strategies.template_engine.models import (
    FieldDescriptor,
    FieldOption,
    FieldType,
    FieldValidation,
)
from docgen.strategies.template_engine.renderer import BLANK, FieldRenderer

__all__ = [
    "BLANK",
    "FieldDescriptor",
    "FieldExtractor",
    "FieldOption",
    "FieldRenderer",
    "FieldType",
    "FieldValidation",
    "extract_fields",
    "merge_fields",
]
