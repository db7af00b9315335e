"""Abstract base classes for document generation strategies."""

from docgen.interfaces.form import BaseFormEngine, ControlSpec, FormValidationError
from docgen.interfaces.history import BaseDocumentHistory
from docgen.interfaces.pdf import BasePDFConverter, PDFConversionError, PDFOptions
from docgen.interfaces.template import (
    BaseFieldExtractor,
    BaseFieldRenderer,
    TemplateIntegrityError,
)

__all__ = [
    "BaseDocumentHistory",
    "BaseFieldExtractor",
    "BaseFieldRenderer",
    "BaseFormEngine",
    "BasePDFConverter",
    "ControlSpec",
    "FormValidationError",
    "PDFConversionError",
    "PDFOptions",
    "TemplateIntegrityError",
]
