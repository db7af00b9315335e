"""Concrete strategy implementations."""

from docgen.strategies.converters import WeasyPrintConverter
from docgen.strategies.export import DocumentExporter, SQLDocumentHistory
from docgen.strategies.forms import FormEngine
from docgen.strategies.template_engine import FieldExtractor, FieldRenderer

__all__ = [
    "DocumentExporter",
    "FieldExtractor",
    "FieldRenderer",
    "FormEngine",
    "SQLDocumentHistory",
    "WeasyPrintConverter",
]
