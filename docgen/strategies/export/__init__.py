"""Document export strategies."""

from docgen.strategies.export.exporter import DocumentExporter, ExportResult
from docgen.strategies.export.history import SQLDocumentHistory

__all__ = [
    "DocumentExporter",
    "ExportResult",
    "SQLDocumentHistory",
]
