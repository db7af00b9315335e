"""PDF converter strategies."""

from docgen.strategies.converters.weasyprint import WeasyPrintConverter

__all__ = ["WeasyPrintConverter"]
