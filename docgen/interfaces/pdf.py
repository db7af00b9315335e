"""PDF conversion interface.

Defines the abstract base class for HTML-to-PDF converters.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PDFOptions:
    """Page options handed to a converter.

    Attributes:
        margin: Page margin in inches.
        page_size: Paper size name (a4, letter, legal...).
        orientation: "portrait" or "landscape".
        scale: Raster scale applied to embedded images.
        image_quality: JPEG quality of embedded images, 0-1.
    """

    margin: float = 1.0
    page_size: str = "a4"
    orientation: str = "portrait"
    scale: float = 2.0
    image_quality: float = 0.98


class BasePDFConverter(ABC):
    """Abstract base class for PDF conversion strategies."""

    @abstractmethod
    async def convert(self, html: str, options: PDFOptions) -> bytes:
        """Convert a complete HTML document to PDF bytes.

        Args:
            html: HTML document (inline styles only).
            options: Page options.

        Returns:
            The PDF file content.

        Raises:
            PDFConversionError: If conversion fails.
        """


class PDFConversionError(Exception):
    """Exception raised when a converter cannot produce a PDF."""

    pass
