"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different strategy implementations at runtime based on
configuration or environment variables.
"""

import logging

from docgen.core.config import Settings, get_settings
from docgen.interfaces.history import BaseDocumentHistory
from docgen.interfaces.pdf import BasePDFConverter, PDFOptions
from docgen.interfaces.template import BaseFieldExtractor
from docgen.strategies.converters import WeasyPrintConverter
from docgen.strategies.export import DocumentExporter
from docgen.strategies.template_engine import FieldExtractor, FieldRenderer

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        converter = factory.get_pdf_converter()
        exporter = factory.get_exporter(history=SQLDocumentHistory(session))
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._converter_cache: BasePDFConverter | None = None
        self._extractor_cache: BaseFieldExtractor | None = None

    def get_pdf_converter(self, converter_type: str | None = None) -> BasePDFConverter:
        """Get a PDF converter instance based on the specified type.

        Args:
            converter_type: The converter type to instantiate. If None, uses settings.

        Returns:
            A BasePDFConverter implementation instance.

        Raises:
            ValueError: If the converter type is unknown.
        """
        if self._converter_cache is None or converter_type is not None:
            converter_type = converter_type or self._settings.pdf_converter_type

            logger.info(f"Instantiating PDF converter: {converter_type}")

            match converter_type:
                case "weasyprint":
                    self._converter_cache = WeasyPrintConverter()
                case _:
                    raise ValueError(
                        f"Unknown PDF converter type: {converter_type}. "
                        f"Valid options: 'weasyprint'"
                    )

        return self._converter_cache

    def get_field_extractor(self) -> BaseFieldExtractor:
        if self._extractor_cache is None:
            self._extractor_cache = FieldExtractor()
        return self._extractor_cache

    def get_field_renderer(self, language: str | None = None) -> FieldRenderer:
        return FieldRenderer(language or self._settings.default_language)

    def pdf_options(self) -> PDFOptions:
        """Page options from settings."""
        return PDFOptions(
            margin=self._settings.pdf_margin,
            page_size=self._settings.pdf_page_size,
            orientation=self._settings.pdf_orientation,
            scale=self._settings.pdf_scale,
            image_quality=self._settings.pdf_image_quality,
        )

    def get_exporter(
        self,
        converter: BasePDFConverter | None = None,
        history: BaseDocumentHistory | None = None,
    ) -> DocumentExporter:
        """Build a DocumentExporter wired to the configured converter.

        Args:
            converter: Converter override. If None, uses get_pdf_converter().
            history: Generation history sink, usually bound to a request session.

        Returns:
            A DocumentExporter instance.
        """
        return DocumentExporter(
            converter=converter or self.get_pdf_converter(),
            history=history,
            options=self.pdf_options(),
            export_dir=self._settings.export_dir,
        )
