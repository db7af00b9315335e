"""WeasyPrint PDF converter strategy.

Renders export HTML with WeasyPrint. Page geometry is expressed as an
``@page`` rule; image scale and quality map onto WeasyPrint's ``dpi`` and
``jpeg_quality`` rendering options.
"""

import logging

from fastapi.concurrency import run_in_threadpool

from docgen.interfaces.pdf import BasePDFConverter, PDFConversionError, PDFOptions

logger = logging.getLogger(__name__)

CSS_DPI = 96


def page_css(options: PDFOptions) -> str:
    """Build the ``@page`` rule for the given options."""
    return (
        f"@page {{ size: {options.page_size} {options.orientation}; "
        f"margin: {options.margin}in; }}"
    )


class WeasyPrintConverter(BasePDFConverter):
    """Converts HTML to PDF with WeasyPrint.

    WeasyPrint is synchronous and CPU bound, so conversion runs in the
    threadpool to keep the event loop free.
    """

    async def convert(self, html: str, options: PDFOptions) -> bytes:
        logger.info(
            f"Converting HTML to PDF: {len(html)} chars, "
            f"{options.page_size}/{options.orientation}"
        )
        try:
            pdf = await run_in_threadpool(self._render, html, options)
        except Exception as e:
            logger.error(f"PDF conversion failed: {e}", exc_info=True)
            raise PDFConversionError(f"PDF conversion failed: {e}") from e

        logger.info(f"PDF generated: {len(pdf)} bytes")
        return pdf

    @staticmethod
    def _render(html: str, options: PDFOptions) -> bytes:
        import weasyprint

        return weasyprint.HTML(string=html).write_pdf(
            stylesheets=[weasyprint.CSS(string=page_css(options))],
            dpi=int(CSS_DPI * options.scale),
            jpeg_quality=round(options.image_quality * 100),
        )
