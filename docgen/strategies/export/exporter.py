"""Document exporter.

Fills a template with submitted values, wraps the result in the
bilingual page layout, converts it to PDF and records the generation
for signed-in users.
"""

import html
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Protocol

from docgen.core.context import Identity
from docgen.core.i18n import format_date, pick, t
from docgen.interfaces.history import BaseDocumentHistory
from docgen.interfaces.pdf import BasePDFConverter, PDFOptions
from docgen.interfaces.template import TemplateIntegrityError
from docgen.strategies.template_engine.models import FieldDescriptor
from docgen.strategies.template_engine.renderer import FieldRenderer

logger = logging.getLogger(__name__)

ACCENT = "#2563eb"


class ExportableTemplate(Protocol):
    """Attributes the exporter reads from a template record."""

    id: str
    name: str
    name_ar: str
    category_id: str | None
    markdown_content: str
    fields: list[dict[str, Any]]


@dataclass(frozen=True)
class ExportResult:
    """A generated PDF ready for download.

    Attributes:
        content: PDF bytes.
        filename: Suggested download filename.
        title: Document title in the export language.
        history_id: Generation record id, None when not recorded.
    """

    content: bytes
    filename: str
    title: str
    history_id: str | None = None


def page_html(title: str, body: str, language: str, today: date | None = None) -> str:
    """Wrap rendered content in the page layout shared by all exports."""
    rtl = language == "ar"
    today = today or date.today()
    return f"""<!DOCTYPE html>
<html lang="{language}" dir="{'rtl' if rtl else 'ltr'}">
<head><meta charset="utf-8"><title>{html.escape(title)}</title></head>
<body>
  <div style="font-family: Arial, 'Noto Sans Arabic', sans-serif; direction: {'rtl' if rtl else 'ltr'}; text-align: {'right' if rtl else 'left'}; padding: 40px; max-width: 800px; margin: 0 auto; line-height: 1.6;">
    <div style="text-align: center; margin-bottom: 40px;">
      <h1 style="color: {ACCENT}; margin-bottom: 10px; font-size: 28px;">{html.escape(title)}</h1>
      <p style="color: #666; font-size: 14px;">{t("republic", language)}</p>
      <hr style="border: none; border-top: 2px solid {ACCENT}; width: 200px; margin: 20px auto;">
    </div>
    <div style="margin-bottom: 40px;">
{body}
    </div>
    <div style="margin-top: 60px; text-align: center;">
      <p style="color: #666; font-size: 12px;">{t("generated_electronically", language)}</p>
      <p style="color: #666; font-size: 12px;">{t("date_prefix", language)}{format_date(today)}</p>
    </div>
  </div>
</body>
</html>
"""


def render_fields_html(
    fields: list[FieldDescriptor],
    values: Mapping[str, Any],
    language: str = "fr",
) -> str:
    """Label/value rows for templates that only carry a field list."""
    rows = []
    for field in fields:
        label = pick(language, field.label, field.label_ar) or field.id
        value = values.get(field.id)
        shown = "-" if value is None or str(value).strip() == "" else str(value)
        rows.append(
            '<div class="field" style="margin-bottom: 20px;">'
            f'<label style="font-weight: bold; display: block; margin-bottom: 5px;">{html.escape(label)}:</label>'
            f'<div style="border-bottom: 1px solid #ccc; padding-bottom: 5px; min-height: 20px;">{html.escape(shown)}</div>'
            "</div>"
        )
    return "\n".join(rows)


class DocumentExporter:
    """Turns a filled template into a PDF.

    Example:
        ```python
        exporter = DocumentExporter(converter, history=SQLDocumentHistory(session))
        result = await exporter.export(template, {"full_name": "Amina"}, identity, "ar")
        ```
    """

    def __init__(
        self,
        converter: BasePDFConverter,
        history: BaseDocumentHistory | None = None,
        options: PDFOptions | None = None,
        export_dir: Path | None = None,
    ) -> None:
        self._converter = converter
        self._history = history
        self._options = options or PDFOptions()
        self._export_dir = export_dir

    def title_for(self, template: ExportableTemplate, language: str) -> str:
        return pick(language, template.name, template.name_ar) or template.id

    def build_html(
        self,
        template: ExportableTemplate,
        values: Mapping[str, Any] | None,
        language: str = "fr",
    ) -> str:
        """Render the final HTML page of a Markdown template.

        Raises:
            TemplateIntegrityError: If the template has no Markdown body.
        """
        if not (template.markdown_content or "").strip():
            raise TemplateIntegrityError(f"Template {template.id} has no Markdown content")

        renderer = FieldRenderer(language)
        body = renderer.render_final_html(template.markdown_content, values)
        return page_html(self.title_for(template, language), body, language)

    def build_summary_html(
        self,
        template: ExportableTemplate,
        values: Mapping[str, Any] | None,
        language: str = "fr",
    ) -> str:
        """Render the label/value page from the template's field list."""
        fields = [FieldDescriptor.model_validate(f) for f in template.fields or []]
        body = render_fields_html(fields, values or {}, language)
        return page_html(self.title_for(template, language), body, language)

    async def export(
        self,
        template: ExportableTemplate,
        values: Mapping[str, Any] | None,
        identity: Identity | None = None,
        language: str = "fr",
        summary: bool = False,
    ) -> ExportResult:
        """Generate the PDF and record the generation.

        Args:
            template: Template to fill.
            values: Submitted values keyed by field id.
            identity: Signed-in user, if any. Without one no history is written.
            language: "fr" or "ar".
            summary: Export the field list as label/value rows instead of
                the Markdown body.

        Returns:
            ExportResult with the PDF bytes.

        Raises:
            TemplateIntegrityError: If the Markdown body is missing.
            PDFConversionError: If the converter fails.
        """
        if summary:
            document = self.build_summary_html(template, values, language)
        else:
            document = self.build_html(template, values, language)

        title = self.title_for(template, language)
        content = await self._converter.convert(document, self._options)
        filename = f"{template.id}-{int(time.time() * 1000)}.pdf"

        if self._export_dir is not None:
            (self._export_dir / filename).write_bytes(content)
            logger.info(f"Saved export to {self._export_dir / filename}")

        history_id = await self._record(template, identity, title)
        return ExportResult(content=content, filename=filename, title=title, history_id=history_id)

    async def _record(
        self,
        template: ExportableTemplate,
        identity: Identity | None,
        title: str,
    ) -> str | None:
        if identity is None or self._history is None:
            return None
        try:
            return await self._history.record_generation(
                user_id=identity.uid,
                template_id=template.id,
                form_type=template.category_id or "",
                title=title,
            )
        except Exception as e:
            logger.warning(f"Could not record generation of {template.id}: {e}", exc_info=True)
            return None
