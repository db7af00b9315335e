"""Placeholder rendering for template bodies.

Two independent substitutions over the same tokens:

- preview: every token becomes a bold label line followed by a blank
  underscore line, used by the admin editor;
- final: every token becomes the submitted value, or a fixed blank when
  the value is missing, used for export. For export HTML the values are
  inserted after the Markdown pass, escaped, so they never add markup.

Export HTML comes from a deliberately small Markdown subset (headings 1-3,
bold, italic, horizontal rule, paragraphs) with inline styles so the PDF
converter needs no stylesheet. The editor preview instead goes through
markdown2, with a subclass turning preview blocks into placeholder widgets.
"""

import html
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

import markdown2

from docgen.interfaces.template import BaseFieldRenderer
from docgen.strategies.template_engine.extractor import (
    derive_label,
    derive_label_ar,
    substitute_tokens,
)
from docgen.strategies.template_engine.models import FieldDescriptor

logger = logging.getLogger(__name__)

BLANK = "_" * 20

HEADING_STYLES = {
    1: "font-size: 24px; font-weight: bold; margin: 20px 0 12px 0;",
    2: "font-size: 20px; font-weight: bold; margin: 18px 0 10px 0;",
    3: "font-size: 16px; font-weight: bold; margin: 14px 0 8px 0;",
}
PARAGRAPH_STYLE = "margin: 0 0 10px 0;"
HR_STYLE = "border: none; border-top: 1px solid #ccc; margin: 20px 0;"

_HEADING = re.compile(r"^(#{1,3})\s+(.+?)\s*#*\s*$")
# Underscore rules are left out: a line of blanks must stay text
_RULE = re.compile(r"^\s*(?:-{3,}|\*{3,})\s*$")
_BOLD = re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*")
_ITALIC = re.compile(r"(?<!\*)\*(?=\S)(.+?)(?<=\S)\*(?!\*)")

# Opaque keys standing in for tokens while Markdown is converted
_VALUE_KEY = re.compile(r"DOCGENVALUE\d+END")
_FIELD_KEY = re.compile(r"DOCGENFIELD\d+END")


def _labels(
    fields: Sequence[FieldDescriptor] | None,
    language: str,
) -> dict[str, str]:
    labels: dict[str, str] = {}
    for field in fields or []:
        label = field.label_ar if language == "ar" else field.label
        labels[field.id] = label or field.label or field.id
    return labels


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


class FieldRenderer(BaseFieldRenderer):
    """Substitutes placeholder tokens and converts Markdown for export."""

    def __init__(self, language: str = "fr") -> None:
        self._language = language

    def label_for(self, token: str, labels: Mapping[str, str]) -> str:
        return labels.get(token) or (
            derive_label_ar(token) if self._language == "ar" else derive_label(token)
        )

    def render_preview(
        self,
        markdown: str,
        fields: Sequence[FieldDescriptor] | None = None,
    ) -> str:
        labels = _labels(fields, self._language)
        return substitute_tokens(
            markdown, lambda token: f"\n**{self.label_for(token, labels)}:**\n{BLANK}\n"
        )

    def render_final(self, markdown: str, values: Mapping[str, Any] | None) -> str:
        values = values or {}

        def fill(token: str) -> str:
            value = values.get(token)
            if _is_blank(value):
                return BLANK
            return str(value)

        # One pass, so a value that itself looks like a token stays literal
        return substitute_tokens(markdown, fill)

    def render_final_html(self, markdown: str, values: Mapping[str, Any] | None) -> str:
        """Export HTML of a body, with values inserted after conversion.

        Tokens become opaque keys before the Markdown pass so a submitted
        value is always text, never headings or emphasis.
        """
        values = values or {}
        filled: dict[str, str] = {}

        def stash(token: str) -> str:
            key = f"DOCGENVALUE{len(filled)}END"
            value = values.get(token)
            if _is_blank(value):
                filled[key] = BLANK
            else:
                filled[key] = html.escape(str(value), quote=False).replace("\n", "<br>")
            return key

        body = self.markdown_to_html(substitute_tokens(markdown, stash))
        return _VALUE_KEY.sub(lambda m: filled.get(m.group(0), m.group(0)), body)

    def markdown_to_html(self, text: str) -> str:
        blocks = re.split(r"\n\s*\n", html.escape(text or "", quote=False).strip())
        parts: list[str] = []

        for block in blocks:
            paragraph: list[str] = []

            def flush() -> None:
                if paragraph:
                    body = "<br>".join(_inline(line) for line in paragraph)
                    parts.append(f'<p style="{PARAGRAPH_STYLE}">{body}</p>')
                    paragraph.clear()

            for raw in block.splitlines():
                line = raw.strip()
                if not line:
                    continue
                heading = _HEADING.match(line)
                if heading:
                    flush()
                    level = len(heading.group(1))
                    parts.append(
                        f'<h{level} style="{HEADING_STYLES[level]}">'
                        f"{_inline(heading.group(2))}</h{level}>"
                    )
                elif _RULE.match(line):
                    flush()
                    parts.append(f'<hr style="{HR_STYLE}">')
                else:
                    paragraph.append(line)
            flush()

        return "\n".join(parts)


    def render_preview_html(
        self,
        markdown: str,
        fields: Sequence[FieldDescriptor] | None = None,
    ) -> str:
        """Editor preview: every token rendered as a placeholder widget."""
        labels = _labels(fields, self._language)
        widgets: dict[str, str] = {}

        def stash(token: str) -> str:
            key = f"DOCGENFIELD{len(widgets)}END"
            label = html.escape(self.label_for(token, labels))
            widgets[key] = (
                '<span class="field-placeholder">'
                f'<strong class="field-label">{label}:</strong><br>'
                f'<span class="field-input">{BLANK}</span>'
                "</span>"
            )
            return f"\n{key}\n"

        converter = FieldPlaceholderMarkdown(widgets, extras=["break-on-newline", "tables"])
        return str(converter.convert(substitute_tokens(markdown, stash)))


def _inline(text: str) -> str:
    text = _BOLD.sub(r"<strong>\1</strong>", text)
    return _ITALIC.sub(r"<em>\1</em>", text)


class FieldPlaceholderMarkdown(markdown2.Markdown):
    """markdown2 converter that expands placeholder keys into widgets.

    Tokens are swapped for opaque keys before conversion so labels and the
    underscore line are never read as emphasis or rules.
    """

    def __init__(self, widgets: Mapping[str, str], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._widgets = dict(widgets)

    def postprocess(self, text: str) -> str:
        return _FIELD_KEY.sub(lambda m: self._widgets.get(m.group(0), m.group(0)), text)
