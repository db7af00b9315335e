"""Unit tests for the placeholder renderer."""

import pytest

from docgen.strategies.template_engine import BLANK, FieldDescriptor, FieldRenderer


class TestRenderPreview:
    """Test suite for the editor preview substitution."""

    @pytest.fixture
    def renderer(self):
        """Create a French renderer."""
        return FieldRenderer("fr")

    def test_token_becomes_label_block(self, renderer):
        """Test that a token is replaced by a bold label and a blank line."""
        preview = renderer.render_preview("Date: /date")

        assert "/date" not in preview
        assert f"\n**Date:**\n{BLANK}\n" in preview

    def test_labels_from_fields(self, renderer):
        """Test that descriptor labels take precedence over derived ones."""
        fields = [FieldDescriptor(id="nom", label="Nom complet", label_ar="الاسم الكامل")]

        assert "**Nom complet:**" in renderer.render_preview("/nom", fields)
        assert "**الاسم الكامل:**" in FieldRenderer("ar").render_preview("/nom", fields)

    def test_arabic_falls_back_to_derived_label(self):
        """Test the Arabic derived label for unknown tokens."""
        assert "**date naissance:**" in FieldRenderer("ar").render_preview("/date_naissance")

    def test_every_occurrence_replaced(self, renderer):
        """Test that replacement is global per token."""
        preview = renderer.render_preview("/nom et /nom")

        assert preview.count("**Nom:**") == 2

    def test_preview_html_uses_placeholder_widgets(self, renderer):
        """Test the markdown2 preview renders blocks as widgets."""
        html = renderer.render_preview_html("# Attestation\n\nJe soussigné /nom_complet.")

        assert "<h1>" in html
        assert 'class="field-placeholder"' in html
        assert "Nom Complet:" in html
        assert BLANK in html
        assert "/nom_complet" not in html
        assert "DOCGENFIELD" not in html

    def test_preview_html_label_with_asterisk(self, renderer):
        """Test that any label text keeps its widget."""
        fields = [FieldDescriptor(id="nom", label="Nom*")]

        html = renderer.render_preview_html("/nom", fields)

        assert 'class="field-placeholder"' in html
        assert "Nom*:" in html
        assert "<hr" not in html


class TestRenderFinal:
    """Test suite for the export substitution."""

    @pytest.fixture
    def renderer(self):
        """Create a French renderer."""
        return FieldRenderer("fr")

    def test_value_replaces_token(self, renderer):
        """Test that a submitted value replaces its token."""
        rendered = renderer.render_final("Date: /date", {"date": "2024-01-01"})

        assert "2024-01-01" in rendered
        assert "/date" not in rendered

    @pytest.mark.parametrize("values", [{}, {"date": None}, {"date": ""}, {"date": "   "}, None])
    def test_missing_value_renders_blank(self, renderer, values):
        """Test that absent or empty values render the fixed blank."""
        rendered = renderer.render_final("Date: /date", values)

        assert rendered == f"Date: {BLANK}"
        assert "None" not in rendered
        assert "undefined" not in rendered

    def test_prefix_token_not_clobbered(self, renderer):
        """Test that /name does not eat into /name_extra."""
        rendered = renderer.render_final("/name /name_extra", {"name": "A", "name_extra": "B"})

        assert rendered == "A B"

    def test_value_that_looks_like_token_stays_literal(self, renderer):
        """Test that substitution happens in a single pass."""
        rendered = renderer.render_final("/a /b", {"a": "/b", "b": "x"})

        assert rendered == "/b x"

    def test_adjacent_tokens_both_filled(self, renderer):
        """Test that no token text survives between glued tokens."""
        rendered = renderer.render_final("Nom: /nom/prenom", {"nom": "A", "prenom": "B"})

        assert rendered == "Nom: A/B"


class TestRenderFinalHtml:
    """Test suite for the export HTML substitution."""

    @pytest.fixture
    def renderer(self):
        """Create a French renderer."""
        return FieldRenderer("fr")

    def test_values_are_text_not_markup(self, renderer):
        """Test that submitted Markdown syntax stays literal."""
        html = renderer.render_final_html(
            "Adresse:\n/adresse\n\nNom: /nom",
            {"adresse": "# 12 rue X", "nom": "a*b*c"},
        )

        assert "<h1" not in html
        assert "# 12 rue X" in html
        assert "a*b*c" in html
        assert "<em>" not in html

    def test_template_markup_still_applies(self, renderer):
        """Test that the body's own headings and emphasis are kept."""
        html = renderer.render_final_html("# Attestation /nom\n\n**Date:** /date", {"nom": "Amina"})

        assert ">Attestation Amina</h1>" in html
        assert f"<strong>Date:</strong> {BLANK}" in html

    def test_values_are_escaped(self, renderer):
        """Test that submitted HTML is shown, not interpreted."""
        html = renderer.render_final_html("Nom: /nom", {"nom": "<b>x</b>\nsuite"})

        assert "<b>" not in html
        assert "&lt;b&gt;x&lt;/b&gt;<br>suite" in html
        assert "DOCGENVALUE" not in html


class TestMarkdownToHtml:
    """Test suite for the export Markdown subset."""

    @pytest.fixture
    def renderer(self):
        """Create a French renderer."""
        return FieldRenderer("fr")

    def test_headings_rule_and_paragraphs(self, renderer):
        """Test the supported block elements."""
        html = renderer.markdown_to_html("# Titre\n\n## Section\n\n---\n\nLigne 1\nLigne 2")

        assert html.startswith('<h1 style="')
        assert ">Titre</h1>" in html
        assert ">Section</h2>" in html
        assert "<hr " in html
        assert "Ligne 1<br>Ligne 2" in html

    def test_inline_emphasis(self, renderer):
        """Test bold and italic conversion."""
        html = renderer.markdown_to_html("**Nom:** Amina et *note*")

        assert "<strong>Nom:</strong>" in html
        assert "<em>note</em>" in html

    def test_blank_line_is_not_a_rule(self, renderer):
        """Test that an unfilled field survives as text."""
        html = renderer.markdown_to_html(f"Signature:\n\n{BLANK}")

        assert "<hr" not in html
        assert BLANK in html

    def test_markup_is_escaped(self, renderer):
        """Test that submitted HTML is shown, not interpreted."""
        text = renderer.render_final("Nom: /nom", {"nom": "<script>alert(1)</script>"})
        html = renderer.markdown_to_html(text)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_empty_text(self, renderer):
        """Test that empty input yields no markup."""
        assert renderer.markdown_to_html("") == ""
