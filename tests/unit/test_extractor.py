"""Unit tests for the placeholder field extractor."""

import pytest

from docgen.strategies.template_engine import (
    FieldDescriptor,
    FieldExtractor,
    FieldType,
    FieldValidation,
    extract_fields,
    merge_fields,
)
from docgen.strategies.template_engine.extractor import derive_label, derive_label_ar, substitute_tokens


class TestFieldExtractor:
    """Test suite for FieldExtractor."""

    @pytest.fixture
    def extractor(self):
        """Create an extractor instance."""
        return FieldExtractor()

    # =========================================================================
    # Token Detection Tests
    # =========================================================================

    def test_prefix_token_is_separate_field(self, extractor):
        """Test that a token which prefixes another does not swallow it."""
        fields = extractor.extract("/full_name and /full_name2")

        assert [f.id for f in fields] == ["full_name", "full_name2"]

    def test_first_occurrence_order_and_dedup(self, extractor):
        """Test that repeats collapse and order follows first appearance."""
        markdown = "Je soussigné /nom, né le /date_naissance.\nSigné: /nom le /date"

        assert extractor.tokens(markdown) == ["nom", "date_naissance", "date"]

    def test_and_or_is_not_a_field(self, extractor):
        """Test that a slash inside a word is prose."""
        assert extractor.tokens("Cochez oui and/or non, puis /choix") == ["choix"]

    def test_adjacent_tokens_are_both_fields(self, extractor):
        """Test that a token glued to the previous one is still a field."""
        assert extractor.tokens("Nom: /nom/prenom") == ["nom", "prenom"]

    def test_unicode_letter_ends_token(self, extractor):
        """Test that accented and Arabic letters are not part of a token."""
        assert extractor.tokens("/nomé et /villeالجزائر") == ["nom", "ville"]

    def test_longer_token_never_yields_shorter(self, extractor):
        """Test that /name_extra does not register /name."""
        assert extractor.tokens("/name_extra") == ["name_extra"]

    def test_token_must_start_with_letter_or_underscore(self, extractor):
        """Test that dates and numbers after a slash are ignored."""
        assert extractor.tokens("Le 12/05/2024 ou /_interne") == ["_interne"]

    def test_empty_body(self, extractor):
        """Test that an empty or missing body yields no fields."""
        assert extractor.extract("") == []
        assert extractor.extract(None) == []

    # =========================================================================
    # Descriptor Tests
    # =========================================================================

    def test_derived_labels(self):
        """Test label derivation from snake_case tokens."""
        assert derive_label("employee_id") == "Employee Id"
        assert derive_label_ar("employee_id") == "employee id"

    def test_defaults(self, extractor):
        """Test the defaults of a derived descriptor."""
        (field,) = extractor.extract("Matricule: /employee_id")

        assert field.id == "employee_id"
        assert field.type == FieldType.TEXT
        assert field.label == "Employee Id"
        assert field.label_ar == "employee id"
        assert field.placeholder == ""
        assert field.placeholder_ar == ""
        assert field.required is False
        assert field.options is None
        assert field.validation is None

    def test_module_shortcut(self):
        """Test that extract_fields matches the class."""
        assert extract_fields("/a /b") == FieldExtractor().extract("/a /b")

    def test_substitute_tokens_honours_boundary(self):
        """Test the single-pass replacement helper."""
        replaced = substitute_tokens("/name /name_extra x/name", lambda token: token.upper())

        assert replaced == "NAME NAME_EXTRA x/name"


# =============================================================================
# Field Merge Tests
# =============================================================================


class TestMergeFields:
    """Test suite for merge_fields."""

    def test_overrides_survive_for_present_tokens(self):
        """Test that admin settings are kept when the token still exists."""
        previous = [
            FieldDescriptor(
                id="email",
                type=FieldType.EMAIL,
                label="Courriel",
                required=True,
                validation=FieldValidation(max=120),
            )
        ]
        merged = merge_fields(extract_fields("Contact: /email, /phone"), previous)

        assert [f.id for f in merged] == ["email", "phone"]
        assert merged[0].type == FieldType.EMAIL
        assert merged[0].required is True
        assert merged[0].validation.max == 120
        assert merged[1].label == "Phone"

    def test_removed_tokens_are_dropped(self):
        """Test that overrides for deleted tokens disappear."""
        previous = [FieldDescriptor(id="old", required=True)]

        merged = merge_fields(extract_fields("/new"), previous)

        assert [f.id for f in merged] == ["new"]

    def test_merge_copies_overrides(self):
        """Test that merged descriptors are independent copies."""
        previous = [FieldDescriptor(id="a", label="A")]

        merged = merge_fields(extract_fields("/a"), previous)
        merged[0].label = "changed"

        assert previous[0].label == "A"

    def test_no_previous(self):
        """Test merging against nothing returns the derived list."""
        derived = extract_fields("/a")

        assert merge_fields(derived, None) == derived
