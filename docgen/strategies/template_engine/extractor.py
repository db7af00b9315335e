"""Placeholder field extraction.

A template body marks fillable slots with identifier-like tokens
prefixed by a slash, e.g. ``/full_name``. Extraction is a pure
function of the body; the field list is recomputed on every edit.
"""

import logging
import re
from collections.abc import Callable, Iterable

from docgen.interfaces.template import BaseFieldExtractor
from docgen.strategies.template_engine.models import FieldDescriptor, FieldType

logger = logging.getLogger(__name__)

# ASCII word boundary: "/nomé" and "/villeالجزائر" still yield "nom" and "ville",
# while "/name_extra" never yields "name".
TOKEN_PATTERN = re.compile(r"/([A-Za-z_][A-Za-z0-9_]*)\b", re.ASCII)
_WORD_CHAR = re.compile(r"[A-Za-z0-9_]")


def find_tokens(markdown: str) -> list[re.Match[str]]:
    """Return the token matches of a body, in order.

    A slash glued to a preceding word ("and/or") is prose, unless that
    word is itself a token ("/nom/prenom" holds two tokens).
    """
    text = markdown or ""
    matches: list[re.Match[str]] = []
    chained_at = -1
    for match in TOKEN_PATTERN.finditer(text):
        start = match.start()
        if start > 0 and start != chained_at and _WORD_CHAR.match(text[start - 1]):
            continue
        matches.append(match)
        chained_at = match.end()
    return matches


def substitute_tokens(markdown: str, replace: Callable[[str], str]) -> str:
    """Replace every token in a single pass with ``replace(token)``."""
    text = markdown or ""
    parts: list[str] = []
    position = 0
    for match in find_tokens(text):
        parts.append(text[position:match.start()])
        parts.append(replace(match.group(1)))
        position = match.end()
    parts.append(text[position:])
    return "".join(parts)


def derive_label(token: str) -> str:
    """``employee_id`` -> ``Employee Id``."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), token.replace("_", " "))


def derive_label_ar(token: str) -> str:
    """``employee_id`` -> ``employee id``."""
    return token.replace("_", " ")


class FieldExtractor(BaseFieldExtractor):
    """Derives text fields from the placeholder tokens of a Markdown body."""

    def tokens(self, markdown: str) -> list[str]:
        # dict keeps first-occurrence order
        return list(dict.fromkeys(match.group(1) for match in find_tokens(markdown)))

    def extract(self, markdown: str) -> list[FieldDescriptor]:
        fields = [
            FieldDescriptor(
                id=token,
                type=FieldType.TEXT,
                label=derive_label(token),
                label_ar=derive_label_ar(token),
                placeholder="",
                placeholder_ar="",
                required=False,
            )
            for token in self.tokens(markdown)
        ]
        logger.debug(f"Extracted {len(fields)} fields")
        return fields


def extract_fields(markdown: str) -> list[FieldDescriptor]:
    """Module-level shortcut for ``FieldExtractor().extract``."""
    return FieldExtractor().extract(markdown)


def merge_fields(
    derived: Iterable[FieldDescriptor],
    previous: Iterable[FieldDescriptor] | None,
) -> list[FieldDescriptor]:
    """Carry admin overrides onto a freshly derived field list.

    The derived list is authoritative for which fields exist and in what
    order; a previous descriptor only contributes its settings when its
    token is still present in the body.

    Args:
        derived: Fields extracted from the current body.
        previous: Fields stored before the edit, possibly hand-tuned.

    Returns:
        One descriptor per derived token.
    """
    overrides = {field.id: field for field in previous or []}
    merged = []
    for field in derived:
        override = overrides.get(field.id)
        merged.append(override.model_copy(deep=True) if override else field)
    return merged
