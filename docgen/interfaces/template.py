"""Template field extraction and rendering interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any


class BaseFieldExtractor(ABC):
    """Abstract base class for placeholder extraction strategies.

    Scans a template body for placeholder tokens and derives the
    ordered list of fields a user has to fill.
    """

    @abstractmethod
    def extract(self, markdown: str) -> list[Any]:
        """Derive the field list of a template body.

        Args:
            markdown: Raw Markdown body of the template.

        Returns:
            Duplicate-free FieldDescriptor list in first-occurrence order.
        """

    @abstractmethod
    def tokens(self, markdown: str) -> list[str]:
        """Return the distinct token names in first-occurrence order."""


class BaseFieldRenderer(ABC):
    """Abstract base class for placeholder substitution strategies."""

    @abstractmethod
    def render_preview(self, markdown: str, fields: Sequence[Any] | None = None) -> str:
        """Replace every token with a labelled blank block.

        Args:
            markdown: Raw Markdown body.
            fields: Field descriptors providing labels. Derived from the
                body when omitted.

        Returns:
            Markdown with preview blocks in place of tokens.
        """

    @abstractmethod
    def render_final(self, markdown: str, values: Mapping[str, Any] | None) -> str:
        """Replace every token with its submitted value.

        Args:
            markdown: Raw Markdown body.
            values: Field id to submitted value. Missing or empty values
                render as a fixed blank placeholder.

        Returns:
            Markdown with values in place of tokens.
        """

    @abstractmethod
    def render_final_html(self, markdown: str, values: Mapping[str, Any] | None) -> str:
        """Final rendering straight to export HTML, values escaped as text."""

    @abstractmethod
    def markdown_to_html(self, text: str) -> str:
        """Convert basic Markdown to inline-styled HTML for export."""


class TemplateIntegrityError(Exception):
    """Raised when a template cannot be rendered because its body is missing."""

    pass
