"""Document history interface.

Records that a document was generated. Writes are best-effort from the
exporter's point of view: a failure here never fails an export.
"""

from abc import ABC, abstractmethod


class BaseDocumentHistory(ABC):
    """Abstract base class for generation history sinks."""

    @abstractmethod
    async def record_generation(
        self,
        user_id: str,
        template_id: str,
        form_type: str,
        title: str,
    ) -> str:
        """Append one generation record.

        Args:
            user_id: Identity the document was generated for.
            template_id: Template that was exported.
            form_type: Document kind (the template's category).
            title: Human readable document title.

        Returns:
            Identifier of the new record.
        """
