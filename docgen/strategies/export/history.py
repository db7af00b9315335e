"""SQL-backed generation history."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from docgen.db.models import GeneratedDocument
from docgen.interfaces.history import BaseDocumentHistory

logger = logging.getLogger(__name__)


class SQLDocumentHistory(BaseDocumentHistory):
    """Writes GeneratedDocument rows through an async session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def record_generation(
        self,
        user_id: str,
        template_id: str,
        form_type: str,
        title: str,
    ) -> str:
        record = GeneratedDocument(
            user_id=user_id,
            template_id=template_id,
            form_type=form_type,
            title=title,
        )
        self._session.add(record)
        try:
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        logger.info(f"Recorded generation {record.id} for user {user_id}")
        return record.id
