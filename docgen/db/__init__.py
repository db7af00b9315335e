"""Database models and session management."""

from docgen.db.models import (
    Category,
    GeneratedDocument,
    SavedForm,
    Template,
    UserProfile,
)
from docgen.db.session import (
    AsyncSession,
    create_all_tables,
    get_async_session,
    init_db,
)

__all__ = [
    # Models
    "Category",
    "Template",
    "SavedForm",
    "GeneratedDocument",
    "UserProfile",
    # Session
    "AsyncSession",
    "get_async_session",
    "create_all_tables",
    "init_db",
]
