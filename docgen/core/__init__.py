"""Core configuration, session context and localization."""

from docgen.core.config import Settings, get_settings
from docgen.core.context import Identity, SessionContext

__all__ = [
    "Settings",
    "get_settings",
    "Identity",
    "SessionContext",
]
