"""Per-request session context.

Identity, UI language and colour theme travel together as one explicit
object. The API builds it from request headers; the Streamlit frontend
keeps one in ``st.session_state`` and replaces it on sign-out.
"""

from dataclasses import dataclass, field, replace

SUPPORTED_LANGUAGES = ("fr", "ar")
SUPPORTED_THEMES = ("light", "dark")


@dataclass(frozen=True)
class Identity:
    """Authenticated user as supplied by the identity provider.

    Attributes:
        uid: Opaque user identifier (token subject).
        email: Email claim, if present.
        display_name: Display name claim, if present.
        photo_url: Avatar URL claim, if present.
    """

    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None


@dataclass(frozen=True)
class SessionContext:
    """Explicit session state passed down to handlers and UI pages."""

    identity: Identity | None = None
    language: str = "fr"
    theme: str = "light"
    extras: dict[str, str] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def is_rtl(self) -> bool:
        return self.language == "ar"

    def with_language(self, language: str) -> "SessionContext":
        return replace(self, language=normalize_language(language))

    def with_theme(self, theme: str) -> "SessionContext":
        return replace(self, theme=theme if theme in SUPPORTED_THEMES else "light")

    def signed_out(self) -> "SessionContext":
        """Drop the identity and its token, keeping display preferences."""
        return replace(self, identity=None, extras={})


def normalize_language(value: str | None, default: str = "fr") -> str:
    """Reduce an Accept-Language style value to 'fr' or 'ar'.

    Args:
        value: Raw header value such as ``"ar-DZ,ar;q=0.9"``.
        default: Fallback when nothing usable is found.

    Returns:
        A supported language code.
    """
    if not value:
        return default
    for part in value.split(","):
        code = part.split(";")[0].strip().lower()[:2]
        if code in SUPPORTED_LANGUAGES:
            return code
    return default
