"""Unit tests for session context, identity tokens and the admin check."""

import time

import pytest
from jose import JWTError, jwt

from docgen.api.admin import check_admin_credentials
from docgen.api.deps import _factories, decode_identity, get_factory
from docgen.core.config import Settings
from docgen.core.context import Identity, SessionContext, normalize_language

SECRET = "test-secret"


@pytest.fixture
def settings():
    """Settings with a token key and an admin account."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        auth_secret=SECRET,
        admin_email="admin@mairie.dz",
        admin_password="s3cret!",
    )


def make_token(claims: dict, secret: str = SECRET) -> str:
    return jwt.encode({"exp": int(time.time()) + 3600, **claims}, secret, algorithm="HS256")


# =============================================================================
# Session Context Tests
# =============================================================================


class TestSessionContext:
    """Test suite for SessionContext."""

    def test_defaults(self):
        """Test an anonymous French light context."""
        context = SessionContext()

        assert context.is_authenticated is False
        assert context.language == "fr"
        assert context.theme == "light"
        assert context.is_rtl is False

    def test_sign_out_keeps_preferences(self):
        """Test that signing out drops the identity and its token."""
        context = SessionContext(
            identity=Identity(uid="u1"), language="ar", theme="dark", extras={"token": "abc"}
        )

        signed_out = context.signed_out()

        assert signed_out.identity is None
        assert signed_out.extras == {}
        assert signed_out.language == "ar"
        assert signed_out.theme == "dark"
        assert context.identity is not None
        assert context.extras == {"token": "abc"}

    def test_unknown_values_fall_back(self):
        """Test that unsupported language and theme are normalised."""
        context = SessionContext().with_language("en").with_theme("neon")

        assert context.language == "fr"
        assert context.theme == "light"
        assert SessionContext().with_language("ar").is_rtl is True

    @pytest.mark.parametrize(
        "header, expected",
        [("ar-DZ,ar;q=0.9,fr;q=0.8", "ar"), ("en-US,fr;q=0.5", "fr"), ("en", "fr"), (None, "fr")],
    )
    def test_normalize_language(self, header, expected):
        """Test Accept-Language parsing."""
        assert normalize_language(header) == expected


# =============================================================================
# Identity Token Tests
# =============================================================================


class TestDecodeIdentity:
    """Test suite for decode_identity."""

    def test_claims_are_mapped(self, settings):
        """Test that profile claims populate the identity."""
        token = make_token(
            {"sub": "uid-42", "email": "amina@poste.dz", "name": "Amina", "picture": "https://x/a.png"}
        )

        identity = decode_identity(token, settings)

        assert identity == Identity(
            uid="uid-42",
            email="amina@poste.dz",
            display_name="Amina",
            photo_url="https://x/a.png",
        )

    def test_wrong_key_is_rejected(self, settings):
        """Test that a token signed with another key fails."""
        with pytest.raises(JWTError):
            decode_identity(make_token({"sub": "u"}, secret="other"), settings)

    def test_expired_token_is_rejected(self, settings):
        """Test that expired tokens fail."""
        token = jwt.encode({"sub": "u", "exp": int(time.time()) - 10}, SECRET, algorithm="HS256")

        with pytest.raises(JWTError):
            decode_identity(token, settings)

    def test_subject_is_required(self, settings):
        """Test that a token without subject fails."""
        with pytest.raises(JWTError):
            decode_identity(make_token({"email": "a@b.dz"}), settings)

    def test_unconfigured_key_rejects_everything(self, settings):
        """Test that no token verifies without a configured key."""
        with pytest.raises(JWTError):
            decode_identity(make_token({"sub": "u"}), settings.model_copy(update={"auth_secret": ""}))

    def test_audience_is_checked_when_configured(self, settings):
        """Test the audience claim."""
        configured = settings.model_copy(update={"auth_audience": "docgen"})

        assert decode_identity(make_token({"sub": "u", "aud": "docgen"}), configured).uid == "u"
        with pytest.raises(JWTError):
            decode_identity(make_token({"sub": "u", "aud": "other"}), configured)


# =============================================================================
# Admin Credential Tests
# =============================================================================


class TestAdminCredentials:
    """Test suite for check_admin_credentials."""

    def test_matching_pair(self, settings):
        """Test the configured pair, email case-insensitively."""
        assert check_admin_credentials("admin@mairie.dz", "s3cret!", settings) is True
        assert check_admin_credentials(" Admin@Mairie.dz ", "s3cret!", settings) is True

    @pytest.mark.parametrize(
        "email, password",
        [("admin@mairie.dz", "wrong"), ("other@mairie.dz", "s3cret!"), ("", "")],
    )
    def test_mismatch(self, settings, email, password):
        """Test that any mismatch is rejected."""
        assert check_admin_credentials(email, password, settings) is False

    def test_unconfigured_account_never_matches(self, settings):
        """Test that empty settings do not accept empty credentials."""
        unconfigured = settings.model_copy(update={"admin_email": "", "admin_password": ""})

        assert check_admin_credentials("", "", unconfigured) is False


# =============================================================================
# Factory Cache Tests
# =============================================================================


class TestGetFactory:
    """Test suite for the per-settings component factory."""

    def test_same_settings_share_a_factory(self, settings):
        """Test that repeated requests reuse the factory."""
        assert get_factory(settings) is get_factory(settings)

    def test_entry_pins_its_settings(self, settings):
        """Test that a cached factory always belongs to the settings it was built for."""
        factory = get_factory(settings)
        other = settings.model_copy(update={"auth_secret": "other-secret"})

        assert _factories[id(settings)][0] is settings
        assert get_factory(other) is not factory
        assert _factories[id(other)][0] is other
