"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for routes including:
- Database sessions
- Session context (identity, language, theme)
- Strategy components
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from docgen.core.config import Settings, get_settings
from docgen.core.context import Identity, SessionContext, normalize_language
from docgen.core.factory import ComponentFactory
from docgen.db.session import get_async_session
from docgen.interfaces.pdf import BasePDFConverter

logger = logging.getLogger(__name__)


async def get_db(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions.

    Args:
        settings: Application settings.

    Yields:
        An async database session.
    """
    async for session in get_async_session(settings):
        yield session


# One factory per Settings instance, so converter caches survive requests.
# Entries hold the settings object itself, so its id cannot be reused.
_factories: dict[int, tuple[Settings, ComponentFactory]] = {}


def get_factory(settings: Settings = Depends(get_settings)) -> ComponentFactory:
    entry = _factories.get(id(settings))
    if entry is None or entry[0] is not settings:
        entry = _factories[id(settings)] = (settings, ComponentFactory(settings))
    return entry[1]


def get_pdf_converter(factory: ComponentFactory = Depends(get_factory)) -> BasePDFConverter:
    """Dependency for the configured PDF converter."""
    try:
        return factory.get_pdf_converter()
    except ValueError as e:
        logger.error(f"PDF converter misconfigured: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="PDF export is not configured",
        ) from e


def decode_identity(token: str, settings: Settings) -> Identity:
    """Verify an identity provider token and read its profile claims.

    Args:
        token: Bearer token, without the "Bearer " prefix.
        settings: Application settings holding the verification key.

    Returns:
        The identity carried by the token.

    Raises:
        JWTError: If the token is invalid, expired or lacks a subject.
    """
    if not settings.auth_secret:
        raise JWTError("Token verification key is not configured")

    claims = jwt.decode(
        token,
        settings.auth_secret,
        algorithms=[settings.auth_algorithm],
        audience=settings.auth_audience,
        options={"verify_aud": settings.auth_audience is not None},
    )
    uid = claims.get("sub") or claims.get("user_id")
    if not uid:
        raise JWTError("Token has no subject")

    return Identity(
        uid=str(uid),
        email=claims.get("email"),
        display_name=claims.get("name"),
        photo_url=claims.get("picture"),
    )


async def get_identity(
    authorization: str | None = Header(default=None, description="Bearer token"),
    settings: Settings = Depends(get_settings),
) -> Identity | None:
    """Dependency for the optional signed-in identity.

    Anonymous requests yield None; a present but invalid token is rejected.

    Raises:
        HTTPException: If the token cannot be verified.
    """
    if not authorization:
        return None

    token = authorization[7:] if authorization.startswith("Bearer ") else authorization
    try:
        return decode_identity(token, settings)
    except JWTError as e:
        logger.warning(f"Rejected identity token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def require_identity(
    identity: Identity | None = Depends(get_identity),
) -> Identity:
    """Dependency for routes that only make sense for a signed-in user.

    Raises:
        HTTPException: If the request is anonymous.
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


async def get_session_context(
    identity: Identity | None = Depends(get_identity),
    x_language: str | None = Header(default=None, description="UI language: fr or ar"),
    accept_language: str | None = Header(default=None),
    x_theme: str | None = Header(default=None, description="UI theme: light or dark"),
    settings: Settings = Depends(get_settings),
) -> SessionContext:
    """Build the explicit per-request session context."""
    language = normalize_language(x_language or accept_language, settings.default_language)
    context = SessionContext(identity=identity, language=language)
    return context.with_theme(x_theme or "light")
