"""User profile API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docgen.api.deps import get_db, get_session_context, require_identity
from docgen.api.schemas import ProfileRead, ProfileUpdate
from docgen.core.context import Identity, SessionContext
from docgen.db.models import UserProfile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


async def get_or_create_profile(
    session: AsyncSession,
    identity: Identity,
    context: SessionContext | None = None,
) -> UserProfile:
    """Load the caller's profile, creating it from the identity claims on first use."""
    result = await session.execute(select(UserProfile).where(UserProfile.id == identity.uid))
    profile = result.scalar_one_or_none()
    if profile is not None:
        return profile

    preferences = {"language": "fr", "theme": "light"}
    if context is not None:
        preferences = {"language": context.language, "theme": context.theme}

    profile = UserProfile(
        id=identity.uid,
        email=identity.email,
        display_name=identity.display_name,
        photo_url=identity.photo_url,
        preferences=preferences,
    )
    session.add(profile)
    await session.commit()
    await session.refresh(profile)

    logger.info(f"Created profile for user {identity.uid}")
    return profile


@router.get("", response_model=ProfileRead)
async def read_profile(
    identity: Identity = Depends(require_identity),
    context: SessionContext = Depends(get_session_context),
    session: AsyncSession = Depends(get_db),
) -> ProfileRead:
    """Get the caller's profile."""
    try:
        return ProfileRead.model_validate(await get_or_create_profile(session, identity, context))

    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error loading profile {identity.uid}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error loading profile",
        ) from e


@router.put("", response_model=ProfileRead)
async def update_profile(
    profile_data: ProfileUpdate,
    identity: Identity = Depends(require_identity),
    context: SessionContext = Depends(get_session_context),
    session: AsyncSession = Depends(get_db),
) -> ProfileRead:
    """Update display fields and preferences of the caller's profile."""
    try:
        profile = await get_or_create_profile(session, identity, context)
        changes = profile_data.model_dump(exclude_unset=True, exclude_none=True)

        for key in ("display_name", "photo_url"):
            if key in changes:
                setattr(profile, key, changes[key])

        # Reassign so the JSON column is flagged dirty
        preferences = dict(profile.preferences or {})
        for key in ("language", "theme"):
            if key in changes:
                preferences[key] = changes[key]
        profile.preferences = preferences

        session.add(profile)
        await session.commit()
        await session.refresh(profile)

        logger.info(f"Updated profile {identity.uid}")
        return ProfileRead.model_validate(profile)

    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error updating profile {identity.uid}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating profile",
        ) from e
