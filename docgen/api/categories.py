"""Category management API routes.

Handles CRUD operations for the categories templates are grouped under.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docgen.api.deps import get_db
from docgen.api.schemas import CategoryCreate, CategoryRead, CategoryUpdate
from docgen.db.models import Category
from docgen.db.session import seed_default_categories

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


async def _get_category(session: AsyncSession, category_id: str) -> Category:
    result = await session.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category {category_id} not found",
        )
    return category


@router.get("", response_model=list[CategoryRead])
async def list_categories(
    session: AsyncSession = Depends(get_db),
) -> list[CategoryRead]:
    """List every category, ordered by ``order``."""
    try:
        result = await session.execute(select(Category).order_by(Category.order, Category.name))
        return [CategoryRead.model_validate(c) for c in result.scalars().all()]

    except Exception as e:
        logger.error(f"Error listing categories: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing categories",
        ) from e


@router.get("/active", response_model=list[CategoryRead])
async def list_active_categories(
    session: AsyncSession = Depends(get_db),
) -> list[CategoryRead]:
    """List active categories, ordered by ``order``."""
    try:
        result = await session.execute(
            select(Category)
            .where(Category.is_active == True)  # noqa: E712
            .order_by(Category.order, Category.name)
        )
        return [CategoryRead.model_validate(c) for c in result.scalars().all()]

    except Exception as e:
        logger.error(f"Error listing active categories: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing categories",
        ) from e


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    session: AsyncSession = Depends(get_db),
) -> CategoryRead:
    """Create a new category.

    Args:
        category_data: Category creation data.
        session: Database session.

    Returns:
        The created category.
    """
    try:
        logger.info(f"Creating category: {category_data.name}")

        category = Category(**category_data.model_dump())
        session.add(category)
        await session.commit()
        await session.refresh(category)

        logger.info(f"Created category: {category.id}")
        return CategoryRead.model_validate(category)

    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error creating category: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating category",
        ) from e


@router.post("/seed", status_code=status.HTTP_200_OK)
async def seed_categories(
    session: AsyncSession = Depends(get_db),
) -> dict[str, int]:
    """Insert the default categories if none exist yet."""
    try:
        created = await seed_default_categories(session)
        return {"created": created}

    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Error seeding categories: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error seeding categories",
        ) from e


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(
    category_id: str,
    session: AsyncSession = Depends(get_db),
) -> CategoryRead:
    """Get a category by ID.

    Raises:
        HTTPException: If the category does not exist.
    """
    try:
        return CategoryRead.model_validate(await _get_category(session, category_id))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching category {category_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching category",
        ) from e


@router.patch("/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: str,
    category_data: CategoryUpdate,
    session: AsyncSession = Depends(get_db),
) -> CategoryRead:
    """Update the provided fields of a category."""
    try:
        category = await _get_category(session, category_id)

        for key, value in category_data.model_dump(exclude_unset=True).items():
            setattr(category, key, value)

        session.add(category)
        await session.commit()
        await session.refresh(category)

        logger.info(f"Updated category: {category_id}")
        return CategoryRead.model_validate(category)

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error updating category {category_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating category",
        ) from e


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    session: AsyncSession = Depends(get_db),
) -> None:
    """Delete a category. Templates referencing it are left in place."""
    try:
        category = await _get_category(session, category_id)
        await session.delete(category)
        await session.commit()

        logger.info(f"Deleted category: {category_id}")

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error deleting category {category_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting category",
        ) from e
