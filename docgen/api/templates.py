"""Template management API routes.

Handles template CRUD, field derivation from the Markdown body, and the
editor preview.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docgen.api.deps import get_db, get_factory, get_session_context
from docgen.api.schemas import (
    FieldExtractionRequest,
    FieldExtractionResponse,
    PreviewRequest,
    PreviewResponse,
    TemplateCreate,
    TemplateRead,
    TemplateUpdate,
)
from docgen.core.context import SessionContext, normalize_language
from docgen.core.factory import ComponentFactory
from docgen.db.models import Template
from docgen.strategies.template_engine import FieldDescriptor, merge_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


# =============================================================================
# Helper Functions
# =============================================================================


async def get_template_or_404(session: AsyncSession, template_id: str) -> Template:
    """Load a template by id.

    Raises:
        HTTPException: 404 if the template does not exist.
    """
    result = await session.execute(select(Template).where(Template.id == template_id))
    template = result.scalar_one_or_none()
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Template {template_id} not found",
        )
    return template


def _derive_fields(
    factory: ComponentFactory,
    markdown: str,
    overrides: list[FieldDescriptor] | None,
) -> list[dict]:
    derived = factory.get_field_extractor().extract(markdown)
    return [f.model_dump(mode="json") for f in merge_fields(derived, overrides)]


def _stored_fields(template: Template) -> list[FieldDescriptor]:
    return [FieldDescriptor.model_validate(f) for f in template.fields or []]


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=list[TemplateRead])
async def list_templates(
    session: AsyncSession = Depends(get_db),
) -> list[TemplateRead]:
    """List every template, ordered by ``order``."""
    try:
        result = await session.execute(select(Template).order_by(Template.order, Template.name))
        return [TemplateRead.model_validate(t) for t in result.scalars().all()]

    except Exception as e:
        logger.error(f"Error listing templates: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing templates",
        ) from e


@router.get("/active", response_model=list[TemplateRead])
async def list_active_templates(
    session: AsyncSession = Depends(get_db),
) -> list[TemplateRead]:
    """List active templates, ordered by ``order``."""
    try:
        result = await session.execute(
            select(Template)
            .where(Template.is_active == True)  # noqa: E712
            .order_by(Template.order, Template.name)
        )
        return [TemplateRead.model_validate(t) for t in result.scalars().all()]

    except Exception as e:
        logger.error(f"Error listing active templates: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing templates",
        ) from e


@router.get("/by-category/{category_id}", response_model=list[TemplateRead])
async def list_templates_by_category(
    category_id: str,
    session: AsyncSession = Depends(get_db),
) -> list[TemplateRead]:
    """List the active templates of one category."""
    try:
        result = await session.execute(
            select(Template)
            .where(Template.category_id == category_id, Template.is_active == True)  # noqa: E712
            .order_by(Template.order, Template.name)
        )
        return [TemplateRead.model_validate(t) for t in result.scalars().all()]

    except Exception as e:
        logger.error(f"Error listing templates of category {category_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing templates",
        ) from e


@router.post("/extract-fields", response_model=FieldExtractionResponse)
async def extract_template_fields(
    request: FieldExtractionRequest,
    factory: ComponentFactory = Depends(get_factory),
) -> FieldExtractionResponse:
    """Derive the field list of a Markdown body without storing anything."""
    fields = factory.get_field_extractor().extract(request.markdown_content)
    return FieldExtractionResponse(fields=fields, count=len(fields))


@router.post("/preview", response_model=PreviewResponse)
async def preview_template(
    request: PreviewRequest,
    context: SessionContext = Depends(get_session_context),
    factory: ComponentFactory = Depends(get_factory),
) -> PreviewResponse:
    """Render the editor preview of a Markdown body.

    Tokens become labelled blank blocks; labels come from ``fields`` when
    given, otherwise they are derived from the token.
    """
    language = normalize_language(request.language, context.language)
    renderer = factory.get_field_renderer(language)
    return PreviewResponse(
        markdown=renderer.render_preview(request.markdown_content, request.fields),
        html=renderer.render_preview_html(request.markdown_content, request.fields),
    )


@router.post("", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
async def create_template(
    template_data: TemplateCreate,
    session: AsyncSession = Depends(get_db),
    factory: ComponentFactory = Depends(get_factory),
) -> TemplateRead:
    """Create a template.

    The stored field list is derived from ``markdown_content``; descriptors
    passed in ``fields`` survive only for tokens present in the body.

    Args:
        template_data: Template creation data.
        session: Database session.
        factory: Component factory.

    Returns:
        The created template.
    """
    try:
        logger.info(f"Creating template: {template_data.name}")

        data = template_data.model_dump(exclude={"fields"})
        data["fields"] = _derive_fields(factory, template_data.markdown_content, template_data.fields)

        template = Template(**data)
        session.add(template)
        await session.commit()
        await session.refresh(template)

        logger.info(f"Created template {template.id} with {len(template.fields)} fields")
        return TemplateRead.model_validate(template)

    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error creating template: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating template",
        ) from e


@router.get("/{template_id}", response_model=TemplateRead)
async def get_template(
    template_id: str,
    session: AsyncSession = Depends(get_db),
) -> TemplateRead:
    """Get a template by ID."""
    try:
        return TemplateRead.model_validate(await get_template_or_404(session, template_id))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching template {template_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching template",
        ) from e


@router.patch("/{template_id}", response_model=TemplateRead)
async def update_template(
    template_id: str,
    template_data: TemplateUpdate,
    session: AsyncSession = Depends(get_db),
    factory: ComponentFactory = Depends(get_factory),
) -> TemplateRead:
    """Update the provided fields of a template.

    Whenever the body or the field overrides change, the field list is
    re-derived from the (new) body, keeping overrides for surviving tokens.
    """
    try:
        template = await get_template_or_404(session, template_id)
        changes = template_data.model_dump(exclude_unset=True, exclude={"fields"})

        for key, value in changes.items():
            if value is None and key in ("name", "markdown_content"):
                continue
            setattr(template, key, value)

        if "markdown_content" in changes or "fields" in template_data.model_fields_set:
            overrides = template_data.fields if template_data.fields is not None else _stored_fields(template)
            template.fields = _derive_fields(factory, template.markdown_content, overrides)

        session.add(template)
        await session.commit()
        await session.refresh(template)

        logger.info(f"Updated template: {template_id}")
        return TemplateRead.model_validate(template)

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error updating template {template_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating template",
        ) from e


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str,
    session: AsyncSession = Depends(get_db),
) -> None:
    """Delete a template."""
    try:
        template = await get_template_or_404(session, template_id)
        await session.delete(template)
        await session.commit()

        logger.info(f"Deleted template: {template_id}")

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error deleting template {template_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting template",
        ) from e
