"""Form submission API routes.

Server-side validation of submissions and the saved form store.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docgen.api.deps import get_db, get_session_context, require_identity
from docgen.api.schemas import (
    FormValidationResponse,
    FormValuesRequest,
    SavedFormCreate,
    SavedFormListResponse,
    SavedFormRead,
    SavedFormUpdate,
)
from docgen.api.templates import get_template_or_404
from docgen.core.context import Identity, SessionContext
from docgen.core.i18n import format_date, pick
from docgen.db.models import SavedForm
from docgen.strategies.forms import FormEngine
from docgen.strategies.template_engine import FieldDescriptor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forms", tags=["forms"])


def form_engine_for(fields: list[dict]) -> FormEngine:
    return FormEngine([FieldDescriptor.model_validate(f) for f in fields or []])


async def _get_owned_form(session: AsyncSession, form_id: str, identity: Identity) -> SavedForm:
    result = await session.execute(
        select(SavedForm).where(SavedForm.id == form_id, SavedForm.user_id == identity.uid)
    )
    saved_form = result.scalar_one_or_none()
    if saved_form is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Saved form {form_id} not found",
        )
    return saved_form


@router.post("/{template_id}/validate", response_model=FormValidationResponse)
async def validate_submission(
    template_id: str,
    request: FormValuesRequest,
    context: SessionContext = Depends(get_session_context),
    session: AsyncSession = Depends(get_db),
) -> FormValidationResponse:
    """Validate a submission against a template's fields.

    Raises:
        FormValidationError: Rendered as 422 with the per-field messages.
    """
    template = await get_template_or_404(session, template_id)
    values = form_engine_for(template.fields).validate(request.values, context.language)
    return FormValidationResponse(values=values)


@router.get("/saved", response_model=SavedFormListResponse)
async def list_saved_forms(
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> SavedFormListResponse:
    """List the caller's saved forms, most recently updated first."""
    try:
        result = await session.execute(
            select(SavedForm)
            .where(SavedForm.user_id == identity.uid)
            .order_by(SavedForm.updated_at.desc())
        )
        saved_forms = [SavedFormRead.model_validate(f) for f in result.scalars().all()]
        return SavedFormListResponse(saved_forms=saved_forms, total=len(saved_forms))

    except Exception as e:
        logger.error(f"Error listing saved forms for {identity.uid}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing saved forms",
        ) from e


@router.post("/saved", response_model=SavedFormRead, status_code=status.HTTP_201_CREATED)
async def save_form(
    form_data: SavedFormCreate,
    identity: Identity = Depends(require_identity),
    context: SessionContext = Depends(get_session_context),
    session: AsyncSession = Depends(get_db),
) -> SavedFormRead:
    """Store a submission under a title.

    Saving does not validate; drafts may be incomplete. Without a title the
    template name and today's date are used.
    """
    try:
        template = await get_template_or_404(session, form_data.template_id)
        title = form_data.title or (
            f"{pick(context.language, template.name, template.name_ar)} - {format_date(date.today())}"
        )

        saved_form = SavedForm(
            user_id=identity.uid,
            template_id=template.id,
            form_type=template.category_id or "",
            title=title,
            form_data=form_data.form_data,
        )
        session.add(saved_form)
        await session.commit()
        await session.refresh(saved_form)

        logger.info(f"Saved form {saved_form.id} for user {identity.uid}")
        return SavedFormRead.model_validate(saved_form)

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error saving form: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error saving form",
        ) from e


@router.patch("/saved/{form_id}", response_model=SavedFormRead)
async def update_saved_form(
    form_id: str,
    form_data: SavedFormUpdate,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> SavedFormRead:
    """Rename a saved form or replace its values."""
    try:
        saved_form = await _get_owned_form(session, form_id, identity)

        for key, value in form_data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(saved_form, key, value)

        session.add(saved_form)
        await session.commit()
        await session.refresh(saved_form)

        return SavedFormRead.model_validate(saved_form)

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error updating saved form {form_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating saved form",
        ) from e


@router.delete("/saved/{form_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_form(
    form_id: str,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> None:
    """Delete one of the caller's saved forms."""
    try:
        saved_form = await _get_owned_form(session, form_id, identity)
        await session.delete(saved_form)
        await session.commit()

        logger.info(f"Deleted saved form {form_id}")

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error deleting saved form {form_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting saved form",
        ) from e
