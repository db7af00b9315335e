"""Document export API routes.

Handles PDF export of filled templates, final HTML rendering, and the
per-user generation history.
"""

import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docgen.api.deps import (
    get_db,
    get_factory,
    get_pdf_converter,
    get_session_context,
    require_identity,
)
from docgen.api.forms import form_engine_for
from docgen.api.schemas import (
    ExportRequest,
    FormValuesRequest,
    GeneratedDocumentListResponse,
    GeneratedDocumentRead,
    RenderResponse,
    UserStatsResponse,
)
from docgen.api.templates import get_template_or_404
from docgen.core.context import Identity, SessionContext
from docgen.core.factory import ComponentFactory
from docgen.db.models import GeneratedDocument, SavedForm
from docgen.interfaces.pdf import BasePDFConverter
from docgen.strategies.export import SQLDocumentHistory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


@router.post(
    "/{template_id}/export",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def export_document(
    template_id: str,
    request: ExportRequest,
    context: SessionContext = Depends(get_session_context),
    session: AsyncSession = Depends(get_db),
    factory: ComponentFactory = Depends(get_factory),
    converter: BasePDFConverter = Depends(get_pdf_converter),
) -> Response:
    """Export a filled template as a PDF download.

    Values are validated again before rendering. Signed-in callers get a
    history entry; a failed history write does not fail the export.

    Raises:
        FormValidationError: Rendered as 422 with the per-field messages.
        TemplateIntegrityError: Rendered as 422 when the body is missing.
        PDFConversionError: Rendered as 502.
    """
    template = await get_template_or_404(session, template_id)
    values = form_engine_for(template.fields).validate(request.values, context.language)

    logger.info(f"Exporting template {template_id} ({context.language})")
    exporter = factory.get_exporter(converter=converter, history=SQLDocumentHistory(session))
    result = await exporter.export(
        template,
        values,
        identity=context.identity,
        language=context.language,
        summary=request.summary,
    )

    headers = {"Content-Disposition": f'attachment; filename="{result.filename}"'}
    if result.history_id:
        headers["X-History-Id"] = result.history_id
    return Response(content=result.content, media_type="application/pdf", headers=headers)


@router.post("/{template_id}/render", response_model=RenderResponse)
async def render_document(
    template_id: str,
    request: FormValuesRequest,
    context: SessionContext = Depends(get_session_context),
    session: AsyncSession = Depends(get_db),
    factory: ComponentFactory = Depends(get_factory),
    converter: BasePDFConverter = Depends(get_pdf_converter),
) -> RenderResponse:
    """Render the final HTML page of a filled template without converting it."""
    template = await get_template_or_404(session, template_id)
    values = form_engine_for(template.fields).validate(request.values, context.language)

    exporter = factory.get_exporter(converter=converter)
    return RenderResponse(
        title=exporter.title_for(template, context.language),
        html=exporter.build_html(template, values, context.language),
    )


@router.get("/history", response_model=GeneratedDocumentListResponse)
async def list_history(
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> GeneratedDocumentListResponse:
    """List the caller's generated documents, newest first."""
    try:
        result = await session.execute(
            select(GeneratedDocument)
            .where(GeneratedDocument.user_id == identity.uid)
            .order_by(GeneratedDocument.generated_at.desc())
        )
        documents = [GeneratedDocumentRead.model_validate(d) for d in result.scalars().all()]
        return GeneratedDocumentListResponse(documents=documents, total=len(documents))

    except Exception as e:
        logger.error(f"Error listing history for {identity.uid}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error listing generated documents",
        ) from e


@router.post("/history/{document_id}/download", response_model=GeneratedDocumentRead)
async def record_download(
    document_id: str,
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> GeneratedDocumentRead:
    """Increment the download counter of a history entry."""
    try:
        result = await session.execute(
            select(GeneratedDocument).where(
                GeneratedDocument.id == document_id,
                GeneratedDocument.user_id == identity.uid,
            )
        )
        document = result.scalar_one_or_none()
        if document is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Generated document {document_id} not found",
            )

        document.download_count = (document.download_count or 0) + 1
        session.add(document)
        await session.commit()
        await session.refresh(document)

        return GeneratedDocumentRead.model_validate(document)

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Database error updating download count: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating download count",
        ) from e


@router.get("/stats", response_model=UserStatsResponse)
async def get_stats(
    identity: Identity = Depends(require_identity),
    session: AsyncSession = Depends(get_db),
) -> UserStatsResponse:
    """Dashboard counters: saved forms, generations, this month, downloads."""
    try:
        saved = await session.execute(select(SavedForm.id).where(SavedForm.user_id == identity.uid))
        generated = await session.execute(
            select(GeneratedDocument.generated_at, GeneratedDocument.download_count).where(
                GeneratedDocument.user_id == identity.uid
            )
        )
        rows = generated.all()

        now = datetime.datetime.now(datetime.timezone.utc)
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        return UserStatsResponse(
            saved_forms_count=len(saved.all()),
            generated_docs_count=len(rows),
            this_month_count=sum(1 for generated_at, _ in rows if _as_utc(generated_at) >= month_start),
            total_downloads=sum(count or 0 for _, count in rows),
        )

    except Exception as e:
        logger.error(f"Error computing stats for {identity.uid}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error computing statistics",
        ) from e
