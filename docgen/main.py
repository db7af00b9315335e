"""FastAPI application entry point.

Main application setup with middleware, routing, and lifecycle management.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docgen import __version__
from docgen.api import (
    admin_router,
    categories_router,
    documents_router,
    forms_router,
    profile_router,
    templates_router,
)
from docgen.api.schemas import ErrorResponse
from docgen.core.config import Settings, get_settings
from docgen.core.logging_config import setup_logging
from docgen.db.session import close_db, init_db
from docgen.interfaces.form import FormValidationError
from docgen.interfaces.pdf import PDFConversionError
from docgen.interfaces.template import TemplateIntegrityError

# Initialize logging before importing other modules
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Creates tables and seeds default categories on startup, disposes of
    the engine on shutdown.
    """
    settings: Settings = app.state.settings

    logger.info("Starting document generator API...")

    try:
        logger.info("Initializing database...")
        await init_db(settings)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)
        raise

    yield

    logger.info("Shutting down document generator API...")

    try:
        await close_db(settings)
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {e}", exc_info=True)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    try:
        settings = settings or get_settings()

        app = FastAPI(
            title="Document Generator",
            description="Bilingual administrative document generation from Markdown templates",
            version=__version__,
            lifespan=lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        app.state.settings = settings

        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        for router in (
            categories_router,
            templates_router,
            forms_router,
            documents_router,
            profile_router,
            admin_router,
        ):
            app.include_router(router, prefix="/api")
            logger.info(f"Registered {router.prefix} router")

        @app.get("/health", tags=["health"])
        async def health_check():
            """Health check endpoint for load balancers and monitoring."""
            return {
                "status": "healthy",
                "service": "docgen-api",
                "version": __version__,
            }

        # Exception handlers
        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request, exc):
            """Handle Pydantic validation errors."""
            logger.warning(f"Validation error: {exc.errors()}")
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={
                    "detail": "Validation error",
                    "errors": jsonable_errors(exc.errors()),
                },
            )

        @app.exception_handler(FormValidationError)
        async def form_validation_handler(request, exc: FormValidationError):
            """Handle submissions failing field validation."""
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={
                    **ErrorResponse(
                        detail="Form validation failed",
                        error_code="FORM_VALIDATION",
                    ).model_dump(),
                    "errors": exc.errors,
                },
            )

        @app.exception_handler(TemplateIntegrityError)
        async def template_integrity_handler(request, exc: TemplateIntegrityError):
            """Handle templates that cannot be rendered."""
            logger.error(f"Template integrity error: {exc}")
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content=ErrorResponse(
                    detail=str(exc),
                    error_code="TEMPLATE_INTEGRITY",
                ).model_dump(),
            )

        @app.exception_handler(PDFConversionError)
        async def pdf_conversion_handler(request, exc: PDFConversionError):
            """Handle converter failures."""
            logger.error(f"PDF conversion failed: {exc}", exc_info=exc)
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content=ErrorResponse(
                    detail="PDF conversion failed",
                    error_code="PDF_CONVERSION",
                ).model_dump(),
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request, exc):
            """Handle uncaught exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=ErrorResponse(
                    detail="Internal server error",
                    error_code="INTERNAL_ERROR",
                ).model_dump(),
            )

        logger.info("FastAPI application created successfully")
        return app

    except Exception as e:
        logger.error(f"Failed to create FastAPI app: {e}", exc_info=True)
        raise


def jsonable_errors(errors: list[dict]) -> list[dict]:
    """Drop the non-serializable ``ctx``/``input`` parts of pydantic errors."""
    return [{k: v for k, v in error.items() if k in ("type", "loc", "msg")} for error in errors]


# Create the app instance
try:
    app = create_app()
except Exception as e:
    logger.error(f"Fatal error creating app: {e}", exc_info=True)
    raise


if __name__ == "__main__":
    import uvicorn

    try:
        settings = get_settings()
        logger.info("Starting uvicorn server on port 8000...")
        uvicorn.run(
            "docgen.main:app",
            host="0.0.0.0",
            port=8000,
            reload=True,
            log_level=settings.log_level.lower(),
        )
    except Exception as e:
        logger.error(f"Failed to start uvicorn: {e}", exc_info=True)
        raise
