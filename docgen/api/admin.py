"""Admin credential check.

A single configured email/password pair gates the admin area of the
frontend. The answer is binary; no session or token is issued.
"""

import logging
import secrets

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from docgen.api.schemas import AdminAuthRequest, AdminAuthResponse
from docgen.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def check_admin_credentials(email: str, password: str, settings: Settings) -> bool:
    """Compare a credential pair against the configured admin account.

    An unconfigured account never matches.
    """
    if not settings.admin_email or not settings.admin_password:
        return False
    email_ok = secrets.compare_digest(
        email.strip().lower().encode(),
        settings.admin_email.strip().lower().encode(),
    )
    password_ok = secrets.compare_digest(password.encode(), settings.admin_password.encode())
    return email_ok and password_ok


@router.post(
    "/auth",
    response_model=AdminAuthResponse,
    responses={401: {"model": AdminAuthResponse}},
)
async def admin_auth(
    credentials: AdminAuthRequest,
    settings: Settings = Depends(get_settings),
):
    """Check admin credentials."""
    if check_admin_credentials(credentials.email, credentials.password, settings):
        logger.info("Admin authentication succeeded")
        return AdminAuthResponse(success=True)

    logger.warning("Admin authentication failed")
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=AdminAuthResponse(success=False, message="Invalid credentials").model_dump(),
    )
