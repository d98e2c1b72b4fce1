"""
Admin session router.

Exchanges operator credentials for a signed session token, returned in
the body and set as an HTTP-only cookie.
"""

from fastapi import APIRouter, Response

from app.core.config import settings
from app.interfaces.qualitative.schemas import (
    AdminSessionRequest,
    AdminSessionResponse,
    ErrorResponse,
)
from app.shared.security.admin_auth import ADMIN_COOKIE_NAME, login

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/session",
    response_model=AdminSessionResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Open an admin session",
    description="Validate operator credentials and issue a session token.",
)
def create_session(body: AdminSessionRequest, response: Response) -> AdminSessionResponse:
    """Issue an admin session token."""
    token = login(body.username, body.password)
    response.set_cookie(
        key=ADMIN_COOKIE_NAME,
        value=token,
        max_age=settings.admin_token_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=not settings.debug,
    )
    return AdminSessionResponse(token=token, expires_in=settings.admin_token_ttl_seconds)
