"""
Admin session tokens.

Tokens have the form ``"<issued_at_ms>.<hex hmac-sha256(issued_at_ms)>"``
keyed by ``ADMIN_AUTH_SECRET``. They carry no identity: possession of a
valid, unexpired token is the admin session. Signatures are compared in
constant time.
"""

import hashlib
import hmac
import logging
import time
from typing import Optional

from fastapi import Request

from app.core.config import settings
from app.domain.qualitative.errors import AdminAuthError

logger = logging.getLogger(__name__)

ADMIN_COOKIE_NAME = "admin_session"
NOT_CONFIGURED_MESSAGE = "Admin login is not configured."
INVALID_CREDENTIALS_MESSAGE = "Invalid admin credentials."


def _now_ms() -> int:
    return int(time.time() * 1000)


def _signature(secret: str, payload: str) -> str:
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


def sign_admin_token(secret: str, now_ms: Optional[int] = None) -> Optional[str]:
    """Issue a token stamped with ``now_ms``; None when no secret is configured."""
    if not secret:
        return None
    payload = str(now_ms if now_ms is not None else _now_ms())
    return f"{payload}.{_signature(secret, payload)}"


def _same(given: str, expected: str) -> bool:
    """Constant-time comparison of the UTF-8 encodings of two strings."""
    return hmac.compare_digest(
        given.encode("utf-8", "surrogatepass"), expected.encode("utf-8", "surrogatepass")
    )


def verify_admin_token(
    token: Optional[str],
    secret: str,
    ttl_seconds: int,
    now_ms: Optional[int] = None,
) -> bool:
    """Return True if ``token`` was signed with ``secret`` and has not expired."""
    if not secret or not token:
        return False
    payload, _, signature = token.partition(".")
    if not payload or not signature:
        return False
    if not _same(signature, _signature(secret, payload)):
        return False
    try:
        issued_at = int(payload)
    except ValueError:
        return False
    current = now_ms if now_ms is not None else _now_ms()
    return current - issued_at <= ttl_seconds * 1000


def login(username: str, password: str) -> str:
    """Check operator credentials against settings and issue a token.

    Raises:
        AdminAuthError: When login is not configured or credentials mismatch.
    """
    if not settings.admin_username or not settings.admin_password:
        raise AdminAuthError(NOT_CONFIGURED_MESSAGE)
    user_ok = _same(username, settings.admin_username)
    pass_ok = _same(password, settings.admin_password)
    if not (user_ok and pass_ok):
        logger.warning("Rejected admin login attempt")
        raise AdminAuthError(INVALID_CREDENTIALS_MESSAGE)
    token = sign_admin_token(settings.admin_auth_secret)
    if token is None:
        raise AdminAuthError(NOT_CONFIGURED_MESSAGE)
    return token


def _token_from_request(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip()
    return request.cookies.get(ADMIN_COOKIE_NAME)


def require_admin(request: Request) -> None:
    """FastAPI dependency guarding operator-only routes.

    Accepts the ``admin_session`` cookie or an ``Authorization: Bearer`` header.

    Raises:
        AdminAuthError: If no valid session is presented.
    """
    token = _token_from_request(request)
    if not verify_admin_token(
        token, settings.admin_auth_secret, settings.admin_token_ttl_seconds
    ):
        raise AdminAuthError("Admin session required")
