"""
Shared API dependencies: the auth gate and the assistant secret check.
"""
import logging
import secrets
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status

from remindme.config import Settings
from remindme.errors import AuthenticationError


logger = logging.getLogger(__name__)

LOCAL_USER = {"id": "local", "name": "Local user", "anonymous": True}


def get_settings(request: Request) -> Settings:
    """Dependency to get the application's settings."""
    return request.app.state.settings


def extract_token(request: Request, cookie_name: str) -> Optional[str]:
    """Session token from the Authorization header, else from the cookie."""
    header = request.headers.get("Authorization", "").strip()
    if header.lower().startswith("bearer "):
        token = header.split(" ", 1)[1].strip()
        if token:
            return token
    return request.cookies.get(cookie_name) or None


async def authenticate(request: Request) -> Optional[Dict[str, Any]]:
    """
    Resolve the caller's identity.

    Returns the local user when authentication is disabled, None when the
    token is missing or rejected.
    """
    settings = get_settings(request)
    if not settings.auth_enabled:
        return LOCAL_USER

    token = extract_token(request, settings.auth_cookie_name)
    if not token:
        return None

    identity = await request.app.state.identity.verify(token)
    if identity is not None:
        request.state.user = identity
    return identity


async def get_current_user(request: Request) -> Dict[str, Any]:
    """Dependency that rejects unauthenticated API callers with 401."""
    identity = await authenticate(request)
    if identity is None:
        raise AuthenticationError("Not authenticated", get_settings(request).auth_login_url)
    return identity


def verify_external_secret(request: Request, secret: Optional[str]) -> None:
    """Check the assistant's shared secret in constant time."""
    expected = get_settings(request).external_secret
    if not expected or not secret or not secrets.compare_digest(secret.encode(), expected.encode()):
        logger.warning("Rejected assistant request from %s", request.client.host if request.client else "?")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid secret",
        )
