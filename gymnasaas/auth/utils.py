"""Session token helpers.

Sessions are issued by the external auth provider as HS256 JWTs whose
``sub`` claim is the user id. This module only verifies them; tokens are
minted here for development and tests.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Request
from jose import JWTError, jwt

from gymnasaas.config import get_settings

logger = logging.getLogger(__name__)

SESSION_COOKIE_PREFIX = "sb-"
SESSION_COOKIE_SUFFIX = "-access-token"
USER_ID_HEADER = "x-user-id"


def create_session_token(
    user_id: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed session token for ``user_id``.

    Args:
        user_id: External user id, stored in ``sub``.
        email: Optional email claim.
        expires_delta: Token lifetime, one hour by default.

    Returns:
        str: Encoded JWT.
    """
    settings = get_settings()
    expire = datetime.utcnow() + (expires_delta or timedelta(hours=1))
    claims = {
        "sub": user_id,
        "aud": settings.session_jwt_audience,
        "exp": expire,
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.session_jwt_secret, algorithm=settings.session_jwt_algorithm)


def decode_session_token(token: str) -> Optional[str]:
    """Return the user id carried by a valid session token, else None."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.session_jwt_secret,
            algorithms=[settings.session_jwt_algorithm],
            audience=settings.session_jwt_audience,
        )
    except JWTError:
        return None
    user_id = payload.get("sub")
    return user_id or None


def extract_session_token(request: Request) -> Optional[str]:
    """Find the session token in the Authorization header or a session cookie."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip() or None

    for name, value in request.cookies.items():
        if name.startswith(SESSION_COOKIE_PREFIX) and name.endswith(SESSION_COOKIE_SUFFIX):
            return value
    return None


def resolve_user_id(request: Request) -> Optional[str]:
    """Default current-user resolver.

    Uses the session token when present. The ``X-User-Id`` header is only
    trusted when ``allow_header_auth`` is enabled.
    """
    token = extract_session_token(request)
    if token:
        user_id = decode_session_token(token)
        if user_id:
            return user_id
        logger.debug("Rejected invalid or expired session token")

    if get_settings().allow_header_auth:
        return request.headers.get(USER_ID_HEADER) or None
    return None
