"""Authentication: session token verification."""

from gymnasaas.auth.utils import create_session_token, decode_session_token, resolve_user_id

__all__ = ["create_session_token", "decode_session_token", "resolve_user_id"]
