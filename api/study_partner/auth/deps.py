"""
Authentication dependencies for FastAPI.

Identity is issued by an external service; this API only verifies the signed
token it hands out. Two transports are accepted:
1. Cookie-based session (primary for web): httpOnly cookie holds the token
2. Bearer token (API clients): Authorization header with Bearer token
"""

import logging
import uuid
from typing import Any

from fastapi import Cookie, Header, HTTPException
from pydantic import BaseModel

from study_partner.auth.security import decode_access_token
from study_partner.config import DEV_MODE, SESSION_COOKIE_NAME

logger = logging.getLogger(__name__)


class AuthErrorDetail(BaseModel):
    message: str = "unauthorized"
    reason: str
    trace_id: str


class AuthError(Exception):
    """Raised when authentication fails with detailed reason."""

    def __init__(self, reason: str, detail: str = "unauthorized"):
        self.reason = reason
        self.detail = detail
        self.trace_id = str(uuid.uuid4())
        super().__init__(detail)


def _log_auth_failure(
    reason: str,
    trace_id: str,
    token_prefix: str | None = None,
    auth_source: str | None = None,
    payload: dict[str, Any] | None = None,
) -> None:
    log_data = {
        "trace_id": trace_id,
        "reason": reason,
        "auth_source": auth_source,
        "token_prefix": token_prefix,
        "token_user_id": payload.get("sub") if payload else None,
    }
    logger.warning(f"[AUTH_FAILURE] {log_data}")


def _unauthorized(message: str, reason: str, trace_id: str, status_code: int = 401) -> HTTPException:
    if DEV_MODE:
        detail: dict[str, Any] = AuthErrorDetail(message=message, reason=reason, trace_id=trace_id).model_dump()
    else:
        detail = {"message": message, "trace_id": trace_id}
    return HTTPException(status_code=status_code, detail=detail)


def _extract_bearer(authorization: str | None) -> str:
    if not authorization:
        raise AuthError(reason="missing_token", detail="Missing Authorization header")
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise AuthError(reason="malformed_token", detail="Invalid Authorization header")
    return parts[1].strip()


def identity_from_token(token: str, trace_id: str, auth_source: str) -> dict[str, Any]:
    """Validate a session token and return the caller identity it carries."""
    token_prefix = token[:8] + "..." if len(token) > 8 else token

    try:
        payload = decode_access_token(token)
    except HTTPException as e:
        if e.status_code != 401:
            raise
        reason = "token_expired" if "expired" in str(e.detail).lower() else "signature_invalid"
        _log_auth_failure(reason, trace_id, token_prefix, auth_source)
        raise _unauthorized("unauthorized", reason, trace_id)

    user_id = str(payload.get("sub") or "").strip()
    if not user_id:
        _log_auth_failure("token_missing_subject", trace_id, token_prefix, auth_source, payload)
        raise _unauthorized("unauthorized", "token_missing_subject", trace_id)

    logger.debug(f"[auth] token valid, sub={user_id} source={auth_source}")
    return {
        "id": user_id,
        "email": payload.get("email"),
        "name": payload.get("name"),
    }


def get_current_user(
    session_token: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    Resolve the caller from the session cookie, falling back to a bearer token.

    Rejects the request with 401 before any handler logic runs.
    """
    trace_id = str(uuid.uuid4())

    if session_token:
        return identity_from_token(session_token, trace_id, "cookie")

    if authorization:
        try:
            token = _extract_bearer(authorization)
        except AuthError as e:
            _log_auth_failure(e.reason, e.trace_id, auth_source="bearer")
            raise _unauthorized(e.detail, e.reason, e.trace_id)
        return identity_from_token(token, trace_id, "bearer")

    _log_auth_failure("missing_token", trace_id, auth_source="none")
    raise _unauthorized("Authentication required", "missing_token", trace_id)
