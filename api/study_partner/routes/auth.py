import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends, Response

from ..auth.deps import get_current_user, identity_from_token
from ..config import SESSION_COOKIE_MAX_AGE_DAYS, SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE
from ..schemas import SessionTokenRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookie(response: Response, access_token: str) -> None:
    """Set the httpOnly session cookie with the identity-service token."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="none" if SESSION_COOKIE_SECURE else "lax",
        path="/",
        max_age=SESSION_COOKIE_MAX_AGE_DAYS * 24 * 60 * 60,
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
    )


@router.post("/session")
def auth_session(payload: SessionTokenRequest, response: Response) -> dict[str, Any]:
    """Store a token issued by the identity service in the session cookie."""
    user = identity_from_token(payload.access_token, str(uuid.uuid4()), "session_exchange")
    _set_session_cookie(response, payload.access_token)
    logger.info(f"[auth] session established user_id={user['id']}")
    return {"success": True}


@router.post("/logout")
def auth_logout(response: Response) -> dict[str, Any]:
    _clear_session_cookie(response)
    return {"success": True}


@router.get("/me")
def auth_me(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    return {
        "id": str(current_user["id"]),
        "email": current_user.get("email"),
        "name": current_user.get("name"),
    }
