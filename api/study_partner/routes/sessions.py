import logging
from typing import Any

from fastapi import APIRouter, Depends

from .. import repo
from ..auth.deps import get_current_user
from ..deps import user_id_from_user
from ..http_helpers import blank_to_none
from ..schemas import StudySessionRequest
from ..services.progress import summarize_sessions

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/sessions")
def list_sessions(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    return {"sessions": repo.list_study_sessions(user_id_from_user(current_user))}


@router.get("/sessions/stats")
def session_stats(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    sessions = repo.list_study_sessions(user_id_from_user(current_user))
    return {"stats": summarize_sessions(sessions)}


@router.post("/sessions")
def add_session(payload: StudySessionRequest, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    user_id = user_id_from_user(current_user)
    repo.create_study_session(
        user_id=user_id,
        subject=payload.subject,
        duration_minutes=payload.duration_minutes or None,
        partner_id=blank_to_none(payload.partner_id),
        notes=payload.notes or "",
    )
    logger.info(f"[SESSIONS] logged user_id={user_id} subject={payload.subject!r}")
    return {"success": True}
