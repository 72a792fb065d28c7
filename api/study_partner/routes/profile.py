import logging
from typing import Any

from fastapi import APIRouter, Depends

from .. import repo
from ..auth.deps import get_current_user
from ..deps import user_id_from_user
from ..schemas import ProfileRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile")
def get_profile(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    return {"profile": repo.get_profile(user_id_from_user(current_user))}


@router.post("/profile")
def save_profile(payload: ProfileRequest, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    user_id = user_id_from_user(current_user)
    repo.upsert_profile(
        user_id=user_id,
        name=payload.name,
        age=payload.age,
        grade=payload.grade,
        favorite_subjects=payload.favorite_subjects,
        bio=payload.bio,
    )
    logger.info(f"[PROFILE] saved user_id={user_id}")
    return {"success": True}
