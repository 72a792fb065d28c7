import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..auth.deps import get_current_user
from ..config import RL_MATCHES_LIMIT, RL_WINDOW_SECONDS
from ..deps import get_completion_client, user_id_from_user
from ..services.completion import CompletionClient
from ..services.matching import MatchGenerationError, generate_matches
from ..services.rate_limit import rate_limit_dependency

logger = logging.getLogger(__name__)

router = APIRouter()

RL_MATCHES = rate_limit_dependency("matches", RL_MATCHES_LIMIT, RL_WINDOW_SECONDS)


@router.get("/matches")
def get_matches(
    current_user: dict[str, Any] = Depends(get_current_user),
    completion: CompletionClient = Depends(get_completion_client),
    _: None = RL_MATCHES,
) -> Any:
    user_id = user_id_from_user(current_user)
    try:
        matches = generate_matches(user_id, completion)
    except MatchGenerationError:
        logger.exception(f"[MATCHING] generation failed user_id={user_id}")
        return JSONResponse(status_code=500, content={"error": "Failed to generate matches"})
    return {"matches": matches}
