from typing import Any

from fastapi import APIRouter, Depends

from ..auth.deps import get_current_user
from ..config import RL_MESSAGES_LIMIT, RL_WINDOW_SECONDS
from ..deps import user_id_from_user
from ..schemas import ChatMessageRequest
from ..services import messaging
from ..services.rate_limit import rate_limit_dependency

router = APIRouter()

RL_MESSAGES = rate_limit_dependency("messages", RL_MESSAGES_LIMIT, RL_WINDOW_SECONDS)


@router.get("/conversations")
def list_conversations(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    return {"conversations": messaging.list_conversations(user_id_from_user(current_user))}


@router.get("/messages/{partner_id}")
def get_thread(partner_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    return {"messages": messaging.read_thread(user_id_from_user(current_user), partner_id)}


@router.post("/messages")
def send_message(
    payload: ChatMessageRequest,
    current_user: dict[str, Any] = Depends(get_current_user),
    _: None = RL_MESSAGES,
) -> dict[str, Any]:
    messaging.send_message(
        sender_id=user_id_from_user(current_user),
        receiver_id=payload.receiver_id,
        message=payload.message,
    )
    return {"success": True}
