import logging
from datetime import datetime, timezone
from typing import Any

from study_partner import repo

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _as_datetime(value: Any) -> datetime:
    """Timestamps come back as ``datetime`` from PostgreSQL and as text from SQLite."""
    if value is None:
        return _EPOCH
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _recency(conv: dict[str, Any]) -> tuple[datetime, int]:
    last = conv["last_message"] or {}
    return (_as_datetime(last.get("created_at")), int(last.get("id") or 0))


def list_conversations(user_id: str) -> list[dict[str, Any]]:
    """One entry per counter-party that still has a profile, most recent first."""
    conversations = []
    for partner_id in repo.list_conversation_partner_ids(user_id):
        partner = repo.get_profile(partner_id)
        if not partner:
            continue
        conversations.append(
            {
                "partner": partner,
                "last_message": repo.get_latest_message_between(user_id, partner_id),
                "unread_count": repo.count_unread_messages(sender_id=partner_id, receiver_id=user_id),
            }
        )

    conversations.sort(key=_recency, reverse=True)
    return conversations


def read_thread(user_id: str, partner_id: str) -> list[dict[str, Any]]:
    """Full history with ``partner_id``, oldest first; marks their messages to ``user_id`` read."""
    messages = repo.get_thread_messages(user_id, partner_id)
    marked = repo.mark_messages_read(sender_id=partner_id, receiver_id=user_id)
    if marked:
        logger.debug(f"[CHAT] marked {marked} messages read user_id={user_id} partner_id={partner_id}")
    return messages


def send_message(sender_id: str, receiver_id: str, message: str) -> None:
    repo.create_chat_message(sender_id=sender_id, receiver_id=receiver_id, message=message)
    logger.info(f"[CHAT] message sent sender_id={sender_id} receiver_id={receiver_id} chars={len(message)}")
