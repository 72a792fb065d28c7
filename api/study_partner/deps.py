from typing import Any

from .services.completion import CompletionClient, OpenAICompletionClient

_completion_client: CompletionClient | None = None


def get_completion_client() -> CompletionClient:
    global _completion_client
    if _completion_client is None:
        _completion_client = OpenAICompletionClient()
    return _completion_client


def user_id_from_user(user: dict[str, Any]) -> str:
    return str(user["id"])
