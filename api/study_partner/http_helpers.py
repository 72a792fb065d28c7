from typing import Any, Sequence


def validation_issues(errors: Sequence[Any]) -> list[dict[str, Any]]:
    """Flatten pydantic/FastAPI validation errors into ``{code, path, message}`` issues."""
    issues = []
    for err in errors:
        loc = list(err.get("loc") or [])
        if loc and loc[0] in {"body", "query", "path", "header", "cookie"}:
            loc = loc[1:]
        message = str(err.get("msg") or "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        issues.append(
            {
                "code": str(err.get("type") or "invalid"),
                "path": loc,
                "message": message,
            }
        )
    return issues


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
