from collections import Counter
from typing import Any


def summarize_sessions(sessions: list[dict[str, Any]]) -> dict[str, Any]:
    total_minutes = sum(int(s.get("duration_minutes") or 0) for s in sessions)
    subject_counts = Counter(str(s["subject"]) for s in sessions if s.get("subject"))
    partners = {str(s["partner_id"]) for s in sessions if s.get("partner_id")}
    return {
        "total_sessions": len(sessions),
        "total_minutes": total_minutes,
        "total_hours": round(total_minutes / 60, 1),
        "subject_counts": dict(subject_counts.most_common()),
        "partner_count": len(partners),
    }
