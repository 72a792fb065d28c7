"""
Study-partner match generation.

The caller's profile and the pool of other active profiles are rendered into a
prompt, a completion provider picks the best partners, and the names it returns
are resolved back to stored profiles. New pairs are persisted; pairs that
already exist are returned but left untouched.
"""

from __future__ import annotations

import json
import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from study_partner import repo
from study_partner.config import MATCH_SUGGESTION_LIMIT

from .completion import CompletionClient, CompletionError

logger = logging.getLogger(__name__)


class MatchGenerationError(Exception):
    """Raised when match suggestions cannot be produced."""


@dataclass
class MatchSuggestion:
    name: str
    compatibility_score: float
    match_reason: str | None = None


def _describe(profile: dict[str, Any]) -> str:
    return (
        f"{profile['name']}, Age: {profile['age']}, Grade: {profile['grade']}, "
        f"Subjects: {profile['favorite_subjects']}"
    )


def build_match_prompt(profile: dict[str, Any], candidates: list[dict[str, Any]], limit: int = MATCH_SUGGESTION_LIMIT) -> str:
    listing = "\n".join(f"- {_describe(c)}" for c in candidates)
    return f"""You are an AI study partner matcher. Find the best {limit} study partners for this student:

Student: {_describe(profile)}

Available partners:
{listing}

Return a JSON object whose "matches" key holds an array of at most {limit} matches, using this exact format:
{{
  "matches": [
    {{
      "name": "partner_name",
      "compatibility_score": 0.85,
      "match_reason": "Both love math and science, similar age group"
    }}
  ]
}}

Use partner names exactly as listed. Consider age compatibility (within 2-3 years), shared subjects, and grade level. Scores should be between 0.0 and 1.0.
"""


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def parse_match_suggestions(raw: str | None, limit: int = MATCH_SUGGESTION_LIMIT) -> list[MatchSuggestion]:
    """Parse the completion text into suggestions.

    Accepts a bare JSON array or an object carrying the array under ``matches``.
    Any deviation from that shape fails the whole response.
    """
    if raw is None or not raw.strip():
        raise MatchGenerationError("Empty completion response")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MatchGenerationError("Completion response is not valid JSON") from exc

    if isinstance(data, dict):
        data = data.get("matches")
    if not isinstance(data, list):
        raise MatchGenerationError("Completion response does not contain a match array")

    suggestions: list[MatchSuggestion] = []
    for item in data[:limit]:
        if not isinstance(item, dict):
            raise MatchGenerationError("Match entry is not an object")
        name = item.get("name")
        if not isinstance(name, str) or not name:
            raise MatchGenerationError("Match entry is missing a name")
        score = item.get("compatibility_score")
        if not _is_finite_number(score):
            raise MatchGenerationError(f"Match entry for {name!r} has no numeric compatibility_score")
        reason = item.get("match_reason")
        suggestions.append(
            MatchSuggestion(
                name=name,
                compatibility_score=float(score),
                match_reason=str(reason) if reason is not None else None,
            )
        )
    return suggestions


def resolve_suggestions(
    suggestions: list[MatchSuggestion],
    candidates: list[dict[str, Any]],
) -> list[tuple[MatchSuggestion, dict[str, Any]]]:
    """Pair each suggestion with the first candidate whose name is an exact match.

    Unknown names are dropped. Duplicate display names resolve to whichever
    profile comes first in the pool.
    """
    resolved = []
    for suggestion in suggestions:
        profile = next((c for c in candidates if c["name"] == suggestion.name), None)
        if profile is not None:
            resolved.append((suggestion, profile))
    return resolved


def generate_matches(user_id: str, completion: CompletionClient) -> list[dict[str, Any]]:
    profile = repo.get_profile(user_id)
    if not profile:
        return []

    candidates = repo.list_candidate_profiles(user_id)
    if not candidates:
        return []

    prompt = build_match_prompt(profile, candidates)
    try:
        raw = completion.complete(prompt)
    except CompletionError as exc:
        raise MatchGenerationError("Completion provider failed") from exc
    suggestions = parse_match_suggestions(raw)
    resolved = resolve_suggestions(suggestions, candidates)

    matches: list[dict[str, Any]] = []
    inserted = 0
    for suggestion, matched_profile in resolved:
        matched_user_id = str(matched_profile["user_id"])
        if repo.insert_match_if_absent(
            user_id=user_id,
            matched_user_id=matched_user_id,
            compatibility_score=suggestion.compatibility_score,
            match_reason=suggestion.match_reason,
        ):
            inserted += 1
        now = datetime.now(timezone.utc).isoformat()
        matches.append(
            {
                "id": str(uuid.uuid4()),
                "user_id": user_id,
                "matched_user_id": matched_user_id,
                "compatibility_score": suggestion.compatibility_score,
                "match_reason": suggestion.match_reason,
                "is_active": True,
                "created_at": now,
                "updated_at": now,
                "matched_profile": matched_profile,
            }
        )

    dropped = [s.name for s in suggestions if s.name not in {p["name"] for _, p in resolved}]
    logger.info(
        f"[MATCHING] user_id={user_id} candidates={len(candidates)} suggested={len(suggestions)} "
        f"resolved={len(matches)} inserted={inserted} dropped={dropped}"
    )
    return matches
