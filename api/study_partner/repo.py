from typing import Any

from sqlalchemy import text

from study_partner.database import SessionLocal


def _as_bool(value: Any) -> bool:
    return bool(value) if value is not None else False


def _profile_row(row: Any) -> dict[str, Any]:
    out = dict(row)
    out["is_active"] = _as_bool(out.get("is_active"))
    return out


def _message_row(row: Any) -> dict[str, Any]:
    out = dict(row)
    out["is_read"] = _as_bool(out.get("is_read"))
    return out


# Profiles


def get_profile(user_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(
            text("SELECT * FROM user_profiles WHERE user_id = :user_id"),
            {"user_id": user_id},
        ).mappings().first()
    return _profile_row(row) if row else None


def upsert_profile(
    user_id: str,
    name: str,
    age: int,
    grade: str,
    favorite_subjects: str,
    bio: str,
) -> None:
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO user_profiles (user_id, name, age, grade, favorite_subjects, bio, is_active)
                VALUES (:user_id, :name, :age, :grade, :favorite_subjects, :bio, :active)
                ON CONFLICT (user_id) DO UPDATE
                SET name = excluded.name,
                    age = excluded.age,
                    grade = excluded.grade,
                    favorite_subjects = excluded.favorite_subjects,
                    bio = excluded.bio,
                    last_active_at = CURRENT_TIMESTAMP,
                    updated_at = CURRENT_TIMESTAMP
                """
            ),
            {
                "user_id": user_id,
                "name": name,
                "age": age,
                "grade": grade,
                "favorite_subjects": favorite_subjects,
                "bio": bio,
                "active": True,
            },
        )
        db.commit()


def list_candidate_profiles(exclude_user_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT *
                FROM user_profiles
                WHERE user_id <> :user_id
                  AND is_active = :active
                ORDER BY id ASC
                """
            ),
            {"user_id": exclude_user_id, "active": True},
        ).mappings().all()
    return [_profile_row(r) for r in rows]


# Matches


def insert_match_if_absent(
    user_id: str,
    matched_user_id: str,
    compatibility_score: float,
    match_reason: str | None,
) -> bool:
    """Insert a match for the pair unless one exists. Returns True when a row was written."""
    with SessionLocal() as db:
        result = db.execute(
            text(
                """
                INSERT INTO study_matches (user_id, matched_user_id, compatibility_score, match_reason, is_active)
                VALUES (:user_id, :matched_user_id, :compatibility_score, :match_reason, :active)
                ON CONFLICT (user_id, matched_user_id) DO NOTHING
                """
            ),
            {
                "user_id": user_id,
                "matched_user_id": matched_user_id,
                "compatibility_score": compatibility_score,
                "match_reason": match_reason,
                "active": True,
            },
        )
        inserted = (result.rowcount or 0) > 0
        db.commit()
    return inserted


def list_matches(user_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT *
                FROM study_matches
                WHERE user_id = :user_id
                ORDER BY created_at DESC, id DESC
                """
            ),
            {"user_id": user_id},
        ).mappings().all()
    out = []
    for r in rows:
        item = dict(r)
        item["is_active"] = _as_bool(item.get("is_active"))
        out.append(item)
    return out


# Chat


def list_conversation_partner_ids(user_id: str) -> list[str]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT DISTINCT
                  CASE
                    WHEN sender_id = :user_id THEN receiver_id
                    ELSE sender_id
                  END AS partner_id
                FROM chat_messages
                WHERE sender_id = :user_id OR receiver_id = :user_id
                """
            ),
            {"user_id": user_id},
        ).mappings().all()
    return [str(r["partner_id"]) for r in rows]


def get_latest_message_between(user_id: str, partner_id: str) -> dict[str, Any] | None:
    with SessionLocal() as db:
        row = db.execute(
            text(
                """
                SELECT *
                FROM chat_messages
                WHERE (sender_id = :user_id AND receiver_id = :partner_id)
                   OR (sender_id = :partner_id AND receiver_id = :user_id)
                ORDER BY created_at DESC, id DESC
                LIMIT 1
                """
            ),
            {"user_id": user_id, "partner_id": partner_id},
        ).mappings().first()
    return _message_row(row) if row else None


def count_unread_messages(sender_id: str, receiver_id: str) -> int:
    with SessionLocal() as db:
        value = db.execute(
            text(
                """
                SELECT COUNT(*)
                FROM chat_messages
                WHERE sender_id = :sender_id
                  AND receiver_id = :receiver_id
                  AND is_read = :read
                """
            ),
            {"sender_id": sender_id, "receiver_id": receiver_id, "read": False},
        ).scalar()
    return int(value or 0)


def get_thread_messages(user_id: str, partner_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT *
                FROM chat_messages
                WHERE (sender_id = :user_id AND receiver_id = :partner_id)
                   OR (sender_id = :partner_id AND receiver_id = :user_id)
                ORDER BY created_at ASC, id ASC
                """
            ),
            {"user_id": user_id, "partner_id": partner_id},
        ).mappings().all()
    return [_message_row(r) for r in rows]


def mark_messages_read(sender_id: str, receiver_id: str) -> int:
    with SessionLocal() as db:
        result = db.execute(
            text(
                """
                UPDATE chat_messages
                SET is_read = :read, updated_at = CURRENT_TIMESTAMP
                WHERE sender_id = :sender_id
                  AND receiver_id = :receiver_id
                  AND is_read = :unread
                """
            ),
            {"sender_id": sender_id, "receiver_id": receiver_id, "read": True, "unread": False},
        )
        updated = result.rowcount or 0
        db.commit()
    return int(updated)


def create_chat_message(sender_id: str, receiver_id: str, message: str) -> None:
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO chat_messages (sender_id, receiver_id, message, is_read)
                VALUES (:sender_id, :receiver_id, :message, :read)
                """
            ),
            {"sender_id": sender_id, "receiver_id": receiver_id, "message": message, "read": False},
        )
        db.commit()


# Study sessions


def list_study_sessions(user_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(
            text(
                """
                SELECT s.*, p.name AS partner_name
                FROM study_sessions s
                LEFT JOIN user_profiles p ON s.partner_id = p.user_id
                WHERE s.user_id = :user_id
                ORDER BY s.created_at DESC, s.id DESC
                """
            ),
            {"user_id": user_id},
        ).mappings().all()
    return [dict(r) for r in rows]


def create_study_session(
    user_id: str,
    subject: str,
    duration_minutes: int | None = None,
    partner_id: str | None = None,
    notes: str = "",
) -> None:
    with SessionLocal() as db:
        db.execute(
            text(
                """
                INSERT INTO study_sessions (user_id, partner_id, subject, duration_minutes, notes, completed_at)
                VALUES (:user_id, :partner_id, :subject, :duration_minutes, :notes, CURRENT_TIMESTAMP)
                """
            ),
            {
                "user_id": user_id,
                "partner_id": partner_id,
                "subject": subject,
                "duration_minutes": duration_minutes,
                "notes": notes,
            },
        )
        db.commit()


def ping() -> None:
    with SessionLocal() as db:
        db.execute(text("SELECT 1"))
