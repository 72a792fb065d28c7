from pydantic import BaseModel, Field, StrictInt, field_validator


class ProfileRequest(BaseModel):
    name: str = Field(min_length=1)
    age: StrictInt = Field(ge=6, le=100)
    grade: str = Field(min_length=1)
    favorite_subjects: str = Field(min_length=1)
    # Optional, but an explicit null is not a string.
    bio: str = ""


class ChatMessageRequest(BaseModel):
    receiver_id: str = Field(min_length=1)
    message: str = Field(min_length=1)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message cannot be empty")
        return value


class StudySessionRequest(BaseModel):
    subject: str = Field(min_length=1)
    partner_id: str | None = None
    # Whole minutes only; fractional and negative durations are rejected.
    duration_minutes: StrictInt | None = Field(default=None, ge=0)
    notes: str | None = None


class SessionTokenRequest(BaseModel):
    access_token: str = Field(min_length=1)
