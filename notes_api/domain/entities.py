"""Plain records stored in the JSON document."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def parse_timestamp(value: str) -> datetime:
    """Parse stored ISO-8601 stamps, including a trailing ``Z``; naive stamps are UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Account:
    id: int
    name: str
    email: str
    password_hash: str
    created_at: str
    profile_image: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict) -> "Account":
        return cls(
            id=int(record["id"]),
            name=record.get("name", ""),
            email=record.get("email", ""),
            password_hash=record.get("password_hash", ""),
            created_at=record.get("created_at", ""),
            profile_image=record.get("profile_image"),
        )

    def to_public_dict(self) -> dict:
        """Client-facing view; never includes the password hash."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at,
            "profile_image": self.profile_image,
        }


@dataclass
class Note:
    id: int
    user_id: int
    title: str
    content: str
    created_at: str
    updated_at: str

    @classmethod
    def from_record(cls, record: dict) -> "Note":
        return cls(
            id=int(record["id"]),
            user_id=int(record["user_id"]),
            title=record.get("title", ""),
            content=record.get("content", ""),
            created_at=record.get("created_at", ""),
            updated_at=record.get("updated_at", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class Identity:
    """Caller identity extracted from a verified bearer token."""

    account_id: int
    email: str
