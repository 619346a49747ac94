"""
Typed records persisted in the key-value store.

Each record is stored as a JSON string under one key. Decoding validates the
shape so malformed data is caught at the store boundary instead of deep in a
route handler.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from quickblog.errors import StoreUnavailableError


def utcnow_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def user_key(username: str) -> str:
    return f"user:{username}"


def user_blogs_key(username: str) -> str:
    return f"user_blogs:{username}"


def blog_key(username: str, blog_id: str) -> str:
    return f"blog:{username}:{blog_id}"


def slug_key(slug: str) -> str:
    return f"blog_slug:{slug}"


def _load_object(key: str, raw: str) -> dict:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StoreUnavailableError(f"Corrupt record at {key}") from exc
    if not isinstance(data, dict):
        raise StoreUnavailableError(f"Corrupt record at {key}")
    return data


def _require_str(key: str, data: dict, name: str) -> str:
    value = data.get(name)
    if not isinstance(value, str):
        raise StoreUnavailableError(f"Record at {key} is missing {name}")
    return value


@dataclass
class UserRecord:
    username: str
    password_hash: str
    created_at: str = field(default_factory=utcnow_iso)

    def as_dict(self) -> dict:
        return {
            "username": self.username,
            "password_hash": self.password_hash,
            "created_at": self.created_at,
        }

    def to_json(self) -> str:
        return json.dumps(self.as_dict())

    @classmethod
    def from_json(cls, username: str, raw: str) -> "UserRecord":
        key = user_key(username)
        data = _load_object(key, raw)
        return cls(
            username=data.get("username") or username,
            password_hash=_require_str(key, data, "password_hash"),
            created_at=_require_str(key, data, "created_at"),
        )


@dataclass
class PostRecord:
    id: str
    title: str
    content: str
    author: str
    tags: list[str] = field(default_factory=list)
    category: Optional[str] = None
    created_at: str = field(default_factory=utcnow_iso)
    updated_at: str = field(default_factory=utcnow_iso)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "tags": list(self.tags),
            "author": self.author,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_json(self) -> str:
        return json.dumps(self.as_dict())

    @classmethod
    def from_json(cls, key: str, raw: str) -> "PostRecord":
        data = _load_object(key, raw)
        tags = data.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise StoreUnavailableError(f"Record at {key} has malformed tags")
        category = data.get("category")
        return cls(
            id=_require_str(key, data, "id"),
            title=_require_str(key, data, "title"),
            content=_require_str(key, data, "content"),
            author=_require_str(key, data, "author"),
            tags=tags,
            category=category if isinstance(category, str) else None,
            created_at=_require_str(key, data, "created_at"),
            updated_at=_require_str(key, data, "updated_at"),
        )


@dataclass
class SlugEntry:
    username: str
    blog_id: str

    def to_json(self) -> str:
        return json.dumps({"username": self.username, "blogId": self.blog_id})

    @classmethod
    def from_json(cls, key: str, raw: str) -> "SlugEntry":
        data = _load_object(key, raw)
        return cls(
            username=_require_str(key, data, "username"),
            blog_id=_require_str(key, data, "blogId"),
        )


def decode_id_list(key: str, raw: Optional[str]) -> list[str]:
    """Decode a per-user post-id list; a missing key is an empty list."""
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise StoreUnavailableError(f"Corrupt record at {key}") from exc
    if not isinstance(data, list):
        raise StoreUnavailableError(f"Corrupt record at {key}")
    return [str(item) for item in data]


def encode_id_list(ids: list[str]) -> str:
    return json.dumps(ids)
