"""
Text helpers shared by the server and the terminal client.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from quickblog.errors import ValidationError

_SLUG_SEPARATOR = re.compile(r"[^a-z0-9]+")
_NON_LETTERS = re.compile(r"[^a-z]")


def slugify(title: str) -> str:
    """
    Derive the public URL slug for a post title.

    "Hello, World! 2024" -> "hello-world-2024", "---Edge---" -> "edge".
    """
    return _SLUG_SEPARATOR.sub("-", (title or "").lower()).strip("-")


def title_fingerprint(title: str) -> str:
    """Letters-only lowercase form used to detect near-duplicate titles."""
    return _NON_LETTERS.sub("", (title or "").lower())


def word_count(content: str) -> int:
    return len((content or "").split())


def reading_minutes(content: str, words_per_minute: int = 200) -> int:
    return max(1, -(-word_count(content) // words_per_minute))


def clean_tags(tags: Optional[Iterable[str]]) -> list[str]:
    """Trim tags, drop empty ones and duplicates, keep first-seen order."""
    cleaned: list[str] = []
    for tag in tags or []:
        tag = (tag or "").strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def parse_tag_list(raw: str) -> list[str]:
    """Parse a comma-separated tag string as typed by a user."""
    return clean_tags((raw or "").split(","))


@dataclass
class PostLimits:
    min_words: int = 100
    max_words: int = 3000
    max_tags: int = 4


def check_word_count(content: str, limits: PostLimits) -> None:
    words = word_count(content)
    if words < limits.min_words:
        raise ValidationError(f"Content must be at least {limits.min_words} words")
    if words > limits.max_words:
        raise ValidationError(f"Content must not exceed {limits.max_words} words")


def check_tag_count(tags: list[str], limits: PostLimits) -> None:
    if len(tags) > limits.max_tags:
        raise ValidationError(f"Maximum {limits.max_tags} tags allowed")


def validate_post_fields(
    title: str, content: str, tags: list[str], limits: Optional[PostLimits] = None
) -> None:
    limits = limits or PostLimits()
    if not (title or "").strip() or not (content or "").strip():
        raise ValidationError("Title and content are required")
    check_word_count(content, limits)
    check_tag_count(tags, limits)
