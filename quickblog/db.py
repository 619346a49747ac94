"""
Data-access layer mapping users and posts onto a flat key-value store.

Key layout:
    user:<username>            user record
    user_blogs:<username>      JSON list of the user's post ids
    blog:<username>:<id>       post record
    blog_slug:<slug>           {"username", "blogId"} for public links

Multi-key writes are sequential and not transactional. A failure part way
through can leave the post list or slug index out of step with the post
records; readers tolerate that instead of repairing it.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from quickblog.errors import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from quickblog.passwords import hash_password, verify_password
from quickblog.records import (
    PostRecord,
    SlugEntry,
    UserRecord,
    blog_key,
    decode_id_list,
    encode_id_list,
    slug_key,
    user_blogs_key,
    user_key,
    utcnow_iso,
)
from quickblog.store import KeyValueStore
from quickblog.text import (
    PostLimits,
    clean_tags,
    slugify,
    title_fingerprint,
    validate_post_fields,
)

logger = logging.getLogger(__name__)


@dataclass
class CreatedPost:
    post: PostRecord
    slug: str


class BlogRepository:
    """Users, posts and the slug index over a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        limits: Optional[PostLimits] = None,
        bcrypt_rounds: int = 10,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.limits = limits or PostLimits()
        self.bcrypt_rounds = bcrypt_rounds
        self.clock = clock

    # Users

    def register_user(self, username: str, password: str) -> UserRecord:
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required")
        if self.store.get(user_key(username)) is not None:
            raise ConflictError("User already exists")

        record = UserRecord(
            username=username,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
        )
        self.store.set(user_key(username), record.to_json())
        self.store.set(user_blogs_key(username), encode_id_list([]))
        logger.info("Registered user %s", username)
        return record

    def authenticate(self, username: str, password: str) -> str:
        username = (username or "").strip()
        raw = self.store.get(user_key(username)) if username else None
        if raw is None:
            raise UnauthorizedError("Invalid credentials")
        record = UserRecord.from_json(username, raw)
        if not verify_password(password or "", record.password_hash):
            raise UnauthorizedError("Invalid credentials")
        return record.username

    def list_usernames(self) -> list[str]:
        prefix = user_key("")
        return sorted(key[len(prefix):] for key in self.store.scan(f"{prefix}*"))

    # Posts

    def _new_post_id(self, author: str) -> str:
        candidate = int(self.clock() * 1000)
        # Two posts in the same millisecond would otherwise share an id.
        while self.store.get(blog_key(author, str(candidate))) is not None:
            candidate += 1
        return str(candidate)

    def _load_post(self, author: str, post_id: str) -> Optional[PostRecord]:
        key = blog_key(author, post_id)
        raw = self.store.get(key)
        if raw is None:
            return None
        return PostRecord.from_json(key, raw)

    def _load_post_ids(self, author: str) -> list[str]:
        key = user_blogs_key(author)
        return decode_id_list(key, self.store.get(key))

    def create_post(
        self,
        author: str,
        title: str,
        content: str,
        tags: Optional[list[str]] = None,
        category: Optional[str] = None,
    ) -> CreatedPost:
        author = (author or "").strip()
        if not author:
            raise ValidationError("Username is required")
        tags = clean_tags(tags)
        validate_post_fields(title, content, tags, self.limits)

        title = title.strip()
        now = utcnow_iso()
        post = PostRecord(
            id=self._new_post_id(author),
            title=title,
            content=content,
            author=author,
            tags=tags,
            category=category,
            created_at=now,
            updated_at=now,
        )
        slug = slugify(title)

        self.store.set(blog_key(author, post.id), post.to_json())
        self.store.set(slug_key(slug), SlugEntry(author, post.id).to_json())
        post_ids = self._load_post_ids(author)
        post_ids.append(post.id)
        self.store.set(user_blogs_key(author), encode_id_list(post_ids))
        logger.info("Created post %s by %s (slug=%s)", post.id, author, slug)
        return CreatedPost(post=post, slug=slug)

    def get_post(self, author: str, post_id: str) -> PostRecord:
        post = self._load_post(author, post_id)
        if post is None:
            raise NotFoundError("Blog not found")
        return post

    def list_posts(self, author: str) -> list[PostRecord]:
        posts: list[PostRecord] = []
        for post_id in self._load_post_ids(author):
            post = self._load_post(author, post_id)
            if post is None:
                logger.warning(
                    "Post list of %s references missing post %s", author, post_id
                )
                continue
            posts.append(post)
        return posts

    def list_all_posts(self) -> list[PostRecord]:
        """Best-effort public feed across every registered author, newest first."""
        posts: list[PostRecord] = []
        for username in self.list_usernames():
            posts.extend(self.list_posts(username))
        posts.sort(key=lambda post: (post.created_at, post.id), reverse=True)
        return posts

    def update_post(
        self,
        author: str,
        post_id: str,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[list[str]] = None,
        category: Optional[str] = None,
    ) -> PostRecord:
        existing = self._load_post(author, post_id)
        if existing is None:
            raise NotFoundError("Blog not found")

        merged_title = title.strip() if title else existing.title
        merged_content = content if content else existing.content
        merged_tags = clean_tags(tags) if tags is not None else existing.tags
        validate_post_fields(merged_title, merged_content, merged_tags, self.limits)

        existing.title = merged_title
        existing.content = merged_content
        existing.tags = merged_tags
        if category:
            existing.category = category
        existing.updated_at = utcnow_iso()
        self.store.set(blog_key(author, post_id), existing.to_json())
        logger.info("Updated post %s by %s", post_id, author)
        return existing

    def delete_post(self, author: str, post_id: str) -> None:
        self.store.delete(blog_key(author, post_id))
        post_ids = self._load_post_ids(author)
        remaining = [pid for pid in post_ids if pid != post_id]
        self.store.set(user_blogs_key(author), encode_id_list(remaining))
        logger.info("Deleted post %s by %s", post_id, author)

    # Public links

    def resolve_slug(self, slug: str) -> PostRecord:
        key = slug_key(slug)
        raw = self.store.get(key)
        if raw is None:
            raise NotFoundError("Article not found")
        entry = SlugEntry.from_json(key, raw)
        post = self._load_post(entry.username, entry.blog_id)
        if post is None:
            logger.warning(
                "Slug %s points at missing post %s/%s",
                slug,
                entry.username,
                entry.blog_id,
            )
            raise NotFoundError("Article not found")
        return post

    def is_title_available(self, title: str) -> bool:
        fingerprint = title_fingerprint(title)
        if not fingerprint:
            return True
        return all(
            title_fingerprint(post.title) != fingerprint
            for post in self.list_all_posts()
        )
