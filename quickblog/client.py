"""
HTTP client for the QuickBlog API with explicit, file-persisted session state.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import requests

from quickblog.errors import BlogError, UnauthorizedError, error_for_status
from quickblog.text import (
    PostLimits,
    check_tag_count,
    check_word_count,
    clean_tags,
    validate_post_fields,
)

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30  # seconds
DEFAULT_STATE_PATH = Path.home() / ".quickblog" / "session.json"
THEMES = ("light", "dark")


@dataclass
class ClientSession:
    """UI state remembered between runs: who is logged in, theme, draft."""

    username: Optional[str] = None
    theme: str = "light"
    draft: dict = field(default_factory=dict)
    path: Optional[Path] = field(default=None, repr=False, compare=False)

    @classmethod
    def load(cls, path: Path = DEFAULT_STATE_PATH) -> "ClientSession":
        path = Path(path)
        if not path.exists():
            return cls(path=path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Ignoring unreadable session file %s", path)
            return cls(path=path)
        theme = data.get("theme")
        return cls(
            username=data.get("username"),
            theme=theme if theme in THEMES else "light",
            draft=data.get("draft") or {},
            path=path,
        )

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = asdict(self)
        payload.pop("path")
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


class QuickBlogClient:
    """Calls the HTTP API; every operation reads or updates the given session."""

    def __init__(
        self,
        base_url: str,
        session: ClientSession,
        *,
        limits: Optional[PostLimits] = None,
        http: Optional[requests.Session] = None,
        api_prefix: str = "/api",
    ):
        self.base_url = base_url.rstrip("/")
        self.api_prefix = api_prefix
        self.session = session
        self.limits = limits or PostLimits()
        self.http = http or requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        url = f"{self.base_url}{self.api_prefix}{path}"
        try:
            response = self.http.request(
                method, url, timeout=REQUEST_TIMEOUT, **kwargs
            )
        except requests.RequestException as exc:
            raise BlogError(f"Could not reach {self.base_url}: {exc}") from exc
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.status_code >= 400:
            message = payload.get("error") if isinstance(payload, dict) else None
            raise error_for_status(response.status_code, message)
        return payload

    def _require_user(self) -> str:
        if not self.session.username:
            raise UnauthorizedError("Please log in first")
        return self.session.username

    # Account

    def register(self, username: str, password: str) -> None:
        self._request("POST", "/register", json={"username": username, "password": password})

    def login(self, username: str, password: str) -> str:
        payload = self._request(
            "POST", "/login", json={"username": username, "password": password}
        )
        self.session.username = payload.get("username", username)
        self.session.save()
        return self.session.username

    def logout(self) -> None:
        self.session.username = None
        self.session.save()

    # Preferences and drafts

    def toggle_theme(self) -> str:
        self.session.theme = "dark" if self.session.theme == "light" else "light"
        self.session.save()
        return self.session.theme

    def save_draft(self, title: str, content: str) -> None:
        self.session.draft = {"title": title, "content": content}
        self.session.save()

    def clear_draft(self) -> None:
        self.session.draft = {}
        self.session.save()

    # Posts

    def check_title(self, title: str) -> bool:
        payload = self._request("POST", "/blogs/check-title", json={"title": title})
        return bool(payload.get("available"))

    def create_post(
        self,
        title: str,
        content: str,
        tags: Optional[list[str]] = None,
        category: Optional[str] = None,
    ) -> dict:
        username = self._require_user()
        title = (title or "").strip()
        content = (content or "").strip()
        tags = clean_tags(tags)
        validate_post_fields(title, content, tags, self.limits)
        payload = self._request(
            "POST",
            "/blogs",
            json={
                "username": username,
                "title": title,
                "content": content,
                "tags": tags,
                "category": category,
            },
        )
        self.clear_draft()
        return payload

    def list_my_posts(self) -> list[dict]:
        username = self._require_user()
        return self._request("GET", f"/blogs/{username}").get("blogs", [])

    def feed(self) -> list[dict]:
        return self._request("GET", "/blogs").get("blogs", [])

    def get_post(self, author: str, post_id: str) -> dict:
        return self._request("GET", f"/blogs/{author}/{post_id}")["blog"]

    def update_post(
        self,
        post_id: str,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[list[str]] = None,
        category: Optional[str] = None,
    ) -> dict:
        username = self._require_user()
        if content is not None:
            check_word_count(content, self.limits)
        if tags is not None:
            check_tag_count(clean_tags(tags), self.limits)
        body = {
            "title": title,
            "content": content,
            "tags": clean_tags(tags) if tags is not None else None,
            "category": category,
        }
        body = {key: value for key, value in body.items() if value is not None}
        return self._request("PUT", f"/blogs/{username}/{post_id}", json=body)["blog"]

    def delete_post(self, post_id: str) -> None:
        username = self._require_user()
        self._request("DELETE", f"/blogs/{username}/{post_id}")


__all__ = ["BlogError", "ClientSession", "QuickBlogClient"]
