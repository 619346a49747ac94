"""
Standalone HTML pages for shared articles.
"""

from __future__ import annotations

from datetime import datetime

from jinja2 import Environment, PackageLoader, select_autoescape

from quickblog.records import PostRecord
from quickblog.text import reading_minutes, word_count

_env = Environment(
    loader=PackageLoader("quickblog", "templates"),
    autoescape=select_autoescape(["html"]),
)


def _display_date(timestamp: str) -> str:
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def render_article(post: PostRecord, *, home_url: str = "http://localhost:8000") -> str:
    paragraphs = [line.strip() for line in post.content.split("\n") if line.strip()]
    template = _env.get_template("article.html")
    return template.render(
        post=post,
        summary=post.content[:160],
        paragraphs=paragraphs,
        published=_display_date(post.created_at),
        minutes=reading_minutes(post.content),
        words=word_count(post.content),
        initial=post.author[:1].upper(),
        home_url=home_url,
    )
