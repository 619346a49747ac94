"""
Terminal client for QuickBlog.

Examples:
    quickblog register alice
    quickblog login alice
    quickblog publish --title "Hello, World" --content-file post.md --tags "intro, python"
    quickblog feed
    quickblog serve --port 3001
"""

from __future__ import annotations

import argparse
import getpass
import logging
import os
import sys
from pathlib import Path

from quickblog.client import DEFAULT_STATE_PATH, ClientSession, QuickBlogClient
from quickblog.config import get_settings
from quickblog.errors import BlogError
from quickblog.text import PostLimits, parse_tag_list, reading_minutes, word_count

logger = logging.getLogger(__name__)

DEFAULT_API_URL = os.environ.get("QUICKBLOG_API_URL", "http://localhost:3001")


def _read_content(path: str | None) -> str | None:
    if path is None:
        return None
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _print_post_line(post: dict) -> None:
    tags = " ".join(f"#{tag}" for tag in post.get("tags") or [])
    minutes = reading_minutes(post.get("content", ""))
    print(
        f"{post['id']}  {post['title']}  by {post.get('author', '?')}"
        f"  ({minutes} min read) {tags}".rstrip()
    )


def _print_post(post: dict) -> None:
    print(post["title"])
    print(f"by {post.get('author', '?')} on {post.get('created_at', '')}")
    if post.get("category"):
        print(f"category: {post['category']}")
    if post.get("tags"):
        print("tags: " + ", ".join(post["tags"]))
    print(f"{word_count(post.get('content', ''))} words")
    print()
    print(post.get("content", ""))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quickblog", description="QuickBlog client")
    parser.add_argument(
        "--base-url", default=DEFAULT_API_URL, help="QuickBlog server URL"
    )
    parser.add_argument(
        "--state-file",
        type=Path,
        default=DEFAULT_STATE_PATH,
        help="Where the login, theme and draft are remembered",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("register", "login"):
        cmd = sub.add_parser(name)
        cmd.add_argument("username")
        cmd.add_argument(
            "--password", default=None, help="Prompted for when omitted"
        )

    sub.add_parser("logout")
    sub.add_parser("mine", help="List your posts")
    sub.add_parser("feed", help="List everyone's posts, newest first")
    sub.add_parser("theme", help="Toggle light/dark theme")

    publish = sub.add_parser("publish", help="Publish a new post")
    publish.add_argument("--title", default=None)
    publish.add_argument(
        "--content-file", default=None, help="Path to the post body, '-' for stdin"
    )
    publish.add_argument("--tags", default="", help="Comma-separated, up to 4")
    publish.add_argument("--category", default=None)

    show = sub.add_parser("show", help="Print one post")
    show.add_argument("author")
    show.add_argument("post_id")

    edit = sub.add_parser("edit", help="Update one of your posts")
    edit.add_argument("post_id")
    edit.add_argument("--title", default=None)
    edit.add_argument("--content-file", default=None)
    edit.add_argument("--tags", default=None)
    edit.add_argument("--category", default=None)

    delete = sub.add_parser("delete", help="Delete one of your posts")
    delete.add_argument("post_id")

    draft = sub.add_parser("draft", help="Save, show or clear the local draft")
    draft.add_argument("action", choices=["save", "show", "clear"])
    draft.add_argument("--title", default="")
    draft.add_argument("--content-file", default=None)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=3001)
    return parser


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("quickblog.app:app", host=args.host, port=args.port)
    return 0


def run(args: argparse.Namespace, client: QuickBlogClient) -> int:
    session = client.session
    if args.command in ("register", "login"):
        password = args.password or getpass.getpass("Password: ")
        if args.command == "register":
            client.register(args.username, password)
            print(f"Registered {args.username}")
        else:
            print(f"Logged in as {client.login(args.username, password)}")
    elif args.command == "logout":
        client.logout()
        print("Logged out")
    elif args.command == "theme":
        print(f"Theme: {client.toggle_theme()}")
    elif args.command == "publish":
        title = args.title or session.draft.get("title", "")
        content = _read_content(args.content_file) or session.draft.get("content", "")
        if not client.check_title(title):
            print("A blog with this title already exists.", file=sys.stderr)
            return 1
        result = client.create_post(
            title, content, parse_tag_list(args.tags), category=args.category
        )
        print(f"Published {result['blogId']}: {result['shareableLink']}")
    elif args.command in ("mine", "feed"):
        posts = client.list_my_posts() if args.command == "mine" else client.feed()
        if not posts:
            print("No posts yet")
        for post in posts:
            _print_post_line(post)
    elif args.command == "show":
        _print_post(client.get_post(args.author, args.post_id))
    elif args.command == "edit":
        post = client.update_post(
            args.post_id,
            title=args.title,
            content=_read_content(args.content_file),
            tags=parse_tag_list(args.tags) if args.tags is not None else None,
            category=args.category,
        )
        print(f"Updated {post['id']}")
    elif args.command == "delete":
        client.delete_post(args.post_id)
        print(f"Deleted {args.post_id}")
    elif args.command == "draft":
        if args.action == "save":
            client.save_draft(args.title, _read_content(args.content_file) or "")
            print("Draft saved")
        elif args.action == "clear":
            client.clear_draft()
            print("Draft cleared")
        elif session.draft:
            print(session.draft.get("title", ""))
            print()
            print(session.draft.get("content", ""))
        else:
            print("No draft")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s:%(message)s")

    if args.command == "serve":
        return _serve(args)

    settings = get_settings()
    client = QuickBlogClient(
        args.base_url,
        ClientSession.load(args.state_file),
        limits=PostLimits(
            min_words=settings.min_words,
            max_words=settings.max_words,
            max_tags=settings.max_tags,
        ),
        api_prefix=settings.api_prefix,
    )
    try:
        return run(args, client)
    except BlogError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
