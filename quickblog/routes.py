"""
HTTP routes for the QuickBlog API and the public article pages.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, JSONResponse

from quickblog.config import Settings, get_settings
from quickblog.db import BlogRepository
from quickblog.dependencies import get_repository, get_store
from quickblog.pages import render_article
from quickblog.records import PostRecord
from quickblog.schemas import (
    CheckTitleRequest,
    CreatePostRequest,
    CreatePostResponse,
    Credentials,
    HealthResponse,
    LoginResponse,
    Post,
    PostListResponse,
    PostResponse,
    SuccessResponse,
    TitleAvailabilityResponse,
    UpdatePostRequest,
)
from quickblog.store import KeyValueStore

logger = logging.getLogger(__name__)

router = APIRouter()
pages_router = APIRouter()


def _to_schema(post: PostRecord) -> Post:
    return Post(**post.as_dict())


@router.post("/register", response_model=SuccessResponse)
def register(payload: Credentials, repo: BlogRepository = Depends(get_repository)):
    repo.register_user(payload.username, payload.password)
    return SuccessResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
def login(payload: Credentials, repo: BlogRepository = Depends(get_repository)):
    username = repo.authenticate(payload.username, payload.password)
    return LoginResponse(username=username, message="Login successful")


@router.post("/blogs", response_model=CreatePostResponse)
def create_blog(
    payload: CreatePostRequest,
    repo: BlogRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    created = repo.create_post(
        payload.username,
        payload.title,
        payload.content,
        tags=payload.tags,
        category=payload.category,
    )
    base_url = settings.public_base_url.rstrip("/")
    return CreatePostResponse(
        blogId=created.post.id,
        shareableLink=f"{base_url}/article/{created.slug}",
        message="Blog published successfully",
    )


@router.post("/blogs/check-title", response_model=TitleAvailabilityResponse)
def check_title(
    payload: CheckTitleRequest, repo: BlogRepository = Depends(get_repository)
):
    return TitleAvailabilityResponse(available=repo.is_title_available(payload.title))


@router.get("/blogs", response_model=PostListResponse)
def list_all_blogs(repo: BlogRepository = Depends(get_repository)):
    return PostListResponse(blogs=[_to_schema(p) for p in repo.list_all_posts()])


@router.get("/blogs/{username}", response_model=PostListResponse)
def list_user_blogs(username: str, repo: BlogRepository = Depends(get_repository)):
    return PostListResponse(blogs=[_to_schema(p) for p in repo.list_posts(username)])


@router.get("/blogs/{username}/{blog_id}", response_model=PostResponse)
def get_blog(
    username: str, blog_id: str, repo: BlogRepository = Depends(get_repository)
):
    return PostResponse(blog=_to_schema(repo.get_post(username, blog_id)))


@router.put("/blogs/{username}/{blog_id}", response_model=PostResponse)
def update_blog(
    username: str,
    blog_id: str,
    payload: UpdatePostRequest,
    repo: BlogRepository = Depends(get_repository),
):
    post = repo.update_post(
        username,
        blog_id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        category=payload.category,
    )
    return PostResponse(blog=_to_schema(post), message="Blog updated successfully")


@router.delete("/blogs/{username}/{blog_id}", response_model=SuccessResponse)
def delete_blog(
    username: str, blog_id: str, repo: BlogRepository = Depends(get_repository)
):
    repo.delete_post(username, blog_id)
    return SuccessResponse(message="Blog deleted successfully")


@pages_router.get("/article/{slug}", response_class=HTMLResponse)
def article_page(
    slug: str,
    repo: BlogRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    post = repo.resolve_slug(slug)
    return HTMLResponse(render_article(post, home_url=settings.site_url))


@pages_router.get("/blog/{username}/{blog_id}", response_class=HTMLResponse)
def blog_page(
    username: str,
    blog_id: str,
    repo: BlogRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    post = repo.get_post(username, blog_id)
    return HTMLResponse(render_article(post, home_url=settings.site_url))


@pages_router.get("/health", response_model=HealthResponse)
def health(store: KeyValueStore = Depends(get_store)):
    if store.ping():
        return HealthResponse(status="healthy", redis="connected")
    logger.warning("Health check failed: store did not answer ping")
    return JSONResponse(
        status_code=500,
        content={"status": "unhealthy", "redis": "disconnected"},
    )


@pages_router.get("/")
def root():
    return {"message": "QuickBlog API Server", "status": "running"}
