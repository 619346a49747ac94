"""
Pydantic schemas for the QuickBlog HTTP API.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)


class CreatePostRequest(BaseModel):
    username: str = Field(..., min_length=1)
    title: str
    content: str
    category: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class UpdatePostRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[list[str]] = None


class CheckTitleRequest(BaseModel):
    title: str


class Post(BaseModel):
    id: str
    title: str
    content: str
    category: Optional[str] = None
    tags: list[str]
    author: str
    created_at: str
    updated_at: str


class SuccessResponse(BaseModel):
    success: Literal[True] = True
    message: Optional[str] = None


class LoginResponse(SuccessResponse):
    username: str


class CreatePostResponse(SuccessResponse):
    blogId: str
    shareableLink: str


class PostListResponse(SuccessResponse):
    blogs: list[Post]


class PostResponse(SuccessResponse):
    blog: Post


class TitleAvailabilityResponse(SuccessResponse):
    available: bool


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str


class HealthResponse(BaseModel):
    status: str
    redis: str
