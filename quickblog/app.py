"""
FastAPI application entry point for the QuickBlog service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from quickblog.config import get_settings
from quickblog.errors import BlogError
from quickblog.routes import pages_router, router

logger = logging.getLogger(__name__)


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith(get_settings().api_prefix)


def _error_response(request: Request, status_code: int, message: str):
    if _wants_json(request):
        return JSONResponse(
            status_code=status_code, content={"success": False, "error": message}
        )
    return PlainTextResponse(message, status_code=status_code)


async def handle_blog_error(request: Request, exc: BlogError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(request, exc.status_code, exc.message)


async def handle_request_validation(request: Request, exc: RequestValidationError):
    fields = [
        ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        for error in exc.errors()
    ]
    fields = [name for name in fields if name]
    message = "Invalid request"
    if fields:
        message = f"{message}: {', '.join(fields)}"
    return _error_response(request, 400, message)


async def handle_unexpected(request: Request, exc: Exception):
    logger.exception("%s %s crashed", request.method, request.url.path)
    return _error_response(request, 500, "Internal server error")


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="QuickBlog API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BlogError, handle_blog_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
    app.include_router(router, prefix=settings.api_prefix)
    app.include_router(pages_router)
    return app


app = create_app()
