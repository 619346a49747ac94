"""
QuickBlog: a small personal-blogging service.

The package provides a FastAPI application over a flat key-value store
(Redis in production, an in-memory dict for development and tests) plus a
terminal client that talks to the HTTP API.
"""
