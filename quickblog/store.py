"""
Key-value store abstraction.

Supports an in-memory fallback for tests/local runs and a Redis-backed
implementation for production. Both expose a single flat namespace of
string keys to string values.
"""

from __future__ import annotations

import fnmatch
from dataclasses import dataclass, field
from typing import Iterator, Optional, Protocol

import redis
from redis import exceptions as redis_exceptions

from quickblog.errors import StoreUnavailableError


class KeyValueStore(Protocol):
    """Minimal store interface used by the data-access layer."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def scan(self, pattern: str) -> Iterator[str]:
        ...

    def ping(self) -> bool:
        ...


@dataclass
class InMemoryKeyValueStore:
    """Dict-backed store for testing/dev."""

    items: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set(self, key: str, value: str) -> None:
        self.items[key] = value

    def delete(self, key: str) -> None:
        self.items.pop(key, None)

    def scan(self, pattern: str) -> Iterator[str]:
        # Snapshot so callers may write while iterating.
        for key in list(self.items):
            if fnmatch.fnmatchcase(key, pattern):
                yield key

    def ping(self) -> bool:
        return True

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.items.clear()


@dataclass
class RedisKeyValueStore:
    """Redis-backed store using plain GET/SET/DEL and SCAN."""

    url: str
    scan_count: int = 500

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url, decode_responses=True)

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except redis_exceptions.RedisError as exc:
            raise StoreUnavailableError(f"GET {key} failed: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(key, value)
        except redis_exceptions.RedisError as exc:
            raise StoreUnavailableError(f"SET {key} failed: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis_exceptions.RedisError as exc:
            raise StoreUnavailableError(f"DEL {key} failed: {exc}") from exc

    def scan(self, pattern: str) -> Iterator[str]:
        try:
            yield from self.client.scan_iter(match=pattern, count=self.scan_count)
        except redis_exceptions.RedisError as exc:
            raise StoreUnavailableError(f"SCAN {pattern} failed: {exc}") from exc

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis_exceptions.RedisError:
            return False
