"""Request guards for the search endpoint: input checks, response cache, rate limiting.

The cache and the limiter are plain in-process tables. They are only touched
from the event loop, so they need no locking.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from starlette.requests import Request

from src.blogsearch.config import SearchConfig
from src.blogsearch.result import ValidationError

CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
GC_EVERY = 100

Clock = Callable[[], float]


def sanitize_query(query: str) -> str:
    """Drop control characters and surrounding whitespace."""
    return CONTROL_CHARS.sub("", query).strip()


def check_search_request(query: str, limit: Optional[int], config: SearchConfig) -> int:
    """Validate a sanitized query and resolve the limit.

    Raises:
        ValidationError: with a message suitable for the client.
    """
    if not query:
        raise ValidationError("Query is required and must not be empty")
    if len(query) > config.max_query_length:
        raise ValidationError(
            f"Query is too long (maximum {config.max_query_length} characters)"
        )

    resolved = config.default_limit if limit is None else limit
    if not 1 <= resolved <= config.max_limit:
        raise ValidationError(f"Limit must be between 1 and {config.max_limit}")
    return resolved


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    if request.client is not None:
        return request.client.host
    return "unknown"


@dataclass(slots=True)
class _CacheEntry:
    payload: dict[str, Any]
    stored_at: float


class ResponseCache:
    """TTL cache of serialized search responses."""

    def __init__(self, ttl_seconds: float, clock: Clock = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    @staticmethod
    def key(query: str, language: str, limit: int) -> str:
        return f"{query.lower().strip()}:{language}:{limit}"

    def get(self, key: str) -> Optional[dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            del self._entries[key]
            return None
        return entry.payload

    def put(self, key: str, payload: dict[str, Any]) -> None:
        self._entries[key] = _CacheEntry(payload=payload, stored_at=self._clock())

    def purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k, e in self._entries.items() if now - e.stored_at >= self._ttl]:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(slots=True)
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """Fixed-window request counter per client."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Clock = time.monotonic,
        on_gc: Optional[Callable[[], None]] = None,
    ) -> None:
        self._max = max_requests
        self._window = window_seconds
        self._clock = clock
        self._on_gc = on_gc
        self._windows: dict[str, _Window] = {}
        self._calls = 0

    def is_limited(self, client: str) -> bool:
        now = self._clock()

        self._calls += 1
        if self._calls % GC_EVERY == 0:
            self._collect(now)

        window = self._windows.get(client)
        if window is None or now > window.reset_at:
            self._windows[client] = _Window(count=1, reset_at=now + self._window)
            return False

        window.count += 1
        return window.count > self._max

    def _collect(self, now: float) -> None:
        for client in [c for c, w in self._windows.items() if now > w.reset_at]:
            del self._windows[client]
        if self._on_gc is not None:
            self._on_gc()
