"""FastAPI REST API for blog search.

Provides the search endpoint consumed by the blog's search overlay and a
health check. Supports both production and mock modes.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from starlette.concurrency import run_in_threadpool

from src.api.guards import (
    RateLimiter,
    ResponseCache,
    check_search_request,
    client_ip,
    sanitize_query,
)
from src.blogsearch.config import LanguageFilter, SearchConfig, SearchMethod
from src.blogsearch.log import configure_logging
from src.blogsearch.record import SearchResult
from src.blogsearch.result import DataError, ProviderError, ValidationError
from src.blogsearch.service import SearchService
from src.retrieval.store import EmbeddingStore

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

RequestHandler = Callable[[Request], Awaitable[Response]]


# --- Request/Response Models ---


class SearchRequest(BaseModel):
    """Request body for a search."""

    query: str = Field(..., description="Search query (1-500 chars after sanitizing)")
    language: LanguageFilter = Field(default=LanguageFilter.ALL, description="pl, en or all")
    limit: Optional[int] = Field(default=None, description="Number of results (1-20)")


class SearchHit(BaseModel):
    """A single search result as returned to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    source_id: str
    language: str
    title: str
    summary: str
    section_label: Optional[str] = None
    locator: str
    similarity: float
    excerpt: Optional[str] = None

    @classmethod
    def from_result(cls, result: SearchResult) -> SearchHit:
        return cls(
            source_id=result.source_id,
            language=result.language.value,
            title=result.title,
            summary=result.summary,
            section_label=result.section_label,
            locator=result.locator,
            similarity=round(result.similarity, 4),
            excerpt=result.excerpt,
        )


class SearchResponse(BaseModel):
    """Response from a search."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    results: list[SearchHit]
    method: SearchMethod
    count: int
    latency_ms: float


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    mode: str
    record_count: int
    languages: list[str]
    version: str = VERSION


def error_response(
    message: str, status_code: int, headers: Optional[dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


# --- Application ---

_config: Optional[SearchConfig] = None
_service: Optional[SearchService] = None


def get_config() -> SearchConfig:
    """Get or create the global configuration."""
    global _config
    if _config is None:
        _config = SearchConfig()
    return _config


def get_service() -> SearchService:
    """Get or create the global search service.

    Raises:
        ProviderError: if the embedding snapshot cannot be loaded yet.
    """
    global _service
    if _service is None:
        config = get_config()
        store = EmbeddingStore.from_path(config.embeddings_path)
        _service = SearchService(store, config)
    return _service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup: load the snapshot; a missing one is retried on each request
    try:
        get_service()
    except ProviderError as e:
        logger.warning("Search backend unavailable at startup: %s", e)
    except DataError:
        logger.exception("Embedding snapshot is corrupt; /search will answer 500")
    yield


def create_app(
    config: Optional[SearchConfig] = None,
    service: Optional[SearchService] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Optional SearchConfig. Defaults to environment-based config.
        service: Optional prebuilt SearchService (its config wins over ``config``).
    """
    global _config, _service
    if service is not None:
        _config, _service = service.config, service
    elif config is not None:
        _config, _service = config, None

    settings = get_config()
    cache = ResponseCache(ttl_seconds=settings.cache_ttl_seconds)
    limiter = RateLimiter(
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
        on_gc=cache.purge_expired,
    )
    retry_after = {"Retry-After": str(settings.retry_after_seconds)}
    cache_control = f"public, max-age={int(settings.cache_ttl_seconds)}"

    app = FastAPI(
        title="Blog Semantic Search",
        description="Semantic blog search with keyword fallback and contextual excerpts",
        version=VERSION,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def rate_limit(request: Request, call_next: RequestHandler) -> Response:
        # Counted before the body is parsed so rejected requests count too
        if request.method == "POST" and request.url.path == "/search":
            if limiter.is_limited(client_ip(request)):
                return error_response(
                    "Too many requests. Please try again later.", 429, retry_after
                )
        return await call_next(request)

    # Added last so it wraps the limiter and 429s carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        if any(err.get("type") == "json_invalid" for err in errors):
            return error_response("Invalid JSON in request body", 400)
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request body")
        return error_response(f"{field}: {message}" if field else message, 400)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        try:
            store = get_service().store
        except ProviderError:
            return HealthResponse(
                status="unavailable", mode=settings.mode.value, record_count=0, languages=[]
            )
        except DataError:
            logger.exception("Embedding snapshot is corrupt")
            return HealthResponse(
                status="error", mode=settings.mode.value, record_count=0, languages=[]
            )
        return HealthResponse(
            status="healthy",
            mode=settings.mode.value,
            record_count=store.count,
            languages=store.languages,
        )

    @app.post("/search", response_model=SearchResponse)
    async def search(request: SearchRequest) -> JSONResponse:
        """Search blog posts."""
        start_time = time.monotonic()

        query = sanitize_query(request.query)
        try:
            limit = check_search_request(query, request.limit, settings)
        except ValidationError as e:
            return error_response(str(e), 400)

        cache_key = ResponseCache.key(query, request.language.value, limit)
        cached = cache.get(cache_key)
        if cached is not None:
            return JSONResponse(
                cached,
                headers={"Cache-Control": cache_control, "X-Cache": "HIT"},
            )

        try:
            service = get_service()
            outcome = await run_in_threadpool(service.search, query, request.language, limit)
        except ProviderError as e:
            logger.error("Search backend unavailable: %s", e)
            return error_response("Search service temporarily unavailable", 503, retry_after)
        except DataError:
            logger.exception(
                "Corrupt embedding data (latency %.0fms)", (time.monotonic() - start_time) * 1000
            )
            return error_response("Internal server error", 500)

        response = SearchResponse(
            results=[SearchHit.from_result(r) for r in outcome.results],
            method=outcome.method,
            count=outcome.count,
            latency_ms=round((time.monotonic() - start_time) * 1000, 2),
        )
        payload = response.model_dump(mode="json", by_alias=True)

        # Degraded responses are not cached so recovery shows up immediately
        if not outcome.degraded:
            cache.put(cache_key, payload)

        return JSONResponse(
            payload,
            headers={"Cache-Control": cache_control, "X-Cache": "MISS"},
        )

    return app


def create_default_app() -> FastAPI:
    """Entry point for uvicorn's factory mode."""
    configure_logging(get_config().log_level)
    return create_app()


# Default app instance for uvicorn
app = create_app()
