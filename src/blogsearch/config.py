"""Configuration management for the blog search service.

Supports three modes:
- Production: Real embedding and LLM APIs
- Mock: Deterministic fake providers for demos and testing
- Hybrid: Real embeddings with mock summaries (cheap testing against live vectors)
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class RunMode(str, Enum):
    """Provider execution mode."""

    PRODUCTION = "production"
    MOCK = "mock"
    HYBRID = "hybrid"


class Language(str, Enum):
    """Languages the blog is published in."""

    PL = "pl"
    EN = "en"


class LanguageFilter(str, Enum):
    """Language selector accepted by the search operations."""

    PL = "pl"
    EN = "en"
    ALL = "all"


class SearchMethod(str, Enum):
    """Strategy that produced a search response."""

    SEMANTIC = "semantic"
    KEYWORD = "keyword"
    NONE = "none"


class SearchConfig(BaseSettings):
    """Main search service configuration.

    All settings can be overridden via environment variables with the SEARCH_ prefix.
    Example: SEARCH_MODE=production, SEARCH_OPENAI_API_KEY=sk-...
    """

    model_config = {"env_prefix": "SEARCH_"}

    # Core mode
    mode: RunMode = Field(default=RunMode.MOCK, description="Provider execution mode")

    # Embedding settings
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    embedding_model: str = Field(
        default="text-embedding-3-small", description="Embedding model name"
    )
    embedding_dimensions: int = Field(default=1536, description="Embedding vector dimensions")
    embedding_timeout: float = Field(default=30.0, description="Embedding request timeout (s)")
    embedding_max_retries: int = Field(default=2, description="Embedding client retry count")

    # Summary (LLM) settings
    llm_model: str = Field(default="gpt-4o-mini", description="Summary model name")
    llm_temperature: float = Field(default=0.3, description="Summary temperature")
    llm_max_tokens: int = Field(default=200, description="Max tokens for summary response")
    llm_timeout: float = Field(default=30.0, description="Summary request timeout (s)")

    # Content & snapshot locations
    embeddings_path: str = Field(
        default="data/embeddings.json", description="Embedding snapshot file"
    )
    content_dir: str = Field(default="content/blog", description="Blog posts directory")

    # Search settings
    default_limit: int = Field(default=5, description="Results returned when no limit given")
    max_limit: int = Field(default=20, description="Largest accepted result limit")
    min_similarity: float = Field(
        default=0.65, description="Minimum cosine similarity for semantic results"
    )
    excerpt_length: int = Field(default=200, description="Characters kept in raw excerpts")
    enrich_results: bool = Field(default=True, description="Generate contextual excerpts")
    max_query_length: int = Field(default=500, description="Longest accepted query")

    # API settings
    cache_ttl_seconds: int = Field(default=300, description="Response cache lifetime")
    rate_limit_requests: int = Field(default=30, description="Requests per client per window")
    rate_limit_window_seconds: int = Field(default=60, description="Rate limit window")
    retry_after_seconds: int = Field(default=60, description="Retry-After for 429/503")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    log_level: str = Field(default="INFO", description="Root log level")


class MockConfig:
    """Configuration presets for mock/demo mode.

    Returns deterministic providers without requiring any API keys.
    Useful for testing, demos, and CI/CD pipelines.
    """

    @staticmethod
    def default() -> SearchConfig:
        """Create a default mock configuration."""
        return SearchConfig(mode=RunMode.MOCK)

    @staticmethod
    def with_overrides(**kwargs: object) -> SearchConfig:
        """Create mock config with specific overrides."""
        defaults = {"mode": RunMode.MOCK}
        defaults.update(kwargs)
        return SearchConfig(**defaults)  # type: ignore[arg-type]
