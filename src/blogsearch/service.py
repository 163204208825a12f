"""Search service orchestrating semantic search, keyword fallback, and enrichment.

The service is the primary entry point for search. It:
1. Tries semantic search against the embedding store
2. Falls back to keyword search when semantic search finds nothing or fails
3. Enriches whatever it returns with contextual excerpts

Provider failures always degrade to a smaller (possibly empty) response;
they never propagate to the caller. Corrupt embedding data does.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from src.blogsearch.config import LanguageFilter, SearchConfig, SearchMethod
from src.blogsearch.embeddings import EmbeddingProvider, create_embedding_provider
from src.blogsearch.llm import LLMProvider, create_llm_provider
from src.blogsearch.record import SearchOutcome, SearchResult
from src.blogsearch.result import DataError
from src.retrieval.enrichment import SummaryEnricher
from src.retrieval.keyword import KeywordRetriever
from src.retrieval.semantic import SemanticRetriever
from src.retrieval.store import EmbeddingStore, LanguageArg

logger = logging.getLogger(__name__)


class SearchService:
    """Blog search with automatic fallback.

    Usage:
        store = EmbeddingStore.from_path("data/embeddings.json")
        service = SearchService(store, SearchConfig(mode=RunMode.MOCK))

        outcome = service.search("automatyzacja zamówień", language="pl")
    """

    def __init__(
        self,
        store: EmbeddingStore,
        config: Optional[SearchConfig] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        llm_provider: Optional[LLMProvider] = None,
    ) -> None:
        self._config = config or SearchConfig()
        self._store = store

        # Dependency injection with sensible defaults
        self._embeddings = embedding_provider or create_embedding_provider(self._config)
        self._llm = llm_provider or create_llm_provider(self._config)

        self._semantic = SemanticRetriever(
            store, self._embeddings, excerpt_length=self._config.excerpt_length
        )
        self._keyword = KeywordRetriever(store, excerpt_length=self._config.excerpt_length)
        self._enricher = SummaryEnricher(store, self._llm)

    @property
    def config(self) -> SearchConfig:
        return self._config

    @property
    def store(self) -> EmbeddingStore:
        return self._store

    def search(
        self,
        query: str,
        language: LanguageArg = LanguageFilter.ALL,
        limit: Optional[int] = None,
    ) -> SearchOutcome:
        """Search with fallback; never raises for provider failures.

        Args:
            query: Sanitized user query
            language: 'pl', 'en' or 'all'
            limit: Override number of results

        Returns:
            SearchOutcome whose method is semantic, keyword, or none.
        """
        start_time = time.monotonic()
        k = limit or self._config.default_limit

        try:
            results, method, errors = self._search(query, language, k)
        except DataError:
            raise
        except Exception as e:
            logger.exception("Search with fallback failed, retrying keyword search only")
            errors = [f"Search failed: {e}"]
            try:
                results = self._keyword.search(query, language, limit=k)
                method = SearchMethod.KEYWORD if results else SearchMethod.NONE
            except DataError:
                raise
            except Exception as kw_error:
                logger.exception("Keyword search failed")
                errors.append(f"Keyword search failed: {kw_error}")
                results, method = [], SearchMethod.NONE

        elapsed_ms = (time.monotonic() - start_time) * 1000
        return SearchOutcome(
            results=results,
            method=method,
            latency_ms=elapsed_ms,
            degraded=bool(errors),
            errors=errors,
        )

    def _search(
        self, query: str, language: LanguageArg, limit: int
    ) -> tuple[list[SearchResult], SearchMethod, list[str]]:
        errors: list[str] = []

        semantic_result = self._semantic.search(
            query,
            language,
            limit=limit,
            min_similarity=self._config.min_similarity,
        )
        if semantic_result.is_err():
            logger.warning("Semantic search failed: %s", semantic_result.error)  # type: ignore[union-attr]
            errors.append(str(semantic_result.error))  # type: ignore[union-attr]
        elif semantic_result.unwrap():
            return self._enrich(query, semantic_result.unwrap()), SearchMethod.SEMANTIC, errors
        else:
            logger.info("Semantic search returned no results, trying keyword search")

        keyword_results = self._keyword.search(query, language, limit=limit)
        if keyword_results:
            return self._enrich(query, keyword_results), SearchMethod.KEYWORD, errors

        return [], SearchMethod.NONE, errors

    def _enrich(self, query: str, results: list[SearchResult]) -> list[SearchResult]:
        if not self._config.enrich_results:
            return results
        return self._enricher.enrich(query, results)
