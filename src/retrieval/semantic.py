"""Semantic retrieval using embedding cosine similarity.

Embeds the query once, scores it against every stored chunk, keeps the best
chunk per post, and drops anything below the similarity threshold.
"""

from __future__ import annotations

import logging

from src.blogsearch.config import LanguageFilter
from src.blogsearch.embeddings import EmbeddingProvider
from src.blogsearch.record import SearchResult, deduplicate
from src.blogsearch.result import Err, Ok, Result
from src.retrieval.similarity import cosine_similarities
from src.retrieval.store import EmbeddingStore, LanguageArg

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
DEFAULT_MIN_SIMILARITY = 0.65


class SemanticRetriever:
    """Retrieves posts using embedding-based similarity search."""

    def __init__(
        self,
        store: EmbeddingStore,
        embeddings: EmbeddingProvider,
        excerpt_length: int = 200,
    ) -> None:
        self._store = store
        self._embeddings = embeddings
        self._excerpt_length = excerpt_length

    def search(
        self,
        query: str,
        language: LanguageArg = LanguageFilter.ALL,
        limit: int = DEFAULT_LIMIT,
        min_similarity: float = DEFAULT_MIN_SIMILARITY,
    ) -> Result[list[SearchResult], str]:
        """Return at most ``limit`` posts ranked by cosine similarity.

        Provider failures come back as ``Err`` without retrying; a query
        vector whose length does not match the store raises ``DataError``.
        """
        candidates = self._store.load_records(language)
        if not candidates:
            logger.warning("No embeddings stored for language=%s", language)
            return Ok([])

        embed_result = self._embeddings.embed_query(query)
        if embed_result.is_err():
            return Err(f"Query embedding failed: {embed_result.error}")  # type: ignore[union-attr]

        scores = cosine_similarities(embed_result.unwrap(), self._store.vectors(language))

        scored = [
            SearchResult.from_record(record, float(score), self._excerpt_length)
            for record, score in zip(candidates, scores)
        ]
        # sorted() is stable: ties keep store order
        scored = sorted(scored, key=lambda r: r.similarity, reverse=True)

        results = [r for r in deduplicate(scored) if r.similarity >= min_similarity]
        logger.debug(
            "Semantic search scored %d chunks, %d above %.2f",
            len(scored), len(results), min_similarity,
        )
        return Ok(results[:limit])
