"""Keyword fallback retrieval using token overlap.

Used when semantic search yields nothing. A post scores the share of query
tokens that appear (as substrings) in its title, summary, and body.
"""

from __future__ import annotations

from src.blogsearch.config import LanguageFilter
from src.blogsearch.record import EmbeddingRecord, SearchResult, deduplicate
from src.retrieval.store import EmbeddingStore, LanguageArg

DEFAULT_LIMIT = 5


def overlap_ratio(tokens: list[str], haystack: str) -> float:
    """Fraction of ``tokens`` found in ``haystack``."""
    if not tokens:
        return 0.0
    return sum(1 for token in tokens if token in haystack) / len(tokens)


def _haystack(record: EmbeddingRecord) -> str:
    return f"{record.title} {record.summary} {record.body}".lower()


class KeywordRetriever:
    """Retrieves posts by query token overlap."""

    def __init__(self, store: EmbeddingStore, excerpt_length: int = 200) -> None:
        self._store = store
        self._excerpt_length = excerpt_length

    def search(
        self,
        query: str,
        language: LanguageArg = LanguageFilter.ALL,
        limit: int = DEFAULT_LIMIT,
    ) -> list[SearchResult]:
        tokens = query.lower().split()

        scored = []
        for record in self._store.load_records(language):
            similarity = overlap_ratio(tokens, _haystack(record))
            if similarity > 0.0:
                scored.append(
                    SearchResult.from_record(record, similarity, self._excerpt_length)
                )

        scored.sort(key=lambda r: r.similarity, reverse=True)
        return deduplicate(scored)[:limit]
