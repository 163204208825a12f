"""Contextual excerpts for search results.

Replaces the raw body truncation with a one-sentence LLM summary explaining
why each post matches the query. Ranking is never touched: if the provider
fails, excerpts fall back to the post's own summary.
"""

from __future__ import annotations

import logging

from src.blogsearch.llm import LLMProvider, SummaryItem
from src.blogsearch.record import SearchResult
from src.retrieval.store import EmbeddingStore

logger = logging.getLogger(__name__)


class SummaryEnricher:
    """Asks the LLM for one excerpt per result in a single call."""

    def __init__(self, store: EmbeddingStore, llm: LLMProvider) -> None:
        self._store = store
        self._llm = llm

    def _item(self, result: SearchResult) -> SummaryItem:
        record = self._store.lookup(result.source_id, result.language, result.section_label)
        body = record.body if record is not None else (result.excerpt or "")
        return SummaryItem(title=result.title, body=body, section_label=result.section_label)

    def enrich(self, query: str, results: list[SearchResult]) -> list[SearchResult]:
        if not results:
            return []

        items = [self._item(r) for r in results]
        summary_result = self._llm.summarize(query, items)
        if summary_result.is_err():
            logger.warning(
                "Summary enrichment failed, using post summaries: %s",
                summary_result.error,  # type: ignore[union-attr]
            )
            return [r.with_excerpt(r.summary) for r in results]

        excerpts = summary_result.unwrap()
        return [
            r.with_excerpt(excerpts[i] if i < len(excerpts) and excerpts[i] else r.summary)
            for i, r in enumerate(results)
        ]
