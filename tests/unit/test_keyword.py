"""Tests for keyword fallback search."""

from typing import Callable

import pytest

from src.blogsearch.config import Language
from src.blogsearch.record import EmbeddingRecord
from src.retrieval.keyword import KeywordRetriever, overlap_ratio
from src.retrieval.store import EmbeddingStore


class TestOverlapRatio:
    def test_full_overlap(self) -> None:
        assert overlap_ratio(["promocja", "rabat"], "promocja i rabat") == 1.0

    def test_partial_overlap(self) -> None:
        assert overlap_ratio(["promocja", "rabat"], "tylko promocja") == 0.5

    def test_substring_match(self) -> None:
        assert overlap_ratio(["rabat"], "kody rabatowe") == 1.0

    def test_no_tokens(self) -> None:
        assert overlap_ratio([], "anything") == 0.0


class TestKeywordRetriever:
    def test_full_overlap_ranks_first(self, make_record: Callable[..., EmbeddingRecord]) -> None:
        store = EmbeddingStore([
            make_record("only-promo", body="Wielka promocja w sklepie"),
            make_record("promo-and-discount", body="Promocja oraz rabat dla stałych klientów"),
        ])
        results = KeywordRetriever(store).search("promocja rabat", "pl")

        assert [r.source_id for r in results] == ["promo-and-discount", "only-promo"]
        assert results[0].similarity == 1.0
        assert results[1].similarity == 0.5

    def test_case_insensitive(self, make_record: Callable[..., EmbeddingRecord]) -> None:
        store = EmbeddingStore([make_record("post", body="Automatyzacja ZAMÓWIEŃ")])
        results = KeywordRetriever(store).search("AUTOMATYZACJA zamówień")
        assert results[0].similarity == 1.0

    def test_matches_title_and_summary(
        self, make_record: Callable[..., EmbeddingRecord]
    ) -> None:
        store = EmbeddingStore([
            make_record("post", title="Marketplace feeds", summary="Product data", body="x")
        ])
        results = KeywordRetriever(store).search("marketplace product")
        assert results[0].similarity == 1.0

    def test_no_match_returns_empty(self, make_record: Callable[..., EmbeddingRecord]) -> None:
        store = EmbeddingStore([make_record("post", body="nothing relevant")])
        assert KeywordRetriever(store).search("kryptowaluty") == []

    def test_deduplicates_by_post(self, make_record: Callable[..., EmbeddingRecord]) -> None:
        store = EmbeddingStore([
            make_record("post", section_label="A", body="rabat"),
            make_record("post", section_label="B", body="rabat i promocja"),
            make_record("post", language=Language.EN, body="rabat"),
        ])
        results = KeywordRetriever(store).search("rabat promocja", "all")
        assert [(r.language, r.section_label) for r in results] == [
            (Language.PL, "B"),
            (Language.EN, None),
        ]

    def test_default_limit_is_five(self, make_record: Callable[..., EmbeddingRecord]) -> None:
        store = EmbeddingStore([make_record(f"post-{i}", body="rabat") for i in range(8)])
        assert len(KeywordRetriever(store).search("rabat")) == 5

    @pytest.mark.parametrize("limit", [1, 3, 8])
    def test_limit(self, make_record: Callable[..., EmbeddingRecord], limit: int) -> None:
        store = EmbeddingStore([make_record(f"post-{i}", body="rabat") for i in range(8)])
        assert len(KeywordRetriever(store).search("rabat", limit=limit)) == limit

    def test_language_filter(self, make_record: Callable[..., EmbeddingRecord]) -> None:
        store = EmbeddingStore([
            make_record("pl-post", body="automation"),
            make_record("en-post", language=Language.EN, body="automation"),
        ])
        results = KeywordRetriever(store).search("automation", "en")
        assert [r.source_id for r in results] == ["en-post"]
