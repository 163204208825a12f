"""Tests for search configuration."""

import pytest

from src.blogsearch.config import (
    Language,
    LanguageFilter,
    MockConfig,
    RunMode,
    SearchConfig,
    SearchMethod,
)


class TestSearchConfig:
    def test_default_mode_is_mock(self) -> None:
        config = SearchConfig()
        assert config.mode == RunMode.MOCK

    def test_search_defaults(self) -> None:
        config = SearchConfig()
        assert config.default_limit == 5
        assert config.max_limit == 20
        assert config.min_similarity == 0.65
        assert config.max_query_length == 500
        assert config.embedding_dimensions == 1536

    def test_custom_config(self) -> None:
        config = SearchConfig(mode=RunMode.PRODUCTION, default_limit=10, min_similarity=0.5)
        assert config.mode == RunMode.PRODUCTION
        assert config.default_limit == 10
        assert config.min_similarity == 0.5

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCH_MODE", "hybrid")
        monkeypatch.setenv("SEARCH_MIN_SIMILARITY", "0.7")
        config = SearchConfig()
        assert config.mode == RunMode.HYBRID
        assert config.min_similarity == 0.7


class TestEnums:
    def test_language_filter_covers_languages(self) -> None:
        assert {f.value for f in LanguageFilter} == {lang.value for lang in Language} | {"all"}

    def test_search_methods(self) -> None:
        assert [m.value for m in SearchMethod] == ["semantic", "keyword", "none"]


class TestMockConfig:
    def test_default_is_mock(self) -> None:
        config = MockConfig.default()
        assert config.mode == RunMode.MOCK

    def test_with_overrides(self) -> None:
        config = MockConfig.with_overrides(default_limit=3)
        assert config.mode == RunMode.MOCK
        assert config.default_limit == 3
