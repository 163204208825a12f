"""Shared fixtures: record factory and stub providers with call counters."""

from __future__ import annotations

import math
from typing import Callable, Optional

import pytest

from src.blogsearch.config import Language
from src.blogsearch.embeddings import EmbeddingProvider
from src.blogsearch.llm import LLMProvider, SummaryItem
from src.blogsearch.record import EmbeddingRecord
from src.blogsearch.result import Err, Ok, Result


class StubEmbeddingProvider(EmbeddingProvider):
    """Returns a fixed query vector (or a fixed error) and counts calls."""

    def __init__(self, vector: Optional[list[float]] = None) -> None:
        self.vector = vector or [1.0, 0.0]
        self.error: Optional[str] = None
        self.calls = 0

    @property
    def dimensions(self) -> int:
        return len(self.vector)

    def embed_texts(self, texts: list[str]) -> Result[list[list[float]], str]:
        self.calls += 1
        if self.error:
            return Err(self.error)
        return Ok([list(self.vector) for _ in texts])

    def embed_query(self, query: str) -> Result[list[float], str]:
        self.calls += 1
        if self.error:
            return Err(self.error)
        return Ok(list(self.vector))


class StubLLMProvider(LLMProvider):
    """Returns canned excerpt lines (or a fixed error) and records its input."""

    def __init__(self) -> None:
        self.lines: Optional[list[str]] = None
        self.error: Optional[str] = None
        self.calls = 0
        self.last_query: Optional[str] = None
        self.last_items: list[SummaryItem] = []

    def summarize(self, query: str, items: list[SummaryItem]) -> Result[list[str], str]:
        self.calls += 1
        self.last_query = query
        self.last_items = items
        if self.error:
            return Err(self.error)
        if self.lines is not None:
            return Ok(self.lines)
        return Ok([f"About {item.title}" for item in items])


def unit_vector(similarity: float) -> tuple[float, float]:
    """2-d unit vector whose cosine with [1, 0] equals ``similarity``."""
    return (similarity, math.sqrt(max(0.0, 1.0 - similarity**2)))


def _make_record(
    source_id: str,
    vector: tuple[float, ...] = (1.0, 0.0),
    language: Language = Language.PL,
    section_label: Optional[str] = None,
    title: Optional[str] = None,
    summary: str = "",
    body: str = "",
) -> EmbeddingRecord:
    return EmbeddingRecord(
        source_id=source_id,
        language=language,
        title=title or source_id.replace("-", " ").title(),
        summary=summary or f"Summary of {source_id}",
        section_label=section_label,
        body=body or f"Body of {source_id} {section_label or ''}".strip(),
        locator=f"/{language.value}/blog/{source_id}",
        vector=tuple(vector),
    )


@pytest.fixture
def make_record() -> Callable[..., EmbeddingRecord]:
    return _make_record


@pytest.fixture
def similar() -> Callable[[float], tuple[float, float]]:
    return unit_vector


@pytest.fixture
def stub_embeddings() -> StubEmbeddingProvider:
    return StubEmbeddingProvider()


@pytest.fixture
def stub_llm() -> StubLLMProvider:
    return StubLLMProvider()
