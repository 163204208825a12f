"""Record models for the search service.

Defines the indexed chunk (EmbeddingRecord), the ranked projection returned
to callers (SearchResult), and the orchestrator's response (SearchOutcome).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from src.blogsearch.config import Language, SearchMethod
from src.blogsearch.result import DataError


@dataclass(frozen=True, slots=True)
class EmbeddingRecord:
    """One indexed chunk of a blog post."""

    source_id: str
    language: Language
    title: str
    summary: str
    body: str
    locator: str
    vector: tuple[float, ...]
    section_label: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.source_id.strip():
            raise DataError("Record source_id cannot be empty")
        if not self.vector:
            raise DataError(f"Record {self.source_id!r} has an empty vector")

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the parent document, shared by all of its chunks."""
        return (self.language.value, self.source_id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EmbeddingRecord:
        """Build a record from a snapshot entry."""
        try:
            return cls(
                source_id=str(data["slug"]),
                language=Language(data["lang"]),
                title=str(data.get("postTitle") or ""),
                summary=str(data.get("description") or ""),
                section_label=data.get("sectionTitle") or None,
                body=str(data.get("content") or ""),
                locator=str(data.get("url") or ""),
                vector=tuple(float(x) for x in data["embedding"]),
            )
        except DataError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise DataError(f"Malformed embedding record: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the snapshot entry format."""
        data: dict[str, Any] = {
            "slug": self.source_id,
            "lang": self.language.value,
            "postTitle": self.title,
            "description": self.summary,
            "content": self.body,
            "url": self.locator,
            "embedding": list(self.vector),
        }
        if self.section_label:
            data["sectionTitle"] = self.section_label
        return data


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A ranked, deduplicated projection of an EmbeddingRecord."""

    source_id: str
    language: Language
    title: str
    summary: str
    locator: str
    similarity: float
    section_label: Optional[str] = None
    excerpt: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.language.value, self.source_id)

    @classmethod
    def from_record(
        cls, record: EmbeddingRecord, similarity: float, excerpt_length: int = 200
    ) -> SearchResult:
        return cls(
            source_id=record.source_id,
            language=record.language,
            title=record.title,
            summary=record.summary,
            section_label=record.section_label,
            locator=record.locator,
            similarity=similarity,
            excerpt=record.body[:excerpt_length] + "...",
        )

    def with_excerpt(self, excerpt: Optional[str]) -> SearchResult:
        return replace(self, excerpt=excerpt)


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    """The orchestrator's response for a single query."""

    results: list[SearchResult]
    method: SearchMethod
    latency_ms: float = 0.0
    degraded: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.results)


def deduplicate(results: list[SearchResult]) -> list[SearchResult]:
    """Keep the first result per (language, source_id), preserving order."""
    seen: set[tuple[str, str]] = set()
    unique: list[SearchResult] = []
    for result in results:
        if result.key in seen:
            continue
        seen.add(result.key)
        unique.append(result)
    return unique
