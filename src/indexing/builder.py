"""Offline embedding snapshot builder.

Chunks every post, embeds all chunks in one batch call, and writes the
resulting records as the JSON snapshot the search service loads.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from src.blogsearch.embeddings import EmbeddingProvider
from src.blogsearch.record import EmbeddingRecord
from src.blogsearch.result import Err, Ok, Result
from src.indexing.chunker import ContentChunk, chunk_content, embedding_text
from src.indexing.content import BlogPost

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4
USD_PER_MILLION_TOKENS = 0.02


@dataclass(frozen=True, slots=True)
class CostEstimate:
    """Approximate cost of embedding a set of posts."""

    posts: int
    chunks: int
    tokens: int
    cost_usd: float


def _chunks(posts: list[BlogPost]) -> list[tuple[BlogPost, ContentChunk]]:
    return [(post, chunk) for post in posts for chunk in chunk_content(post.body)]


class IndexBuilder:
    """Builds embedding records for blog posts."""

    def __init__(self, embedding_provider: EmbeddingProvider) -> None:
        self._embeddings = embedding_provider

    def build(self, posts: list[BlogPost]) -> Result[list[EmbeddingRecord], str]:
        """Embed every chunk of every post.

        Returns:
            Result with the records in post/section order, or error message.
        """
        pairs = _chunks(posts)
        if not pairs:
            return Ok([])

        logger.info("Generating embeddings for %d chunks (batch)", len(pairs))
        embed_result = self._embeddings.embed_texts(
            [embedding_text(post, chunk) for post, chunk in pairs]
        )
        if embed_result.is_err():
            return Err(f"Embedding failed: {embed_result.error}")  # type: ignore[union-attr]

        vectors = embed_result.unwrap()
        if len(vectors) != len(pairs):
            return Err(f"Provider returned {len(vectors)} vectors for {len(pairs)} chunks")

        return Ok(
            [
                EmbeddingRecord(
                    source_id=post.slug,
                    language=post.language,
                    title=post.title,
                    summary=post.description,
                    section_label=chunk.section_label,
                    body=chunk.content,
                    locator=post.url,
                    vector=tuple(vector),
                )
                for (post, chunk), vector in zip(pairs, vectors)
            ]
        )


def write_snapshot(records: list[EmbeddingRecord], path: Union[str, Path]) -> Path:
    """Write records as a JSON array, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps([r.to_dict() for r in records]), encoding="utf-8")
    logger.info("Saved %d embeddings to %s", len(records), target)
    return target


def estimate_cost(posts: list[BlogPost]) -> CostEstimate:
    """Estimate embedding cost at roughly four characters per token."""
    pairs = _chunks(posts)
    tokens = sum(
        math.ceil(len(embedding_text(post, chunk)) / CHARS_PER_TOKEN) for post, chunk in pairs
    )
    return CostEstimate(
        posts=len(posts),
        chunks=len(pairs),
        tokens=tokens,
        cost_usd=round(tokens / 1_000_000 * USD_PER_MILLION_TOKENS, 4),
    )
