"""Embedding providers used by the index builder and for query embedding.

The production provider calls OpenAI through langchain-openai; the mock
provider hashes words into fixed directions so demos and tests need no key.
"""

from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from src.blogsearch.config import RunMode, SearchConfig
from src.blogsearch.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class EmbeddingProvider(ABC):
    """Abstract embedding provider interface."""

    @abstractmethod
    def embed_texts(self, texts: list[str]) -> Result[list[list[float]], str]:
        """Embed a batch of chunk texts, one vector per text, in order."""
        ...

    @abstractmethod
    def embed_query(self, query: str) -> Result[list[float], str]:
        """Embed a search query."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Vector length produced by this provider."""
        ...


class MockEmbeddingProvider(EmbeddingProvider):
    """Deterministic mock embeddings for testing and demos.

    Each word contributes a fixed pseudo-random direction, so texts sharing
    words land close together.
    """

    def __init__(self, dimensions: int = 1536) -> None:
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed_texts(self, texts: list[str]) -> Result[list[list[float]], str]:
        try:
            return Ok([self._generate_embedding(text) for text in texts])
        except Exception as e:
            return Err(f"Mock batch embedding failed: {e}")

    def embed_query(self, query: str) -> Result[list[float], str]:
        try:
            return Ok(self._generate_embedding(query))
        except Exception as e:
            return Err(f"Mock query embedding failed: {e}")

    def _generate_embedding(self, text: str) -> list[float]:
        """Sum of per-word random vectors plus a small text-specific offset."""
        text_hash = hashlib.sha256(text.encode()).hexdigest()
        rng = np.random.RandomState(int(text_hash[:8], 16))
        base = rng.randn(self._dimensions).astype(np.float64) * 0.1

        for word in set(text.lower().split()):
            word_seed = int(hashlib.md5(word.encode()).hexdigest()[:8], 16)
            base += np.random.RandomState(word_seed).randn(self._dimensions)

        norm = np.linalg.norm(base)
        if norm > 0:
            base = base / norm

        return base.tolist()


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI API embedding provider for production use.

    Timeouts and retries are handled by the underlying client and
    configured through ``embedding_timeout`` / ``embedding_max_retries``.
    """

    def __init__(self, config: SearchConfig) -> None:
        self._config = config
        self._dimensions = config.embedding_dimensions
        self._model: Optional[Any] = None

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _client(self) -> Any:
        if self._model is None:
            from langchain_openai import OpenAIEmbeddings

            self._model = OpenAIEmbeddings(
                model=self._config.embedding_model,
                openai_api_key=self._config.openai_api_key,
                timeout=self._config.embedding_timeout,
                max_retries=self._config.embedding_max_retries,
            )
        return self._model

    def embed_texts(self, texts: list[str]) -> Result[list[list[float]], str]:
        try:
            return Ok(self._client().embed_documents(texts))
        except ImportError:
            return Err("langchain-openai not installed")
        except Exception as e:
            logger.warning("OpenAI batch embedding failed: %s", e)
            return Err(f"OpenAI embedding failed: {e}")

    def embed_query(self, query: str) -> Result[list[float], str]:
        try:
            return Ok(self._client().embed_query(query))
        except ImportError:
            return Err("langchain-openai not installed")
        except Exception as e:
            logger.warning("OpenAI query embedding failed: %s", e)
            return Err(f"OpenAI query embedding failed: {e}")


def create_embedding_provider(config: SearchConfig) -> EmbeddingProvider:
    """Mock vectors in mock mode, OpenAI otherwise (hybrid included)."""
    if config.mode == RunMode.MOCK:
        return MockEmbeddingProvider(dimensions=config.embedding_dimensions)
    return OpenAIEmbeddingProvider(config)
