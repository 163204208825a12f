"""Retrieval strategies: semantic search, keyword fallback, and excerpt enrichment."""

from src.retrieval.enrichment import SummaryEnricher
from src.retrieval.keyword import KeywordRetriever
from src.retrieval.semantic import SemanticRetriever
from src.retrieval.similarity import cosine_similarity
from src.retrieval.store import EmbeddingStore

__all__ = [
    "EmbeddingStore",
    "KeywordRetriever",
    "SemanticRetriever",
    "SummaryEnricher",
    "cosine_similarity",
]
