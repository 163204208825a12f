"""Offline indexing: post loading, section chunking, and snapshot building."""

from src.indexing.builder import CostEstimate, IndexBuilder, estimate_cost, write_snapshot
from src.indexing.chunker import ContentChunk, chunk_content, embedding_text
from src.indexing.content import BlogPost, load_posts, parse_frontmatter

__all__ = [
    "BlogPost",
    "ContentChunk",
    "CostEstimate",
    "IndexBuilder",
    "chunk_content",
    "embedding_text",
    "estimate_cost",
    "load_posts",
    "parse_frontmatter",
    "write_snapshot",
]
