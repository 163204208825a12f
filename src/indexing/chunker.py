"""Section chunking for blog posts.

Posts are split on H2 (``## ``) headings so each section can surface on its
own. Sections too short to carry meaning are dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from src.indexing.content import BlogPost

H2_PATTERN = re.compile(r"^##\s+(.+)$", re.MULTILINE)
MIN_SECTION_CHARS = 50


@dataclass(frozen=True, slots=True)
class ContentChunk:
    """A section of a post, labelled by its heading."""

    content: str
    section_label: Optional[str] = None


def chunk_content(content: str, min_chars: int = MIN_SECTION_CHARS) -> list[ContentChunk]:
    """Split markdown on H2 headings.

    Text before the first heading is not indexed. A post without headings,
    or whose sections are all shorter than ``min_chars``, becomes one chunk.
    """
    matches = list(H2_PATTERN.finditer(content))
    if not matches:
        return [ContentChunk(content=content.strip())]

    chunks: list[ContentChunk] = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(content)
        section = content[match.end():end].strip()
        if len(section) > min_chars:
            chunks.append(ContentChunk(content=section, section_label=match.group(1).strip()))

    return chunks or [ContentChunk(content=content.strip())]


def embedding_text(post: BlogPost, chunk: ContentChunk) -> str:
    """Text sent to the embedding model; the title is repeated for weight."""
    parts = [post.title, post.title, post.description]
    if chunk.section_label:
        parts.append(chunk.section_label)
    parts.append(chunk.content)
    return " ".join(parts).strip()
