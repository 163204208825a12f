"""Blog post loading from a content directory.

Posts live in ``<content_dir>/<lang>/<slug>.mdx`` (or ``.md``) with YAML
frontmatter holding ``title``, ``description`` and an optional ``draft`` flag.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from src.blogsearch.config import Language
from src.blogsearch.result import DataError

logger = logging.getLogger(__name__)

POST_SUFFIXES = (".mdx", ".md")
FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)


@dataclass(frozen=True, slots=True)
class BlogPost:
    """A published (or draft) blog post."""

    slug: str
    language: Language
    title: str
    description: str
    body: str
    draft: bool = False

    def __post_init__(self) -> None:
        if not self.slug.strip():
            raise ValueError("Post slug cannot be empty")
        if not self.title.strip():
            raise ValueError(f"Post {self.slug!r} has no title")

    @property
    def url(self) -> str:
        return f"/{self.language.value}/blog/{self.slug}"


def parse_frontmatter(raw: str) -> tuple[dict[str, Any], str]:
    """Split ``---`` delimited YAML frontmatter from the post body.

    Only lines consisting of ``---`` delimit the block.
    """
    match = FRONTMATTER_PATTERN.match(raw)
    if match is None:
        return {}, raw

    try:
        data = yaml.safe_load(match.group(1) or "") or {}
    except yaml.YAMLError as e:
        raise DataError(f"Invalid frontmatter: {e}") from e
    if not isinstance(data, dict):
        raise DataError("Frontmatter must be a mapping")
    return data, raw[match.end():].lstrip("\n")


def read_post(path: Path, language: Language, include_drafts: bool = False) -> Optional[BlogPost]:
    """Read one post; drafts (unless requested) and untitled posts come back as None."""
    data, body = parse_frontmatter(path.read_text(encoding="utf-8"))

    draft = bool(data.get("draft", False))
    if draft and not include_drafts:
        return None

    title = str(data.get("title") or "").strip()
    if not title:
        logger.warning("Skipping %s: frontmatter has no title", path)
        return None

    return BlogPost(
        slug=path.stem,
        language=language,
        title=title,
        description=str(data.get("description") or ""),
        body=body,
        draft=draft,
    )


def load_posts(content_dir: Union[str, Path], include_drafts: bool = False) -> list[BlogPost]:
    """Read every post for every language; missing language folders are skipped."""
    root = Path(content_dir)
    posts: list[BlogPost] = []

    for language in Language:
        lang_dir = root / language.value
        if not lang_dir.is_dir():
            logger.debug("No content directory for %s at %s", language.value, lang_dir)
            continue

        for path in sorted(lang_dir.iterdir()):
            if path.suffix not in POST_SUFFIXES:
                continue
            post = read_post(path, language, include_drafts)
            if post is not None:
                posts.append(post)

    logger.info("Found %d published posts in %s", len(posts), root)
    return posts
