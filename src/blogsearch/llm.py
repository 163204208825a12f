"""LLM providers for contextual search excerpts.

Supports:
- OpenAI chat model (production)
- Mock LLM (demo/testing - returns template-based excerpts)
"""

from __future__ import annotations

import hashlib
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from src.blogsearch.config import RunMode, SearchConfig
from src.blogsearch.result import Err, Ok, Result

logger = logging.getLogger(__name__)

PROMPT_BODY_CHARS = 300

SYSTEM_PROMPT = (
    "You are the assistant of a blog search engine. For every article write ONE "
    "short sentence (max 15 words) telling the reader what they will find in it "
    "in the context of the query. Answer as a numbered list with one sentence "
    "per line (1. ..., 2. ...). Write in the language of the query, invitingly."
)

_NUMBERED_LINE = re.compile(r"^\s*(\d+)\.\s*(.*)$")


@dataclass(frozen=True, slots=True)
class SummaryItem:
    """One search hit handed to the LLM for an excerpt."""

    title: str
    body: str
    section_label: Optional[str] = None


class LLMProvider(ABC):
    """Abstract LLM provider interface."""

    @abstractmethod
    def summarize(self, query: str, items: list[SummaryItem]) -> Result[list[str], str]:
        """Return one short excerpt per item, in the same order."""
        ...


def build_prompt(query: str, items: list[SummaryItem]) -> str:
    """Render the user message listing every article."""
    articles = "\n\n".join(
        f'[{i}] "{item.title}"'
        + (f" (section: {item.section_label})" if item.section_label else "")
        + f"\nContent: {item.body[:PROMPT_BODY_CHARS]}"
        for i, item in enumerate(items, 1)
    )
    return f'Query: "{query}"\n\nArticles:\n{articles}'


def parse_numbered_lines(text: str, count: int) -> list[str]:
    """Map a ``1. ...`` style reply back to ``count`` excerpts.

    Missing entries come back as empty strings.
    """
    found: dict[int, str] = {}
    for line in text.splitlines():
        match = _NUMBERED_LINE.match(line)
        if match:
            found.setdefault(int(match.group(1)), match.group(2).strip())
    return [found.get(i, "") for i in range(1, count + 1)]


class MockLLMProvider(LLMProvider):
    """Deterministic mock LLM for testing and demos."""

    TEMPLATES = [
        'Covers "{title}" with a focus on {topics}.',
        'Explains {topics} in "{title}".',
        'Practical notes on {topics} from "{title}".',
    ]

    def summarize(self, query: str, items: list[SummaryItem]) -> Result[list[str], str]:
        if not items:
            return Ok([])

        try:
            topics = ", ".join(query.split()[:3])
            template_index = (
                int(hashlib.md5(query.encode()).hexdigest()[:4], 16) % len(self.TEMPLATES)
            )
            template = self.TEMPLATES[template_index]
            return Ok([template.format(title=item.title, topics=topics) for item in items])
        except Exception as e:
            return Err(f"Mock summary failed: {e}")


class OpenAILLMProvider(LLMProvider):
    """OpenAI chat provider for production use."""

    def __init__(self, config: SearchConfig) -> None:
        self._config = config

    def summarize(self, query: str, items: list[SummaryItem]) -> Result[list[str], str]:
        if not items:
            return Ok([])

        try:
            from langchain_openai import ChatOpenAI

            llm = ChatOpenAI(
                model=self._config.llm_model,
                temperature=self._config.llm_temperature,
                max_tokens=self._config.llm_max_tokens,
                openai_api_key=self._config.openai_api_key,
                timeout=self._config.llm_timeout,
            )

            response = llm.invoke(
                [
                    ("system", SYSTEM_PROMPT),
                    ("human", build_prompt(query, items)),
                ]
            )
            return Ok(parse_numbered_lines(str(response.content), len(items)))
        except ImportError:
            return Err("langchain-openai not installed")
        except Exception as e:
            logger.warning("OpenAI summary generation failed: %s", e)
            return Err(f"OpenAI summary generation failed: {e}")


def create_llm_provider(config: SearchConfig) -> LLMProvider:
    """Factory function to create the appropriate LLM provider."""
    if config.mode in (RunMode.MOCK, RunMode.HYBRID):
        return MockLLMProvider()
    return OpenAILLMProvider(config)
