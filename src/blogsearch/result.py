"""Result type and error taxonomy for the search service.

Expected failures (a provider timing out, a rate limit) travel as
``Result[T, E]`` values so callers decide how to degrade. Exceptions are
kept for conditions a caller cannot recover from locally:

- ValidationError: malformed request input
- ProviderError: a collaborator (store, embedding or LLM backend) is unavailable
- DataError: corrupt embedding data, a defect rather than a transient state
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


class SearchError(Exception):
    """Base class for search service errors."""


class ValidationError(SearchError):
    """Request input failed validation."""


class ProviderError(SearchError):
    """An external collaborator could not serve the request."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


class DataError(SearchError, ValueError):
    """Embedding data is malformed (e.g. mismatched vector lengths)."""


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing an error value."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:  # type: ignore[type-var]
        raise ValueError(f"Called unwrap on Err: {self.error}")


Result = Union[Ok[T], Err[E]]
