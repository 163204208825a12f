"""Blog search core - configuration, records, providers, and the search service."""

from src.blogsearch.config import LanguageFilter, MockConfig, SearchConfig, SearchMethod
from src.blogsearch.result import DataError, Err, Ok, ProviderError, Result, ValidationError

__all__ = [
    "DataError",
    "Err",
    "LanguageFilter",
    "MockConfig",
    "Ok",
    "ProviderError",
    "Result",
    "SearchConfig",
    "SearchMethod",
    "ValidationError",
]
