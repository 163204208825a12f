"""Read-only embedding store backed by a JSON snapshot.

The snapshot is produced offline by the index builder and loaded once per
process. Nothing on the search path mutates it, so one instance can serve
any number of concurrent requests.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

import numpy as np

from src.blogsearch.config import Language, LanguageFilter
from src.blogsearch.record import EmbeddingRecord
from src.blogsearch.result import DataError, ProviderError

logger = logging.getLogger(__name__)

LanguageArg = Union[LanguageFilter, Language, str]


class EmbeddingStore:
    """Immutable snapshot of embedding records with per-language views."""

    def __init__(self, records: Iterable[EmbeddingRecord]) -> None:
        self._records: tuple[EmbeddingRecord, ...] = tuple(records)

        dims = {len(r.vector) for r in self._records}
        if len(dims) > 1:
            raise DataError(f"Embedding store mixes vector lengths: {sorted(dims)}")
        self._dimensions = dims.pop() if dims else 0

        self._by_filter: dict[LanguageFilter, tuple[EmbeddingRecord, ...]] = {
            LanguageFilter.ALL: self._records,
        }
        for language in Language:
            self._by_filter[LanguageFilter(language.value)] = tuple(
                r for r in self._records if r.language == language
            )

        self._matrices: dict[LanguageFilter, np.ndarray] = {
            key: self._stack(records) for key, records in self._by_filter.items()
        }

        self._by_section: dict[tuple[str, str, Optional[str]], EmbeddingRecord] = {}
        for record in self._records:
            self._by_section.setdefault(
                (record.language.value, record.source_id, record.section_label), record
            )

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> EmbeddingStore:
        """Load a snapshot file.

        Raises:
            ProviderError: the file is missing or unreadable.
            DataError: the file is not a valid snapshot.
        """
        snapshot = Path(path)
        try:
            raw = snapshot.read_text(encoding="utf-8")
        except OSError as e:
            raise ProviderError("embedding store", f"cannot read {snapshot}: {e}") from e

        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DataError(f"Embedding snapshot {snapshot} is not valid JSON: {e}") from e

        if not isinstance(entries, list):
            raise DataError(f"Embedding snapshot {snapshot} must hold a JSON array")

        store = cls(EmbeddingRecord.from_dict(entry) for entry in entries)
        logger.info("Loaded %d embedding records from %s", store.count, snapshot)
        return store

    def _stack(self, records: tuple[EmbeddingRecord, ...]) -> np.ndarray:
        if not records:
            return np.empty((0, self._dimensions), dtype=np.float64)
        matrix = np.array([r.vector for r in records], dtype=np.float64)
        matrix.setflags(write=False)
        return matrix

    @staticmethod
    def _filter(language: LanguageArg) -> LanguageFilter:
        return LanguageFilter(language.value if isinstance(language, Enum) else language)

    def load_records(self, language: LanguageArg = LanguageFilter.ALL) -> list[EmbeddingRecord]:
        """Return the records for ``language`` ('all' returns everything)."""
        return list(self._by_filter[self._filter(language)])

    def vectors(self, language: LanguageArg = LanguageFilter.ALL) -> np.ndarray:
        """Return a read-only matrix whose rows align with ``load_records(language)``."""
        return self._matrices[self._filter(language)]

    def lookup(
        self, source_id: str, language: LanguageArg, section_label: Optional[str] = None
    ) -> Optional[EmbeddingRecord]:
        """Find the chunk of a document, by section label."""
        lang = self._filter(language).value
        return self._by_section.get((lang, source_id, section_label))

    @property
    def count(self) -> int:
        return len(self._records)

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def languages(self) -> list[str]:
        return sorted({r.language.value for r in self._records})
