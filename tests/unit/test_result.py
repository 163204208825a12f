"""Tests for the Result type and error taxonomy."""

import pytest
from hypothesis import given, strategies as st

from src.blogsearch.result import (
    DataError,
    Err,
    Ok,
    ProviderError,
    SearchError,
    ValidationError,
)


class TestOk:
    def test_is_ok(self) -> None:
        result = Ok([0.1, 0.2])
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap(self) -> None:
        assert Ok("vector").unwrap() == "vector"

    @given(st.lists(st.floats(allow_nan=False)))
    def test_ok_preserves_value(self, value: list[float]) -> None:
        assert Ok(value).unwrap() == value


class TestErr:
    def test_is_err(self) -> None:
        result = Err("embedding provider timed out")
        assert result.is_err() is True
        assert result.is_ok() is False

    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="timed out"):
            Err("timed out").unwrap()

    @given(st.text(min_size=1))
    def test_err_preserves_error(self, error: str) -> None:
        assert Err(error).error == error


class TestErrors:
    def test_taxonomy(self) -> None:
        assert issubclass(ValidationError, SearchError)
        assert issubclass(ProviderError, SearchError)
        assert issubclass(DataError, SearchError)

    def test_data_error_is_value_error(self) -> None:
        assert issubclass(DataError, ValueError)

    def test_provider_error_message(self) -> None:
        error = ProviderError("embedding store", "snapshot missing")
        assert error.provider == "embedding store"
        assert error.message == "snapshot missing"
        assert str(error) == "embedding store: snapshot missing"
