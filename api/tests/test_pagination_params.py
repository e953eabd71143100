"""Tests for cursor parameter validation."""

from __future__ import annotations

import pytest

from demonlist.errors import InvalidCursorWindow, InvalidPaginationLimit, ValueOutOfRange
from demonlist.services.pagination import PaginationParameters


class TestPaginationParameters:
    def test_defaults(self) -> None:
        params = PaginationParameters().validate()

        assert (params.before, params.after, params.limit) == (None, None, 50)
        assert not params.descending

    @pytest.mark.parametrize("limit", [0, -1, 101])
    def test_limit_out_of_range(self, limit: int) -> None:
        with pytest.raises(InvalidPaginationLimit) as exc_info:
            PaginationParameters(limit=limit).validate()

        assert exc_info.value.error_code == 42207

    @pytest.mark.parametrize("limit", [1, 100])
    def test_limit_bounds_inclusive(self, limit: int) -> None:
        assert PaginationParameters(limit=limit).validate().limit == limit

    def test_custom_maximum(self) -> None:
        with pytest.raises(InvalidPaginationLimit):
            PaginationParameters(limit=20).validate(max_limit=10)

    @pytest.mark.parametrize("before,after", [(5, 5), (3, 7)])
    def test_inverted_window_rejected(self, before: int, after: int) -> None:
        with pytest.raises(InvalidCursorWindow) as exc_info:
            PaginationParameters(before=before, after=after).validate()

        assert exc_info.value.error_code == 42227

    @pytest.mark.parametrize("cursor", [{"before": 2**31}, {"after": -(2**31) - 1}])
    def test_cursor_outside_key_range(self, cursor: dict) -> None:
        with pytest.raises(ValueOutOfRange) as exc_info:
            PaginationParameters(**cursor).validate()

        assert exc_info.value.status_code == 422
        assert not exc_info.value.retryable

    def test_cursor_at_key_range_edge(self) -> None:
        params = PaginationParameters(before=2**31 - 1, after=-(2**31)).validate()

        assert params.before == 2**31 - 1

    def test_direction(self) -> None:
        assert PaginationParameters(before=10).descending
        assert not PaginationParameters(after=10).descending
        assert not PaginationParameters(before=10, after=2).descending
