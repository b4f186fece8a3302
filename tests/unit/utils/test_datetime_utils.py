"""Tests for the UTC helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from token_manager_core.utils.datetime_utils import ensure_utc, format_timestamp, utc_now


class TestDatetimeUtils:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is not None
        assert utc_now().utcoffset() == timedelta(0)

    def test_naive_values_are_taken_as_utc(self):
        value = ensure_utc(datetime(2024, 1, 1, 12, 0))
        assert value == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_offsets_are_converted(self):
        paris = timezone(timedelta(hours=1))
        value = ensure_utc(datetime(2024, 1, 1, 13, 0, tzinfo=paris))
        assert value.hour == 12
        assert value.tzinfo == UTC

    def test_format_timestamp(self):
        paris = timezone(timedelta(hours=1))
        assert format_timestamp(datetime(2024, 3, 5, 8, 4, 9, 999, tzinfo=paris)) == (
            "2024-03-05 07:04:09"
        )

    def test_text_is_parsed(self):
        assert ensure_utc("2024-01-01 12:01:40") == datetime(2024, 1, 1, 12, 1, 40, tzinfo=UTC)
        assert ensure_utc("2024-01-01T13:00:00+01:00") == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_invalid_text(self):
        with pytest.raises(ValueError):
            ensure_utc("yesterday")
