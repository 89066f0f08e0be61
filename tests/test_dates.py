"""Tests for costbook.dates pure functions."""

from datetime import date, datetime, timedelta, timezone

import pytest

from costbook.dates import (
    insertion_stamp,
    month_abbr,
    month_label,
    parse_legacy_date,
    parse_month,
    parse_timestamp,
)


class TestInsertionStamp:
    """Tests for insertion_stamp."""

    def test_derives_fields_from_moment(self) -> None:
        """Should derive year, month, day and date from the same moment."""
        now = datetime(2026, 3, 5, 14, 30, tzinfo=timezone.utc)
        stamp = insertion_stamp(now)

        assert stamp["created_at"] == "2026-03-05T14:30:00+00:00"
        assert stamp["created_year"] == 2026
        assert stamp["created_month"] == 3
        assert stamp["created_day"] == 5
        assert stamp["date"] == "2026-03-05"

    def test_uses_local_fields_of_offset_time(self) -> None:
        """Should use the wall-clock date of the given offset, not UTC."""
        tz = timezone(timedelta(hours=3))
        now = datetime(2026, 1, 1, 1, 0, tzinfo=tz)
        stamp = insertion_stamp(now)

        assert stamp["created_year"] == 2026
        assert stamp["created_month"] == 1
        assert stamp["created_day"] == 1


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_parses_iso_with_offset(self) -> None:
        """Should return epoch seconds for an ISO timestamp."""
        value = parse_timestamp("2026-03-05T00:00:00+00:00")
        assert value == datetime(2026, 3, 5, tzinfo=timezone.utc).timestamp()

    def test_date_only_reads_as_utc_midnight(self) -> None:
        """Should read a bare date as UTC midnight."""
        assert parse_timestamp("2026-03-05") == datetime(2026, 3, 5, tzinfo=timezone.utc).timestamp()

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_returns_none_for_unparsable(self, value: str | None) -> None:
        """Should return None for missing or garbage input."""
        assert parse_timestamp(value) is None


class TestParseLegacyDate:
    """Tests for parse_legacy_date."""

    def test_parses_date(self) -> None:
        """Should parse a YYYY-MM-DD string."""
        assert parse_legacy_date("2024-11-20") == date(2024, 11, 20)

    def test_missing(self) -> None:
        """Should return None for missing input."""
        assert parse_legacy_date(None) is None


class TestMonths:
    """Tests for month parsing and labels."""

    def test_parse_month(self) -> None:
        """Should split YYYY-MM into integers."""
        assert parse_month("2025-12") == (2025, 12)

    def test_parse_month_rejects_invalid(self) -> None:
        """Should raise for an invalid month."""
        with pytest.raises(ValueError):
            parse_month("2025-13")

    def test_month_label(self) -> None:
        """Should format a readable month."""
        assert month_label(2025, 1) == "January 2025"

    def test_month_abbr(self) -> None:
        """Should abbreviate a month."""
        assert month_abbr(3) == "Mar"
