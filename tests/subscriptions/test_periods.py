"""
Tests for month-year parsing, formatting and aggregation windows.
"""

from datetime import UTC, datetime

import pytest

from subtracker.subscriptions.exceptions import InvalidDateError
from subtracker.subscriptions.periods import (
    format_month_year,
    month_end,
    month_start,
    month_window,
    parse_month_year,
)

pytestmark = pytest.mark.unit


class TestParseMonthYear:
    """Test parse_month_year."""

    def test_parses_first_instant_of_month_in_utc(self):
        assert parse_month_year("07-2025") == datetime(2025, 7, 1, tzinfo=UTC)

    @pytest.mark.parametrize("text", ["01-2000", "07-2025", "12-1999"])
    def test_round_trips_through_format(self, text):
        assert format_month_year(parse_month_year(text)) == text

    @pytest.mark.parametrize(
        "text",
        [
            "13-2025",
            "00-2025",
            "7-2025",
            "2025-07",
            "07/2025",
            "07-25",
            "ab-cdef",
            "",
            " 07-2025",
            "\u0660\u0667-\u0662\u0660\u0662\u0665",
            "\uff10\uff17-\uff12\uff10\uff12\uff15",
        ],
    )
    def test_rejects_malformed_text(self, text):
        with pytest.raises(InvalidDateError) as exc_info:
            parse_month_year(text, "start_date")

        assert exc_info.value.field == "start_date"
        assert exc_info.value.context == {"field": "start_date", "value": text}
        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "INVALID_DATE"


class TestMonthBoundaries:
    """Test month_start, month_end and month_window."""

    def test_month_start_treats_naive_values_as_utc(self):
        assert month_start(datetime(2025, 9, 1)) == datetime(2025, 9, 1, tzinfo=UTC)

    def test_month_start_truncates_to_first_day(self):
        assert month_start(datetime(2025, 9, 17, 13, 5, tzinfo=UTC)) == datetime(
            2025, 9, 1, tzinfo=UTC
        )

    def test_month_end_handles_leap_february(self):
        assert month_end(datetime(2024, 2, 1)) == datetime(2024, 2, 29, 23, 59, 59, tzinfo=UTC)
        assert month_end(datetime(2025, 2, 1)) == datetime(2025, 2, 28, 23, 59, 59, tzinfo=UTC)

    def test_window_covers_whole_months_at_both_ends(self):
        start, end = month_window(parse_month_year("07-2025"), parse_month_year("10-2025"))

        assert start == datetime(2025, 7, 1, 0, 0, 0, tzinfo=UTC)
        assert end == datetime(2025, 10, 31, 23, 59, 59, tzinfo=UTC)

    def test_single_month_window(self):
        start, end = month_window(parse_month_year("09-2025"), parse_month_year("09-2025"))

        assert start == datetime(2025, 9, 1, tzinfo=UTC)
        assert end == datetime(2025, 9, 30, 23, 59, 59, tzinfo=UTC)

    def test_window_crossing_year_boundary(self):
        start, end = month_window(parse_month_year("11-2024"), parse_month_year("01-2025"))

        assert start == datetime(2024, 11, 1, tzinfo=UTC)
        assert end == datetime(2025, 1, 31, 23, 59, 59, tzinfo=UTC)
