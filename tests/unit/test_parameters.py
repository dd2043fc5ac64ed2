"""
Unit tests for request parameter parsing (payments_kernel.domain.parameters).

Verifies:
- Timestamp formats accepted for leaderboard windows
- Date-only end bounds covering the whole day
- Window validation messages
- Lenient limit coercion
- Deposit amount validation
"""

from datetime import datetime, time, timezone
from decimal import Decimal

import pytest

from payments_kernel.domain.parameters import (
    coerce_limit,
    parse_amount,
    parse_date_window,
    parse_timestamp,
)
from payments_kernel.exceptions import InvalidAmountError, InvalidDateWindowError

UTC = timezone.utc


class TestParseTimestamp:

    def test_date_only_start(self):
        assert parse_timestamp("2020-08-16") == datetime(2020, 8, 16, tzinfo=UTC)

    def test_date_only_end_of_day(self):
        result = parse_timestamp("2020-08-16", end_of_day=True)

        assert result.date().isoformat() == "2020-08-16"
        assert result.time() == time.max

    def test_space_before_offset(self):
        result = parse_timestamp("2020-08-16 00:00:00.000 +00:00")

        assert result == datetime(2020, 8, 16, tzinfo=UTC)

    def test_zulu_suffix(self):
        assert parse_timestamp("2020-08-15T19:11:26.737Z") == datetime(
            2020, 8, 15, 19, 11, 26, 737000, tzinfo=UTC
        )

    def test_naive_is_utc(self):
        assert parse_timestamp("2020-08-15T10:00:00") == datetime(
            2020, 8, 15, 10, tzinfo=UTC
        )

    def test_offset_is_normalized_to_utc(self):
        assert parse_timestamp("2020-08-15T10:00:00+02:00") == datetime(
            2020, 8, 15, 8, tzinfo=UTC
        )

    def test_full_timestamp_ignores_end_of_day(self):
        result = parse_timestamp("2020-08-15T10:00:00Z", end_of_day=True)

        assert result == datetime(2020, 8, 15, 10, tzinfo=UTC)

    @pytest.mark.parametrize("raw", ["yesterday", "2020-13-01", "16/08/2020"])
    def test_rejects_garbage(self, raw):
        with pytest.raises(ValueError):
            parse_timestamp(raw)


class TestParseDateWindow:

    def test_valid_window(self):
        window = parse_date_window("2020-08-01", "2020-08-31")

        assert window.start == datetime(2020, 8, 1, tzinfo=UTC)
        assert window.end.date().isoformat() == "2020-08-31"
        assert window.end.time() == time.max

    def test_same_day(self):
        window = parse_date_window("2020-08-15", "2020-08-15")

        assert window.start < window.end

    @pytest.mark.parametrize(
        "start,end", [(None, "2020-08-31"), ("2020-08-01", None), ("", ""), (None, None)]
    )
    def test_missing_bound(self, start, end):
        with pytest.raises(InvalidDateWindowError) as exc_info:
            parse_date_window(start, end)

        assert str(exc_info.value) == "Please set both start/end query params"
        assert exc_info.value.code == "INVALID_DATE_WINDOW"

    def test_unparseable_bound(self):
        with pytest.raises(InvalidDateWindowError) as exc_info:
            parse_date_window("2020-08-01", "soon")

        assert "ISO dates" in str(exc_info.value)

    def test_start_after_end(self):
        with pytest.raises(InvalidDateWindowError) as exc_info:
            parse_date_window("2020-09-01", "2020-08-01")

        assert str(exc_info.value) == "start must not be after end"


class TestCoerceLimit:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, 2),
            ("", 2),
            ("0", 2),
            (0, 2),
            ("-3", 2),
            ("abc", 2),
            ("2.5", 2),
            (True, 2),
            ("5", 5),
            (" 7 ", 7),
            (1, 1),
        ],
    )
    def test_lenient(self, raw, expected):
        assert coerce_limit(raw) == expected

    def test_custom_default(self):
        assert coerce_limit(None, default=10) == 10
        assert coerce_limit("3", default=10) == 3


class TestParseAmount:

    @pytest.mark.parametrize(
        "raw,expected",
        [("200", Decimal("200")), ("0.01", Decimal("0.01")), (15, Decimal("15")),
         (Decimal("99.90"), Decimal("99.90"))],
    )
    def test_accepts(self, raw, expected):
        assert parse_amount(raw) == expected

    def test_largest_storable_amount(self):
        assert parse_amount("9999999999.99") == Decimal("9999999999.99")

    @pytest.mark.parametrize(
        "raw,reason",
        [
            ("abc", "not a number"),
            (None, "not a number"),
            (False, "not a number"),
            ("Infinity", "not a finite number"),
            ("NaN", "not a finite number"),
            ("0", "must be positive"),
            ("-1", "must be positive"),
            ("0.001", "more than two decimal places"),
            ("1e30", "too large"),
            ("1E+40", "too large"),
            ("10000000000", "too large"),
        ],
    )
    def test_rejects(self, raw, reason):
        with pytest.raises(InvalidAmountError) as exc_info:
            parse_amount(raw)

        assert reason in str(exc_info.value)
