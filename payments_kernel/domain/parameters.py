"""
Request parameter parsing at the kernel boundary.

The routing layer hands raw strings to these helpers before invoking a
service or selector, so malformed input is rejected as a typed
ValidationError and never reaches a transaction.

Rules:
    - Dates are ISO 8601.  A space may separate the time from the UTC offset
      ("2020-08-16 00:00:00.000 +00:00").  Naive values are taken as UTC.
    - A date-only end bound ("2020-08-16") covers that whole day.
    - limit is lenient: missing, empty, zero, negative or non-numeric
      values fall back to the default instead of failing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal

from payments_kernel.db.types import MAX_MONEY, has_money_precision, money_from_value
from payments_kernel.exceptions import InvalidAmountError, InvalidDateWindowError

_SPACED_OFFSET = re.compile(r"\s+([+-]\d{2}:?\d{2}|Z)$")
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class DateWindow:
    """Inclusive [start, end] range of UTC timestamps."""

    start: datetime
    end: datetime


def parse_timestamp(raw: str, *, end_of_day: bool = False) -> datetime:
    """
    Parse one bound of a reporting window.

    Raises:
        ValueError: If raw is not an ISO 8601 date or timestamp.
    """
    text = raw.strip()
    if _DATE_ONLY.match(text):
        day = date.fromisoformat(text)
        bound = time.max if end_of_day else time.min
        return datetime.combine(day, bound, tzinfo=timezone.utc)

    text = _SPACED_OFFSET.sub(r"\1", text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_date_window(start: str | None, end: str | None) -> DateWindow:
    """
    Validate and parse the start/end query parameters of a leaderboard.

    Raises:
        InvalidDateWindowError: If either bound is missing or unparseable,
            or if start is after end.
    """
    if not start or not end:
        raise InvalidDateWindowError(
            "Please set both start/end query params", start=start, end=end
        )
    try:
        window = DateWindow(
            start=parse_timestamp(start),
            end=parse_timestamp(end, end_of_day=True),
        )
    except ValueError:
        raise InvalidDateWindowError(
            "Please set both start/end query params as ISO dates",
            start=start,
            end=end,
        ) from None
    if window.start > window.end:
        raise InvalidDateWindowError(
            "start must not be after end", start=start, end=end
        )
    return window


def coerce_limit(raw: object, default: int = 2) -> int:
    """Lenient limit parsing: anything that is not a positive integer means default."""
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value > 0 else default


def parse_amount(raw: object) -> Decimal:
    """
    Parse a deposit amount.

    Raises:
        InvalidAmountError: If raw is not numeric, not finite, not positive,
            larger than a balance column holds, or has more than two
            decimal places.
    """
    try:
        amount = money_from_value(raw)
    except ValueError:
        raise InvalidAmountError(raw, "not a number") from None
    if not amount.is_finite():
        raise InvalidAmountError(raw, "not a finite number")
    if amount <= 0:
        raise InvalidAmountError(raw, "must be positive")
    if amount > MAX_MONEY:
        raise InvalidAmountError(raw, "too large")
    if not has_money_precision(amount):
        raise InvalidAmountError(raw, "more than two decimal places")
    return amount
