"""Sales report filtering and aggregation over the transaction log."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from decimal import Decimal
from typing import Iterable, Union

from billing.errors import ValidationError
from billing.models import ZERO, Transaction


@dataclass(frozen=True)
class Today:
    """From the start of the current local calendar day."""


@dataclass(frozen=True)
class Last7Days:
    """The last 7 x 24 hours."""


@dataclass(frozen=True)
class LastCalendarMonth:
    """From local midnight on the same day of the previous month."""


@dataclass(frozen=True)
class DateRange:
    """Whole local days from ``start`` through ``end``, both inclusive."""

    start: date
    end: date


DatePredicate = Union[Today, Last7Days, LastCalendarMonth, DateRange]


@dataclass(frozen=True)
class SalesSummary:
    total_revenue: Decimal
    count: int


def _parse_date(value: date | str | None, label: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} date is required")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationError(f"{label} date {value!r} is not a valid YYYY-MM-DD date") from exc


def date_range(start: date | str | None, end: date | str | None) -> DateRange:
    """Build a validated custom range."""
    start_date = _parse_date(start, "Start")
    end_date = _parse_date(end, "End")
    if start_date > end_date:
        raise ValidationError(f"Start date {start_date} is after end date {end_date}")
    return DateRange(start=start_date, end=end_date)


def predicate_from_name(name: str, start: date | str | None = None, end: date | str | None = None) -> DatePredicate:
    """Map a report filter name (today, week, month, custom) to a predicate."""
    if name == "today":
        return Today()
    if name == "week":
        return Last7Days()
    if name == "month":
        return LastCalendarMonth()
    if name == "custom":
        return date_range(start, end)
    raise ValidationError(f"Unknown report filter {name!r}")


def _as_aware(moment: datetime, tz: tzinfo | None) -> datetime:
    """Attach a zone to a naive wall-clock time.

    Without ``tz`` the system zone is used with the UTC offset in force on that
    date, so day boundaries follow daylight-saving changes.
    """
    if moment.tzinfo is not None:
        return moment
    if tz is None:
        return moment.astimezone()
    return moment.replace(tzinfo=tz)


def _one_month_back(day: date) -> date:
    year, month = (day.year - 1, 12) if day.month == 1 else (day.year, day.month - 1)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _bounds(predicate: DatePredicate, now: datetime, tz: tzinfo | None) -> tuple[datetime, datetime | None]:
    local_now = now.astimezone(tz)
    if isinstance(predicate, Today):
        return _as_aware(datetime.combine(local_now.date(), time.min), tz), None
    if isinstance(predicate, Last7Days):
        return now - timedelta(days=7), None
    if isinstance(predicate, LastCalendarMonth):
        return _as_aware(datetime.combine(_one_month_back(local_now.date()), time.min), tz), None
    if isinstance(predicate, DateRange):
        return (
            _as_aware(datetime.combine(predicate.start, time.min), tz),
            _as_aware(datetime.combine(predicate.end, time.max), tz),
        )
    raise ValidationError(f"Unsupported report filter {predicate!r}")


def filter_transactions(
    transactions: Iterable[Transaction],
    predicate: DatePredicate,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[Transaction]:
    """Return the transactions matching ``predicate``, in log order.

    ``tz`` is the zone calendar days are measured in and defaults to the local
    zone. Naive timestamps are read as being in that zone.
    """
    current = _as_aware(now, tz) if now is not None else datetime.now(tz).astimezone(tz)
    lower, upper = _bounds(predicate, current, tz)

    matched: list[Transaction] = []
    for transaction in transactions:
        stamp = _as_aware(transaction.timestamp, tz)
        if stamp < lower:
            continue
        if upper is not None and stamp > upper:
            continue
        matched.append(transaction)
    return matched


def aggregate(transactions: Iterable[Transaction]) -> SalesSummary:
    """Sum stored totals; line items are not re-added."""
    total = ZERO
    count = 0
    for transaction in transactions:
        total += transaction.total
        count += 1
    return SalesSummary(total_revenue=total, count=count)
