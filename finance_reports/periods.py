"""Period bucketing and chronological navigation.

Bucket equality is decided by formatting two instants with the same format
string (``%Y`` for years, ``%Y-%m`` for months) and comparing the text. The
distinct-period index is recomputed from the dataset on every call; data
volumes are personal-finance sized.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterable
from datetime import datetime

from .errors import InvalidPeriodError, NoMorePeriodsError
from .logging_setup import get_logger
from .models import Dataset, Period, PeriodKind, Transaction

_logger = get_logger("finance_reports.periods")

_BUCKET_FORMATS: dict[PeriodKind, str] = {
    PeriodKind.YEAR: "%Y",
    PeriodKind.MONTH: "%Y-%m",
}

_YEAR_RE = re.compile(r"^(\d{4})$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


# ---------------------------------------------------------------------------
# Bucketing helpers
# ---------------------------------------------------------------------------


def _kind(kind: PeriodKind | str) -> PeriodKind:
    try:
        return PeriodKind(kind)
    except ValueError as e:
        raise InvalidPeriodError(
            f"Unrecognized period kind {kind!r}; expected 'year' or 'month'"
        ) from e


def bucket_key(moment: datetime, kind: PeriodKind | str) -> str:
    """Format ``moment`` at the granularity of ``kind``."""

    return moment.strftime(_BUCKET_FORMATS[_kind(kind)])


def truncate(moment: datetime, kind: PeriodKind | str) -> datetime:
    """Return the first instant of the bucket containing ``moment``."""

    if _kind(kind) is PeriodKind.YEAR:
        return datetime(moment.year, 1, 1)
    return datetime(moment.year, moment.month, 1)


def same_bucket(a: Period, b: Period) -> bool:
    return a.kind is b.kind and bucket_key(a.anchor, a.kind) == bucket_key(b.anchor, b.kind)


def in_period(tx: Transaction, period: Period | None) -> bool:
    """Return whether ``tx`` falls inside ``period``; ``None`` matches everything."""

    if period is None:
        return True
    if not isinstance(period.kind, PeriodKind):
        raise InvalidPeriodError(f"Unrecognized period kind {period.kind!r}")
    return bucket_key(tx.parsed_date(), period.kind) == bucket_key(period.anchor, period.kind)


# ---------------------------------------------------------------------------
# Period index
# ---------------------------------------------------------------------------


def distinct_periods(dataset: Dataset, kind: PeriodKind | str) -> tuple[Period, ...]:
    """Return the ascending, duplicate-free buckets present across all accounts."""

    return periods_of(dataset.iter_transactions(), kind)


def distinct_years(dataset: Dataset) -> tuple[Period, ...]:
    return distinct_periods(dataset, PeriodKind.YEAR)


def distinct_months(dataset: Dataset) -> tuple[Period, ...]:
    return distinct_periods(dataset, PeriodKind.MONTH)


def navigate(dataset: Dataset, period: Period | None, step: int = 1) -> Period:
    """Return the period ``step`` positions away from ``period`` in the data.

    Raises :class:`~finance_reports.errors.NoMorePeriodsError` when there is
    no active period, when ``period`` no longer appears in the data, or when
    the target position falls outside the available range.
    """

    if period is None:
        raise NoMorePeriodsError("No period filter is active")

    index = distinct_periods(dataset, period.kind)
    key = bucket_key(period.anchor, period.kind)
    _logger.debug("navigating from %s by %d over %d periods", key, step, len(index))
    position = next(
        (i for i, p in enumerate(index) if bucket_key(p.anchor, p.kind) == key), None
    )
    if position is None:
        raise NoMorePeriodsError(f"{format_period(period)} is not present in the data")

    target = position + step
    if not 0 <= target < len(index):
        raise NoMorePeriodsError("No more periods")
    return index[target]


# ---------------------------------------------------------------------------
# Text forms
# ---------------------------------------------------------------------------


def parse_period(text: str | None) -> Period | None:
    """Parse ``YYYY`` or ``YYYY-MM``; ``None``, ``""`` and ``"none"`` mean no period."""

    if text is None:
        return None
    s = text.strip()
    if not s or s.lower() == "none":
        return None
    if m := _YEAR_RE.match(s):
        return Period(PeriodKind.YEAR, datetime(int(m.group(1)), 1, 1))
    if m := _MONTH_RE.match(s):
        year, month = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            raise InvalidPeriodError(f"Invalid month in period {text!r}")
        return Period(PeriodKind.MONTH, datetime(year, month, 1))
    raise InvalidPeriodError(f"Unrecognized period {text!r}; expected YYYY or YYYY-MM")


def period_key(period: Period | None) -> str:
    """Inverse of :func:`parse_period`: ``YYYY``, ``YYYY-MM`` or ``""``."""

    if period is None:
        return ""
    return bucket_key(period.anchor, period.kind)


def format_period(period: Period | None) -> str:
    """Human-readable label: ``Year 2023``, ``January 2023`` or ``""``."""

    if period is None:
        return ""
    if period.kind is PeriodKind.YEAR:
        return f"Year {period.anchor.year}"
    return f"{calendar.month_name[period.anchor.month]} {period.anchor.year}"


def periods_of(transactions: Iterable[Transaction], kind: PeriodKind | str) -> tuple[Period, ...]:
    """Like :func:`distinct_periods` but over an arbitrary transaction sequence."""

    k = _kind(kind)
    starts = {truncate(tx.parsed_date(), k) for tx in transactions}
    return tuple(Period(k, start) for start in sorted(starts))


__all__ = [
    "bucket_key",
    "truncate",
    "same_bucket",
    "in_period",
    "distinct_periods",
    "distinct_years",
    "distinct_months",
    "navigate",
    "parse_period",
    "period_key",
    "format_period",
    "periods_of",
]
