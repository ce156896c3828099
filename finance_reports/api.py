"""Public reporting surface for ``finance_reports``.

This module composes the filter pipeline, the aggregator and the period
index into the three operations a reporting front end needs:

- :func:`run_report`: matching transactions plus their sum for a
  :class:`ReportFilter`.
- :func:`format_period`: a human-readable label for the active period.
- :func:`step_period`: move the period filter forward or backward through
  the periods present in the data. Range problems are reported as a message
  and leave the filter unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from .aggregation import category_totals, sum_amounts
from .categories import CategoryClassifier
from .errors import NoMorePeriodsError
from .filtering import filter_transactions
from .logging_setup import get_logger
from .models import Dataset, Period, Transaction
from .periods import format_period, navigate

_logger = get_logger("finance_reports.api")


@dataclass(frozen=True, slots=True)
class ReportFilter:
    """Criteria for one report; every field is optional."""

    account_id: str | None = None
    category: str | None = None
    period: Period | None = None


@dataclass(frozen=True, slots=True)
class Report:
    filter: ReportFilter
    transactions: tuple[Transaction, ...]
    total: Decimal

    @property
    def label(self) -> str:
        """Short title combining the active criteria, e.g. ``"Expenses - March 2023"``."""

        parts = [
            p
            for p in (
                self.filter.account_id,
                self.filter.category,
                format_period(self.filter.period),
            )
            if p
        ]
        return " - ".join(parts) or "All transactions"


def run_report(
    dataset: Dataset, classifier: CategoryClassifier, report_filter: ReportFilter
) -> Report:
    """Filter ``dataset`` by ``report_filter`` and sum the result."""

    txs = filter_transactions(
        dataset,
        classifier,
        account_id=report_filter.account_id,
        category=report_filter.category,
        period=report_filter.period,
    )
    return Report(filter=report_filter, transactions=txs, total=sum_amounts(txs))


def report_by_category(
    dataset: Dataset,
    classifier: CategoryClassifier,
    report_filter: ReportFilter,
    *,
    depth: int | None = None,
) -> dict[str | None, Decimal]:
    """Per-category totals over the transactions selected by ``report_filter``."""

    report = run_report(dataset, classifier, report_filter)
    return category_totals(report.transactions, classifier, depth=depth)


def step_period(
    dataset: Dataset, report_filter: ReportFilter, step: int = 1
) -> tuple[ReportFilter, str | None]:
    """Move the period filter ``step`` periods through the data.

    Returns ``(new_filter, None)`` on success. When navigation is impossible
    (no active period, stale period, or out of range) returns the unchanged
    filter together with a user-facing message.
    """

    try:
        target = navigate(dataset, report_filter.period, step)
    except NoMorePeriodsError as e:
        _logger.info("period navigation refused: %s", e)
        return report_filter, str(e)
    return replace(report_filter, period=target), None


__all__ = [
    "ReportFilter",
    "Report",
    "run_report",
    "report_by_category",
    "step_period",
    "format_period",
    "navigate",
]
