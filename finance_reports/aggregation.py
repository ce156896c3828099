"""Reductions over filtered transaction sequences.

All amounts in one call are assumed to share a currency; mixing currencies
gives a meaningless number but is not detected.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from .categories import CategoryClassifier, truncate_category
from .models import Transaction


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    """Return the signed decimal sum of ``amount`` over ``transactions``."""

    total = Decimal(0)
    for tx in transactions:
        total += tx.parsed_amount()
    return total


def category_totals(
    transactions: Iterable[Transaction],
    classifier: CategoryClassifier,
    *,
    depth: int | None = None,
) -> dict[str | None, Decimal]:
    """Sum amounts per resolved category.

    Keys appear in first-seen order. ``depth`` truncates category paths to
    that many colon-delimited levels before grouping. Transactions no rule
    classifies are grouped under ``None``.
    """

    totals: dict[str | None, Decimal] = {}
    for tx in transactions:
        category = classifier.classify(tx)
        if category is not None and depth is not None:
            category = truncate_category(category, depth)
        totals[category] = totals.get(category, Decimal(0)) + tx.parsed_amount()
    return totals


__all__ = ["sum_amounts", "category_totals"]
