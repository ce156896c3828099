"""Transaction filter pipeline.

Three independent predicates are applied as a conjunction:

1. account selection (one account's transactions, or every account's);
2. category selection (colon-aware prefix match on the resolved category);
3. period selection (same year or month bucket as the period anchor).

Each step is skipped when its argument is absent. The dataset is never
modified; results are fresh tuples in dataset order.
"""

from __future__ import annotations

from .categories import CategoryClassifier, normalize_category
from .errors import InvalidPeriodError
from .models import Dataset, Period, PeriodKind, Transaction
from .periods import in_period


def account_transactions(dataset: Dataset, account_id: str | None = None) -> tuple[Transaction, ...]:
    """Return one account's transactions, or the union over all accounts.

    An unknown ``account_id`` yields an empty tuple.
    """

    if account_id is not None:
        return tuple(dataset.transactions.get(account_id, ()))
    return tuple(dataset.iter_transactions())


def _check_period(period: Period | None) -> None:
    if period is not None and not isinstance(period.kind, PeriodKind):
        raise InvalidPeriodError(f"Unrecognized period kind {period.kind!r}")


def filter_transactions(
    dataset: Dataset,
    classifier: CategoryClassifier,
    *,
    account_id: str | None = None,
    category: str | None = None,
    period: Period | None = None,
) -> tuple[Transaction, ...]:
    """Return the transactions passing every supplied filter.

    Parameters
    ----------
    dataset:
        Snapshot to read from.
    classifier:
        Rule table used to resolve categories.
    account_id:
        Restrict to a single account when provided.
    category:
        Keep transactions whose resolved category equals ``category`` or
        descends from it (case-insensitive). ``None`` or blank disables the
        filter.
    period:
        Keep transactions in the same year/month bucket as the period anchor.
        ``None`` disables the filter.
    """

    _check_period(period)
    wanted = normalize_category(category)

    out: list[Transaction] = []
    for tx in account_transactions(dataset, account_id):
        if wanted and not classifier.in_category(tx, wanted):
            continue
        if not in_period(tx, period):
            continue
        out.append(tx)
    return tuple(out)


def uncategorized(
    dataset: Dataset,
    classifier: CategoryClassifier,
    *,
    account_id: str | None = None,
    period: Period | None = None,
) -> tuple[Transaction, ...]:
    """Return the transactions that no rule classifies."""

    txs = filter_transactions(dataset, classifier, account_id=account_id, period=period)
    return tuple(tx for tx in txs if classifier.classify(tx) is None)


__all__ = ["account_transactions", "filter_transactions", "uncategorized"]
