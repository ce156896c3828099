"""Data models for ``finance_reports``.

Accounts and transactions are immutable value records validated with
Pydantic. Only the fields the query engine relies on are declared; any other
keys present in the persisted data are carried along untouched (``extra``
allowed) so a load/save round trip does not lose information.

The :class:`Dataset` is an immutable snapshot: it is never mutated in place,
only replaced wholesale on reload (see :mod:`finance_reports.storage`).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from types import MappingProxyType
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import DatasetFormatError, InvalidPeriodError

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Account(BaseModel):
    """A bank account. Opaque to the query engine beyond ``id`` and ``label``."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    label: str | None = None
    currency: str | None = None


class Transaction(BaseModel):
    """A single dated movement on an account.

    ``raw`` is the free-text field matched against category rules. ``amount``
    is kept as decimal text exactly as persisted; JSON numbers are accepted
    and converted to their string form.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    date: str
    amount: str
    rdate: str | None = None
    label: str | None = None
    raw: str | None = None
    category: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("amount must be a decimal number, not a boolean")
        if isinstance(v, int | float | Decimal):
            return str(v)
        return v

    def parsed_date(self) -> datetime:
        """Return ``date`` as a timezone-naive ``datetime``.

        Accepts ISO-8601 dates (``2023-01-15``) and date+time values
        (``2023-01-15T10:30:00``, optionally with an offset). An offset is
        dropped; the wall-clock value is kept.
        """

        try:
            moment = datetime.fromisoformat(self.date.strip())
        except ValueError as e:
            raise ValueError(f"Unparseable transaction date: {self.date!r}") from e
        if moment.tzinfo is not None:
            moment = moment.replace(tzinfo=None)
        return moment

    def parsed_amount(self) -> Decimal:
        """Return ``amount`` as a signed ``Decimal``."""

        try:
            value = Decimal(self.amount.strip())
        except InvalidOperation as e:
            raise ValueError(f"Unparseable transaction amount: {self.amount!r}") from e
        if not value.is_finite():
            raise ValueError(f"Transaction amount must be finite: {self.amount!r}")
        return value


def _dump_record(record: BaseModel) -> dict[str, Any]:
    """Dump ``record`` as JSON data, leaving out declared fields that were never set.

    Extra keys are always kept, including those holding ``null``.
    """

    data = record.model_dump(mode="json")
    for name in type(record).model_fields:
        if data.get(name) is None and name not in record.model_fields_set:
            data.pop(name, None)
    return data


class DatasetFile(BaseModel):
    """On-disk shape of a dataset: ``{"accounts": [...], "transactions": {...}}``."""

    model_config = ConfigDict(extra="allow")

    accounts: list[Account] = Field(default_factory=list)
    transactions: dict[str, list[Transaction]] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Dataset snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Dataset:
    """Immutable snapshot of accounts and their transactions.

    Attributes
    ----------
    accounts:
        Accounts in persisted order.
    transactions:
        Read-only mapping from account id to that account's transactions, in
        persisted order.
    metadata:
        Any other top-level keys of the persisted document, kept for saving.
    """

    accounts: tuple[Account, ...] = ()
    transactions: Mapping[str, tuple[Transaction, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "accounts", tuple(self.accounts))
        frozen = {str(k): tuple(v) for k, v in self.transactions.items()}
        object.__setattr__(self, "transactions", MappingProxyType(frozen))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def empty(cls) -> Dataset:
        return cls()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Dataset:
        """Validate the persisted structure and build a snapshot."""

        try:
            parsed = DatasetFile.model_validate(data)
        except ValidationError as e:
            raise DatasetFormatError(f"Invalid dataset structure: {e}") from e
        return cls(
            accounts=tuple(parsed.accounts),
            transactions=parsed.transactions,
            metadata=parsed.model_extra or {},
        )

    def to_mapping(self) -> dict[str, Any]:
        """Return the JSON-serializable persisted structure."""

        return {
            **self.metadata,
            "accounts": [_dump_record(a) for a in self.accounts],
            "transactions": {
                account_id: [_dump_record(t) for t in txs]
                for account_id, txs in self.transactions.items()
            },
        }

    def account(self, account_id: str) -> Account | None:
        for acct in self.accounts:
            if acct.id == account_id:
                return acct
        return None

    def iter_transactions(self) -> Iterator[Transaction]:
        """Yield every account's transactions in mapping order."""

        for txs in self.transactions.values():
            yield from txs


# ---------------------------------------------------------------------------
# Periods
# ---------------------------------------------------------------------------


class PeriodKind(StrEnum):
    YEAR = "year"
    MONTH = "month"


@dataclass(frozen=True, slots=True)
class Period:
    """A year- or month-granularity bucket anchored at any instant inside it.

    Two periods describe the same bucket when their anchors format identically
    at their granularity; use :func:`finance_reports.periods.same_bucket`
    rather than ``==`` when anchors may differ within the bucket. The absent
    period is represented by ``None`` at call sites.
    """

    kind: PeriodKind
    anchor: datetime

    def __post_init__(self) -> None:
        try:
            kind = PeriodKind(self.kind)
        except ValueError as e:
            raise InvalidPeriodError(
                f"Unrecognized period kind {self.kind!r}; expected 'year' or 'month'"
            ) from e
        object.__setattr__(self, "kind", kind)
        anchor = self.anchor
        if not isinstance(anchor, date):
            raise InvalidPeriodError(f"Period anchor must be a date or datetime, got {anchor!r}")
        if not isinstance(anchor, datetime):
            # Plain ``date`` anchors are promoted to midnight.
            anchor = datetime(anchor.year, anchor.month, anchor.day)
        if anchor.tzinfo is not None:
            anchor = anchor.replace(tzinfo=None)
        object.__setattr__(self, "anchor", anchor)


# Generic collections
Transactions: TypeAlias = Iterable[Transaction]
"""An iterable of transactions, typically the output of a filter call."""


__all__ = [
    "Account",
    "Transaction",
    "DatasetFile",
    "Dataset",
    "PeriodKind",
    "Period",
    "Transactions",
]
