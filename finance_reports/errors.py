"""Exception hierarchy for ``finance_reports``.

Invalid-argument errors (:class:`InvalidPeriodError`, :class:`InvalidRuleError`,
:class:`DatasetFormatError`) also derive from ``ValueError`` so callers that
only know the builtin contract keep working. :class:`NoMorePeriodsError` is
user-reportable and is converted to a message at the navigation boundary.
"""

from __future__ import annotations


class FinanceReportsError(Exception):
    """Base class for all errors raised by this package."""


class InvalidPeriodError(FinanceReportsError, ValueError):
    """Raised for an unrecognized period kind or unparseable period text."""


class InvalidRuleError(FinanceReportsError, ValueError):
    """Raised when a category rule cannot be compiled.

    Attributes
    ----------
    category:
        The category path of the offending rule.
    pattern:
        The offending pattern, or ``None`` when the rule entry itself is
        malformed.
    """

    def __init__(self, message: str, *, category: str, pattern: str | None = None) -> None:
        self.category = category
        self.pattern = pattern
        super().__init__(message)


class NoMorePeriodsError(FinanceReportsError):
    """Raised when period navigation cannot produce a neighbouring period."""


class DatasetFormatError(FinanceReportsError, ValueError):
    """Raised when a persisted dataset does not match the expected schema."""


__all__ = [
    "FinanceReportsError",
    "InvalidPeriodError",
    "InvalidRuleError",
    "NoMorePeriodsError",
    "DatasetFormatError",
]
