"""Public interface for the ``finance_reports`` package.

This module exposes the package's API functions and public models/types as the
stable import surface. There is no runtime logic here, only re-exports.
"""

from .aggregation import category_totals, sum_amounts
from .api import (
    Report,
    ReportFilter,
    report_by_category,
    run_report,
    step_period,
)
from .categories import CategoryClassifier, CategoryRule, classify, in_category, load_rule_table
from .errors import (
    DatasetFormatError,
    FinanceReportsError,
    InvalidPeriodError,
    InvalidRuleError,
    NoMorePeriodsError,
)
from .filtering import account_transactions, filter_transactions, uncategorized
from .models import Account, Dataset, Period, PeriodKind, Transaction, Transactions
from .periods import (
    distinct_months,
    distinct_periods,
    distinct_years,
    format_period,
    navigate,
    parse_period,
)
from .storage import DatasetStore, load_dataset, save_dataset

__all__ = [
    # API
    "run_report",
    "report_by_category",
    "step_period",
    "Report",
    "ReportFilter",
    # Classification
    "CategoryClassifier",
    "CategoryRule",
    "classify",
    "in_category",
    "load_rule_table",
    # Filtering / aggregation
    "account_transactions",
    "filter_transactions",
    "uncategorized",
    "sum_amounts",
    "category_totals",
    # Periods
    "distinct_years",
    "distinct_months",
    "distinct_periods",
    "navigate",
    "parse_period",
    "format_period",
    # Storage
    "load_dataset",
    "save_dataset",
    "DatasetStore",
    # Models / types
    "Account",
    "Transaction",
    "Transactions",
    "Dataset",
    "Period",
    "PeriodKind",
    # Errors
    "FinanceReportsError",
    "InvalidPeriodError",
    "InvalidRuleError",
    "NoMorePeriodsError",
    "DatasetFormatError",
]
