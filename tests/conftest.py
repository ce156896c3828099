"""Pytest configuration and shared sample data.

The CLI resolves its data and rule table paths from ``FR_DATA_FILE`` and
``FR_CATEGORIES_FILE`` (possibly loaded from a ``.env``). An autouse fixture
points both at the test's own temporary directory so tests never read a
developer's real files.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest

from finance_reports import CategoryClassifier, Dataset

SAMPLE_RULES: tuple[tuple[str, list[str]], ...] = (
    ("Expenses:Groceries", ["walmart", r"whole\s*foods"]),
    ("Expenses:Subscriptions", ["netflix", "spotify"]),
    ("Income:Salary", ["paycheck"]),
    ("Income:Interest", ["^interest"]),
    ("Transfers", ["transfer"]),
)


def sample_data() -> dict[str, Any]:
    """Three accounts; ``card`` has no recorded transactions."""

    return {
        "accounts": [
            {"id": "chk", "label": "Checking", "currency": "EUR"},
            {"id": "sav", "label": "Savings", "currency": "EUR"},
            {"id": "card", "label": "Credit card", "currency": "EUR"},
        ],
        "transactions": {
            "chk": [
                {"date": "2023-01-15", "rdate": "2023-01-16", "label": "Walmart",
                 "raw": "WALMART #4", "amount": "-42.50"},
                {"date": "2023-02-01", "rdate": "2023-02-01", "label": "Salary",
                 "raw": "PAYCHECK", "amount": "2000.00"},
                {"date": "2023-02-10T18:30:00", "rdate": "2023-02-11", "label": "Netflix",
                 "raw": "Netflix.com", "amount": "-15.99"},
                {"date": "2024-03-05", "rdate": "2024-03-05", "label": "Transfer",
                 "raw": "TRANSFER TO SAVINGS", "amount": "-500.00"},
            ],
            "sav": [
                {"date": "2023-01-30", "rdate": "2023-01-30", "label": "Transfer",
                 "raw": "TRANSFER FROM CHECKING", "amount": "500.00"},
                {"date": "2024-03-05", "rdate": "2024-03-05", "label": "Interest",
                 "raw": "INTEREST PAYMENT", "amount": "1.25"},
                {"date": "2024-03-09", "rdate": "2024-03-09", "label": "ATM",
                 "raw": "ATM WITHDRAWAL", "amount": "-60.00"},
            ],
            "card": [],
        },
    }


@pytest.fixture(autouse=True)
def _isolate_config_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FR_DATA_FILE", os.fspath(tmp_path / "env-dataset.json"))
    monkeypatch.setenv("FR_CATEGORIES_FILE", os.fspath(tmp_path / "env-categories.json"))


@pytest.fixture()
def dataset() -> Dataset:
    return Dataset.from_mapping(sample_data())


@pytest.fixture()
def classifier() -> CategoryClassifier:
    return CategoryClassifier(SAMPLE_RULES)


@pytest.fixture()
def raw_data() -> dict[str, Any]:
    return sample_data()


@pytest.fixture()
def rules() -> tuple[tuple[str, list[str]], ...]:
    return SAMPLE_RULES
