"""Rule-based category classification.

A rule table is an ordered sequence of ``(category_path, patterns)`` pairs.
Category paths are colon-delimited (``"Expenses:Groceries"``). Patterns are
regular expressions searched case-insensitively anywhere in a transaction's
``raw`` text. The first rule in table order with a matching pattern wins.

Exports
-------
- ``CategoryRule``: one entry of the rule table.
- ``load_rule_table(path)``: read a JSON rule table from disk.
- ``CategoryClassifier``: compiled rule table with ``classify`` and
  ``in_category``. Malformed patterns are rejected at construction.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator

from .errors import InvalidRuleError
from .logging_setup import get_logger
from .models import Transaction

_logger = get_logger("finance_reports.categories")

SEPARATOR = ":"


@dataclass(frozen=True, slots=True)
class CategoryRule:
    category: str
    patterns: tuple[str, ...]


class _RuleEntry(BaseModel):
    """Validated shape of one rule in the JSON rule table file."""

    model_config = ConfigDict(strict=True, extra="forbid")

    category: str
    patterns: list[str]

    @field_validator("category")
    @classmethod
    def _category_non_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("category must be non-empty")
        return v


_RULE_TABLE_ADAPTER = TypeAdapter(list[_RuleEntry])


def load_rule_table(path: str | PathLike[str]) -> tuple[CategoryRule, ...]:
    """Read a rule table from a JSON file, preserving file order.

    The file holds an array of ``{"category": str, "patterns": [str, ...]}``
    objects. A missing file yields an empty table. Structural problems raise
    :class:`~finance_reports.errors.InvalidRuleError`; patterns themselves
    are only compiled by :class:`CategoryClassifier`.
    """

    p = Path(path)
    if not p.exists():
        _logger.debug("rule table %s not found; using an empty table", p)
        return ()

    try:
        entries = _RULE_TABLE_ADAPTER.validate_json(p.read_bytes())
    except ValidationError as e:
        raise InvalidRuleError(f"Invalid rule table {p}: {e}", category="") from e

    rules = tuple(CategoryRule(e.category, tuple(e.patterns)) for e in entries)
    _logger.debug("loaded %d category rules from %s", len(rules), p)
    return rules


def _coerce_rules(
    rules: Iterable[CategoryRule | tuple[str, Sequence[str]]] | None,
) -> tuple[CategoryRule, ...]:
    out: list[CategoryRule] = []
    for entry in rules or ():
        if isinstance(entry, CategoryRule):
            out.append(entry)
            continue
        try:
            category, patterns = entry
        except (TypeError, ValueError) as e:
            raise InvalidRuleError(
                f"Rule entries must be (category, patterns) pairs, got {entry!r}",
                category=str(entry),
            ) from e
        if isinstance(patterns, str):
            # A bare string is one pattern, not a sequence of characters.
            patterns = (patterns,)
        out.append(CategoryRule(str(category), tuple(patterns)))
    return tuple(out)


class CategoryClassifier:
    """Compiled, ordered rule table.

    Every pattern is compiled once with ``re.IGNORECASE`` when the classifier
    is built; a malformed expression raises
    :class:`~finance_reports.errors.InvalidRuleError` naming the rule.
    """

    def __init__(
        self, rules: Iterable[CategoryRule | tuple[str, Sequence[str]]] | None = None
    ) -> None:
        self.rules: tuple[CategoryRule, ...] = _coerce_rules(rules)
        compiled: list[tuple[str, tuple[re.Pattern[str], ...]]] = []
        for rule in self.rules:
            patterns: list[re.Pattern[str]] = []
            for pattern in rule.patterns:
                try:
                    patterns.append(re.compile(pattern, re.IGNORECASE))
                except re.error as e:
                    raise InvalidRuleError(
                        f"Invalid pattern {pattern!r} for category {rule.category!r}: {e}",
                        category=rule.category,
                        pattern=pattern,
                    ) from e
            compiled.append((rule.category, tuple(patterns)))
        self._compiled = tuple(compiled)
        _logger.debug("built classifier with %d rules", len(self._compiled))

    @classmethod
    def from_file(cls, path: str | PathLike[str]) -> CategoryClassifier:
        return cls(load_rule_table(path))

    def classify(self, tx: Transaction) -> str | None:
        """Return the category of the first matching rule, or ``None``."""

        text = tx.raw or ""
        for category, patterns in self._compiled:
            if any(p.search(text) for p in patterns):
                return category
        return None

    def in_category(self, tx: Transaction, category: str | None) -> bool:
        """Return whether ``tx`` falls under ``category`` or one of its descendants.

        Matching is case-insensitive and respects the colon hierarchy:
        ``"Expenses"`` contains ``"Expenses:Groceries"`` but not
        ``"ExpensesOther"``. Unclassified transactions are in no category.
        """

        wanted = normalize_category(category)
        if not wanted:
            return False
        resolved = self.classify(tx)
        if resolved is None:
            return False
        resolved = resolved.lower()
        return resolved == wanted or resolved.startswith(wanted + SEPARATOR)


def normalize_category(category: str | None) -> str:
    """Lower-case ``category`` and strip surrounding blanks and trailing separators."""

    if not category:
        return ""
    return category.strip().rstrip(SEPARATOR).lower()


def truncate_category(category: str, depth: int) -> str:
    """Return the first ``depth`` levels of a colon-delimited category path."""

    if depth < 1:
        raise ValueError("depth must be a positive integer")
    return SEPARATOR.join(category.split(SEPARATOR)[:depth])


def classify(
    tx: Transaction, rules: Iterable[CategoryRule | tuple[str, Sequence[str]]] | None
) -> str | None:
    """One-shot form of :meth:`CategoryClassifier.classify`."""

    return CategoryClassifier(rules).classify(tx)


def in_category(
    tx: Transaction,
    category: str | None,
    rules: Iterable[CategoryRule | tuple[str, Sequence[str]]] | None,
) -> bool:
    """One-shot form of :meth:`CategoryClassifier.in_category`."""

    return CategoryClassifier(rules).in_category(tx, category)


__all__ = [
    "CategoryRule",
    "CategoryClassifier",
    "load_rule_table",
    "normalize_category",
    "truncate_category",
    "classify",
    "in_category",
]
