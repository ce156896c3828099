from datetime import datetime, timezone

import pytest

from finance_reports import (
    Dataset,
    InvalidPeriodError,
    NoMorePeriodsError,
    Period,
    PeriodKind,
    Transaction,
    distinct_months,
    distinct_years,
    format_period,
    navigate,
    parse_period,
)
from finance_reports.periods import bucket_key, in_period, period_key, same_bucket, truncate


def _dataset_with_dates(*dates: str) -> Dataset:
    return Dataset(
        transactions={"a": [Transaction(date=d, raw="x", amount="1") for d in dates]}
    )


def _keys(periods) -> list[str]:
    return [period_key(p) for p in periods]


# ---- bucketing --------------------------------------------------------------------


def test_bucket_key_and_truncate():
    moment = datetime(2023, 7, 19, 14, 5)
    assert bucket_key(moment, PeriodKind.YEAR) == "2023"
    assert bucket_key(moment, "month") == "2023-07"
    assert truncate(moment, PeriodKind.YEAR) == datetime(2023, 1, 1)
    assert truncate(moment, PeriodKind.MONTH) == datetime(2023, 7, 1)


def test_unknown_kind_is_invalid():
    with pytest.raises(InvalidPeriodError):
        bucket_key(datetime(2023, 1, 1), "week")
    with pytest.raises(InvalidPeriodError):
        Period("quarter", datetime(2023, 1, 1))  # type: ignore[arg-type]


def test_non_date_anchor_is_invalid():
    with pytest.raises(InvalidPeriodError):
        Period(PeriodKind.MONTH, "2023-01")  # type: ignore[arg-type]
    with pytest.raises(InvalidPeriodError):
        Period(PeriodKind.YEAR, None)  # type: ignore[arg-type]


def test_period_accepts_string_kinds_and_plain_dates():
    p = Period("month", datetime(2023, 3, 2).date())  # type: ignore[arg-type]
    assert p.kind is PeriodKind.MONTH
    assert p.anchor == datetime(2023, 3, 2)


def test_in_period_compares_formatted_buckets_not_instants():
    tx = Transaction(date="2023-03-31T23:59:59", raw="x", amount="1")
    assert in_period(tx, Period(PeriodKind.MONTH, datetime(2023, 3, 1)))
    assert in_period(tx, Period(PeriodKind.YEAR, datetime(2023, 11, 5, 8)))
    assert not in_period(tx, Period(PeriodKind.MONTH, datetime(2023, 4, 1)))
    assert in_period(tx, None)


def test_timezone_offsets_are_dropped_not_converted():
    tx = Transaction(date="2023-12-31T23:30:00-05:00", raw="x", amount="1")
    assert tx.parsed_date() == datetime(2023, 12, 31, 23, 30)
    assert in_period(tx, Period(PeriodKind.YEAR, datetime(2023, 1, 1)))

    aware = Period(PeriodKind.MONTH, datetime(2023, 12, 1, tzinfo=timezone.utc))
    assert aware.anchor.tzinfo is None


def test_same_bucket():
    a = Period(PeriodKind.MONTH, datetime(2023, 3, 1))
    b = Period(PeriodKind.MONTH, datetime(2023, 3, 28, 12))
    c = Period(PeriodKind.YEAR, datetime(2023, 3, 1))
    assert same_bucket(a, b)
    assert not same_bucket(a, c)


# ---- period index -----------------------------------------------------------------


def test_distinct_months_concrete_scenario():
    ds = _dataset_with_dates("2023-01-15", "2023-03-02", "2023-01-30")
    months = distinct_months(ds)
    assert [p.anchor for p in months] == [datetime(2023, 1, 1), datetime(2023, 3, 1)]
    assert all(p.kind is PeriodKind.MONTH for p in months)


def test_distinct_periods_over_all_accounts(dataset):
    assert _keys(distinct_years(dataset)) == ["2023", "2024"]
    assert _keys(distinct_months(dataset)) == ["2023-01", "2023-02", "2024-03"]


def test_distinct_periods_cover_every_transaction_exactly_once(dataset):
    months = _keys(distinct_months(dataset))
    assert months == sorted(set(months))
    for tx in dataset.iter_transactions():
        assert months.count(bucket_key(tx.parsed_date(), PeriodKind.MONTH)) == 1


def test_distinct_periods_of_empty_dataset():
    assert distinct_years(Dataset.empty()) == ()
    assert distinct_months(Dataset.empty()) == ()


# ---- navigation -------------------------------------------------------------------


def test_navigate_forward_and_backward(dataset):
    jan = Period(PeriodKind.MONTH, datetime(2023, 1, 20))
    feb = navigate(dataset, jan)
    assert period_key(feb) == "2023-02"
    # Sparse data: the next month present is March 2024.
    assert period_key(navigate(dataset, feb, 1)) == "2024-03"
    assert period_key(navigate(dataset, jan, 2)) == "2024-03"
    assert same_bucket(navigate(dataset, navigate(dataset, jan, 2), -2), jan)


def test_navigate_years(dataset):
    y2023 = Period(PeriodKind.YEAR, datetime(2023, 6, 1))
    assert period_key(navigate(dataset, y2023)) == "2024"
    assert period_key(navigate(dataset, y2023, 0)) == "2023"


@pytest.mark.parametrize(
    ("anchor", "step"),
    [
        (datetime(2024, 3, 1), 1),
        (datetime(2023, 1, 1), -1),
        (datetime(2023, 2, 1), -2),
        (datetime(2023, 1, 1), 5),
    ],
)
def test_navigate_out_of_range_reports_no_more_periods(dataset, anchor, step):
    with pytest.raises(NoMorePeriodsError, match="No more periods"):
        navigate(dataset, Period(PeriodKind.MONTH, anchor), step)


def test_navigate_requires_an_active_period(dataset):
    with pytest.raises(NoMorePeriodsError):
        navigate(dataset, None)


def test_navigate_from_a_period_absent_from_the_data(dataset):
    with pytest.raises(NoMorePeriodsError, match="not present"):
        navigate(dataset, Period(PeriodKind.MONTH, datetime(2023, 6, 1)))


# ---- text forms -------------------------------------------------------------------


def test_parse_period():
    assert parse_period("2023") == Period(PeriodKind.YEAR, datetime(2023, 1, 1))
    assert parse_period(" 2023-3 ") == Period(PeriodKind.MONTH, datetime(2023, 3, 1))
    assert parse_period("2023-12") == Period(PeriodKind.MONTH, datetime(2023, 12, 1))
    assert parse_period(None) is None
    assert parse_period("") is None
    assert parse_period("None") is None


@pytest.mark.parametrize("text", ["2023-13", "2023-00", "23", "2023/01", "last month"])
def test_parse_period_rejects_garbage(text):
    with pytest.raises(InvalidPeriodError):
        parse_period(text)


def test_format_period():
    assert format_period(Period(PeriodKind.YEAR, datetime(2023, 5, 4))) == "Year 2023"
    assert format_period(Period(PeriodKind.MONTH, datetime(2023, 3, 9))) == "March 2023"
    assert format_period(None) == ""
    assert period_key(None) == ""
