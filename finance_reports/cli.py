# ruff: noqa: I001
"""CLI for the ``finance_reports`` package.

A Typer-based console interface over :mod:`finance_reports.api`. Environment
variables (``FR_DATA_FILE``, ``FR_CATEGORIES_FILE``,
``FINANCE_REPORTS_LOG_LEVEL``) are loaded from a local ``.env`` using
``python-dotenv`` before any command runs. Output is tab-separated text on
stdout; errors are written to stderr with a non-zero exit status.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from .api import ReportFilter, report_by_category, run_report, step_period
from .categories import CategoryClassifier, load_rule_table
from .config import Settings, load_settings
from .errors import FinanceReportsError
from .logging_setup import configure_logging, get_logger
from .models import Dataset, PeriodKind
from .periods import distinct_periods, format_period, parse_period, period_key
from .storage import load_dataset

_logger = get_logger("finance_reports.cli")


# ---- Small module-level helpers used by CLI commands -------------------------


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _settings(ctx: typer.Context) -> Settings:
    settings = ctx.obj
    if not isinstance(settings, Settings):
        settings = load_settings()
    return settings


def _load(ctx: typer.Context) -> tuple[Dataset, CategoryClassifier]:
    """Load the dataset and compile the rule table, reporting failures."""

    settings = _settings(ctx)
    try:
        dataset = load_dataset(settings.data_file)
        classifier = CategoryClassifier(load_rule_table(settings.categories_file))
    except FinanceReportsError as e:
        raise _fail(str(e)) from e
    except OSError as e:
        raise _fail(f"could not read configuration: {e}") from e
    if dataset is None:
        _logger.info("no dataset at %s; reporting on an empty dataset", settings.data_file)
        dataset = Dataset.empty()
    return dataset, classifier


def _fmt_amount(value: Decimal) -> str:
    return f"{value:.2f}"


# ---- Commands -----------------------------------------------------------------

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Query, filter and total personal-finance transactions.",
)

_PERIOD_HELP = "Restrict to a year (YYYY) or a month (YYYY-MM)."
_ACCOUNT_HELP = "Account id to report on."


@app.command("accounts")
def accounts_cmd(ctx: typer.Context) -> None:
    """List accounts as ``<id>\\t<label>\\t<currency>\\t<transaction count>``."""

    dataset, _classifier = _load(ctx)
    for acct in dataset.accounts:
        count = len(dataset.transactions.get(acct.id, ()))
        typer.echo(f"{acct.id}\t{acct.label or ''}\t{acct.currency or ''}\t{count}")


@app.command("report")
def report_cmd(
    ctx: typer.Context,
    account: Annotated[str | None, typer.Option("--account", help=_ACCOUNT_HELP)] = None,
    category: Annotated[
        str | None,
        typer.Option("--category", help="Category path, e.g. Expenses:Groceries."),
    ] = None,
    period: Annotated[str | None, typer.Option("--period", help=_PERIOD_HELP)] = None,
    by_category: Annotated[
        bool, typer.Option("--by-category", help="Print per-category totals instead of rows.")
    ] = False,
    depth: Annotated[
        int | None,
        typer.Option("--depth", min=1, help="Group --by-category totals at this many levels."),
    ] = None,
) -> None:
    """Print matching transactions followed by their total."""

    dataset, classifier = _load(ctx)
    try:
        report_filter = ReportFilter(
            account_id=account, category=category, period=parse_period(period)
        )
        if by_category:
            totals = report_by_category(dataset, classifier, report_filter, depth=depth)
            for name, total in totals.items():
                typer.echo(f"{name or '(uncategorized)'}\t{_fmt_amount(total)}")
            typer.echo(f"Total\t{_fmt_amount(sum(totals.values(), Decimal(0)))}")
            return
        report = run_report(dataset, classifier, report_filter)
    except ValueError as e:
        raise _fail(str(e)) from e

    typer.echo(report.label)
    for tx in report.transactions:
        resolved = classifier.classify(tx) or ""
        typer.echo(f"{tx.date}\t{tx.label or tx.raw or ''}\t{resolved}\t{tx.amount}")
    typer.echo(f"Total\t{_fmt_amount(report.total)}")


@app.command("periods")
def periods_cmd(
    ctx: typer.Context,
    kind: Annotated[
        PeriodKind, typer.Option("--kind", case_sensitive=False, help="year or month")
    ] = PeriodKind.MONTH,
) -> None:
    """List the periods present in the data, oldest first."""

    dataset, _classifier = _load(ctx)
    try:
        index = distinct_periods(dataset, kind)
    except ValueError as e:
        raise _fail(str(e)) from e
    for p in index:
        typer.echo(f"{period_key(p)}\t{format_period(p)}")


@app.command("navigate")
def navigate_cmd(
    ctx: typer.Context,
    period: Annotated[str | None, typer.Option("--period", help=_PERIOD_HELP)] = None,
    step: Annotated[int, typer.Option("--step", help="Periods to move; negative goes back.")] = 1,
) -> None:
    """Print the period ``--step`` positions away from ``--period``."""

    dataset, _classifier = _load(ctx)
    try:
        current = ReportFilter(period=parse_period(period))
        moved, message = step_period(dataset, current, step)
    except ValueError as e:
        raise _fail(str(e)) from e
    if message is not None:
        raise _fail(message)
    typer.echo(f"{period_key(moved.period)}\t{format_period(moved.period)}")


@app.command("uncategorized")
def uncategorized_cmd(
    ctx: typer.Context,
    account: Annotated[str | None, typer.Option("--account", help=_ACCOUNT_HELP)] = None,
    period: Annotated[str | None, typer.Option("--period", help=_PERIOD_HELP)] = None,
) -> None:
    """List transactions no category rule matches, to help write new rules."""

    from .filtering import uncategorized

    dataset, classifier = _load(ctx)
    try:
        txs = uncategorized(dataset, classifier, account_id=account, period=parse_period(period))
    except ValueError as e:
        raise _fail(str(e)) from e
    for tx in txs:
        typer.echo(f"{tx.date}\t{tx.raw or ''}\t{tx.amount}")


@app.callback()
def _root(
    ctx: typer.Context,
    data_file: Annotated[
        Path | None,
        typer.Option("--data-file", dir_okay=False, help="Override FR_DATA_FILE."),
    ] = None,
    categories_file: Annotated[
        Path | None,
        typer.Option("--categories-file", dir_okay=False, help="Override FR_CATEGORIES_FILE."),
    ] = None,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables), configures logging and resolves the
    data and rule table locations for subcommands.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()
    ctx.obj = load_settings(data_file=data_file, categories_file=categories_file)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
