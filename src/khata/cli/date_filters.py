"""CLI helpers for date range resolution."""

from datetime import date

import click

from khata.cli.input_parsing import parse_date_or_exit
from khata.utils.date_parser import get_date_range


def period_options(command):
    """Attach --start-date/--end-date and the period flags to a command."""
    options = [
        click.option("--start-date", help="Start date (YYYY-MM-DD)"),
        click.option("--end-date", help="End date (YYYY-MM-DD)"),
        click.option("--this-month", is_flag=True, help="Limit to the current month"),
        click.option("--last-month", is_flag=True, help="Limit to the previous month"),
        click.option("--this-year", is_flag=True, help="Limit to the current year"),
        click.option("--last-year", is_flag=True, help="Limit to the previous year"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo(
            "Error: Only one period option (--this-month, --last-month, --this-year, --last-year) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    return start, end


def period_flags(this_month: bool, last_month: bool, this_year: bool, last_year: bool) -> dict[str, bool]:
    """Map the period flag values onto get_date_range period names."""
    return {
        "this-month": this_month,
        "last-month": last_month,
        "this-year": this_year,
        "last-year": last_year,
    }
