"""CLI helpers for parsing dates and amounts or exiting with an error."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click
from khata.utils.amount_parser import parse_amount
from khata.utils.date_parser import parse_date


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a CLI date argument, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str, label: str = "amount") -> Decimal:
    """Parse a CLI amount argument, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
