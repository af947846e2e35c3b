"""Amount-owed report."""

from decimal import Decimal

import click
from khata.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from khata.cli.error_handling import handle_domain_error
from khata.cli.formatting import money
from khata.domain.transaction import TransactionService


@click.command("owed")
@click.option("--party", help="Only report this party")
@period_options
@click.pass_context
def owed(
    ctx,
    party: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
):
    """Show how much is owed to parties.

    Without a date range this is the outstanding balance. With one it is the
    net movement inside that window.

    Examples:
        khata owed
        khata owed --party "Acme" --last-month
    """
    service = TransactionService(ctx.obj["db"], ctx.obj["policy"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(this_month, last_month, this_year, last_year),
    )

    if party is not None:
        try:
            service.parties.require_party(party)
        except ValueError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Owed to {party}: {money(service.total_owed(party, start, end))}")
        return

    if start is None and end is None:
        balances = service.party_balances()
    else:
        by_party: dict[str, Decimal] = {}
        for p in service.parties.list_parties():
            by_party[p.business_name] = service.total_owed(p.business_name, start, end)
        balances = {name: amount for name, amount in by_party.items() if amount}

    if not balances:
        click.echo("Nothing owed.")
        return

    click.echo(f"\n{'Party':<30} {'Owed':>16}")
    click.echo("-" * 47)
    for name, amount in balances.items():
        click.echo(f"{name[:30]:<30} {money(amount):>16}")
    click.echo("-" * 47)
    click.echo(f"{'Total':<30} {money(service.total_owed(None, start, end)):>16}")


def register_commands(cli):
    """Register owed command with main CLI."""
    cli.add_command(owed)
