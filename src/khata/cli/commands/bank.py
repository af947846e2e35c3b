"""Bank account commands."""

import click
from khata.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from khata.cli.error_handling import handle_domain_error
from khata.cli.formatting import money
from khata.cli.input_parsing import parse_amount_or_exit, parse_date_or_exit
from khata.domain.bank import BankService


@click.group()
def bank_group():
    """Track the bank balance and its ledger."""
    pass


@bank_group.command("deposit")
@click.argument("amount")
@click.option("--date", default="today", show_default=True, help="Deposit date")
@click.option("--party", help="Party the money came from")
@click.pass_context
def deposit(ctx, amount: str, date: str, party: str | None):
    """Deposit money into the bank account.

    Examples:
        khata bank deposit 5000
        khata bank deposit "1,20,000" --date 2024-04-01
    """
    service = BankService(ctx.obj["db"], ctx.obj["policy"])
    deposit_amount = parse_amount_or_exit(ctx, amount)
    deposit_date = parse_date_or_exit(ctx, date)

    try:
        record_id = service.deposit(deposit_amount, deposit_date, party=party)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded deposit {record_id} of {money(deposit_amount)}")
    click.echo(f"Bank balance: {money(service.get_balance())}")


@bank_group.command("withdraw")
@click.argument("amount")
@click.option("--date", default="today", show_default=True, help="Withdrawal date")
@click.option("--party", help="Who the money went to")
@click.pass_context
def withdraw(ctx, amount: str, date: str, party: str | None):
    """Withdraw money from the bank account.

    Examples:
        khata bank withdraw 2000 --date yesterday
    """
    service = BankService(ctx.obj["db"], ctx.obj["policy"])
    withdraw_amount = parse_amount_or_exit(ctx, amount)
    withdraw_date = parse_date_or_exit(ctx, date)

    try:
        record_id = service.withdraw(withdraw_amount, withdraw_date, party=party)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded withdrawal {record_id} of {money(withdraw_amount)}")
    click.echo(f"Bank balance: {money(service.get_balance())}")


@bank_group.command("balance")
@click.pass_context
def balance(ctx):
    """Show the current bank balance."""
    service = BankService(ctx.obj["db"], ctx.obj["policy"])
    click.echo(f"Bank balance: {money(service.get_balance())}")


@bank_group.command("ledger")
@click.option("--oldest-first", is_flag=True, help="List the oldest entry first")
@period_options
@click.pass_context
def ledger(
    ctx,
    oldest_first: bool,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
):
    """Show deposits, withdrawals and non-cash payments with running balances.

    Examples:
        khata bank ledger
        khata bank ledger --oldest-first --this-year
    """
    service = BankService(ctx.obj["db"], ctx.obj["policy"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(this_month, last_month, this_year, last_year),
    )

    entries = service.ledger(newest_first=not oldest_first, start_date=start, end_date=end)
    if not entries:
        click.echo("No bank entries found.")
        return

    click.echo(
        f"\n{'Date':<12} {'Party':<20} {'Method':<8} {'Check #':<10} "
        f"{'Debit':>14} {'Credit':>14} {'Balance':>14}"
    )
    click.echo("-" * 98)
    for entry in entries:
        click.echo(
            f"{str(entry.date):<12} {(entry.party or '')[:20]:<20} "
            f"{entry.method.value if entry.method else '':<8} {entry.check_number or '':<10} "
            f"{money(entry.debit) if entry.debit else '':>14} "
            f"{money(entry.credit) if entry.credit else '':>14} {money(entry.balance):>14}"
        )


@bank_group.command("reconcile")
@click.pass_context
def reconcile(ctx):
    """Compare the stored balance with the balance rebuilt from history.

    Exits with status 1 when they differ.
    """
    service = BankService(ctx.obj["db"], ctx.obj["policy"])
    result = service.reconcile()
    click.echo(f"Stored balance:  {money(result.stored_balance)}")
    click.echo(f"Rebuilt balance: {money(result.rebuilt_balance)}")
    if result.is_consistent:
        click.echo("Bank balance is consistent.")
        return
    click.echo(f"Drift: {money(result.drift)}", err=True)
    ctx.exit(1)


def register_commands(cli):
    """Register bank commands with main CLI."""
    cli.add_command(bank_group, name="bank")
