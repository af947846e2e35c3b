"""Transaction listing and maintenance commands."""

import click
from khata.cli.commands.record import PAYMENT_METHODS
from khata.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from khata.cli.error_handling import handle_domain_error
from khata.cli.formatting import TRANSACTION_HEADER, describe, money, transaction_row
from khata.cli.input_parsing import parse_amount_or_exit, parse_date_or_exit
from khata.domain.entities import Purchase
from khata.domain.records import parse_transaction_kind
from khata.domain.transaction import TransactionService


@click.group()
def transaction_group():
    """List, edit and delete purchases, payments and returns."""
    pass


@transaction_group.command("list")
@click.option("--party", help="Only show transactions of this party")
@click.option(
    "--type",
    "kind",
    type=click.Choice(["purchase", "payment", "return"], case_sensitive=False),
    help="Only show one kind of transaction",
)
@period_options
@click.pass_context
def list_transactions(
    ctx,
    party: str | None,
    kind: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
):
    """List transactions oldest first with each party's running balance.

    Examples:
        khata transaction list --party "Acme" --this-month
        khata transaction list --type payment --start-date 2024-01-01
    """
    service = TransactionService(ctx.obj["db"], ctx.obj["policy"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(this_month, last_month, this_year, last_year),
    )

    try:
        if party is not None:
            service.parties.require_party(party)
        transactions = service.list_transactions(
            party=party,
            start_date=start,
            end_date=end,
            kind=parse_transaction_kind(kind) if kind else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    balances = service.running_balances(party)
    click.echo(f"\n{TRANSACTION_HEADER}")
    click.echo("-" * 110)
    for txn in transactions:
        click.echo(transaction_row(txn, balances.get(txn.id)))
    click.echo(f"\nTotal: {len(transactions)} transaction(s)")


@transaction_group.command("edit")
@click.argument("transaction_id", type=int)
@click.option("--party", help="Move the transaction to another party")
@click.option("--date", help="New date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--amount", help="New amount (the pre-GST base amount for purchases)")
@click.option("--gst/--no-gst", default=None, help="Turn GST on or off (purchases)")
@click.option("--bill", "bill_number", help="New bill number")
@click.option(
    "--method",
    type=click.Choice(PAYMENT_METHODS, case_sensitive=False),
    help="New payment method (payments)",
)
@click.option("--check-number", help="New check number (Check payments)")
@click.option("--comment", help="New comment")
@click.pass_context
def edit_transaction(
    ctx,
    transaction_id: int,
    party: str | None,
    date: str | None,
    amount: str | None,
    gst: bool | None,
    bill_number: str | None,
    method: str | None,
    check_number: str | None,
    comment: str | None,
):
    """Edit a transaction.

    Updates only the fields that are provided. Purchase totals and GST are
    recalculated; payment edits keep the bank balance in step.

    Examples:
        khata transaction edit 3 --amount 1200
        khata transaction edit 7 --method Cash
    """
    service = TransactionService(ctx.obj["db"], ctx.obj["policy"])

    try:
        txn = service.require_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    changes = {}
    if party is not None:
        changes["party"] = party
    if date is not None:
        changes["date"] = parse_date_or_exit(ctx, date)
    if amount is not None:
        key = "base_amount" if isinstance(txn, Purchase) else "amount"
        changes[key] = parse_amount_or_exit(ctx, amount)
    if gst is not None:
        changes["has_gst"] = gst
    if bill_number is not None:
        changes["bill_number"] = bill_number
    if method is not None:
        changes["method"] = method
    if check_number is not None:
        changes["check_number"] = check_number
    if comment is not None:
        changes["comment"] = comment

    if not changes:
        click.echo("Error: Nothing to update. Pass at least one option.", err=True)
        ctx.exit(1)

    try:
        updated = service.edit_transaction(transaction_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {transaction_id}")
    click.echo(f"  {updated.kind.value.title()} {money(updated.amount)} on {updated.date}: {describe(updated)}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction.

    Deleting a NEFT or Check payment returns its amount to the bank balance.

    Examples:
        khata transaction delete 4
    """
    service = TransactionService(ctx.obj["db"], ctx.obj["policy"])

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Delete {txn.kind.value} {transaction_id} ({txn.party}, {money(txn.amount)})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
