"""Commands that record purchases, payments and returns."""

import click
from khata.cli.error_handling import handle_domain_error
from khata.cli.formatting import money
from khata.cli.input_parsing import parse_amount_or_exit, parse_date_or_exit
from khata.domain.bank import BankService
from khata.domain.transaction import TransactionService

PAYMENT_METHODS = ["Cash", "NEFT", "Check", "NFT", "Cheque"]


@click.command("purchase")
@click.option("--party", required=True, help="Party business name")
@click.option("--amount", required=True, help="Amount before GST (e.g., 1000 or 1,000.50)")
@click.option("--bill", "bill_number", required=True, help="Bill number")
@click.option("--date", required=True, help="Purchase date (YYYY-MM-DD, 'today', 'yesterday')")
@click.option("--gst/--no-gst", default=True, help="Apply 5% GST (default: on)")
@click.option("--comment", help="Optional note")
@click.pass_context
def add_purchase(
    ctx,
    party: str,
    amount: str,
    bill_number: str,
    date: str,
    gst: bool,
    comment: str | None,
):
    """Record a purchase from a party.

    With GST the total is the base amount plus 5%, rounded to whole rupees.

    Examples:
        khata purchase --party "Acme" --amount 1000 --bill B-17 --date 2024-01-01
        khata purchase --party "Acme" --amount 250.50 --bill B-18 --date today --no-gst
    """
    service = TransactionService(ctx.obj["db"], ctx.obj["policy"])
    base_amount = parse_amount_or_exit(ctx, amount)
    purchase_date = parse_date_or_exit(ctx, date)

    try:
        transaction_id = service.add_purchase(
            party=party,
            base_amount=base_amount,
            bill_number=bill_number,
            date=purchase_date,
            has_gst=gst,
            comment=comment,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    purchase = service.require_transaction(transaction_id)
    click.echo(f"Recorded purchase {transaction_id}")
    click.echo(f"  Party: {purchase.party}")
    click.echo(f"  Date: {purchase.date}")
    click.echo(f"  Base amount: {money(purchase.base_amount)}")
    click.echo(f"  GST: {money(purchase.gst_amount)}")
    click.echo(f"  Total: {money(purchase.amount)}")
    click.echo(f"  Owed to {purchase.party}: {money(service.total_owed(purchase.party))}")


@click.command("pay")
@click.option("--party", required=True, help="Party business name")
@click.option("--amount", required=True, help="Amount paid")
@click.option(
    "--method",
    required=True,
    type=click.Choice(PAYMENT_METHODS, case_sensitive=False),
    help="Payment method",
)
@click.option("--date", required=True, help="Payment date (YYYY-MM-DD, 'today', 'yesterday')")
@click.option("--check-number", help="Check number (Check payments only)")
@click.option("--comment", help="Optional note")
@click.pass_context
def add_payment(
    ctx,
    party: str,
    amount: str,
    method: str,
    date: str,
    check_number: str | None,
    comment: str | None,
):
    """Record a payment to a party.

    NEFT and Check payments are taken out of the bank balance.

    Examples:
        khata pay --party "Acme" --amount 500 --method Cash --date 2024-01-05
        khata pay --party "Acme" --amount 200 --method Check --check-number 004512 --date today
    """
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj["policy"])
    payment_amount = parse_amount_or_exit(ctx, amount)
    payment_date = parse_date_or_exit(ctx, date)

    try:
        transaction_id = service.add_payment(
            party=party,
            amount=payment_amount,
            method=method,
            date=payment_date,
            check_number=check_number,
            comment=comment,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    payment = service.require_transaction(transaction_id)
    click.echo(f"Recorded payment {transaction_id}")
    click.echo(f"  Party: {payment.party}")
    click.echo(f"  Date: {payment.date}")
    click.echo(f"  Amount: {money(payment.amount)} ({payment.method.value})")
    click.echo(f"  Owed to {payment.party}: {money(service.total_owed(payment.party))}")
    if payment.method.is_non_cash:
        click.echo(f"  Bank balance: {money(BankService(db).get_balance())}")


@click.command("return")
@click.option("--party", required=True, help="Party business name")
@click.option("--amount", required=True, help="Value of the returned goods")
@click.option("--date", required=True, help="Return date (YYYY-MM-DD, 'today', 'yesterday')")
@click.option("--comment", required=True, help="Reason for the return")
@click.option("--bill", "bill_number", help="Bill the return relates to")
@click.pass_context
def add_return(
    ctx,
    party: str,
    amount: str,
    date: str,
    comment: str,
    bill_number: str | None,
):
    """Record goods returned to a party.

    A reason is required.

    Examples:
        khata return --party "Acme" --amount 120 --date today --comment "Damaged cartons"
    """
    service = TransactionService(ctx.obj["db"], ctx.obj["policy"])
    return_amount = parse_amount_or_exit(ctx, amount)
    return_date = parse_date_or_exit(ctx, date)

    try:
        transaction_id = service.add_return(
            party=party,
            amount=return_amount,
            date=return_date,
            comment=comment,
            bill_number=bill_number,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded return {transaction_id}")
    click.echo(f"  Party: {party}")
    click.echo(f"  Amount: {money(return_amount)}")
    click.echo(f"  Owed to {party}: {money(service.total_owed(party))}")


def register_commands(cli):
    """Register purchase, pay and return commands with main CLI."""
    cli.add_command(add_purchase)
    cli.add_command(add_payment)
    cli.add_command(add_return)
