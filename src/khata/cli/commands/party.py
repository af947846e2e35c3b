"""Party management commands."""

from decimal import Decimal

import click
from khata.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from khata.cli.error_handling import handle_domain_error
from khata.cli.formatting import TRANSACTION_HEADER, money, transaction_row
from khata.domain.party import PartyService
from khata.domain.transaction import TransactionService


@click.group()
def party_group():
    """Manage parties (vendors and customers)."""
    pass


@party_group.command("add")
@click.argument("business_name", metavar="BUSINESS_NAME")
@click.option("--phone", required=True, help="Business phone number")
@click.option("--bank-account", required=True, help="Bank account number")
@click.option("--bank-name", required=True, help="Bank name")
@click.option("--contact-name", required=True, help="Contact person")
@click.option("--contact-mobile", required=True, help="Contact person's mobile")
@click.pass_context
def add_party(
    ctx,
    business_name: str,
    phone: str,
    bank_account: str,
    bank_name: str,
    contact_name: str,
    contact_mobile: str,
):
    """Add a party.

    Examples:
        khata party add "Acme Traders" --phone 0221234567 --bank-account 001122 \\
            --bank-name SBI --contact-name Ravi --contact-mobile 9876543210
    """
    service = PartyService(ctx.obj["db"])

    try:
        party_id = service.create_party(
            business_name=business_name,
            phone_number=phone,
            bank_account_number=bank_account,
            bank_name=bank_name,
            contact_name=contact_name,
            contact_mobile=contact_mobile,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created party '{business_name.strip()}' (ID: {party_id})")


@party_group.command("list")
@click.option("--search", help="Filter by business name, contact name or phone")
@click.pass_context
def list_parties(ctx, search: str | None):
    """List parties with their current balance."""
    db = ctx.obj["db"]
    parties = PartyService(db).list_parties(search=search)
    if not parties:
        click.echo("No parties found.")
        return

    balances = TransactionService(db, ctx.obj["policy"]).party_balances()
    click.echo(f"\n{'Business':<24} {'Contact':<16} {'Mobile':<14} {'Bank':<12} {'Owed':>14}")
    click.echo("-" * 84)
    for p in parties:
        owed = balances.get(p.business_name, Decimal("0"))
        click.echo(
            f"{p.business_name[:24]:<24} {p.contact_name[:16]:<16} {p.contact_mobile:<14} "
            f"{p.bank_name[:12]:<12} {money(owed):>14}"
        )


@party_group.command("edit")
@click.argument("business_name", metavar="BUSINESS_NAME")
@click.option("--phone", help="New business phone number")
@click.option("--bank-account", help="New bank account number")
@click.option("--bank-name", help="New bank name")
@click.option("--contact-name", help="New contact person")
@click.option("--contact-mobile", help="New contact mobile")
@click.pass_context
def edit_party(
    ctx,
    business_name: str,
    phone: str | None,
    bank_account: str | None,
    bank_name: str | None,
    contact_name: str | None,
    contact_mobile: str | None,
):
    """Edit a party's contact and bank details.

    The business name itself cannot be changed.
    """
    service = PartyService(ctx.obj["db"])

    if all(v is None for v in (phone, bank_account, bank_name, contact_name, contact_mobile)):
        click.echo("Error: Nothing to update. Pass at least one option.", err=True)
        ctx.exit(1)

    try:
        service.update_party(
            business_name,
            phone_number=phone,
            bank_account_number=bank_account,
            bank_name=bank_name,
            contact_name=contact_name,
            contact_mobile=contact_mobile,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated party '{business_name}'")


@party_group.command("show")
@click.argument("business_name", metavar="BUSINESS_NAME")
@period_options
@click.pass_context
def show_party(
    ctx,
    business_name: str,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
):
    """Show a party's details and chronological ledger.

    Running balances always cover the party's full history; date options
    only limit which rows are shown.
    """
    db = ctx.obj["db"]
    party_service = PartyService(db)
    transaction_service = TransactionService(db, ctx.obj["policy"])

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(this_month, last_month, this_year, last_year),
    )

    try:
        party = party_service.require_party(business_name)
        rows = transaction_service.party_ledger(business_name, start_date=start, end_date=end)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\n{party.business_name}")
    click.echo(f"  Phone: {party.phone_number}")
    click.echo(f"  Contact: {party.contact_name} ({party.contact_mobile})")
    click.echo(f"  Bank: {party.bank_name}, account {party.bank_account_number}")

    if not rows:
        click.echo("\nNo transactions found.")
    else:
        click.echo(f"\n{TRANSACTION_HEADER}")
        click.echo("-" * 110)
        for row in rows:
            click.echo(transaction_row(row.transaction, row.balance))

    click.echo(f"\nTotal owed: {money(transaction_service.total_owed(business_name))}")


def register_commands(cli):
    """Register party commands with main CLI."""
    cli.add_command(party_group, name="party")
