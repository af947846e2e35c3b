"""Main CLI entry point."""

import dataclasses
import logging

import click
from khata.database.factories import create_sqlite_database
from khata.domain.policy import LedgerPolicy

# Import and register all commands at module level
from khata.cli.commands import (
    party,
    record,
    transaction,
    owed,
    bank,
    employee,
    salary,
    import_cmd,
)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides KHATA_DB_PATH environment variable)",
    envvar="KHATA_DB_PATH",
)
@click.option(
    "--allow-overpayment",
    is_flag=True,
    help="Accept payments larger than the amount owed (or KHATA_ALLOW_OVERPAYMENT=1)",
)
@click.option(
    "--allow-overdraft",
    is_flag=True,
    help="Accept bank payments larger than the bank balance (or KHATA_ALLOW_OVERDRAFT=1)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log what each command does")
@click.pass_context
def cli(ctx, db_path: str | None, allow_overpayment: bool, allow_overdraft: bool, verbose: bool):
    """Khata - purchase, payment and bank bookkeeping.

    Track what you owe each party, keep the bank ledger in step with
    non-cash payments, and follow salaries paid to employees.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    policy = LedgerPolicy.from_env()
    if allow_overpayment:
        policy = dataclasses.replace(policy, enforce_overpayment_guard=False)
    if allow_overdraft:
        policy = dataclasses.replace(policy, enforce_bank_funds_guard=False)
    ctx.obj["policy"] = policy

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
party.register_commands(cli)
record.register_commands(cli)
transaction.register_commands(cli)
owed.register_commands(cli)
bank.register_commands(cli)
employee.register_commands(cli)
salary.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
