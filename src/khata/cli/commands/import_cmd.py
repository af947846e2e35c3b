"""Snapshot import command."""

import click
from khata.cli.formatting import money
from khata.domain.snapshot_import import ImportService

COLLECTION_LABELS = (
    ("parties", "parties"),
    ("employees", "employees"),
    ("purchases", "purchases"),
    ("payments", "payments"),
    ("returns", "returns"),
    ("salaries", "salary payments"),
    ("bank_deposits", "bank records"),
)


@click.command("import")
@click.argument("snapshot_file", type=click.Path(exists=True))
@click.pass_context
def import_snapshot(ctx, snapshot_file: str):
    """Import a JSON snapshot of an existing ledger.

    The file is an object keyed by collection: parties, employees, purchases,
    payments, returns, salaries, bankDeposits and bankMeta.
    """
    service = ImportService(ctx.obj["db"])

    try:
        result = service.import_file(snapshot_file)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo("\nImport complete:")
    for key, label in COLLECTION_LABELS:
        click.echo(f"  Imported: {result[key]} {label}")
    click.echo(f"  Skipped: {result['skipped']} duplicates")
    click.echo(f"  Bank balance: {money(result['bank_balance'])}")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_snapshot)
