"""Rendering of ledger errors on the command line."""

import logging

import click

from khata.domain.errors import DomainError, StorageError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print a ledger error to stderr and exit with status 1.

    Storage failures were already logged with a traceback where the write
    was rolled back, so only the short message is shown here.
    """
    if isinstance(error, StorageError):
        click.echo(f"Error: could not save changes ({error})", err=True)
    else:
        logger.debug("Command %s rejected: %s", ctx.command_path, error)
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
