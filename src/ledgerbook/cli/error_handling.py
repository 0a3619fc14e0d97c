"""CLI error handling helpers."""

import click

from ledgerbook.domain.errors import DomainError, StorageFailure


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Render a domain error and exit with failure."""
    message = f"Error: {error}"
    if isinstance(error, StorageFailure):
        message += " (no changes were saved)"
    click.echo(message, err=True)
    ctx.exit(1)
