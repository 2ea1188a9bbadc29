"""CLI error handling helpers."""

import click

from lendtrack.domain.errors import DomainError, StorageError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def save_or_exit(ctx: click.Context) -> None:
    """Persist the ledger, warning that the change may be lost on failure."""
    try:
        ctx.obj["store"].save(ctx.obj["ledger"])
    except StorageError as e:
        click.echo(f"Error saving: {e}", err=True)
        click.echo("Warning: the last change may not be durable.", err=True)
        ctx.exit(1)
