"""CLI helpers for transaction resolution and error handling."""

from __future__ import annotations

import click
from lendtrack.domain.entities import Transaction
from lendtrack.domain.errors import DomainError
from lendtrack.domain.ledger import Ledger


def resolve_transaction_or_exit(
    ctx: click.Context, ledger: Ledger, reference: str
) -> Transaction:
    """Resolve a transaction ID, ID prefix or list number, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return ledger.resolve(reference)
    except DomainError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
