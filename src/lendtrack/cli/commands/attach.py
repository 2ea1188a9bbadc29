"""Attachment commands."""

import click
from lendtrack.cli.error_handling import handle_domain_error, save_or_exit
from lendtrack.cli.transaction_resolution import resolve_transaction_or_exit
from lendtrack.domain.errors import StorageError
from lendtrack.domain.transaction import TransactionService


@click.command("attach")
@click.argument("reference")
@click.argument("file", type=click.Path(dir_okay=False))
@click.pass_context
def attach_file(ctx, reference: str, file: str):
    """Attach a file (e.g. a receipt photo) to a transaction."""
    ledger = ctx.obj["ledger"]
    txn = resolve_transaction_or_exit(ctx, ledger, reference)

    try:
        stored_path = ctx.obj["attachments"].store(file)
    except StorageError as e:
        handle_domain_error(ctx, e)

    TransactionService(ledger).set_attachment(txn.id, stored_path)
    save_or_exit(ctx)
    click.echo(f"Attached {stored_path} to transaction #{ledger.position(txn.id)}")


@click.command("detach")
@click.argument("reference")
@click.pass_context
def detach_file(ctx, reference: str):
    """Remove the attachment reference from a transaction.

    The stored copy is left in place.
    """
    ledger = ctx.obj["ledger"]
    txn = resolve_transaction_or_exit(ctx, ledger, reference)

    if txn.attachment_path is None:
        click.echo(f"Transaction #{ledger.position(txn.id)} has no attachment.")
        return

    TransactionService(ledger).set_attachment(txn.id, None)
    save_or_exit(ctx)
    click.echo(f"Removed attachment from transaction #{ledger.position(txn.id)}")


def register_commands(cli):
    """Register attachment commands with main CLI."""
    cli.add_command(attach_file)
    cli.add_command(detach_file)
