"""Expected return date commands."""

import click
from lendtrack.cli.error_handling import handle_domain_error, save_or_exit
from lendtrack.cli.transaction_resolution import resolve_transaction_or_exit
from lendtrack.domain.errors import DomainError
from lendtrack.domain.transaction import TransactionService
from lendtrack.utils.date_parser import parse_date


@click.command("deadline")
@click.argument("reference")
@click.argument("new_date")
@click.pass_context
def change_deadline(ctx, reference: str, new_date: str):
    """Move the expected return date of a loan.

    Every change is kept in the transaction's deadline history.
    """
    ledger = ctx.obj["ledger"]
    service = TransactionService(ledger)
    txn = resolve_transaction_or_exit(ctx, ledger, reference)

    try:
        target = parse_date(new_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        change = service.edit_expected_return_date(txn.id, target)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if change is None:
        click.echo(f"Deadline unchanged ({target:%Y-%m-%d}).")
        return

    save_or_exit(ctx)
    history = ledger.require(txn.id).deadline_history
    click.echo(
        f"Deadline updated: {change.old_date:%Y-%m-%d} -> {change.new_date:%Y-%m-%d}"
        f" ({len(history)} change{'s' if len(history) != 1 else ''})"
    )


def register_commands(cli):
    """Register deadline command with main CLI."""
    cli.add_command(change_deadline)
