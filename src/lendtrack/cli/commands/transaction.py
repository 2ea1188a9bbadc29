"""Transaction listing commands."""

import click
from lendtrack.cli.formatting import format_transaction
from lendtrack.cli.transaction_resolution import resolve_transaction_or_exit
from lendtrack.domain.analytics import AnalyticsService
from lendtrack.domain.entities import SortBy
from lendtrack.domain.transaction import TransactionService


@click.command("list")
@click.option("--search", "-s", help="Filter by person, amount or direction")
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice([option.value for option in SortBy]),
    default=SortBy.DATE_NEWEST.value,
    show_default=True,
    help="Sort order",
)
@click.pass_context
def list_transactions(ctx, search: str | None, sort_by: str):
    """List transactions. Loans covered by returns are marked [paid back]."""
    ledger = ctx.obj["ledger"]
    service = TransactionService(ledger)
    paid_back = AnalyticsService(ledger).get_paid_back_ids()

    transactions = service.list_transactions(search=search, sort_by=SortBy(sort_by))
    if not transactions:
        click.echo("No transactions found.")
        return

    for txn in transactions:
        click.echo(format_transaction(ledger, txn, paid_back=txn.id in paid_back))


@click.command("show")
@click.argument("reference")
@click.pass_context
def show_transaction(ctx, reference: str):
    """Show one transaction with its deadline history.

    REFERENCE is a transaction ID, a unique ID prefix or its list number.
    """
    ledger = ctx.obj["ledger"]
    txn = resolve_transaction_or_exit(ctx, ledger, reference)
    paid_back = txn.id in AnalyticsService(ledger).get_paid_back_ids()

    click.echo(format_transaction(ledger, txn, paid_back=paid_back))
    click.echo(f"  ID: {txn.id}")
    if txn.attachment_path:
        click.echo(f"  Attachment: {txn.attachment_path}")
    for number, change in enumerate(txn.deadline_history, start=1):
        click.echo(
            f"  Change {number}: {change.old_date:%Y-%m-%d} -> {change.new_date:%Y-%m-%d}"
            f" (on {change.changed_at:%Y-%m-%d %H:%M})"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(list_transactions)
    cli.add_command(show_transaction)
