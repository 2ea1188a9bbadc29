"""Add transaction command."""

import click
from lendtrack.cli.error_handling import handle_domain_error, save_or_exit
from lendtrack.cli.formatting import format_money
from lendtrack.domain.entities import Currency, Direction
from lendtrack.domain.errors import DomainError, StorageError
from lendtrack.domain.transaction import TransactionService
from lendtrack.utils.amount_parser import parse_amount
from lendtrack.utils.date_parser import parse_date, parse_datetime

CURRENCY_CHOICES = [currency.label for currency in Currency]
DIRECTION_CHOICES = [direction.value for direction in Direction]


@click.command("add")
@click.option("--person", required=True, help="Counterparty name")
@click.option("--amount", required=True, help="Amount (e.g., 100 or 1,250.50)")
@click.option(
    "--currency",
    type=click.Choice(CURRENCY_CHOICES, case_sensitive=False),
    default=Currency.GEL.label,
    show_default=True,
    help="Currency of the amount",
)
@click.option(
    "--direction",
    type=click.Choice(DIRECTION_CHOICES, case_sensitive=False),
    required=True,
    help="Lent, Borrowed, Returned or Repaid",
)
@click.option(
    "--date",
    "when",
    default="now",
    show_default=True,
    help="When it happened (YYYY-MM-DD HH:MM or relative like 'yesterday')",
)
@click.option(
    "--expected",
    help="Expected return date for Lent/Borrowed (YYYY-MM-DD or 'in 2 weeks')",
)
@click.option(
    "--attach",
    type=click.Path(dir_okay=False),
    help="File to attach (copied into attachment storage)",
)
@click.pass_context
def add_transaction(
    ctx,
    person: str,
    amount: str,
    currency: str,
    direction: str,
    when: str,
    expected: str | None,
    attach: str | None,
):
    """Record money lent, borrowed, returned or repaid.

    Examples:
        lendtrack add --person Nino --amount 100 --direction Lent --expected "in 2 weeks"
        lendtrack add --person Nino --amount 100 --direction Returned --currency USD
    """
    ledger = ctx.obj["ledger"]
    service = TransactionService(ledger)

    # Parse amount
    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    # Parse dates
    try:
        occurred_at = parse_datetime(when)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    expected_date = None
    if expected:
        try:
            expected_date = parse_date(expected)
        except ValueError as e:
            click.echo(f"Error: Invalid expected date: {e}", err=True)
            ctx.exit(1)

    try:
        txn = service.create_transaction(
            counterparty=person,
            amount=txn_amount,
            currency=Currency.from_label(currency),
            direction=Direction.from_label(direction),
            occurred_at=occurred_at,
            expected_return_date=expected_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    # Copied only once the transaction is valid; a failed copy doesn't
    # block recording it
    if attach:
        try:
            txn = service.set_attachment(txn.id, ctx.obj["attachments"].store(attach))
        except StorageError as e:
            click.echo(f"Warning: Failed to copy attachment: {e}", err=True)

    save_or_exit(ctx)

    click.echo(f"Added transaction #{ledger.position(txn.id)} ({txn.id[:8]})")
    click.echo(f"  Person: {txn.counterparty}")
    click.echo(f"  {txn.direction.value}: {format_money(txn.amount, txn.currency)}")
    click.echo(f"  Date: {txn.occurred_at:%Y-%m-%d %H:%M}")
    if txn.expected_return_date:
        click.echo(f"  Expected return: {txn.expected_return_date:%Y-%m-%d}")
    if txn.attachment_path:
        click.echo(f"  Attachment: {txn.attachment_path}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
