"""Balance summary command."""

import click
from lendtrack.cli.formatting import format_money
from lendtrack.domain.analytics import AnalyticsService


@click.command("balances")
@click.pass_context
def show_balances(ctx):
    """Show totals and the net balance per currency.

    A negative balance means you are owed money in that currency.
    """
    ledger = ctx.obj["ledger"]
    if len(ledger) == 0:
        click.echo("No transactions yet.")
        return

    analytics = AnalyticsService(ledger)
    totals = analytics.get_totals()

    click.echo("Totals (all currencies):")
    click.echo(f"  Lent:     {totals.lent:>12,.2f}")
    click.echo(f"  Borrowed: {totals.borrowed:>12,.2f}")
    click.echo(f"  Returned: {totals.returned:>12,.2f}")
    click.echo(f"  Repaid:   {totals.repaid:>12,.2f}")
    click.echo()
    click.echo("Net balance by currency:")
    for currency, balance in analytics.get_balance_summary():
        click.echo(f"  {currency.label:<6} {format_money(balance, currency)}")


def register_commands(cli):
    """Register balances command with main CLI."""
    cli.add_command(show_balances)
