"""Balance timeline command."""

import click
from lendtrack.cli.formatting import format_money
from lendtrack.domain.analytics import AnalyticsService
from lendtrack.domain.entities import Currency


@click.command("timeline")
@click.option(
    "--currency",
    type=click.Choice([currency.label for currency in Currency], case_sensitive=False),
    help="Only show this currency",
)
@click.pass_context
def show_timeline(ctx, currency: str | None):
    """Show the running balance per currency in chronological order."""
    timeline = AnalyticsService(ctx.obj["ledger"]).get_balance_timeline()
    if currency is not None:
        selected = Currency.from_label(currency)
        timeline = {selected: timeline[selected]} if selected in timeline else {}

    if not timeline:
        click.echo("No transactions found.")
        return

    for series_currency, samples in timeline.items():
        click.echo(f"{series_currency.label}:")
        for index, balance in samples:
            click.echo(f"  {index:>5}  {format_money(balance, series_currency)}")


def register_commands(cli):
    """Register timeline command with main CLI."""
    cli.add_command(show_timeline)
