"""Per-person statistics commands."""

import click
from lendtrack.cli.formatting import format_money, format_optional
from lendtrack.domain.analytics import AnalyticsService
from lendtrack.domain.entities import PersonReport


def _display_report(report: PersonReport) -> None:
    stats = report.stats
    currency = stats.display_currency

    click.echo(report.name)
    click.echo(f"  Outstanding: {format_money(stats.outstanding, currency)}")
    click.echo(f"  Lent: {format_money(stats.lent, currency)}")
    click.echo(f"  Borrowed: {format_money(stats.borrowed, currency)}")
    click.echo(f"  Returned: {format_money(stats.returned, currency)}")
    click.echo(f"  Repaid: {format_money(stats.repaid, currency)}")
    click.echo(f"  Return rate: {format_optional(stats.return_rate, '.1f', '%')}")
    click.echo(
        f"  Avg return: {format_optional(report.average_return_days, '.0f', ' days')}"
    )
    if report.promise_rate is None:
        click.echo("  Promises kept: N/A")
    else:
        rate = report.promise_rate
        click.echo(f"  Promises kept: {rate.percentage:.1f}% ({rate.kept}/{rate.total})")
    if stats.deadline_changes_count > 0:
        click.echo(f"  Deadline changes: {stats.deadline_changes_count}")


@click.command("people")
@click.option("--search", "-s", help="Filter by person name")
@click.pass_context
def show_people(ctx, search: str | None):
    """Show statistics per person, most reliable first."""
    analytics = AnalyticsService(ctx.obj["ledger"])
    reports = analytics.get_person_reports(search)

    if not reports:
        click.echo("No people found.")
        return

    for index, report in enumerate(reports):
        if index > 0:
            click.echo()
        _display_report(report)


@click.command("outstanding")
@click.pass_context
def show_outstanding(ctx):
    """Show who owes whom, largest amounts first.

    Positive amounts are owed to you; negative amounts are owed by you.
    """
    analytics = AnalyticsService(ctx.obj["ledger"])
    outstanding = analytics.get_outstanding_by_person()

    if not outstanding:
        click.echo("No outstanding balances.")
        return

    person_stats = analytics.get_person_stats()
    for name, amount in outstanding:
        currency = person_stats[name].display_currency
        click.echo(f"  {name:<20} {format_money(amount, currency)}")

    rates = analytics.get_return_rate_by_person()
    if rates:
        click.echo()
        click.echo("Return rate by person:")
        for name, rate in rates:
            click.echo(f"  {name:<20} {rate:.1f}%")


def register_commands(cli):
    """Register people commands with main CLI."""
    cli.add_command(show_people)
    cli.add_command(show_outstanding)
