"""Dashboard command."""

import click

from paytrack.cli.display import rule, status_badge
from paytrack.cli.error_handling import require_tracker
from paytrack.utils.currency import format_currency


@click.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Show outstanding and paid totals with upcoming payments."""
    tracker = require_tracker(ctx)
    summary = tracker.dashboard()

    click.echo("\nOverview")
    rule(60)
    click.echo(f"{'Outstanding':<30} {format_currency(summary.total_outstanding):>20}  ({summary.outstanding_count})")
    click.echo(f"{'Paid this month':<30} {format_currency(summary.paid_this_month):>20}")
    click.echo(f"{'Paid (all time)':<30} {format_currency(summary.total_paid):>20}  ({summary.paid_count})")

    for collection, error in sorted(tracker.errors.items()):
        click.echo(f"Warning: {collection} may be out of date: {error}", err=True)

    click.echo("\nUpcoming payments:")
    if not summary.upcoming:
        click.echo("No upcoming payments.")
        return

    rule(60)
    for p in summary.upcoming:
        click.echo(
            f"{p.expected_date or '-':<11} {p.vendor_name[:20]:<20} "
            f"{format_currency(p.amount):>14}  {status_badge(p.status)}"
        )


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
