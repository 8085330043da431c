"""Payment commands.

create, edit and delete go through PaymentEditor, the same form state machine
any other front end would use.
"""

import click

from paytrack.cli.display import rule, short_id, status_badge
from paytrack.cli.error_handling import handle_domain_error, require_result, require_tracker
from paytrack.cli.resolution import (
    resolve_payment_or_exit,
    resolve_project_or_exit,
    resolve_vendor_or_exit,
)
from paytrack.domain.editor import PaymentEditor
from paytrack.domain.status import get_status_info, status_choices
from paytrack.utils.amount_parser import parse_amount
from paytrack.utils.currency import format_currency
from paytrack.utils.date_parser import normalize_expected_date


def _parse_amount_option(ctx, amount: str):
    if not amount.strip():
        return ""
    try:
        return parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def _parse_date_option(ctx, date_str: str) -> str:
    try:
        return normalize_expected_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _fill_form(ctx, editor, tracker, project, vendor, item, amount, date, status) -> None:
    """Apply the given options to an open editor, leaving others untouched."""
    if project is not None:
        editor.select_project(resolve_project_or_exit(ctx, tracker, project))
    if vendor is not None:
        editor.select_vendor(resolve_vendor_or_exit(ctx, tracker, vendor))
    if item is not None:
        editor.set_field("item", item)
    if amount is not None:
        editor.set_field("amount", _parse_amount_option(ctx, amount))
    if date is not None:
        editor.set_field("expected_date", _parse_date_option(ctx, date))
    if status is not None:
        editor.set_field("status", status.lower())


def _payment_options(func):
    options = [
        click.option("--project", help="Project name or ID"),
        click.option("--vendor", help="Vendor name or ID"),
        click.option("--item", help="What the payment is for"),
        click.option("--amount", help="Amount (e.g., 15000 or ¥15,000)"),
        click.option("--date", help="Expected payment date (YYYY-MM-DD or relative like 'end of month')"),
        click.option(
            "--status",
            type=click.Choice(status_choices(), case_sensitive=False),
            help="Payment status",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
def payment_group():
    """Manage payment requests."""
    pass


@payment_group.command("list")
@click.option(
    "--status",
    type=click.Choice(status_choices(), case_sensitive=False),
    help="Only show payments with this status",
)
@click.pass_context
def list_payments(ctx, status: str | None):
    """List payments by expected date, latest first."""
    tracker = require_tracker(ctx)

    payments = tracker.payments
    if status is not None:
        payments = tuple(p for p in payments if p.status == status.lower())

    if not payments:
        click.echo("No payments found.")
        return

    click.echo(f"\nFound {len(payments)} payment(s):")
    rule(110)
    click.echo(
        f"{'ID':<9} {'Date':<11} {'Project':<18} {'Vendor':<18} {'Item':<20} {'Amount':>12}  {'Status':<15}"
    )
    rule(110)
    for p in payments:
        click.echo(
            f"{short_id(p.id):<9} {p.expected_date:<11} {p.project_name[:18]:<18} "
            f"{p.vendor_name[:18]:<18} {p.item[:20]:<20} {format_currency(p.amount):>12}  "
            f"{status_badge(p.status)}"
        )


@payment_group.command("show")
@click.argument("payment_id", metavar="PAYMENT_ID")
@click.pass_context
def show_payment(ctx, payment_id: str):
    """Show every field of a payment."""
    tracker = require_tracker(ctx)
    p = resolve_payment_or_exit(ctx, tracker, payment_id)

    click.echo(f"\nPayment ID: {p.id}")
    click.echo(f"  Project: {p.project_name} ({p.project_id or '-'})")
    click.echo(f"  Vendor: {p.vendor_name} ({p.vendor_id or '-'})")
    click.echo(f"  Item: {p.item}")
    click.echo(f"  Amount: {format_currency(p.amount)}")
    click.echo(f"  Expected date: {p.expected_date or '-'}")
    click.echo(f"  Status: {get_status_info(p.status).label}")
    if p.created_at:
        click.echo(f"  Created: {p.created_at}")
    if p.updated_at:
        click.echo(f"  Updated: {p.updated_at}")


@payment_group.command("create")
@_payment_options
@click.pass_context
def create_payment(ctx, project, vendor, item, amount, date, status):
    """Create a payment request.

    Examples:
        paytrack payment create --project "Site A" --vendor "ACME Electric" \\
            --item Wiring --amount 15000 --date 2024-05-01 --status planned
    """
    tracker = require_tracker(ctx)
    editor = PaymentEditor(tracker)
    editor.open()
    _fill_form(ctx, editor, tracker, project, vendor, item, amount, date, status)

    result = editor.submit()
    payment_id = require_result(ctx, result)
    click.echo(f"Created payment {payment_id}")


@payment_group.command("edit")
@click.argument("payment_id", metavar="PAYMENT_ID")
@_payment_options
@click.pass_context
def edit_payment(ctx, payment_id, project, vendor, item, amount, date, status):
    """Edit a payment. Options that are not given keep their current values.

    PAYMENT_ID can be the full ID or a unique prefix.

    Examples:
        paytrack payment edit 3f2a --status confirmed
    """
    tracker = require_tracker(ctx)
    payment = resolve_payment_or_exit(ctx, tracker, payment_id)

    editor = PaymentEditor(tracker)
    editor.open(payment)
    _fill_form(ctx, editor, tracker, project, vendor, item, amount, date, status)

    result = editor.submit()
    require_result(ctx, result)
    click.echo(f"Updated payment {payment.id}")


@payment_group.command("delete")
@click.argument("payment_id", metavar="PAYMENT_ID")
@click.pass_context
def delete_payment(ctx, payment_id: str):
    """Delete a payment. This cannot be undone."""
    tracker = require_tracker(ctx)
    payment = resolve_payment_or_exit(ctx, tracker, payment_id)

    description = payment.item or payment.id
    if not click.confirm(f"Are you sure you want to delete payment '{description}'?"):
        click.echo("Deletion cancelled.")
        return

    editor = PaymentEditor(tracker)
    editor.open(payment)
    result = editor.delete()
    if not result.ok:
        handle_domain_error(ctx, result.error)
    click.echo(f"Deleted payment '{description}'")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
