"""Vendor management commands."""

import click

from paytrack.cli.display import rule, short_id
from paytrack.cli.error_handling import handle_domain_error, require_result, require_tracker
from paytrack.cli.resolution import resolve_vendor_or_exit
from paytrack.domain.entities import DEFAULT_VENDOR_TYPE, VendorType
from paytrack.domain.errors import ValidationError


@click.group()
def vendor_group():
    """Manage vendors."""
    pass


@vendor_group.command("list")
@click.pass_context
def list_vendors(ctx):
    """List vendors, newest first."""
    tracker = require_tracker(ctx)

    if not tracker.vendors:
        click.echo("No vendors found.")
        return

    click.echo("\nVendors:")
    rule(60)
    for vendor in tracker.vendors:
        click.echo(f"ID: {short_id(vendor.id):8s} | {vendor.name:30s} | Type: {vendor.type}")


@vendor_group.command("create")
@click.argument("name", metavar="VENDOR_NAME")
@click.option(
    "--type",
    "vendor_type",
    type=click.Choice([t.value for t in VendorType], case_sensitive=False),
    default=DEFAULT_VENDOR_TYPE.value,
    help=f"Trade category (default: {DEFAULT_VENDOR_TYPE.value})",
)
@click.pass_context
def create_vendor(ctx, name: str, vendor_type: str):
    """Create a new vendor.

    Examples:
        paytrack vendor create "ACME Electric" --type electrical
    """
    tracker = require_tracker(ctx)

    try:
        result = tracker.save_vendor({"name": name, "type": vendor_type.lower()})
    except ValidationError as e:
        handle_domain_error(ctx, e)
    vendor_id = require_result(ctx, result)
    click.echo(f"Created vendor '{name.strip()}' (ID: {vendor_id})")


@vendor_group.command("delete")
@click.argument("vendor", metavar="VENDOR")
@click.pass_context
def delete_vendor(ctx, vendor: str):
    """Delete a vendor.

    VENDOR can be a vendor name or ID.
    """
    tracker = require_tracker(ctx)
    vendor_obj = resolve_vendor_or_exit(ctx, tracker, vendor)

    if not click.confirm(f"Are you sure you want to delete vendor '{vendor_obj.name}'?"):
        click.echo("Deletion cancelled.")
        return

    require_result(ctx, tracker.delete_vendor(vendor_obj.id))
    click.echo(f"Deleted vendor '{vendor_obj.name}'")


def register_commands(cli):
    """Register vendor commands with main CLI."""
    cli.add_command(vendor_group, name="vendor")
