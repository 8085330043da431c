"""CLI helpers for resolving projects, vendors and payments."""

from __future__ import annotations

from typing import Optional

import click

from paytrack.domain.entities import Payment, Project, Vendor
from paytrack.domain.tracker import PaymentTracker


def resolve_project_or_exit(ctx: click.Context, tracker: PaymentTracker, project: str) -> Project:
    """Resolve a project name or ID, or exit with a CLI error."""
    found = tracker.find_project(project)
    if found is None:
        click.echo(f"Error: Project '{project}' not found", err=True)
        ctx.exit(1)
    return found


def resolve_vendor_or_exit(ctx: click.Context, tracker: PaymentTracker, vendor: str) -> Vendor:
    """Resolve a vendor name or ID, or exit with a CLI error."""
    found = tracker.find_vendor(vendor)
    if found is None:
        click.echo(f"Error: Vendor '{vendor}' not found", err=True)
        ctx.exit(1)
    return found


def find_payment(tracker: PaymentTracker, payment_ref: str) -> Optional[Payment]:
    """Find a payment by full ID or by a unique ID prefix."""
    exact = tracker.get_payment(payment_ref)
    if exact is not None:
        return exact
    matches = [p for p in tracker.payments if p.id.startswith(payment_ref)]
    return matches[0] if len(matches) == 1 else None


def resolve_payment_or_exit(ctx: click.Context, tracker: PaymentTracker, payment_ref: str) -> Payment:
    """Resolve a payment ID or unique prefix, or exit with a CLI error."""
    found = find_payment(tracker, payment_ref) if payment_ref else None
    if found is None:
        click.echo(f"Error: Payment '{payment_ref}' not found", err=True)
        ctx.exit(1)
    return found
