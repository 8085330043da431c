"""CLI error handling helpers."""

import click

from paytrack.domain.entities import WriteResult
from paytrack.domain.errors import DomainError
from paytrack.domain.tracker import PaymentTracker


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def require_result(ctx: click.Context, result: WriteResult) -> str:
    """Return the document ID of a successful write, or exit with its error."""
    if not result.ok:
        handle_domain_error(ctx, result.error or DomainError("Write failed"))
    return result.id


def require_tracker(ctx: click.Context) -> PaymentTracker:
    """Return the connected tracker, or exit if no session could be established."""
    tracker = ctx.obj["tracker"]
    if tracker.auth_error is not None or tracker.session is None:
        click.echo(f"Error: Still connecting: {tracker.auth_error or 'no session'}", err=True)
        ctx.exit(1)
    return tracker
