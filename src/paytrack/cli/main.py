"""Main CLI entry point."""

import click

from paytrack.database.factories import (
    create_identity_provider,
    create_sqlite_store,
    resolve_app_id,
)
from paytrack.domain.tracker import PaymentTracker
from paytrack.logging_setup import configure_logging

# Import and register all commands at module level
from paytrack.cli.commands import dashboard, payment, project, vendor


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PAYTRACK_DB_PATH environment variable)",
    envvar="PAYTRACK_DB_PATH",
)
@click.option(
    "--app-id",
    help="Application ID the collections are stored under (overrides PAYTRACK_APP_ID)",
    envvar="PAYTRACK_APP_ID",
)
@click.option(
    "--log-level",
    help="Log level, e.g. INFO or DEBUG (overrides PAYTRACK_LOG_LEVEL)",
    envvar="PAYTRACK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, app_id: str | None, log_level: str | None):
    """Paytrack - Construction project payment tracking.

    Track projects, vendors and the payment requests between them, from
    draft through paid.
    """
    ctx.ensure_object(dict)

    if log_level:
        configure_logging(log_level)

    # Connect only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None and "tracker" not in ctx.obj:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        tracker = PaymentTracker(store, create_identity_provider(), app_id=resolve_app_id(app_id))
        tracker.start()
        ctx.obj["store"] = store
        ctx.obj["tracker"] = tracker

        def close() -> None:
            tracker.stop()
            store.disconnect()

        ctx.call_on_close(close)


# Register all commands
dashboard.register_commands(cli)
payment.register_commands(cli)
vendor.register_commands(cli)
project.register_commands(cli)


def main():
    """Main entry point for CLI."""
    configure_logging()
    cli()


if __name__ == "__main__":
    main()
