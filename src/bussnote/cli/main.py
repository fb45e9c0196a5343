"""Main CLI entry point."""

import click

from bussnote.config import DB_PATH_ENV, LOG_LEVEL_ENV, configure_logging
from bussnote.database.factories import create_sqlite_database

# Import and register all commands at module level
from bussnote.cli.commands import (
    party,
    invoice,
    payment,
    activity,
    report,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help=f"Logging level (overrides {LOG_LEVEL_ENV}, default WARNING)",
    envvar=LOG_LEVEL_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """BussNote - Brokerage note ledger.

    Keep parties, notes with line items and brokerage terms, payments and
    an activity trail, and report on outstanding and settled business.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
party.register_commands(cli)
invoice.register_commands(cli)
payment.register_commands(cli)
activity.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
