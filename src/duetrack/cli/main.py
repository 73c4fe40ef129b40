"""Main CLI entry point."""

import logging
from datetime import date

import click

from duetrack.cli.error_handling import fail
from duetrack.database.factories import create_sqlite_database
from duetrack.logging_config import setup_logging
from duetrack.utils.date_parser import parse_date

# Import and register all commands at module level
from duetrack.cli.commands import (
    user,
    category,
    debt,
    card,
    expense,
    income,
    savings,
    plan,
    summary,
)

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides DUETRACK_DB_PATH environment variable)",
    envvar="DUETRACK_DB_PATH",
)
@click.option(
    "--user",
    "username",
    help="Username to act as (overrides DUETRACK_USER environment variable)",
    envvar="DUETRACK_USER",
)
@click.option(
    "--today",
    "today_str",
    help="Reference date for schedules and plans (defaults to the system date)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="DUETRACK_LOG_LEVEL",
    help="Logging level for messages written to stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, username: str | None, today_str: str | None, log_level: str):
    """Duetrack - Personal debt and payment planning.

    Track loans, credit cards, expenses and incomes, and get a prioritized
    plan of what to pay next with a projection of your balance.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level)

    today = date.today()
    if today_str:
        try:
            today = parse_date(today_str, today=today)
        except ValueError as e:
            fail(ctx, f"Invalid --today date: {e}")

    ctx.obj["today"] = today
    ctx.obj["username"] = username

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)
        logger.debug("Using database %s as of %s", db.database_url, today)


# Register all commands
user.register_commands(cli)
category.register_commands(cli)
debt.register_commands(cli)
card.register_commands(cli)
expense.register_commands(cli)
income.register_commands(cli)
savings.register_commands(cli)
plan.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
