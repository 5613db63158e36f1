"""Main CLI entry point."""

import click
import structlog

from bankimport.config import ImportSettings
from bankimport.database.factories import create_sqlite_database
from bankimport.utils.log_setup import setup_logging

# Import and register all commands at module level
from bankimport.cli.commands import (
    account,
    category,
    import_cmd,
    template,
    transaction,
)

logger = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BANKIMPORT_DB_PATH environment variable)",
    envvar="BANKIMPORT_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="BANKIMPORT_LOG_LEVEL",
    help="Log level for diagnostics written to stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Bankimport - Bank statement import tool.

    Upload a CSV bank statement, map its columns, review the validated rows
    and duplicate warnings, then import the rows you approve.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            ctx.obj["settings"] = ImportSettings.from_env()
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)
        logger.debug("database_ready", database_path=db_path)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
import_cmd.register_commands(cli)
template.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
