"""Main CLI entry point."""

import click

from chaintrack.database.factories import create_sqlite_database
from chaintrack.logging_setup import configure_logging

# Import and register all commands at module level
from chaintrack.cli.commands import chains, history, normalize

_COMMANDS_WITHOUT_DB = {"chains"}


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CHAINTRACK_DB_PATH environment variable)",
    envvar="CHAINTRACK_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for diagnostics on stderr (overrides CHAINTRACK_LOG_LEVEL)",
    envvar="CHAINTRACK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Chaintrack - blockchain transaction normalizer.

    Turn saved explorer responses from EVM, Kaspa and Fuel chains into
    canonical transactions and export them as Awaken tax CSV.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Open the export history database only for commands that use it
    if ctx.invoked_subcommand is not None and ctx.invoked_subcommand not in _COMMANDS_WITHOUT_DB:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
chains.register_commands(cli)
normalize.register_commands(cli)
history.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
