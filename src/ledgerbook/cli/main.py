"""Main CLI entry point."""

import getpass
import logging

import click
from ledgerbook.database.factories import create_database, create_sqlite_database

# Import and register all commands at module level
from ledgerbook.cli.commands import account, book, category, transaction

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _default_creator() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "ledgerbook"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option("--book", help="Book name or ID", envvar="LEDGERBOOK_BOOK")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="LEDGERBOOK_LOG_LEVEL",
    help="Logging verbosity (default: WARNING)",
)
@click.option("--creator", envvar="LEDGERBOOK_USER", help="Name recorded as creator/editor of transactions")
@click.pass_context
def cli(ctx, db_path: str | None, book: str | None, log_level: str, creator: str | None):
    """Ledgerbook - double-entry ledger for personal and small-business books.

    Record income, expenses and transfers between accounts. Every transaction
    is stored as balanced splits and account balances are kept in step.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if db_path:
            db = create_sqlite_database(database_path=db_path)
        else:
            db = create_database()
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["book"] = book
        ctx.obj["creator"] = creator or _default_creator()
        ctx.call_on_close(db.disconnect)


# Register all commands
book.register_commands(cli)
account.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
