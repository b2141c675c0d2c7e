"""Main CLI entry point."""

import logging

import click
from moneytrack.database.factories import create_sqlite_store

# Import and register all commands at module level
from moneytrack.cli.commands import (
    account,
    backup,
    category,
    entry,
    init_defaults,
    payment_method,
    summary,
)

DEFAULT_USER = "local"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides MONEYTRACK_DB_PATH environment variable)",
    envvar="MONEYTRACK_DB_PATH",
)
@click.option(
    "--user",
    "uid",
    default=DEFAULT_USER,
    show_default=True,
    envvar="MONEYTRACK_USER",
    help="User whose data is read and written (MONEYTRACK_USER)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, uid: str, verbose: bool):
    """Moneytrack - Personal finance tracking.

    Track accounts, categories and financial entries, follow monthly
    forecast and actual figures, and export legacy debt data as a
    financial-entry backup.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Open the store only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        store.initialize_schema()
        ctx.obj["store"] = store
        ctx.obj["uid"] = uid
        ctx.call_on_close(store.disconnect)


# Register all commands
init_defaults.register_commands(cli)
account.register_commands(cli)
category.register_commands(cli)
payment_method.register_commands(cli)
entry.register_commands(cli)
summary.register_commands(cli)
backup.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
