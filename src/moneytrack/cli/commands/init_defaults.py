"""Seed default reference data."""

import click
from moneytrack.domain.defaults import DefaultsService


@click.command("init-defaults")
@click.pass_context
def init_defaults(ctx):
    """Create the default account, payment methods and categories.

    Only missing items are created, so the command is safe to run again.
    Legacy debts without a category are filed under 'Outras Despesas'.
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = DefaultsService(store)

    report = service.seed_defaults(uid)

    if not report.changed:
        click.echo("Defaults already present. Nothing to do.")
        return

    if report.accounts:
        click.echo(f"Created account: {', '.join(report.accounts)}")
    if report.payment_methods:
        click.echo(f"Created {len(report.payment_methods)} payment methods")
    if report.categories:
        click.echo(f"Created {len(report.categories)} categories")
    if report.debts_categorized:
        click.echo(f"Assigned a category to {report.debts_categorized} debts")


def register_commands(cli):
    """Register init-defaults command with main CLI."""
    cli.add_command(init_defaults)
