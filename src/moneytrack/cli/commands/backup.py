"""Backup commands."""

import click
from moneytrack.domain.backup import default_backup_filename, write_backup
from moneytrack.domain.reconciliation import ReconciliationService


@click.group()
def backup_group():
    """Export backups."""
    pass


@backup_group.command("export")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    help="Output file (default: moneytrack-backup-<user>-<date>.json)",
)
@click.pass_context
def export_backup(ctx, output: str | None):
    """Convert legacy debts into financial entries and write a JSON backup.

    Each debt installment becomes one expense entry. Accounts, categories
    and payment methods are copied as they are.
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = ReconciliationService(store)

    try:
        backup = service.build_backup(uid)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    path = write_backup(backup, output or default_backup_filename(uid))
    click.echo(
        f"Exported {len(backup.financial_entries)} entries, "
        f"{len(backup.accounts)} accounts, {len(backup.categories)} categories and "
        f"{len(backup.payment_methods)} payment methods to {path}"
    )


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
