"""Account management commands."""

import click
from moneytrack.cli.resolution import resolve_account_or_exit
from moneytrack.domain.account import AccountService
from moneytrack.domain.entities import AccountType
from moneytrack.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    default=AccountType.OTHER.value,
    help="Account type (default: other)",
)
@click.option("--balance", help="Opening balance")
@click.pass_context
def create_account(ctx, name: str, account_type: str, balance: str | None):
    """Create a new account.

    Examples:
        moneytrack account create "Carteira"
        moneytrack account create "Nubank" --type credit_card
        moneytrack account create "Conta Corrente" --type checking --balance 1500.00
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = AccountService(store)

    opening_balance = None
    if balance is not None:
        try:
            opening_balance = parse_amount(balance)
        except ValueError as e:
            click.echo(f"Error: Invalid balance: {e}", err=True)
            ctx.exit(1)

    try:
        account_id = service.create_account(
            uid,
            name=name,
            account_type=AccountType(account_type.lower()),
            balance=opening_balance,
        )
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = AccountService(store)

    accounts = service.list_accounts(uid)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        balance = f"{acc.balance:,.2f}" if acc.balance is not None else "-"
        click.echo(f"ID: {acc.id} | {acc.name:20s} | {acc.type.value:12s} | Balance: {balance}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, account: str, new_name: str) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID.
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = AccountService(store)

    account_id = resolve_account_or_exit(ctx, service, uid, account)

    try:
        service.rename_account(uid, account_id, new_name)
        click.echo(f"Renamed account to '{new_name}'")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID. The account can only be deleted if
    no financial entry references it.
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = AccountService(store)

    account_id = resolve_account_or_exit(ctx, service, uid, account)
    account_obj = service.get_account(uid, account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(uid, account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
