"""Payment method management commands."""

import click
from moneytrack.cli.resolution import resolve_account_or_exit, resolve_payment_method_or_exit
from moneytrack.domain.account import AccountService
from moneytrack.domain.payment_method import PaymentMethodService


@click.group()
def payment_method_group():
    """Manage payment methods."""
    pass


@payment_method_group.command("create")
@click.argument("name")
@click.option("--description", help="Payment method description")
@click.option("--account", help="Default account (name or ID)")
@click.pass_context
def create_payment_method(ctx, name: str, description: str | None, account: str | None):
    """Create a new payment method."""
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = PaymentMethodService(store)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(store), uid, account)

    try:
        pm_id = service.create_payment_method(
            uid, name=name, description=description, default_account_id=account_id
        )
        click.echo(f"Created payment method '{name}' (ID: {pm_id})")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@payment_method_group.command("list")
@click.option("--active", "active_only", is_flag=True, help="Only show active payment methods")
@click.pass_context
def list_payment_methods(ctx, active_only: bool):
    """List payment methods."""
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = PaymentMethodService(store)

    methods = service.list_payment_methods(uid, active_only=active_only)
    if not methods:
        click.echo("No payment methods found.")
        return

    click.echo("\nPayment methods:")
    click.echo("-" * 80)
    for pm in methods:
        state = "active" if pm.is_active else "inactive"
        click.echo(f"ID: {pm.id} | {pm.name:20s} | {state}")


def _set_active(ctx, payment_method: str, is_active: bool) -> None:
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = PaymentMethodService(store)

    pm_id = resolve_payment_method_or_exit(ctx, service, uid, payment_method)
    try:
        service.set_active(uid, pm_id, is_active)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    click.echo(f"{'Activated' if is_active else 'Deactivated'} payment method '{payment_method}'")


@payment_method_group.command("deactivate")
@click.argument("payment_method")
@click.pass_context
def deactivate_payment_method(ctx, payment_method: str):
    """Deactivate a payment method (name or ID)."""
    _set_active(ctx, payment_method, False)


@payment_method_group.command("activate")
@click.argument("payment_method")
@click.pass_context
def activate_payment_method(ctx, payment_method: str):
    """Activate a payment method (name or ID)."""
    _set_active(ctx, payment_method, True)


def register_commands(cli):
    """Register payment method commands with main CLI."""
    cli.add_command(payment_method_group, name="payment-method")
