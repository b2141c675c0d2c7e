"""Financial entry commands."""

from datetime import date, timedelta

import click
from dateutil.relativedelta import relativedelta
from moneytrack.cli.date_filters import resolve_cli_month
from moneytrack.cli.resolution import (
    resolve_account_or_exit,
    resolve_category_or_exit,
    resolve_payment_method_or_exit,
)
from moneytrack.domain.account import AccountService
from moneytrack.domain.category import CategoryService
from moneytrack.domain.entities import (
    EntryStatus,
    EntryType,
    RecurrenceFrequency,
    StatementEntryKind,
    StatementFilters,
)
from moneytrack.domain.financial_entry import FinancialEntryService
from moneytrack.domain.payment_method import PaymentMethodService
from moneytrack.utils.amount_parser import parse_amount
from moneytrack.utils.date_parser import parse_date


def _parse_amount_or_exit(ctx, value: str, label: str = "amount"):
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _parse_date_or_exit(ctx, value: str, label: str = "date"):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def entry_group():
    """Manage financial entries."""
    pass


@entry_group.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--due", "due", default="today", help="Due date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today', 'tomorrow')")
@click.option(
    "--type",
    "entry_type",
    type=click.Choice([t.value for t in EntryType], case_sensitive=False),
    default=EntryType.EXPENSE.value,
    help="Entry type (default: expense)",
)
@click.option("--category", help="Category name or ID")
@click.option("--account", help="Account name or ID")
@click.option("--payment-method", help="Payment method name or ID")
@click.option("--installments", type=int, help="Split into this many monthly installments")
@click.option("--recurring", is_flag=True, help="Repeat monthly until the end of the year")
@click.option("--notes", help="Notes")
@click.option("--paid", is_flag=True, help="Record the entry as already paid (requires --account)")
@click.pass_context
def add_entry(
    ctx,
    description: str,
    amount: str,
    due: str,
    entry_type: str,
    category: str | None,
    account: str | None,
    payment_method: str | None,
    installments: int | None,
    recurring: bool,
    notes: str | None,
    paid: bool,
):
    """Add a financial entry.

    Examples:
        moneytrack entry add "Aluguel" 1500.00 --due 2024-03-10 --category "Moradia"
        moneytrack entry add "Notebook" 3600 --installments 12 --account "Nubank"
        moneytrack entry add "Salário" 5000 --type income --recurring
        moneytrack entry add "Padaria" 12,50 --paid --account "Carteira"
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = FinancialEntryService(store)

    if installments is not None and recurring:
        click.echo("Error: --installments cannot be combined with --recurring.", err=True)
        ctx.exit(1)

    expected_amount = _parse_amount_or_exit(ctx, amount)
    due_date = _parse_date_or_exit(ctx, due, "due date")

    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, CategoryService(store), uid, category)
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(store), uid, account)
    payment_method_id = None
    if payment_method is not None:
        payment_method_id = resolve_payment_method_or_exit(
            ctx, PaymentMethodService(store), uid, payment_method
        )

    if installments is not None:
        frequency = RecurrenceFrequency.INSTALLMENT
    elif recurring:
        frequency = RecurrenceFrequency.RECURRING
    else:
        frequency = RecurrenceFrequency.SINGLE

    try:
        entry_ids = service.add_entry(
            uid,
            description=description,
            expected_amount=expected_amount,
            due_date=due_date,
            entry_type=EntryType(entry_type.lower()),
            category_id=category_id,
            frequency=frequency,
            total_installments=installments,
            account_id=account_id,
            payment_method_id=payment_method_id,
            notes=notes,
            pay_now=paid,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if len(entry_ids) == 1:
        click.echo(f"Created entry {entry_ids[0]}")
    else:
        click.echo(f"Created {len(entry_ids)} entries")


def _format_amount(amount) -> str:
    return f"R$ {amount:,.2f}"


def _echo_entry_rows(entries, accounts: dict[str, str]):
    click.echo(
        f"{'Due':<12} {'Description':<32} {'Type':<9} {'Status':<8} {'Account':<16} "
        f"{'Expected':>12} {'Paid':>12}  ID"
    )
    click.echo("-" * 120)
    for entry in entries:
        kind = "transfer" if entry.is_transfer else entry.type.value
        paid = f"{entry.paid_amount:,.2f}" if entry.paid_amount is not None else "-"
        account_name = accounts.get(entry.account_id, "") if entry.account_id else ""
        click.echo(
            f"{entry.due_date.isoformat():<12} {entry.description[:32]:<32} "
            f"{kind:<9} {entry.status.value:<8} {account_name[:16]:<16} "
            f"{entry.expected_amount:>12,.2f} {paid:>12}  {entry.id}"
        )


@entry_group.command("list")
@click.option("--month", help="Month to list (YYYY-MM or relative like 'last month')")
@click.option("--this-month", is_flag=True, help="List the current month")
@click.option("--last-month", is_flag=True, help="List the previous month")
@click.option("--from", "date_from", help="Earliest due date (inclusive)")
@click.option("--to", "date_to", help="Latest due date (inclusive)")
@click.option(
    "--type",
    "kind",
    type=click.Choice([k.value for k in StatementEntryKind], case_sensitive=False),
    help="Only income, expense or transfer entries",
)
@click.option(
    "--status",
    type=click.Choice(["paid", "unpaid"], case_sensitive=False),
    help="Only paid entries, or only entries not yet paid",
)
@click.option("--account", help="Account name or ID")
@click.option("--category", help="Category name or ID (transfers are not filtered)")
@click.option("--search", help="Text the description must contain (case-insensitive)")
@click.option("--series", help="Only list entries of this recurrence ID")
@click.option("--by-month", is_flag=True, help="Group entries by due month")
@click.pass_context
def list_entries(
    ctx,
    month: str | None,
    this_month: bool,
    last_month: bool,
    date_from: str | None,
    date_to: str | None,
    kind: str | None,
    status: str | None,
    account: str | None,
    category: str | None,
    search: str | None,
    series: str | None,
    by_month: bool,
):
    """List financial entries as a statement, newest first.

    Shows the paid income and paid expense totals of the listed entries,
    leaving transfers out of the totals.

    Examples:
        moneytrack entry list --this-month
        moneytrack entry list --from 2024-01-01 --to 2024-03-31 --type expense --by-month
        moneytrack entry list --status unpaid --account "Nubank" --search mercado
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = FinancialEntryService(store)
    account_service = AccountService(store)

    month_start = resolve_cli_month(
        ctx,
        month=month,
        period_flags={"this-month": this_month, "last-month": last_month},
    )
    if month_start is not None and (date_from or date_to):
        click.echo("Error: --from/--to cannot be combined with a month option.", err=True)
        ctx.exit(1)

    start = _parse_date_or_exit(ctx, date_from, "start date") if date_from else None
    end = _parse_date_or_exit(ctx, date_to, "end date") if date_to else None
    if month_start is not None:
        start = month_start
        end = month_start + relativedelta(months=1) - timedelta(days=1)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, uid, account)
    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, CategoryService(store), uid, category)

    statement = service.statement(
        uid,
        StatementFilters(
            date_from=start,
            date_to=end,
            kind=StatementEntryKind(kind.lower()) if kind else None,
            paid=(status.lower() == "paid") if status else None,
            account_id=account_id,
            category_id=category_id,
            description=search,
            recurrence_id=series,
        ),
    )
    if not statement.entries:
        click.echo("No entries found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts(uid)}

    click.echo(f"\nFound {len(statement.entries)} entr{'ies' if len(statement.entries) != 1 else 'y'}:")
    click.echo(
        f"Paid income: {_format_amount(statement.total_income)}  "
        f"Paid expenses: {_format_amount(statement.total_expense)}"
    )
    if by_month:
        for month_key, entries in statement.by_month():
            click.echo(f"\n{month_key}")
            _echo_entry_rows(entries, accounts)
    else:
        click.echo()
        _echo_entry_rows(statement.entries, accounts)


@entry_group.command("pay")
@click.argument("entry_id")
@click.option("--amount", help="Amount paid (defaults to the expected amount)")
@click.option("--date", "payment_date", help="Payment date (defaults to today)")
@click.option("--account", help="Paying account name or ID (defaults to the entry's account)")
@click.option("--payment-method", help="Payment method name or ID")
@click.pass_context
def pay_entry(
    ctx,
    entry_id: str,
    amount: str | None,
    payment_date: str | None,
    account: str | None,
    payment_method: str | None,
):
    """Mark an entry as paid."""
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = FinancialEntryService(store)

    paid_amount = _parse_amount_or_exit(ctx, amount) if amount is not None else None
    paid_on = _parse_date_or_exit(ctx, payment_date) if payment_date is not None else None
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(store), uid, account)
    payment_method_id = None
    if payment_method is not None:
        payment_method_id = resolve_payment_method_or_exit(
            ctx, PaymentMethodService(store), uid, payment_method
        )

    try:
        entry = service.pay_entry(
            uid,
            entry_id,
            paid_amount=paid_amount,
            payment_date=paid_on,
            account_id=account_id,
            payment_method_id=payment_method_id,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Paid '{entry.description}': {entry.paid_amount:,.2f} on {entry.payment_date.isoformat()}")


@entry_group.command("update")
@click.argument("entry_id")
@click.option("--description", help="New description")
@click.option("--amount", help="New expected amount")
@click.option("--due", help="New due date")
@click.option("--category", help="Category name or ID")
@click.option("--account", help="Account name or ID")
@click.option("--notes", help="Notes")
@click.option(
    "--status",
    type=click.Choice([s.value for s in EntryStatus], case_sensitive=False),
    help="New status; anything but 'paid' clears the payment",
)
@click.pass_context
def update_entry(
    ctx,
    entry_id: str,
    description: str | None,
    amount: str | None,
    due: str | None,
    category: str | None,
    account: str | None,
    notes: str | None,
    status: str | None,
):
    """Update an entry.

    Updates only the fields that are provided.
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = FinancialEntryService(store)

    expected_amount = _parse_amount_or_exit(ctx, amount) if amount is not None else None
    due_date = _parse_date_or_exit(ctx, due, "due date") if due is not None else None
    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, CategoryService(store), uid, category)
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(store), uid, account)

    try:
        service.update_entry(
            uid,
            entry_id,
            description=description,
            expected_amount=expected_amount,
            due_date=due_date,
            category_id=category_id,
            account_id=account_id,
            notes=notes,
            status=EntryStatus(status.lower()) if status else None,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Updated entry {entry_id}")


@entry_group.command("delete")
@click.argument("entry_id")
@click.option("--series", "whole_series", is_flag=True, help="Delete every entry of the entry's series")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: str, whole_series: bool, yes: bool):
    """Delete an entry, or its whole series with --series."""
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = FinancialEntryService(store)

    entry = service.get_entry(uid, entry_id)
    if entry is None:
        click.echo(f"Error: Financial entry {entry_id} not found", err=True)
        ctx.exit(1)

    target = "the whole series of" if whole_series else "entry"
    if not yes and not click.confirm(f"Are you sure you want to delete {target} '{entry.description}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        count = service.delete_entry(uid, entry_id, whole_series=whole_series)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Deleted {count} entr{'ies' if count != 1 else 'y'}")


@entry_group.command("transfer")
@click.argument("description")
@click.argument("amount")
@click.option("--from", "source", required=True, help="Source account name or ID")
@click.option("--to", "destination", required=True, help="Destination account name or ID")
@click.option("--date", "transfer_date", default="today", help="Transfer date (default: today)")
@click.option("--notes", help="Notes")
@click.pass_context
def transfer(
    ctx,
    description: str,
    amount: str,
    source: str,
    destination: str,
    transfer_date: str,
    notes: str | None,
):
    """Move money between two accounts.

    A transfer into a credit-card account pays its bill.

    Examples:
        moneytrack entry transfer "Fatura Nubank" 850.00 --from "Conta Corrente" --to "Nubank"
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = FinancialEntryService(store)
    account_service = AccountService(store)

    transfer_amount = _parse_amount_or_exit(ctx, amount)
    on: date = _parse_date_or_exit(ctx, transfer_date)
    source_id = resolve_account_or_exit(ctx, account_service, uid, source)
    destination_id = resolve_account_or_exit(ctx, account_service, uid, destination)

    try:
        service.create_transfer(
            uid,
            description=description,
            amount=transfer_amount,
            transfer_date=on,
            source_account_id=source_id,
            destination_account_id=destination_id,
            notes=notes,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Transferred {transfer_amount:,.2f} from '{source}' to '{destination}'")


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
