"""Summary commands."""

import json
from datetime import date
from decimal import Decimal

import click
from moneytrack.cli.date_filters import resolve_cli_month
from moneytrack.domain.summary import SummaryService


def _to_json_numbers(value):
    """Convert Decimals nested in dicts to floats for JSON output."""
    if isinstance(value, dict):
        return {key: _to_json_numbers(item) for key, item in value.items()}
    if isinstance(value, Decimal):
        return float(value)
    return value


def _format_amount(amount: Decimal) -> str:
    return f"R$ {amount:,.2f}"


@click.command("summary")
@click.option("--month", help="Month to summarize (YYYY-MM or relative like 'last month')")
@click.option("--this-month", is_flag=True, help="Summarize the current month (default)")
@click.option("--last-month", is_flag=True, help="Summarize the previous month")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def summary(ctx, month: str | None, this_month: bool, last_month: bool, as_json: bool):
    """Show forecast and actual income and expenses for a month.

    Pending credit-card purchases of the previous month count as this
    month's forecast bill, and card bill payments count as expenses when
    they are paid.
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = SummaryService(store)

    reference = resolve_cli_month(
        ctx,
        month=month,
        period_flags={"this-month": this_month, "last-month": last_month},
        default=date.today().replace(day=1),
    )

    try:
        result = service.get_monthly_summary(uid, reference)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if as_json:
        payload = {"year": result.year, "month": result.month, **result.to_dict()}
        click.echo(json.dumps(_to_json_numbers(payload), indent=2))
        return

    click.echo(f"\nMonthly Summary {result.year}-{result.month:02d}:")
    click.echo("-" * 80)
    click.echo(f"{'':<20} {'Forecast':>18} {'Actual':>18} {'Balance':>18}")
    click.echo("-" * 80)
    for label, figures in (
        ("Income", result.income),
        ("Expenses", result.expenses),
        ("Result", result.result),
    ):
        if label == "Result":
            click.echo("=" * 80)
        click.echo(
            f"{label:<20} {_format_amount(figures.forecast):>18} "
            f"{_format_amount(figures.actual):>18} {_format_amount(figures.balance):>18}"
        )


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
