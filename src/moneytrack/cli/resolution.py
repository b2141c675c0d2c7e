"""CLI helpers for resolving names to document IDs."""

from __future__ import annotations

import click

from moneytrack.cli.error_handling import handle_domain_error
from moneytrack.domain.account import AccountService
from moneytrack.domain.category import CategoryService
from moneytrack.domain.payment_method import PaymentMethodService
from moneytrack.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, uid: str, account: str
) -> str:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, uid, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_category_or_exit(
    ctx: click.Context, category_service: CategoryService, uid: str, category: str
) -> str:
    """Resolve category name or ID, or exit with a CLI error."""
    if category_service.get_category(uid, category) is not None:
        return category
    found = category_service.get_category_by_name(uid, category)
    if found is None:
        handle_domain_error(ctx, ValueError(f"Category '{category}' not found"))
    return found.id


def resolve_payment_method_or_exit(
    ctx: click.Context, service: PaymentMethodService, uid: str, payment_method: str
) -> str:
    """Resolve payment method name or ID, or exit with a CLI error."""
    if service.get_payment_method(uid, payment_method) is not None:
        return payment_method
    for pm in service.list_payment_methods(uid):
        if pm.name == payment_method:
            return pm.id
    handle_domain_error(ctx, ValueError(f"Payment method '{payment_method}' not found"))
