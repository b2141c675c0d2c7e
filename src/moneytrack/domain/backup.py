"""Backup export for reconciled ledgers."""

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from moneytrack.domain.entities import (
    Account,
    Category,
    FinancialEntry,
    FullBackup,
    PaymentMethod,
)

logger = logging.getLogger(__name__)


def _amount(value: Decimal | None) -> float | None:
    """Numeric amount for JSON; non-finite amounts (NaN) have no JSON form."""
    if value is None or not value.is_finite():
        return None
    return float(value)


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def financial_entry_to_dict(entry: FinancialEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "uid": entry.uid,
        "description": entry.description,
        "notes": entry.notes,
        "type": entry.type.value,
        "status": entry.status.value,
        "expectedAmount": _amount(entry.expected_amount),
        "dueDate": _iso(entry.due_date),
        "paidAmount": _amount(entry.paid_amount),
        "paymentDate": _iso(entry.payment_date),
        "categoryId": entry.category_id,
        "accountId": entry.account_id,
        "paymentMethodId": entry.payment_method_id,
        "recurrenceId": entry.recurrence_id,
        "installmentNumber": entry.installment_number,
        "totalInstallments": entry.total_installments,
        "createdAt": _iso(entry.created_at),
        "isTransfer": entry.is_transfer,
    }


def account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "uid": account.uid,
        "name": account.name,
        "balance": _amount(account.balance),
        "icon": account.icon,
        "type": account.type.value,
        "defaultId": account.default_id,
    }


def category_to_dict(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "uid": category.uid,
        "name": category.name,
        "icon": category.icon,
        "type": category.type.value if category.type is not None else None,
        "defaultId": category.default_id,
    }


def payment_method_to_dict(payment_method: PaymentMethod) -> dict[str, Any]:
    return {
        "id": payment_method.id,
        "uid": payment_method.uid,
        "name": payment_method.name,
        "description": payment_method.description,
        "isActive": payment_method.is_active,
        "icon": payment_method.icon,
        "defaultAccountId": payment_method.default_account_id,
        "defaultId": payment_method.default_id,
    }


def backup_to_dict(backup: FullBackup) -> dict[str, list[dict[str, Any]]]:
    """Convert a backup to its JSON document shape."""
    return {
        "financialEntries": [financial_entry_to_dict(e) for e in backup.financial_entries],
        "accounts": [account_to_dict(a) for a in backup.accounts],
        "categories": [category_to_dict(c) for c in backup.categories],
        "paymentMethods": [payment_method_to_dict(p) for p in backup.payment_methods],
    }


def default_backup_filename(uid: str, today: date | None = None) -> str:
    """Return the download name for a user's backup file."""
    today = today or date.today()
    return f"moneytrack-backup-{uid}-{today.isoformat()}.json"


def write_backup(backup: FullBackup, path: str | Path) -> Path:
    """Write a backup as an indented JSON file.

    Args:
        backup: Backup to write
        path: Destination file

    Returns:
        Path of the written file
    """
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(backup_to_dict(backup), f, indent=2, ensure_ascii=False, allow_nan=False)
        f.write("\n")
    logger.info("Wrote backup with %d entries to %s", len(backup.financial_entries), path)
    return path
