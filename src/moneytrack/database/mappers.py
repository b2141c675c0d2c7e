"""Mapper functions to convert between domain entities and store documents.

Documents use camelCase field names, keep amounts as decimal strings and
store timestamps in the provider-native ``{"seconds": ..., "nanoseconds": ...}``
form. Conversion to ``date``/``datetime`` happens here, on read.
"""

import math
from datetime import date, datetime, time, UTC
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, TypeVar

from dateutil import parser as date_parser

from moneytrack.domain import entities as domain
from moneytrack.database.base import Document

E = TypeVar("E", bound=Enum)


# Timestamps
def to_timestamp(value: date | datetime | None) -> Optional[dict[str, int]]:
    """Convert a date or datetime to the store's native timestamp form.

    Naive datetimes and plain dates are taken as UTC.
    """
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    seconds = math.floor(value.timestamp())
    return {"seconds": seconds, "nanoseconds": value.microsecond * 1000}


def timestamp_to_datetime(value: Any) -> Optional[datetime]:
    """Convert a stored timestamp to an aware UTC datetime.

    Accepts the native ``{"seconds", "nanoseconds"}`` form, ISO-8601 strings,
    epoch seconds, and ``date``/``datetime`` values.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if isinstance(value, dict) and "seconds" in value:
        seconds = value["seconds"] + value.get("nanoseconds", 0) / 1_000_000_000
        return datetime.fromtimestamp(seconds, UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, UTC)
    if isinstance(value, str):
        try:
            parsed = date_parser.isoparse(value)
        except ValueError:
            parsed = date_parser.parse(value)
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    raise ValueError(f"Unsupported timestamp value: {value!r}")


def timestamp_to_date(value: Any) -> Optional[date]:
    """Convert a stored timestamp to a calendar date."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    dt = timestamp_to_datetime(value)
    return dt.date() if dt is not None else None


# Amounts
def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a stored number or numeric string to Decimal.

    A stored NaN comes back as ``Decimal("NaN")``.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def amount_to_document(value: Optional[Decimal]) -> Optional[str]:
    """Convert a Decimal amount to its stored string form."""
    if value is None:
        return None
    return str(value)


def _to_enum(enum_cls: type[E], value: Any, default: Optional[E] = None) -> Optional[E]:
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        if default is None:
            raise
        return default


def _to_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if value is None:
        return default
    return int(value)


def _drop_none(document: dict[str, Any]) -> Document:
    return {key: value for key, value in document.items() if value is not None}


# Reference data
def account_to_domain(document: Document) -> domain.Account:
    """Convert an account document to a domain Account entity."""
    return domain.Account(
        id=document["id"],
        uid=document["uid"],
        name=document["name"],
        balance=to_decimal(document.get("balance")),
        icon=document.get("icon"),
        type=_to_enum(domain.AccountType, document.get("type"), domain.AccountType.OTHER),
        default_id=document.get("defaultId"),
    )


def account_to_document(account: domain.Account) -> Document:
    """Convert a domain Account to a document (without its id)."""
    document = _drop_none(
        {
            "uid": account.uid,
            "name": account.name,
            "icon": account.icon,
            "type": account.type.value,
            "defaultId": account.default_id,
        }
    )
    # A null balance is meaningful, so it is always written
    document["balance"] = amount_to_document(account.balance)
    return document


def category_to_domain(document: Document) -> domain.Category:
    """Convert a category document to a domain Category entity."""
    return domain.Category(
        id=document["id"],
        uid=document["uid"],
        name=document["name"],
        icon=document.get("icon"),
        type=_to_enum(domain.CategoryType, document.get("type")),
        default_id=document.get("defaultId"),
    )


def category_to_document(category: domain.Category) -> Document:
    """Convert a domain Category to a document (without its id)."""
    return _drop_none(
        {
            "uid": category.uid,
            "name": category.name,
            "icon": category.icon,
            "type": category.type.value if category.type is not None else None,
            "defaultId": category.default_id,
        }
    )


def payment_method_to_domain(document: Document) -> domain.PaymentMethod:
    """Convert a payment method document to a domain PaymentMethod entity."""
    return domain.PaymentMethod(
        id=document["id"],
        uid=document["uid"],
        name=document["name"],
        description=document.get("description"),
        is_active=bool(document.get("isActive", True)),
        icon=document.get("icon"),
        default_account_id=document.get("defaultAccountId"),
        default_id=document.get("defaultId"),
    )


def payment_method_to_document(payment_method: domain.PaymentMethod) -> Document:
    """Convert a domain PaymentMethod to a document (without its id)."""
    return _drop_none(
        {
            "uid": payment_method.uid,
            "name": payment_method.name,
            "description": payment_method.description,
            "isActive": payment_method.is_active,
            "icon": payment_method.icon,
            "defaultAccountId": payment_method.default_account_id,
            "defaultId": payment_method.default_id,
        }
    )


# Legacy debt data
def debt_to_domain(document: Document) -> domain.Debt:
    """Convert a legacy debt document to a domain Debt entity."""
    return domain.Debt(
        id=document["id"],
        uid=document["uid"],
        description=document.get("description", ""),
        original_amount=to_decimal(document.get("originalAmount", 0)),
        type=document.get("type", ""),
        start_date=timestamp_to_date(document.get("startDate")),
        current_balance=to_decimal(document.get("currentBalance", 0)),
        paid_installments=_to_int(document.get("paidInstallments"), 0),
        total_installments=_to_int(document.get("totalInstallments")),
        total_repayment_amount=to_decimal(document.get("totalRepaymentAmount")),
        is_recurring=bool(document.get("isRecurring", False)),
        category_id=document.get("categoryId"),
        end_date=timestamp_to_date(document.get("endDate")),
        interest_rate=to_decimal(document.get("interestRate")),
        fine_rate=to_decimal(document.get("fineRate")),
        expected_installment_amount=to_decimal(document.get("expectedInstallmentAmount")),
    )


def debt_to_document(debt: domain.Debt) -> Document:
    """Convert a domain Debt to a document (without its id)."""
    return _drop_none(
        {
            "uid": debt.uid,
            "description": debt.description,
            "originalAmount": amount_to_document(debt.original_amount),
            "type": debt.type,
            "startDate": to_timestamp(debt.start_date),
            "currentBalance": amount_to_document(debt.current_balance),
            "paidInstallments": debt.paid_installments,
            "totalInstallments": debt.total_installments,
            "totalRepaymentAmount": amount_to_document(debt.total_repayment_amount),
            "isRecurring": debt.is_recurring,
            "categoryId": debt.category_id,
            "endDate": to_timestamp(debt.end_date),
            "interestRate": amount_to_document(debt.interest_rate),
            "fineRate": amount_to_document(debt.fine_rate),
            "expectedInstallmentAmount": amount_to_document(debt.expected_installment_amount),
        }
    )


def installment_to_domain(document: Document) -> domain.DebtInstallment:
    """Convert a legacy installment document to a domain DebtInstallment entity.

    Unknown status strings are read as pending.
    """
    return domain.DebtInstallment(
        id=document["id"],
        uid=document["uid"],
        debt_id=document["debtId"],
        installment_number=_to_int(document.get("installmentNumber"), 0),
        expected_due_date=timestamp_to_date(document.get("expectedDueDate")),
        expected_amount=to_decimal(document.get("expectedAmount", 0)),
        paid_amount=to_decimal(document.get("paidAmount", 0)),
        remaining_amount=to_decimal(document.get("remainingAmount", 0)),
        discount_amount=to_decimal(document.get("discountAmount", 0)),
        status=_to_enum(
            domain.InstallmentStatus, document.get("status"), domain.InstallmentStatus.PENDING
        ),
        payment_date=timestamp_to_date(document.get("paymentDate")),
        transaction_ids=tuple(document.get("transactionIds") or ()),
        created_at=timestamp_to_datetime(document.get("createdAt")),
    )


def installment_to_document(installment: domain.DebtInstallment) -> Document:
    """Convert a domain DebtInstallment to a document (without its id)."""
    return _drop_none(
        {
            "uid": installment.uid,
            "debtId": installment.debt_id,
            "installmentNumber": installment.installment_number,
            "expectedDueDate": to_timestamp(installment.expected_due_date),
            "expectedAmount": amount_to_document(installment.expected_amount),
            "paidAmount": amount_to_document(installment.paid_amount),
            "remainingAmount": amount_to_document(installment.remaining_amount),
            "discountAmount": amount_to_document(installment.discount_amount),
            "status": installment.status.value,
            "paymentDate": to_timestamp(installment.payment_date),
            "transactionIds": list(installment.transaction_ids),
            "createdAt": to_timestamp(installment.created_at),
        }
    )


def transaction_to_domain(document: Document) -> domain.Transaction:
    """Convert a legacy transaction document to a domain Transaction entity."""
    return domain.Transaction(
        id=document["id"],
        uid=document["uid"],
        account_id=document.get("accountId", ""),
        type=_to_enum(domain.EntryType, document.get("type"), domain.EntryType.EXPENSE),
        description=document.get("description", ""),
        amount=to_decimal(document.get("amount", 0)),
        date=timestamp_to_date(document.get("date")),
        category_id=document.get("categoryId"),
        debt_installment_id=document.get("debtInstallmentId"),
        is_loan_income=bool(document.get("isLoanIncome", False)),
        is_loan_payment=bool(document.get("isLoanPayment", False)),
        payment_method_id=document.get("paymentMethodId"),
        interest_paid=to_decimal(document.get("interestPaid")),
        discount_obtained=to_decimal(document.get("discountObtained")),
    )


def transaction_to_document(transaction: domain.Transaction) -> Document:
    """Convert a domain Transaction to a document (without its id)."""
    return _drop_none(
        {
            "uid": transaction.uid,
            "accountId": transaction.account_id,
            "type": transaction.type.value,
            "description": transaction.description,
            "amount": amount_to_document(transaction.amount),
            "date": to_timestamp(transaction.date),
            "categoryId": transaction.category_id,
            "debtInstallmentId": transaction.debt_installment_id,
            "isLoanIncome": transaction.is_loan_income,
            "isLoanPayment": transaction.is_loan_payment,
            "paymentMethodId": transaction.payment_method_id,
            "interestPaid": amount_to_document(transaction.interest_paid),
            "discountObtained": amount_to_document(transaction.discount_obtained),
        }
    )


# Ledger
def financial_entry_to_domain(document: Document) -> domain.FinancialEntry:
    """Convert a financial entry document to a domain FinancialEntry entity."""
    return domain.FinancialEntry(
        id=document["id"],
        uid=document["uid"],
        description=document.get("description", ""),
        type=domain.EntryType(document["type"]),
        status=_to_enum(domain.EntryStatus, document.get("status"), domain.EntryStatus.PENDING),
        expected_amount=to_decimal(document.get("expectedAmount", 0)),
        due_date=timestamp_to_date(document.get("dueDate")),
        paid_amount=to_decimal(document.get("paidAmount")),
        payment_date=timestamp_to_date(document.get("paymentDate")),
        notes=document.get("notes"),
        category_id=document.get("categoryId") or None,
        account_id=document.get("accountId") or None,
        payment_method_id=document.get("paymentMethodId") or None,
        recurrence_id=document.get("recurrenceId"),
        installment_number=_to_int(document.get("installmentNumber")),
        total_installments=_to_int(document.get("totalInstallments")),
        created_at=timestamp_to_datetime(document.get("createdAt")),
        is_transfer=bool(document.get("isTransfer", False)),
    )


def financial_entry_to_document(entry: domain.FinancialEntry) -> Document:
    """Convert a domain FinancialEntry to a document (without its id)."""
    document = _drop_none(
        {
            "uid": entry.uid,
            "description": entry.description,
            "type": entry.type.value,
            "status": entry.status.value,
            "expectedAmount": amount_to_document(entry.expected_amount),
            "dueDate": to_timestamp(entry.due_date),
            "notes": entry.notes,
            "categoryId": entry.category_id,
            "accountId": entry.account_id,
            "paymentMethodId": entry.payment_method_id,
            "recurrenceId": entry.recurrence_id,
            "installmentNumber": entry.installment_number,
            "totalInstallments": entry.total_installments,
            "createdAt": to_timestamp(entry.created_at),
            "isTransfer": entry.is_transfer,
        }
    )
    # Settlement fields are null until the entry is paid
    document["paidAmount"] = amount_to_document(entry.paid_amount)
    document["paymentDate"] = to_timestamp(entry.payment_date)
    return document
