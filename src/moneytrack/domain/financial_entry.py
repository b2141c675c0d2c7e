"""Financial entry domain service."""

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from moneytrack.database.base import (
    ACCOUNTS,
    CATEGORIES,
    FINANCIAL_ENTRIES,
    PAYMENT_METHODS,
    DocumentStore,
)
from moneytrack.database.mappers import (
    amount_to_document,
    financial_entry_to_document,
    financial_entry_to_domain,
    to_timestamp,
)
from moneytrack.domain.entities import (
    EntryStatus,
    EntryType,
    FinancialEntry,
    RecurrenceFrequency,
    Statement,
    StatementEntryKind,
    StatementFilters,
)
from moneytrack.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    entry_not_found,
    payment_method_not_found,
)

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LENGTH = 3
MIN_INSTALLMENTS = 2


def _new_recurrence_id() -> str:
    return uuid.uuid4().hex


def validate_description(description: str) -> str:
    description = (description or "").strip()
    if len(description) < MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must have at least {MIN_DESCRIPTION_LENGTH} characters"
        )
    return description


def validate_amount(amount: Decimal, field_name: str = "Amount") -> Decimal:
    if amount is None or amount.is_nan() or amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return amount


def monthly_due_dates(first_due_date: date, count: int) -> list[date]:
    """Due dates one calendar month apart, clamped to the end of short months."""
    return [first_due_date + relativedelta(months=i) for i in range(count)]


def months_until_year_end(start: date) -> int:
    """Number of calendar months from ``start`` through December, inclusive."""
    return 12 - start.month + 1


class FinancialEntryService:
    """Service for managing financial entries."""

    def __init__(self, store: DocumentStore):
        """Initialize financial entry service.

        Args:
            store: Document store instance
        """
        self.store = store

    def _check_references(
        self,
        uid: str,
        account_id: Optional[str] = None,
        category_id: Optional[str] = None,
        payment_method_id: Optional[str] = None,
    ) -> None:
        if account_id is not None and self.store.get(uid, ACCOUNTS, account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        if category_id is not None and self.store.get(uid, CATEGORIES, category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        if (
            payment_method_id is not None
            and self.store.get(uid, PAYMENT_METHODS, payment_method_id) is None
        ):
            raise NotFoundError(payment_method_not_found(payment_method_id))

    def add_entry(
        self,
        uid: str,
        description: str,
        expected_amount: Decimal,
        due_date: date,
        entry_type: EntryType,
        category_id: Optional[str] = None,
        frequency: RecurrenceFrequency = RecurrenceFrequency.SINGLE,
        total_installments: Optional[int] = None,
        account_id: Optional[str] = None,
        payment_method_id: Optional[str] = None,
        notes: Optional[str] = None,
        pay_now: bool = False,
    ) -> list[str]:
        """Create a financial entry, or a series of them.

        Args:
            uid: Owner id
            description: Entry description (at least 3 characters)
            expected_amount: Expected amount (positive)
            due_date: Due date of the (first) entry
            entry_type: Income or expense
            category_id: Optional category ID
            frequency: ``single`` creates one entry; ``installment`` creates
                ``total_installments`` monthly entries; ``recurring`` creates
                monthly entries through the end of the due date's year
            total_installments: Number of installments (2 or more) for
                ``installment`` series
            account_id: Optional account ID (required with ``pay_now``)
            payment_method_id: Optional payment method ID
            notes: Optional notes
            pay_now: Create a single entry already paid in full on its due date

        Returns:
            IDs of the created entries, in due date order

        Raises:
            ValidationError: If the input is invalid
            NotFoundError: If a referenced account, category or payment method
                does not exist
        """
        description = validate_description(description)
        validate_amount(expected_amount)
        if frequency == RecurrenceFrequency.INSTALLMENT and (
            total_installments is None or total_installments < MIN_INSTALLMENTS
        ):
            raise ValidationError(
                f"An installment series needs {MIN_INSTALLMENTS} or more installments"
            )
        if pay_now and not account_id:
            raise ValidationError("Select the account used to pay this entry")
        if pay_now and frequency != RecurrenceFrequency.SINGLE:
            raise ValidationError("Only single entries can be paid on creation")
        self._check_references(uid, account_id, category_id, payment_method_id)

        template = FinancialEntry(
            id="",
            uid=uid,
            description=description,
            type=entry_type,
            status=EntryStatus.PENDING,
            expected_amount=expected_amount,
            due_date=due_date,
            notes=notes,
            category_id=category_id,
            account_id=account_id,
            payment_method_id=payment_method_id,
            created_at=datetime.now(UTC),
        )

        if frequency == RecurrenceFrequency.SINGLE:
            if pay_now:
                template = replace(
                    template,
                    status=EntryStatus.PAID,
                    paid_amount=expected_amount,
                    payment_date=due_date,
                )
            entry_id = self.store.add(uid, FINANCIAL_ENTRIES, financial_entry_to_document(template))
            return [entry_id]

        if frequency == RecurrenceFrequency.INSTALLMENT:
            count = total_installments
        else:
            count = months_until_year_end(due_date)

        recurrence_id = _new_recurrence_id()
        series = [
            replace(
                template,
                due_date=next_due_date,
                recurrence_id=recurrence_id,
                installment_number=number,
                total_installments=count,
            )
            for number, next_due_date in enumerate(monthly_due_dates(due_date, count), start=1)
        ]
        entry_ids = self.store.write_batch(
            uid, FINANCIAL_ENTRIES, [financial_entry_to_document(e) for e in series]
        )
        logger.info(
            "Created %s series %s with %d entries for user %s",
            frequency.value,
            recurrence_id,
            count,
            uid,
        )
        return entry_ids

    def get_entry(self, uid: str, entry_id: str) -> Optional[FinancialEntry]:
        """Get a financial entry by ID."""
        document = self.store.get(uid, FINANCIAL_ENTRIES, entry_id)
        if document is None:
            return None
        return financial_entry_to_domain(document)

    def require_entry(self, uid: str, entry_id: str) -> FinancialEntry:
        """Get a financial entry by ID or raise NotFoundError."""
        entry = self.get_entry(uid, entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def list_entries(
        self,
        uid: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        recurrence_id: Optional[str] = None,
    ) -> list[FinancialEntry]:
        """List entries sorted by due date.

        Args:
            uid: Owner id
            year: Optional due date year filter
            month: Optional due date month filter (used with ``year``)
            recurrence_id: Optional series filter
        """
        where = {"recurrenceId": recurrence_id} if recurrence_id is not None else None
        entries = [
            financial_entry_to_domain(doc)
            for doc in self.store.get_all(uid, FINANCIAL_ENTRIES, where=where)
        ]
        if year is not None:
            entries = [e for e in entries if e.due_date.year == year]
            if month is not None:
                entries = [e for e in entries if e.due_date.month == month]
        return sorted(entries, key=lambda e: (e.due_date, e.installment_number or 0, e.id))

    def statement(self, uid: str, filters: Optional[StatementFilters] = None) -> Statement:
        """Build a statement: filtered entries with paid income and expense totals.

        The date range is inclusive and applies to due dates. A ``transfer``
        kind selects transfers only; ``income``/``expense`` exclude them.
        The description criterion is a case-insensitive substring match.
        Totals sum the paid amount of paid, non-transfer entries, a missing
        paid amount counting as zero.

        Args:
            uid: Owner id
            filters: Statement criteria (defaults to no criteria)

        Returns:
            Statement with entries sorted newest due date first
        """
        filters = filters or StatementFilters()
        where = {"recurrenceId": filters.recurrence_id} if filters.recurrence_id is not None else None
        needle = filters.description.lower() if filters.description else None

        def matches(entry: FinancialEntry) -> bool:
            if filters.date_from is not None and entry.due_date < filters.date_from:
                return False
            if filters.date_to is not None and entry.due_date > filters.date_to:
                return False
            if filters.kind == StatementEntryKind.TRANSFER:
                if not entry.is_transfer:
                    return False
            elif filters.kind is not None:
                if entry.is_transfer or entry.type.value != filters.kind.value:
                    return False
            if filters.paid is not None and (entry.status == EntryStatus.PAID) != filters.paid:
                return False
            if filters.account_id is not None and entry.account_id != filters.account_id:
                return False
            if (
                filters.category_id is not None
                and not entry.is_transfer
                and entry.category_id != filters.category_id
            ):
                return False
            if needle and needle not in entry.description.lower():
                return False
            return True

        entries = [
            financial_entry_to_domain(doc)
            for doc in self.store.get_all(uid, FINANCIAL_ENTRIES, where=where)
        ]
        entries = sorted(
            (e for e in entries if matches(e)),
            key=lambda e: (e.due_date, e.installment_number or 0, e.id),
            reverse=True,
        )

        totals = {EntryType.INCOME: Decimal("0"), EntryType.EXPENSE: Decimal("0")}
        for entry in entries:
            if not entry.is_transfer and entry.status == EntryStatus.PAID:
                totals[entry.type] += entry.paid_amount or Decimal("0")

        return Statement(
            entries=tuple(entries),
            total_income=totals[EntryType.INCOME],
            total_expense=totals[EntryType.EXPENSE],
        )

    def pay_entry(
        self,
        uid: str,
        entry_id: str,
        paid_amount: Optional[Decimal] = None,
        payment_date: Optional[date] = None,
        account_id: Optional[str] = None,
        payment_method_id: Optional[str] = None,
    ) -> FinancialEntry:
        """Mark an entry as paid.

        Args:
            uid: Owner id
            entry_id: Entry ID
            paid_amount: Amount paid (defaults to the expected amount)
            payment_date: Payment date (defaults to today)
            account_id: Paying account (defaults to the entry's account)
            payment_method_id: Optional payment method

        Returns:
            The updated entry

        Raises:
            NotFoundError: If the entry or a referenced document does not exist
            ValidationError: If no account is known or the amount is invalid
        """
        entry = self.require_entry(uid, entry_id)
        paid_amount = validate_amount(
            paid_amount if paid_amount is not None else entry.expected_amount, "Paid amount"
        )
        payment_date = payment_date or date.today()
        account_id = account_id or entry.account_id
        if not account_id:
            raise ValidationError("Select the account used to pay this entry")
        payment_method_id = payment_method_id or entry.payment_method_id
        self._check_references(uid, account_id=account_id, payment_method_id=payment_method_id)

        update = {
            "status": EntryStatus.PAID.value,
            "paidAmount": amount_to_document(paid_amount),
            "paymentDate": to_timestamp(payment_date),
            "accountId": account_id,
        }
        if payment_method_id is not None:
            update["paymentMethodId"] = payment_method_id
        self.store.update(uid, FINANCIAL_ENTRIES, entry_id, update)
        return self.require_entry(uid, entry_id)

    def update_entry(
        self,
        uid: str,
        entry_id: str,
        description: Optional[str] = None,
        expected_amount: Optional[Decimal] = None,
        due_date: Optional[date] = None,
        category_id: Optional[str] = None,
        account_id: Optional[str] = None,
        notes: Optional[str] = None,
        status: Optional[EntryStatus] = None,
    ) -> FinancialEntry:
        """Update entry fields; arguments left as None are not changed.

        Raises:
            NotFoundError: If the entry or a referenced document does not exist
            ValidationError: If a new value is invalid
        """
        self.require_entry(uid, entry_id)
        self._check_references(uid, account_id=account_id, category_id=category_id)

        update: dict = {}
        if description is not None:
            update["description"] = validate_description(description)
        if expected_amount is not None:
            update["expectedAmount"] = amount_to_document(validate_amount(expected_amount))
        if due_date is not None:
            update["dueDate"] = to_timestamp(due_date)
        if category_id is not None:
            update["categoryId"] = category_id
        if account_id is not None:
            update["accountId"] = account_id
        if notes is not None:
            update["notes"] = notes
        if status is not None:
            update["status"] = status.value
            if status != EntryStatus.PAID:
                update["paidAmount"] = None
                update["paymentDate"] = None

        if update:
            self.store.update(uid, FINANCIAL_ENTRIES, entry_id, update)
        return self.require_entry(uid, entry_id)

    def delete_entry(self, uid: str, entry_id: str, whole_series: bool = False) -> int:
        """Delete an entry, or every entry of its series.

        Returns:
            Number of deleted entries

        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = self.require_entry(uid, entry_id)
        if not whole_series or entry.recurrence_id is None:
            self.store.delete(uid, FINANCIAL_ENTRIES, entry_id)
            return 1

        series = self.list_entries(uid, recurrence_id=entry.recurrence_id)
        for item in series:
            self.store.delete(uid, FINANCIAL_ENTRIES, item.id)
        return len(series)

    def create_transfer(
        self,
        uid: str,
        description: str,
        amount: Decimal,
        transfer_date: date,
        source_account_id: str,
        destination_account_id: str,
        notes: Optional[str] = None,
    ) -> tuple[str, str]:
        """Record a transfer between two accounts.

        Creates two paid entries flagged as transfers and sharing a recurrence
        id: an expense on the source account and an income on the destination.
        A transfer into a credit-card account is the payment of its bill.

        Returns:
            (source entry ID, destination entry ID)

        Raises:
            ValidationError: If the input is invalid or both accounts are the same
            NotFoundError: If an account does not exist
        """
        description = validate_description(description)
        validate_amount(amount)
        if not source_account_id or not destination_account_id:
            raise ValidationError("Source and destination accounts are required")
        if source_account_id == destination_account_id:
            raise ValidationError("Source and destination accounts must be different")
        self._check_references(uid, account_id=source_account_id)
        self._check_references(uid, account_id=destination_account_id)

        template = FinancialEntry(
            id="",
            uid=uid,
            description=description,
            type=EntryType.EXPENSE,
            status=EntryStatus.PAID,
            expected_amount=amount,
            due_date=transfer_date,
            paid_amount=amount,
            payment_date=transfer_date,
            notes=notes,
            recurrence_id=_new_recurrence_id(),
            created_at=datetime.now(UTC),
            is_transfer=True,
        )
        outgoing = replace(template, account_id=source_account_id)
        incoming = replace(template, type=EntryType.INCOME, account_id=destination_account_id)

        source_id, destination_id = self.store.write_batch(
            uid,
            FINANCIAL_ENTRIES,
            [financial_entry_to_document(outgoing), financial_entry_to_document(incoming)],
        )
        logger.info(
            "Recorded transfer of %s from %s to %s for user %s",
            amount,
            source_account_id,
            destination_account_id,
            uid,
        )
        return source_id, destination_id
