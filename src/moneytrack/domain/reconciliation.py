"""Ledger reconciliation: legacy debts and installments to financial entries.

Before financial entries existed, obligations were tracked as debts with one
document per installment, and payments as separate transactions. This module
rebuilds that history as a financial-entry ledger and bundles it with the
user's reference data into an exportable ``FullBackup``. The store is only
read; nothing is written back.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, UTC
from decimal import Decimal
from typing import Callable, Mapping, Optional, Sequence

from moneytrack.database.base import (
    ACCOUNTS,
    CATEGORIES,
    DEBT_INSTALLMENTS,
    DEBTS,
    PAYMENT_METHODS,
    TRANSACTIONS,
    Document,
    DocumentStore,
)
from moneytrack.database.mappers import (
    account_to_domain,
    category_to_domain,
    debt_to_domain,
    installment_to_domain,
    payment_method_to_domain,
    transaction_to_domain,
)
from moneytrack.domain.entities import (
    Account,
    Category,
    Debt,
    DebtInstallment,
    EntryStatus,
    EntryType,
    FinancialEntry,
    FullBackup,
    InstallmentStatus,
    PaymentMethod,
    Transaction,
)
from moneytrack.domain.errors import StoreAccessError, collection_read_failed

logger = logging.getLogger(__name__)

MIGRATION_NOTE = "Dado migrado da estrutura antiga."


def _default_status_map() -> dict[InstallmentStatus, EntryStatus]:
    # Financial entries have no partial state, so partial installments read as pending
    return {
        InstallmentStatus.PAID: EntryStatus.PAID,
        InstallmentStatus.OVERDUE: EntryStatus.OVERDUE,
        InstallmentStatus.PENDING: EntryStatus.PENDING,
        InstallmentStatus.PARTIAL: EntryStatus.PENDING,
    }


@dataclass(frozen=True)
class ReconciliationRules:
    """Mapping rules applied when converting installments to entries.

    Attributes:
        status_map: Installment status -> entry status. Statuses missing from
            the map fall back to ``default_status``.
        default_status: Entry status for unmapped installment statuses
        default_entry_type: Entry type for every reconciled installment
        entry_type_by_debt_type: Per debt ``type`` override of the entry type,
            e.g. ``{"loan_received": EntryType.INCOME}``
        notes: Text written into each reconciled entry's notes
    """

    status_map: Mapping[InstallmentStatus, EntryStatus] = field(default_factory=_default_status_map)
    default_status: EntryStatus = EntryStatus.PENDING
    default_entry_type: EntryType = EntryType.EXPENSE
    entry_type_by_debt_type: Mapping[str, EntryType] = field(default_factory=dict)
    notes: Optional[str] = MIGRATION_NOTE

    def entry_status(self, status: InstallmentStatus) -> EntryStatus:
        return self.status_map.get(status, self.default_status)

    def entry_type(self, debt: Debt) -> EntryType:
        return self.entry_type_by_debt_type.get(debt.type, self.default_entry_type)


def _paid_amount_or_none(amount: Optional[Decimal]) -> Optional[Decimal]:
    """Keep a paid amount only when it is a positive number."""
    if amount is None or amount.is_nan():
        return None
    return amount if amount > 0 else None


def installment_to_entry(
    installment: DebtInstallment,
    debt: Debt,
    transactions_by_id: Mapping[str, Transaction],
    rules: ReconciliationRules,
    reconciled_at: datetime,
) -> FinancialEntry:
    """Build the financial entry for one installment of a known debt."""
    account_id = None
    payment_method_id = None
    if installment.transaction_ids:
        linked = transactions_by_id.get(installment.transaction_ids[0])
        if linked is not None:
            account_id = linked.account_id or None
            payment_method_id = linked.payment_method_id

    total_installments = debt.total_installments or 0

    return FinancialEntry(
        id=installment.id,
        uid=installment.uid,
        description=f"{debt.description} ({installment.installment_number}/{total_installments})",
        notes=rules.notes,
        type=rules.entry_type(debt),
        status=rules.entry_status(installment.status),
        expected_amount=installment.expected_amount,
        due_date=installment.expected_due_date,
        paid_amount=_paid_amount_or_none(installment.paid_amount),
        payment_date=installment.payment_date,
        category_id=debt.category_id,
        account_id=account_id,
        payment_method_id=payment_method_id,
        recurrence_id=debt.id,
        installment_number=installment.installment_number,
        total_installments=total_installments,
        created_at=installment.created_at or reconciled_at,
    )


def reconcile_legacy_ledger(
    debts: Sequence[Debt],
    installments: Sequence[DebtInstallment],
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    categories: Sequence[Category],
    payment_methods: Sequence[PaymentMethod],
    rules: Optional[ReconciliationRules] = None,
    reconciled_at: Optional[datetime] = None,
) -> FullBackup:
    """Convert legacy debt data into a financial-entry backup.

    Produces exactly one entry per installment whose parent debt exists.
    Installments pointing at a missing debt are skipped without error.
    Accounts, categories and payment methods are carried over unchanged.

    Args:
        debts: Legacy debts
        installments: Legacy debt installments
        transactions: Legacy transactions, used to recover account and
            payment method of paid installments
        accounts: Accounts to carry over
        categories: Categories to carry over
        payment_methods: Payment methods to carry over
        rules: Mapping rules (defaults to ``ReconciliationRules()``)
        reconciled_at: Creation time for installments without one
            (defaults to now)

    Returns:
        FullBackup with the reconciled ledger and reference data
    """
    rules = rules or ReconciliationRules()
    reconciled_at = reconciled_at or datetime.now(UTC)

    debts_by_id = {debt.id: debt for debt in debts}
    transactions_by_id = {txn.id: txn for txn in transactions}

    entries = []
    skipped = 0
    for installment in installments:
        debt = debts_by_id.get(installment.debt_id)
        if debt is None:
            logger.debug(
                "Skipping installment %s: debt %s not found", installment.id, installment.debt_id
            )
            skipped += 1
            continue
        entries.append(
            installment_to_entry(installment, debt, transactions_by_id, rules, reconciled_at)
        )

    logger.info(
        "Reconciled %d financial entries from %d installments (%d orphaned)",
        len(entries),
        len(installments),
        skipped,
    )

    return FullBackup(
        financial_entries=tuple(entries),
        accounts=tuple(accounts),
        categories=tuple(categories),
        payment_methods=tuple(payment_methods),
    )


# Collection name -> document mapper, fetched in one fan-out round
_LEGACY_COLLECTIONS: dict[str, Callable[[Document], object]] = {
    DEBTS: debt_to_domain,
    DEBT_INSTALLMENTS: installment_to_domain,
    TRANSACTIONS: transaction_to_domain,
    ACCOUNTS: account_to_domain,
    CATEGORIES: category_to_domain,
    PAYMENT_METHODS: payment_method_to_domain,
}


class ReconciliationService:
    """Service that reads legacy collections and builds a backup."""

    def __init__(
        self,
        store: DocumentStore,
        rules: Optional[ReconciliationRules] = None,
        max_workers: int = len(_LEGACY_COLLECTIONS),
    ):
        """Initialize reconciliation service.

        Args:
            store: Document store instance
            rules: Mapping rules (defaults to ``ReconciliationRules()``)
            max_workers: Number of concurrent collection reads
        """
        self.store = store
        self.rules = rules or ReconciliationRules()
        self.max_workers = max_workers

    def _read_collection(self, uid: str, collection: str) -> list:
        to_domain = _LEGACY_COLLECTIONS[collection]
        try:
            documents = self.store.get_all(uid, collection)
            return [to_domain(doc) for doc in documents]
        except StoreAccessError:
            raise
        except Exception as e:
            raise StoreAccessError(collection_read_failed(collection, e)) from e

    def fetch_legacy_data(self, uid: str) -> dict[str, list]:
        """Read the six source collections concurrently.

        The reads are independent and joined before returning. If any read
        fails the whole fetch fails; the collections are not read inside a
        shared snapshot, so concurrent writers may leave them mutually
        inconsistent.

        Raises:
            StoreAccessError: If any collection cannot be read
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                collection: executor.submit(self._read_collection, uid, collection)
                for collection in _LEGACY_COLLECTIONS
            }
            data = {collection: future.result() for collection, future in futures.items()}

        logger.debug(
            "Fetched legacy data for user %s: %s",
            uid,
            ", ".join(f"{name}={len(items)}" for name, items in data.items()),
        )
        return data

    def build_backup(self, uid: str) -> FullBackup:
        """Reconcile a user's legacy debts into a financial-entry backup.

        Args:
            uid: Owner id

        Returns:
            FullBackup snapshot of the reconciled ledger and reference data

        Raises:
            StoreAccessError: If any collection cannot be read; no partial
                backup is produced
        """
        data = self.fetch_legacy_data(uid)
        return reconcile_legacy_ledger(
            debts=data[DEBTS],
            installments=data[DEBT_INSTALLMENTS],
            transactions=data[TRANSACTIONS],
            accounts=data[ACCOUNTS],
            categories=data[CATEGORIES],
            payment_methods=data[PAYMENT_METHODS],
            rules=self.rules,
        )
