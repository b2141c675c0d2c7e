"""Monthly summary domain service.

The figures follow the credit-card cycle convention used across the app:

* expenses charged to a credit card in the previous month form the bill that
  falls due this month, so they are added to this month's expense forecast;
* a transfer *into* a credit-card account is the payment of that bill and is
  counted as realized expense, never as income.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Sequence

from dateutil.relativedelta import relativedelta

from moneytrack.database.base import ACCOUNTS, FINANCIAL_ENTRIES, DocumentStore
from moneytrack.database.mappers import account_to_domain, financial_entry_to_domain
from moneytrack.domain.entities import (
    Account,
    EntryStatus,
    EntryType,
    FinancialEntry,
    MonthlySummary,
    SummaryFigures,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _in_month(day: date, year: int, month: int) -> bool:
    return day.year == year and day.month == month


def _sum_expected(entries: Iterable[FinancialEntry]) -> Decimal:
    return sum((e.expected_amount for e in entries), ZERO)


def _sum_paid(entries: Iterable[FinancialEntry]) -> Decimal:
    """Sum paid amounts of settled entries; a missing paid amount counts as zero."""
    return sum(
        (
            e.paid_amount if e.paid_amount is not None else ZERO
            for e in entries
            if e.status == EntryStatus.PAID
        ),
        ZERO,
    )


def _figures(forecast: Decimal, actual: Decimal) -> SummaryFigures:
    return SummaryFigures(forecast=forecast, actual=actual, balance=forecast - actual)


def build_monthly_summary(
    entries: Sequence[FinancialEntry],
    accounts: Sequence[Account],
    reference_date: date,
) -> MonthlySummary:
    """Compute forecast, actual and balance figures for a calendar month.

    Pure function: nothing outside the arguments is read or modified.

    Args:
        entries: Financial entries of the ledger
        accounts: Accounts, used to find credit cards
        reference_date: Any day inside the month to summarize

    Returns:
        MonthlySummary for the month of ``reference_date``
    """
    year, month = reference_date.year, reference_date.month
    previous = reference_date - relativedelta(months=1)

    credit_card_ids = {acc.id for acc in accounts if acc.is_credit_card}

    previous_cycle_bill = _sum_expected(
        e
        for e in entries
        if _in_month(e.due_date, previous.year, previous.month)
        and e.type == EntryType.EXPENSE
        and not e.is_transfer
        and e.account_id in credit_card_ids
    )

    current = [e for e in entries if _in_month(e.due_date, year, month)]

    incomes = [e for e in current if e.type == EntryType.INCOME and not e.is_transfer]
    income = _figures(_sum_expected(incomes), _sum_paid(incomes))

    expenses = [e for e in current if e.type == EntryType.EXPENSE and not e.is_transfer]
    bill_payments = [
        e
        for e in current
        if e.is_transfer and e.type == EntryType.INCOME and e.account_id in credit_card_ids
    ]
    expense = _figures(
        _sum_expected(expenses) + previous_cycle_bill,
        _sum_paid(expenses) + _sum_expected(bill_payments),
    )

    result = _figures(income.forecast - expense.forecast, income.actual - expense.actual)

    return MonthlySummary(
        year=year,
        month=month,
        income=income,
        expenses=expense,
        result=result,
    )


class SummaryService:
    """Service for computing monthly summaries from the store."""

    def __init__(self, store: DocumentStore):
        """Initialize summary service.

        Args:
            store: Document store instance
        """
        self.store = store

    def load_ledger(self, uid: str) -> tuple[list[FinancialEntry], list[Account]]:
        """Load a user's financial entries and accounts."""
        entries = [
            financial_entry_to_domain(doc)
            for doc in self.store.get_all(uid, FINANCIAL_ENTRIES)
        ]
        accounts = [account_to_domain(doc) for doc in self.store.get_all(uid, ACCOUNTS)]
        return entries, accounts

    def get_monthly_summary(self, uid: str, reference_date: date) -> MonthlySummary:
        """Compute the summary of the month containing ``reference_date``.

        Args:
            uid: Owner id
            reference_date: Any day inside the month to summarize

        Returns:
            MonthlySummary for that month
        """
        entries, accounts = self.load_ledger(uid)
        logger.debug(
            "Summarizing %d entries over %d accounts for %s-%02d",
            len(entries),
            len(accounts),
            reference_date.year,
            reference_date.month,
        )
        return build_monthly_summary(entries, accounts, reference_date)

    def watch_monthly_summary(
        self,
        uid: str,
        reference_date: date,
        on_summary: Callable[[MonthlySummary], None],
    ) -> Callable[[], None]:
        """Recompute the summary whenever the user's entries or accounts change.

        ``on_summary`` is called once per store notification, starting with
        the initial snapshots. Returns a callable that stops watching.
        """
        state: dict[str, list] = {}

        def recompute() -> None:
            if "entries" in state and "accounts" in state:
                on_summary(build_monthly_summary(state["entries"], state["accounts"], reference_date))

        def on_entries(documents: list[dict]) -> None:
            state["entries"] = [financial_entry_to_domain(doc) for doc in documents]
            recompute()

        def on_accounts(documents: list[dict]) -> None:
            state["accounts"] = [account_to_domain(doc) for doc in documents]
            recompute()

        stop_entries = self.store.subscribe(uid, FINANCIAL_ENTRIES, on_entries)
        stop_accounts = self.store.subscribe(uid, ACCOUNTS, on_accounts)

        def stop() -> None:
            stop_entries()
            stop_accounts()

        return stop
