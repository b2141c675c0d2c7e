"""Domain model entities for moneytrack.

These are pure data classes representing business concepts, independent of
how the document store lays them out. Documents are converted to and from
these entities by ``moneytrack.database.mappers``.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class EntryType(str, Enum):
    """Direction of a financial entry."""

    INCOME = "income"
    EXPENSE = "expense"


class EntryStatus(str, Enum):
    """Settlement state of a financial entry."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class InstallmentStatus(str, Enum):
    """Settlement state of a legacy debt installment."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    PARTIAL = "partial"


class AccountType(str, Enum):
    """Kind of money container."""

    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    OTHER = "other"


class CategoryType(str, Enum):
    """Bucket a category is aggregated into."""

    INCOME = "income"
    EXPENSE = "expense"


class RecurrenceFrequency(str, Enum):
    """How a new entry is expanded into a series."""

    SINGLE = "single"
    RECURRING = "recurring"
    INSTALLMENT = "installment"


@dataclass(frozen=True)
class Account:
    """Account domain entity (wallet, bank account, credit card)."""

    id: str
    uid: str
    name: str
    balance: Optional[Decimal] = None
    icon: Optional[str] = None
    type: AccountType = AccountType.OTHER
    default_id: Optional[str] = None

    @property
    def is_credit_card(self) -> bool:
        return self.type == AccountType.CREDIT_CARD


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: str
    uid: str
    name: str
    icon: Optional[str] = None
    type: Optional[CategoryType] = None
    default_id: Optional[str] = None

    @property
    def is_untagged(self) -> bool:
        """True while the category has not been typed as income or expense."""
        return self.type is None


@dataclass(frozen=True)
class PaymentMethod:
    """Payment method domain entity."""

    id: str
    uid: str
    name: str
    description: Optional[str] = None
    is_active: bool = True
    icon: Optional[str] = None
    default_account_id: Optional[str] = None
    default_id: Optional[str] = None


@dataclass(frozen=True)
class Debt:
    """Legacy debt domain entity."""

    id: str
    uid: str
    description: str
    original_amount: Decimal
    type: str
    start_date: date
    current_balance: Decimal
    paid_installments: int = 0
    total_installments: Optional[int] = None
    total_repayment_amount: Optional[Decimal] = None
    is_recurring: bool = False
    category_id: Optional[str] = None
    end_date: Optional[date] = None
    interest_rate: Optional[Decimal] = None
    fine_rate: Optional[Decimal] = None
    expected_installment_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class DebtInstallment:
    """Legacy debt installment domain entity."""

    id: str
    uid: str
    debt_id: str
    installment_number: int
    expected_due_date: date
    expected_amount: Decimal
    paid_amount: Decimal = Decimal("0")
    remaining_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    status: InstallmentStatus = InstallmentStatus.PENDING
    payment_date: Optional[date] = None
    transaction_ids: tuple[str, ...] = ()
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Legacy transaction domain entity."""

    id: str
    uid: str
    account_id: str
    type: EntryType
    description: str
    amount: Decimal
    date: date
    category_id: Optional[str] = None
    debt_installment_id: Optional[str] = None
    is_loan_income: bool = False
    is_loan_payment: bool = False
    payment_method_id: Optional[str] = None
    interest_paid: Optional[Decimal] = None
    discount_obtained: Optional[Decimal] = None


@dataclass(frozen=True)
class FinancialEntry:
    """Unified ledger row: a forecast amount and, once settled, its payment."""

    id: str
    uid: str
    description: str
    type: EntryType
    status: EntryStatus
    expected_amount: Decimal
    due_date: date
    paid_amount: Optional[Decimal] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    category_id: Optional[str] = None
    account_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    recurrence_id: Optional[str] = None
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    created_at: Optional[datetime] = None
    is_transfer: bool = False


@dataclass(frozen=True)
class FullBackup:
    """Exportable snapshot of a user's ledger and reference data."""

    financial_entries: tuple[FinancialEntry, ...] = ()
    accounts: tuple[Account, ...] = ()
    categories: tuple[Category, ...] = ()
    payment_methods: tuple[PaymentMethod, ...] = ()


@dataclass(frozen=True)
class SummaryFigures:
    """Forecast, actual and remaining figures for one bucket."""

    forecast: Decimal
    actual: Decimal
    balance: Decimal

    def to_dict(self) -> dict[str, Decimal]:
        return {
            "previsto": self.forecast,
            "realizado": self.actual,
            "saldo": self.balance,
        }


@dataclass(frozen=True)
class MonthlySummary:
    """Income, expense and net figures for one calendar month."""

    year: int
    month: int
    income: SummaryFigures
    expenses: SummaryFigures
    result: SummaryFigures

    # Aliases kept for consumers of the older single-bucket summary.
    @property
    def total_previsto(self) -> Decimal:
        return self.expenses.forecast

    @property
    def total_pago(self) -> Decimal:
        return self.expenses.actual

    @property
    def falta_pagar(self) -> Decimal:
        return self.expenses.balance

    @property
    def total_receitas(self) -> Decimal:
        return self.income.actual

    @property
    def total_despesas(self) -> Decimal:
        return self.expenses.actual

    def to_dict(self) -> dict:
        """Return the summary in the shape consumed by display widgets."""
        return {
            "receitas": self.income.to_dict(),
            "despesas": self.expenses.to_dict(),
            "resultado": self.result.to_dict(),
            "totalPrevisto": self.total_previsto,
            "totalPago": self.total_pago,
            "faltaPagar": self.falta_pagar,
            "totalReceitas": self.total_receitas,
            "totalDespesas": self.total_despesas,
        }


class StatementEntryKind(str, Enum):
    """Entry kinds a statement can be restricted to."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class StatementFilters:
    """Criteria for a statement query; None leaves a criterion open.

    ``paid`` selects paid entries when True and every other status when
    False. The category criterion does not apply to transfers.
    """

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    kind: Optional[StatementEntryKind] = None
    paid: Optional[bool] = None
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    description: Optional[str] = None
    recurrence_id: Optional[str] = None


@dataclass(frozen=True)
class Statement:
    """Filtered entries, newest due date first, with paid totals."""

    entries: tuple[FinancialEntry, ...]
    total_income: Decimal
    total_expense: Decimal

    def by_month(self) -> list[tuple[str, list[FinancialEntry]]]:
        """Group entries by due month ("YYYY-MM"), newest month first."""
        groups: dict[str, list[FinancialEntry]] = {}
        for entry in self.entries:
            groups.setdefault(entry.due_date.strftime("%Y-%m"), []).append(entry)
        return sorted(groups.items(), key=lambda item: item[0], reverse=True)
