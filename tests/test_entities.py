"""Tests for domain entities."""

import pytest
from datetime import date
from decimal import Decimal

from moneytrack.domain.entities import (
    Account,
    AccountType,
    Category,
    CategoryType,
    EntryStatus,
    EntryType,
    FinancialEntry,
    MonthlySummary,
    SummaryFigures,
)


class TestAccount:
    """Tests for Account entity."""

    def test_defaults(self):
        """Test an Account without type is 'other' and has no balance."""
        account = Account(id="a1", uid="u", name="Carteira")
        assert account.type == AccountType.OTHER
        assert account.balance is None
        assert not account.is_credit_card

    def test_credit_card(self):
        account = Account(id="a1", uid="u", name="Nubank", type=AccountType.CREDIT_CARD)
        assert account.is_credit_card

    def test_account_immutability(self):
        """Test that Account entities are immutable."""
        account = Account(id="a1", uid="u", name="Carteira")
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            account.name = "New Name"


class TestCategory:
    """Tests for Category entity."""

    def test_untagged(self):
        assert Category(id="c1", uid="u", name="Outros").is_untagged
        assert not Category(id="c1", uid="u", name="Salário", type=CategoryType.INCOME).is_untagged


class TestFinancialEntry:
    """Tests for FinancialEntry entity."""

    def test_create_entry(self):
        entry = FinancialEntry(
            id="e1",
            uid="u",
            description="Aluguel",
            type=EntryType.EXPENSE,
            status=EntryStatus.PENDING,
            expected_amount=Decimal("1500"),
            due_date=date(2024, 3, 10),
        )
        assert entry.paid_amount is None
        assert entry.payment_date is None
        assert entry.is_transfer is False

    def test_enum_values(self):
        assert EntryType("income") == EntryType.INCOME
        assert EntryStatus.OVERDUE.value == "overdue"


class TestMonthlySummary:
    """Tests for MonthlySummary entity."""

    def _summary(self):
        return MonthlySummary(
            year=2024,
            month=3,
            income=SummaryFigures(Decimal("1000"), Decimal("800"), Decimal("200")),
            expenses=SummaryFigures(Decimal("600"), Decimal("450"), Decimal("150")),
            result=SummaryFigures(Decimal("400"), Decimal("350"), Decimal("50")),
        )

    def test_aliases(self):
        summary = self._summary()
        assert summary.total_previsto == Decimal("600")
        assert summary.total_pago == Decimal("450")
        assert summary.falta_pagar == Decimal("150")
        assert summary.total_receitas == Decimal("800")
        assert summary.total_despesas == Decimal("450")

    def test_to_dict(self):
        data = self._summary().to_dict()
        assert data["receitas"] == {
            "previsto": Decimal("1000"),
            "realizado": Decimal("800"),
            "saldo": Decimal("200"),
        }
        assert data["resultado"]["saldo"] == Decimal("50")
        assert set(data) == {
            "receitas",
            "despesas",
            "resultado",
            "totalPrevisto",
            "totalPago",
            "faltaPagar",
            "totalReceitas",
            "totalDespesas",
        }
