"""Tests for the financial entry service."""

from datetime import date
from decimal import Decimal

import pytest

from moneytrack.database.base import FINANCIAL_ENTRIES
from moneytrack.domain.entities import (
    EntryStatus,
    EntryType,
    RecurrenceFrequency,
    StatementEntryKind,
    StatementFilters,
)
from moneytrack.domain.errors import NotFoundError, ValidationError
from moneytrack.domain.financial_entry import monthly_due_dates, months_until_year_end


def _add(entry_service, uid, **overrides):
    arguments = dict(
        description="Aluguel",
        expected_amount=Decimal("1500"),
        due_date=date(2024, 3, 10),
        entry_type=EntryType.EXPENSE,
    )
    arguments.update(overrides)
    return entry_service.add_entry(uid, **arguments)


def test_monthly_due_dates_clamp_to_month_end():
    assert monthly_due_dates(date(2024, 1, 31), 4) == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_months_until_year_end():
    assert months_until_year_end(date(2024, 1, 15)) == 12
    assert months_until_year_end(date(2024, 10, 1)) == 3
    assert months_until_year_end(date(2024, 12, 31)) == 1


class TestAddEntry:
    """Tests for creating entries."""

    def test_single_entry(self, entry_service, uid):
        [entry_id] = _add(entry_service, uid, notes="Março")

        entry = entry_service.get_entry(uid, entry_id)
        assert entry.description == "Aluguel"
        assert entry.status == EntryStatus.PENDING
        assert entry.expected_amount == Decimal("1500")
        assert entry.due_date == date(2024, 3, 10)
        assert entry.paid_amount is None
        assert entry.recurrence_id is None
        assert entry.notes == "Março"
        assert entry.created_at is not None

    def test_description_is_trimmed_and_checked(self, entry_service, uid):
        [entry_id] = _add(entry_service, uid, description="  Gás  ")
        assert entry_service.get_entry(uid, entry_id).description == "Gás"

        with pytest.raises(ValidationError, match="at least 3"):
            _add(entry_service, uid, description=" ab ")

    @pytest.mark.parametrize("amount", ["0", "-10", "NaN"])
    def test_amount_must_be_positive(self, entry_service, uid, amount):
        with pytest.raises(ValidationError, match="greater than zero"):
            _add(entry_service, uid, expected_amount=Decimal(amount))

    def test_unknown_references(self, entry_service, uid):
        with pytest.raises(NotFoundError, match="Account"):
            _add(entry_service, uid, account_id="missing")
        with pytest.raises(NotFoundError, match="Category"):
            _add(entry_service, uid, category_id="missing")
        with pytest.raises(NotFoundError, match="Payment method"):
            _add(entry_service, uid, payment_method_id="missing")

    def test_installment_series(self, entry_service, uid):
        ids = _add(
            entry_service,
            uid,
            description="Notebook",
            expected_amount=Decimal("300"),
            due_date=date(2024, 11, 30),
            frequency=RecurrenceFrequency.INSTALLMENT,
            total_installments=3,
        )

        entries = [entry_service.get_entry(uid, i) for i in ids]
        assert [e.due_date for e in entries] == [date(2024, 11, 30), date(2024, 12, 30), date(2025, 1, 30)]
        assert [e.installment_number for e in entries] == [1, 2, 3]
        assert {e.total_installments for e in entries} == {3}
        assert len({e.recurrence_id for e in entries}) == 1
        assert entries[0].recurrence_id is not None

    def test_installment_series_needs_two(self, entry_service, uid):
        with pytest.raises(ValidationError):
            _add(entry_service, uid, frequency=RecurrenceFrequency.INSTALLMENT, total_installments=1)
        with pytest.raises(ValidationError):
            _add(entry_service, uid, frequency=RecurrenceFrequency.INSTALLMENT)

    def test_recurring_runs_to_year_end(self, entry_service, uid):
        ids = _add(
            entry_service,
            uid,
            entry_type=EntryType.INCOME,
            due_date=date(2024, 9, 5),
            frequency=RecurrenceFrequency.RECURRING,
        )

        entries = entry_service.list_entries(uid)
        assert len(ids) == 4
        assert [e.due_date.month for e in entries] == [9, 10, 11, 12]

    def test_pay_now(self, entry_service, uid, sample_account):
        [entry_id] = _add(entry_service, uid, account_id=sample_account.id, pay_now=True)

        entry = entry_service.get_entry(uid, entry_id)
        assert entry.status == EntryStatus.PAID
        assert entry.paid_amount == Decimal("1500")
        assert entry.payment_date == date(2024, 3, 10)

    def test_pay_now_requires_account(self, entry_service, uid):
        with pytest.raises(ValidationError, match="account"):
            _add(entry_service, uid, pay_now=True)

    def test_pay_now_single_only(self, entry_service, uid, sample_account):
        with pytest.raises(ValidationError):
            _add(
                entry_service,
                uid,
                account_id=sample_account.id,
                pay_now=True,
                frequency=RecurrenceFrequency.RECURRING,
            )


class TestListEntries:
    """Tests for listing entries."""

    def test_filters(self, entry_service, uid):
        _add(entry_service, uid, description="Março", due_date=date(2024, 3, 1))
        _add(entry_service, uid, description="Abril", due_date=date(2024, 4, 1))
        _add(entry_service, uid, description="Março 2023", due_date=date(2023, 3, 1))
        series = _add(
            entry_service,
            uid,
            description="Curso",
            due_date=date(2024, 3, 20),
            frequency=RecurrenceFrequency.INSTALLMENT,
            total_installments=2,
        )

        march = entry_service.list_entries(uid, year=2024, month=3)
        assert [e.description for e in march] == ["Março", "Curso"]
        assert len(entry_service.list_entries(uid, year=2024)) == 4
        recurrence_id = entry_service.get_entry(uid, series[0]).recurrence_id
        assert [e.id for e in entry_service.list_entries(uid, recurrence_id=recurrence_id)] == series


class TestStatement:
    """Tests for the filtered statement."""

    @pytest.fixture
    def ledger(self, entry_service, category_service, uid, sample_account, credit_card_account):
        housing = category_service.create_category(uid, "Moradia")
        food = category_service.create_category(uid, "Mercado")
        [salary] = _add(
            entry_service, uid, description="Salário", expected_amount=Decimal("5000"),
            due_date=date(2024, 3, 5), entry_type=EntryType.INCOME,
            account_id=sample_account.id, pay_now=True,
        )
        [rent] = _add(
            entry_service, uid, description="Aluguel", due_date=date(2024, 3, 10),
            category_id=housing, account_id=sample_account.id,
        )
        entry_service.pay_entry(
            uid, rent, paid_amount=Decimal("1450"), payment_date=date(2024, 3, 9)
        )
        [groceries] = _add(
            entry_service, uid, description="Supermercado Extra", expected_amount=Decimal("400"),
            due_date=date(2024, 2, 20), category_id=food, account_id=credit_card_account.id,
        )
        [gas] = _add(entry_service, uid, description="Conta de gás", due_date=date(2024, 4, 2))
        transfer_out, transfer_in = entry_service.create_transfer(
            uid,
            description="Fatura Nubank",
            amount=Decimal("400"),
            transfer_date=date(2024, 3, 15),
            source_account_id=sample_account.id,
            destination_account_id=credit_card_account.id,
        )
        return {
            "salary": salary,
            "rent": rent,
            "groceries": groceries,
            "gas": gas,
            "transfer_out": transfer_out,
            "transfer_in": transfer_in,
            "housing": housing,
            "food": food,
        }

    def test_no_filters_newest_first(self, entry_service, uid, ledger):
        statement = entry_service.statement(uid)

        assert [e.due_date for e in statement.entries] == sorted(
            (e.due_date for e in statement.entries), reverse=True
        )
        assert statement.entries[0].id == ledger["gas"]
        assert len(statement.entries) == 6
        assert statement.total_income == Decimal("5000")
        assert statement.total_expense == Decimal("1450")

    def test_date_range_is_inclusive(self, entry_service, uid, ledger):
        statement = entry_service.statement(
            uid, StatementFilters(date_from=date(2024, 3, 5), date_to=date(2024, 3, 10))
        )

        assert [e.id for e in statement.entries] == [ledger["rent"], ledger["salary"]]

    def test_kind_filter(self, entry_service, uid, ledger):
        transfers = entry_service.statement(uid, StatementFilters(kind=StatementEntryKind.TRANSFER))
        expenses = entry_service.statement(uid, StatementFilters(kind=StatementEntryKind.EXPENSE))

        assert {e.id for e in transfers.entries} == {ledger["transfer_out"], ledger["transfer_in"]}
        assert transfers.total_income == Decimal("0")
        assert transfers.total_expense == Decimal("0")
        assert {e.id for e in expenses.entries} == {ledger["rent"], ledger["groceries"], ledger["gas"]}

    def test_status_filter(self, entry_service, uid, ledger):
        unpaid = entry_service.statement(uid, StatementFilters(paid=False))
        paid = entry_service.statement(uid, StatementFilters(paid=True))

        assert {e.id for e in unpaid.entries} == {ledger["groceries"], ledger["gas"]}
        assert unpaid.total_expense == Decimal("0")
        assert len(paid.entries) == 4

    def test_account_filter(self, entry_service, uid, ledger, credit_card_account):
        statement = entry_service.statement(
            uid, StatementFilters(account_id=credit_card_account.id)
        )

        assert {e.id for e in statement.entries} == {ledger["groceries"], ledger["transfer_in"]}

    def test_category_filter_keeps_transfers(self, entry_service, uid, ledger):
        statement = entry_service.statement(uid, StatementFilters(category_id=ledger["housing"]))

        assert {e.id for e in statement.entries} == {
            ledger["rent"],
            ledger["transfer_out"],
            ledger["transfer_in"],
        }
        assert statement.total_expense == Decimal("1450")

    def test_description_is_case_insensitive(self, entry_service, uid, ledger):
        statement = entry_service.statement(uid, StatementFilters(description="MERCADO"))

        assert [e.id for e in statement.entries] == [ledger["groceries"]]

    def test_missing_paid_amount_counts_as_zero(self, entry_service, temp_db, uid):
        [entry_id] = _add(entry_service, uid, entry_type=EntryType.INCOME)
        temp_db.update(uid, FINANCIAL_ENTRIES, entry_id, {"status": "paid"})

        statement = entry_service.statement(uid)

        assert statement.total_income == Decimal("0")

    def test_by_month(self, entry_service, uid, ledger):
        groups = entry_service.statement(uid).by_month()

        assert [month for month, _ in groups] == ["2024-04", "2024-03", "2024-02"]
        assert [e.id for e in groups[2][1]] == [ledger["groceries"]]
        assert len(groups[1][1]) == 4


class TestPayEntry:
    """Tests for paying entries."""

    def test_pay_with_defaults(self, entry_service, uid, sample_account):
        [entry_id] = _add(entry_service, uid, account_id=sample_account.id)

        entry = entry_service.pay_entry(uid, entry_id)

        assert entry.status == EntryStatus.PAID
        assert entry.paid_amount == Decimal("1500")
        assert entry.payment_date == date.today()
        assert entry.account_id == sample_account.id

    def test_pay_partial_amount_on_other_account(
        self, entry_service, uid, sample_account, credit_card_account
    ):
        [entry_id] = _add(entry_service, uid, account_id=sample_account.id)

        entry = entry_service.pay_entry(
            uid,
            entry_id,
            paid_amount=Decimal("1400"),
            payment_date=date(2024, 3, 9),
            account_id=credit_card_account.id,
        )

        assert entry.paid_amount == Decimal("1400")
        assert entry.payment_date == date(2024, 3, 9)
        assert entry.account_id == credit_card_account.id

    def test_pay_without_account(self, entry_service, uid):
        [entry_id] = _add(entry_service, uid)

        with pytest.raises(ValidationError):
            entry_service.pay_entry(uid, entry_id)

    def test_pay_missing_entry(self, entry_service, uid):
        with pytest.raises(NotFoundError):
            entry_service.pay_entry(uid, "missing")


class TestUpdateAndDelete:
    """Tests for updating and deleting entries."""

    def test_update_fields(self, entry_service, uid):
        [entry_id] = _add(entry_service, uid)

        entry = entry_service.update_entry(
            uid, entry_id, description="Aluguel novo", expected_amount=Decimal("1600"), notes="x"
        )

        assert entry.description == "Aluguel novo"
        assert entry.expected_amount == Decimal("1600")
        assert entry.notes == "x"
        assert entry.due_date == date(2024, 3, 10)

    def test_reopening_clears_payment(self, entry_service, uid, sample_account):
        [entry_id] = _add(entry_service, uid, account_id=sample_account.id, pay_now=True)

        entry = entry_service.update_entry(uid, entry_id, status=EntryStatus.OVERDUE)

        assert entry.status == EntryStatus.OVERDUE
        assert entry.paid_amount is None
        assert entry.payment_date is None

    def test_delete_single(self, entry_service, uid):
        [entry_id] = _add(entry_service, uid)

        assert entry_service.delete_entry(uid, entry_id) == 1
        assert entry_service.get_entry(uid, entry_id) is None

    def test_delete_series(self, entry_service, uid):
        ids = _add(
            entry_service,
            uid,
            frequency=RecurrenceFrequency.INSTALLMENT,
            total_installments=3,
        )

        assert entry_service.delete_entry(uid, ids[1]) == 1
        assert entry_service.delete_entry(uid, ids[0], whole_series=True) == 2
        assert entry_service.list_entries(uid) == []


class TestTransfers:
    """Tests for transfers between accounts."""

    def test_transfer_creates_paired_entries(
        self, entry_service, uid, sample_account, credit_card_account
    ):
        source_id, destination_id = entry_service.create_transfer(
            uid,
            description="Fatura",
            amount=Decimal("850"),
            transfer_date=date(2024, 3, 15),
            source_account_id=sample_account.id,
            destination_account_id=credit_card_account.id,
        )

        outgoing = entry_service.get_entry(uid, source_id)
        incoming = entry_service.get_entry(uid, destination_id)
        assert outgoing.type == EntryType.EXPENSE
        assert outgoing.account_id == sample_account.id
        assert incoming.type == EntryType.INCOME
        assert incoming.account_id == credit_card_account.id
        for entry in (outgoing, incoming):
            assert entry.is_transfer
            assert entry.status == EntryStatus.PAID
            assert entry.paid_amount == Decimal("850")
        assert outgoing.recurrence_id == incoming.recurrence_id

    def test_transfer_to_same_account(self, entry_service, uid, sample_account):
        with pytest.raises(ValidationError, match="different"):
            entry_service.create_transfer(
                uid,
                description="Nada",
                amount=Decimal("1"),
                transfer_date=date(2024, 3, 15),
                source_account_id=sample_account.id,
                destination_account_id=sample_account.id,
            )

    def test_transfer_unknown_account(self, entry_service, uid, sample_account):
        with pytest.raises(NotFoundError):
            entry_service.create_transfer(
                uid,
                description="Fatura",
                amount=Decimal("1"),
                transfer_date=date(2024, 3, 15),
                source_account_id=sample_account.id,
                destination_account_id="missing",
            )
