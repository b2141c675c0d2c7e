"""Shared pytest fixtures for moneytrack tests."""

import os
import tempfile
from decimal import Decimal

import pytest

from moneytrack.database.factories import create_sqlite_store
from moneytrack.domain.account import AccountService
from moneytrack.domain.category import CategoryService
from moneytrack.domain.entities import AccountType
from moneytrack.domain.financial_entry import FinancialEntryService
from moneytrack.domain.payment_method import PaymentMethodService


@pytest.fixture
def temp_db():
    """Create a temporary document store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.db_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def uid():
    """User id used by the tests."""
    return "user-1"


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary store."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary store."""
    return CategoryService(temp_db)


@pytest.fixture
def payment_method_service(temp_db):
    """Create a PaymentMethodService with a temporary store."""
    return PaymentMethodService(temp_db)


@pytest.fixture
def entry_service(temp_db):
    """Create a FinancialEntryService with a temporary store."""
    return FinancialEntryService(temp_db)


@pytest.fixture
def sample_account(account_service, uid):
    """Create a checking account for testing."""
    account_id = account_service.create_account(
        uid, name="Conta Corrente", account_type=AccountType.CHECKING, balance=Decimal("1000")
    )
    return account_service.get_account(uid, account_id)


@pytest.fixture
def credit_card_account(account_service, uid):
    """Create a credit-card account for testing."""
    account_id = account_service.create_account(
        uid, name="Nubank", account_type=AccountType.CREDIT_CARD
    )
    return account_service.get_account(uid, account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
