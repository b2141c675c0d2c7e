"""Tests for account service and commands."""

from datetime import date
from decimal import Decimal

import pytest
from moneytrack.cli.main import cli
from moneytrack.domain.entities import AccountType, EntryType
from moneytrack.domain.errors import ConflictError, DependencyError, NotFoundError
from moneytrack.utils.account_resolver import resolve_account


def test_create_and_list_accounts(account_service, uid):
    account_service.create_account(uid, "Poupança", AccountType.SAVINGS, Decimal("10"))
    account_service.create_account(uid, "Carteira")

    accounts = account_service.list_accounts(uid)

    assert [a.name for a in accounts] == ["Carteira", "Poupança"]
    assert accounts[0].type == AccountType.OTHER
    assert accounts[1].balance == Decimal("10")


def test_create_duplicate_account(account_service, uid):
    account_service.create_account(uid, "Carteira")

    with pytest.raises(ConflictError, match="already exists"):
        account_service.create_account(uid, "Carteira")


def test_same_name_for_different_users(account_service, uid):
    account_service.create_account(uid, "Carteira")
    account_service.create_account("other", "Carteira")

    assert len(account_service.list_accounts("other")) == 1


def test_rename_account(account_service, uid, sample_account):
    account_service.rename_account(uid, sample_account.id, "Banco")

    assert account_service.get_account(uid, sample_account.id).name == "Banco"


def test_rename_to_taken_name(account_service, uid, sample_account, credit_card_account):
    with pytest.raises(ConflictError):
        account_service.rename_account(uid, sample_account.id, credit_card_account.name)


def test_require_missing_account(account_service, uid):
    with pytest.raises(NotFoundError):
        account_service.require_account(uid, "missing")


def test_delete_account(account_service, uid, sample_account):
    account_service.delete_account(uid, sample_account.id)

    assert account_service.get_account(uid, sample_account.id) is None


def test_delete_account_with_entries(account_service, entry_service, uid, sample_account):
    entry_service.add_entry(
        uid,
        description="Aluguel",
        expected_amount=Decimal("1500"),
        due_date=date(2024, 3, 10),
        entry_type=EntryType.EXPENSE,
        account_id=sample_account.id,
    )

    with pytest.raises(DependencyError, match="1 financial entry"):
        account_service.delete_account(uid, sample_account.id)


def test_resolve_account_by_id_or_name(account_service, uid, sample_account):
    assert resolve_account(account_service, uid, sample_account.id) == sample_account.id
    assert resolve_account(account_service, uid, "Conta Corrente") == sample_account.id
    with pytest.raises(ValueError, match="not found"):
        resolve_account(account_service, uid, "Unknown")


def test_account_create_command(cli_runner, temp_db, uid):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.db_path, "--user", uid,
            "account", "create", "Nubank", "--type", "credit_card", "--balance", "1.234,56",
        ],
    )

    assert result.exit_code == 0
    assert "Created account 'Nubank'" in result.output
    assert "ID:" in result.output
    account = temp_db.get_all(uid, "accounts")[0]
    assert account["type"] == "credit_card"
    assert account["balance"] == "1234.56"


def test_account_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.db_path, "account", "list"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_create_duplicate_command(cli_runner, temp_db):
    args = ["--db-path", temp_db.db_path, "account", "create", "Carteira"]
    assert cli_runner.invoke(cli, args).exit_code == 0

    result = cli_runner.invoke(cli, args)

    assert result.exit_code == 1
    assert "already exists" in result.output.lower()


def test_account_delete_command(cli_runner, temp_db, uid, sample_account):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.db_path, "--user", uid, "account", "delete", "Conta Corrente"],
        input="y\n",
    )

    assert result.exit_code == 0
    assert "Deleted account 'Conta Corrente'" in result.output
    assert temp_db.get_all(uid, "accounts") == []
