"""Account domain service."""

import logging
from decimal import Decimal
from typing import Optional

from moneytrack.database.base import ACCOUNTS, FINANCIAL_ENTRIES, DocumentStore
from moneytrack.database.mappers import account_to_document, account_to_domain
from moneytrack.domain.entities import Account as AccountEntity, AccountType
from moneytrack.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    account_delete_blocked,
    account_not_found,
    duplicate_name,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, store: DocumentStore):
        """Initialize account service.

        Args:
            store: Document store instance
        """
        self.store = store

    def create_account(
        self,
        uid: str,
        name: str,
        account_type: AccountType = AccountType.OTHER,
        balance: Optional[Decimal] = None,
        icon: Optional[str] = None,
    ) -> str:
        """Create a new account.

        Args:
            uid: Owner id
            name: Account name
            account_type: Kind of account (credit cards get billing-cycle handling)
            balance: Optional opening balance
            icon: Optional icon name

        Returns:
            Account ID

        Raises:
            ConflictError: If account name already exists
        """
        for acc in self.list_accounts(uid):
            if acc.name == name:
                raise ConflictError(duplicate_name("Account", name))

        account = AccountEntity(
            id="", uid=uid, name=name, balance=balance, icon=icon, type=account_type
        )
        account_id = self.store.add(uid, ACCOUNTS, account_to_document(account))
        logger.info("Created account '%s' (%s) for user %s", name, account_id, uid)
        return account_id

    def get_account(self, uid: str, account_id: str) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        document = self.store.get(uid, ACCOUNTS, account_id)
        if document is None:
            return None
        return account_to_domain(document)

    def require_account(self, uid: str, account_id: str) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.get_account(uid, account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, uid: str) -> list[AccountEntity]:
        """List all accounts of a user, sorted by name."""
        accounts = [account_to_domain(doc) for doc in self.store.get_all(uid, ACCOUNTS)]
        return sorted(accounts, key=lambda acc: acc.name)

    def rename_account(self, uid: str, account_id: str, name: str) -> None:
        """Rename an account.

        Raises:
            NotFoundError: If account not found
            ConflictError: If name already exists
        """
        self.require_account(uid, account_id)

        for acc in self.list_accounts(uid):
            if acc.id != account_id and acc.name == name:
                raise ConflictError(duplicate_name("Account", name))

        self.store.update(uid, ACCOUNTS, account_id, {"name": name})

    def delete_account(self, uid: str, account_id: str) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If account not found
            DependencyError: If financial entries still reference the account
        """
        self.require_account(uid, account_id)

        entry_count = len(self.store.get_all(uid, FINANCIAL_ENTRIES, where={"accountId": account_id}))
        if entry_count > 0:
            raise DependencyError(account_delete_blocked(account_id, entry_count))

        self.store.delete(uid, ACCOUNTS, account_id)
