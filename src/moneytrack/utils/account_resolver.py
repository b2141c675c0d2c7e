"""Utility for resolving account names to IDs."""

from moneytrack.domain.account import AccountService


def resolve_account(account_service: AccountService, uid: str, account: str) -> str:
    """Resolve account name or ID to account ID.

    An exact ID match wins over a name match.

    Args:
        account_service: AccountService instance
        uid: Owner id
        account: Account ID or name

    Returns:
        Account ID

    Raises:
        ValueError: If account is not found
    """
    if account_service.get_account(uid, account) is not None:
        return account

    for acc in account_service.list_accounts(uid):
        if acc.name == account:
            return acc.id

    raise ValueError(f"Account '{account}' not found")
