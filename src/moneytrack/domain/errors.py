"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or document does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class StoreAccessError(DomainError):
    """Reading from or writing to the document store failed."""


def document_not_found(collection: str, doc_id: str) -> str:
    """Return message for a missing document."""
    return f"Document '{doc_id}' not found in {collection}"


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def payment_method_not_found(payment_method_id: str) -> str:
    """Return message for missing payment method."""
    return f"Payment method {payment_method_id} not found"


def entry_not_found(entry_id: str) -> str:
    """Return message for missing financial entry."""
    return f"Financial entry {entry_id} not found"


def duplicate_name(kind: str, name: str) -> str:
    """Return message for a name that is already taken."""
    return f"{kind} with name '{name}' already exists"


def account_delete_blocked(account_id: str, entry_count: int) -> str:
    """Return message when account still has financial entries."""
    return (
        f"Cannot delete account {account_id}: it has "
        f"{entry_count} financial entr{'ies' if entry_count != 1 else 'y'}. "
        "Please reassign or delete them first."
    )


def collection_read_failed(collection: str, error: Exception) -> str:
    """Return message when a collection could not be read."""
    return f"Could not read {collection}: {error}"
