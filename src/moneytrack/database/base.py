"""Abstract per-user document store interface."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional

Document = dict[str, Any]
ChangeListener = Callable[[list[Document]], None]

# Collection names, scoped per user.
ACCOUNTS = "accounts"
CATEGORIES = "categories"
PAYMENT_METHODS = "paymentMethods"
DEBTS = "debts"
DEBT_INSTALLMENTS = "debtInstallments"
TRANSACTIONS = "transactions"
FINANCIAL_ENTRIES = "financialEntries"


class DocumentStore(ABC):
    """Abstract document store for moneytrack.

    Every operation is scoped to one user (``uid``) and one named collection.
    Documents are plain dicts; documents returned by reads always include
    their ``id``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage (create tables)."""
        pass

    @abstractmethod
    def add(self, uid: str, collection: str, data: Mapping[str, Any]) -> str:
        """Add a document with a generated id. Returns the document id."""
        pass

    @abstractmethod
    def set(self, uid: str, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        """Create or replace the document with the given id."""
        pass

    @abstractmethod
    def write_batch(
        self, uid: str, collection: str, documents: list[Mapping[str, Any]]
    ) -> list[str]:
        """Add several documents in one commit. Returns their ids in order."""
        pass

    @abstractmethod
    def update(self, uid: str, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        """Merge ``data`` into an existing document.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    def delete(self, uid: str, collection: str, doc_id: str) -> None:
        """Delete a document.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    def get(self, uid: str, collection: str, doc_id: str) -> Optional[Document]:
        """Get a document by id."""
        pass

    @abstractmethod
    def get_all(
        self, uid: str, collection: str, where: Optional[Mapping[str, Any]] = None
    ) -> list[Document]:
        """List the documents of a collection.

        Args:
            uid: Owner id
            collection: Collection name
            where: Optional field -> value equality filters
        """
        pass

    @abstractmethod
    def subscribe(
        self,
        uid: str,
        collection: str,
        on_change: ChangeListener,
        where: Optional[Mapping[str, Any]] = None,
    ) -> Callable[[], None]:
        """Listen to a collection.

        ``on_change`` receives the current snapshot immediately and again after
        every write to the user's collection. Returns an unsubscribe callable.
        """
        pass
