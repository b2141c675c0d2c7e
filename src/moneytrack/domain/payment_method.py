"""Payment method domain service."""

from typing import Optional

from moneytrack.database.base import PAYMENT_METHODS, DocumentStore
from moneytrack.database.mappers import payment_method_to_document, payment_method_to_domain
from moneytrack.domain.entities import PaymentMethod as PaymentMethodEntity
from moneytrack.domain.errors import (
    ConflictError,
    NotFoundError,
    duplicate_name,
    payment_method_not_found,
)


class PaymentMethodService:
    """Service for managing payment methods."""

    def __init__(self, store: DocumentStore):
        """Initialize payment method service.

        Args:
            store: Document store instance
        """
        self.store = store

    def create_payment_method(
        self,
        uid: str,
        name: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        default_account_id: Optional[str] = None,
    ) -> str:
        """Create an active payment method.

        Raises:
            ConflictError: If a payment method with the same name exists
        """
        for pm in self.list_payment_methods(uid):
            if pm.name == name:
                raise ConflictError(duplicate_name("Payment method", name))

        payment_method = PaymentMethodEntity(
            id="",
            uid=uid,
            name=name,
            description=description,
            icon=icon,
            default_account_id=default_account_id,
        )
        return self.store.add(uid, PAYMENT_METHODS, payment_method_to_document(payment_method))

    def get_payment_method(self, uid: str, payment_method_id: str) -> Optional[PaymentMethodEntity]:
        """Get payment method by ID."""
        document = self.store.get(uid, PAYMENT_METHODS, payment_method_id)
        if document is None:
            return None
        return payment_method_to_domain(document)

    def list_payment_methods(self, uid: str, active_only: bool = False) -> list[PaymentMethodEntity]:
        """List payment methods sorted by name."""
        methods = [payment_method_to_domain(doc) for doc in self.store.get_all(uid, PAYMENT_METHODS)]
        if active_only:
            methods = [pm for pm in methods if pm.is_active]
        return sorted(methods, key=lambda pm: pm.name)

    def set_active(self, uid: str, payment_method_id: str, is_active: bool) -> None:
        """Activate or deactivate a payment method.

        Raises:
            NotFoundError: If the payment method does not exist
        """
        if self.get_payment_method(uid, payment_method_id) is None:
            raise NotFoundError(payment_method_not_found(payment_method_id))
        self.store.update(uid, PAYMENT_METHODS, payment_method_id, {"isActive": is_active})
