"""Category domain service."""

import logging
from typing import Iterable, Optional

from moneytrack.database.base import CATEGORIES, DocumentStore
from moneytrack.database.mappers import category_to_document, category_to_domain
from moneytrack.domain.entities import Category as CategoryEntity, CategoryType
from moneytrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    duplicate_name,
)

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, store: DocumentStore):
        """Initialize category service.

        Args:
            store: Document store instance
        """
        self.store = store

    def create_category(
        self,
        uid: str,
        name: str,
        category_type: Optional[CategoryType] = CategoryType.EXPENSE,
        icon: Optional[str] = None,
    ) -> str:
        """Create a category.

        Args:
            uid: Owner id
            name: Category name
            category_type: Income or expense; None leaves the category untagged
            icon: Optional icon name

        Returns:
            Category ID

        Raises:
            ConflictError: If a category with the same name exists
        """
        if self.get_category_by_name(uid, name) is not None:
            raise ConflictError(duplicate_name("Category", name))

        category = CategoryEntity(id="", uid=uid, name=name, icon=icon, type=category_type)
        return self.store.add(uid, CATEGORIES, category_to_document(category))

    def get_category(self, uid: str, category_id: str) -> Optional[CategoryEntity]:
        """Get category by ID.

        Returns:
            Category entity or None if not found
        """
        document = self.store.get(uid, CATEGORIES, category_id)
        if document is None:
            return None
        return category_to_domain(document)

    def require_category(self, uid: str, category_id: str) -> CategoryEntity:
        """Get category by ID or raise NotFoundError."""
        category = self.get_category(uid, category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def get_category_by_name(self, uid: str, name: str) -> Optional[CategoryEntity]:
        """Get category by exact name."""
        for category in self.list_categories(uid):
            if category.name == name:
                return category
        return None

    def list_categories(
        self, uid: str, category_type: Optional[CategoryType] = None
    ) -> list[CategoryEntity]:
        """List categories sorted by name, optionally only those of one type."""
        categories = [category_to_domain(doc) for doc in self.store.get_all(uid, CATEGORIES)]
        if category_type is not None:
            categories = [c for c in categories if c.type == category_type]
        return sorted(categories, key=lambda c: c.name)

    def list_untagged_categories(self, uid: str) -> list[CategoryEntity]:
        """List categories that still have no income/expense type."""
        return [c for c in self.list_categories(uid) if c.is_untagged]

    def migrate_category_types(
        self,
        uid: str,
        income_ids: Iterable[str],
        untagged_ids: Optional[Iterable[str]] = None,
    ) -> dict[CategoryType, int]:
        """Assign a type to untagged categories.

        Every category in ``untagged_ids`` becomes ``income`` when it is also in
        ``income_ids`` and ``expense`` otherwise.

        Args:
            uid: Owner id
            income_ids: IDs of the categories to mark as income
            untagged_ids: IDs to migrate (defaults to all untagged categories)

        Returns:
            Number of categories set to each type

        Raises:
            ValidationError: If an income ID is not among the migrated IDs
        """
        if untagged_ids is None:
            untagged_ids = [c.id for c in self.list_untagged_categories(uid)]
        untagged = list(dict.fromkeys(untagged_ids))
        income = set(income_ids)

        unknown = income.difference(untagged)
        if unknown:
            raise ValidationError(
                f"Income categories must be among the migrated categories: {', '.join(sorted(unknown))}"
            )

        counts = {CategoryType.INCOME: 0, CategoryType.EXPENSE: 0}
        for category_id in untagged:
            self.require_category(uid, category_id)
            category_type = CategoryType.INCOME if category_id in income else CategoryType.EXPENSE
            self.store.update(uid, CATEGORIES, category_id, {"type": category_type.value})
            counts[category_type] += 1

        logger.info(
            "Migrated category types for user %s: %d income, %d expense",
            uid,
            counts[CategoryType.INCOME],
            counts[CategoryType.EXPENSE],
        )
        return counts
