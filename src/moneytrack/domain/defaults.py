"""Default reference data for new users and the seeding service."""

import logging
from dataclasses import dataclass, field

from moneytrack.database.base import (
    ACCOUNTS,
    CATEGORIES,
    DEBTS,
    PAYMENT_METHODS,
    DocumentStore,
)
from moneytrack.domain.entities import AccountType, CategoryType

logger = logging.getLogger(__name__)

# (default_id, name, icon)
DEFAULT_CATEGORIES = [
    ("default-moradia", "Moradia", "fa6-solid:house"),
    ("default-aluguel", "Aluguel", "fa6-solid:building-user"),
    ("default-contas-fixas", "Contas Fixas", "fa6-solid:file-invoice-dollar"),
    ("default-internet", "Internet", "fa6-solid:wifi"),
    ("default-celular", "Celular", "fa6-solid:mobile-screen-button"),
    ("default-assinaturas", "Assinaturas", "fa6-solid:arrows-rotate"),
    ("default-emprestimo", "Empréstimo", "fa6-solid:hand-holding-dollar"),
    ("default-cartao-credito", "Cartão de Crédito", "fa6-solid:credit-card"),
    ("default-investimentos", "Investimentos", "fa6-solid:arrow-trend-up"),
    ("default-saude", "Saúde", "fa6-solid:briefcase-medical"),
    ("default-educacao", "Educação", "fa6-solid:graduation-cap"),
    ("default-lazer", "Lazer", "fa6-solid:martini-glass-citrus"),
    ("default-restaurantes", "Restaurantes", "fa6-solid:utensils"),
    ("default-transporte", "Transporte", "fa6-solid:bus"),
    ("default-compras", "Compras", "fa6-solid:bag-shopping"),
    ("default-academia", "Academia", "fa6-solid:dumbbell"),
    ("default-pets", "Pets", "fa6-solid:paw"),
    ("default-telefonia", "Telefonia", "fa6-solid:phone"),
    ("default-financiamento", "Financiamento", "fa6-solid:file-contract"),
    ("default-transferencias", "Transferências", "fa6-solid:money-bill-transfer"),
    ("default-outras-despesas", "Outras Despesas", "fa6-solid:box-archive"),
]

# (default_id, name, description, icon)
DEFAULT_PAYMENT_METHODS = [
    ("default-dinheiro", "Dinheiro", "Pagamento em Dinheiro", "fa6-solid:money-bill-wave"),
    ("default-pix", "PIX", "Pagamento em PIX", "fa6-brands:pix"),
    ("default-cartao-credito-pm", "Crédito", "Pagamento com Cartão de Crédito", "fa6-solid:credit-card"),
    ("default-cartao-debito", "Débito", "Pagamento com Cartão de Débito", "fa6-solid:id-card"),
    ("default-boleto", "Boleto", "Pagamento de Boleto", "fa6-solid:barcode"),
]

DEFAULT_ACCOUNT = ("default-carteira", "Carteira", "fa6-solid:wallet")

# Debts without a category are filed here
FALLBACK_DEBT_CATEGORY = "Outras Despesas"


@dataclass
class SeedReport:
    """What a seeding run created or changed."""

    accounts: list[str] = field(default_factory=list)
    payment_methods: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    debts_categorized: int = 0

    @property
    def changed(self) -> bool:
        return bool(
            self.accounts or self.payment_methods or self.categories or self.debts_categorized
        )


class DefaultsService:
    """Service that fills in missing default reference data."""

    def __init__(self, store: DocumentStore):
        """Initialize defaults service.

        Args:
            store: Document store instance
        """
        self.store = store

    def seed_defaults(self, uid: str) -> SeedReport:
        """Create missing defaults for a user.

        * the default wallet account, when the user has no account at all;
        * each default payment method and category whose name is not taken;
        * the fallback category on legacy debts that have none.

        Running it again creates nothing new.
        """
        report = SeedReport()

        if not self.store.get_all(uid, ACCOUNTS):
            default_id, name, icon = DEFAULT_ACCOUNT
            self.store.add(
                uid,
                ACCOUNTS,
                {
                    "uid": uid,
                    "name": name,
                    "balance": "0",
                    "icon": icon,
                    "type": AccountType.OTHER.value,
                    "defaultId": default_id,
                },
            )
            report.accounts.append(name)

        existing_methods = {doc.get("name") for doc in self.store.get_all(uid, PAYMENT_METHODS)}
        for default_id, name, description, icon in DEFAULT_PAYMENT_METHODS:
            if name in existing_methods:
                continue
            self.store.add(
                uid,
                PAYMENT_METHODS,
                {
                    "uid": uid,
                    "name": name,
                    "description": description,
                    "icon": icon,
                    "isActive": True,
                    "defaultId": default_id,
                },
            )
            report.payment_methods.append(name)

        category_ids = {doc.get("name"): doc["id"] for doc in self.store.get_all(uid, CATEGORIES)}
        for default_id, name, icon in DEFAULT_CATEGORIES:
            if name in category_ids:
                continue
            category_ids[name] = self.store.add(
                uid,
                CATEGORIES,
                {
                    "uid": uid,
                    "name": name,
                    "icon": icon,
                    "type": CategoryType.EXPENSE.value,
                    "defaultId": default_id,
                },
            )
            report.categories.append(name)

        fallback_id = category_ids.get(FALLBACK_DEBT_CATEGORY)
        if fallback_id is not None:
            for debt in self.store.get_all(uid, DEBTS):
                if not debt.get("categoryId"):
                    self.store.update(uid, DEBTS, debt["id"], {"categoryId": fallback_id})
                    report.debts_categorized += 1

        logger.info(
            "Seeded defaults for user %s: %d accounts, %d payment methods, %d categories, %d debts",
            uid,
            len(report.accounts),
            len(report.payment_methods),
            len(report.categories),
            report.debts_categorized,
        )
        return report
