"""Domain layer for moneytrack application."""

# Services are imported lazily: the store mappers import domain.entities,
# and the services import the mappers.
_SERVICES = {
    "AccountService": "moneytrack.domain.account",
    "CategoryService": "moneytrack.domain.category",
    "PaymentMethodService": "moneytrack.domain.payment_method",
    "FinancialEntryService": "moneytrack.domain.financial_entry",
    "SummaryService": "moneytrack.domain.summary",
    "ReconciliationService": "moneytrack.domain.reconciliation",
    "DefaultsService": "moneytrack.domain.defaults",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
