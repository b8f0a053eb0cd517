"""Concrete repository implementations using SQLModel."""

from .budget import SQLModelBudgetRepository
from .ledger import SQLModelIncomeRepository, SQLModelLedgerRepository
from .savings import SQLModelSavingsRepository
from .settings import SQLModelMethodologyRepository, SQLModelSplitSettingRepository

__all__ = [
    "SQLModelBudgetRepository",
    "SQLModelIncomeRepository",
    "SQLModelLedgerRepository",
    "SQLModelMethodologyRepository",
    "SQLModelSavingsRepository",
    "SQLModelSplitSettingRepository",
]
