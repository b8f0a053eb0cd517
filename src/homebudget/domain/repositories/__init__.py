"""Repository protocol definitions for domain layer."""

from .budget import BudgetRepository
from .ledger import IncomeRepository, LedgerRepository
from .savings import SavingsRepository
from .settings import MethodologyRepository, SplitSettingRepository

__all__ = [
    "BudgetRepository",
    "IncomeRepository",
    "LedgerRepository",
    "MethodologyRepository",
    "SavingsRepository",
    "SplitSettingRepository",
]
