"""SQLModel table exports."""

from .budget import Budget, BudgetAssignment, BudgetLayout, BudgetMonth
from .income import IncomeSourceRecord
from .ledger import BankTransaction, CategoryMappingRecord, ExpenseDefinitionRecord, ExpenseMatch
from .savings import Investment, InvestmentContribution, SavingsGoal
from .settings import CoupleSplitSetting, MethodologyCustomizationRecord

__all__ = [
    "BankTransaction",
    "Budget",
    "BudgetAssignment",
    "BudgetLayout",
    "BudgetMonth",
    "CategoryMappingRecord",
    "CoupleSplitSetting",
    "ExpenseDefinitionRecord",
    "ExpenseMatch",
    "IncomeSourceRecord",
    "Investment",
    "InvestmentContribution",
    "MethodologyCustomizationRecord",
    "SavingsGoal",
]
