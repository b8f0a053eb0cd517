"""Immutable record types consumed and produced by the budget summary engine.

Everything here is a plain value: the storage adapter normalizes database rows
into these shapes before the engine runs, so engine code never sees optional
fields that depend on how the data was fetched.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

PERIOD_TYPES = ("weekly", "fortnightly", "monthly")
BUDGET_VIEWS = ("individual", "shared")
CARRYOVER_MODES = ("none", "rollover")
INCOME_FREQUENCIES = ("weekly", "fortnightly", "monthly", "quarterly", "yearly")
RECURRENCE_TYPES = INCOME_FREQUENCIES + ("one-time",)
SPLIT_TYPES = ("equal", "custom", "individual-owner", "individual-partner")
SPLIT_SCOPES = ("category", "expense-definition", "default")
ASSIGNMENT_TYPES = ("category", "goal", "asset")

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True, slots=True)
class PeriodRange:
    """Inclusive date window of one budgeting period."""

    start: date
    end: date
    label: str
    period_type: str

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


@dataclass(frozen=True, slots=True)
class IncomeSource:
    amount_cents: int
    frequency: str
    source_type: str  # recurring-salary | one-off
    owner_user_id: str
    is_manual_partner_income: bool = False
    is_received: bool = False
    received_date: Optional[date] = None
    is_active: bool = True
    name: str = ""


@dataclass(frozen=True, slots=True)
class CategoryMapping:
    """Maps a bank-feed category id onto the app's parent/child taxonomy."""

    raw_category_id: str
    parent_name: str
    child_name: str
    icon: str = "💸"
    display_order: int = 0


@dataclass(frozen=True, slots=True)
class Transaction:
    """A settled bank transaction. Negative amounts are spending."""

    id: str
    amount_cents: int
    raw_category_id: Optional[str]
    settled_at: date
    matched_expense_definition_id: Optional[str] = None
    is_internal_transfer: bool = False
    transfer_account_id: Optional[str] = None
    split_override_percentage: Optional[float] = None


@dataclass(frozen=True, slots=True)
class MatchedTransaction:
    transaction_id: str
    raw_category_id: Optional[str]


@dataclass(frozen=True, slots=True)
class ExpenseDefinition:
    """A recurring bill; its category is inferred from matched transactions."""

    id: str
    expected_amount_cents: int
    recurrence_type: str
    matched_transactions: tuple[MatchedTransaction, ...] = ()
    next_due_date: Optional[date] = None
    is_active: bool = True
    name: str = ""


@dataclass(frozen=True, slots=True)
class Assignment:
    category_name: str
    assigned_cents: int
    assignment_type: str = "category"
    subcategory_name: Optional[str] = None
    goal_id: Optional[str] = None
    asset_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SplitSetting:
    scope: str
    split_type: str
    owner_percentage: Optional[float] = None
    category_name: Optional[str] = None
    expense_definition_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Goal:
    id: str
    name: str
    target_cents: int = 0
    current_cents: int = 0
    linked_account_id: Optional[str] = None
    icon: str = "🎯"


@dataclass(frozen=True, slots=True)
class Asset:
    id: str
    name: str
    asset_type: str = "other"
    current_value_cents: int = 0


@dataclass(frozen=True, slots=True)
class InternalTransfer:
    """Money moved between the household's own accounts."""

    transfer_account_id: str
    amount_cents: int
    settled_at: date


@dataclass(frozen=True, slots=True)
class AssetContribution:
    asset_id: str
    amount_cents: int
    contributed_at: date


@dataclass(frozen=True, slots=True)
class CustomCategory:
    """User override of one preset methodology category."""

    original_name: str
    name: str
    percentage: Optional[float] = None
    underlying_categories: Optional[tuple[str, ...]] = None
    color: Optional[str] = None
    display_order: Optional[int] = None
    is_hidden: bool = False


@dataclass(frozen=True, slots=True)
class MethodologyCustomization:
    custom_categories: tuple[CustomCategory, ...] = ()
    hidden_subcategories: tuple[str, ...] = ()
    user_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class LayoutSection:
    """A user-arranged section of row ids (e.g. ``Food & Dining::Groceries``)."""

    name: str
    percentage: Optional[float] = None
    item_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BudgetSummaryInput:
    """Complete snapshot handed to :func:`homebudget.services.budgeting.summarize`."""

    period_type: str
    budget_view: str
    viewer_user_id: str
    owner_user_id: str
    anchor_date: date
    carryover_mode: str = "none"
    methodology: str = "zero-based"
    period: Optional[PeriodRange] = None
    total_budget_cents: Optional[int] = None
    income_sources: tuple[IncomeSource, ...] = ()
    assignments: tuple[Assignment, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    expense_definitions: tuple[ExpenseDefinition, ...] = ()
    split_settings: tuple[SplitSetting, ...] = ()
    category_mappings: tuple[CategoryMapping, ...] = ()
    carryover_from_previous: int = 0
    customization: Optional[MethodologyCustomization] = None
    layout_sections: tuple[LayoutSection, ...] = ()
    layout_subcategory_keys: tuple[str, ...] = ()
    goals: tuple[Goal, ...] = ()
    assets: tuple[Asset, ...] = ()
    internal_transfers: tuple[InternalTransfer, ...] = ()
    asset_contributions: tuple[AssetContribution, ...] = ()


@dataclass(frozen=True, slots=True)
class BudgetRow:
    """One line of the budget table.

    ``row_type`` is ``subcategory`` or ``category`` for spending rows and
    ``goal``/``asset`` for savings rows. ``expected`` carries the projected
    recurring-expense amount for the period; it never counts toward ``budgeted``.
    """

    id: str
    row_type: str
    name: str
    budgeted: int
    spent: int
    parent_category: Optional[str] = None
    expected: int = 0
    is_expense_default: bool = False
    is_hidden: bool = False
    contributed_this_period: int = 0
    goal_id: Optional[str] = None
    asset_id: Optional[str] = None

    @property
    def available(self) -> int:
        return self.budgeted - self.spent

    @property
    def is_spending_row(self) -> bool:
        return self.row_type in ("category", "subcategory")


@dataclass(frozen=True, slots=True)
class MethodologySection:
    name: str
    percentage: float
    target: int
    budgeted: int
    spent: int
    color: Optional[str] = None
    row_ids: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BudgetSummary:
    income: int
    budgeted: int
    spent: int
    carryover: int
    tbb: int
    period: PeriodRange
    month_key: str
    rows: tuple[BudgetRow, ...] = ()
    methodology_sections: tuple[MethodologySection, ...] = ()
    expected_income: int = 0

    def rows_of_type(self, *row_types: str) -> list[BudgetRow]:
        return [row for row in self.rows if row.row_type in row_types]


@dataclass(frozen=True, slots=True)
class CategoryRef:
    """Resolved parent/child names; both empty when a category is unknown."""

    parent: str = ""
    child: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.parent

    @property
    def key(self) -> str:
        return f"{self.parent}::{self.child}"


EMPTY_CATEGORY = CategoryRef()
UNCATEGORIZED_REF = CategoryRef(parent=UNCATEGORIZED, child=UNCATEGORIZED)

__all__ = [
    "ASSIGNMENT_TYPES",
    "Asset",
    "AssetContribution",
    "Assignment",
    "BUDGET_VIEWS",
    "BudgetRow",
    "BudgetSummary",
    "BudgetSummaryInput",
    "CARRYOVER_MODES",
    "CategoryMapping",
    "CategoryRef",
    "CustomCategory",
    "EMPTY_CATEGORY",
    "ExpenseDefinition",
    "Goal",
    "INCOME_FREQUENCIES",
    "IncomeSource",
    "InternalTransfer",
    "LayoutSection",
    "MatchedTransaction",
    "MethodologyCustomization",
    "MethodologySection",
    "PERIOD_TYPES",
    "PeriodRange",
    "RECURRENCE_TYPES",
    "SPLIT_SCOPES",
    "SPLIT_TYPES",
    "SplitSetting",
    "Transaction",
    "UNCATEGORIZED",
    "UNCATEGORIZED_REF",
]
