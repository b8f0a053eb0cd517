"""Budget summary calculation engine.

``summarize`` turns one :class:`BudgetSummaryInput` snapshot into a
:class:`BudgetSummary`. It performs no I/O, reads no ambient state and never
mutates its input, so identical inputs always produce identical summaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from fractions import Fraction
from typing import Iterable, Optional

from ..domain.records import (
    BUDGET_VIEWS,
    CARRYOVER_MODES,
    UNCATEGORIZED_REF,
    AssetContribution,
    BudgetRow,
    BudgetSummary,
    BudgetSummaryInput,
    CategoryRef,
    ExpenseDefinition,
    Goal,
    InternalTransfer,
    LayoutSection,
    MethodologySection,
    PeriodRange,
    Transaction,
)
from .income import normalize_income, round_cents, scope_for_view
from .methodology import merge_methodology, validate_methodology
from .periods import frame_period, month_key, validate_period_type
from .recurrence import expected_amount
from .splits import OwnershipSplitter
from .taxonomy import CategoryTaxonomy


@dataclass(slots=True)
class _Bucket:
    ref: CategoryRef
    amount: int = 0


def _validate(data: BudgetSummaryInput) -> None:
    validate_period_type(data.period_type)
    validate_methodology(data.methodology)
    if data.budget_view not in BUDGET_VIEWS:
        raise ValueError(f"Unknown budget view {data.budget_view!r}; expected individual or shared")
    if data.carryover_mode not in CARRYOVER_MODES:
        raise ValueError(f"Unknown carryover mode {data.carryover_mode!r}; expected none or rollover")


def spent_by_subcategory(
    transactions: Iterable[Transaction],
    taxonomy: CategoryTaxonomy,
    splitter: OwnershipSplitter,
    period: PeriodRange,
) -> dict[str, _Bucket]:
    """Positive spend per ``Parent::Child`` key for in-period spending transactions."""

    buckets: dict[str, _Bucket] = {}
    for txn in transactions:
        if txn.amount_cents >= 0 or txn.is_internal_transfer or not period.contains(txn.settled_at):
            continue
        ref = taxonomy.classify_transaction(txn)
        if ref.is_empty:
            ref = UNCATEGORIZED_REF
        amount = splitter.share(
            abs(txn.amount_cents),
            category_names=(ref.child, ref.parent),
            expense_definition_id=txn.matched_expense_definition_id,
            override_percentage=txn.split_override_percentage,
        )
        buckets.setdefault(ref.key, _Bucket(ref)).amount += amount
    return buckets


def expected_by_subcategory(
    expenses: Iterable[ExpenseDefinition],
    taxonomy: CategoryTaxonomy,
    splitter: OwnershipSplitter,
    period: PeriodRange,
) -> dict[str, _Bucket]:
    """Projected recurring-expense amounts per ``Parent::Child`` key.

    Expenses whose category cannot be inferred have nowhere to go and are left out.
    """

    buckets: dict[str, _Bucket] = {}
    for expense in expenses:
        if not expense.is_active:
            continue
        ref = taxonomy.infer_expense_category(expense)
        if ref.is_empty:
            continue
        amount = splitter.share(
            expected_amount(expense, period),
            category_names=(ref.child, ref.parent),
            expense_definition_id=expense.id,
        )
        buckets.setdefault(ref.key, _Bucket(ref)).amount += amount
    return buckets


def goal_contributions(
    goals: Iterable[Goal], transfers: Iterable[InternalTransfer], period: PeriodRange
) -> dict[str, int]:
    """Internal transfers into each goal's linked account during ``period``."""

    goal_by_account: dict[str, str] = {}
    for goal in goals:
        if goal.linked_account_id:
            goal_by_account.setdefault(goal.linked_account_id, goal.id)
    totals: dict[str, int] = {}
    for transfer in transfers:
        goal_id = goal_by_account.get(transfer.transfer_account_id)
        if goal_id is None or not period.contains(transfer.settled_at):
            continue
        totals[goal_id] = totals.get(goal_id, 0) + abs(transfer.amount_cents)
    return totals


def asset_contributions(
    contributions: Iterable[AssetContribution], period: PeriodRange
) -> dict[str, int]:
    totals: dict[str, int] = {}
    for contribution in contributions:
        if period.contains(contribution.contributed_at):
            totals[contribution.asset_id] = totals.get(contribution.asset_id, 0) + contribution.amount_cents
    return totals


@dataclass
class _RowBuilder:
    """Collects rows keyed by id; the first layer to claim a key owns it."""

    hidden: frozenset[str]
    spent: dict[str, _Bucket]
    expected: dict[str, _Bucket]
    rows: dict[str, BudgetRow] = field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.rows

    def subcategory(self, parent: str, child: str, budgeted: int = 0) -> None:
        key = f"{parent}::{child}"
        existing = self.rows.get(key)
        if existing is not None:
            budgeted += existing.budgeted
        expected = self.expected[key].amount if key in self.expected else 0
        self.rows[key] = BudgetRow(
            id=key,
            row_type="subcategory",
            name=child,
            parent_category=parent,
            budgeted=budgeted,
            spent=self.spent[key].amount if key in self.spent else 0,
            expected=expected,
            is_expense_default=budgeted == 0 and expected > 0,
            is_hidden=key in self.hidden,
        )

    def category(self, name: str, budgeted: int) -> None:
        existing = self.rows.get(name)
        if existing is not None:
            budgeted += existing.budgeted
        self.rows[name] = BudgetRow(
            id=name,
            row_type="category",
            name=name,
            budgeted=budgeted,
            spent=0,
            is_hidden=name in self.hidden,
        )

    def savings(self, row_type: str, item_id: str, name: str, budgeted: int, contributed: int) -> None:
        key = f"{row_type}::{item_id}"
        existing = self.rows.get(key)
        if existing is not None:
            budgeted += existing.budgeted
        self.rows[key] = BudgetRow(
            id=key,
            row_type=row_type,
            name=name,
            budgeted=budgeted,
            spent=contributed,
            contributed_this_period=contributed,
            goal_id=item_id if row_type == "goal" else None,
            asset_id=item_id if row_type == "asset" else None,
        )


def _section_totals(rows: Iterable[BudgetRow]) -> tuple[int, int, tuple[str, ...]]:
    rows = list(rows)
    return (
        sum(row.budgeted for row in rows),
        sum(row.spent for row in rows),
        tuple(row.id for row in rows),
    )


def _target(income: int, percentage: float) -> int:
    return round_cents(Fraction(income) * Fraction(str(percentage)) / 100)


def build_methodology_sections(
    data: BudgetSummaryInput, rows: Iterable[BudgetRow], income: int
) -> tuple[MethodologySection, ...]:
    """Group spending rows into display sections.

    A saved layout wins; otherwise rows are grouped by the merged methodology
    through each row's parent category. Goal and asset rows never take part.
    """

    spending = [row for row in rows if row.is_spending_row]
    sections: list[MethodologySection] = []

    if data.layout_sections:
        for layout in data.layout_sections:
            sections.append(_layout_section(layout, spending, income))
        return tuple(sections)

    for category in merge_methodology(data.methodology, data.customization):
        members = [
            row
            for row in spending
            if (row.parent_category or row.name) in category.underlying_categories
        ]
        budgeted, spent, row_ids = _section_totals(members)
        percentage = category.percentage or 0
        sections.append(
            MethodologySection(
                name=category.name,
                percentage=percentage,
                target=_target(income, percentage),
                budgeted=budgeted,
                spent=spent,
                color=category.color,
                row_ids=row_ids,
            )
        )
    return tuple(sections)


def _layout_section(layout: LayoutSection, spending: list[BudgetRow], income: int) -> MethodologySection:
    item_ids = set(layout.item_ids)
    budgeted, spent, row_ids = _section_totals(row for row in spending if row.id in item_ids)
    percentage = layout.percentage or 0
    return MethodologySection(
        name=layout.name,
        percentage=percentage,
        target=_target(income, percentage),
        budgeted=budgeted,
        spent=spent,
        row_ids=row_ids,
    )


def summarize(data: BudgetSummaryInput) -> BudgetSummary:
    """Compute the full budget summary for one budget and period."""

    _validate(data)
    period = data.period or frame_period(data.anchor_date, data.period_type)

    breakdown = normalize_income(
        data.income_sources,
        period,
        scope=scope_for_view(data.budget_view),
        viewer_user_id=data.viewer_user_id,
    )
    income = data.total_budget_cents if data.total_budget_cents is not None else breakdown.total

    taxonomy = CategoryTaxonomy.from_mappings(data.category_mappings)
    splitter = OwnershipSplitter(
        budget_view=data.budget_view,
        viewer_user_id=data.viewer_user_id,
        owner_user_id=data.owner_user_id,
        settings=data.split_settings,
    )
    spent = spent_by_subcategory(data.transactions, taxonomy, splitter, period)
    expected = expected_by_subcategory(data.expense_definitions, taxonomy, splitter, period)
    hidden = frozenset(data.customization.hidden_subcategories) if data.customization else frozenset()
    builder = _RowBuilder(hidden=hidden, spent=spent, expected=expected)

    goal_names = {goal.id: goal.name for goal in data.goals}
    asset_names = {asset.id: asset.name for asset in data.assets}
    contributed_to_goals = goal_contributions(data.goals, data.internal_transfers, period)
    contributed_to_assets = asset_contributions(data.asset_contributions, period)

    for assignment in data.assignments:
        if assignment.assignment_type == "goal":
            if assignment.goal_id:
                builder.savings(
                    "goal",
                    assignment.goal_id,
                    goal_names.get(assignment.goal_id, ""),
                    assignment.assigned_cents,
                    contributed_to_goals.get(assignment.goal_id, 0),
                )
            continue
        if assignment.assignment_type == "asset":
            if assignment.asset_id:
                builder.savings(
                    "asset",
                    assignment.asset_id,
                    asset_names.get(assignment.asset_id, ""),
                    assignment.assigned_cents,
                    contributed_to_assets.get(assignment.asset_id, 0),
                )
            continue
        budgeted = splitter.share(
            assignment.assigned_cents,
            category_names=(assignment.subcategory_name, assignment.category_name),
        )
        if assignment.subcategory_name:
            builder.subcategory(assignment.category_name, assignment.subcategory_name, budgeted)
        else:
            builder.category(assignment.category_name, budgeted)

    for goal in data.goals:
        if f"goal::{goal.id}" not in builder:
            builder.savings("goal", goal.id, goal.name, 0, contributed_to_goals.get(goal.id, 0))
    for asset in data.assets:
        if f"asset::{asset.id}" not in builder:
            builder.savings("asset", asset.id, asset.name, 0, contributed_to_assets.get(asset.id, 0))

    for key, bucket in list(expected.items()) + list(spent.items()):
        if key not in builder:
            builder.subcategory(bucket.ref.parent, bucket.ref.child)

    for key in data.layout_subcategory_keys:
        parent, sep, child = key.partition("::")
        if sep and parent and child and key not in builder:
            builder.subcategory(parent, child)

    rows = tuple(builder.rows.values())
    spending_rows = [row for row in rows if row.is_spending_row]
    budgeted_total = sum(row.budgeted for row in spending_rows)
    spent_total = sum(row.spent for row in spending_rows)
    carryover = 0 if data.carryover_mode == "none" else data.carryover_from_previous

    return BudgetSummary(
        income=income,
        budgeted=budgeted_total,
        spent=spent_total,
        carryover=carryover,
        tbb=income + carryover - budgeted_total,
        period=period,
        month_key=month_key(period.start),
        rows=rows,
        methodology_sections=build_methodology_sections(data, rows, income),
        expected_income=breakdown.expected_one_off,
    )


def compute_carryover(previous: Optional[BudgetSummary], mode: str) -> int:
    """Leftover balance of ``previous`` to roll into the following period.

    Overspending yields a negative carryover, which is kept as-is.
    """

    if previous is None or mode == "none":
        return 0
    return previous.income + previous.carryover - previous.spent


def with_carryover(data: BudgetSummaryInput, previous: Optional[BudgetSummary]) -> BudgetSummaryInput:
    """Return a copy of ``data`` carrying ``previous``'s leftover balance."""

    return replace(data, carryover_from_previous=compute_carryover(previous, data.carryover_mode))


__all__ = [
    "asset_contributions",
    "build_methodology_sections",
    "compute_carryover",
    "expected_by_subcategory",
    "goal_contributions",
    "spent_by_subcategory",
    "summarize",
    "with_carryover",
]
