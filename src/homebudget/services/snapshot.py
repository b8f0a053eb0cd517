"""Loading a budget snapshot from storage and running the engine over it.

:class:`SummaryLoader` is the only place where database rows are turned into
engine records. Everything it hands to :func:`summarize` is a fully populated
frozen record; optional relations are resolved here, not in the engine.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional

from ..domain.records import (
    Asset,
    AssetContribution,
    Assignment,
    BudgetSummary,
    BudgetSummaryInput,
    CategoryMapping,
    ExpenseDefinition,
    Goal,
    IncomeSource,
    InternalTransfer,
    LayoutSection,
    MatchedTransaction,
    SplitSetting,
    Transaction,
)
from ..domain.repositories import (
    BudgetRepository,
    IncomeRepository,
    LedgerRepository,
    SavingsRepository,
    SplitSettingRepository,
)
from ..logging_config import get_logger
from ..models.budget import Budget
from .annotate import AnnotatedSummary, AnnotationIndex, annotate
from .budgeting import compute_carryover, summarize
from .customizations import MethodologyCustomizationService
from .periods import FORTNIGHT_ANCHOR, frame_period, month_key, periods_in_month

logger = get_logger("services.snapshot")

LAYOUT_ID_PREFIXES = ("subcategory-", "category-")


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def normalize_layout_id(item_id: str) -> str:
    """Strip UI prefixes so layout ids match row ids (``Parent::Child``)."""

    for prefix in LAYOUT_ID_PREFIXES:
        if item_id.startswith(prefix):
            return item_id[len(prefix):]
    return item_id


def parse_layout(sections: Iterable[dict[str, Any]]) -> tuple[LayoutSection, ...]:
    parsed = []
    for section in sections:
        parsed.append(
            LayoutSection(
                name=str(section.get("name", "")),
                percentage=section.get("percentage"),
                item_ids=tuple(normalize_layout_id(str(item)) for item in section.get("item_ids", ())),
            )
        )
    return tuple(parsed)


class SummaryLoader:
    """Gathers everything one budget summary needs and runs the pipeline."""

    def __init__(
        self,
        *,
        budgets: BudgetRepository,
        income: IncomeRepository,
        ledger: LedgerRepository,
        splits: SplitSettingRepository,
        customizations: MethodologyCustomizationService,
        savings: SavingsRepository,
        fortnight_anchor: date = FORTNIGHT_ANCHOR,
    ):
        self.budgets = budgets
        self.income = income
        self.ledger = ledger
        self.splits = splits
        self.customizations = customizations
        self.savings = savings
        self.fortnight_anchor = fortnight_anchor

    def _budget(self, budget_id: str) -> Budget:
        budget = self.budgets.get_by_id(budget_id)
        if budget is None:
            raise ValueError(f"Budget {budget_id!r} not found")
        return budget

    def load(self, budget_id: str, anchor: date, viewer_user_id: str) -> BudgetSummaryInput:
        """Normalize stored records for ``budget_id`` into one engine input."""

        budget = self._budget(budget_id)
        partnership_id = budget.partnership_id
        period = frame_period(anchor, budget.period_type, fortnight_anchor=self.fortnight_anchor)
        key = month_key(period.start)

        income_sources = tuple(
            IncomeSource(
                amount_cents=source.amount_cents,
                frequency=source.frequency,
                source_type=source.source_type,
                owner_user_id=source.user_id,
                is_manual_partner_income=source.is_manual_partner_income,
                is_received=source.is_received,
                received_date=source.received_date,
                is_active=source.is_active,
                name=source.name,
            )
            for source in self.income.list_active(partnership_id)
        )

        assignments = tuple(
            Assignment(
                category_name=row.category_name,
                assigned_cents=row.assigned_cents,
                assignment_type=row.assignment_type,
                subcategory_name=row.subcategory_name,
                goal_id=row.goal_id,
                asset_id=row.asset_id,
            )
            for row in self.budgets.list_assignments(budget.id, key, budget.budget_view)
        )

        matched_by_definition: dict[str, list[MatchedTransaction]] = {}
        definition_by_transaction: dict[str, str] = {}
        for definition_id, transaction_id, raw_category_id in self.ledger.list_matches(partnership_id):
            matched_by_definition.setdefault(definition_id, []).append(
                MatchedTransaction(transaction_id=transaction_id, raw_category_id=raw_category_id)
            )
            definition_by_transaction.setdefault(transaction_id, definition_id)

        bank_rows = self.ledger.list_settled_transactions(partnership_id, period.start, period.end)
        transactions = tuple(
            Transaction(
                id=row.id,
                amount_cents=row.amount_cents,
                raw_category_id=row.raw_category_id,
                settled_at=_as_date(row.settled_at),
                matched_expense_definition_id=definition_by_transaction.get(row.id),
                is_internal_transfer=row.is_internal_transfer,
                transfer_account_id=row.transfer_account_id,
                split_override_percentage=row.split_override_percentage,
            )
            for row in bank_rows
        )
        internal_transfers = tuple(
            InternalTransfer(
                transfer_account_id=txn.transfer_account_id,
                amount_cents=txn.amount_cents,
                settled_at=txn.settled_at,
            )
            for txn in transactions
            if txn.is_internal_transfer and txn.transfer_account_id
        )

        expense_definitions = tuple(
            ExpenseDefinition(
                id=row.id,
                expected_amount_cents=row.expected_amount_cents,
                recurrence_type=row.recurrence_type,
                matched_transactions=tuple(matched_by_definition.get(row.id, ())),
                next_due_date=row.next_due_date,
                is_active=row.is_active,
                name=row.name,
            )
            for row in self.ledger.list_expense_definitions(partnership_id)
        )

        split_settings = tuple(
            SplitSetting(
                scope=row.scope,
                split_type=row.split_type,
                owner_percentage=row.owner_percentage,
                category_name=row.category_name,
                expense_definition_id=row.expense_definition_id,
            )
            for row in self.splits.list_for_partnership(partnership_id)
        )

        category_mappings = tuple(
            CategoryMapping(
                raw_category_id=row.raw_category_id,
                parent_name=row.parent_name,
                child_name=row.child_name,
                icon=row.icon,
                display_order=row.display_order,
            )
            for row in self.ledger.list_category_mappings()
        )

        layout = self.budgets.get_layout(budget.id)
        layout_sections = parse_layout(layout.sections) if layout else ()
        layout_keys = tuple(
            item_id for section in layout_sections for item_id in section.item_ids if "::" in item_id
        )

        goals = tuple(
            Goal(
                id=row.id,
                name=row.name,
                target_cents=row.target_cents,
                current_cents=row.current_cents,
                linked_account_id=row.linked_account_id,
                icon=row.icon,
            )
            for row in self.savings.list_goals(partnership_id)
        )
        assets = tuple(
            Asset(
                id=row.id,
                name=row.name,
                asset_type=row.asset_type,
                current_value_cents=row.current_value_cents,
            )
            for row in self.savings.list_investments(partnership_id)
        )
        contributions = tuple(
            AssetContribution(
                asset_id=row.investment_id,
                amount_cents=row.amount_cents,
                contributed_at=_as_date(row.contributed_at),
            )
            for row in self.savings.list_contributions(partnership_id, period.start, period.end)
        )

        data = BudgetSummaryInput(
            period_type=budget.period_type,
            budget_view=budget.budget_view,
            viewer_user_id=viewer_user_id,
            owner_user_id=budget.created_by,
            anchor_date=_as_date(anchor),
            carryover_mode=budget.carryover_mode,
            methodology=budget.methodology,
            period=period,
            total_budget_cents=budget.total_budget_cents,
            income_sources=income_sources,
            assignments=assignments,
            transactions=transactions,
            expense_definitions=expense_definitions,
            split_settings=split_settings,
            category_mappings=category_mappings,
            carryover_from_previous=self.budgets.get_carryover(budget.id, key),
            customization=self.customizations.load(partnership_id, budget.methodology, viewer_user_id),
            layout_sections=layout_sections,
            layout_subcategory_keys=layout_keys,
            goals=goals,
            assets=assets,
            internal_transfers=internal_transfers,
            asset_contributions=contributions,
        )
        logger.debug(
            "Loaded budget snapshot",
            extra={
                "budget_id": budget.id,
                "period": period.label,
                "transactions": len(transactions),
                "assignments": len(assignments),
                "expense_definitions": len(expense_definitions),
            },
        )
        return data

    def summary(self, budget_id: str, anchor: date, viewer_user_id: str) -> BudgetSummary:
        """Engine output without display annotation."""

        return summarize(self.load(budget_id, anchor, viewer_user_id))

    def summarize(self, budget_id: str, anchor: date, viewer_user_id: str) -> AnnotatedSummary:
        """Load, compute and annotate the summary of one budget period."""

        data = self.load(budget_id, anchor, viewer_user_id)
        result = summarize(data)
        logger.info(
            "Summarized budget",
            extra={
                "budget_id": budget_id,
                "period": result.period.label,
                "income": result.income,
                "budgeted": result.budgeted,
                "tbb": result.tbb,
            },
        )
        index = AnnotationIndex.build(data.category_mappings, data.goals, data.assets)
        return annotate(result, index)

    def carry_forward(self, budget_id: str, anchor: date, viewer_user_id: str) -> Optional[int]:
        """Store the month's leftover balance as the next month's carryover.

        Carryover is kept per calendar month, so only the last period of a month
        can roll forward. For weekly and fortnightly budgets the leftover covers
        every period of the month: the month's carryover once, plus income minus
        spend of each period. Returns the stored amount, or ``None`` when the
        budget does not roll over.
        """

        budget = self._budget(budget_id)
        if budget.carryover_mode == "none":
            logger.info("Carryover disabled; nothing stored", extra={"budget_id": budget_id})
            return None
        periods = periods_in_month(anchor, budget.period_type, fortnight_anchor=self.fortnight_anchor)
        period = frame_period(anchor, budget.period_type, fortnight_anchor=self.fortnight_anchor)
        if period.start != periods[-1].start:
            raise ValueError(
                f"{period.label} is not the last period of its month; "
                f"carryover rolls forward from {periods[-1].label}"
            )
        summaries = [self.summary(budget_id, item.start, viewer_user_id) for item in periods]
        amount = compute_carryover(summaries[-1], budget.carryover_mode) + sum(
            item.income - item.spent for item in summaries[:-1]
        )
        target_key = month_key(period.end + timedelta(days=1))
        self.budgets.set_carryover(budget.id, target_key, amount)
        logger.info(
            "Rolled carryover forward",
            extra={"budget_id": budget_id, "month": target_key, "carryover": amount},
        )
        return amount


__all__ = ["LAYOUT_ID_PREFIXES", "SummaryLoader", "normalize_layout_id", "parse_layout"]
