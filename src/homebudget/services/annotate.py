"""Display annotation of engine output.

The engine leaves names and icons to its callers. ``annotate`` pairs every row
with display metadata from a read-only index and returns new objects; the
summary it receives is never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..domain.records import Asset, BudgetRow, BudgetSummary, CategoryMapping, Goal
from .taxonomy import DEFAULT_ICON, CategoryTaxonomy

DEFAULT_GOAL_ICON = "🎯"


@dataclass(frozen=True)
class AnnotationIndex:
    """Read-only lookups for goal, asset and category display data."""

    taxonomy: CategoryTaxonomy = field(default_factory=CategoryTaxonomy)
    goals: dict[str, Goal] = field(default_factory=dict)
    assets: dict[str, Asset] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        mappings: Iterable[CategoryMapping] = (),
        goals: Iterable[Goal] = (),
        assets: Iterable[Asset] = (),
    ) -> "AnnotationIndex":
        return cls(
            taxonomy=CategoryTaxonomy.from_mappings(mappings),
            goals={goal.id: goal for goal in goals},
            assets={asset.id: asset for asset in assets},
        )


@dataclass(frozen=True, slots=True)
class AnnotatedRow:
    row: BudgetRow
    display_name: str
    icon: Optional[str] = None
    parent_icon: Optional[str] = None
    target_cents: Optional[int] = None
    current_cents: Optional[int] = None
    asset_type: Optional[str] = None
    current_value_cents: Optional[int] = None


@dataclass(frozen=True, slots=True)
class AnnotatedSummary:
    summary: BudgetSummary
    rows: tuple[AnnotatedRow, ...]


def annotate_row(row: BudgetRow, index: AnnotationIndex) -> AnnotatedRow:
    if row.row_type == "goal":
        goal = index.goals.get(row.goal_id or "")
        if goal is None:
            return AnnotatedRow(row=row, display_name=row.name, icon=DEFAULT_GOAL_ICON)
        return AnnotatedRow(
            row=row,
            display_name=goal.name,
            icon=goal.icon or DEFAULT_GOAL_ICON,
            target_cents=goal.target_cents,
            current_cents=goal.current_cents,
        )
    if row.row_type == "asset":
        asset = index.assets.get(row.asset_id or "")
        if asset is None:
            return AnnotatedRow(row=row, display_name=row.name)
        return AnnotatedRow(
            row=row,
            display_name=asset.name,
            asset_type=asset.asset_type,
            current_value_cents=asset.current_value_cents,
        )
    if row.row_type == "category":
        return AnnotatedRow(
            row=row,
            display_name=row.name,
            icon=index.taxonomy.icon_by_parent.get(row.name, DEFAULT_ICON),
        )
    return AnnotatedRow(
        row=row,
        display_name=row.name,
        icon=index.taxonomy.icon_for(row.name, row.parent_category),
        parent_icon=(
            index.taxonomy.icon_by_parent.get(row.parent_category, DEFAULT_ICON)
            if row.parent_category
            else None
        ),
    )


def annotate(summary: BudgetSummary, index: AnnotationIndex) -> AnnotatedSummary:
    return AnnotatedSummary(
        summary=summary,
        rows=tuple(annotate_row(row, index) for row in summary.rows),
    )


def _row_payload(annotated: AnnotatedRow) -> dict[str, Any]:
    row = annotated.row
    payload: dict[str, Any] = {
        "id": row.id,
        "type": row.row_type,
        "name": annotated.display_name,
        "parentCategory": row.parent_category,
        "budgeted": row.budgeted,
        "spent": row.spent,
        "available": row.available,
        "expected": row.expected,
        "isExpenseDefault": row.is_expense_default,
        "isHidden": row.is_hidden,
        "icon": annotated.icon,
    }
    if annotated.parent_icon is not None:
        payload["parentIcon"] = annotated.parent_icon
    if row.row_type in ("goal", "asset"):
        payload["contributedThisPeriod"] = row.contributed_this_period
    if annotated.target_cents is not None:
        payload["target"] = annotated.target_cents
        payload["currentAmount"] = annotated.current_cents
    if annotated.asset_type is not None:
        payload["assetType"] = annotated.asset_type
        payload["currentValue"] = annotated.current_value_cents
    return payload


def to_payload(annotated: AnnotatedSummary) -> dict[str, Any]:
    """Render an annotated summary as a JSON-ready dict (camelCase keys)."""

    summary = annotated.summary
    return {
        "income": summary.income,
        "budgeted": summary.budgeted,
        "spent": summary.spent,
        "carryover": summary.carryover,
        "tbb": summary.tbb,
        "expectedIncome": summary.expected_income,
        "periodLabel": summary.period.label,
        "periodStart": summary.period.start.isoformat(),
        "periodEnd": summary.period.end.isoformat(),
        "monthKey": summary.month_key,
        "rows": [_row_payload(row) for row in annotated.rows],
        "methodologySections": [
            {
                "name": section.name,
                "percentage": section.percentage,
                "target": section.target,
                "budgeted": section.budgeted,
                "spent": section.spent,
                "color": section.color,
                "rowIds": list(section.row_ids),
            }
            for section in summary.methodology_sections
        ],
    }


__all__ = [
    "AnnotatedRow",
    "AnnotatedSummary",
    "AnnotationIndex",
    "annotate",
    "annotate_row",
    "to_payload",
]
