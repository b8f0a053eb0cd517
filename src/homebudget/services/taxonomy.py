"""Two-level category taxonomy built from bank-category mappings."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..domain.records import (
    EMPTY_CATEGORY,
    CategoryMapping,
    CategoryRef,
    ExpenseDefinition,
    Transaction,
)

DEFAULT_ICON = "💸"


def majority_category_id(category_ids: Iterable[Optional[str]]) -> Optional[str]:
    """Return the most frequent non-empty id; ties go to the first one seen."""

    counts = Counter(cid for cid in category_ids if cid)
    if not counts:
        return None
    # Counter keeps insertion order and most_common() is stable for equal counts.
    return counts.most_common(1)[0][0]


@dataclass(frozen=True)
class CategoryTaxonomy:
    """Lookup tables over a fixed set of category mappings."""

    by_raw_id: dict[str, CategoryRef] = field(default_factory=dict)
    icon_by_child: dict[str, str] = field(default_factory=dict)
    icon_by_parent: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mappings(cls, mappings: Iterable[CategoryMapping]) -> "CategoryTaxonomy":
        by_raw_id: dict[str, CategoryRef] = {}
        icon_by_child: dict[str, str] = {}
        icon_by_parent: dict[str, str] = {}
        for mapping in sorted(mappings, key=lambda m: m.display_order):
            by_raw_id[mapping.raw_category_id] = CategoryRef(
                parent=mapping.parent_name, child=mapping.child_name
            )
            icon = mapping.icon or DEFAULT_ICON
            icon_by_child.setdefault(mapping.child_name, icon)
            icon_by_parent.setdefault(mapping.parent_name, icon)
        return cls(by_raw_id=by_raw_id, icon_by_child=icon_by_child, icon_by_parent=icon_by_parent)

    def resolve(self, raw_category_id: Optional[str]) -> CategoryRef:
        if not raw_category_id:
            return EMPTY_CATEGORY
        return self.by_raw_id.get(raw_category_id, EMPTY_CATEGORY)

    def classify_transaction(self, txn: Transaction) -> CategoryRef:
        """Direct lookup; unknown ids resolve to the empty category."""

        return self.resolve(txn.raw_category_id)

    def infer_expense_category(self, expense: ExpenseDefinition) -> CategoryRef:
        """Infer an expense's category by majority vote over its matched transactions."""

        winner = majority_category_id(m.raw_category_id for m in expense.matched_transactions)
        return self.resolve(winner)

    def icon_for(self, child: str, parent: Optional[str] = None) -> str:
        if child in self.icon_by_child:
            return self.icon_by_child[child]
        if parent and parent in self.icon_by_parent:
            return self.icon_by_parent[parent]
        return DEFAULT_ICON


__all__ = ["CategoryTaxonomy", "DEFAULT_ICON", "majority_category_id"]
