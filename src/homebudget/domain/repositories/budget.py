"""Budget repository protocol."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from ...models.budget import Budget, BudgetAssignment, BudgetLayout, BudgetMonth


class BudgetRepository(Protocol):
    """Repository for budgets and their per-month state."""

    def get_by_id(self, budget_id: str) -> Optional[Budget]:
        """Retrieve a budget by ID."""
        ...

    def list_for_partnership(self, partnership_id: str) -> list[Budget]:
        ...

    def create(self, budget: Budget) -> Budget:
        """Create a new budget."""
        ...

    def get_carryover(self, budget_id: str, month: str) -> int:
        """Stored carryover for a month key, 0 when absent."""
        ...

    def set_carryover(self, budget_id: str, month: str, carryover_cents: int) -> BudgetMonth:
        ...

    def list_assignments(self, budget_id: str, month: str, budget_view: str) -> list[BudgetAssignment]:
        ...

    def add_assignment(self, assignment: BudgetAssignment) -> BudgetAssignment:
        ...

    def get_layout(self, budget_id: str) -> Optional[BudgetLayout]:
        ...

    def save_layout(self, budget_id: str, sections: list[dict[str, Any]]) -> BudgetLayout:
        ...
