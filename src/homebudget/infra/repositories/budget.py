"""SQLModel implementation of the budget repository."""

from __future__ import annotations

from typing import Any, Optional

from sqlmodel import select

from ...logging_config import get_logger
from ...models.budget import Budget, BudgetAssignment, BudgetLayout, BudgetMonth
from ..database import SessionFactory

logger = get_logger("repositories.budget")


class SQLModelBudgetRepository:
    """SQLModel-based budget repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, budget_id: str) -> Optional[Budget]:
        """Retrieve a budget by ID."""
        with self.session_factory() as session:
            return session.exec(select(Budget).where(Budget.id == budget_id)).first()

    def list_for_partnership(self, partnership_id: str) -> list[Budget]:
        with self.session_factory() as session:
            statement = (
                select(Budget).where(Budget.partnership_id == partnership_id).order_by(Budget.name)
            )
            return list(session.exec(statement).all())

    def create(self, budget: Budget) -> Budget:
        """Create a new budget."""
        with self.session_factory() as session:
            session.add(budget)
            session.commit()
            session.refresh(budget)
            session.expunge(budget)
            logger.info("Created budget", extra={"budget_id": budget.id, "period_type": budget.period_type})
            return budget

    def get_carryover(self, budget_id: str, month: str) -> int:
        """Stored carryover for ``month`` (``YYYY-MM-01``); 0 when never set."""
        with self.session_factory() as session:
            row = session.exec(
                select(BudgetMonth).where(BudgetMonth.budget_id == budget_id, BudgetMonth.month == month)
            ).first()
            return row.carryover_cents if row else 0

    def set_carryover(self, budget_id: str, month: str, carryover_cents: int) -> BudgetMonth:
        with self.session_factory() as session:
            row = session.exec(
                select(BudgetMonth).where(BudgetMonth.budget_id == budget_id, BudgetMonth.month == month)
            ).first()
            if row:
                row.carryover_cents = carryover_cents
            else:
                row = BudgetMonth(budget_id=budget_id, month=month, carryover_cents=carryover_cents)
                session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row

    def list_assignments(self, budget_id: str, month: str, budget_view: str) -> list[BudgetAssignment]:
        """Assignments for one month and view, in insertion order."""
        with self.session_factory() as session:
            statement = (
                select(BudgetAssignment)
                .where(BudgetAssignment.budget_id == budget_id)
                .where(BudgetAssignment.month == month)
                .where(BudgetAssignment.budget_view == budget_view)
                .order_by(BudgetAssignment.id)
            )
            return list(session.exec(statement).all())

    def add_assignment(self, assignment: BudgetAssignment) -> BudgetAssignment:
        with self.session_factory() as session:
            session.add(assignment)
            session.commit()
            session.refresh(assignment)
            session.expunge(assignment)
            return assignment

    def get_layout(self, budget_id: str) -> Optional[BudgetLayout]:
        with self.session_factory() as session:
            return session.get(BudgetLayout, budget_id)

    def save_layout(self, budget_id: str, sections: list[dict[str, Any]]) -> BudgetLayout:
        """Replace the saved section layout of a budget."""
        with self.session_factory() as session:
            layout = session.get(BudgetLayout, budget_id)
            if layout:
                layout.sections = sections
            else:
                layout = BudgetLayout(budget_id=budget_id, sections=sections)
            session.add(layout)
            session.commit()
            session.refresh(layout)
            session.expunge(layout)
            return layout


__all__ = ["SQLModelBudgetRepository"]
