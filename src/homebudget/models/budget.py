"""Budgeting tables."""

from __future__ import annotations

from typing import Any, ClassVar, Optional
from uuid import uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return uuid4().hex


class Budget(SQLModel, table=True):
    """A household budget owned by one partnership."""

    __tablename__: ClassVar[str] = "budget"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    partnership_id: str = Field(nullable=False, index=True, max_length=64)
    created_by: str = Field(nullable=False, max_length=64, description="Owner user id")
    name: str = Field(default="", max_length=64)
    period_type: str = Field(default="monthly", max_length=16)
    budget_view: str = Field(default="shared", max_length=16)
    carryover_mode: str = Field(default="none", max_length=16)
    methodology: str = Field(default="zero-based", max_length=32)
    total_budget_cents: Optional[int] = Field(
        default=None, description="Fixed budget amount overriding income"
    )


class BudgetMonth(SQLModel, table=True):
    """Per-month state of a budget (currently the rolled-over balance)."""

    __tablename__: ClassVar[str] = "budget_month"
    __table_args__ = (UniqueConstraint("budget_id", "month", name="uq_budget_month"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    budget_id: str = Field(foreign_key="budget.id", nullable=False, index=True)
    month: str = Field(nullable=False, max_length=10, description="YYYY-MM-01")
    carryover_cents: int = Field(default=0, nullable=False)


class BudgetAssignment(SQLModel, table=True):
    """Money assigned to a category, subcategory, goal or asset for one month."""

    __tablename__: ClassVar[str] = "budget_assignment"

    id: Optional[int] = Field(default=None, primary_key=True)
    budget_id: str = Field(foreign_key="budget.id", nullable=False, index=True)
    month: str = Field(nullable=False, index=True, max_length=10)
    budget_view: str = Field(default="shared", max_length=16)
    assignment_type: str = Field(default="category", max_length=16)
    category_name: str = Field(default="", max_length=64)
    subcategory_name: Optional[str] = Field(default=None, max_length=64)
    goal_id: Optional[str] = Field(default=None, max_length=64)
    asset_id: Optional[str] = Field(default=None, max_length=64)
    assigned_cents: int = Field(default=0, nullable=False)


class BudgetLayout(SQLModel, table=True):
    """User-arranged methodology sections for a budget."""

    __tablename__: ClassVar[str] = "budget_layout"

    budget_id: str = Field(foreign_key="budget.id", primary_key=True, max_length=64)
    sections: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
