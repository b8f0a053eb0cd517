"""Savings goals and investment tables."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .budget import _new_id


class SavingsGoal(SQLModel, table=True):
    """A savings target funded by transfers into a linked account."""

    __tablename__: ClassVar[str] = "savings_goal"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    partnership_id: str = Field(nullable=False, index=True, max_length=64)
    name: str = Field(nullable=False, max_length=128)
    icon: str = Field(default="🎯", max_length=8)
    target_cents: int = Field(default=0, nullable=False)
    current_cents: int = Field(default=0, nullable=False)
    linked_account_id: Optional[str] = Field(default=None, max_length=64)
    is_active: bool = Field(default=True, nullable=False)


class Investment(SQLModel, table=True):
    """An asset the household contributes to."""

    __tablename__: ClassVar[str] = "investment"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    partnership_id: str = Field(nullable=False, index=True, max_length=64)
    name: str = Field(nullable=False, max_length=128)
    asset_type: str = Field(default="other", max_length=32)
    current_value_cents: int = Field(default=0, nullable=False)


class InvestmentContribution(SQLModel, table=True):
    """Money put into an investment."""

    __tablename__: ClassVar[str] = "investment_contribution"

    id: Optional[int] = Field(default=None, primary_key=True)
    investment_id: str = Field(foreign_key="investment.id", nullable=False, index=True)
    amount_cents: int = Field(nullable=False)
    contributed_at: datetime = Field(nullable=False, index=True)
