"""Bank feed tables: category mappings, transactions and expense matches."""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .budget import _new_id


class CategoryMappingRecord(SQLModel, table=True):
    """Maps a bank-feed category id onto the parent/child taxonomy."""

    __tablename__: ClassVar[str] = "category_mapping"

    raw_category_id: str = Field(primary_key=True, max_length=64)
    parent_name: str = Field(nullable=False, max_length=64)
    child_name: str = Field(nullable=False, max_length=64)
    icon: str = Field(default="💸", max_length=8)
    display_order: int = Field(default=0, nullable=False)


class BankTransaction(SQLModel, table=True):
    """A transaction imported from a linked bank account."""

    __tablename__: ClassVar[str] = "bank_transaction"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    partnership_id: str = Field(nullable=False, index=True, max_length=64)
    account_id: str = Field(nullable=False, max_length=64)
    description: str = Field(default="", max_length=255)
    amount_cents: int = Field(nullable=False, description="Positive for inflow, negative for outflow")
    raw_category_id: Optional[str] = Field(default=None, max_length=64)
    status: str = Field(default="SETTLED", max_length=16)
    settled_at: datetime = Field(nullable=False, index=True)
    is_internal_transfer: bool = Field(default=False, nullable=False)
    transfer_account_id: Optional[str] = Field(default=None, max_length=64)
    split_override_percentage: Optional[float] = Field(default=None)


class ExpenseDefinitionRecord(SQLModel, table=True):
    """A recurring bill the household expects to pay."""

    __tablename__: ClassVar[str] = "expense_definition"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    partnership_id: str = Field(nullable=False, index=True, max_length=64)
    name: str = Field(default="", max_length=128)
    expected_amount_cents: int = Field(nullable=False)
    recurrence_type: str = Field(default="monthly", max_length=16)
    next_due_date: Optional[date] = Field(default=None)
    is_active: bool = Field(default=True, nullable=False)


class ExpenseMatch(SQLModel, table=True):
    """Association between an expense definition and a paying transaction."""

    __tablename__: ClassVar[str] = "expense_match"

    expense_definition_id: str = Field(foreign_key="expense_definition.id", primary_key=True)
    transaction_id: str = Field(foreign_key="bank_transaction.id", primary_key=True)
