"""Income source table."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .budget import _new_id


class IncomeSourceRecord(SQLModel, table=True):
    """Recurring salary or one-off payment belonging to a partnership member."""

    __tablename__: ClassVar[str] = "income_source"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    partnership_id: str = Field(nullable=False, index=True, max_length=64)
    user_id: str = Field(nullable=False, max_length=64)
    name: str = Field(default="", max_length=128)
    amount_cents: int = Field(nullable=False)
    frequency: str = Field(default="monthly", max_length=16)
    source_type: str = Field(default="recurring-salary", max_length=32)
    is_manual_partner_income: bool = Field(default=False, nullable=False)
    is_received: bool = Field(default=False, nullable=False)
    received_date: Optional[date] = Field(default=None)
    is_active: bool = Field(default=True, nullable=False)
