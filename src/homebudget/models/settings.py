"""Partnership-level settings: ownership splits and methodology customizations."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class CoupleSplitSetting(SQLModel, table=True):
    """How a shared amount is divided between the budget owner and partner."""

    __tablename__: ClassVar[str] = "couple_split_setting"

    id: Optional[int] = Field(default=None, primary_key=True)
    partnership_id: str = Field(nullable=False, index=True, max_length=64)
    scope: str = Field(default="default", max_length=32)
    split_type: str = Field(default="equal", max_length=32)
    owner_percentage: Optional[float] = Field(default=None)
    category_name: Optional[str] = Field(default=None, max_length=64)
    expense_definition_id: Optional[str] = Field(default=None, max_length=64)


class MethodologyCustomizationRecord(SQLModel, table=True):
    """Stored overrides of a methodology preset.

    ``user_id`` is NULL for the partnership-wide row.
    """

    __tablename__: ClassVar[str] = "methodology_customization"

    id: Optional[int] = Field(default=None, primary_key=True)
    partnership_id: str = Field(nullable=False, index=True, max_length=64)
    user_id: Optional[str] = Field(default=None, max_length=64)
    methodology: str = Field(nullable=False, max_length=32)
    custom_categories: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    hidden_subcategories: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
