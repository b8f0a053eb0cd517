"""Apportioning shared amounts between a budget owner and their partner."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, Optional, Sequence

from ..domain.records import SPLIT_TYPES, SplitSetting
from .income import round_cents

EQUAL_SPLIT = SplitSetting(scope="default", split_type="equal")


def resolve_split_setting(
    settings: Iterable[SplitSetting],
    *,
    category_names: Sequence[Optional[str]] = (),
    expense_definition_id: Optional[str] = None,
) -> SplitSetting:
    """Return the most specific setting for an amount.

    Expense-definition settings beat category settings, which beat the
    partnership default. ``category_names`` is tried in order, so callers pass
    the subcategory before its parent. Without any match the split is equal.
    Settings with an unrecognized split type are ignored.
    """

    settings = [setting for setting in settings if setting.split_type in SPLIT_TYPES]
    if expense_definition_id:
        for setting in settings:
            if setting.scope == "expense-definition" and setting.expense_definition_id == expense_definition_id:
                return setting
    for name in category_names:
        if not name:
            continue
        for setting in settings:
            if setting.scope == "category" and setting.category_name == name:
                return setting
    for setting in settings:
        if setting.scope == "default":
            return setting
    return EQUAL_SPLIT


def share_percentage(setting: SplitSetting, viewer_user_id: str, owner_user_id: str) -> float:
    """Percentage (0-100) of an amount the viewer is responsible for."""

    is_owner = viewer_user_id == owner_user_id
    if setting.split_type == "equal":
        return 50
    if setting.split_type == "custom":
        owner_pct = 100 if setting.owner_percentage is None else setting.owner_percentage
        return owner_pct if is_owner else 100 - owner_pct
    if setting.split_type == "individual-owner":
        return 100 if is_owner else 0
    if setting.split_type == "individual-partner":
        return 0 if is_owner else 100
    raise ValueError(f"Unknown split type {setting.split_type!r}; expected one of {', '.join(SPLIT_TYPES)}")


def apply_share(amount_cents: int, percentage: float) -> int:
    """Scale ``amount_cents`` by ``percentage`` and round half-up."""

    return round_cents(Fraction(amount_cents) * Fraction(str(percentage)) / 100)


@dataclass(frozen=True)
class OwnershipSplitter:
    """Splits amounts for one viewer of one budget.

    In the shared view every amount passes through unchanged.
    """

    budget_view: str
    viewer_user_id: str
    owner_user_id: str
    settings: tuple[SplitSetting, ...] = ()

    @property
    def active(self) -> bool:
        return self.budget_view == "individual"

    def share(
        self,
        amount_cents: int,
        *,
        category_names: Sequence[Optional[str]] = (),
        expense_definition_id: Optional[str] = None,
        override_percentage: Optional[float] = None,
    ) -> int:
        if not self.active:
            return amount_cents
        if override_percentage is not None:
            return apply_share(amount_cents, override_percentage)
        setting = resolve_split_setting(
            self.settings,
            category_names=category_names,
            expense_definition_id=expense_definition_id,
        )
        return apply_share(amount_cents, share_percentage(setting, self.viewer_user_id, self.owner_user_id))


__all__ = [
    "EQUAL_SPLIT",
    "OwnershipSplitter",
    "apply_share",
    "resolve_split_setting",
    "share_percentage",
]
