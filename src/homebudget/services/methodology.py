"""Budgeting methodology presets and user customizations."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

from ..constants.categories import MODERN_CATEGORIES, SECTION_COLORS
from ..domain.records import CustomCategory, MethodologyCustomization

METHODOLOGIES = ("zero-based", "50-30-20", "envelope", "pay-yourself-first", "80-20")
PERCENTAGE_METHODOLOGIES = ("50-30-20", "pay-yourself-first", "80-20")
PERCENTAGE_TOLERANCE = 0.01


class InvalidCustomizationError(ValueError):
    """Raised when a methodology customization must not be persisted."""


@dataclass(frozen=True, slots=True)
class MethodologyCategory:
    """One grouping of parent categories within a methodology."""

    name: str
    underlying_categories: tuple[str, ...]
    percentage: Optional[float] = None
    color: Optional[str] = None
    display_order: int = 0
    original_name: Optional[str] = None
    is_hidden: bool = False
    is_customized: bool = False


def _per_category() -> list[MethodologyCategory]:
    return [
        MethodologyCategory(name=name, underlying_categories=(name,), display_order=index)
        for index, name in enumerate(MODERN_CATEGORIES)
    ]


def _grouped(*sections: tuple[str, Optional[float], str, Sequence[str]]) -> list[MethodologyCategory]:
    return [
        MethodologyCategory(
            name=name,
            percentage=percentage,
            color=SECTION_COLORS[color],
            underlying_categories=tuple(categories),
            display_order=index,
        )
        for index, (name, percentage, color, categories) in enumerate(sections)
    ]


PRESETS: dict[str, list[MethodologyCategory]] = {
    "zero-based": _per_category(),
    "envelope": _per_category(),
    "50-30-20": _grouped(
        (
            "Needs (50%)",
            50,
            "coral",
            ["Food & Dining", "Housing & Utilities", "Transportation", "Technology & Communication"],
        ),
        (
            "Wants (30%)",
            30,
            "yellow",
            ["Entertainment & Leisure", "Personal Care & Health", "Gifts & Charity", "Pets", "Miscellaneous"],
        ),
        ("Savings (20%)", 20, "mint", ["Financial & Admin", "Family & Education"]),
    ),
    "pay-yourself-first": _grouped(
        ("Savings & Investments", 20, "mint", ["Financial & Admin"]),
        (
            "Fixed Expenses",
            50,
            "blue",
            ["Housing & Utilities", "Transportation", "Technology & Communication"],
        ),
        (
            "Variable Expenses",
            30,
            "yellow",
            [
                "Food & Dining",
                "Entertainment & Leisure",
                "Personal Care & Health",
                "Family & Education",
                "Gifts & Charity",
                "Pets",
                "Miscellaneous",
            ],
        ),
    ),
    "80-20": _grouped(
        ("Savings", 20, "mint", ["Financial & Admin"]),
        (
            "Everything Else",
            80,
            "blue",
            [name for name in MODERN_CATEGORIES if name != "Financial & Admin"],
        ),
    ),
}


def validate_methodology(name: str) -> str:
    if name not in PRESETS:
        raise ValueError(f"Unknown methodology {name!r}; expected one of {', '.join(METHODOLOGIES)}")
    return name


def is_percentage_based(name: str) -> bool:
    return name in PERCENTAGE_METHODOLOGIES


def preset_for(name: str) -> list[MethodologyCategory]:
    return list(PRESETS[validate_methodology(name)])


def _apply(preset: MethodologyCategory, index: int, custom: CustomCategory) -> MethodologyCategory:
    return replace(
        preset,
        name=custom.name or preset.name,
        percentage=custom.percentage if custom.percentage is not None else preset.percentage,
        underlying_categories=(
            tuple(custom.underlying_categories)
            if custom.underlying_categories is not None
            else preset.underlying_categories
        ),
        color=custom.color or preset.color,
        display_order=custom.display_order if custom.display_order is not None else index,
        original_name=preset.name,
        is_hidden=custom.is_hidden,
        is_customized=True,
    )


def _overlay(name: str, custom_categories: Iterable[CustomCategory]) -> list[MethodologyCategory]:
    """Apply customizations over the preset without sorting or filtering."""

    by_original = {}
    for custom in custom_categories:
        by_original.setdefault(custom.original_name, custom)
    merged = []
    for index, preset in enumerate(preset_for(name)):
        custom = by_original.get(preset.name)
        merged.append(preset if custom is None else _apply(preset, index, custom))
    return merged


def merge_methodology(
    name: str, customization: Optional[MethodologyCustomization] = None
) -> list[MethodologyCategory]:
    """Return the operative grouping: preset merged with customizations.

    Custom entries match preset entries by their original name; unmatched presets
    pass through unchanged. The result is ordered by display order and hidden
    entries are dropped.
    """

    customs = customization.custom_categories if customization else ()
    merged = _overlay(name, customs)
    merged.sort(key=lambda category: category.display_order)
    return [category for category in merged if not category.is_hidden]


def validate_customization(name: str, custom_categories: Sequence[CustomCategory]) -> None:
    """Reject a customization that must never be stored.

    Raises:
        ValueError: the methodology is unknown.
        InvalidCustomizationError: percentages do not sum to 100 (percentage-based
            methodologies), names collide, or an underlying category is unknown.
    """

    validate_methodology(name)
    if not custom_categories:
        return

    names = [custom.name for custom in custom_categories]
    if len(names) != len(set(names)):
        raise InvalidCustomizationError("Category names must be unique")

    for custom in custom_categories:
        for underlying in custom.underlying_categories or ():
            if underlying not in MODERN_CATEGORIES:
                raise InvalidCustomizationError(f'Invalid underlying category: "{underlying}"')

    visible = [category for category in _overlay(name, custom_categories) if not category.is_hidden]
    merged_names = [category.name for category in visible]
    if len(merged_names) != len(set(merged_names)):
        raise InvalidCustomizationError("Category names must be unique")

    if is_percentage_based(name):
        total = sum(category.percentage or 0 for category in visible)
        if abs(total - 100) > PERCENTAGE_TOLERANCE:
            raise InvalidCustomizationError(
                f"Percentages must sum to 100% (currently {total:.1f}%)"
            )


def select_customization(
    candidates: Iterable[MethodologyCustomization], user_id: Optional[str]
) -> Optional[MethodologyCustomization]:
    """Pick the customization that applies to ``user_id``.

    A user-specific row wins over the partnership-wide one (``user_id is None``).
    """

    partnership_wide = None
    for candidate in candidates:
        if candidate.user_id is not None and candidate.user_id == user_id:
            return candidate
        if candidate.user_id is None and partnership_wide is None:
            partnership_wide = candidate
    return partnership_wide


__all__ = [
    "InvalidCustomizationError",
    "METHODOLOGIES",
    "MethodologyCategory",
    "PERCENTAGE_METHODOLOGIES",
    "PRESETS",
    "is_percentage_based",
    "merge_methodology",
    "preset_for",
    "select_customization",
    "validate_customization",
    "validate_methodology",
]
