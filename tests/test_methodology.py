"""Methodology preset, merge and validation tests."""

from __future__ import annotations

import pytest

from homebudget.constants.categories import MODERN_CATEGORIES
from homebudget.domain.records import CustomCategory, MethodologyCustomization
from homebudget.services.methodology import (
    METHODOLOGIES,
    PERCENTAGE_METHODOLOGIES,
    InvalidCustomizationError,
    merge_methodology,
    preset_for,
    select_customization,
    validate_customization,
)


@pytest.mark.parametrize("name", PERCENTAGE_METHODOLOGIES)
def test_percentage_presets_sum_to_100(name):
    assert sum(category.percentage for category in preset_for(name)) == pytest.approx(100)


@pytest.mark.parametrize("name", METHODOLOGIES)
def test_presets_only_reference_known_categories(name):
    for category in preset_for(name):
        assert set(category.underlying_categories) <= set(MODERN_CATEGORIES)


def test_zero_based_has_one_section_per_category():
    names = [category.name for category in preset_for("zero-based")]

    assert names == MODERN_CATEGORIES


def test_unknown_methodology_rejected():
    with pytest.raises(ValueError, match="Unknown methodology"):
        preset_for("vibes")


def test_merge_without_customization_returns_preset():
    assert merge_methodology("50-30-20") == preset_for("50-30-20")


def test_merge_applies_overrides_and_hides():
    customization = MethodologyCustomization(
        custom_categories=(
            CustomCategory(original_name="Needs (50%)", name="Essentials", percentage=60, display_order=5),
            CustomCategory(original_name="Wants (30%)", name="Wants", is_hidden=True),
        )
    )

    merged = merge_methodology("50-30-20", customization)

    assert [category.name for category in merged] == ["Savings (20%)", "Essentials"]
    essentials = merged[1]
    assert essentials.percentage == 60
    assert essentials.original_name == "Needs (50%)"
    assert essentials.is_customized
    assert "Food & Dining" in essentials.underlying_categories


def test_merge_ignores_unmatched_custom_entries():
    customization = MethodologyCustomization(
        custom_categories=(CustomCategory(original_name="Does Not Exist", name="Ghost"),)
    )

    assert merge_methodology("80-20", customization) == preset_for("80-20")


def test_validate_accepts_rebalanced_percentages():
    validate_customization(
        "50-30-20",
        [
            CustomCategory(original_name="Needs (50%)", name="Needs", percentage=40),
            CustomCategory(original_name="Wants (30%)", name="Wants", percentage=40),
        ],
    )


def test_validate_rejects_bad_percentage_total():
    with pytest.raises(InvalidCustomizationError, match="Percentages must sum to 100%"):
        validate_customization(
            "50-30-20",
            [CustomCategory(original_name="Needs (50%)", name="Needs", percentage=60)],
        )


def test_validate_rejects_duplicate_custom_names():
    with pytest.raises(InvalidCustomizationError, match="unique"):
        validate_customization(
            "80-20",
            [
                CustomCategory(original_name="Savings", name="Same"),
                CustomCategory(original_name="Everything Else", name="Same"),
            ],
        )


def test_validate_rejects_name_colliding_with_preset():
    with pytest.raises(InvalidCustomizationError, match="unique"):
        validate_customization(
            "50-30-20",
            [CustomCategory(original_name="Wants (30%)", name="Needs (50%)")],
        )


def test_validate_rejects_unknown_underlying_category():
    with pytest.raises(InvalidCustomizationError, match="Invalid underlying category"):
        validate_customization(
            "zero-based",
            [CustomCategory(original_name="Pets", name="Animals", underlying_categories=("Pets", "Horses"))],
        )


def test_validate_skips_percentages_for_zero_based():
    validate_customization(
        "zero-based",
        [CustomCategory(original_name="Pets", name="Animals", percentage=5)],
    )


def test_validate_unknown_methodology_is_plain_value_error():
    with pytest.raises(ValueError) as excinfo:
        validate_customization("vibes", [])

    assert not isinstance(excinfo.value, InvalidCustomizationError)


def test_user_customization_wins_over_partnership():
    shared = MethodologyCustomization(hidden_subcategories=("a",))
    mine = MethodologyCustomization(hidden_subcategories=("b",), user_id="u1")
    theirs = MethodologyCustomization(hidden_subcategories=("c",), user_id="u2")

    assert select_customization([shared, theirs, mine], "u1") is mine
    assert select_customization([shared, theirs], "u1") is shared
    assert select_customization([theirs], "u1") is None
