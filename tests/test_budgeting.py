"""Budget summary engine tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from conftest import OWNER, PARTNER, spend
from homebudget.domain.records import (
    Assignment,
    AssetContribution,
    Asset,
    ExpenseDefinition,
    IncomeSource,
    LayoutSection,
    MatchedTransaction,
    MethodologyCustomization,
    SplitSetting,
)
from homebudget.services.budgeting import compute_carryover, summarize, with_carryover
from homebudget.services.splits import OwnershipSplitter


def rows_by_id(summary):
    return {row.id: row for row in summary.rows}


def test_household_month_totals(household_input):
    summary = summarize(household_input)

    assert summary.income == 500000
    assert summary.budgeted == 160000
    assert summary.spent == 23500
    assert summary.carryover == 0
    assert summary.tbb == 340000
    assert summary.period.label == "June 2025"
    assert summary.month_key == "2025-06-01"


def test_rows_follow_waterfall_order(household_input):
    summary = summarize(household_input)

    assert [row.id for row in summary.rows] == [
        "Food & Dining::Groceries",
        "Housing & Utilities",
        "goal::g1",
        "goal::g2",
        "Housing & Utilities::Utilities",
        "Uncategorized::Uncategorized",
    ]


def test_assigned_subcategory_row(household_input):
    groceries = rows_by_id(summarize(household_input))["Food & Dining::Groceries"]

    assert groceries.row_type == "subcategory"
    assert groceries.parent_category == "Food & Dining"
    assert groceries.budgeted == 60000
    # Refunds and out-of-period spend are excluded.
    assert groceries.spent == 15000
    assert groceries.available == 45000
    assert not groceries.is_expense_default


def test_category_level_assignment_row(household_input):
    housing = rows_by_id(summarize(household_input))["Housing & Utilities"]

    assert housing.row_type == "category"
    assert housing.parent_category is None
    assert housing.budgeted == 100000
    assert housing.spent == 0


def test_expense_default_row_keeps_expected_separate(household_input):
    utilities = rows_by_id(summarize(household_input))["Housing & Utilities::Utilities"]

    assert utilities.is_expense_default
    assert utilities.budgeted == 0
    assert utilities.expected == 9000
    assert utilities.spent == 8000


def test_unmapped_spend_is_uncategorized(household_input):
    row = rows_by_id(summarize(household_input))["Uncategorized::Uncategorized"]

    assert row.name == "Uncategorized"
    assert row.parent_category == "Uncategorized"
    assert row.spent == 500
    assert row.budgeted == 0


def test_goal_budgeted_and_contributed(household_input):
    rows = rows_by_id(summarize(household_input))
    holiday = rows["goal::g1"]
    car = rows["goal::g2"]

    assert holiday.row_type == "goal"
    assert holiday.name == "Holiday"
    assert holiday.budgeted == 50000
    assert holiday.contributed_this_period == 20000
    assert holiday.spent == 20000
    assert car.budgeted == 0
    assert car.contributed_this_period == 0


def test_goal_rows_excluded_from_spending_totals(household_input):
    summary = summarize(household_input)

    spending = [row for row in summary.rows if row.is_spending_row]
    assert summary.budgeted == sum(row.budgeted for row in spending)
    assert summary.spent == sum(row.spent for row in spending)
    assert "goal::g1" not in {row.id for row in spending}


def test_budgeted_conserves_category_assignments(household_input):
    summary = summarize(household_input)

    assigned = sum(a.assigned_cents for a in household_input.assignments if a.assignment_type == "category")
    assert summary.budgeted == assigned


def test_summarize_is_idempotent(household_input):
    assert summarize(household_input) == summarize(household_input)


def test_summarize_does_not_mutate_input(household_input):
    snapshot = replace(household_input)
    summarize(household_input)

    assert household_input == snapshot


def test_empty_input_yields_zeros(make_input):
    summary = summarize(make_input(category_mappings=()))

    assert (summary.income, summary.budgeted, summary.spent, summary.carryover, summary.tbb) == (0, 0, 0, 0, 0)
    assert summary.rows == ()
    assert all(section.budgeted == 0 and section.target == 0 for section in summary.methodology_sections)


def test_deleted_goal_row_has_empty_name(make_input):
    data = make_input(assignments=(Assignment("", 1000, assignment_type="goal", goal_id="gone"),))

    row = rows_by_id(summarize(data))["goal::gone"]

    assert row.name == ""
    assert row.budgeted == 1000


def test_asset_rows_and_contributions(make_input):
    data = make_input(
        assets=(Asset(id="a1", name="Index Fund", asset_type="etf", current_value_cents=1000000),),
        assignments=(Assignment("", 25000, assignment_type="asset", asset_id="a1"),),
        asset_contributions=(
            AssetContribution("a1", 10000, date(2025, 6, 2)),
            AssetContribution("a1", 5000, date(2025, 6, 28)),
            AssetContribution("a1", 7000, date(2025, 7, 1)),
        ),
    )

    row = rows_by_id(summarize(data))["asset::a1"]

    assert row.row_type == "asset"
    assert row.name == "Index Fund"
    assert row.budgeted == 25000
    assert row.contributed_this_period == 15000


def test_carryover_ignored_when_mode_is_none(household_input):
    summary = summarize(replace(household_input, carryover_from_previous=12345))

    assert summary.carryover == 0
    assert summary.tbb == summary.income - summary.budgeted


@pytest.mark.parametrize("carryover", [12345, -2500])
def test_rollover_carryover_feeds_tbb(household_input, carryover):
    summary = summarize(replace(household_input, carryover_mode="rollover", carryover_from_previous=carryover))

    assert summary.carryover == carryover
    assert summary.tbb == summary.income + carryover - summary.budgeted


def test_total_budget_overrides_income(household_input):
    summary = summarize(replace(household_input, total_budget_cents=250000))

    assert summary.income == 250000
    assert summary.tbb == 90000


def test_unreceived_one_off_reported_as_expected_income(make_input):
    data = make_input(
        income_sources=(IncomeSource(amount_cents=40000, frequency="monthly", source_type="one-off", owner_user_id=OWNER),)
    )

    summary = summarize(data)

    assert summary.income == 0
    assert summary.expected_income == 40000


def test_individual_view_applies_splits(household_input):
    data = replace(
        household_input,
        budget_view="individual",
        income_sources=(
            IncomeSource(amount_cents=300000, frequency="monthly", source_type="recurring-salary", owner_user_id=OWNER),
            IncomeSource(amount_cents=200000, frequency="monthly", source_type="recurring-salary", owner_user_id=PARTNER),
        ),
        split_settings=(
            SplitSetting(scope="category", split_type="custom", owner_percentage=70, category_name="Groceries"),
        ),
    )

    summary = summarize(data)
    rows = rows_by_id(summary)

    assert summary.income == 300000
    assert rows["Food & Dining::Groceries"].budgeted == 42000
    assert rows["Food & Dining::Groceries"].spent == 10500
    # Without a setting the split is equal.
    assert rows["Housing & Utilities"].budgeted == 50000
    assert rows["Housing & Utilities::Utilities"].spent == 4000
    assert rows["Housing & Utilities::Utilities"].expected == 4500
    # Goal money is not split.
    assert rows["goal::g1"].budgeted == 50000


def test_partner_sees_the_remaining_share(household_input):
    data = replace(
        household_input,
        budget_view="individual",
        viewer_user_id=PARTNER,
        split_settings=(
            SplitSetting(scope="category", split_type="custom", owner_percentage=70, category_name="Groceries"),
        ),
        transactions=(spend("t1", 10000, "groceries", date(2025, 6, 3)),),
    )

    groceries = rows_by_id(summarize(data))["Food & Dining::Groceries"]

    assert groceries.spent == 3000
    assert groceries.budgeted == 18000


def test_transaction_override_beats_category_split(make_input):
    data = make_input(
        budget_view="individual",
        split_settings=(SplitSetting(scope="category", split_type="individual-owner", category_name="Groceries"),),
        transactions=(spend("t1", 10000, "groceries", date(2025, 6, 3), split_override_percentage=20),),
    )

    assert rows_by_id(summarize(data))["Food & Dining::Groceries"].spent == 2000


def test_expense_without_inferred_category_is_skipped(make_input):
    data = make_input(
        expense_definitions=(
            ExpenseDefinition(id="e1", expected_amount_cents=5000, recurrence_type="monthly"),
            ExpenseDefinition(
                id="e2",
                expected_amount_cents=5000,
                recurrence_type="monthly",
                matched_transactions=(MatchedTransaction("m1", "fuel"),),
                is_active=False,
            ),
        )
    )

    assert summarize(data).rows == ()


def test_week_spanning_months_is_keyed_by_its_first_day(make_input):
    early = summarize(make_input(period_type="weekly", anchor_date=date(2025, 6, 30)))
    late = summarize(make_input(period_type="weekly", anchor_date=date(2025, 7, 2)))

    assert late.period.start == date(2025, 6, 30)
    assert early.month_key == late.month_key == "2025-06-01"


def test_sections_from_percentage_methodology(household_input):
    summary = summarize(replace(household_input, methodology="50-30-20"))
    sections = {section.name: section for section in summary.methodology_sections}

    needs = sections["Needs (50%)"]
    assert needs.target == 250000
    assert needs.budgeted == 160000
    assert needs.spent == 23000
    assert set(needs.row_ids) == {
        "Food & Dining::Groceries",
        "Housing & Utilities",
        "Housing & Utilities::Utilities",
    }
    assert sections["Savings (20%)"].target == 100000
    assert sections["Savings (20%)"].budgeted == 0


def test_sections_follow_customization(household_input):
    customization = MethodologyCustomization(
        hidden_subcategories=("Food & Dining::Groceries",),
    )
    summary = summarize(replace(household_input, methodology="zero-based", customization=customization))

    assert rows_by_id(summary)["Food & Dining::Groceries"].is_hidden
    # Hidden rows still count.
    assert summary.budgeted == 160000
    food = next(s for s in summary.methodology_sections if s.name == "Food & Dining")
    assert food.budgeted == 60000


def test_layout_sections_and_placeholders(household_input):
    data = replace(
        household_input,
        layout_sections=(LayoutSection("Essentials", 60, ("Food & Dining::Groceries", "Transportation::Fuel")),),
        layout_subcategory_keys=("Transportation::Fuel",),
    )

    summary = summarize(data)
    fuel = rows_by_id(summary)["Transportation::Fuel"]

    assert summary.rows[-1] is fuel
    assert (fuel.budgeted, fuel.spent) == (0, 0)
    assert len(summary.methodology_sections) == 1
    section = summary.methodology_sections[0]
    assert section.name == "Essentials"
    assert section.target == 300000
    assert section.budgeted == 60000
    assert section.row_ids == ("Food & Dining::Groceries", "Transportation::Fuel")


def test_invalid_configuration_rejected(make_input):
    with pytest.raises(ValueError, match="Unknown methodology"):
        summarize(make_input(methodology="vibes"))
    with pytest.raises(ValueError, match="Unknown period type"):
        summarize(make_input(period_type="daily"))
    with pytest.raises(ValueError, match="budget view"):
        summarize(make_input(budget_view="everyone"))


def test_compute_carryover(household_input):
    june = summarize(household_input)

    assert compute_carryover(june, "rollover") == 500000 - 23500
    assert compute_carryover(june, "none") == 0
    assert compute_carryover(None, "rollover") == 0


def test_with_carryover_rolls_into_next_month(household_input):
    june = summarize(replace(household_input, carryover_mode="rollover"))
    july_input = with_carryover(
        replace(household_input, carryover_mode="rollover", anchor_date=date(2025, 7, 10), transactions=()),
        june,
    )

    july = summarize(july_input)

    assert july.carryover == 476500
    assert july.tbb == july.income + 476500 - july.budgeted


def test_malformed_records_degrade_instead_of_failing(make_input):
    data = make_input(
        budget_view="individual",
        income_sources=(
            IncomeSource(1000, "daily", "recurring-salary", OWNER),
            IncomeSource(50000, "monthly", "recurring-salary", OWNER),
        ),
        split_settings=(
            SplitSetting(scope="category", split_type="thirds", category_name="Groceries"),
            SplitSetting(scope="default", split_type="50-50"),
        ),
        transactions=(spend("t1", 10000, "groceries", date(2025, 6, 3)),),
        expense_definitions=(
            ExpenseDefinition(
                id="e1",
                expected_amount_cents=4000,
                recurrence_type="hourly",
                next_due_date=date(2025, 6, 5),
                matched_transactions=(MatchedTransaction("m1", "fuel"),),
            ),
        ),
    )

    summary = summarize(data)
    rows = rows_by_id(summary)

    assert summary.income == 50000
    # Unrecognized split types fall through to the equal split.
    assert rows["Food & Dining::Groceries"].spent == 5000
    assert rows["Transportation::Fuel"].expected == 0


def test_individual_views_partition_the_shared_budget(household_input):
    settings = (SplitSetting(scope="category", split_type="custom", owner_percentage=70, category_name="Groceries"),)
    shared = summarize(household_input)
    owner = summarize(replace(household_input, budget_view="individual", split_settings=settings))
    partner = summarize(
        replace(household_input, budget_view="individual", viewer_user_id=PARTNER, split_settings=settings)
    )

    splitter = OwnershipSplitter(
        budget_view="individual", viewer_user_id=OWNER, owner_user_id=OWNER, settings=settings
    )
    owner_share = sum(
        splitter.share(a.assigned_cents, category_names=(a.subcategory_name, a.category_name))
        for a in household_input.assignments
        if a.assignment_type == "category"
    )
    assert owner.budgeted == owner_share == 92000
    assert partner.budgeted == 68000
    assert owner.budgeted + partner.budgeted == shared.budgeted
