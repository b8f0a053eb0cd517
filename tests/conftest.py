"""Pytest configuration and shared fixtures for HomeBudget tests.

This module provides database fixtures, engine-record factories, and a
populated store for testing the engine, repositories, and services without
touching a real database.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from homebudget import models  # noqa: F401
from homebudget.config import BaseConfig
from homebudget.context import create_app_context
from homebudget.domain.records import (
    Assignment,
    BudgetSummaryInput,
    CategoryMapping,
    ExpenseDefinition,
    Goal,
    IncomeSource,
    MatchedTransaction,
    Transaction,
)
from homebudget.infra.database import create_session_factory
from homebudget.infra.repositories import (
    SQLModelBudgetRepository,
    SQLModelIncomeRepository,
    SQLModelLedgerRepository,
    SQLModelMethodologyRepository,
    SQLModelSavingsRepository,
    SQLModelSplitSettingRepository,
)
from homebudget.models import (
    BankTransaction,
    Budget,
    BudgetAssignment,
    ExpenseDefinitionRecord,
    IncomeSourceRecord,
    SavingsGoal,
)
from homebudget.services.customizations import MethodologyCustomizationService
from homebudget.services.snapshot import SummaryLoader

OWNER = "user-alex"
PARTNER = "user-sam"
PARTNERSHIP = "partnership-1"
JUNE = date(2025, 6, 15)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep config-driven paths inside the test's temporary directory."""

    monkeypatch.setenv("HOMEBUDGET_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("HOMEBUDGET_DATABASE_URL", raising=False)
    monkeypatch.delenv("HOMEBUDGET_FORTNIGHT_ANCHOR", raising=False)
    monkeypatch.delenv("HOMEBUDGET_LOG_LEVEL", raising=False)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to a temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories receive in production."""

    return create_session_factory(db_engine)


@pytest.fixture
def budget_repo(session_factory):
    return SQLModelBudgetRepository(session_factory)


@pytest.fixture
def income_repo(session_factory):
    return SQLModelIncomeRepository(session_factory)


@pytest.fixture
def ledger_repo(session_factory):
    return SQLModelLedgerRepository(session_factory)


@pytest.fixture
def split_repo(session_factory):
    return SQLModelSplitSettingRepository(session_factory)


@pytest.fixture
def methodology_repo(session_factory):
    return SQLModelMethodologyRepository(session_factory)


@pytest.fixture
def savings_repo(session_factory):
    return SQLModelSavingsRepository(session_factory)


@pytest.fixture
def customization_service(methodology_repo):
    return MethodologyCustomizationService(methodology_repo)


@pytest.fixture
def loader(budget_repo, income_repo, ledger_repo, split_repo, customization_service, savings_repo):
    return SummaryLoader(
        budgets=budget_repo,
        income=income_repo,
        ledger=ledger_repo,
        splits=split_repo,
        customizations=customization_service,
        savings=savings_repo,
    )


@pytest.fixture
def app_context(tmp_path):
    """Fully wired application context on a temporary database file."""

    config = BaseConfig()
    config.DATABASE_URL = f"sqlite:///{tmp_path / 'cli.db'}"
    context = create_app_context(config)
    yield context
    context.engine.dispose()


# =============================================================================
# Engine Record Factories
# =============================================================================

MAPPINGS = (
    CategoryMapping("groceries", "Food & Dining", "Groceries", icon="🛒", display_order=1),
    CategoryMapping("utilities", "Housing & Utilities", "Utilities", icon="💡", display_order=2),
    CategoryMapping("fuel", "Transportation", "Fuel", icon="⛽", display_order=3),
    CategoryMapping("internal-transfer", "Financial & Admin", "Internal Transfers", icon="🔁", display_order=4),
)


def spend(txn_id: str, cents: int, raw_category_id: str | None, day: date, **kwargs) -> Transaction:
    """A spending transaction of ``cents`` (given as a positive number)."""

    return Transaction(id=txn_id, amount_cents=-cents, raw_category_id=raw_category_id, settled_at=day, **kwargs)


@pytest.fixture
def make_input():
    """Factory for engine inputs with sensible defaults for June 2025."""

    def _make(**overrides) -> BudgetSummaryInput:
        values = dict(
            period_type="monthly",
            budget_view="shared",
            viewer_user_id=OWNER,
            owner_user_id=OWNER,
            anchor_date=JUNE,
            category_mappings=MAPPINGS,
        )
        values.update(overrides)
        return BudgetSummaryInput(**values)

    return _make


@pytest.fixture
def household_input(make_input):
    """A realistic month: salary, planned categories, a goal and a recurring bill."""

    return make_input(
        income_sources=(IncomeSource(amount_cents=500000, frequency="monthly", source_type="recurring-salary", owner_user_id=OWNER),),
        assignments=(
            Assignment("Food & Dining", 60000, subcategory_name="Groceries"),
            Assignment("Housing & Utilities", 100000),
            Assignment("", 50000, assignment_type="goal", goal_id="g1"),
        ),
        transactions=(
            spend("t1", 12000, "groceries", date(2025, 6, 3)),
            spend("t2", 3000, "groceries", date(2025, 6, 20)),
            spend("t3", 8000, "utilities", date(2025, 6, 10)),
            spend("t4", 500, "mystery-category", date(2025, 6, 11)),
            Transaction(id="t5", amount_cents=1000, raw_category_id="groceries", settled_at=date(2025, 6, 12)),
            spend("t6", 9999, "groceries", date(2025, 5, 31)),
            spend(
                "t7",
                20000,
                "internal-transfer",
                date(2025, 6, 15),
                is_internal_transfer=True,
                transfer_account_id="acct-holiday",
            ),
        ),
        goals=(
            Goal(id="g1", name="Holiday", target_cents=300000, current_cents=120000, linked_account_id="acct-holiday", icon="🏖️"),
            Goal(id="g2", name="New Car"),
        ),
        expense_definitions=(
            ExpenseDefinition(
                id="e1",
                expected_amount_cents=9000,
                recurrence_type="monthly",
                next_due_date=date(2025, 6, 12),
                matched_transactions=(
                    MatchedTransaction("m1", "utilities"),
                    MatchedTransaction("m2", "groceries"),
                    MatchedTransaction("m3", "utilities"),
                ),
                name="Electricity",
            ),
        ),
    )


# =============================================================================
# Stored Data
# =============================================================================


@pytest.fixture
def stored_budget(budget_repo, income_repo, ledger_repo, savings_repo):
    """Persist a June 2025 household and return its budget."""

    ledger_repo.seed_default_mappings()
    budget = budget_repo.create(
        Budget(
            partnership_id=PARTNERSHIP,
            created_by=OWNER,
            name="Household",
            period_type="monthly",
            budget_view="shared",
            carryover_mode="rollover",
        )
    )
    income_repo.create(
        IncomeSourceRecord(
            partnership_id=PARTNERSHIP,
            user_id=OWNER,
            name="Salary",
            amount_cents=400000,
            frequency="monthly",
        )
    )
    income_repo.create(
        IncomeSourceRecord(
            partnership_id=PARTNERSHIP,
            user_id=PARTNER,
            name="Salary",
            amount_cents=100000,
            frequency="monthly",
        )
    )
    for row in (
        BudgetAssignment(budget_id=budget.id, month="2025-06-01", category_name="Food & Dining", subcategory_name="Groceries", assigned_cents=60000),
        BudgetAssignment(budget_id=budget.id, month="2025-06-01", category_name="Housing & Utilities", assigned_cents=100000),
        BudgetAssignment(budget_id=budget.id, month="2025-07-01", category_name="Food & Dining", subcategory_name="Groceries", assigned_cents=1),
        BudgetAssignment(
            budget_id=budget.id,
            month="2025-06-01",
            budget_view="individual",
            category_name="Food & Dining",
            subcategory_name="Groceries",
            assigned_cents=99,
        ),
    ):
        budget_repo.add_assignment(row)

    goal = savings_repo.create_goal(
        SavingsGoal(id="g1", partnership_id=PARTNERSHIP, name="Holiday", target_cents=300000, linked_account_id="acct-holiday")
    )
    budget_repo.add_assignment(
        BudgetAssignment(budget_id=budget.id, month="2025-06-01", assignment_type="goal", goal_id=goal.id, assigned_cents=50000)
    )

    for txn in (
        BankTransaction(id="t1", partnership_id=PARTNERSHIP, account_id="acct-main", amount_cents=-12000, raw_category_id="groceries", settled_at=datetime(2025, 6, 3, 9, 30)),
        BankTransaction(id="t2", partnership_id=PARTNERSHIP, account_id="acct-main", amount_cents=-8000, raw_category_id="utilities", settled_at=datetime(2025, 6, 30, 23, 59)),
        BankTransaction(id="t3", partnership_id=PARTNERSHIP, account_id="acct-main", amount_cents=-4000, raw_category_id="groceries", settled_at=datetime(2025, 6, 21), status="HELD"),
        BankTransaction(id="t4", partnership_id=PARTNERSHIP, account_id="acct-main", amount_cents=-7000, raw_category_id="groceries", settled_at=datetime(2025, 7, 1, 0, 0)),
        BankTransaction(
            id="t5",
            partnership_id=PARTNERSHIP,
            account_id="acct-main",
            amount_cents=-20000,
            raw_category_id="internal-transfer",
            settled_at=datetime(2025, 6, 15),
            is_internal_transfer=True,
            transfer_account_id="acct-holiday",
        ),
        BankTransaction(id="t6", partnership_id="someone-else", account_id="acct-x", amount_cents=-5000, raw_category_id="groceries", settled_at=datetime(2025, 6, 5)),
    ):
        ledger_repo.create_transaction(txn)

    electricity = ledger_repo.create_expense_definition(
        ExpenseDefinitionRecord(
            partnership_id=PARTNERSHIP,
            name="Electricity",
            expected_amount_cents=9000,
            recurrence_type="monthly",
            next_due_date=date(2025, 6, 12),
        )
    )
    ledger_repo.add_match(electricity.id, "t2")
    return budget
