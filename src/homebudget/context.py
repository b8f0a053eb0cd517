"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import (
    SQLModelBudgetRepository,
    SQLModelIncomeRepository,
    SQLModelLedgerRepository,
    SQLModelMethodologyRepository,
    SQLModelSavingsRepository,
    SQLModelSplitSettingRepository,
)
from .logging_config import get_logger
from .services.customizations import MethodologyCustomizationService
from .services.snapshot import SummaryLoader

logger = get_logger("context")


@dataclass
class AppContext:
    """Centralized application context with repositories and services."""

    # Configuration
    config: BaseConfig
    engine: Engine

    # Session factory
    session_factory: SessionFactory

    # Repositories
    budget_repo: SQLModelBudgetRepository
    income_repo: SQLModelIncomeRepository
    ledger_repo: SQLModelLedgerRepository
    split_repo: SQLModelSplitSettingRepository
    methodology_repo: SQLModelMethodologyRepository
    savings_repo: SQLModelSavingsRepository

    # Services
    customizations: MethodologyCustomizationService
    loader: SummaryLoader


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    budget_repo = SQLModelBudgetRepository(session_factory)
    income_repo = SQLModelIncomeRepository(session_factory)
    ledger_repo = SQLModelLedgerRepository(session_factory)
    split_repo = SQLModelSplitSettingRepository(session_factory)
    methodology_repo = SQLModelMethodologyRepository(session_factory)
    savings_repo = SQLModelSavingsRepository(session_factory)
    customizations = MethodologyCustomizationService(methodology_repo)

    loader = SummaryLoader(
        budgets=budget_repo,
        income=income_repo,
        ledger=ledger_repo,
        splits=split_repo,
        customizations=customizations,
        savings=savings_repo,
        fortnight_anchor=config.FORTNIGHT_ANCHOR,
    )
    logger.debug("Application context ready", extra={"database_url": config.DATABASE_URL})

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        budget_repo=budget_repo,
        income_repo=income_repo,
        ledger_repo=ledger_repo,
        split_repo=split_repo,
        methodology_repo=methodology_repo,
        savings_repo=savings_repo,
        customizations=customizations,
        loader=loader,
    )


__all__ = ["AppContext", "create_app_context"]
