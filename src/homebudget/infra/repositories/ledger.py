"""SQLModel implementations for income, category mappings and bank data."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from sqlmodel import select

from ...constants.categories import DEFAULT_CATEGORY_MAPPINGS
from ...logging_config import get_logger
from ...models.income import IncomeSourceRecord
from ...models.ledger import (
    BankTransaction,
    CategoryMappingRecord,
    ExpenseDefinitionRecord,
    ExpenseMatch,
)
from ..database import SessionFactory

logger = get_logger("repositories.ledger")

SETTLED = "SETTLED"


def _window(start: date, end: date) -> tuple[datetime, datetime]:
    """Half-open datetime bounds covering the inclusive date range."""
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


class SQLModelIncomeRepository:
    """Income sources per partnership."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_active(self, partnership_id: str) -> list[IncomeSourceRecord]:
        with self.session_factory() as session:
            statement = (
                select(IncomeSourceRecord)
                .where(IncomeSourceRecord.partnership_id == partnership_id)
                .where(IncomeSourceRecord.is_active == True)  # noqa: E712
                .order_by(IncomeSourceRecord.name)
            )
            return list(session.exec(statement).all())

    def create(self, source: IncomeSourceRecord) -> IncomeSourceRecord:
        with self.session_factory() as session:
            session.add(source)
            session.commit()
            session.refresh(source)
            session.expunge(source)
            return source


class SQLModelLedgerRepository:
    """Category mappings, bank transactions and recurring expense definitions."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    # Category mappings
    def list_category_mappings(self) -> list[CategoryMappingRecord]:
        with self.session_factory() as session:
            statement = select(CategoryMappingRecord).order_by(
                CategoryMappingRecord.display_order, CategoryMappingRecord.raw_category_id
            )
            return list(session.exec(statement).all())

    def save_category_mapping(self, mapping: CategoryMappingRecord) -> CategoryMappingRecord:
        """Insert or overwrite the mapping for ``mapping.raw_category_id``."""
        with self.session_factory() as session:
            merged = session.merge(mapping)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def seed_default_mappings(self, mappings: Optional[Iterable[tuple]] = None) -> int:
        """Insert the bundled mappings that are missing; returns how many were added."""
        added = 0
        with self.session_factory() as session:
            existing = set(session.exec(select(CategoryMappingRecord.raw_category_id)).all())
            for order, (raw_id, parent, child, icon) in enumerate(mappings or DEFAULT_CATEGORY_MAPPINGS):
                if raw_id in existing:
                    continue
                session.add(
                    CategoryMappingRecord(
                        raw_category_id=raw_id,
                        parent_name=parent,
                        child_name=child,
                        icon=icon,
                        display_order=order,
                    )
                )
                added += 1
            session.commit()
        if added:
            logger.info("Seeded category mappings", extra={"count": added})
        return added

    # Transactions
    def list_settled_transactions(self, partnership_id: str, start: date, end: date) -> list[BankTransaction]:
        """Settled transactions whose settlement falls within ``start``..``end`` inclusive."""
        lower, upper = _window(start, end)
        with self.session_factory() as session:
            statement = (
                select(BankTransaction)
                .where(BankTransaction.partnership_id == partnership_id)
                .where(BankTransaction.status == SETTLED)
                .where(BankTransaction.settled_at >= lower)
                .where(BankTransaction.settled_at < upper)
                .order_by(BankTransaction.settled_at, BankTransaction.id)
            )
            return list(session.exec(statement).all())

    def create_transaction(self, transaction: BankTransaction) -> BankTransaction:
        with self.session_factory() as session:
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            return transaction

    # Expense definitions
    def list_expense_definitions(self, partnership_id: str) -> list[ExpenseDefinitionRecord]:
        with self.session_factory() as session:
            statement = (
                select(ExpenseDefinitionRecord)
                .where(ExpenseDefinitionRecord.partnership_id == partnership_id)
                .order_by(ExpenseDefinitionRecord.name, ExpenseDefinitionRecord.id)
            )
            return list(session.exec(statement).all())

    def create_expense_definition(self, definition: ExpenseDefinitionRecord) -> ExpenseDefinitionRecord:
        with self.session_factory() as session:
            session.add(definition)
            session.commit()
            session.refresh(definition)
            session.expunge(definition)
            return definition

    def add_match(self, expense_definition_id: str, transaction_id: str) -> ExpenseMatch:
        with self.session_factory() as session:
            match = ExpenseMatch(expense_definition_id=expense_definition_id, transaction_id=transaction_id)
            session.add(match)
            session.commit()
            session.refresh(match)
            session.expunge(match)
            return match

    def list_matches(self, partnership_id: str) -> list[tuple[str, str, Optional[str]]]:
        """``(expense_definition_id, transaction_id, raw_category_id)`` for every match."""
        with self.session_factory() as session:
            statement = (
                select(
                    ExpenseMatch.expense_definition_id,
                    BankTransaction.id,
                    BankTransaction.raw_category_id,
                )
                .join(BankTransaction, BankTransaction.id == ExpenseMatch.transaction_id)
                .where(BankTransaction.partnership_id == partnership_id)
                .order_by(BankTransaction.settled_at, BankTransaction.id)
            )
            return [tuple(row) for row in session.exec(statement).all()]


__all__ = ["SQLModelIncomeRepository", "SQLModelLedgerRepository"]
