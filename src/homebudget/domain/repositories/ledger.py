"""Income and bank-ledger repository protocols."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.income import IncomeSourceRecord
from ...models.ledger import BankTransaction, CategoryMappingRecord, ExpenseDefinitionRecord, ExpenseMatch


class IncomeRepository(Protocol):
    def list_active(self, partnership_id: str) -> list[IncomeSourceRecord]:
        ...

    def create(self, source: IncomeSourceRecord) -> IncomeSourceRecord:
        ...


class LedgerRepository(Protocol):
    """Category mappings, settled transactions and recurring expenses."""

    def list_category_mappings(self) -> list[CategoryMappingRecord]:
        ...

    def save_category_mapping(self, mapping: CategoryMappingRecord) -> CategoryMappingRecord:
        ...

    def seed_default_mappings(self) -> int:
        """Insert bundled mappings that are missing."""
        ...

    def list_settled_transactions(self, partnership_id: str, start: date, end: date) -> list[BankTransaction]:
        ...

    def create_transaction(self, transaction: BankTransaction) -> BankTransaction:
        ...

    def list_expense_definitions(self, partnership_id: str) -> list[ExpenseDefinitionRecord]:
        ...

    def create_expense_definition(self, definition: ExpenseDefinitionRecord) -> ExpenseDefinitionRecord:
        ...

    def add_match(self, expense_definition_id: str, transaction_id: str) -> ExpenseMatch:
        ...

    def list_matches(self, partnership_id: str) -> list[tuple[str, str, Optional[str]]]:
        """``(expense_definition_id, transaction_id, raw_category_id)`` triples."""
        ...
