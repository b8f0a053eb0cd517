"""Savings repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Protocol

from ...models.savings import Investment, InvestmentContribution, SavingsGoal


class SavingsRepository(Protocol):
    """Repository for goals and investments."""

    def list_goals(self, partnership_id: str) -> list[SavingsGoal]:
        ...

    def create_goal(self, goal: SavingsGoal) -> SavingsGoal:
        ...

    def list_investments(self, partnership_id: str) -> list[Investment]:
        ...

    def create_investment(self, investment: Investment) -> Investment:
        ...

    def add_contribution(self, contribution: InvestmentContribution) -> InvestmentContribution:
        ...

    def list_contributions(self, partnership_id: str, start: date, end: date) -> list[InvestmentContribution]:
        ...
