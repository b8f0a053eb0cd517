"""SQLModel implementation of the savings repository."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from sqlmodel import select

from ...models.savings import Investment, InvestmentContribution, SavingsGoal
from ..database import SessionFactory


class SQLModelSavingsRepository:
    """Goals, investments and investment contributions."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_goals(self, partnership_id: str) -> list[SavingsGoal]:
        """Active goals, by name."""
        with self.session_factory() as session:
            statement = (
                select(SavingsGoal)
                .where(SavingsGoal.partnership_id == partnership_id)
                .where(SavingsGoal.is_active == True)  # noqa: E712
                .order_by(SavingsGoal.name)
            )
            return list(session.exec(statement).all())

    def create_goal(self, goal: SavingsGoal) -> SavingsGoal:
        with self.session_factory() as session:
            session.add(goal)
            session.commit()
            session.refresh(goal)
            session.expunge(goal)
            return goal

    def list_investments(self, partnership_id: str) -> list[Investment]:
        with self.session_factory() as session:
            statement = (
                select(Investment)
                .where(Investment.partnership_id == partnership_id)
                .order_by(Investment.name)
            )
            return list(session.exec(statement).all())

    def create_investment(self, investment: Investment) -> Investment:
        with self.session_factory() as session:
            session.add(investment)
            session.commit()
            session.refresh(investment)
            session.expunge(investment)
            return investment

    def add_contribution(self, contribution: InvestmentContribution) -> InvestmentContribution:
        with self.session_factory() as session:
            session.add(contribution)
            session.commit()
            session.refresh(contribution)
            session.expunge(contribution)
            return contribution

    def list_contributions(self, partnership_id: str, start: date, end: date) -> list[InvestmentContribution]:
        """Contributions to the partnership's investments within ``start``..``end``."""
        lower = datetime.combine(start, time.min)
        upper = datetime.combine(end + timedelta(days=1), time.min)
        with self.session_factory() as session:
            statement = (
                select(InvestmentContribution)
                .join(Investment, Investment.id == InvestmentContribution.investment_id)
                .where(Investment.partnership_id == partnership_id)
                .where(InvestmentContribution.contributed_at >= lower)
                .where(InvestmentContribution.contributed_at < upper)
                .order_by(InvestmentContribution.contributed_at)
            )
            return list(session.exec(statement).all())


__all__ = ["SQLModelSavingsRepository"]
