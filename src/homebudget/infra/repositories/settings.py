"""Split settings and methodology customization repositories.

Both tables have natural keys containing nullable columns, which rules out a
plain upsert; writes delete the matching row and insert the new one.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlmodel import select

from ...logging_config import get_logger
from ...models.settings import CoupleSplitSetting, MethodologyCustomizationRecord
from ..database import SessionFactory

logger = get_logger("repositories.settings")


def _same(column: Any, value: Optional[str]) -> Any:
    """Null-safe equality for optional key columns."""
    return column.is_(None) if value is None else column == value


class SQLModelSplitSettingRepository:
    """Ownership split settings per partnership."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_for_partnership(self, partnership_id: str) -> list[CoupleSplitSetting]:
        with self.session_factory() as session:
            statement = (
                select(CoupleSplitSetting)
                .where(CoupleSplitSetting.partnership_id == partnership_id)
                .order_by(CoupleSplitSetting.id)
            )
            return list(session.exec(statement).all())

    def replace(self, setting: CoupleSplitSetting) -> CoupleSplitSetting:
        """Store ``setting``, replacing any row with the same scope and target."""
        with self.session_factory() as session:
            stale = session.exec(
                select(CoupleSplitSetting)
                .where(CoupleSplitSetting.partnership_id == setting.partnership_id)
                .where(CoupleSplitSetting.scope == setting.scope)
                .where(_same(CoupleSplitSetting.category_name, setting.category_name))
                .where(_same(CoupleSplitSetting.expense_definition_id, setting.expense_definition_id))
            ).all()
            for row in stale:
                session.delete(row)
            session.flush()
            session.add(setting)
            session.commit()
            session.refresh(setting)
            session.expunge(setting)
            logger.info(
                "Replaced split setting",
                extra={"partnership_id": setting.partnership_id, "scope": setting.scope, "replaced": len(stale)},
            )
            return setting


class SQLModelMethodologyRepository:
    """Methodology customizations keyed by partnership, methodology and user."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_for(self, partnership_id: str, methodology: str) -> list[MethodologyCustomizationRecord]:
        """Partnership-wide and user-specific rows for one methodology."""
        with self.session_factory() as session:
            statement = (
                select(MethodologyCustomizationRecord)
                .where(MethodologyCustomizationRecord.partnership_id == partnership_id)
                .where(MethodologyCustomizationRecord.methodology == methodology)
                .order_by(MethodologyCustomizationRecord.id)
            )
            return list(session.exec(statement).all())

    def get(
        self, partnership_id: str, methodology: str, user_id: Optional[str]
    ) -> Optional[MethodologyCustomizationRecord]:
        with self.session_factory() as session:
            statement = (
                select(MethodologyCustomizationRecord)
                .where(MethodologyCustomizationRecord.partnership_id == partnership_id)
                .where(MethodologyCustomizationRecord.methodology == methodology)
                .where(_same(MethodologyCustomizationRecord.user_id, user_id))
            )
            return session.exec(statement).first()

    def replace(self, record: MethodologyCustomizationRecord) -> MethodologyCustomizationRecord:
        with self.session_factory() as session:
            stale = session.exec(
                select(MethodologyCustomizationRecord)
                .where(MethodologyCustomizationRecord.partnership_id == record.partnership_id)
                .where(MethodologyCustomizationRecord.methodology == record.methodology)
                .where(_same(MethodologyCustomizationRecord.user_id, record.user_id))
            ).all()
            for row in stale:
                session.delete(row)
            session.flush()
            session.add(record)
            session.commit()
            session.refresh(record)
            session.expunge(record)
            logger.info(
                "Saved methodology customization",
                extra={"partnership_id": record.partnership_id, "methodology": record.methodology, "user_id": record.user_id},
            )
            return record

    def delete(self, partnership_id: str, methodology: str, user_id: Optional[str]) -> bool:
        """Delete one customization row; returns whether a row existed."""
        with self.session_factory() as session:
            record = session.exec(
                select(MethodologyCustomizationRecord)
                .where(MethodologyCustomizationRecord.partnership_id == partnership_id)
                .where(MethodologyCustomizationRecord.methodology == methodology)
                .where(_same(MethodologyCustomizationRecord.user_id, user_id))
            ).first()
            if not record:
                return False
            session.delete(record)
            session.commit()
            return True


__all__ = ["SQLModelMethodologyRepository", "SQLModelSplitSettingRepository"]
