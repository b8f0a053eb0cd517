"""Partnership settings repository protocols."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.settings import CoupleSplitSetting, MethodologyCustomizationRecord


class SplitSettingRepository(Protocol):
    def list_for_partnership(self, partnership_id: str) -> list[CoupleSplitSetting]:
        ...

    def replace(self, setting: CoupleSplitSetting) -> CoupleSplitSetting:
        """Store a setting, replacing the one with the same scope and target."""
        ...


class MethodologyRepository(Protocol):
    def list_for(self, partnership_id: str, methodology: str) -> list[MethodologyCustomizationRecord]:
        ...

    def get(
        self, partnership_id: str, methodology: str, user_id: Optional[str]
    ) -> Optional[MethodologyCustomizationRecord]:
        ...

    def replace(self, record: MethodologyCustomizationRecord) -> MethodologyCustomizationRecord:
        ...

    def delete(self, partnership_id: str, methodology: str, user_id: Optional[str]) -> bool:
        ...
