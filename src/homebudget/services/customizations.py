"""Reading, saving and resetting methodology customizations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from ..domain.records import CustomCategory, MethodologyCustomization
from ..domain.repositories.settings import MethodologyRepository
from ..logging_config import get_logger
from ..models.settings import MethodologyCustomizationRecord
from .methodology import (
    InvalidCustomizationError,
    MethodologyCategory,
    merge_methodology,
    preset_for,
    select_customization,
    validate_customization,
)

logger = get_logger("services.customizations")


def custom_category_from_dict(payload: dict[str, Any]) -> CustomCategory:
    """Build a :class:`CustomCategory` from its stored JSON form."""

    try:
        original_name = payload["original_name"]
        name = payload["name"]
    except KeyError as exc:
        raise InvalidCustomizationError(f"Custom category is missing {exc.args[0]!r}") from exc
    underlying = payload.get("underlying_categories")
    return CustomCategory(
        original_name=original_name,
        name=name,
        percentage=payload.get("percentage"),
        underlying_categories=tuple(underlying) if underlying is not None else None,
        color=payload.get("color"),
        display_order=payload.get("display_order"),
        is_hidden=bool(payload.get("is_hidden", False)),
    )


def custom_category_to_dict(custom: CustomCategory) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "original_name": custom.original_name,
        "name": custom.name,
        "is_hidden": custom.is_hidden,
    }
    if custom.percentage is not None:
        payload["percentage"] = custom.percentage
    if custom.underlying_categories is not None:
        payload["underlying_categories"] = list(custom.underlying_categories)
    if custom.color is not None:
        payload["color"] = custom.color
    if custom.display_order is not None:
        payload["display_order"] = custom.display_order
    return payload


def to_customization(record: MethodologyCustomizationRecord) -> MethodologyCustomization:
    return MethodologyCustomization(
        custom_categories=tuple(custom_category_from_dict(item) for item in record.custom_categories or ()),
        hidden_subcategories=tuple(record.hidden_subcategories or ()),
        user_id=record.user_id,
    )


@dataclass(frozen=True, slots=True)
class CustomizationView:
    """What a user sees for one methodology: their override, the preset and the merge."""

    methodology: str
    customization: Optional[MethodologyCustomization]
    preset: list[MethodologyCategory]
    merged: list[MethodologyCategory]


class MethodologyCustomizationService:
    """Validates customizations before they reach storage."""

    def __init__(self, repository: MethodologyRepository):
        self.repository = repository

    def load(
        self, partnership_id: str, methodology: str, user_id: Optional[str] = None
    ) -> Optional[MethodologyCustomization]:
        """The customization in effect for ``user_id``: theirs, else the partnership's."""

        records = self.repository.list_for(partnership_id, methodology)
        return select_customization((to_customization(record) for record in records), user_id)

    def read(self, partnership_id: str, methodology: str, user_id: Optional[str] = None) -> CustomizationView:
        preset = preset_for(methodology)
        customization = self.load(partnership_id, methodology, user_id)
        return CustomizationView(
            methodology=methodology,
            customization=customization,
            preset=preset,
            merged=merge_methodology(methodology, customization),
        )

    def save(
        self,
        partnership_id: str,
        methodology: str,
        custom_categories: Sequence[CustomCategory],
        *,
        hidden_subcategories: Iterable[str] = (),
        user_id: Optional[str] = None,
    ) -> MethodologyCustomization:
        """Validate and store a customization, replacing any previous one.

        Raises:
            ValueError: unknown methodology.
            InvalidCustomizationError: the customization failed validation; nothing is stored.
        """

        try:
            validate_customization(methodology, custom_categories)
        except ValueError as exc:
            logger.warning(
                "Rejected methodology customization: %s",
                exc,
                extra={"partnership_id": partnership_id, "methodology": methodology, "user_id": user_id},
            )
            raise

        record = self.repository.replace(
            MethodologyCustomizationRecord(
                partnership_id=partnership_id,
                user_id=user_id,
                methodology=methodology,
                custom_categories=[custom_category_to_dict(custom) for custom in custom_categories],
                hidden_subcategories=list(hidden_subcategories),
            )
        )
        return to_customization(record)

    def reset(
        self, partnership_id: str, methodology: str, user_id: Optional[str] = None
    ) -> list[MethodologyCategory]:
        """Drop the stored customization and return the untouched preset."""

        preset = preset_for(methodology)
        if self.repository.delete(partnership_id, methodology, user_id):
            logger.info(
                "Reset methodology customization",
                extra={"partnership_id": partnership_id, "methodology": methodology, "user_id": user_id},
            )
        return preset


__all__ = [
    "CustomizationView",
    "MethodologyCustomizationService",
    "custom_category_from_dict",
    "custom_category_to_dict",
    "to_customization",
]
