"""Income normalization across pay frequencies.

Prorating rule
--------------
Recurring amounts are scaled to the period they are viewed in:

* weekly and fortnightly amounts scale by day count (``days / 7``, ``days / 14``);
* monthly, quarterly and yearly amounts scale by calendar months, where each
  day of the period is worth ``1 / days_in_its_month`` of a month
  (``months``, ``months / 3``, ``months / 12``).

A weekly $1,000 salary is therefore worth ``100000 * 30 / 7 = 428571`` cents in
June, and a monthly salary is worth exactly its amount in any calendar month.
Every source is rounded half-up to whole cents before sources are summed.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Iterable

from ..domain.records import INCOME_FREQUENCIES, IncomeSource, PeriodRange

INCOME_SCOPES = ("self", "partner", "combined")

_DAYS_PER_UNIT = {"weekly": 7, "fortnightly": 14}
_MONTHS_PER_UNIT = {"monthly": 1, "quarterly": 3, "yearly": 12}


def round_cents(value: Fraction | Decimal | float | int) -> int:
    """Round a fractional cent amount half-up (away from zero) to an int."""

    if isinstance(value, Fraction):
        value = Decimal(value.numerator) / Decimal(value.denominator)
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def period_months(period: PeriodRange) -> Fraction:
    """Length of ``period`` in calendar months (fractional for partial months)."""

    total = Fraction(0)
    cursor = period.start
    while cursor <= period.end:
        days_in_month = monthrange(cursor.year, cursor.month)[1]
        month_end = cursor.replace(day=days_in_month)
        last = min(month_end, period.end)
        total += Fraction((last - cursor).days + 1, days_in_month)
        cursor = last + timedelta(days=1)
    return total


def prorate_fraction(frequency: str, period: PeriodRange) -> Fraction:
    """How many ``frequency`` units fit in ``period``."""

    if frequency in _DAYS_PER_UNIT:
        return Fraction(period.days, _DAYS_PER_UNIT[frequency])
    if frequency in _MONTHS_PER_UNIT:
        return period_months(period) / _MONTHS_PER_UNIT[frequency]
    raise ValueError(
        f"Unknown frequency {frequency!r}; expected one of {', '.join(INCOME_FREQUENCIES)}"
    )


def prorate(amount_cents: int, frequency: str, period: PeriodRange) -> int:
    """Scale a per-``frequency`` amount to ``period`` using the module rule."""

    return round_cents(amount_cents * prorate_fraction(frequency, period))


def scope_for_view(budget_view: str) -> str:
    return "self" if budget_view == "individual" else "combined"


def in_scope(source: IncomeSource, scope: str, viewer_user_id: str) -> bool:
    """Whether ``source`` belongs to the requested ownership scope."""

    own = source.owner_user_id == viewer_user_id and not source.is_manual_partner_income
    if scope == "self":
        return own
    if scope == "partner":
        return not own
    if scope == "combined":
        return True
    raise ValueError(f"Unknown income scope {scope!r}; expected one of {', '.join(INCOME_SCOPES)}")


@dataclass(frozen=True, slots=True)
class IncomeBreakdown:
    """Period income split by where it came from."""

    recurring: int = 0
    received_one_off: int = 0
    expected_one_off: int = 0

    @property
    def total(self) -> int:
        """Income that counts toward the period; expected one-offs are excluded."""
        return self.recurring + self.received_one_off


def normalize_income(
    sources: Iterable[IncomeSource],
    period: PeriodRange,
    *,
    scope: str,
    viewer_user_id: str,
) -> IncomeBreakdown:
    """Convert heterogeneous income records into one period-equivalent figure."""

    recurring = 0
    received = 0
    expected = 0
    for source in sources:
        if not source.is_active or not in_scope(source, scope, viewer_user_id):
            continue
        if source.source_type != "one-off" and source.frequency not in INCOME_FREQUENCIES:
            # Unusable frequency; the source contributes nothing.
            continue
        if source.source_type == "one-off":
            if not source.is_received:
                expected += source.amount_cents
            elif source.received_date is not None and period.contains(source.received_date):
                received += source.amount_cents
            continue
        recurring += prorate(source.amount_cents, source.frequency, period)
    return IncomeBreakdown(recurring=recurring, received_one_off=received, expected_one_off=expected)


__all__ = [
    "INCOME_SCOPES",
    "IncomeBreakdown",
    "in_scope",
    "normalize_income",
    "period_months",
    "prorate",
    "prorate_fraction",
    "round_cents",
    "scope_for_view",
]
