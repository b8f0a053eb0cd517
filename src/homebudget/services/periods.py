"""Budget period framing and navigation."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta

from ..domain.records import PERIOD_TYPES, PeriodRange

# Fortnights repeat every 14 days from this Monday.
FORTNIGHT_ANCHOR = date(2024, 1, 1)

STEP_DIRECTIONS = ("next", "previous")


def validate_period_type(period_type: str) -> str:
    """Return ``period_type`` unchanged or raise for unknown values."""

    if period_type not in PERIOD_TYPES:
        raise ValueError(
            f"Unknown period type {period_type!r}; expected one of {', '.join(PERIOD_TYPES)}"
        )
    return period_type


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _short(value: date) -> str:
    return f"{value.day} {value:%b}"


def _shift_months(value: date, months: int) -> date:
    """Move ``value`` by whole calendar months, clamping the day to the target month."""

    total = value.year * 12 + (value.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    day = min(value.day, monthrange(year, month)[1])
    return date(year, month, day)


def frame_period(
    anchor: date | datetime,
    period_type: str,
    *,
    fortnight_anchor: date = FORTNIGHT_ANCHOR,
) -> PeriodRange:
    """Return the inclusive period containing ``anchor``.

    Weeks run Monday to Sunday, fortnights are 14-day blocks counted from
    ``fortnight_anchor`` and months are calendar months.
    """

    validate_period_type(period_type)
    day = _as_date(anchor)

    if period_type == "weekly":
        start = day - timedelta(days=day.weekday())
        end = start + timedelta(days=6)
        label = f"Week of {_short(start)} {start.year}"
    elif period_type == "fortnightly":
        offset = (day - fortnight_anchor).days % 14
        start = day - timedelta(days=offset)
        end = start + timedelta(days=13)
        start_label = _short(start) if start.year == end.year else f"{_short(start)} {start.year}"
        label = f"{start_label} - {_short(end)} {end.year}"
    else:
        start = day.replace(day=1)
        end = day.replace(day=monthrange(day.year, day.month)[1])
        label = f"{start:%B} {start.year}"

    return PeriodRange(start=start, end=end, label=label, period_type=period_type)


def step_period(anchor: date | datetime, period_type: str, direction: str) -> date:
    """Shift ``anchor`` by exactly one period unit.

    Weekly and fortnightly steps are exact inverses of each other. Monthly steps
    clamp the day of month, so stepping forward then back always lands in the
    original period even when the day itself changes (31 Jan -> 28 Feb -> 28 Jan).
    """

    validate_period_type(period_type)
    if direction not in STEP_DIRECTIONS:
        raise ValueError(f"Unknown step direction {direction!r}; expected 'next' or 'previous'")

    day = _as_date(anchor)
    sign = 1 if direction == "next" else -1
    if period_type == "weekly":
        return day + timedelta(days=7 * sign)
    if period_type == "fortnightly":
        return day + timedelta(days=14 * sign)
    return _shift_months(day, sign)


def next_period(anchor: date | datetime, period_type: str) -> date:
    return step_period(anchor, period_type, "next")


def previous_period(anchor: date | datetime, period_type: str) -> date:
    return step_period(anchor, period_type, "previous")


def month_key(anchor: date | datetime) -> str:
    """Return the ``YYYY-MM-01`` key of the calendar month containing ``anchor``.

    Assignments are stored per calendar month regardless of the budget's period
    type, so weekly and fortnightly budgets share one assignment set per month.
    A period is keyed by the month of its first day (``month_key(period.start)``).
    """

    day = _as_date(anchor)
    return f"{day.year:04d}-{day.month:02d}-01"


def period_start_for_key(key: str) -> date:
    """Parse a ``YYYY-MM-01`` month key back into the first day of that month."""

    try:
        return datetime.strptime(key, "%Y-%m-%d").date().replace(day=1)
    except ValueError as exc:
        raise ValueError(f"Invalid month key {key!r}; expected YYYY-MM-01") from exc


def periods_in_month(
    anchor: date | datetime,
    period_type: str,
    *,
    fortnight_anchor: date = FORTNIGHT_ANCHOR,
) -> tuple[PeriodRange, ...]:
    """All periods that belong to the month of the period containing ``anchor``.

    A period belongs to the month its first day falls in, so a week running
    30 Jun - 6 Jul is June's last week.
    """

    owner = frame_period(anchor, period_type, fortnight_anchor=fortnight_anchor).start
    first_day = owner.replace(day=1)
    period = frame_period(first_day, period_type, fortnight_anchor=fortnight_anchor)
    if period.start < first_day:
        period = frame_period(period.end + timedelta(days=1), period_type, fortnight_anchor=fortnight_anchor)

    periods = []
    while period.start.month == owner.month and period.start.year == owner.year:
        periods.append(period)
        period = frame_period(period.end + timedelta(days=1), period_type, fortnight_anchor=fortnight_anchor)
    return tuple(periods)


__all__ = [
    "FORTNIGHT_ANCHOR",
    "STEP_DIRECTIONS",
    "frame_period",
    "month_key",
    "next_period",
    "period_start_for_key",
    "periods_in_month",
    "previous_period",
    "step_period",
    "validate_period_type",
]
