"""Projection of recurring expenses onto a budget period."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, timedelta

from ..domain.records import RECURRENCE_TYPES, ExpenseDefinition, PeriodRange
from .income import prorate

_DAY_STEPS = {"weekly": 7, "fortnightly": 14}
_MONTH_STEPS = {"monthly": 1, "quarterly": 3, "yearly": 12}


def count_occurrences(next_due_date: date, recurrence_type: str, start: date, end: date) -> int:
    """Count due dates of a recurrence that fall inside ``[start, end]``.

    ``next_due_date`` anchors the recurrence grid and need not be inside the
    window. Month-based recurrences keep the anchor's day of month, clamped for
    short months.
    """

    if recurrence_type == "one-time":
        return 1 if start <= next_due_date <= end else 0

    if recurrence_type in _DAY_STEPS:
        step = _DAY_STEPS[recurrence_type]
        offset = (start - next_due_date).days % step
        first = start + timedelta(days=(step - offset) % step)
        if first > end:
            return 0
        return (end - first).days // step + 1

    if recurrence_type not in _MONTH_STEPS:
        raise ValueError(f"Unknown recurrence type {recurrence_type!r}")

    interval = _MONTH_STEPS[recurrence_type]
    anchor_month = next_due_date.year * 12 + next_due_date.month - 1
    start_month = start.year * 12 + start.month - 1
    end_month = end.year * 12 + end.month - 1

    offset = start_month - anchor_month
    if offset % interval:
        offset += interval - offset % interval

    count = 0
    month_index = anchor_month + offset
    while month_index <= end_month:
        year, month = divmod(month_index, 12)
        due = date(year, month + 1, min(next_due_date.day, monthrange(year, month + 1)[1]))
        if start <= due <= end:
            count += 1
        month_index += interval
    return count


def expected_amount(expense: ExpenseDefinition, period: PeriodRange) -> int:
    """Projected spend of ``expense`` in ``period``.

    Uses the due-date grid when a next due date is known and falls back to the
    income prorating rule otherwise. An unrecognized recurrence type projects
    nothing.
    """

    if expense.recurrence_type not in RECURRENCE_TYPES:
        return 0
    if expense.next_due_date is not None:
        occurrences = count_occurrences(
            expense.next_due_date, expense.recurrence_type, period.start, period.end
        )
        return expense.expected_amount_cents * occurrences
    if expense.recurrence_type == "one-time":
        return 0
    return prorate(expense.expected_amount_cents, expense.recurrence_type, period)


__all__ = ["count_occurrences", "expected_amount"]
