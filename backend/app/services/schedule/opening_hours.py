"""Precinct opening hours laid out over a calendar month."""

from dataclasses import dataclass
from datetime import date
from typing import Dict

from app.models.precinct import Precinct
from app.services.schedule.rdo import days_in_month, sunday_weekday


@dataclass(frozen=True)
class DayHours:
    is_open: bool
    hours: str


def month_opening_hours(year: int, month_index: int, precinct: Precinct) -> Dict[int, DayHours]:
    """
    Per-day open flag and hours text from the precinct's weekday table.

    Days whose weekday has no entry are left out; empty when the precinct
    has no hours data.
    """
    table = precinct.opening_hours
    if not table:
        return {}

    result: Dict[int, DayHours] = {}
    for day in range(1, days_in_month(year, month_index) + 1):
        weekday = sunday_weekday(date(year, month_index + 1, day))
        if weekday < len(table):
            entry = table[weekday]
            result[day] = DayHours(is_open=entry.is_open, hours=entry.hours)
    return result
