"""Regular-day-off (RDO) calendar computation."""

import calendar
import logging
from datetime import date
from typing import Dict

from app.models.schedule import OFF_DUTY_CODE, PatternType, RdoSchedule

logger = logging.getLogger(__name__)


def days_in_month(year: int, month_index: int) -> int:
    """Number of days in a month, ``month_index`` 0 = January."""
    return calendar.monthrange(year, month_index + 1)[1]


def sunday_weekday(day: date) -> int:
    """Weekday with 0 = Sunday .. 6 = Saturday."""
    return day.isoweekday() % 7


def is_off_duty(day: date, schedule: RdoSchedule) -> bool:
    if schedule.pattern_type is PatternType.ROTATING:
        # Calendar-date subtraction, immune to DST transitions
        diff_days = (day - schedule.anchor_date).days
        # Python's % already wraps negatives into [0, cycle_length)
        day_index = (diff_days + schedule.squad_offset) % schedule.cycle_length
    else:
        day_index = sunday_weekday(day)
    return schedule.pattern[day_index] == OFF_DUTY_CODE


def month_schedule(year: int, month_index: int, schedule: RdoSchedule) -> Dict[int, bool]:
    """
    Duty status for every day of a month.

    Args:
        year: Calendar year
        month_index: 0-based month (0 = January)
        schedule: Squad RDO schedule

    Returns:
        Mapping of day of month (1..N) to True when the squad is on duty.
        Empty when the schedule cannot be evaluated.
    """
    if not schedule.is_usable:
        logger.warning(f"Schedule {schedule.schedule_id} has an unusable pattern; no calendar computed")
        return {}

    return {
        day: not is_off_duty(date(year, month_index + 1, day), schedule)
        for day in range(1, days_in_month(year, month_index) + 1)
    }
