"""Squad RDO calendars and precinct opening-hours calendars."""

from app.services.schedule.book import ScheduleBook
from app.services.schedule.rdo import month_schedule

__all__ = ["ScheduleBook", "month_schedule"]
