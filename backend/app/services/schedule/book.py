"""Squads and their RDO schedules, loaded once from reference data."""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from app.models.schedule import PatternType, RdoSchedule, Squad
from app.services.records import as_records
from app.services.schedule.rdo import month_schedule

logger = logging.getLogger(__name__)


def parse_squad(record: Mapping[str, Any]) -> Optional[Squad]:
    try:
        return Squad(
            squad_id=int(record["squadId"]),
            squad_name=str(record.get("squadName") or f"Squad {record['squadId']}"),
            display_order=int(record.get("displayOrder", 0)),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Skipping squad record {dict(record)!r}: {str(e)}")
        return None


def parse_schedule(record: Mapping[str, Any]) -> Optional[RdoSchedule]:
    try:
        pattern = record.get("patternArray") or ()
        if isinstance(pattern, str):
            pattern = list(pattern)
        return RdoSchedule(
            schedule_id=int(record["scheduleId"]),
            squad_id=int(record["squadId"]),
            pattern_type=PatternType(record["patternType"]),
            cycle_length=int(record.get("cycleLength") or 0),
            pattern=tuple(str(code) for code in pattern),
            anchor_date=date.fromisoformat(str(record["anchorDate"])[:10]),
            squad_offset=int(record.get("squadOffset") or 0),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Skipping RDO schedule record {record.get('scheduleId')!r}: {str(e)}")
        return None


class ScheduleBook:
    """Read-only lookup of squads (by display order) and their schedules."""

    def __init__(self, squads: Iterable[Squad], schedules: Iterable[RdoSchedule]):
        self._squads: Tuple[Squad, ...] = tuple(sorted(squads, key=lambda s: s.display_order))
        self._schedules: Dict[int, RdoSchedule] = {}
        for schedule in schedules:
            # One schedule per squad; first record wins
            if schedule.squad_id in self._schedules:
                logger.warning(f"Squad {schedule.squad_id} has more than one schedule; keeping the first")
                continue
            self._schedules[schedule.squad_id] = schedule

    @classmethod
    def from_records(cls, raw_squads: Any, raw_schedules: Any) -> "ScheduleBook":
        squads = [s for s in (parse_squad(r) for r in as_records(raw_squads)) if s]
        schedules = [s for s in (parse_schedule(r) for r in as_records(raw_schedules)) if s]
        logger.info(f"Loaded {len(squads)} squads and {len(schedules)} RDO schedules")
        return cls(squads, schedules)

    @property
    def squads(self) -> Tuple[Squad, ...]:
        return self._squads

    def get_squad(self, squad_id: int) -> Optional[Squad]:
        return next((s for s in self._squads if s.squad_id == squad_id), None)

    def schedule_for(self, squad_id: int) -> Optional[RdoSchedule]:
        return self._schedules.get(squad_id)

    def month_schedule_for_squad(
        self, squad_id: int, year: int, month_index: int
    ) -> Optional[Dict[int, bool]]:
        """None when the squad has no schedule."""
        schedule = self.schedule_for(squad_id)
        if schedule is None:
            return None
        return month_schedule(year, month_index, schedule)


def duty_counts(days: Mapping[int, bool]) -> Tuple[int, int]:
    """(on-duty days, off days)."""
    on_duty = sum(1 for is_on in days.values() if is_on)
    return on_duty, len(days) - on_duty


def off_days(days: Mapping[int, bool]) -> List[int]:
    return sorted(day for day, is_on in days.items() if not is_on)
