from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Tuple

OFF_DUTY_CODE = "O"


class PatternType(str, Enum):
    ROTATING = "rotating"
    STEADY = "steady"


@dataclass(frozen=True)
class Squad:
    squad_id: int
    squad_name: str
    display_order: int


@dataclass(frozen=True)
class RdoSchedule:
    """Regular-day-off pattern owned by a single squad."""

    schedule_id: int
    squad_id: int
    pattern_type: PatternType
    cycle_length: int
    pattern: Tuple[str, ...]
    anchor_date: date
    squad_offset: int = 0

    @property
    def is_usable(self) -> bool:
        if not self.pattern:
            return False
        if self.pattern_type is PatternType.STEADY:
            return len(self.pattern) == 7
        return self.cycle_length > 0 and len(self.pattern) >= self.cycle_length
