from pydantic import BaseModel, Field
from typing import List, Optional


class SquadRead(BaseModel):
    squad_id: int
    squad_name: str
    display_order: int
    pattern_type: Optional[str] = None


class DutyDay(BaseModel):
    day: int
    on_duty: bool


class MonthScheduleRead(BaseModel):
    squad_id: int
    year: int
    month: int = Field(..., ge=1, le=12)
    days: List[DutyDay]
    on_duty_days: int
    off_days: List[int]
