from fastapi import APIRouter, Depends, HTTPException, Path, status
from typing import List

from app.api.deps import get_reference_data
from app.schemas.schedule import DutyDay, MonthScheduleRead, SquadRead
from app.services.reference_data import ReferenceData
from app.services.schedule.book import duty_counts, off_days

router = APIRouter(prefix="/schedules", tags=["Schedules"])


@router.get("/squads", response_model=List[SquadRead])
def list_squads(data: ReferenceData = Depends(get_reference_data)):
    """List squads in display order"""
    results = []
    for squad in data.schedules.squads:
        schedule = data.schedules.schedule_for(squad.squad_id)
        results.append(
            SquadRead(
                squad_id=squad.squad_id,
                squad_name=squad.squad_name,
                display_order=squad.display_order,
                pattern_type=schedule.pattern_type.value if schedule else None,
            )
        )
    return results


@router.get("/squads/{squad_id}/{year}/{month}", response_model=MonthScheduleRead)
def get_month_schedule(
    squad_id: int,
    year: int = Path(..., ge=1900, le=2200),
    month: int = Path(..., ge=1, le=12),
    data: ReferenceData = Depends(get_reference_data),
):
    """On-duty / RDO status for every day of a month (month is 1-12)"""
    days = data.schedules.month_schedule_for_squad(squad_id, year, month - 1)
    if days is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No RDO schedule for squad {squad_id}"
        )

    on_duty, _ = duty_counts(days)
    return MonthScheduleRead(
        squad_id=squad_id,
        year=year,
        month=month,
        days=[DutyDay(day=day, on_duty=is_on) for day, is_on in sorted(days.items())],
        on_duty_days=on_duty,
        off_days=off_days(days),
    )
