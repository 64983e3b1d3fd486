from fastapi import APIRouter, Depends, HTTPException, Path, status
from typing import List, Optional

from app.api.deps import get_reference_data
from app.models.precinct import Precinct
from app.schemas.precinct import (
    DayHoursRead,
    PrecinctMonthHours,
    PrecinctRead,
    PrecinctSummary,
    SectorRead,
)
from app.services.reference_data import ReferenceData
from app.services.schedule.opening_hours import month_opening_hours

router = APIRouter(prefix="/precincts", tags=["Precincts"])


def _get_precinct_or_404(data: ReferenceData, precinct_num: int) -> Precinct:
    precinct = data.store.get_precinct(precinct_num)
    if not precinct:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Precinct {precinct_num} not found"
        )
    return precinct


@router.get("", response_model=List[PrecinctSummary])
def list_precincts(
    q: Optional[str] = None,
    data: ReferenceData = Depends(get_reference_data),
):
    """List precincts ordered by number, optionally filtered by name, address, borough, number or phone"""
    precincts = data.store.search_precincts(q) if q and q.strip() else list(data.store.precincts)
    precincts.sort(key=lambda p: p.precinct_num)
    return [PrecinctSummary.from_precinct(p) for p in precincts]


@router.get("/{precinct_num}", response_model=PrecinctRead)
def get_precinct(precinct_num: int, data: ReferenceData = Depends(get_reference_data)):
    """Get a precinct with its boundary and opening hours"""
    return PrecinctRead.from_precinct(_get_precinct_or_404(data, precinct_num))


@router.get("/{precinct_num}/sectors", response_model=List[SectorRead])
def list_precinct_sectors(precinct_num: int, data: ReferenceData = Depends(get_reference_data)):
    """List the patrol sector rings of a precinct"""
    _get_precinct_or_404(data, precinct_num)
    return [SectorRead.from_sector(s) for s in data.store.sectors_for_precinct(precinct_num)]


@router.get("/{precinct_num}/hours/{year}/{month}", response_model=PrecinctMonthHours)
def get_precinct_month_hours(
    precinct_num: int,
    year: int = Path(..., ge=1900, le=2200),
    month: int = Path(..., ge=1, le=12),
    data: ReferenceData = Depends(get_reference_data),
):
    """Opening hours of a precinct laid out over a calendar month"""
    precinct = _get_precinct_or_404(data, precinct_num)
    days = month_opening_hours(year, month - 1, precinct)
    open_days = sum(1 for d in days.values() if d.is_open)

    return PrecinctMonthHours(
        precinct_num=precinct.precinct_num,
        year=year,
        month=month,
        has_hours_data=bool(precinct.opening_hours),
        days=[DayHoursRead(day=day, is_open=h.is_open, hours=h.hours) for day, h in sorted(days.items())],
        open_days=open_days,
        closed_days=len(days) - open_days,
    )
