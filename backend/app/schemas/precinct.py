from pydantic import BaseModel, Field
from typing import Any, Optional, List, Literal

from app.models.geo import GeoPoint
from app.models.precinct import Precinct
from app.models.sector import Sector
from app.services.geo.geometry import parts_to_geojson


class GeoPointRead(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    @classmethod
    def from_point(cls, point: GeoPoint) -> "GeoPointRead":
        return cls(lat=point.latitude, lng=point.longitude)


class GeoJSONBoundary(BaseModel):
    type: Literal["Polygon", "MultiPolygon"]
    coordinates: Any


class OpeningHoursRead(BaseModel):
    day: str
    hours: str
    is_open: bool


class PrecinctSummary(BaseModel):
    precinct_num: int = Field(..., gt=0)
    name: str
    address: str
    phone: str
    borough: str
    centroid: GeoPointRead
    station: Optional[GeoPointRead] = None

    @classmethod
    def from_precinct(cls, precinct: Precinct) -> "PrecinctSummary":
        return cls(
            precinct_num=precinct.precinct_num,
            name=precinct.name,
            address=precinct.address,
            phone=precinct.phone,
            borough=precinct.borough,
            centroid=GeoPointRead.from_point(precinct.centroid),
            station=GeoPointRead.from_point(precinct.station) if precinct.station else None,
        )


class PrecinctRead(PrecinctSummary):
    boundary: Optional[GeoJSONBoundary] = None
    opening_hours: List[OpeningHoursRead] = []

    @classmethod
    def from_precinct(cls, precinct: Precinct) -> "PrecinctRead":
        summary = PrecinctSummary.from_precinct(precinct)
        boundary = parts_to_geojson([part.polygon for part in precinct.parts])
        return cls(
            **summary.model_dump(),
            boundary=GeoJSONBoundary(**boundary) if boundary else None,
            opening_hours=[
                OpeningHoursRead(day=h.day, hours=h.hours, is_open=h.is_open)
                for h in precinct.opening_hours
            ],
        )


class SectorRead(BaseModel):
    sector_id: str
    precinct_num: int
    patrol_borough: Optional[str] = None
    phase: Optional[str] = None
    sq_miles: Optional[float] = None
    sector_indicator: Optional[str] = None
    start_date: Optional[str] = None
    boundary: Optional[GeoJSONBoundary] = None

    @classmethod
    def from_sector(cls, sector: Sector) -> "SectorRead":
        boundary = parts_to_geojson([sector.boundary])
        return cls(
            sector_id=sector.sector_id,
            precinct_num=sector.precinct_num,
            patrol_borough=sector.patrol_borough,
            phase=sector.phase,
            sq_miles=sector.sq_miles,
            sector_indicator=sector.sector_indicator,
            start_date=sector.start_date,
            boundary=GeoJSONBoundary(**boundary) if boundary else None,
        )


class DayHoursRead(BaseModel):
    day: int
    is_open: bool
    hours: str


class PrecinctMonthHours(BaseModel):
    precinct_num: int
    year: int
    month: int = Field(..., ge=1, le=12)
    has_hours_data: bool
    days: List[DayHoursRead]
    open_days: int
    closed_days: int
