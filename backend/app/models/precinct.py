from dataclasses import dataclass, field
from typing import Optional, Tuple

from app.models.geo import BoundaryPart, BoundingBox, GeoPoint, Polygon


@dataclass(frozen=True)
class OpeningHours:
    day: str
    hours: str
    is_open: bool


@dataclass(frozen=True)
class Precinct:
    precinct_num: int
    name: str
    address: str
    phone: str
    borough: str
    centroid: GeoPoint
    bounding_box: BoundingBox
    station: Optional[GeoPoint] = None
    parts: Tuple[BoundaryPart, ...] = ()
    # Indexed by weekday, 0 = Sunday
    opening_hours: Tuple[OpeningHours, ...] = ()
    # Name of the centroid fallback step that produced `centroid`
    centroid_source: str = field(default="location", compare=False)

    @property
    def boundary(self) -> Polygon:
        """Primary boundary ring (first part), empty when no geometry was loaded."""
        return self.parts[0].polygon if self.parts else ()
