from dataclasses import dataclass
from typing import Optional

from app.models.geo import BoundingBox, Polygon


@dataclass(frozen=True)
class Sector:
    """
    Patrol sector ring.

    ``sector_id`` is unique only within a precinct, and a sector split across
    disjoint rings is stored as several entries sharing the same key.
    """

    sector_id: str
    precinct_num: int
    boundary: Polygon
    bounding_box: BoundingBox
    patrol_borough: Optional[str] = None
    phase: Optional[str] = None
    sq_miles: Optional[float] = None
    sector_indicator: Optional[str] = None
    start_date: Optional[str] = None
