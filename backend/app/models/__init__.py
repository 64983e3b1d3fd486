from app.models.geo import BoundaryPart, BoundingBox, GeoPoint, Polygon  # noqa
from app.models.precinct import OpeningHours, Precinct  # noqa
from app.models.sector import Sector  # noqa
from app.models.schedule import OFF_DUTY_CODE, PatternType, RdoSchedule, Squad  # noqa

__all__ = [
    "BoundaryPart",
    "BoundingBox",
    "GeoPoint",
    "Polygon",
    "OpeningHours",
    "Precinct",
    "Sector",
    "OFF_DUTY_CODE",
    "PatternType",
    "RdoSchedule",
    "Squad",
]
