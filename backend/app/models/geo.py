"""Geographic primitives shared by precincts and sectors."""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class GeoPoint:
    """WGS84 coordinate in degrees."""

    latitude: float
    longitude: float

    def __post_init__(self):
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Non-finite coordinate ({self.latitude}, {self.longitude})")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude {self.latitude} out of range")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude {self.longitude} out of range")

    @classmethod
    def from_lat_lng(cls, lat, lng) -> Optional["GeoPoint"]:
        """Build a point from loosely typed values, returning None when invalid."""
        try:
            return cls(float(lat), float(lng))
        except (TypeError, ValueError):
            return None


# Ring of vertices; not explicitly closed (first point need not repeat at the end)
Polygon = Tuple[GeoPoint, ...]


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @classmethod
    def of_points(cls, points: Iterable[GeoPoint]) -> Optional["BoundingBox"]:
        """Min/max reduction over points. None for an empty sequence."""
        min_lat = min_lng = math.inf
        max_lat = max_lng = -math.inf
        for p in points:
            min_lat = min(min_lat, p.latitude)
            max_lat = max(max_lat, p.latitude)
            min_lng = min(min_lng, p.longitude)
            max_lng = max(max_lng, p.longitude)
        if min_lat == math.inf:
            return None
        return cls(min_lat, max_lat, min_lng, max_lng)

    @classmethod
    def around(cls, point: GeoPoint) -> "BoundingBox":
        """Degenerate box collapsed onto a single point."""
        return cls(point.latitude, point.latitude, point.longitude, point.longitude)

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.min_lat <= point.latitude <= self.max_lat
            and self.min_lng <= point.longitude <= self.max_lng
        )

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.min_lat, other.min_lat),
            max(self.max_lat, other.max_lat),
            min(self.min_lng, other.min_lng),
            max(self.max_lng, other.max_lng),
        )

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(
            (self.min_lat + self.max_lat) / 2,
            (self.min_lng + self.max_lng) / 2,
        )


@dataclass(frozen=True)
class BoundaryPart:
    """One outer ring of a (possibly multi-part) boundary with its bbox."""

    polygon: Polygon
    bounding_box: BoundingBox
