"""Boundary geometry parsing and point-in-polygon primitives."""

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Union

from shapely.geometry import MultiPolygon as ShapelyMultiPolygon
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import mapping

from app.models.geo import BoundaryPart, BoundingBox, GeoPoint, Polygon
from app.services.geo.coordinates import normalize

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

RawRing = Sequence[Any]


@dataclass(frozen=True)
class PolygonGeometry:
    """Single polygon: outer ring followed by holes."""

    rings: Tuple[RawRing, ...]


@dataclass(frozen=True)
class MultiPolygonGeometry:
    """Several polygons, each a tuple of rings (outer first)."""

    polygons: Tuple[Tuple[RawRing, ...], ...]


RawGeometry = Union[PolygonGeometry, MultiPolygonGeometry]


def parse_geometry(raw: Any) -> Optional[RawGeometry]:
    """
    Resolve a raw geometry encoding into its variant.

    Accepts a GeoJSON ``Polygon`` / ``MultiPolygon`` mapping or a bare vertex
    list (treated as the outer ring of a single polygon).
    """
    if isinstance(raw, dict):
        geom_type = raw.get("type")
        coordinates = raw.get("coordinates")
        if not isinstance(coordinates, list):
            return None
        if geom_type == "Polygon":
            return PolygonGeometry(tuple(r for r in coordinates if isinstance(r, list)))
        if geom_type == "MultiPolygon":
            return MultiPolygonGeometry(
                tuple(
                    tuple(r for r in polygon if isinstance(r, list))
                    for polygon in coordinates
                    if isinstance(polygon, list)
                )
            )
        logger.debug(f"Unsupported geometry type: {geom_type}")
        return None
    if isinstance(raw, list):
        return PolygonGeometry((raw,))
    return None


def outer_rings(geometry: RawGeometry) -> List[RawRing]:
    """Outer ring of every polygon; holes are not supported."""
    match geometry:
        case PolygonGeometry(rings=rings):
            return [rings[0]] if rings else []
        case MultiPolygonGeometry(polygons=polygons):
            return [polygon[0] for polygon in polygons if polygon]
    return []


def _vertex_pair(vertex: Any) -> Any:
    # Older exports store vertices as {"latitude": .., "longitude": ..}
    if isinstance(vertex, dict):
        return (vertex.get("longitude"), vertex.get("latitude"))
    return vertex


def normalize_ring(raw_ring: RawRing) -> Polygon:
    """Normalise each vertex, dropping the ones that fail."""
    points = (normalize(_vertex_pair(v)) for v in raw_ring)
    return tuple(p for p in points if p is not None)


def load(raw_geometry: Any) -> List[Polygon]:
    """
    Parse raw geometry into usable polygons, one per outer ring.

    Rings with fewer than 3 surviving vertices are discarded.
    """
    geometry = parse_geometry(raw_geometry)
    if geometry is None:
        return []

    polygons: List[Polygon] = []
    for raw_ring in outer_rings(geometry):
        ring = normalize_ring(raw_ring)
        if len(ring) < 3:
            logger.debug(f"Discarding ring with {len(ring)} valid points")
            continue
        if not is_simple(ring):
            logger.warning(
                f"Ring with {len(ring)} points is self-intersecting; containment may be unreliable"
            )
        polygons.append(ring)
    return polygons


def load_parts(raw_geometry: Any) -> Tuple[BoundaryPart, ...]:
    return tuple(
        BoundaryPart(polygon=polygon, bounding_box=bounding_box_of(polygon))
        for polygon in load(raw_geometry)
    )


def bounding_box_of(polygon: Polygon) -> BoundingBox:
    box = BoundingBox.of_points(polygon)
    if box is None:
        raise ValueError("Cannot compute bounding box of an empty polygon")
    return box


def contains_point(point: GeoPoint, polygon: Polygon) -> bool:
    """Even-odd ray casting; x = longitude, y = latitude."""
    inside = False
    x = point.longitude
    y = point.latitude
    n = len(polygon)
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].longitude, polygon[i].latitude
        xj, yj = polygon[j].longitude, polygon[j].latitude
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def part_contains(point: GeoPoint, part: BoundaryPart) -> bool:
    return part.bounding_box.contains(point) and contains_point(point, part.polygon)


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in kilometers."""
    dlat = math.radians(b.latitude - a.latitude)
    dlng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(a.latitude))
        * math.cos(math.radians(b.latitude))
        * math.sin(dlng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _to_shapely(polygon: Polygon) -> ShapelyPolygon:
    return ShapelyPolygon([(p.longitude, p.latitude) for p in polygon])


def is_simple(polygon: Polygon) -> bool:
    """False when the ring self-intersects."""
    return _to_shapely(polygon).is_valid


def parts_to_geojson(parts: Sequence[Polygon]) -> Optional[dict]:
    """GeoJSON Polygon (single part) or MultiPolygon for API responses."""
    if not parts:
        return None
    if len(parts) == 1:
        return mapping(_to_shapely(parts[0]))
    return mapping(ShapelyMultiPolygon([_to_shapely(p) for p in parts]))
