"""Build precinct and sector records from the raw reference tables."""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.models.geo import BoundaryPart, BoundingBox, GeoPoint
from app.models.precinct import OpeningHours, Precinct
from app.models.sector import Sector
from app.services.chain import FallbackChain, Step
from app.services.geo.geometry import bounding_box_of, load, load_parts
from app.services.geo.polygon_store import PolygonStore
from app.services.records import as_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CentroidInputs:
    location: Optional[GeoPoint]
    station: Optional[GeoPoint]
    bounding_box: Optional[BoundingBox]


CENTROID_CHAIN: FallbackChain[CentroidInputs, GeoPoint] = FallbackChain(
    [
        Step("location", lambda c: c.location),
        Step("station", lambda c: c.station),
        Step("bounding_box_center", lambda c: c.bounding_box.center if c.bounding_box else None),
        Step("origin", lambda c: GeoPoint(0.0, 0.0)),
    ]
)


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _precinct_number(value: Any) -> Optional[int]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0 or not number.is_integer():
        return None
    return int(number)


def _opening_hours(raw: Any) -> Tuple[OpeningHours, ...]:
    hours = []
    for entry in as_records(raw)[:7]:
        hours.append(
            OpeningHours(
                day=str(entry.get("day", "")),
                hours=str(entry.get("hours", "")),
                is_open=bool(entry.get("isOpen", False)),
            )
        )
    return tuple(hours)


def index_locations(raw_locations: Any) -> Dict[int, GeoPoint]:
    """Surveyed precinct locations keyed by precinct number."""
    locations: Dict[int, GeoPoint] = {}
    for record in as_records(raw_locations):
        num = _precinct_number(record.get("num"))
        point = GeoPoint.from_lat_lng(record.get("lat"), record.get("lng"))
        if num is not None and point is not None:
            locations.setdefault(num, point)
    return locations


def build_precinct(
    record: Mapping[str, Any],
    raw_boundary: Any,
    location: Optional[GeoPoint] = None,
) -> Optional[Precinct]:
    """
    Build a single precinct.

    Returns None for records whose number is missing, non-finite or not positive.
    """
    num = _precinct_number(record.get("precinctNum"))
    if num is None:
        logger.warning(f"Dropping precinct record with invalid number: {record.get('precinctNum')!r}")
        return None

    parts: Tuple[BoundaryPart, ...] = load_parts(raw_boundary) if raw_boundary else ()
    boundary_box: Optional[BoundingBox] = None
    for part in parts:
        boundary_box = part.bounding_box if boundary_box is None else boundary_box.union(part.bounding_box)

    station = GeoPoint.from_lat_lng(record.get("latitude"), record.get("longitude"))
    source, centroid = CENTROID_CHAIN.first(CentroidInputs(location, station, boundary_box))
    if source == "origin":
        logger.warning(f"Precinct {num} has no location, station or boundary; centroid set to (0, 0)")

    return Precinct(
        precinct_num=num,
        name=record.get("name") or f"{_ordinal(num)} Precinct",
        address=record.get("address") or "",
        phone=record.get("phone") or "",
        borough=record.get("borough") or "",
        centroid=centroid,
        bounding_box=boundary_box or BoundingBox.around(centroid),
        station=station,
        parts=parts,
        opening_hours=_opening_hours(record.get("openingHours")),
        centroid_source=source,
    )


def build_precincts(
    raw_precincts: Any,
    raw_boundaries: Optional[Mapping[str, Any]] = None,
    raw_locations: Any = None,
) -> List[Precinct]:
    if not isinstance(raw_boundaries, Mapping):
        raw_boundaries = {}
    locations = index_locations(raw_locations)

    precincts = []
    for record in as_records(raw_precincts):
        num = _precinct_number(record.get("precinctNum"))
        boundary = raw_boundaries.get(str(num)) if num is not None else None
        precinct = build_precinct(record, boundary, locations.get(num) if num is not None else None)
        if precinct is not None:
            precincts.append(precinct)

    logger.info(f"Loaded {len(precincts)} precincts")
    return precincts


def _optional_float(value: Any) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def build_sectors(feature_collection: Any) -> List[Sector]:
    """One Sector per usable outer ring of every feature."""
    features = feature_collection.get("features") if isinstance(feature_collection, Mapping) else None
    if not isinstance(features, list):
        return []

    sectors: List[Sector] = []
    skipped = 0
    for feature in features:
        if not isinstance(feature, Mapping):
            skipped += 1
            continue
        props = feature.get("properties") or {}
        precinct_num = _precinct_number(props.get("pct"))
        sector_id = str(props.get("sector") or "").strip()
        if precinct_num is None or not sector_id:
            skipped += 1
            continue

        for polygon in load(feature.get("geometry")):
            sectors.append(
                Sector(
                    sector_id=sector_id,
                    precinct_num=precinct_num,
                    boundary=polygon,
                    bounding_box=bounding_box_of(polygon),
                    patrol_borough=props.get("patrol_bor") or None,
                    phase=props.get("phase") or None,
                    sq_miles=_optional_float(props.get("sq_miles")),
                    sector_indicator=props.get("sector_ind") or None,
                    start_date=props.get("START_DATE") or None,
                )
            )

    if skipped:
        logger.warning(f"Skipped {skipped} sector features without precinct number or sector id")
    logger.info(f"Loaded {len(sectors)} sector rings")
    return sectors


def build_store(
    raw_precincts: Any,
    raw_boundaries: Optional[Mapping[str, Any]] = None,
    raw_locations: Any = None,
    raw_sectors: Any = None,
) -> PolygonStore:
    """Factory for the read-only polygon store."""
    return PolygonStore(
        build_precincts(raw_precincts, raw_boundaries, raw_locations),
        build_sectors(raw_sectors) if raw_sectors else [],
    )

