"""Read-only store of precinct and sector boundaries."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from app.models.geo import GeoPoint
from app.models.precinct import Precinct
from app.models.sector import Sector
from app.services.geo.geometry import EARTH_RADIUS_KM, contains_point, part_contains

logger = logging.getLogger(__name__)


class PolygonStore:
    """
    Precincts and sectors in load order.

    Built once by the reference data loader and never mutated afterwards, so
    it can be shared across concurrent requests without locking.
    """

    def __init__(self, precincts: Iterable[Precinct], sectors: Iterable[Sector]):
        self._precincts: Tuple[Precinct, ...] = tuple(precincts)
        self._sectors: Tuple[Sector, ...] = tuple(sectors)
        self._by_num: Dict[int, Precinct] = {}
        for precinct in self._precincts:
            # First record wins on duplicate numbers
            self._by_num.setdefault(precinct.precinct_num, precinct)

        # Centroid table in radians for vectorised haversine
        if self._precincts:
            self._centroid_lat = np.radians(
                np.array([p.centroid.latitude for p in self._precincts], dtype=float)
            )
            self._centroid_lng = np.radians(
                np.array([p.centroid.longitude for p in self._precincts], dtype=float)
            )
        else:
            self._centroid_lat = np.empty(0)
            self._centroid_lng = np.empty(0)

        logger.info(
            f"Polygon store ready: {len(self._precincts)} precincts, {len(self._sectors)} sector rings"
        )

    @property
    def precincts(self) -> Tuple[Precinct, ...]:
        return self._precincts

    @property
    def sectors(self) -> Tuple[Sector, ...]:
        return self._sectors

    @property
    def is_empty(self) -> bool:
        return not self._precincts

    def get_precinct(self, precinct_num: int) -> Optional[Precinct]:
        return self._by_num.get(precinct_num)

    def sectors_for_precinct(self, precinct_num: int) -> List[Sector]:
        return [s for s in self._sectors if s.precinct_num == precinct_num]

    def precinct_at(self, point: GeoPoint) -> Optional[Precinct]:
        """First precinct (load order) with a boundary part containing the point."""
        for precinct in self._precincts:
            if not precinct.bounding_box.contains(point):
                continue
            if any(part_contains(point, part) for part in precinct.parts):
                return precinct
        return None

    def sector_at(self, point: GeoPoint) -> Optional[Sector]:
        """First sector ring (load order) containing the point."""
        for sector in self._sectors:
            if not sector.bounding_box.contains(point):
                continue
            if contains_point(point, sector.boundary):
                return sector
        return None

    def nearest_precinct(self, point: GeoPoint) -> Optional[Precinct]:
        """
        Precinct whose centroid is closest by haversine distance.

        Ties go to the first precinct in load order. None only when the
        store holds no precincts.
        """
        if not self._precincts:
            return None

        lat = np.radians(point.latitude)
        lng = np.radians(point.longitude)
        dlat = self._centroid_lat - lat
        dlng = self._centroid_lng - lng
        h = (
            np.sin(dlat / 2) ** 2
            + np.cos(lat) * np.cos(self._centroid_lat) * np.sin(dlng / 2) ** 2
        )
        distances = EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))
        return self._precincts[int(np.argmin(distances))]

    def search_precincts(self, query: str) -> List[Precinct]:
        """Case-insensitive substring match on name, address, borough, number and phone."""
        q = query.strip().lower()
        if not q:
            return []
        return [
            p
            for p in self._precincts
            if q in p.name.lower()
            or q in p.address.lower()
            or q in p.borough.lower()
            or q in str(p.precinct_num)
            or q in p.phone
        ]
