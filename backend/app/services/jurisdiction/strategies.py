"""Precinct resolution tiers."""

import logging
from typing import List, Optional

from app.models.geo import GeoPoint
from app.models.precinct import Precinct
from app.services.chain import FallbackChain, Step
from app.services.geo.polygon_store import PolygonStore
from app.services.provider.adapter import ProviderAdapter

logger = logging.getLogger(__name__)

BOUNDARY = "boundary"
SECTOR_OWNER = "sector_owner"
EXTERNAL_HINT = "external_hint"
NEAREST_CENTROID = "nearest_centroid"


def boundary_step(store: PolygonStore) -> Step[GeoPoint, Precinct]:
    return Step(BOUNDARY, store.precinct_at)


def sector_owner_step(store: PolygonStore) -> Step[GeoPoint, Precinct]:
    """Owning precinct of the sector ring under the point."""

    def run(point: GeoPoint) -> Optional[Precinct]:
        sector = store.sector_at(point)
        return store.get_precinct(sector.precinct_num) if sector else None

    return Step(SECTOR_OWNER, run)


def external_hint_step(
    store: PolygonStore, provider: ProviderAdapter, keyword: str
) -> Step[GeoPoint, Precinct]:
    def run(point: GeoPoint) -> Optional[Precinct]:
        try:
            number = provider.find_nearest_named_place(point, keyword)
        except Exception as e:
            logger.warning(f"External precinct hint unavailable: {str(e)}")
            return None
        if number is None:
            return None
        precinct = store.get_precinct(number)
        if precinct is None:
            logger.info(f"External hint named precinct {number}, which is not loaded")
        return precinct

    return Step(EXTERNAL_HINT, run)


def nearest_centroid_step(store: PolygonStore) -> Step[GeoPoint, Precinct]:
    return Step(NEAREST_CENTROID, store.nearest_precinct)


def precinct_chain(
    store: PolygonStore,
    provider: ProviderAdapter,
    keyword: str,
    use_sector_owner: bool = False,
) -> FallbackChain[GeoPoint, Precinct]:
    """
    Tier order: boundary containment, (optional) sector owner, external hint,
    nearest centroid.
    """
    steps: List[Step[GeoPoint, Precinct]] = [boundary_step(store)]
    if use_sector_owner:
        steps.append(sector_owner_step(store))
    steps.append(external_hint_step(store, provider, keyword))
    steps.append(nearest_centroid_step(store))
    return FallbackChain(steps)
