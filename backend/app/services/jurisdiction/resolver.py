"""Resolve a point or an address to a precinct and patrol sector."""

import logging
from dataclasses import dataclass
from typing import Optional

from app.core.config import Settings
from app.models.geo import GeoPoint
from app.models.precinct import Precinct
from app.models.sector import Sector
from app.services.geo.polygon_store import PolygonStore
from app.services.jurisdiction.strategies import precinct_chain
from app.services.provider.adapter import ProviderAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Jurisdiction:
    precinct: Optional[Precinct]
    sector: Optional[Sector]
    # Name of the tier that chose the precinct
    tier: Optional[str] = None
    # Sector found under the point but owned by a different precinct
    mismatched_sector_id: Optional[str] = None


@dataclass(frozen=True)
class AddressResolution:
    precinct: Precinct
    sector: Optional[Sector]
    resolved_point: GeoPoint
    display_address: str
    focus_point: GeoPoint
    tier: Optional[str] = None


class JurisdictionResolver:
    """
    Multi-tier precinct resolution over a read-only polygon store.

    Holds no per-call state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        store: PolygonStore,
        provider: ProviderAdapter,
        keyword: str = "NYPD precinct",
        use_sector_owner: bool = False,
    ):
        self.store = store
        self.provider = provider
        self.chain = precinct_chain(store, provider, keyword, use_sector_owner)

    @classmethod
    def from_settings(
        cls, store: PolygonStore, provider: ProviderAdapter, settings: Settings
    ) -> "JurisdictionResolver":
        return cls(
            store,
            provider,
            keyword=settings.precinct_search_keyword,
            use_sector_owner=settings.resolver_sector_owner_tier,
        )

    def resolve(self, point: GeoPoint) -> Jurisdiction:
        if self.store.is_empty:
            logger.warning("Resolve called with no precincts loaded")

        tier, precinct = self.chain.first(point)
        sector = self.store.sector_at(point)

        if precinct is not None and sector is not None and sector.precinct_num != precinct.precinct_num:
            logger.warning(
                f"Sector {sector.sector_id} at ({point.latitude}, {point.longitude}) belongs to precinct "
                f"{sector.precinct_num}, but precinct {precinct.precinct_num} was chosen by {tier}; "
                f"dropping sector"
            )
            return Jurisdiction(
                precinct=precinct,
                sector=None,
                tier=tier,
                mismatched_sector_id=sector.sector_id,
            )

        return Jurisdiction(precinct=precinct, sector=sector, tier=tier)

    def resolve_by_address(self, address: str) -> Optional[AddressResolution]:
        """
        Geocode free text and resolve the resulting point.

        Returns:
            AddressResolution, or None when the address cannot be located or
            no precinct can be chosen
        """
        try:
            point = self.provider.forward_geocode(address)
        except Exception as e:
            logger.warning(f"Forward geocoding failed for '{address}': {str(e)}")
            point = None
        if point is None:
            logger.info(f"Could not locate address '{address}'")
            return None

        jurisdiction = self.resolve(point)
        if jurisdiction.precinct is None:
            return None

        try:
            display_address = self.provider.reverse_geocode(point)
        except Exception as e:
            logger.warning(f"Reverse geocoding failed: {str(e)}")
            display_address = None

        precinct = jurisdiction.precinct
        return AddressResolution(
            precinct=precinct,
            sector=jurisdiction.sector,
            resolved_point=point,
            display_address=display_address or address.strip(),
            focus_point=precinct.station or point,
            tier=jurisdiction.tier,
        )
