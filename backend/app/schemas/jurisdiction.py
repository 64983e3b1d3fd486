from pydantic import BaseModel
from typing import Optional

from app.schemas.precinct import GeoPointRead, PrecinctRead, SectorRead
from app.services.jurisdiction.resolver import AddressResolution, Jurisdiction


class JurisdictionRead(BaseModel):
    precinct: Optional[PrecinctRead] = None
    sector: Optional[SectorRead] = None
    tier: Optional[str] = None  # boundary | sector_owner | external_hint | nearest_centroid
    mismatched_sector_id: Optional[str] = None

    @classmethod
    def from_result(cls, result: Jurisdiction) -> "JurisdictionRead":
        return cls(
            precinct=PrecinctRead.from_precinct(result.precinct) if result.precinct else None,
            sector=SectorRead.from_sector(result.sector) if result.sector else None,
            tier=result.tier,
            mismatched_sector_id=result.mismatched_sector_id,
        )


class AddressResolutionRead(BaseModel):
    precinct: PrecinctRead
    sector: Optional[SectorRead] = None
    resolved_point: GeoPointRead
    focus_point: GeoPointRead
    display_address: str
    tier: Optional[str] = None

    @classmethod
    def from_result(cls, result: AddressResolution) -> "AddressResolutionRead":
        return cls(
            precinct=PrecinctRead.from_precinct(result.precinct),
            sector=SectorRead.from_sector(result.sector) if result.sector else None,
            resolved_point=GeoPointRead.from_point(result.resolved_point),
            focus_point=GeoPointRead.from_point(result.focus_point),
            display_address=result.display_address,
            tier=result.tier,
        )
