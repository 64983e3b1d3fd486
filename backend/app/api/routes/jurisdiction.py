"""Point and address jurisdiction lookup endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_resolver
from app.models.geo import GeoPoint
from app.schemas.jurisdiction import AddressResolutionRead, JurisdictionRead
from app.services.jurisdiction.resolver import JurisdictionResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jurisdiction", tags=["Jurisdiction"])


@router.get("", response_model=JurisdictionRead)
def resolve_jurisdiction(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    resolver: JurisdictionResolver = Depends(get_resolver),
):
    """Resolve a coordinate to its precinct and patrol sector"""
    result = resolver.resolve(GeoPoint(lat, lng))
    return JurisdictionRead.from_result(result)


@router.get("/address", response_model=AddressResolutionRead)
def resolve_jurisdiction_by_address(
    q: str = Query(..., min_length=1, max_length=300),
    resolver: JurisdictionResolver = Depends(get_resolver),
):
    """Geocode an address and resolve it to a precinct and patrol sector"""
    result = resolver.resolve_by_address(q)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Could not locate that address within an NYC precinct. Try a more specific address."
        )
    return AddressResolutionRead.from_result(result)
