from fastapi import APIRouter, Depends

from app.api.deps import get_reference_data
from app.services.reference_data import ReferenceData

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    summary="Health check",
    description="Service status and the size of the loaded reference data",
    response_description="Service and reference data status"
)
def health_check(data: ReferenceData = Depends(get_reference_data)):
    """
    Health check endpoint.

    Reports "degraded" when no precincts are loaded, since resolution
    cannot return a precinct in that state.
    """
    return {
        "status": "degraded" if data.store.is_empty else "ok",
        "precincts": len(data.store.precincts),
        "sectors": len(data.store.sectors),
        "squads": len(data.schedules.squads),
    }
