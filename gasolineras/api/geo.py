"""API routes for locations: preset cities and address geocoding."""

from fastapi import APIRouter, HTTPException, Query

from ..services.geo_service import GeoService
from ..services.geocoder import GeocodeFailure, NoGeocodeMatch
from .dependencies import geocoder

router = APIRouter()
geo_service = GeoService()


@router.get("/cities")
async def list_cities():
    """Preset cities offered as one-click searches."""
    cities = geo_service.preset_cities()
    return {"cities": cities, "count": len(cities)}


@router.get("/geocode")
async def geocode_address(
    q: str = Query(..., min_length=1, description="Free-text address, town or postcode"),
):
    """Resolve an address to coordinates."""
    query = q.strip()
    try:
        location = await geocoder.geocode(query)
    except GeocodeFailure as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc

    if location is None:
        raise HTTPException(status_code=404, detail=NoGeocodeMatch(query).message)

    return {"query": query, "location": location.to_dict()}
