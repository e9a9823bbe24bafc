"""API routes for nearby station lookups."""

from fastapi import APIRouter, HTTPException, Query

from ..services.fuel_client import FetchFailure, NoStationData
from ..services.station_filter import select_stations
from ..services.types import FilterSettings, FuelType, Location, SortBy
from .dependencies import fuel_client

router = APIRouter()


@router.get("/nearby")
async def find_nearby_stations(
    lat: float = Query(..., ge=-90, le=90, description="User latitude"),
    lng: float = Query(..., ge=-180, le=180, description="User longitude"),
    fuel_type: FuelType = Query(FuelType.GASOLINA_95, description="Fuel whose price drives filtering"),
    sort_by: SortBy = Query(SortBy.DISTANCE, description="Order by distance or price"),
    radius_km: float = Query(10, gt=0, le=500, description="Search radius in km"),
):
    """
    Find stations selling ``fuel_type`` within ``radius_km`` of a point.

    Stations with no price for the fuel are not returned.
    """
    try:
        stations = await fuel_client.fetch_stations()
    except (FetchFailure, NoStationData) as exc:
        raise HTTPException(status_code=503, detail=exc.message) from exc

    filters = FilterSettings(fuel_type=fuel_type, sort_by=sort_by, radius_km=radius_km)
    selected = select_stations(stations, Location(lat=lat, lng=lng), filters)

    return {
        "location": {"lat": lat, "lng": lng},
        "filters": filters.to_dict(),
        "results": [item.to_dict(fuel_type) for item in selected],
        "count": len(selected),
    }


@router.get("/summary")
async def get_station_summary():
    """Number of usable stations in the current feed and its date."""
    try:
        stations = await fuel_client.fetch_stations()
    except (FetchFailure, NoStationData) as exc:
        raise HTTPException(status_code=503, detail=exc.message) from exc

    return {
        "count": len(stations),
        "last_updated": stations[0].last_updated if stations else None,
        "fuel_types": [{"key": fuel.value, "label": fuel.label} for fuel in FuelType],
    }


@router.post("/refresh")
async def refresh_stations():
    """Drop the cached feed and download it again."""
    try:
        stations = await fuel_client.fetch_stations(refresh=True)
    except (FetchFailure, NoStationData) as exc:
        raise HTTPException(status_code=503, detail=exc.message) from exc

    return {"count": len(stations)}
