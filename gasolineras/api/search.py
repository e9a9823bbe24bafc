"""API routes for a user's search session."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..services.fuel_client import FetchFailure, NoStationData
from ..services.geocoder import GeocodeFailure, NoGeocodeMatch
from ..services.search_session import (
    DEVICE_LOCATION_NAME,
    DevicePositionReport,
    EmptyQuery,
    GeolocationDenied,
    GeolocationUnavailable,
    SearchSession,
    UnknownCity,
    device_location,
)
from ..services.types import FuelType, Location, SortBy
from .dependencies import get_search_session

router = APIRouter()


class CoordinatesSearch(BaseModel):
    """Search around explicit coordinates."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    location_name: Optional[str] = None


class AddressSearch(BaseModel):
    """Search around a geocoded address."""
    query: str


class GeolocationSearch(BaseModel):
    """Result of the browser's geolocation call."""
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    error_code: Optional[int] = None
    error_message: Optional[str] = None
    supported: bool = True


class FiltersUpdate(BaseModel):
    """Filter fields to change; omitted fields keep their value."""
    fuel_type: Optional[FuelType] = None
    sort_by: Optional[SortBy] = None
    radius_km: Optional[float] = Field(None, gt=0, le=500)


async def _load_stations(session: SearchSession) -> None:
    try:
        await session.load_stations()
    except (FetchFailure, NoStationData) as exc:
        raise HTTPException(status_code=503, detail=exc.message) from exc


@router.get("")
async def get_search(session: SearchSession = Depends(get_search_session)):
    """Current search, including one restored from a previous visit."""
    if session.user_location is not None:
        await _load_stations(session)
    return session.to_dict()


@router.post("/coordinates")
async def search_by_coordinates(
    body: CoordinatesSearch,
    session: SearchSession = Depends(get_search_session),
):
    """Search around explicit coordinates."""
    await _load_stations(session)
    name = body.location_name or f"{body.lat:.4f}, {body.lng:.4f}"
    await session.search_by_coordinates(Location(lat=body.lat, lng=body.lng), name)
    return session.to_dict()


@router.post("/city/{city}")
async def search_by_city(
    city: str,
    session: SearchSession = Depends(get_search_session),
):
    """Search around one of the preset cities."""
    await _load_stations(session)
    try:
        await session.search_by_city(city)
    except UnknownCity as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    return session.to_dict()


@router.post("/address")
async def search_by_address(
    body: AddressSearch,
    session: SearchSession = Depends(get_search_session),
):
    """Geocode the text and search around the first match."""
    await _load_stations(session)
    try:
        await session.search_by_address(body.query)
    except EmptyQuery as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    except NoGeocodeMatch as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    except GeocodeFailure as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return session.to_dict()


@router.post("/geolocation")
async def search_by_geolocation(
    body: GeolocationSearch,
    session: SearchSession = Depends(get_search_session),
):
    """Search around the position reported by the browser."""
    report = DevicePositionReport(
        lat=body.lat,
        lng=body.lng,
        error_code=body.error_code,
        error_message=body.error_message,
        supported=body.supported,
    )
    try:
        location = device_location(report)
    except (GeolocationDenied, GeolocationUnavailable) as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc

    await _load_stations(session)
    await session.search_by_coordinates(location, DEVICE_LOCATION_NAME)
    return session.to_dict()


@router.put("/filters")
async def update_filters(
    body: FiltersUpdate,
    session: SearchSession = Depends(get_search_session),
):
    """Change fuel type, ordering or radius and recompute the results."""
    if session.user_location is not None:
        await _load_stations(session)
    try:
        await session.update_filters(
            fuel_type=body.fuel_type,
            sort_by=body.sort_by,
            radius_km=body.radius_km,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return session.to_dict()
