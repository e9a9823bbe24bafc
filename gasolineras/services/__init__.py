"""Station pipeline, upstream clients and search state."""

from .autocomplete import Debouncer, MunicipalityAutocomplete, suggest
from .cache_service import CacheService
from .errors import GasolinerasError
from .fuel_client import FetchFailure, FuelClient, NoStationData
from .geo_service import CITY_COORDINATES, GeoService, calculate_distance
from .geocoder import GeocodeFailure, Geocoder, NoGeocodeMatch
from .saved_search import SavedSearchStore, SearchSnapshot, saved_search_scope
from .search_session import (
    DevicePositionReport,
    EmptyQuery,
    GeolocationDenied,
    GeolocationUnavailable,
    SearchSession,
    SearchState,
    UnknownCity,
    device_location,
)
from .station_filter import select_stations
from .station_normalizer import RecordRejected, StationNormalizer
from .types import FilteredStation, FilterSettings, FuelType, Location, SortBy, Station

__all__ = [
    "CITY_COORDINATES",
    "CacheService",
    "Debouncer",
    "DevicePositionReport",
    "EmptyQuery",
    "FetchFailure",
    "FilterSettings",
    "FilteredStation",
    "FuelClient",
    "FuelType",
    "GasolinerasError",
    "GeoService",
    "GeocodeFailure",
    "Geocoder",
    "GeolocationDenied",
    "GeolocationUnavailable",
    "Location",
    "MunicipalityAutocomplete",
    "NoGeocodeMatch",
    "NoStationData",
    "RecordRejected",
    "SavedSearchStore",
    "SearchSession",
    "SearchSnapshot",
    "SearchState",
    "SortBy",
    "Station",
    "StationNormalizer",
    "UnknownCity",
    "calculate_distance",
    "device_location",
    "saved_search_scope",
    "select_stations",
    "suggest",
]
