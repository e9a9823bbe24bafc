"""Per-user search state: location, filters, and the stations around it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncContextManager, Callable, Dict, List, Optional

from .errors import GasolinerasError
from .fuel_client import FuelClient
from .geo_service import GeoService
from .geocoder import Geocoder, NoGeocodeMatch
from .saved_search import SavedSearchStore, SearchSnapshot
from .station_filter import select_stations
from .types import FilteredStation, FilterSettings, Location, Station

_LOGGER = logging.getLogger(__name__)

StoreFactory = Callable[[], AsyncContextManager[SavedSearchStore]]

# W3C GeolocationPositionError.PERMISSION_DENIED
PERMISSION_DENIED = 1


class EmptyQuery(GasolinerasError):
    """Address search submitted with no text."""

    def __init__(self, message: str = "Por favor, introduce una ubicación para buscar."):
        super().__init__(message)


class UnknownCity(GasolinerasError):
    """City is not one of the preset shortcuts."""

    def __init__(self, city: str):
        super().__init__(f'La ciudad "{city}" no está disponible.')
        self.city = city


class GeolocationDenied(GasolinerasError):
    """The user refused the browser's location prompt."""


class GeolocationUnavailable(GasolinerasError):
    """The device could not produce a position."""


class SearchState(str, Enum):
    NO_LOCATION = "no_location"
    HAS_LOCATION = "has_location"


@dataclass(frozen=True)
class DevicePositionReport:
    """What the browser's geolocation call produced."""

    lat: Optional[float] = None
    lng: Optional[float] = None
    error_code: Optional[int] = None
    error_message: Optional[str] = None
    supported: bool = True


DEVICE_LOCATION_NAME = "tu ubicación actual"


def device_location(report: DevicePositionReport) -> Location:
    """
    Turn a browser geolocation report into a location.

    Raises:
        GeolocationDenied: If the user refused the permission prompt
        GeolocationUnavailable: If the browser lacks geolocation or
            could not produce a position
    """
    if not report.supported:
        raise GeolocationUnavailable("Geolocalización no soportada por tu navegador")

    if report.error_code is not None:
        message = f"Error geolocalización: {report.error_message or 'desconocido'}"
        if report.error_code == PERMISSION_DENIED:
            raise GeolocationDenied(message)
        raise GeolocationUnavailable(message)

    if report.lat is None or report.lng is None:
        raise GeolocationUnavailable("Error geolocalización: posición no disponible")

    return Location(lat=report.lat, lng=report.lng)


class SearchSession:
    """
    Owns the mutable state of one user's search.

    The station list, the current location and its label, the filters and
    the last computed results all live here; every mutation goes through
    the methods below. Failures never move the session out of its current
    state.
    """

    def __init__(
        self,
        session_id: str,
        client: Optional[FuelClient] = None,
        geocoder: Optional[Geocoder] = None,
        store_factory: Optional[StoreFactory] = None,
        filters: Optional[FilterSettings] = None,
    ):
        self.session_id = session_id
        self.client = client or FuelClient()
        self.geocoder = geocoder or Geocoder()
        self._store_factory = store_factory

        self.stations: List[Station] = []
        self.user_location: Optional[Location] = None
        self.location_name: Optional[str] = None
        self.filters = filters or FilterSettings.defaults()
        self.results: List[FilteredStation] = []

    @property
    def state(self) -> SearchState:
        if self.user_location is None:
            return SearchState.NO_LOCATION
        return SearchState.HAS_LOCATION

    async def load_stations(self, refresh: bool = False) -> List[Station]:
        """
        Load the national station list.

        On failure the previous list is kept and the localized error is
        raised for the caller to show.
        """
        self.stations = await self.client.fetch_stations(refresh=refresh)
        self._recompute()
        return self.stations

    async def search_by_coordinates(self, location: Location, location_name: str) -> List[FilteredStation]:
        """Move the search to ``location`` and remember it for next time."""
        self.user_location = location
        self.location_name = location_name
        self._recompute()
        await self._persist()
        return self.results

    async def search_by_city(self, city: str) -> List[FilteredStation]:
        location = GeoService.city_location(city)
        if location is None:
            raise UnknownCity(city)
        return await self.search_by_coordinates(location, city.strip().capitalize())

    async def search_by_address(self, text: str) -> List[FilteredStation]:
        """
        Geocode ``text`` and search there.

        Raises:
            EmptyQuery: If ``text`` is blank
            NoGeocodeMatch: If the mapping service found nothing
            GeocodeFailure: If the mapping service is unreachable
        """
        query = (text or "").strip()
        if not query:
            raise EmptyQuery()

        location = await self.geocoder.geocode(query)
        if location is None:
            raise NoGeocodeMatch(query)
        return await self.search_by_coordinates(location, query)

    async def search_by_device_position(self, report: DevicePositionReport) -> List[FilteredStation]:
        """Search around the position the browser reported."""
        location = device_location(report)
        return await self.search_by_coordinates(location, DEVICE_LOCATION_NAME)

    async def update_filters(self, **changes: Any) -> List[FilteredStation]:
        """Apply new fuel type / ordering / radius and refresh the results.

        Raises:
            ValueError: If a value is not a recognised option
        """
        self.filters = self.filters.with_changes(**changes)
        self._recompute()
        if self.user_location is not None:
            await self._persist()
        return self.results

    async def restore(self) -> bool:
        """Replay the saved search, if one exists and is readable."""
        if self._store_factory is None:
            return False

        try:
            async with self._store_factory() as store:
                snapshot = await store.load(self.session_id)
        except Exception as exc:  # pylint: disable=broad-except
            _LOGGER.warning("Could not read saved search for %s: %s", self.session_id, exc)
            return False

        if snapshot is None:
            return False

        self.filters = snapshot.filters
        self.user_location = snapshot.location
        self.location_name = snapshot.location_name
        self._recompute()
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "location": self.user_location.to_dict() if self.user_location else None,
            "location_name": self.location_name,
            "filters": self.filters.to_dict(),
            "results": [item.to_dict(self.filters.fuel_type) for item in self.results],
            "count": len(self.results),
        }

    def _recompute(self) -> None:
        if self.user_location is None:
            self.results = []
            return
        self.results = select_stations(self.stations, self.user_location, self.filters)

    async def _persist(self) -> None:
        if self._store_factory is None or self.user_location is None:
            return

        snapshot = SearchSnapshot(
            location=self.user_location,
            filters=self.filters,
            location_name=self.location_name or "",
        )
        try:
            async with self._store_factory() as store:
                await store.save(self.session_id, snapshot)
        except Exception as exc:  # pylint: disable=broad-except
            _LOGGER.warning("Could not save search for %s: %s", self.session_id, exc)
