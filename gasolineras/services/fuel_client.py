"""Client for the MITECO fuel-price open-data feeds."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from .cache_service import CacheService
from .errors import GasolinerasError
from .station_normalizer import StationNormalizer
from .types import Station

_LOGGER = logging.getLogger(__name__)

STATIONS_CACHE_KEY = "feed:stations"
MUNICIPALITIES_CACHE_KEY = "feed:municipalities"

STATION_LIST_FIELD = "ListaEESSPrecio"
MUNICIPALITY_FIELD = "Municipio"


class FetchFailure(GasolinerasError):
    """The station feed could not be retrieved or decoded."""

    DEFAULT_MESSAGE = (
        "No se pudieron obtener los datos de las gasolineras. "
        "Por favor, inténtalo de nuevo más tarde."
    )

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)


class NoStationData(GasolinerasError):
    """The feed answered but without a station list."""

    DEFAULT_MESSAGE = "No se encontraron datos de gasolineras en la respuesta"

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)


class FuelClient:
    """Fetches stations and municipalities from the government REST service."""

    def __init__(
        self,
        normalizer: Optional[StationNormalizer] = None,
        cache: Optional[CacheService] = None,
    ):
        self.stations_url = settings.stations_api_url
        self.municipalities_url = settings.municipalities_api_url
        self.normalizer = normalizer or StationNormalizer()
        self.cache = cache or CacheService()

    async def _fetch_with_retry(
        self,
        url: str,
        headers: Optional[Dict] = None,
        params: Optional[Dict[str, Any]] = None,
        max_retries: Optional[int] = None,
        timeout: Optional[int] = None,
    ) -> Any:
        """Fetch JSON from ``url``, retrying with exponential backoff."""
        attempts = max(1, max_retries if max_retries is not None else settings.upstream_max_retries)
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or settings.upstream_timeout)
        ) as client:
            for attempt in range(attempts):
                try:
                    response = await client.get(
                        url,
                        headers=headers or {},
                        params=params or {},
                    )
                    response.raise_for_status()
                    return response.json()
                except (httpx.HTTPStatusError, httpx.RequestError):
                    if attempt == attempts - 1:
                        raise
                    await asyncio.sleep(2 ** attempt)

    async def fetch_stations(self, refresh: bool = False) -> List[Station]:
        """
        Fetch and normalise every station in the national feed.

        Args:
            refresh: Ignore any cached copy and hit the upstream service

        Returns:
            Stations in upstream order; rejected records are dropped

        Raises:
            NoStationData: If the payload has no station list
            FetchFailure: On any network, status or decoding problem
        """
        if not refresh:
            cached = await self.cache.get(STATIONS_CACHE_KEY)
            if cached is not None:
                return cached

        try:
            payload = await self._fetch_with_retry(self.stations_url)
        except Exception as exc:
            _LOGGER.error("Error fetching fuel data: %s", exc, exc_info=True)
            raise FetchFailure() from exc

        records = payload.get(STATION_LIST_FIELD) if isinstance(payload, dict) else None
        if not isinstance(records, list):
            _LOGGER.error("Station feed payload has no %s list", STATION_LIST_FIELD)
            raise NoStationData()

        feed_date = payload.get("Fecha") or None
        stations = [
            station
            for station in (self.normalizer.try_normalise(record, feed_date) for record in records)
            if station is not None
        ]

        _LOGGER.info(
            "Loaded %d stations (%d rejected)",
            len(stations),
            len(records) - len(stations),
        )
        await self.cache.set(STATIONS_CACHE_KEY, stations, ttl=settings.cache_ttl_stations)
        return stations

    async def fetch_municipalities(self) -> List[str]:
        """Municipality names for autocomplete; empty list on any failure."""
        cached = await self.cache.get(MUNICIPALITIES_CACHE_KEY)
        if cached is not None:
            return cached

        try:
            payload = await self._fetch_with_retry(self.municipalities_url)
            if not isinstance(payload, list):
                raise ValueError(f"expected a list of municipalities, got {type(payload).__name__}")
            names = [
                name.strip()
                for name in (
                    entry.get(MUNICIPALITY_FIELD) for entry in payload if isinstance(entry, dict)
                )
                if isinstance(name, str) and name.strip() and name.strip().lower() != "null"
            ]
        except Exception as exc:  # pylint: disable=broad-except
            _LOGGER.error("Error fetching municipalities: %s", exc)
            return []

        # Empty results are fetched again on the next call
        if names:
            await self.cache.set(MUNICIPALITIES_CACHE_KEY, names, ttl=settings.cache_ttl_municipalities)
        return names
