"""Free-text address geocoding through Nominatim."""

import logging
from typing import Any, Optional

import httpx

from ..config import settings
from .errors import GasolinerasError
from .types import Location

_LOGGER = logging.getLogger(__name__)


class GeocodeFailure(GasolinerasError):
    """The mapping service could not be reached or returned garbage."""

    DEFAULT_MESSAGE = "No se pudo conectar al servicio de mapas. Por favor, intenta de nuevo."

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)


class NoGeocodeMatch(GasolinerasError):
    """The mapping service answered with zero candidates."""

    def __init__(self, query: str):
        super().__init__(
            f'No se encontraron resultados para "{query}". Intenta con otro nombre.'
        )
        self.query = query


class Geocoder:
    """Resolves addresses to coordinates.

    Nominatim's usage policy requires an identifying User-Agent on every
    request, taken from ``GEOCODER_USER_AGENT``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.base_url = base_url or settings.nominatim_url
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout or settings.upstream_timeout

    async def geocode(self, address: str) -> Optional[Location]:
        """
        Return the first candidate's coordinates, or None when nothing matches.

        Raises:
            GeocodeFailure: On network, status or decoding problems
        """
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        params = {"format": "json", "q": address}

        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as client:
                response = await client.get(self.base_url, headers=headers, params=params)
                response.raise_for_status()
                candidates = response.json()
            if not candidates:
                return None
            return self._to_location(candidates[0])
        except Exception as exc:
            _LOGGER.error("Error geocoding %r: %s", address, exc)
            raise GeocodeFailure() from exc

    @staticmethod
    def _to_location(candidate: Any) -> Location:
        return Location(lat=float(candidate["lat"]), lng=float(candidate["lon"]))
