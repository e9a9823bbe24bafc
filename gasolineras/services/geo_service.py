"""Geographic helpers: great-circle distance and preset city coordinates."""

import unicodedata
from math import atan2, cos, pi, sin, sqrt
from typing import Dict, List, Optional

from .types import Location

# Radius of earth in kilometers
EARTH_RADIUS_KM = 6371.0

CITY_COORDINATES: Dict[str, Location] = {
    "madrid": Location(lat=40.4168, lng=-3.7038),
    "barcelona": Location(lat=41.3851, lng=2.1734),
    "valencia": Location(lat=39.4699, lng=-0.3763),
    "sevilla": Location(lat=37.3891, lng=-5.9845),
    "bilbao": Location(lat=43.2630, lng=-2.9350),
}


def deg_to_rad(degrees: float) -> float:
    """Convert decimal degrees to radians."""
    return degrees * (pi / 180)


def rad_to_deg(radians: float) -> float:
    """Convert radians to decimal degrees."""
    return radians * (180 / pi)


def _city_key(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class GeoService:
    """Service for geolocation calculations."""

    @staticmethod
    def haversine_distance(
        lat1: float,
        lon1: float,
        lat2: float,
        lon2: float
    ) -> float:
        """
        Calculate the great circle distance between two points
        on the earth (specified in decimal degrees).

        Returns distance in kilometers.
        """
        d_lat = deg_to_rad(lat2 - lat1)
        d_lon = deg_to_rad(lon2 - lon1)

        a = (
            sin(d_lat / 2) ** 2
            + cos(deg_to_rad(lat1)) * cos(deg_to_rad(lat2)) * sin(d_lon / 2) ** 2
        )
        # Rounding can push a just past 1 for antipodal points
        a = min(1.0, max(0.0, a))
        c = 2 * atan2(sqrt(a), sqrt(1 - a))

        return EARTH_RADIUS_KM * c

    @classmethod
    def distance_between(cls, origin: Location, target: Location) -> float:
        """Distance in kilometers between two locations."""
        return cls.haversine_distance(origin.lat, origin.lng, target.lat, target.lng)

    @staticmethod
    def city_location(name: str) -> Optional[Location]:
        """
        Look up a preset city by name.

        Matching ignores case, surrounding whitespace and accents, so
        "Sevilla", " sevilla " and "SEVÍLLA" resolve to the same entry.
        """
        return CITY_COORDINATES.get(_city_key(name))

    @staticmethod
    def preset_cities() -> List[Dict[str, object]]:
        """Return the preset cities as display-ready dictionaries."""
        return [
            {"key": key, "name": key.capitalize(), "location": location.to_dict()}
            for key, location in CITY_COORDINATES.items()
        ]


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Module-level shortcut for :meth:`GeoService.haversine_distance`."""
    return GeoService.haversine_distance(lat1, lng1, lat2, lng2)
