"""Distance, radius and fuel filtering plus result ordering."""

from typing import Iterable, List

from .geo_service import GeoService
from .types import FilteredStation, FilterSettings, Location, SortBy, Station


def select_stations(
    stations: Iterable[Station],
    user_location: Location,
    settings: FilterSettings,
) -> List[FilteredStation]:
    """
    Stations within ``settings.radius_km`` that sell the selected fuel.

    Stations without a price for the active fuel are left out entirely.
    Price ordering breaks ties by distance; ties beyond that keep input
    order because ``list.sort`` is stable.

    Args:
        stations: Normalised stations, usually the whole national feed
        user_location: Where the user is searching from
        settings: Active fuel type, ordering and radius

    Returns:
        Ordered stations with their distance in kilometers
    """
    fuel_type = settings.fuel_type
    selected: List[FilteredStation] = []

    for station in stations:
        if station.price_for(fuel_type) is None:
            continue

        distance = GeoService.distance_between(user_location, station.location)
        if distance <= settings.radius_km:
            selected.append(FilteredStation(station=station, distance_km=distance))

    if settings.sort_by == SortBy.PRICE:
        selected.sort(key=lambda item: (item.station.price_for(fuel_type), item.distance_km))
    else:
        selected.sort(key=lambda item: item.distance_km)

    return selected
