"""Tests for radius/fuel filtering and ordering."""

import pytest

from gasolineras.services.geo_service import GeoService
from gasolineras.services.station_filter import select_stations
from gasolineras.services.types import FilterSettings, FuelType, SortBy, Station

from .factories import MADRID, north_of


def _station(station_id, km, **prices):
    return Station(
        id=station_id,
        name=f"Station {station_id}",
        address="Dirección no disponible",
        location=north_of(MADRID, km),
        prices={FuelType(key): value for key, value in prices.items()},
        last_updated="2026-10-19",
    )


def test_radius_excludes_far_stations():
    stations = [
        _station("far", 12, diesel=1.30),
        _station("mid", 7, diesel=1.40),
        _station("near", 3, diesel=1.50),
    ]
    settings = FilterSettings(fuel_type=FuelType.DIESEL, sort_by=SortBy.DISTANCE, radius_km=10)

    selected = select_stations(stations, MADRID, settings)

    assert [item.station.id for item in selected] == ["near", "mid"]
    assert selected[0].distance_km == pytest.approx(3, abs=1e-6)
    assert selected[1].distance_km == pytest.approx(7, abs=1e-6)


def test_radius_is_inclusive():
    station = _station("edge", 4, diesel=1.40)
    radius = GeoService.distance_between(MADRID, station.location)

    selected = select_stations([station], MADRID, FilterSettings(fuel_type=FuelType.DIESEL, radius_km=radius))

    assert [item.station.id for item in selected] == ["edge"]


def test_price_sort_breaks_ties_by_distance():
    stations = [
        _station("pricier", 5, gasolina_95=1.400),
        _station("cheaper", 1, gasolina_95=1.399),
        _station("same-price-far", 6, gasolina_95=1.399),
    ]
    settings = FilterSettings(fuel_type=FuelType.GASOLINA_95, sort_by=SortBy.PRICE, radius_km=10)

    selected = select_stations(stations, MADRID, settings)

    assert [item.station.id for item in selected] == ["cheaper", "same-price-far", "pricier"]


def test_station_without_active_fuel_is_excluded():
    stations = [
        _station("no-98", 0.5, gasolina_95=1.50),
        _station("has-98", 8, gasolina_98=1.70),
    ]
    settings = FilterSettings(fuel_type=FuelType.GASOLINA_98, sort_by=SortBy.DISTANCE, radius_km=50)

    selected = select_stations(stations, MADRID, settings)

    assert [item.station.id for item in selected] == ["has-98"]


def test_exact_ties_keep_input_order():
    stations = [
        _station("b", 2, diesel=1.45),
        _station("a", 2, diesel=1.45),
    ]

    by_distance = select_stations(stations, MADRID, FilterSettings(fuel_type=FuelType.DIESEL))
    by_price = select_stations(
        stations, MADRID, FilterSettings(fuel_type=FuelType.DIESEL, sort_by=SortBy.PRICE)
    )

    assert [item.station.id for item in by_distance] == ["b", "a"]
    assert [item.station.id for item in by_price] == ["b", "a"]


def test_select_does_not_mutate_input():
    stations = [_station("x", 9, diesel=1.2), _station("y", 1, diesel=1.3)]
    snapshot = list(stations)

    select_stations(stations, MADRID, FilterSettings(fuel_type=FuelType.DIESEL))

    assert stations == snapshot


def test_filtered_station_serialisation():
    station = _station("s", 2, diesel=1.459)
    selected = select_stations([station], MADRID, FilterSettings(fuel_type=FuelType.DIESEL))

    payload = selected[0].to_dict(FuelType.DIESEL)

    assert payload["price"] == 1.459
    assert payload["fuel_label"] == "Diésel"
    assert payload["distance_km"] == 2.0
    assert payload["prices"]["gasolina_95"] is None
    assert payload["maps_url"].startswith("https://www.google.com/maps?q=")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"fuel_type": "kerosene"},
        {"sort_by": "name"},
        {"radius_km": 0},
        {"radius_km": -5},
    ],
)
def test_filter_settings_reject_unknown_options(kwargs):
    with pytest.raises(ValueError):
        FilterSettings(**kwargs)


def test_filter_settings_accept_strings():
    settings = FilterSettings(fuel_type="diesel_premium", sort_by="price", radius_km="25")

    assert settings.fuel_type is FuelType.DIESEL_PREMIUM
    assert settings.sort_by is SortBy.PRICE
    assert settings.radius_km == 25.0
