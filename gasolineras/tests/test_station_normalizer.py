"""Tests for raw record normalisation."""

import logging
from datetime import date

import pytest

from gasolineras.services.station_normalizer import (
    RecordRejected,
    StationNormalizer,
    parse_leading_float,
    parse_price,
)
from gasolineras.services.types import FuelType, Location


@pytest.fixture
def normalizer():
    return StationNormalizer()


def test_normalise_minimal_record(normalizer):
    record = {
        "IDEESS": "123",
        "Rotulo": "REPSOL",
        "Latitud": "40,41",
        "Longitud (WGS84)": "-3,70",
        "Precio Gasoleo A": "1,459",
    }

    station = normalizer.normalise(record)

    assert station.id == "123"
    assert station.name == "REPSOL"
    assert station.location == Location(lat=40.41, lng=-3.70)
    assert station.prices == {FuelType.DIESEL: 1.459}
    assert station.address == "Dirección no disponible"


@pytest.mark.parametrize("station_id", [None, "", "   "])
def test_missing_identifier_is_rejected(normalizer, station_id):
    record = {"Latitud": "40,41", "Longitud (WGS84)": "-3,70"}
    if station_id is not None:
        record["IDEESS"] = station_id

    with pytest.raises(RecordRejected):
        normalizer.normalise(record)


@pytest.mark.parametrize(
    "lat, lng",
    [
        ("34,99", "-3,70"),
        ("45,01", "-3,70"),
        ("40,41", "-10,5"),
        ("40,41", "5,01"),
        ("28,12", "-15,43"),  # Canary Islands fall outside the peninsula box
        ("", "-3,70"),
        ("40,41", "abc"),
    ],
)
def test_out_of_bounds_coordinates_are_rejected(normalizer, lat, lng):
    record = {"IDEESS": "9", "Latitud": lat, "Longitud (WGS84)": lng}

    with pytest.raises(RecordRejected):
        normalizer.normalise(record)


def test_coordinates_fall_back_to_next_field(normalizer):
    record = {
        "IDEESS": "9",
        "Latitud": "0,0",
        "Latitude": "41.38",
        "Longitud (WGS84)": "",
        "lon": "2,17",
    }

    station = normalizer.normalise(record)

    assert station.location == Location(lat=41.38, lng=2.17)


def test_zero_longitude_is_valid(normalizer):
    station = normalizer.normalise({"IDEESS": "9", "Latitud": "39,5", "Longitud (WGS84)": "0,0"})
    assert station.location.lng == 0.0


def test_numeric_coordinates_are_accepted(normalizer):
    station = normalizer.normalise({"IDEESS": 77, "Latitud": 40.5, "Longitud (WGS84)": -3.6})
    assert station.id == "77"
    assert station.location == Location(lat=40.5, lng=-3.6)


def test_bad_price_does_not_reject_record(normalizer):
    record = {
        "IDEESS": "1",
        "Latitud": "40,41",
        "Longitud (WGS84)": "-3,70",
        "Precio Gasoleo A": "9,999",
        "Precio Gasolina 95 E5": "0,10",
        "Precio Gasolina 98 E5": "null",
        "Precio Gasoleo Premium": "1,619",
    }

    station = normalizer.normalise(record)

    assert station.prices == {FuelType.DIESEL_PREMIUM: 1.619}
    assert station.price_for(FuelType.DIESEL) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1,459", 1.459),
        (" 1,459 € ", 1.459),
        ("1.5", 1.5),
        ("0,5", 0.5),
        ("3,0", 3.0),
        ("3,001", None),
        ("0,499", None),
        ("", None),
        (None, None),
        ("null", None),
        ("-", None),
        (".", None),
        ("n/d", None),
        ("-1,2", None),
    ],
)
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


def test_parse_leading_float_reads_prefix():
    assert parse_leading_float("40,41abc") == 40.41
    assert parse_leading_float("abc") is None
    assert parse_leading_float(None) is None


def test_name_follows_field_priority(normalizer):
    record = {
        "IDEESS": "1",
        "Latitud": "40,41",
        "Longitud (WGS84)": "-3,70",
        "Rotulo": "  null ",
        "Rótulo": "   ",
        "Nombre": "GALP",
        "Marca": "CEPSA",
    }

    first = normalizer.normalise(record)
    second = normalizer.normalise(dict(record))

    assert first.name == "GALP"
    assert second.name == first.name


def test_name_falls_back_to_truncated_address(normalizer):
    record = {
        "IDEESS": "1",
        "Latitud": "40,41",
        "Longitud (WGS84)": "-3,70",
        "Dirección": "AVENIDA DE LA ILUSTRACION, KM 12,5 MARGEN DERECHO",
    }

    station = normalizer.normalise(record)

    assert station.name == "Gasolinera - AVENIDA DE LA ILUSTRACION, KM ..."


def test_name_uses_short_address_without_ellipsis(normalizer):
    record = {"IDEESS": "1", "Latitud": "40,41", "Longitud (WGS84)": "-3,70", "Direccion": "CALLE MAYOR 1"}
    assert normalizer.normalise(record).name == "Gasolinera - CALLE MAYOR 1"


def test_name_skips_placeholder_street_values(normalizer):
    base = {"IDEESS": "77", "Latitud": "40,41", "Longitud (WGS84)": "-3,70"}

    second_spelling = dict(base, Direccion="null", **{"Dirección": "CALLE REAL 2"})
    placeholders_only = dict(base, Direccion="  ", **{"Dirección": "NULL", "Address": "CALLE SOL 3"})

    assert normalizer.normalise(second_spelling).name == "Gasolinera - CALLE REAL 2"
    assert normalizer.normalise(placeholders_only).name == "Gasolinera #77"


def test_name_falls_back_to_identifier(normalizer):
    record = {"IDEESS": "4321", "Latitud": "40,41", "Longitud (WGS84)": "-3,70"}
    assert normalizer.normalise(record).name == "Gasolinera #4321"


def test_address_joins_resolved_parts(normalizer):
    record = {
        "IDEESS": "1",
        "Latitud": "40,41",
        "Longitud (WGS84)": "-3,70",
        "Dirección": "CALLE ALCALA 100",
        "C.P.": "null",
        "CP": "28009",
        "Municipio": "Madrid",
        "Provincia": " MADRID ",
    }

    station = normalizer.normalise(record)

    assert station.address == "CALLE ALCALA 100, 28009, Madrid, MADRID"


def test_last_updated_prefers_record_then_feed_then_today(normalizer):
    base = {"IDEESS": "1", "Latitud": "40,41", "Longitud (WGS84)": "-3,70"}

    assert normalizer.normalise({**base, "Fecha": "18/10/2026"}).last_updated == "18/10/2026"
    assert normalizer.normalise(base, default_date="19/10/2026 10:15:00").last_updated == "19/10/2026 10:15:00"
    assert normalizer.normalise(base).last_updated == date.today().isoformat()


def test_unexpected_fault_becomes_rejection(normalizer):
    with pytest.raises(RecordRejected):
        normalizer.normalise(None)

    with pytest.raises(RecordRejected):
        normalizer.normalise(["IDEESS", "1"])


def test_try_normalise_logs_and_returns_none(normalizer, caplog):
    with caplog.at_level(logging.WARNING, logger="gasolineras.services.station_normalizer"):
        result = normalizer.try_normalise({"IDEESS": "55", "Latitud": "0", "Longitud (WGS84)": "0"})

    assert result is None
    assert "Skipping station record" in caplog.text
    assert caplog.records[0].station_id == "55"
