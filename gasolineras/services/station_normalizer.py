"""Normalise raw MITECO station records into :class:`Station` objects."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TypeVar

from .errors import GasolinerasError
from .types import FuelType, Location, Station

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

RawStationRecord = Mapping[str, Any]

# Leading numeric prefix, the way a browser's parseFloat reads "40.41abc"
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_PRICE_JUNK = re.compile(r"[^\d.-]")


class RecordRejected(GasolinerasError):
    """A single upstream record could not become a usable station."""


def parse_leading_float(value: Any) -> Optional[float]:
    """Parse the numeric prefix of ``value`` after comma → dot normalisation."""
    if value is None:
        return None
    text = str(value).replace(",", ".", 1)
    match = _FLOAT_PREFIX.match(text)
    if not match:
        return None
    return float(match.group(0))


def first_valid(
    record: RawStationRecord,
    candidates: Sequence[str],
    resolve: Callable[[Any], Optional[T]],
) -> Optional[T]:
    """Return the first candidate field whose value ``resolve`` accepts."""
    for field_name in candidates:
        if field_name not in record:
            continue
        resolved = resolve(record[field_name])
        if resolved is not None:
            return resolved
    return None


def clean_text(value: Any) -> Optional[str]:
    """Trimmed string, or None for non-strings, blanks and the literal "null"."""
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    if not cleaned or cleaned.lower() == "null":
        return None
    return cleaned


def _bounded(low: float, high: float) -> Callable[[Any], Optional[float]]:
    def resolve(value: Any) -> Optional[float]:
        if value is None or value == "":
            return None
        parsed = parse_leading_float(value)
        if parsed is None or not low <= parsed <= high:
            return None
        return parsed

    return resolve


def parse_price(raw: Any) -> Optional[float]:
    """
    Parse a euro-per-litre price string such as ``"1,459"``.

    Returns None for blanks, "null", unparsable text and anything outside
    the 0.5-3.0 sanity range. A missing price is never reported as zero.
    """
    if raw is None or raw == "" or raw == "null":
        return None

    cleaned = _PRICE_JUNK.sub("", str(raw).strip().replace(",", ".", 1))
    if cleaned in ("", "-", "."):
        return None

    price = parse_leading_float(cleaned)
    if price is None or price < StationNormalizer.PRICE_MIN or price > StationNormalizer.PRICE_MAX:
        return None
    return price


class StationNormalizer:
    """Turns inconsistently keyed upstream records into canonical stations."""

    ID_FIELD = "IDEESS"
    DATE_FIELD = "Fecha"

    NAME_FIELDS = (
        "Rotulo", "Rótulo", "Nombre", "Marca",
        "Razón Social", "RazonSocial", "Operadora", "Franquicia",
    )
    STREET_FIELDS = ("Direccion", "Dirección", "Address")
    POSTAL_CODE_FIELDS = ("C.P.", "CP", "CodigoPostal", "Codigo Postal")
    CITY_FIELDS = ("Localidad", "Municipio", "Ciudad")
    PROVINCE_FIELDS = ("Provincia", "Province")

    LATITUDE_FIELDS = ("Latitud", "Latitude", "lat")
    LONGITUDE_FIELDS = ("Longitud (WGS84)", "Longitude", "lng", "lon", "Longitud")

    PRICE_FIELDS: Dict[FuelType, str] = {
        FuelType.DIESEL: "Precio Gasoleo A",
        FuelType.DIESEL_PREMIUM: "Precio Gasoleo Premium",
        FuelType.GASOLINA_95: "Precio Gasolina 95 E5",
        FuelType.GASOLINA_98: "Precio Gasolina 98 E5",
    }

    # Iberian peninsula sanity bounds
    LAT_MIN, LAT_MAX = 35.0, 45.0
    LNG_MIN, LNG_MAX = -10.0, 5.0

    PRICE_MIN, PRICE_MAX = 0.5, 3.0

    NAME_ADDRESS_LIMIT = 30
    ADDRESS_UNAVAILABLE = "Dirección no disponible"

    def normalise(self, record: RawStationRecord, default_date: Optional[str] = None) -> Station:
        """
        Build a :class:`Station` from one upstream record.

        Args:
            record: Raw mapping as found in ``ListaEESSPrecio``
            default_date: Feed-level date used when the record has none

        Raises:
            RecordRejected: If the identifier or coordinates are unusable,
                or anything unexpected happens while reading the record.
        """
        try:
            return self._build(record, default_date)
        except RecordRejected:
            raise
        except Exception as exc:
            raise RecordRejected(f"Malformed station record: {exc}") from exc

    def try_normalise(
        self, record: RawStationRecord, default_date: Optional[str] = None
    ) -> Optional[Station]:
        """Like :meth:`normalise` but logs and returns None on rejection."""
        try:
            return self.normalise(record, default_date)
        except RecordRejected as exc:
            _LOGGER.warning(
                "Skipping station record: %s",
                exc.message,
                extra={"station_id": _safe_id(record)},
            )
            return None

    def _build(self, record: RawStationRecord, default_date: Optional[str]) -> Station:
        station_id = self._resolve_id(record)
        if station_id is None:
            raise RecordRejected("Station record without IDEESS")

        location = self._resolve_location(record)
        if location is None:
            raise RecordRejected(f"Station {station_id} has no valid coordinates")

        prices = {
            fuel_type: price
            for fuel_type, field_name in self.PRICE_FIELDS.items()
            if (price := parse_price(record.get(field_name))) is not None
        }

        return Station(
            id=station_id,
            name=self._resolve_name(record, station_id),
            address=self._resolve_address(record),
            location=location,
            prices=prices,
            last_updated=self._resolve_date(record, default_date),
        )

    def _resolve_id(self, record: RawStationRecord) -> Optional[str]:
        value = record.get(self.ID_FIELD)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def _resolve_name(self, record: RawStationRecord, station_id: str) -> str:
        name = first_valid(record, self.NAME_FIELDS, clean_text)
        if name:
            return name

        street = first_valid(record, self.STREET_FIELDS[:2], clean_text)
        if street:
            suffix = "..." if len(street) > self.NAME_ADDRESS_LIMIT else ""
            return f"Gasolinera - {street[:self.NAME_ADDRESS_LIMIT]}{suffix}"

        return f"Gasolinera #{station_id}"

    def _resolve_address(self, record: RawStationRecord) -> str:
        parts = [
            first_valid(record, fields, clean_text)
            for fields in (
                self.STREET_FIELDS,
                self.POSTAL_CODE_FIELDS,
                self.CITY_FIELDS,
                self.PROVINCE_FIELDS,
            )
        ]
        present = [part for part in parts if part]
        return ", ".join(present) if present else self.ADDRESS_UNAVAILABLE

    def _resolve_location(self, record: RawStationRecord) -> Optional[Location]:
        lat = first_valid(record, self.LATITUDE_FIELDS, _bounded(self.LAT_MIN, self.LAT_MAX))
        lng = first_valid(record, self.LONGITUDE_FIELDS, _bounded(self.LNG_MIN, self.LNG_MAX))
        if lat is None or lng is None:
            return None
        return Location(lat=lat, lng=lng)

    def _resolve_date(self, record: RawStationRecord, default_date: Optional[str]) -> str:
        value = record.get(self.DATE_FIELD)
        if value:
            return str(value)
        return default_date or date.today().isoformat()


def _safe_id(record: Any) -> Optional[str]:
    try:
        value = record.get(StationNormalizer.ID_FIELD)
    except AttributeError:
        return None
    return None if value is None else str(value)
