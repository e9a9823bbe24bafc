"""Builders for raw feed records used across the test-suite."""

from typing import Any, Dict

from gasolineras.services.types import Location

# Puerta del Sol
MADRID = Location(lat=40.4168, lng=-3.7038)

# Kilometers per degree of latitude on a 6371 km sphere
KM_PER_DEGREE = 111.19492664455873


def north_of(origin: Location, km: float) -> Location:
    """A point ``km`` kilometers due north of ``origin``."""
    return Location(lat=origin.lat + km / KM_PER_DEGREE, lng=origin.lng)


def make_record(station_id: str, location: Location, **fields: Any) -> Dict[str, Any]:
    """Raw feed record in the MITECO format (comma decimals)."""
    record: Dict[str, Any] = {
        "IDEESS": station_id,
        "Rótulo": f"ESTACION {station_id}",
        "Dirección": f"CALLE {station_id}",
        "C.P.": "28001",
        "Localidad": "MADRID",
        "Provincia": "MADRID",
        "Latitud": f"{location.lat:.6f}".replace(".", ","),
        "Longitud (WGS84)": f"{location.lng:.6f}".replace(".", ","),
        "Precio Gasoleo A": "1,459",
        "Precio Gasolina 95 E5": "1,589",
        "Precio Gasolina 98 E5": "",
        "Precio Gasoleo Premium": "1,529",
    }
    record.update(fields)
    return record
