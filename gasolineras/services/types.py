"""Domain types shared by the station pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from ..config import settings


class FuelType(str, Enum):
    """Fuel types tracked by the finder."""

    DIESEL = "diesel"
    DIESEL_PREMIUM = "diesel_premium"
    GASOLINA_95 = "gasolina_95"
    GASOLINA_98 = "gasolina_98"

    @property
    def label(self) -> str:
        return FUEL_LABELS[self]


FUEL_LABELS = {
    FuelType.GASOLINA_95: "Gasolina 95",
    FuelType.GASOLINA_98: "Gasolina 98",
    FuelType.DIESEL: "Diésel",
    FuelType.DIESEL_PREMIUM: "Diésel Premium",
}


class SortBy(str, Enum):
    """Result orderings."""

    DISTANCE = "distance"
    PRICE = "price"


@dataclass(frozen=True)
class Location:
    """A WGS84 coordinate pair."""

    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Station:
    """A fuel station that passed normalisation."""

    id: str
    name: str
    address: str
    location: Location
    prices: Dict[FuelType, float] = field(default_factory=dict)
    last_updated: str = ""

    def price_for(self, fuel_type: FuelType) -> Optional[float]:
        return self.prices.get(fuel_type)

    @property
    def maps_url(self) -> str:
        return f"https://www.google.com/maps?q={self.location.lat},{self.location.lng}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "location": self.location.to_dict(),
            "prices": {fuel.value: self.prices.get(fuel) for fuel in FuelType},
            "last_updated": self.last_updated,
            "maps_url": self.maps_url,
        }


@dataclass(frozen=True)
class FilteredStation:
    """A station paired with its distance from the user."""

    station: Station
    distance_km: float

    def to_dict(self, fuel_type: Optional[FuelType] = None) -> Dict[str, Any]:
        payload = self.station.to_dict()
        payload["distance_km"] = round(self.distance_km, 2)
        if fuel_type is not None:
            payload["fuel_type"] = fuel_type.value
            payload["fuel_label"] = fuel_type.label
            payload["price"] = self.station.price_for(fuel_type)
        return payload


@dataclass(frozen=True)
class FilterSettings:
    """Fuel type, ordering and search radius chosen by the user."""

    fuel_type: FuelType = FuelType.GASOLINA_95
    sort_by: SortBy = SortBy.DISTANCE
    radius_km: float = 10.0

    def __post_init__(self) -> None:
        # Accept raw strings coming from query params or stored JSON
        object.__setattr__(self, "fuel_type", FuelType(self.fuel_type))
        object.__setattr__(self, "sort_by", SortBy(self.sort_by))
        radius = float(self.radius_km)
        if not radius > 0:
            raise ValueError(f"radius_km must be positive, got {self.radius_km!r}")
        object.__setattr__(self, "radius_km", radius)

    @classmethod
    def defaults(cls) -> "FilterSettings":
        return cls(
            fuel_type=settings.default_fuel_type,
            sort_by=settings.default_sort_by,
            radius_km=settings.default_radius_km,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterSettings":
        """Build settings from a stored document (``radius`` or ``radius_km``)."""
        radius = data.get("radius_km", data.get("radius"))
        return cls(
            fuel_type=data["fuel_type"] if "fuel_type" in data else data["fuelType"],
            sort_by=data["sort_by"] if "sort_by" in data else data["sortBy"],
            radius_km=radius,
        )

    def with_changes(self, **changes: Any) -> "FilterSettings":
        return replace(self, **{key: value for key, value in changes.items() if value is not None})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fuel_type": self.fuel_type.value,
            "sort_by": self.sort_by.value,
            "radius_km": self.radius_km,
        }
