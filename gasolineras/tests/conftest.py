"""Shared fixtures: sample feed records, a throwaway database and an API client."""

from typing import Any, Dict, List
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gasolineras import database
from gasolineras.api import dependencies
from gasolineras.services.cache_service import CacheService
from gasolineras.services.station_normalizer import StationNormalizer
from gasolineras.services.types import Location, Station

from .factories import MADRID, make_record, north_of


@pytest.fixture
def feed_records() -> List[Dict[str, Any]]:
    """Three valid stations 3, 7 and 12 km north of Madrid plus two broken ones."""
    return [
        make_record("1", north_of(MADRID, 3)),
        make_record("2", north_of(MADRID, 7), **{"Precio Gasolina 95 E5": "1,499"}),
        make_record("3", north_of(MADRID, 12)),
        make_record("", north_of(MADRID, 1)),
        make_record("5", Location(lat=0.0, lng=0.0)),
    ]


@pytest.fixture
def feed_payload(feed_records) -> Dict[str, Any]:
    return {
        "Fecha": "19/10/2026 10:15:00",
        "ListaEESSPrecio": feed_records,
        "ResultadoConsulta": "OK",
    }


@pytest.fixture
def stations(feed_records) -> List[Station]:
    normalizer = StationNormalizer()
    normalised = (normalizer.try_normalise(record) for record in feed_records)
    return [station for station in normalised if station is not None]


@pytest_asyncio.fixture
async def test_db(tmp_path):
    """Point the app at a fresh SQLite file and yield a session on it."""
    previous_engine = database.engine
    previous_factory = database.AsyncSessionLocal

    database.configure_database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await database.init_db()

    async with database.AsyncSessionLocal() as session:
        yield session

    await database.engine.dispose()
    database.engine = previous_engine
    database.AsyncSessionLocal = previous_factory


@pytest_asyncio.fixture
async def client(test_db, stations, monkeypatch):
    """API client with the upstream feeds and geocoder stubbed out."""
    monkeypatch.setattr(dependencies, "sessions", CacheService(enabled=True, max_entries=100))
    monkeypatch.setattr(
        dependencies.fuel_client, "fetch_stations", AsyncMock(return_value=stations)
    )
    monkeypatch.setattr(
        dependencies.fuel_client,
        "fetch_municipalities",
        AsyncMock(return_value=["Madrid", "Majadahonda", "Alcalá de Henares", "Getafe"]),
    )
    monkeypatch.setattr(dependencies.geocoder, "geocode", AsyncMock(return_value=MADRID))

    from gasolineras.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
