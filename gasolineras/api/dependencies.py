"""Shared clients and per-session state for the API routers."""

from fastapi import Header

from ..config import settings
from ..services.cache_service import CacheService
from ..services.fuel_client import FuelClient
from ..services.geocoder import Geocoder
from ..services.saved_search import saved_search_scope
from ..services.search_session import SearchSession

# One client so every router shares the cached feeds
fuel_client = FuelClient()
geocoder = Geocoder()

# Idle sessions expire and the oldest go first past the cap
sessions = CacheService(enabled=True, max_entries=settings.max_sessions)


async def get_search_session(
    x_session_id: str = Header(..., min_length=1, max_length=64, description="Client session identifier"),
) -> SearchSession:
    """Return the session for the caller, restoring its last search on first use."""
    session = await sessions.get(x_session_id)
    if session is None:
        session = SearchSession(
            x_session_id,
            client=fuel_client,
            geocoder=geocoder,
            store_factory=saved_search_scope,
        )
        await session.restore()
    await sessions.set(x_session_id, session, ttl=settings.session_idle_ttl)
    return session
