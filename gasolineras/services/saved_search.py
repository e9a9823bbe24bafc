"""Persistence of the last search made by a client session."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import database
from ..models.saved_search import SavedSearch
from .types import FilterSettings, Location

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchSnapshot:
    """What is needed to replay a search after a restart."""

    location: Location
    filters: FilterSettings
    location_name: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "userLocation": self.location.to_dict(),
            "filters": {
                "fuelType": self.filters.fuel_type.value,
                "sortBy": self.filters.sort_by.value,
                "radius": self.filters.radius_km,
            },
            "locationName": self.location_name,
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SearchSnapshot":
        location = payload["userLocation"]
        return cls(
            location=Location(lat=float(location["lat"]), lng=float(location["lng"])),
            filters=FilterSettings.from_dict(payload["filters"]),
            location_name=str(payload.get("locationName") or ""),
        )


class SavedSearchStore:
    """Reads and writes :class:`SearchSnapshot` rows keyed by session id."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def save(self, session_id: str, snapshot: SearchSnapshot) -> None:
        """Insert or overwrite the snapshot for ``session_id``."""
        document = json.dumps(snapshot.to_payload(), ensure_ascii=False)

        result = await self._db.execute(
            select(SavedSearch).where(SavedSearch.session_id == session_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            self._db.add(SavedSearch(session_id=session_id, payload=document))
        else:
            row.payload = document
        await self._db.flush()

    async def load(self, session_id: str) -> Optional[SearchSnapshot]:
        """
        Return the stored snapshot, or None if missing or unreadable.

        Corrupt documents are treated exactly like missing ones.
        """
        result = await self._db.execute(
            select(SavedSearch.payload).where(SavedSearch.session_id == session_id)
        )
        document = result.scalar_one_or_none()
        if document is None:
            return None

        try:
            return SearchSnapshot.from_payload(json.loads(document))
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            _LOGGER.debug("Ignoring unreadable saved search for %s: %s", session_id, exc)
            return None

    async def delete(self, session_id: str) -> None:
        result = await self._db.execute(
            select(SavedSearch).where(SavedSearch.session_id == session_id)
        )
        row = result.scalar_one_or_none()
        if row is not None:
            await self._db.delete(row)
            await self._db.flush()


@asynccontextmanager
async def saved_search_scope() -> AsyncIterator[SavedSearchStore]:
    """Open a database session and hand out a store bound to it."""
    async with database.get_db() as db:
        yield SavedSearchStore(db)
