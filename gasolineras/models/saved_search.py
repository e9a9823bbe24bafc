"""Persisted "last search" for a browser session."""

from sqlalchemy import String, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class SavedSearch(Base, TimestampMixin):
    """Last location, filters and label used by one client session."""

    __tablename__ = "saved_searches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    # JSON document: {"userLocation": {...}, "filters": {...}, "locationName": "..."}
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<SavedSearch(session_id={self.session_id})>"
