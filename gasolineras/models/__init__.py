"""Database models for the fuel-station finder."""

from .base import Base
from .saved_search import SavedSearch

__all__ = [
    "Base",
    "SavedSearch",
]
