"""API routes for municipality autocomplete."""

from fastapi import APIRouter, Query

from ..services.autocomplete import suggest
from .dependencies import fuel_client

router = APIRouter()


@router.get("/suggest")
async def suggest_municipalities(
    q: str = Query("", description="Text typed so far"),
    limit: int = Query(5, ge=1, le=20, description="Maximum number of suggestions"),
):
    """
    Municipalities containing ``q``.

    Fewer than three characters yields no suggestions; a failing feed
    yields none either.
    """
    municipalities = await fuel_client.fetch_municipalities()
    suggestions = suggest(municipalities, q, limit=limit)
    return {"query": q, "suggestions": suggestions, "count": len(suggestions)}
