"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import database
from .config import settings
from .logging_utils import configure_logging
from .api import geo, municipalities, search, stations
from .api.dependencies import fuel_client
from .services.fuel_client import FetchFailure, NoStationData

_LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Set up logging and storage, then warm the station cache."""
    configure_logging()
    await database.init_db()
    try:
        await fuel_client.fetch_stations()
    except (FetchFailure, NoStationData) as exc:
        # The first request retries; the app still serves cities and geocoding
        _LOGGER.warning("Station feed unavailable at startup: %s", exc.message)
    yield
    await database.engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    docs_url=None if settings.is_production else "/docs",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(stations.router, prefix="/api/stations", tags=["Stations"])
app.include_router(geo.router, prefix="/api/geo", tags=["Geolocation"])
app.include_router(municipalities.router, prefix="/api/municipalities", tags=["Municipalities"])
app.include_router(search.router, prefix="/api/search", tags=["Search"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "operational",
        "docs": app.docs_url,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "gasolineras.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
