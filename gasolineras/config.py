"""Application configuration management."""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from project-level .env if available
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = os.getenv("APP_NAME", "Gasolineras Cercanas")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    environment: str = os.getenv("ENVIRONMENT", "development")
    debug: bool = os.getenv("DEBUG", "False") == "True"

    # Server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))
    reload: bool = os.getenv("RELOAD", "True") == "True"

    # Database (saved searches)
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./gasolineras.db")

    # Cache
    cache_enabled: bool = os.getenv("CACHE_ENABLED", "True") == "True"
    cache_ttl_stations: int = int(os.getenv("CACHE_TTL_STATIONS", "1800"))
    cache_ttl_municipalities: int = int(os.getenv("CACHE_TTL_MUNICIPALITIES", "86400"))

    # Live search sessions kept in memory; evicted ones are restored from the database
    session_idle_ttl: int = int(os.getenv("SESSION_IDLE_TTL", "1800"))
    max_sessions: int = int(os.getenv("MAX_SESSIONS", "1000"))

    # Upstream open-data feeds (Ministerio para la Transición Ecológica)
    stations_api_url: str = os.getenv(
        "STATIONS_API_URL",
        "https://sedeaplicaciones.minetur.gob.es/ServiciosRESTCarburantes/"
        "PreciosCarburantes/EstacionesTerrestres/",
    )
    municipalities_api_url: str = os.getenv(
        "MUNICIPALITIES_API_URL",
        "https://sedeaplicaciones.minetur.gob.es/ServiciosRESTCarburantes/"
        "PreciosCarburantes/Listados/Municipios/",
    )
    upstream_timeout: int = int(os.getenv("UPSTREAM_TIMEOUT", "30"))
    upstream_max_retries: int = int(os.getenv("UPSTREAM_MAX_RETRIES", "1"))

    # Geocoding
    nominatim_url: str = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search")
    geocoder_user_agent: str = os.getenv("GEOCODER_USER_AGENT", "GasolinerasApp/1.0")

    # Search defaults
    default_fuel_type: str = os.getenv("DEFAULT_FUEL_TYPE", "gasolina_95")
    default_sort_by: str = os.getenv("DEFAULT_SORT_BY", "distance")
    default_radius_km: float = float(os.getenv("DEFAULT_RADIUS_KM", "10"))
    autocomplete_debounce_seconds: float = float(os.getenv("AUTOCOMPLETE_DEBOUNCE_SECONDS", "0.3"))

    # CORS
    cors_origins: List[str] = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ALLOW_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,http://localhost:8000",
        ).split(",")
        if origin.strip()
    ]
    cors_allow_credentials: bool = True

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = os.getenv("LOG_FORMAT", "json")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


# Global settings instance
settings = Settings()
