"""
Application settings.

Values come from environment variables prefixed with ``EXPLORER_`` (or a
local ``.env`` file), e.g. ``EXPLORER_DEBUG=true``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Nairobi, Kenya - locality prior for image identification
NAIROBI_LAT = -1.286389
NAIROBI_LON = 36.817223


class Settings(BaseSettings):
    """Runtime configuration for the explorer."""

    model_config = SettingsConfigDict(
        env_prefix="EXPLORER_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "kenya-biodiversity-explorer"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Providers
    gbif_api_base: str = "https://api.gbif.org/v1"
    inat_api_base: str = "https://api.inaturalist.org/v1"
    http_timeout: float = Field(default=30.0, gt=0)
    inat_api_token: str | None = Field(default=None, description="JWT for computer vision scoring")

    # Country scope
    country_code: str = Field(default="KEN", description="ISO-3 code for GADM browse")
    country_iso2: str = Field(default="KE", description="ISO-2 code for occurrence search")
    country_qualifier: str = Field(default="Kenya", description="Token preferred in place labels")

    # Place resolution
    autocomplete_per_page: int = Field(default=5, ge=3, le=5)

    # Vision identification
    default_lat: float = Field(default=NAIROBI_LAT, ge=-90, le=90)
    default_lon: float = Field(default=NAIROBI_LON, ge=-180, le=180)

    # Caching and pacing
    detail_cache_ttl_seconds: float = Field(default=300.0, ge=0)
    bulk_delay_seconds: float = Field(default=0.2, ge=0)
    data_dir: Path = Path("data")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
