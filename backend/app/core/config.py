from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Tuple


class Settings(BaseSettings):
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"

    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Reference data (static JSON exports, loaded once at startup)
    data_dir: str = "data"
    precinct_data_file: str = "precinctData.json"
    precinct_boundaries_file: str = "precinctBoundaries.json"
    precinct_locations_file: str = "precinctLocations.json"
    sectors_file: str = "NYPD_Sectors.json"
    squads_file: str = "squads.json"
    rdo_schedules_file: str = "rdoSchedules.json"

    # Google Maps provider
    # Empty key disables the provider (resolution runs on local data only)
    google_maps_api_key: str = ""
    google_maps_base_url: str = "https://maps.googleapis.com/maps/api"
    # Two-tier call policy: fast attempt first, relaxed attempt on timeout
    provider_strict_timeout_seconds: float = 4.0
    provider_lenient_timeout_seconds: float = 12.0
    provider_max_retries: int = 2
    precinct_search_keyword: str = "NYPD precinct"

    # Forward geocoding constraints
    geocode_city_suffix: str = "New York City, NY"
    geocode_components: str = "country:US|administrative_area:NY"
    geocode_bounds: Tuple[float, float, float, float] = (
        40.49,   # min_lat
        -74.26,  # min_lng
        40.92,   # max_lat
        -73.70   # max_lng
    )

    # Jurisdiction resolution
    # Adds the "owning precinct of the sector under the point" tier after boundary containment
    resolver_sector_owner_tier: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
