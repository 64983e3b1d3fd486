"""External provider adapter used by the jurisdiction resolver."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from app.core.config import Settings
from app.models.geo import BoundingBox, GeoPoint
from app.services.provider.google_maps_client import GoogleMapsClient
from app.services.provider.precinct_names import first_precinct_num

logger = logging.getLogger(__name__)


class ProviderAdapter(ABC):
    """
    Point-of-interest search and geocoding.

    Implementations return None for "not found" and for any failure; callers
    never see an exception.
    """

    @abstractmethod
    def find_nearest_named_place(self, point: GeoPoint, keyword: str) -> Optional[int]:
        ...

    @abstractmethod
    def forward_geocode(self, address: str) -> Optional[GeoPoint]:
        ...

    @abstractmethod
    def reverse_geocode(self, point: GeoPoint) -> Optional[str]:
        ...


class NullProviderAdapter(ProviderAdapter):
    """Used when no provider is configured."""

    def find_nearest_named_place(self, point: GeoPoint, keyword: str) -> Optional[int]:
        return None

    def forward_geocode(self, address: str) -> Optional[GeoPoint]:
        return None

    def reverse_geocode(self, point: GeoPoint) -> Optional[str]:
        return None


def _location_of(result: Dict[str, Any]) -> Optional[GeoPoint]:
    location = (result.get("geometry") or {}).get("location") or {}
    return GeoPoint.from_lat_lng(location.get("lat"), location.get("lng"))


class GoogleMapsProviderAdapter(ProviderAdapter):
    def __init__(
        self,
        client: GoogleMapsClient,
        geocode_bounds: Tuple[float, float, float, float],
        city_suffix: str = "New York City, NY",
        components: Optional[str] = "country:US|administrative_area:NY",
    ):
        """
        Args:
            client: Configured Google Maps client
            geocode_bounds: (min_lat, min_lng, max_lat, max_lng) accepted for geocoding results
            city_suffix: Appended to queries that do not already name the city
            components: Component filter sent with forward geocoding requests
        """
        self.client = client
        min_lat, min_lng, max_lat, max_lng = geocode_bounds
        self.bounds = BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lng=min_lng, max_lng=max_lng)
        self.city_suffix = city_suffix
        self.components = components

    def find_nearest_named_place(self, point: GeoPoint, keyword: str) -> Optional[int]:
        try:
            places = self.client.nearby_search(point.latitude, point.longitude, keyword)
            number = first_precinct_num(str(place.get("name") or "") for place in places)
        except Exception as e:
            logger.warning(f"Nearby precinct search failed: {str(e)}")
            return None

        if number is not None:
            logger.info(f"Nearby search suggests precinct {number} for ({point.latitude}, {point.longitude})")
        return number

    def forward_geocode(self, address: str) -> Optional[GeoPoint]:
        query = address.strip()
        if not query:
            return None
        if "new york" not in query.lower():
            query = f"{query}, {self.city_suffix}"

        b = self.bounds
        try:
            results = self.client.geocode(
                query,
                bounds=f"{b.min_lat},{b.min_lng}|{b.max_lat},{b.max_lng}",
                components=self.components,
            )
        except Exception as e:
            logger.warning(f"Geocoding '{address}' failed: {str(e)}")
            return None

        candidates = [_location_of(r) for r in results]
        candidates = [p for p in candidates if p is not None]
        if not candidates:
            return None

        # Prefer the first in-bounds candidate; an out-of-bounds first candidate is rejected
        chosen = next((p for p in candidates if b.contains(p)), candidates[0])
        if not b.contains(chosen):
            logger.info(f"Geocoded '{address}' outside the city bounds; rejecting")
            return None
        return chosen

    def reverse_geocode(self, point: GeoPoint) -> Optional[str]:
        try:
            results = self.client.reverse_geocode(point.latitude, point.longitude)
        except Exception as e:
            logger.warning(f"Reverse geocoding failed: {str(e)}")
            return None

        for result in results:
            address = result.get("formatted_address")
            if address:
                return str(address)
        return None


def build_provider(settings: Settings) -> ProviderAdapter:
    """Google Maps adapter when an API key is configured, otherwise the null adapter."""
    if not settings.google_maps_api_key:
        logger.warning("No Google Maps API key configured; external hints and geocoding disabled")
        return NullProviderAdapter()

    client = GoogleMapsClient(
        api_key=settings.google_maps_api_key,
        base_url=settings.google_maps_base_url,
        strict_timeout=settings.provider_strict_timeout_seconds,
        lenient_timeout=settings.provider_lenient_timeout_seconds,
        max_retries=settings.provider_max_retries,
    )
    return GoogleMapsProviderAdapter(
        client,
        geocode_bounds=settings.geocode_bounds,
        city_suffix=settings.geocode_city_suffix,
        components=settings.geocode_components,
    )
