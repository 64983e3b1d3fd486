"""External map provider (places search and geocoding)."""

from app.services.provider.adapter import (
    GoogleMapsProviderAdapter,
    NullProviderAdapter,
    ProviderAdapter,
    build_provider,
)

__all__ = ["GoogleMapsProviderAdapter", "NullProviderAdapter", "ProviderAdapter", "build_provider"]
