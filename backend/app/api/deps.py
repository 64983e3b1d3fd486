from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.services.jurisdiction.resolver import JurisdictionResolver
from app.services.provider.adapter import NullProviderAdapter, ProviderAdapter
from app.services.reference_data import ReferenceData


def get_reference_data(request: Request) -> ReferenceData:
    """Dependency for the reference data loaded at startup"""
    return getattr(request.app.state, "reference_data", None) or ReferenceData.empty()


def get_provider(request: Request) -> ProviderAdapter:
    """Dependency for the external map provider built at startup"""
    return getattr(request.app.state, "provider", None) or NullProviderAdapter()


def get_resolver(
    data: ReferenceData = Depends(get_reference_data),
    provider: ProviderAdapter = Depends(get_provider),
    settings: Settings = Depends(get_settings),
) -> JurisdictionResolver:
    return JurisdictionResolver.from_settings(data.store, provider, settings)
