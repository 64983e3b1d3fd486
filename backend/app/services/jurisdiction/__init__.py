from app.services.jurisdiction.resolver import AddressResolution, Jurisdiction, JurisdictionResolver

__all__ = ["AddressResolution", "Jurisdiction", "JurisdictionResolver"]
