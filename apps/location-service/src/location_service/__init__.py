"""Geolocation resolution service: provider selection, normalization and geometry."""

from location_service.config import LocationSettings, load_location_settings
from location_service.errors import (
    InvalidInputError,
    LocationError,
    NotFoundError,
    ProviderError,
    ProviderUnavailableError,
    ServiceUnavailableError,
)
from location_service.registry import ProviderRegistry, build_registry
from location_service.schemas import (
    AddressInfo,
    POIInfo,
    POISearchResult,
    ProviderDescriptor,
    ServiceStatus,
)
from location_service.service import LocationService, create_location_service

__all__ = [
    "AddressInfo",
    "InvalidInputError",
    "LocationError",
    "LocationService",
    "LocationSettings",
    "NotFoundError",
    "POIInfo",
    "POISearchResult",
    "ProviderDescriptor",
    "ProviderError",
    "ProviderRegistry",
    "ProviderUnavailableError",
    "ServiceStatus",
    "ServiceUnavailableError",
    "build_registry",
    "create_location_service",
    "load_location_settings",
]
