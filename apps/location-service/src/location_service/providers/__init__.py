"""Geocoding provider adapters."""

from location_service.providers.amap import AmapAdapter
from location_service.providers.baidu import BaiduAdapter
from location_service.providers.base import BaseProviderAdapter
from location_service.providers.factory import PROVIDER_ADAPTERS, build_provider_adapter
from location_service.providers.tencent import TencentAdapter

__all__ = [
    "AmapAdapter",
    "BaiduAdapter",
    "BaseProviderAdapter",
    "PROVIDER_ADAPTERS",
    "TencentAdapter",
    "build_provider_adapter",
]
