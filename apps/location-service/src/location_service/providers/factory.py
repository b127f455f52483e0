from __future__ import annotations

from location_service.config import LocationSettings
from location_service.providers.amap import AmapAdapter
from location_service.providers.baidu import BaiduAdapter
from location_service.providers.base import BaseProviderAdapter, ClientFactory
from location_service.providers.tencent import TencentAdapter

AdapterType = type[BaseProviderAdapter]

PROVIDER_ADAPTERS: dict[str, AdapterType] = {
    "amap": AmapAdapter,
    "baidu": BaiduAdapter,
    "tencent": TencentAdapter,
}


def build_provider_adapter(
    provider_name: str,
    settings: LocationSettings,
    client_factory: ClientFactory | None = None,
) -> BaseProviderAdapter:
    adapter_type = PROVIDER_ADAPTERS.get(provider_name)
    if adapter_type is None:
        supported = ", ".join(sorted(PROVIDER_ADAPTERS.keys()))
        raise ValueError(f"unsupported provider '{provider_name}', supported: {supported}")
    api_key, base_url = _credentials(provider_name, settings)
    return adapter_type(
        api_key=api_key,
        base_url=base_url,
        timeout_seconds=settings.LOCATION_PROVIDER_TIMEOUT_SECONDS,
        client_factory=client_factory,
    )


def _credentials(provider_name: str, settings: LocationSettings) -> tuple[str | None, str]:
    if provider_name == "amap":
        return settings.AMAP_API_KEY, settings.AMAP_BASE_URL
    if provider_name == "baidu":
        return settings.BAIDU_MAP_API_KEY, settings.BAIDU_MAP_BASE_URL
    return settings.TENCENT_MAP_API_KEY, settings.TENCENT_MAP_BASE_URL
