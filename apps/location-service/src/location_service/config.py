from __future__ import annotations

from devkit.config import ServiceSettings, load_settings
from pydantic import field_validator

SERVICE_NAME = "location-service"
DEFAULT_PROVIDER_ORDER = "amap,baidu,tencent"


class LocationSettings(ServiceSettings):
    SERVICE_NAME: str = SERVICE_NAME
    AMAP_API_KEY: str | None = None
    AMAP_BASE_URL: str = "https://restapi.amap.com/v3"
    BAIDU_MAP_API_KEY: str | None = None
    BAIDU_MAP_BASE_URL: str = "https://api.map.baidu.com"
    TENCENT_MAP_API_KEY: str | None = None
    TENCENT_MAP_BASE_URL: str = "https://apis.map.qq.com/ws"
    LOCATION_PROVIDER_ORDER: str = DEFAULT_PROVIDER_ORDER
    LOCATION_PROVIDER_TIMEOUT_SECONDS: float = 5.0

    @field_validator("AMAP_API_KEY", "BAIDU_MAP_API_KEY", "TENCENT_MAP_API_KEY")
    @classmethod
    def _blank_key_is_missing(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("LOCATION_PROVIDER_TIMEOUT_SECONDS")
    @classmethod
    def _bounded_timeout(cls, value: float) -> float:
        if value <= 0 or value > 10:
            raise ValueError("LOCATION_PROVIDER_TIMEOUT_SECONDS must be in (0, 10]")
        return value

    def provider_order(self) -> list[str]:
        return [name.strip().lower() for name in self.LOCATION_PROVIDER_ORDER.split(",") if name.strip()]


def load_location_settings() -> LocationSettings:
    return load_settings(SERVICE_NAME, LocationSettings)
