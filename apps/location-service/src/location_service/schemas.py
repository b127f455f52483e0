from __future__ import annotations

from geo_engine.models import Coordinate
from pydantic import BaseModel, ConfigDict


class AddressInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    province: str | None = None
    city: str | None = None
    district: str | None = None
    township: str | None = None
    neighborhood: str | None = None
    building: str | None = None
    location: Coordinate | None = None
    level: str | None = None
    adcode: str | None = None


class POIInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str
    address: str
    location: Coordinate
    distance: float | None = None
    tel: str | None = None


class POISearchResult(BaseModel):
    pois: list[POIInfo]
    total: int


class ProviderDescriptor(BaseModel):
    name: str
    display_name: str
    configured: bool


class ServiceStatus(BaseModel):
    available: bool
    provider: str | None
    providers: list[ProviderDescriptor]
