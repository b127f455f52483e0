from __future__ import annotations

from typing import Any

from geo_engine.centroid import centroid
from geo_engine.models import Coordinate

from location_service.errors import NotFoundError
from location_service.normalize import (
    build_address_info,
    build_poi_info,
    clean_text,
    parse_lnglat_string,
    to_float,
    to_int,
)
from location_service.providers.base import BaseProviderAdapter
from location_service.schemas import AddressInfo, POIInfo, POISearchResult

# Amap caps offset at 25 per page
MAX_PAGE_SIZE = 25


class AmapAdapter(BaseProviderAdapter):
    provider_name = "amap"
    display_name = "高德地图"

    async def geocode(self, address: str, city: str | None = None) -> AddressInfo:
        payload = await self._get_json("/geocode/geo", {"address": address, "city": city})
        geocodes = payload.get("geocodes") or []
        if not geocodes:
            raise NotFoundError("no address matched", provider=self.provider_name)
        item = geocodes[0]
        return build_address_info(
            address=item.get("formatted_address"),
            provider=self.provider_name,
            fallback_address=address,
            location=parse_lnglat_string(item.get("location"), self.provider_name),
            province=item.get("province"),
            city=item.get("city"),
            district=item.get("district"),
            township=item.get("township"),
            level=item.get("level"),
            adcode=item.get("adcode"),
        )

    async def reverse_geocode(self, coordinate: Coordinate) -> AddressInfo:
        payload = await self._get_json(
            "/geocode/regeo",
            {"location": _format_location(coordinate), "extensions": "base"},
        )
        regeocode = payload.get("regeocode") or {}
        if not clean_text(regeocode.get("formatted_address")):
            raise NotFoundError("no address at coordinate", provider=self.provider_name)
        component = regeocode.get("addressComponent") or {}
        return build_address_info(
            address=regeocode.get("formatted_address"),
            provider=self.provider_name,
            location=coordinate,
            province=component.get("province"),
            city=component.get("city"),
            district=component.get("district"),
            township=component.get("township"),
            neighborhood=_nested_name(component.get("neighborhood")),
            building=_nested_name(component.get("building")),
            adcode=component.get("adcode"),
        )

    async def search_poi(
        self,
        keyword: str,
        city: str | None,
        page: int,
        limit: int,
    ) -> POISearchResult:
        payload = await self._get_search_json(
            "/place/text",
            {
                "keywords": keyword,
                "city": city,
                "citylimit": "true" if city else None,
                "page": page,
                "offset": min(limit, MAX_PAGE_SIZE),
            },
        )
        pois = self._parse_pois(payload.get("pois") or [])
        return POISearchResult(pois=pois, total=to_int(payload.get("count"), default=len(pois)))

    async def search_address(self, text: str, city: str | None = None) -> list[AddressInfo]:
        payload = await self._get_search_json(
            "/assistant/inputtips",
            {"keywords": text, "city": city, "citylimit": "true" if city else None},
        )
        suggestions: list[AddressInfo] = []
        for tip in payload.get("tips") or []:
            name = clean_text(tip.get("name"))
            if name is None:
                continue
            district = clean_text(tip.get("district")) or ""
            suggestions.append(
                build_address_info(
                    address=f"{district}{clean_text(tip.get('address')) or name}",
                    provider=self.provider_name,
                    location=parse_lnglat_string(tip.get("location"), self.provider_name),
                    building=name,
                    adcode=tip.get("adcode"),
                )
            )
        return suggestions

    async def nearby_poi(
        self,
        coordinate: Coordinate,
        radius: int,
        poi_type: str | None = None,
    ) -> list[POIInfo]:
        payload = await self._get_search_json(
            "/place/around",
            {
                "location": _format_location(coordinate),
                "radius": radius,
                "keywords": poi_type,
                "sortrule": "distance",
                "offset": MAX_PAGE_SIZE,
                "page": 1,
            },
        )
        return self._parse_pois(payload.get("pois") or [])

    async def locate_by_ip(self, ip: str | None = None) -> AddressInfo:
        payload = await self._get_json("/ip", {"ip": ip})
        province = clean_text(payload.get("province"))
        city = clean_text(payload.get("city"))
        if province is None and city is None:
            raise NotFoundError("ip could not be located", provider=self.provider_name)
        return build_address_info(
            address=None,
            provider=self.provider_name,
            location=self._rectangle_center(payload.get("rectangle")),
            province=province,
            city=city,
            adcode=payload.get("adcode"),
        )

    def _check_status(self, payload: dict[str, Any]) -> None:
        if str(payload.get("status")) != "1":
            info = clean_text(payload.get("info")) or "unknown error"
            raise self._error(f"amap request failed: {info}")

    def _parse_pois(self, items: list[dict[str, Any]]) -> list[POIInfo]:
        pois: list[POIInfo] = []
        for item in items:
            location = parse_lnglat_string(item.get("location"), self.provider_name)
            if location is None:
                continue
            pois.append(
                build_poi_info(
                    poi_id=item.get("id"),
                    name=item.get("name"),
                    poi_type=item.get("type"),
                    address=item.get("address"),
                    location=location,
                    provider=self.provider_name,
                    tel=item.get("tel"),
                    distance=to_float(item.get("distance")),
                )
            )
        return pois

    def _rectangle_center(self, rectangle: Any) -> Coordinate | None:
        text = clean_text(rectangle)
        if text is None:
            return None
        corners = [parse_lnglat_string(corner, self.provider_name) for corner in text.split(";")]
        points = [corner for corner in corners if corner is not None]
        if not points:
            return None
        return centroid(points)


def _format_location(coordinate: Coordinate) -> str:
    return f"{coordinate.longitude:.6f},{coordinate.latitude:.6f}"


def _nested_name(value: Any) -> str | None:
    if isinstance(value, dict):
        return clean_text(value.get("name"))
    return None

