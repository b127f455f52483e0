from __future__ import annotations

from typing import Any

from geo_engine.models import Coordinate

from location_service.errors import NotFoundError
from location_service.normalize import (
    build_address_info,
    build_poi_info,
    clean_text,
    parse_lnglat_mapping,
    to_float,
    to_int,
)
from location_service.providers.base import DEFAULT_NEARBY_KEYWORD, BaseProviderAdapter
from location_service.schemas import AddressInfo, POIInfo, POISearchResult

NATIONWIDE_REGION = "全国"
NO_RESULT_MARKER = "无相关结果"
MAX_PAGE_SIZE = 20


class BaiduAdapter(BaseProviderAdapter):
    provider_name = "baidu"
    display_name = "百度地图"
    key_param = "ak"

    async def geocode(self, address: str, city: str | None = None) -> AddressInfo:
        payload = await self._get_json(
            "/geocoding/v3/",
            {"address": address, "city": city, "output": "json"},
        )
        result = payload.get("result") or {}
        location = parse_lnglat_mapping(result.get("location"), self.provider_name)
        if location is None:
            raise NotFoundError("no address matched", provider=self.provider_name)
        # Baidu echoes no formatted address for forward lookups
        return build_address_info(
            address=None,
            provider=self.provider_name,
            fallback_address=address,
            location=location,
            level=result.get("level"),
        )

    async def reverse_geocode(self, coordinate: Coordinate) -> AddressInfo:
        payload = await self._get_json(
            "/reverse_geocoding/v3/",
            {
                "location": _format_location(coordinate),
                "coordtype": "bd09ll",
                "output": "json",
            },
        )
        result = payload.get("result") or {}
        if not clean_text(result.get("formatted_address")):
            raise NotFoundError("no address at coordinate", provider=self.provider_name)
        component = result.get("addressComponent") or {}
        return build_address_info(
            address=result.get("formatted_address"),
            provider=self.provider_name,
            location=coordinate,
            province=component.get("province"),
            city=component.get("city"),
            district=component.get("district"),
            township=component.get("town"),
            neighborhood=component.get("street"),
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
            "/place/v2/search",
            {
                "query": keyword,
                "region": city or NATIONWIDE_REGION,
                "city_limit": "true" if city else None,
                "scope": 2,
                "output": "json",
                "page_size": min(limit, MAX_PAGE_SIZE),
                # Baidu pages are zero-based
                "page_num": page - 1,
            },
        )
        pois = self._parse_pois(payload.get("results") or [])
        return POISearchResult(pois=pois, total=to_int(payload.get("total"), default=len(pois)))

    async def search_address(self, text: str, city: str | None = None) -> list[AddressInfo]:
        payload = await self._get_search_json(
            "/place/v2/suggestion",
            {
                "query": text,
                "region": city or NATIONWIDE_REGION,
                "city_limit": "true" if city else None,
                "output": "json",
            },
        )
        suggestions: list[AddressInfo] = []
        for item in payload.get("result") or []:
            name = clean_text(item.get("name"))
            if name is None:
                continue
            suggestions.append(
                build_address_info(
                    address=item.get("address"),
                    provider=self.provider_name,
                    fallback_address=_suggestion_label(item, name),
                    location=parse_lnglat_mapping(item.get("location"), self.provider_name),
                    province=item.get("province"),
                    city=item.get("city"),
                    district=item.get("district"),
                    building=name,
                    adcode=item.get("adcode"),
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
            "/place/v2/search",
            {
                "query": poi_type or DEFAULT_NEARBY_KEYWORD,
                "location": _format_location(coordinate),
                "radius": radius,
                "radius_limit": "true",
                "scope": 2,
                "output": "json",
                "page_size": MAX_PAGE_SIZE,
                "page_num": 0,
            },
        )
        return self._parse_pois(payload.get("results") or [])

    async def locate_by_ip(self, ip: str | None = None) -> AddressInfo:
        payload = await self._get_json("/location/ip", {"ip": ip, "coor": "bd09ll"})
        content = payload.get("content") or {}
        detail = content.get("address_detail") or {}
        if not clean_text(content.get("address")) and not clean_text(detail.get("city")):
            raise NotFoundError("ip could not be located", provider=self.provider_name)
        return build_address_info(
            address=content.get("address"),
            provider=self.provider_name,
            location=parse_lnglat_mapping(
                content.get("point"),
                self.provider_name,
                lng_key="x",
                lat_key="y",
            ),
            province=detail.get("province"),
            city=detail.get("city"),
            district=detail.get("district"),
            adcode=detail.get("adcode"),
        )

    def _check_status(self, payload: dict[str, Any]) -> None:
        status = to_int(payload.get("status"), default=-1)
        if status == 0:
            return
        message = clean_text(payload.get("message")) or clean_text(payload.get("msg")) or "unknown error"
        if NO_RESULT_MARKER in message:
            raise NotFoundError(message, provider=self.provider_name)
        raise self._error(f"baidu request failed ({status}): {message}")

    def _parse_pois(self, items: list[dict[str, Any]]) -> list[POIInfo]:
        pois: list[POIInfo] = []
        for item in items:
            location = parse_lnglat_mapping(item.get("location"), self.provider_name)
            if location is None:
                continue
            detail = item.get("detail_info") or {}
            pois.append(
                build_poi_info(
                    poi_id=item.get("uid"),
                    name=item.get("name"),
                    poi_type=detail.get("tag"),
                    address=item.get("address"),
                    location=location,
                    provider=self.provider_name,
                    tel=item.get("telephone"),
                    distance=to_float(detail.get("distance")),
                )
            )
        return pois


def _format_location(coordinate: Coordinate) -> str:
    # Baidu expects latitude first
    return f"{coordinate.latitude:.6f},{coordinate.longitude:.6f}"


def _suggestion_label(item: dict[str, Any], name: str) -> str:
    city = clean_text(item.get("city")) or ""
    district = clean_text(item.get("district")) or ""
    return f"{city}{district}{name}"
