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

NO_RESULT_STATUS = 347
MAX_PAGE_SIZE = 20


class TencentAdapter(BaseProviderAdapter):
    provider_name = "tencent"
    display_name = "腾讯地图"

    async def geocode(self, address: str, city: str | None = None) -> AddressInfo:
        payload = await self._get_json("/geocoder/v1/", {"address": address, "region": city})
        result = payload.get("result") or {}
        location = parse_lnglat_mapping(result.get("location"), self.provider_name)
        if location is None:
            raise NotFoundError("no address matched", provider=self.provider_name)
        components = result.get("address_components") or {}
        ad_info = result.get("ad_info") or {}
        return build_address_info(
            address=None,
            provider=self.provider_name,
            fallback_address=_join_components(components) or address,
            location=location,
            province=components.get("province"),
            city=components.get("city"),
            district=components.get("district"),
            level=result.get("level"),
            adcode=ad_info.get("adcode"),
        )

    async def reverse_geocode(self, coordinate: Coordinate) -> AddressInfo:
        payload = await self._get_json("/geocoder/v1/", {"location": _format_location(coordinate)})
        result = payload.get("result") or {}
        if not clean_text(result.get("address")):
            raise NotFoundError("no address at coordinate", provider=self.provider_name)
        component = result.get("address_component") or {}
        reference = result.get("address_reference") or {}
        ad_info = result.get("ad_info") or {}
        return build_address_info(
            address=result.get("address"),
            provider=self.provider_name,
            location=coordinate,
            province=component.get("province"),
            city=component.get("city"),
            district=component.get("district"),
            township=_reference_title(reference.get("town")),
            neighborhood=component.get("street"),
            building=_reference_title(reference.get("landmark_l2")),
            adcode=ad_info.get("adcode"),
        )

    async def search_poi(
        self,
        keyword: str,
        city: str | None,
        page: int,
        limit: int,
    ) -> POISearchResult:
        payload = await self._get_search_json(
            "/place/v1/search",
            {
                "keyword": keyword,
                "boundary": f"region({city},0)" if city else "region(全国,0)",
                "page_size": min(limit, MAX_PAGE_SIZE),
                "page_index": page,
            },
        )
        pois = self._parse_pois(payload.get("data") or [])
        return POISearchResult(pois=pois, total=to_int(payload.get("count"), default=len(pois)))

    async def search_address(self, text: str, city: str | None = None) -> list[AddressInfo]:
        payload = await self._get_search_json(
            "/place/v1/suggestion",
            {"keyword": text, "region": city, "region_fix": 1 if city else None},
        )
        suggestions: list[AddressInfo] = []
        for item in payload.get("data") or []:
            title = clean_text(item.get("title"))
            if title is None:
                continue
            suggestions.append(
                build_address_info(
                    address=item.get("address"),
                    provider=self.provider_name,
                    fallback_address=title,
                    location=parse_lnglat_mapping(item.get("location"), self.provider_name),
                    province=item.get("province"),
                    city=item.get("city"),
                    district=item.get("district"),
                    building=title,
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
        boundary = f"nearby({coordinate.latitude:.6f},{coordinate.longitude:.6f},{radius},0)"
        payload = await self._get_search_json(
            "/place/v1/search",
            {
                "keyword": poi_type or DEFAULT_NEARBY_KEYWORD,
                "boundary": boundary,
                "orderby": "_distance",
                "page_size": MAX_PAGE_SIZE,
                "page_index": 1,
            },
        )
        return self._parse_pois(payload.get("data") or [])

    async def locate_by_ip(self, ip: str | None = None) -> AddressInfo:
        payload = await self._get_json("/location/v1/ip", {"ip": ip})
        result = payload.get("result") or {}
        ad_info = result.get("ad_info") or {}
        if not clean_text(ad_info.get("province")) and not clean_text(ad_info.get("city")):
            raise NotFoundError("ip could not be located", provider=self.provider_name)
        return build_address_info(
            address=None,
            provider=self.provider_name,
            location=parse_lnglat_mapping(result.get("location"), self.provider_name),
            province=ad_info.get("province"),
            city=ad_info.get("city"),
            district=ad_info.get("district"),
            adcode=ad_info.get("adcode"),
        )

    def _check_status(self, payload: dict[str, Any]) -> None:
        status = to_int(payload.get("status"), default=-1)
        if status == 0:
            return
        message = clean_text(payload.get("message")) or "unknown error"
        if status == NO_RESULT_STATUS:
            raise NotFoundError(message, provider=self.provider_name)
        raise self._error(f"tencent request failed ({status}): {message}")

    def _parse_pois(self, items: list[dict[str, Any]]) -> list[POIInfo]:
        pois: list[POIInfo] = []
        for item in items:
            location = parse_lnglat_mapping(item.get("location"), self.provider_name)
            if location is None:
                continue
            pois.append(
                build_poi_info(
                    poi_id=item.get("id"),
                    name=item.get("title"),
                    poi_type=item.get("category"),
                    address=item.get("address"),
                    location=location,
                    provider=self.provider_name,
                    tel=item.get("tel"),
                    distance=to_float(item.get("_distance")),
                )
            )
        return pois


def _format_location(coordinate: Coordinate) -> str:
    return f"{coordinate.latitude:.6f},{coordinate.longitude:.6f}"


def _reference_title(value: Any) -> str | None:
    if isinstance(value, dict):
        return clean_text(value.get("title"))
    return None


def _join_components(components: dict[str, Any]) -> str | None:
    keys = ("province", "city", "district", "street", "street_number")
    parts: list[str] = []
    for key in keys:
        text = clean_text(components.get(key))
        if not text:
            continue
        # street_number repeats the street, municipalities repeat the province
        if parts and text.startswith(parts[-1]):
            parts[-1] = text
        else:
            parts.append(text)
    return "".join(parts) or None
