"""Mapping helpers shared by every provider adapter.

Providers disagree on how they spell "unknown": Amap sends ``[]`` for missing
strings, Baidu sends ``""`` and Tencent omits the key. Everything funnels through
:func:`clean_text` so canonical entities only ever carry ``None`` for absent data.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from geo_engine.models import Coordinate
from geo_engine.validation import is_valid_coordinate

from location_service.errors import ProviderError
from location_service.schemas import AddressInfo, POIInfo


def clean_text(value: Any) -> str | None:
    if value is None or isinstance(value, (list, dict, tuple)):
        return None
    text = str(value).strip()
    return text or None


def parse_lnglat_string(value: Any, provider: str) -> Coordinate | None:
    """Parse the ``"lng,lat"`` form used by Amap."""
    text = clean_text(value)
    if text is None:
        return None
    parts = text.split(",")
    if len(parts) != 2:
        raise ProviderError(f"malformed location '{text}'", provider=provider)
    try:
        longitude, latitude = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ProviderError(f"malformed location '{text}'", provider=provider) from exc
    return build_coordinate(longitude, latitude, provider)


def parse_lnglat_mapping(
    value: Any,
    provider: str,
    lng_key: str = "lng",
    lat_key: str = "lat",
) -> Coordinate | None:
    """Parse the ``{"lng": .., "lat": ..}`` form used by Baidu and Tencent."""
    if not isinstance(value, Mapping) or not value:
        return None
    raw_lng = value.get(lng_key)
    raw_lat = value.get(lat_key)
    if raw_lng is None or raw_lat is None:
        return None
    try:
        longitude, latitude = float(raw_lng), float(raw_lat)
    except (TypeError, ValueError) as exc:
        raise ProviderError(f"malformed location {dict(value)!r}", provider=provider) from exc
    return build_coordinate(longitude, latitude, provider)


def build_coordinate(longitude: float, latitude: float, provider: str) -> Coordinate:
    if not is_valid_coordinate(longitude, latitude):
        raise ProviderError(
            f"coordinate out of range ({longitude}, {latitude})",
            provider=provider,
        )
    return Coordinate(longitude=longitude, latitude=latitude)


def build_address_info(
    *,
    address: Any,
    provider: str,
    fallback_address: str | None = None,
    location: Coordinate | None = None,
    **fields: Any,
) -> AddressInfo:
    """Build a canonical address, falling back to the joined region names.

    A result with no usable address text at all is a malformed payload.
    """
    cleaned = {key: clean_text(value) for key, value in fields.items()}
    text = clean_text(address) or clean_text(fallback_address)
    if text is None:
        regions = [cleaned.get(key) for key in ("province", "city", "district")]
        text = _join_regions(regions)
    if text is None:
        raise ProviderError("response carries no address", provider=provider)
    return AddressInfo(address=text, location=location, **cleaned)


def build_poi_info(
    *,
    poi_id: Any,
    name: Any,
    poi_type: Any,
    address: Any,
    location: Coordinate,
    provider: str,
    tel: Any = None,
    distance: float | None = None,
) -> POIInfo:
    identifier = clean_text(poi_id)
    title = clean_text(name)
    if identifier is None or title is None:
        raise ProviderError("poi without id or name", provider=provider)
    return POIInfo(
        id=identifier,
        name=title,
        type=clean_text(poi_type) or "unknown",
        address=clean_text(address) or "",
        location=location,
        distance=distance,
        tel=clean_text(tel),
    )


def _join_regions(regions: list[str | None]) -> str | None:
    parts: list[str] = []
    for region in regions:
        # municipalities repeat the province name as the city
        if region and (not parts or parts[-1] != region):
            parts.append(region)
    return "".join(parts) or None


def to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
