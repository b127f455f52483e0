from __future__ import annotations

import ipaddress
import logging
from collections.abc import Awaitable, Callable, Sequence
from time import perf_counter
from typing import Any, TypeVar

from geo_engine.centroid import centroid
from geo_engine.distance import haversine_distance_meters
from geo_engine.models import Coordinate
from geo_engine.polygon import point_in_polygon
from geo_engine.validation import is_valid_coordinate
from opentelemetry import trace

from location_service.config import LocationSettings, load_location_settings
from location_service.errors import (
    InvalidInputError,
    LocationError,
    ProviderError,
    ServiceUnavailableError,
)
from location_service.observability import ProviderCallMetric, ProviderMetricCollector
from location_service.providers.base import BaseProviderAdapter, ClientFactory
from location_service.registry import ProviderRegistry, build_registry
from location_service.schemas import AddressInfo, POIInfo, POISearchResult, ServiceStatus

T = TypeVar("T")
logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

MAX_ADDRESS_LENGTH = 200
MAX_KEYWORD_LENGTH = 50
MAX_CITY_LENGTH = 50
MAX_SUGGESTION_INPUT_LENGTH = 100
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 50
MIN_RADIUS_METERS = 100
MAX_RADIUS_METERS = 10_000
DEFAULT_RADIUS_METERS = 1000
LOGGED_TEXT_LENGTH = 50


class LocationService:
    """Facade over the active geocoding provider and the geometry engine.

    Provider-backed operations make exactly one attempt against the provider the
    registry selects at call time; failures are surfaced as-is, never retried on
    another provider. Geometry operations never touch a provider and keep working
    when none is configured.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        metrics: ProviderMetricCollector | None = None,
    ) -> None:
        self._registry = registry
        self._metrics = metrics

    def get_current_provider(self) -> str | None:
        return self._registry.get_current_provider()

    def is_available(self) -> bool:
        return self._registry.is_available()

    def get_status(self) -> ServiceStatus:
        return self._registry.get_status()

    async def geocode(self, address: str, city: str | None = None) -> AddressInfo:
        adapter = self._require_provider()
        text = _require_text("address", address, MAX_ADDRESS_LENGTH)
        city_name = _optional_text("city", city, MAX_CITY_LENGTH)
        result = await self._call(
            adapter,
            "geocode",
            lambda: adapter.geocode(text, city_name),
            address=text[:LOGGED_TEXT_LENGTH],
        )
        return _checked_address(result, adapter)

    async def reverse_geocode(self, longitude: float, latitude: float) -> AddressInfo:
        adapter = self._require_provider()
        coordinate = _require_coordinate(longitude, latitude)
        result = await self._call(
            adapter,
            "reverse_geocode",
            lambda: adapter.reverse_geocode(coordinate),
            longitude=longitude,
            latitude=latitude,
        )
        return _checked_address(result, adapter)

    async def get_current_location(self, ip: str | None = None) -> AddressInfo:
        adapter = self._require_provider()
        ip_address = _optional_ip(ip)
        result = await self._call(
            adapter,
            "locate_by_ip",
            lambda: adapter.locate_by_ip(ip_address),
            ip=ip_address or "auto",
        )
        return _checked_address(result, adapter)

    async def search_poi(
        self,
        keyword: str,
        city: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> POISearchResult:
        adapter = self._require_provider()
        text = _require_text("keyword", keyword, MAX_KEYWORD_LENGTH)
        city_name = _optional_text("city", city, MAX_CITY_LENGTH)
        _require_int_range("page", page, minimum=1)
        _require_int_range("limit", limit, minimum=MIN_PAGE_SIZE, maximum=MAX_PAGE_SIZE)
        result = await self._call(
            adapter,
            "search_poi",
            lambda: adapter.search_poi(text, city_name, page, limit),
            keyword=text,
            city=city_name,
        )
        # distance only carries meaning for nearby queries
        pois = [
            _checked_poi(poi, adapter).model_copy(update={"distance": None})
            for poi in result.pois
        ]
        return POISearchResult(pois=pois, total=result.total)

    async def search_address(self, text: str, city: str | None = None) -> list[AddressInfo]:
        adapter = self._require_provider()
        query = _require_text("input", text, MAX_SUGGESTION_INPUT_LENGTH)
        city_name = _optional_text("city", city, MAX_CITY_LENGTH)
        results = await self._call(
            adapter,
            "search_address",
            lambda: adapter.search_address(query, city_name),
            input=query,
            city=city_name,
        )
        return [_checked_address(item, adapter) for item in results]

    async def get_nearby_poi(
        self,
        longitude: float,
        latitude: float,
        radius: int = DEFAULT_RADIUS_METERS,
        poi_type: str | None = None,
    ) -> list[POIInfo]:
        """POIs around a point, nearest first.

        ``distance`` is always recomputed here with the haversine formula, whatever
        the provider reported, so every provider yields the same distance semantics.
        """
        adapter = self._require_provider()
        origin = _require_coordinate(longitude, latitude)
        _require_int_range("radius", radius, minimum=MIN_RADIUS_METERS, maximum=MAX_RADIUS_METERS)
        category = _optional_text("type", poi_type, MAX_KEYWORD_LENGTH)
        pois = await self._call(
            adapter,
            "nearby_poi",
            lambda: adapter.nearby_poi(origin, radius, category),
            longitude=longitude,
            latitude=latitude,
            radius=radius,
        )
        measured = [
            _checked_poi(poi, adapter).model_copy(
                update={"distance": haversine_distance_meters(origin, poi.location)},
            )
            for poi in pois
        ]
        return sorted(measured, key=lambda poi: poi.distance)

    def calculate_distance(self, start: Coordinate, end: Coordinate) -> float:
        _require_valid_point("start", start)
        _require_valid_point("end", end)
        return haversine_distance_meters(start, end)

    def calculate_center(self, points: Sequence[Coordinate]) -> Coordinate:
        if not points:
            raise InvalidInputError("points must not be empty")
        for index, point in enumerate(points):
            _require_valid_point(f"points[{index}]", point)
        return centroid(points)

    def is_point_in_polygon(self, point: Coordinate, polygon: Sequence[Coordinate]) -> bool:
        _require_valid_point("point", point)
        if len(polygon) < 3:
            raise InvalidInputError("polygon must have at least 3 vertices")
        for index, vertex in enumerate(polygon):
            _require_valid_point(f"polygon[{index}]", vertex)
        return point_in_polygon(point, polygon)

    def validate_coordinates(self, longitude: float, latitude: float) -> bool:
        return is_valid_coordinate(longitude, latitude)

    def _require_provider(self) -> BaseProviderAdapter:
        adapter = self._registry.select_provider()
        if adapter is None:
            raise ServiceUnavailableError("no geocoding provider is configured")
        return adapter

    async def _call(
        self,
        adapter: BaseProviderAdapter,
        operation: str,
        action: Callable[[], Awaitable[T]],
        **context: Any,
    ) -> T:
        started = perf_counter()
        with tracer.start_as_current_span(f"location.{operation}") as span:
            span.set_attribute("location.provider", adapter.provider_name)
            try:
                result = await action()
            except LocationError as exc:
                self._record_failure(adapter, operation, exc, started, context)
                raise
            except Exception as exc:
                error = ProviderError(f"unexpected provider payload: {exc}", provider=adapter.provider_name)
                self._record_failure(adapter, operation, error, started, context)
                raise error from exc
        self._observe(adapter, operation, "success", started)
        logger.info(
            f"location_{operation}_succeeded",
            extra={"provider": adapter.provider_name, "operation": operation, **context},
        )
        return result

    def _record_failure(
        self,
        adapter: BaseProviderAdapter,
        operation: str,
        error: LocationError,
        started: float,
        context: dict[str, Any],
    ) -> None:
        self._observe(adapter, operation, error.code, started)
        logger.warning(
            "location_provider_call_failed",
            extra={
                "provider": adapter.provider_name,
                "operation": operation,
                "error_code": error.code,
                "error": error.message,
                **context,
            },
        )

    def _observe(self, adapter: BaseProviderAdapter, operation: str, outcome: str, started: float) -> None:
        if self._metrics is None:
            return
        self._metrics.observe(
            ProviderCallMetric(
                provider=adapter.provider_name,
                operation=operation,
                outcome=outcome,
                duration_ms=round((perf_counter() - started) * 1000, 3),
            )
        )


def create_location_service(
    settings: LocationSettings | None = None,
    client_factory: ClientFactory | None = None,
    metrics: ProviderMetricCollector | None = None,
) -> LocationService:
    resolved = settings or load_location_settings()
    registry = build_registry(resolved, client_factory=client_factory)
    return LocationService(registry, metrics=metrics)


def _require_text(field: str, value: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string")
    text = value.strip()
    if not text:
        raise InvalidInputError(f"{field} must not be empty")
    if len(text) > max_length:
        raise InvalidInputError(f"{field} must be at most {max_length} characters")
    return text


def _optional_text(field: str, value: str | None, max_length: int) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string")
    text = value.strip()
    if not text:
        return None
    if len(text) > max_length:
        raise InvalidInputError(f"{field} must be at most {max_length} characters")
    return text


def _optional_ip(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError as exc:
        raise InvalidInputError(f"invalid ip address '{value}'") from exc


def _require_int_range(field: str, value: int, minimum: int, maximum: int | None = None) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{field} must be an integer")
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
        raise InvalidInputError(f"{field} must be {bounds}")


def _require_coordinate(longitude: float, latitude: float) -> Coordinate:
    if not is_valid_coordinate(longitude, latitude):
        raise InvalidInputError(f"invalid coordinate ({longitude}, {latitude})")
    return Coordinate(longitude=float(longitude), latitude=float(latitude))


def _require_valid_point(field: str, point: Coordinate) -> None:
    if not isinstance(point, Coordinate) or not is_valid_coordinate(point.longitude, point.latitude):
        raise InvalidInputError(f"{field} is not a valid coordinate")


def _checked_address(result: AddressInfo, adapter: BaseProviderAdapter) -> AddressInfo:
    location = result.location
    if location is not None and not is_valid_coordinate(location.longitude, location.latitude):
        raise ProviderError("address location out of range", provider=adapter.provider_name)
    if not result.address.strip():
        raise ProviderError("address text is empty", provider=adapter.provider_name)
    return result


def _checked_poi(poi: POIInfo, adapter: BaseProviderAdapter) -> POIInfo:
    if not is_valid_coordinate(poi.location.longitude, poi.location.latitude):
        raise ProviderError(f"poi '{poi.id}' location out of range", provider=adapter.provider_name)
    return poi
