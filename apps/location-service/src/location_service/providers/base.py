from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import httpx
from geo_engine.models import Coordinate

from location_service.errors import NotFoundError, ProviderError, ProviderUnavailableError
from location_service.schemas import AddressInfo, POIInfo, POISearchResult

ClientFactory = Callable[[], httpx.AsyncClient]

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_NEARBY_KEYWORD = "生活服务"


class BaseProviderAdapter(ABC):
    """One external geocoding service.

    Adapters speak the provider's wire format and hand back canonical entities.
    Zero-result searches return empty results; only the single-answer lookups
    raise ``NotFoundError``.
    """

    provider_name: str
    display_name: str
    key_param = "key"

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @abstractmethod
    async def geocode(self, address: str, city: str | None = None) -> AddressInfo:
        raise NotImplementedError

    @abstractmethod
    async def reverse_geocode(self, coordinate: Coordinate) -> AddressInfo:
        raise NotImplementedError

    @abstractmethod
    async def search_poi(
        self,
        keyword: str,
        city: str | None,
        page: int,
        limit: int,
    ) -> POISearchResult:
        raise NotImplementedError

    @abstractmethod
    async def search_address(self, text: str, city: str | None = None) -> list[AddressInfo]:
        raise NotImplementedError

    @abstractmethod
    async def nearby_poi(
        self,
        coordinate: Coordinate,
        radius: int,
        poi_type: str | None = None,
    ) -> list[POIInfo]:
        raise NotImplementedError

    @abstractmethod
    async def locate_by_ip(self, ip: str | None = None) -> AddressInfo:
        raise NotImplementedError

    @abstractmethod
    def _check_status(self, payload: dict[str, Any]) -> None:
        """Raise when the provider reports a failure inside a 200 response."""

    async def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.configured:
            raise ProviderError("api key is not configured", provider=self.provider_name)
        query = {key: value for key, value in params.items() if value is not None}
        query[self.key_param] = self._api_key

        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.get(f"{self._base_url}{path}", params=query)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ProviderUnavailableError("provider timeout", provider=self.provider_name) from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"provider returned HTTP {exc.response.status_code}",
                provider=self.provider_name,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError("provider request failed", provider=self.provider_name) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError("provider returned invalid JSON", provider=self.provider_name) from exc
        if not isinstance(payload, dict):
            raise ProviderError("provider returned unexpected payload", provider=self.provider_name)
        self._check_status(payload)
        return payload

    async def _get_search_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        """Fetch a search endpoint; a provider-side "no result" becomes an empty payload."""
        try:
            return await self._get_json(path, params)
        except NotFoundError:
            return {}

    def _error(self, message: str) -> ProviderError:
        return ProviderError(message, provider=self.provider_name)
