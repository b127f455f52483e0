from __future__ import annotations

import logging
from collections.abc import Sequence

from location_service.config import LocationSettings
from location_service.providers.base import BaseProviderAdapter, ClientFactory
from location_service.providers.factory import build_provider_adapter
from location_service.schemas import ProviderDescriptor, ServiceStatus

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Adapters in priority order.

    The active provider is recomputed on every query instead of being stored, so
    an adapter that gains credentials at runtime is picked up without a restart.
    """

    def __init__(self, adapters: Sequence[BaseProviderAdapter]) -> None:
        names = [adapter.provider_name for adapter in adapters]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate provider names: {names}")
        self._adapters = tuple(adapters)

    @property
    def adapters(self) -> tuple[BaseProviderAdapter, ...]:
        return self._adapters

    def select_provider(self) -> BaseProviderAdapter | None:
        for adapter in self._adapters:
            if adapter.configured:
                return adapter
        return None

    def get_current_provider(self) -> str | None:
        adapter = self.select_provider()
        return adapter.provider_name if adapter else None

    def is_available(self) -> bool:
        return self.select_provider() is not None

    def get_status(self) -> ServiceStatus:
        return ServiceStatus(
            available=self.is_available(),
            provider=self.get_current_provider(),
            providers=[
                ProviderDescriptor(
                    name=adapter.provider_name,
                    display_name=adapter.display_name,
                    configured=adapter.configured,
                )
                for adapter in self._adapters
            ],
        )


def build_registry(
    settings: LocationSettings,
    client_factory: ClientFactory | None = None,
) -> ProviderRegistry:
    adapters = [
        build_provider_adapter(name, settings, client_factory=client_factory)
        for name in dict.fromkeys(settings.provider_order())
    ]
    registry = ProviderRegistry(adapters)
    current = registry.get_current_provider()
    if current:
        logger.info(
            "location_provider_selected",
            extra={"provider": current, "order": [adapter.provider_name for adapter in adapters]},
        )
    else:
        logger.warning(
            "location_provider_missing",
            extra={"order": [adapter.provider_name for adapter in adapters]},
        )
    return registry
