"""Common runtime devkit for service infrastructure concerns."""

from devkit.config import ServiceSettings, load_settings
from devkit.observability import configure_logging, configure_otel

__all__ = [
    "ServiceSettings",
    "configure_logging",
    "configure_otel",
    "load_settings",
]
