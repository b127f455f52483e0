from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class LocationError(Exception):
    """Base failure surfaced by the location core.

    ``code`` and ``status_code`` let route handlers map a failure to an HTTP
    response without inspecting the concrete class.
    """

    message: str
    provider: str | None = None

    code: ClassVar[str] = "LOCATION_ERROR"
    status_code: ClassVar[int] = 500

    def __str__(self) -> str:
        if self.provider:
            return f"[{self.provider}] {self.message}"
        return self.message


class InvalidInputError(LocationError):
    """Malformed coordinate, address or parameter. Never retried."""

    code = "INVALID_INPUT"
    status_code = 422


class NotFoundError(LocationError):
    """The provider answered but found nothing to resolve."""

    code = "NOT_FOUND"
    status_code = 404


class ProviderUnavailableError(LocationError):
    """Network failure or timeout talking to a configured provider."""

    code = "PROVIDER_UNAVAILABLE"
    status_code = 504


class ProviderError(LocationError):
    """Provider reachable but returned an error or a malformed payload."""

    code = "PROVIDER_ERROR"
    status_code = 502


class ServiceUnavailableError(LocationError):
    """No provider is configured at all."""

    code = "SERVICE_UNAVAILABLE"
    status_code = 503
