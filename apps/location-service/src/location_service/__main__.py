from __future__ import annotations

import asyncio
import sys

from devkit.observability import configure_logging, configure_otel

from location_service.config import load_location_settings
from location_service.errors import LocationError
from location_service.service import LocationService, create_location_service


async def _resolve(service: LocationService, address: str) -> str:
    resolved = await service.geocode(address)
    return resolved.model_dump_json(indent=2)


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    settings = load_location_settings()
    configure_logging(settings.LOG_LEVEL)
    configure_otel(settings.SERVICE_NAME)
    service = create_location_service(settings)
    if not args:
        sys.stdout.write(service.get_status().model_dump_json(indent=2) + "\n")
        return 0
    try:
        output = asyncio.run(_resolve(service, " ".join(args)))
    except LocationError as exc:
        sys.stderr.write(f"{exc.code}: {exc}\n")
        return 1
    sys.stdout.write(output + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
