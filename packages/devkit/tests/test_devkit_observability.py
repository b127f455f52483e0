from __future__ import annotations

import logging

import pytest

from devkit import observability


def test_configure_logging_sets_root_level(monkeypatch) -> None:
    monkeypatch.setattr(observability, "_logging_configured", False)
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    observability.configure_logging("debug")
    observability.configure_logging("error")

    assert len(calls) == 1
    assert calls[0]["level"] == logging.DEBUG


def test_configure_logging_rejects_unknown_level(monkeypatch) -> None:
    monkeypatch.setattr(observability, "_logging_configured", False)
    with pytest.raises(ValueError):
        observability.configure_logging("chatty")


def test_configure_otel_installs_provider_once(monkeypatch) -> None:
    monkeypatch.setattr(observability, "_configured", False)
    providers: list[object] = []
    monkeypatch.setattr(observability.trace, "set_tracer_provider", providers.append)

    observability.configure_otel("location-service")
    observability.configure_otel("location-service")

    assert len(providers) == 1
