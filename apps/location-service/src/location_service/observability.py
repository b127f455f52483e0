from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Protocol

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


@dataclass(frozen=True)
class ProviderCallMetric:
    provider: str
    operation: str
    outcome: str
    duration_ms: float


class ProviderMetricCollector(Protocol):
    def observe(self, metric: ProviderCallMetric) -> None: ...


class InMemoryProviderMetricsCollector(ProviderMetricCollector):
    def __init__(self) -> None:
        self._metrics: list[ProviderCallMetric] = []

    def observe(self, metric: ProviderCallMetric) -> None:
        self._metrics.append(metric)

    def snapshot(self) -> list[dict]:
        return [asdict(item) for item in self._metrics]


class PrometheusProviderMetricsCollector(ProviderMetricCollector):
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()
        self._call_counter = Counter(
            "location_provider_calls_total",
            "Total geocoding provider calls",
            labelnames=("provider", "operation", "outcome"),
            registry=self._registry,
        )
        self._latency_histogram = Histogram(
            "location_provider_call_duration_ms",
            "Geocoding provider call latency in milliseconds",
            labelnames=("provider", "operation"),
            buckets=(25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
            registry=self._registry,
        )

    def observe(self, metric: ProviderCallMetric) -> None:
        self._call_counter.labels(metric.provider, metric.operation, metric.outcome).inc()
        self._latency_histogram.labels(metric.provider, metric.operation).observe(metric.duration_ms)

    def render(self) -> str:
        return generate_latest(self._registry).decode("utf-8")


class CompositeProviderMetricsCollector(ProviderMetricCollector):
    def __init__(self, collectors: list[ProviderMetricCollector]) -> None:
        self._collectors = collectors

    def observe(self, metric: ProviderCallMetric) -> None:
        for collector in self._collectors:
            collector.observe(metric)
