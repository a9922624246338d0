"""Prometheus metrics for the forwarder."""

from __future__ import annotations

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge


class TelemetryMetrics:
    """Current reading gauge and published-messages counter on their own registry."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.temperature = Gauge(
            "sensor_temperature_celsius",
            "Current temperature in Celsius reported by the DS18B20 sensor",
            registry=self.registry,
        )
        self.messages_published = Counter(
            "sensor_messages_published",
            "Total number of messages published to RabbitMQ",
            registry=self.registry,
        )

    def observe_reading(self, value: float) -> None:
        self.temperature.set(value)
        self.messages_published.inc()
