"""Tests for FanOutCoordinator startup, dispatch isolation and shutdown."""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from telemetry_forwarder.core.exceptions import (
    BrokerConnectionError,
    NoDestinationsError,
    RetriesExhausted,
    SensorReadError,
)
from telemetry_forwarder.models import EndpointConfig
from telemetry_forwarder.monitoring import HealthState, TelemetryMetrics
from telemetry_forwarder.orchestration import CoordinatorState, FanOutCoordinator
from telemetry_forwarder.sensors.base_sensor import MeasurementSource
from telemetry_forwarder.triggers import IntervalTrigger

from conftest import FakeSession, closed


# =============================================================================
# FIXTURES
# =============================================================================

class StaticSource(MeasurementSource):
    def __init__(self, *values):
        self.values = list(values)
        self.reads = 0

    def read(self) -> float:
        self.reads += 1
        value = self.values.pop(0) if len(self.values) > 1 else self.values[0]
        if isinstance(value, Exception):
            raise value
        return value


LOCAL = EndpointConfig(name="local", uri="amqp://localhost/")
REMOTE = EndpointConfig(name="remote", uri="amqps://remote.example/")


def session_factory(**per_name):
    """Build FakeSessions, keyed by endpoint name, with per-destination behaviour."""
    created = {}

    def factory(config):
        session = FakeSession(config, **per_name.get(config.name, {}))
        created[config.name] = session
        return session

    factory.created = created
    return factory


@pytest.fixture
def health() -> HealthState:
    return HealthState()


@pytest.fixture
def metrics() -> TelemetryMetrics:
    return TelemetryMetrics()


def make_coordinator(factory, health, endpoints=(LOCAL, REMOTE), source=None,
                     metrics=None, now=None, trigger=None):
    return FanOutCoordinator(
        endpoints, source or StaticSource(21.5), "node1", health,
        metrics=metrics, trigger=trigger, sleep=AsyncMock(),
        session_factory=factory, now=now,
    )


# =============================================================================
# STARTUP
# =============================================================================

class TestStartup:

    @pytest.mark.asyncio
    async def test_registers_in_order(self, health):
        coordinator = make_coordinator(session_factory(), health)

        await coordinator.startup()

        assert coordinator.destinations == ["local", "remote"]
        assert coordinator.state_machine.current_state == CoordinatorState.OPERATIONAL

    @pytest.mark.asyncio
    async def test_empty_uri_is_not_registered(self, health):
        factory = session_factory()
        coordinator = make_coordinator(
            factory, health, endpoints=(LOCAL, EndpointConfig(name="remote", uri=""))
        )

        await coordinator.startup()

        assert coordinator.destinations == ["local"]
        assert "remote" not in factory.created

    @pytest.mark.asyncio
    async def test_failed_destination_is_skipped(self, health):
        factory = session_factory(local={"connect_effects": [BrokerConnectionError("refused")]})
        coordinator = make_coordinator(factory, health)

        await coordinator.startup()

        assert coordinator.destinations == ["remote"]

    @pytest.mark.asyncio
    async def test_zero_destinations_is_fatal(self, health):
        factory = session_factory(
            local={"connect_effects": [BrokerConnectionError("refused")]},
            remote={"connect_effects": [BrokerConnectionError("refused")]},
        )
        coordinator = make_coordinator(factory, health)

        with pytest.raises(NoDestinationsError):
            await coordinator.startup()

        assert coordinator.state_machine.current_state == CoordinatorState.FAILED

    @pytest.mark.asyncio
    async def test_no_configured_uri_is_fatal(self, health):
        coordinator = make_coordinator(
            session_factory(), health,
            endpoints=(EndpointConfig(name="local", uri=""), EndpointConfig(name="remote", uri="")),
        )

        with pytest.raises(NoDestinationsError):
            await coordinator.startup()


# =============================================================================
# DISPATCH
# =============================================================================

class TestDispatch:

    @pytest.mark.asyncio
    async def test_tick_delivers_identical_envelope_everywhere(self, health, metrics,
                                                               fixed_now, expected_body):
        factory = session_factory()
        coordinator = make_coordinator(factory, health, metrics=metrics, now=lambda: fixed_now)
        await coordinator.startup()

        outcome = await coordinator.tick()

        assert outcome == {"local": None, "remote": None}
        assert factory.created["local"].sent == [expected_body]
        assert factory.created["remote"].sent == [expected_body]

    @pytest.mark.asyncio
    async def test_healthy_destination_unaffected_by_failing_sibling(self, health):
        factory = session_factory()
        coordinator = make_coordinator(factory, health)
        await coordinator.startup()
        # local connected at startup, then the broker goes away for good
        local, remote = factory.created["local"], factory.created["remote"]
        local.always_fail_transmit = closed()
        local.always_fail_connect = BrokerConnectionError("down")

        for _ in range(3):
            outcome = await coordinator.tick()
            assert outcome["remote"] is None
            assert isinstance(outcome["local"], RetriesExhausted)

        assert len(remote.sent) == 3
        assert local.sent == []

    @pytest.mark.asyncio
    async def test_unexpected_fault_is_contained(self, health):
        factory = session_factory(local={"always_fail_transmit": RuntimeError("boom")})
        coordinator = make_coordinator(factory, health)
        await coordinator.startup()

        outcome = await coordinator.tick()

        assert isinstance(outcome["local"], RuntimeError)
        assert outcome["remote"] is None

    @pytest.mark.asyncio
    async def test_sensor_error_skips_tick(self, health, metrics):
        factory = session_factory()
        coordinator = make_coordinator(
            factory, health, metrics=metrics, source=StaticSource(SensorReadError("crc"))
        )
        await coordinator.startup()

        assert await coordinator.tick() is None
        assert factory.created["local"].transmit_calls == 0
        assert metrics.registry.get_sample_value("sensor_messages_published_total") == 0.0

    @pytest.mark.asyncio
    async def test_tick_updates_metrics(self, health, metrics):
        coordinator = make_coordinator(session_factory(), health, metrics=metrics)
        await coordinator.startup()

        await coordinator.tick()

        assert metrics.registry.get_sample_value("sensor_temperature_celsius") == 21.5
        assert metrics.registry.get_sample_value("sensor_messages_published_total") == 1.0


# =============================================================================
# RUN / SHUTDOWN
# =============================================================================

class TestLifecycle:

    @pytest.mark.asyncio
    async def test_run_ticks_until_stopped(self, health):
        stop = asyncio.Event()

        class StoppingSource(MeasurementSource):
            reads = 0

            def read(self):
                StoppingSource.reads += 1
                if StoppingSource.reads == 2:
                    stop.set()
                return 20.0

        factory = session_factory()
        coordinator = make_coordinator(factory, health, source=StoppingSource(),
                                       trigger=IntervalTrigger(0.01))
        await coordinator.startup()

        await asyncio.wait_for(coordinator.run(stop), timeout=5)

        assert StoppingSource.reads == 2
        assert len(factory.created["local"].sent) == 2

    @pytest.mark.asyncio
    async def test_run_returns_immediately_when_already_stopped(self, health):
        stop = asyncio.Event()
        stop.set()
        source = StaticSource(20.0)
        coordinator = make_coordinator(session_factory(), health, source=source)
        await coordinator.startup()

        await coordinator.run(stop)

        assert source.reads == 0

    @pytest.mark.asyncio
    async def test_shutdown_marks_unhealthy_before_closing(self, health):
        seen = []
        factory = session_factory(
            local={"on_close": lambda s: seen.append((s.name, health.healthy))},
            remote={"on_close": lambda s: seen.append((s.name, health.healthy))},
        )
        coordinator = make_coordinator(factory, health)
        await coordinator.startup()

        await coordinator.shutdown()

        assert seen == [("local", False), ("remote", False)]
        assert not health.healthy
        assert coordinator.state_machine.current_state == CoordinatorState.SHUTDOWN

    @pytest.mark.asyncio
    async def test_shutdown_closes_every_session_when_close_reports_errors(self, health, caplog):
        factory = session_factory(
            local={"close_errors": [RuntimeError("channel already closed"), OSError("socket gone")]},
            remote={"close_errors": [OSError("reset by peer")]},
        )
        coordinator = make_coordinator(factory, health)
        await coordinator.startup()

        with caplog.at_level(logging.WARNING):
            await coordinator.shutdown()

        assert factory.created["local"].close_calls == 1
        assert factory.created["remote"].close_calls == 1
        assert not health.healthy
        assert coordinator.state_machine.current_state == CoordinatorState.SHUTDOWN
        assert "local: 2 error(s) ignored while closing" in caplog.text
        assert "remote: 1 error(s) ignored while closing" in caplog.text

    @pytest.mark.asyncio
    async def test_shutdown_logs_per_destination_stats(self, health, caplog):
        factory = session_factory(remote={"always_fail_transmit": RuntimeError("boom")})
        coordinator = make_coordinator(factory, health)
        await coordinator.startup()
        await coordinator.tick()

        stats = {s["destination"]: s for s in coordinator.get_stats()}
        with caplog.at_level(logging.INFO):
            await coordinator.shutdown()

        assert stats["local"]["published"] == 1
        assert stats["remote"]["failed"] == 1
        assert "local: published=1 failed=0 reconnects=0" in caplog.text
        assert "remote: published=0 failed=1 reconnects=0" in caplog.text
