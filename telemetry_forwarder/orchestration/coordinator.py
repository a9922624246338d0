from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from telemetry_forwarder.core.exceptions import NoDestinationsError, SensorError, TransportError
from telemetry_forwarder.core.patterns.retry import RetryPolicy
from telemetry_forwarder.models.telemetry_models import EndpointConfig, TemperatureMessage
from telemetry_forwarder.monitoring.health import HealthState
from telemetry_forwarder.monitoring.metrics import TelemetryMetrics
from telemetry_forwarder.sensors.base_sensor import MeasurementSource
from telemetry_forwarder.transport.publisher import Publisher
from telemetry_forwarder.transport.session import TransportSession
from telemetry_forwarder.triggers.time_trigger import IntervalTrigger
from .state_machine import CoordinatorState, CoordinatorStateMachine


class FanOutCoordinator:
    """
    Drives periodic publication of one reading to every registered destination.

    Destinations are dispatched one after another from a single task, in
    registration order. A failing destination is logged and skipped for
    that tick; it never stops delivery to its siblings.
    """

    def __init__(self,
                 endpoints: Sequence[EndpointConfig],
                 source: MeasurementSource,
                 hostname: str,
                 health: HealthState,
                 metrics: Optional[TelemetryMetrics] = None,
                 trigger: Optional[IntervalTrigger] = None,
                 policy: Optional[RetryPolicy] = None,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
                 session_factory: Callable[[EndpointConfig], TransportSession] = TransportSession,
                 now: Optional[Callable[[], datetime]] = None):
        self.endpoints = list(endpoints)
        self.source = source
        self.hostname = hostname
        self.health = health
        self.metrics = metrics
        self.trigger = trigger or IntervalTrigger()
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._session_factory = session_factory
        self._now = now
        self.publishers: List[Publisher] = []
        self.state_machine = CoordinatorStateMachine()
        self.logger = logging.getLogger(self.__class__.__name__)

    # --------------------------------------------------------------------- #
    #  Public API
    # --------------------------------------------------------------------- #
    @property
    def destinations(self) -> List[str]:
        return [p.name for p in self.publishers]

    async def startup(self) -> List[Publisher]:
        """Connect every configured endpoint; at least one must succeed."""
        self.state_machine.transition_to(CoordinatorState.DESTINATION_SETUP)

        for endpoint in self.endpoints:
            if not endpoint.is_enabled:
                self.logger.debug(f"No URI configured for {endpoint.name}, skipping")
                continue
            session = self._session_factory(endpoint)
            try:
                await session.connect()
            except TransportError as e:
                self.logger.warning(f"{endpoint.name.capitalize()} RabbitMQ connection failed: {e}")
                continue
            self.publishers.append(Publisher(session, self.policy, self._sleep))

        if not self.publishers:
            self.state_machine.transition_to(CoordinatorState.FAILED)
            raise NoDestinationsError("No RabbitMQ connections available")

        self.state_machine.transition_to(CoordinatorState.OPERATIONAL)
        self.logger.info("coordinator ready (%d destinations: %s)",
                         len(self.publishers), ", ".join(self.destinations))
        return self.publishers

    async def dispatch(self, message: TemperatureMessage) -> Dict[str, Optional[Exception]]:
        """Publish the same message to every destination; returns per-destination outcome."""
        outcome: Dict[str, Optional[Exception]] = {}
        for publisher in self.publishers:
            try:
                await publisher.publish(message)
                outcome[publisher.name] = None
            except Exception as e:
                self.logger.error(f"Failed to publish to {publisher.name}: {e}")
                outcome[publisher.name] = e
        return outcome

    async def tick(self) -> Optional[Dict[str, Optional[Exception]]]:
        """One publish cycle. Returns None when the sensor read was skipped."""
        try:
            value = self.source.read()
        except SensorError as e:
            self.logger.warning(f"Failed to read sensor: {e}")
            return None

        message = TemperatureMessage.create(
            value, self.hostname, now=self._now() if self._now else None
        )
        if self.metrics is not None:
            self.metrics.observe_reading(value)
        return await self.dispatch(message)

    async def run(self, stop_event: asyncio.Event) -> None:
        """Tick every trigger interval until stop_event is set."""
        self.trigger.start()
        self.logger.info(f"Publishing every {self.trigger.interval_seconds:g}s")
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(),
                                       timeout=self.trigger.get_next_check_interval())
            except asyncio.TimeoutError:
                pass
            if stop_event.is_set():
                break
            if self.trigger.should_trigger():
                await self.tick()

    async def shutdown(self) -> None:
        """Mark unhealthy, then close every session. In-flight publishes are not awaited."""
        self.state_machine.transition_to(CoordinatorState.SHUTTING_DOWN)
        self.logger.info("Shutting down")
        self.health.mark_unhealthy()
        for stats in self.get_stats():
            self.logger.info("%(destination)s: published=%(published)d failed=%(failed)d "
                             "reconnects=%(reconnects)d", stats)
        for publisher in self.publishers:
            errors = await publisher.session.close()
            if errors:
                self.logger.warning(f"{publisher.name}: {len(errors)} error(s) ignored while closing")
        self.state_machine.transition_to(CoordinatorState.SHUTDOWN)
        self.logger.info("Shutdown completed")

    def get_stats(self) -> List[Dict[str, Any]]:
        return [p.get_stats() for p in self.publishers]
