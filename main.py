#!/usr/bin/env python3
import asyncio, logging, signal, socket, sys
from config.logging_config import configure
from config.app_config import settings
from telemetry_forwarder.core.exceptions import TelemetryForwarderError
from telemetry_forwarder.models import EndpointConfig
from telemetry_forwarder.monitoring import HealthState, TelemetryMetrics, ObservabilityServer
from telemetry_forwarder.orchestration import FanOutCoordinator
from telemetry_forwarder.sensors import DS18B20Sensor
from telemetry_forwarder.transport import load_tls_context
from telemetry_forwarder.triggers import IntervalTrigger

log = logging.getLogger("main")

def build_endpoints(ssl_context=None):
    return [
        EndpointConfig(name=name, uri=uri, queue=settings.RABBITMQ_QUEUE,
                       ssl_context=ssl_context,
                       connect_timeout=settings.RABBITMQ_CONNECT_TIMEOUT)
        for name, uri in (("local", settings.RABBITMQ_LOCAL_URI),
                          ("remote", settings.RABBITMQ_REMOTE_URI))
    ]

async def async_main():
    hostname = socket.gethostname()
    sensor = DS18B20Sensor.discover(settings.SENSOR_BASE_DIR)
    tls = load_tls_context(
        settings.RABBITMQ_USE_TLS, settings.RABBITMQ_USE_MTLS,
        ca_cert=settings.RABBITMQ_CA_CERT,
        client_cert=settings.RABBITMQ_CLIENT_CERT,
        client_key=settings.RABBITMQ_CLIENT_KEY,
    )

    health, metrics = HealthState(), TelemetryMetrics()
    coordinator = FanOutCoordinator(
        build_endpoints(tls), sensor, hostname, health,
        metrics=metrics, trigger=IntervalTrigger(settings.PUBLISH_INTERVAL),
    )
    await coordinator.startup()

    server = ObservabilityServer(health, metrics, settings.METRICS_HOST, settings.METRICS_PORT)
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    try:
        server.start()
        await coordinator.run(stop)
    finally:
        await coordinator.shutdown()
        server.stop()

def main():
    configure()
    try:
        asyncio.run(async_main())
    except TelemetryForwarderError as e:
        log.critical(f"{type(e).__name__}: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit("graceful shutdown")

if __name__ == "__main__":
    main()
