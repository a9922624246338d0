from __future__ import annotations
import logging
import os

from telemetry_forwarder.core.exceptions import SensorNotFoundError, SensorReadError
from .base_sensor import MeasurementSource

W1_DEVICES_DIR = "/sys/bus/w1/devices/"
DS18B20_FAMILY_PREFIX = "28-"

logger = logging.getLogger(__name__)


def find_sensor_path(base_dir: str = W1_DEVICES_DIR) -> str:
    """Path of the first DS18B20 `w1_slave` file on the 1-Wire bus."""
    try:
        entries = sorted(os.listdir(base_dir))
    except OSError as e:
        raise SensorNotFoundError(f"cannot list {base_dir}: {e}") from e

    for entry in entries:
        if entry.startswith(DS18B20_FAMILY_PREFIX):
            path = os.path.join(base_dir, entry, "w1_slave")
            logger.info(f"Using DS18B20 sensor at {path}")
            return path
    raise SensorNotFoundError("no DS18B20 found")


def parse_w1_slave(data: str) -> float:
    """
    Decode the kernel's two-line w1_slave payload, e.g.

        72 01 4b 46 7f ff 0e 10 57 : crc=57 YES
        72 01 4b 46 7f ff 0e 10 57 t=23125

    into degrees Celsius (23.125).
    """
    lines = data.split("\n")
    if len(lines) < 2 or "YES" not in lines[0]:
        raise SensorReadError("sensor read failed: crc check not passed")
    parts = lines[1].split("t=")
    if len(parts) != 2:
        raise SensorReadError("unexpected format")
    try:
        raw = int(parts[1])
    except ValueError as e:
        raise SensorReadError(f"invalid raw temperature {parts[1]!r}") from e
    return raw / 1000.0


class DS18B20Sensor(MeasurementSource):
    """DS18B20 probe exposed by the w1-therm kernel driver."""

    def __init__(self, path: str):
        self.path = path

    @classmethod
    def discover(cls, base_dir: str = W1_DEVICES_DIR) -> "DS18B20Sensor":
        return cls(find_sensor_path(base_dir))

    def read(self) -> float:
        try:
            with open(self.path, "r") as f:
                data = f.read()
        except OSError as e:
            raise SensorReadError(f"cannot read {self.path}: {e}") from e
        return parse_w1_slave(data)
