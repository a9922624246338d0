"""Measurement sources."""

from .base_sensor import MeasurementSource
from .ds18b20 import DS18B20Sensor, find_sensor_path, parse_w1_slave

__all__ = [
    'MeasurementSource',
    'DS18B20Sensor',
    'find_sensor_path',
    'parse_w1_slave',
]
