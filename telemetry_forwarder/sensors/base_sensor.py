# telemetry_forwarder/sensors/base_sensor.py
from abc import ABC, abstractmethod


class MeasurementSource(ABC):
    """Abstract base class for anything that yields one scalar reading per tick"""

    @abstractmethod
    def read(self) -> float:
        """Return the current reading or raise SensorError"""
        pass
