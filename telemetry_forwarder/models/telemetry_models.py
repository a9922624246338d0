from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from ssl import SSLContext
from typing import Any, Dict, Optional


DEFAULT_QUEUE = "temp"


###############################################################################
# 1. MESSAGE ENVELOPE ---------------------------------------------------------
###############################################################################

@dataclass(frozen=True, slots=True)
class TemperatureMessage:
    """One reading as it travels on the wire. Field order is the wire order."""
    timestamp: str                     # RFC 3339, e.g. "2024-01-01T00:00:00Z"
    temperature: float
    hostname: str

    # ---------- factory --------------------------------------------------- #
    @classmethod
    def create(cls, temperature: float, hostname: str,
               now: Optional[datetime] = None) -> "TemperatureMessage":
        return cls(
            timestamp   = _format_rfc3339(now or datetime.now(timezone.utc)),
            temperature = float(temperature),
            hostname    = hostname,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "temperature": self.temperature,
            "hostname": self.hostname,
        }


###############################################################################
# 2. ENDPOINT CONFIG ----------------------------------------------------------
###############################################################################

@dataclass(frozen=True, slots=True)
class EndpointConfig:
    """Immutable description of one broker destination."""
    name: str                          # "local" / "remote"
    uri: str
    queue: str = DEFAULT_QUEUE
    ssl_context: Optional[SSLContext] = field(default=None, repr=False, compare=False)
    connect_timeout: float = 30.0      # seconds

    @property
    def use_tls(self) -> bool:
        return self.ssl_context is not None

    @property
    def is_enabled(self) -> bool:
        return bool(self.uri)


###############################################################################
# 3. HELPER PARSERS -----------------------------------------------------------
###############################################################################

def _format_rfc3339(value: datetime) -> str:
    """Second-precision UTC timestamp with a trailing 'Z'; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc).replace(microsecond=0)
    return value.isoformat().replace("+00:00", "Z")
