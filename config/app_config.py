"""Centralised application settings (dotenv + env overrides)."""
from __future__ import annotations
import os
from pathlib import Path
from dotenv import load_dotenv

ROOT = Path(__file__).parents[1]
load_dotenv(ROOT / ".env", override=False)

_TRUE  = {"1", "t", "true", "yes", "on"}
_FALSE = {"0", "f", "false", "no", "off"}

def env_bool(key: str, default: bool = False) -> bool:
    """Unset or unparsable values fall back to `default`."""
    val = os.getenv(key)
    if val is None:
        return default
    val = val.strip().lower()
    if val in _TRUE:
        return True
    if val in _FALSE:
        return False
    return default

class settings:                            # pylint: disable=too-few-public-methods
    RABBITMQ_LOCAL_URI   = os.getenv("RABBITMQ_LOCAL_URI", "")
    RABBITMQ_REMOTE_URI  = os.getenv("RABBITMQ_REMOTE_URI", "")
    RABBITMQ_QUEUE       = os.getenv("RABBITMQ_QUEUE") or "temp"
    RABBITMQ_USE_TLS     = env_bool("RABBITMQ_USE_TLS", False)
    RABBITMQ_USE_MTLS    = env_bool("RABBITMQ_USE_MTLS", False)
    RABBITMQ_CA_CERT     = os.getenv("RABBITMQ_CA_CERT", "/etc/certs/ca.crt")
    RABBITMQ_CLIENT_CERT = os.getenv("RABBITMQ_CLIENT_CERT", "/etc/certs/client.crt")
    RABBITMQ_CLIENT_KEY  = os.getenv("RABBITMQ_CLIENT_KEY", "/etc/certs/client.key")
    RABBITMQ_CONNECT_TIMEOUT = float(os.getenv("RABBITMQ_CONNECT_TIMEOUT", 30))
    PUBLISH_INTERVAL     = float(os.getenv("PUBLISH_INTERVAL", 10))
    SENSOR_BASE_DIR      = os.getenv("SENSOR_BASE_DIR", "/sys/bus/w1/devices/")
    METRICS_HOST         = os.getenv("METRICS_HOST", "0.0.0.0")
    METRICS_PORT         = int(os.getenv("METRICS_PORT", 8080))
    LOG_FILE             = os.getenv("LOG_FILE", "log/ms-temp-sensor.log")
    LOG_LEVEL            = os.getenv("LOG_LEVEL", "INFO").upper()
