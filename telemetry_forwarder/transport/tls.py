"""TLS / mutual-TLS context construction for broker connections."""
from __future__ import annotations
import logging
import ssl
from typing import Optional

from telemetry_forwarder.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CA_CERT     = "/etc/certs/ca.crt"
DEFAULT_CLIENT_CERT = "/etc/certs/client.crt"
DEFAULT_CLIENT_KEY  = "/etc/certs/client.key"


def load_tls_context(use_tls: bool,
                     use_mtls: bool,
                     ca_cert: str = DEFAULT_CA_CERT,
                     client_cert: str = DEFAULT_CLIENT_CERT,
                     client_key: str = DEFAULT_CLIENT_KEY) -> Optional[ssl.SSLContext]:
    """
    Build the client SSL context shared by every endpoint.

    Returns None when TLS is disabled. The CA bundle is always required once
    TLS is on; the client certificate pair only when mutual TLS is enabled.
    The negotiated protocol is never older than TLS 1.2.
    """
    if not use_tls:
        return None

    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    if use_mtls:
        try:
            ctx.load_cert_chain(certfile=client_cert, keyfile=client_key)
        except (OSError, ssl.SSLError) as e:
            raise ConfigurationError(f"failed to load client certs: {e}") from e

    try:
        ctx.load_verify_locations(cafile=ca_cert)
    except FileNotFoundError as e:
        raise ConfigurationError(f"failed to read CA cert: {e}") from e
    except (OSError, ssl.SSLError) as e:
        raise ConfigurationError(f"failed to append CA cert: {e}") from e

    ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    logger.info(f"TLS enabled (mutual auth: {use_mtls}, CA: {ca_cert})")
    return ctx
