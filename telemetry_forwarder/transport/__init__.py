"""Broker transport: sessions, TLS and publishing."""

from .session import TransportSession
from .publisher import Publisher, encode_message
from .tls import load_tls_context

__all__ = [
    'TransportSession',
    'Publisher',
    'encode_message',
    'load_tls_context',
]
