"""
JSON publisher with reconnect-and-retry on top of a TransportSession.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict

from telemetry_forwarder.core.exceptions import (
    RetriesExhausted,
    SerializationError,
    SessionClosedError,
    TransportError,
)
from telemetry_forwarder.core.patterns.retry import RetryPolicy
from telemetry_forwarder.transport.session import TransportSession


def encode_message(message: Any) -> bytes:
    """Compact JSON with field names and order preserved. NaN and Infinity are rejected."""
    payload = message.to_dict() if hasattr(message, "to_dict") else message
    try:
        return json.dumps(payload, separators=(",", ":"), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"cannot encode message: {e}") from e


class Publisher:
    """
    Publishes one structured message at a time to the session's queue.

    Retry is limited to the one failure reconnecting can fix: a channel or
    connection that was already closed. The policy budget is shared by the
    whole publish() call, so a message is attempted at most once per
    successful reconnect and the worst-case wait is bounded by
    RetryPolicy.total_delay().
    """

    def __init__(self,
                 session: TransportSession,
                 policy: RetryPolicy | None = None,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self.session = session
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self.logger = logging.getLogger(f"{self.__class__.__name__}[{session.name}]")
        self.published = 0
        self.failed = 0
        self.reconnects = 0

    @property
    def name(self) -> str:
        return self.session.name

    async def publish(self, message: Any) -> None:
        body = encode_message(message)
        delays = self.policy.delays()
        attempt = 0

        while True:
            try:
                await self.session.transmit(body)
                self.published += 1
                return
            except SessionClosedError as e:
                self.logger.warning(f"Publish failed, connection closed: {e}")
            except Exception:
                self.failed += 1
                raise

            # Disconnected -> Connecting, until connected or the budget is spent.
            while True:
                delay = next(delays, None)
                if delay is None:
                    self.failed += 1
                    self.logger.error(
                        f"Giving up after {attempt} reconnect attempts, message dropped"
                    )
                    raise RetriesExhausted(self.name, attempt)

                attempt += 1
                self.logger.info(
                    f"Reconnect attempt {attempt}/{self.policy.max_attempts} in {delay:g}s"
                )
                await self._sleep(delay)
                try:
                    await self.session.connect()
                except TransportError as e:
                    self.logger.warning(f"Reconnect attempt {attempt} failed: {e}")
                    continue

                self.reconnects += 1
                self.logger.info(f"Reconnected on attempt {attempt}, retransmitting")
                break

    def get_stats(self) -> Dict[str, Any]:
        return {
            "destination": self.name,
            "queue": self.session.queue,
            "state": self.session.state.name.lower(),
            "published": self.published,
            "failed": self.failed,
            "reconnects": self.reconnects,
        }
