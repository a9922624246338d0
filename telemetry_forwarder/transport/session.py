"""
RabbitMQ Transport Session
Owns one connection and one channel to a single broker endpoint.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import aio_pika
from aio_pika.abc import AbstractChannel, AbstractConnection
from aio_pika.exceptions import ChannelClosed, ChannelInvalidStateError, ConnectionClosed

from telemetry_forwarder.core.exceptions import (
    BrokerConnectionError,
    ChannelError,
    DeclareError,
    SessionClosedError,
)
from telemetry_forwarder.core.patterns.state_machine import SessionState, StateMachine
from telemetry_forwarder.models.telemetry_models import EndpointConfig

# Broker-side faults that mean "this channel/connection is gone".
CLOSED_ERRORS = (ChannelInvalidStateError, ChannelClosed, ConnectionClosed)

CONTENT_TYPE_JSON = "application/json"


class TransportSession:
    """
    One AMQP connection + channel bound to an EndpointConfig.

    Lifecycle:
    - created DISCONNECTED
    - connect() -> CONNECTING -> CONNECTED (queue declared durable) or FAILED
    - a closed channel/connection seen during transmit() -> DISCONNECTED
    - close() releases both handles and is idempotent

    Only the owning Publisher mutates a session, from the coordinator task.
    """

    def __init__(self, config: EndpointConfig):
        self.config = config
        self.logger = logging.getLogger(f"{self.__class__.__name__}[{config.name}]")
        self.connection: Optional[AbstractConnection] = None
        self.channel: Optional[AbstractChannel] = None
        self._fsm = StateMachine(SessionState.DISCONNECTED)

    # ------------------------------------------------------------------ #
    #  State
    # ------------------------------------------------------------------ #
    @property
    def name(self) -> str:
        return self.config.name

    @property
    def queue(self) -> str:
        return self.config.queue

    @property
    def state(self) -> SessionState:
        return self._fsm.state

    def is_connected(self) -> bool:
        return (
            self.state == SessionState.CONNECTED
            and self.channel is not None
            and not self.channel.is_closed
        )

    def mark_disconnected(self) -> None:
        self._transition(SessionState.DISCONNECTED)

    def _transition(self, new_state: SessionState) -> bool:
        old_state = self._fsm.state
        if not self._fsm.transition(new_state):
            self.logger.warning(f"Invalid state transition: {old_state.name} -> {new_state.name}")
            return False
        return True

    # ------------------------------------------------------------------ #
    #  Connect / close
    # ------------------------------------------------------------------ #
    async def connect(self) -> None:
        """Dial, open a channel and declare the destination queue."""
        # Stale handles from a previous connection are released first.
        if self.connection is not None or self.channel is not None:
            await self._release()

        self._transition(SessionState.CONNECTING)
        self.logger.info(f"Connecting to RabbitMQ ({'TLS' if self.config.use_tls else 'plain'})")

        try:
            connection = await aio_pika.connect(
                self.config.uri,
                ssl_context=self.config.ssl_context,
                timeout=self.config.connect_timeout,
            )
        except Exception as e:
            self._transition(SessionState.FAILED)
            raise BrokerConnectionError(f"dial failed: {e}") from e

        try:
            channel = await connection.channel(publisher_confirms=False)
        except Exception as e:
            self._transition(SessionState.FAILED)
            await self._close_quietly(connection, "connection")
            raise ChannelError(f"channel failed: {e}") from e

        try:
            await channel.declare_queue(
                self.config.queue,
                durable=True,
                exclusive=False,
                auto_delete=False,
                arguments=None,
            )
        except Exception as e:
            self._transition(SessionState.FAILED)
            await self._close_quietly(channel, "channel")
            await self._close_quietly(connection, "connection")
            raise DeclareError(f"queue declare failed: {e}") from e

        self.connection = connection
        self.channel = channel
        self._transition(SessionState.CONNECTED)
        self.logger.info(f"Connected, queue '{self.config.queue}' declared")

    async def close(self) -> List[Exception]:
        """
        Release channel then connection.

        Release failures are logged and returned, never raised, so shutdown
        can not be blocked by a broker that is already gone.
        """
        errors = await self._release()
        self.mark_disconnected()
        return errors

    async def _release(self) -> List[Exception]:
        errors: List[Exception] = []
        channel, self.channel = self.channel, None
        connection, self.connection = self.connection, None
        for handle, label in ((channel, "channel"), (connection, "connection")):
            if handle is None:
                continue
            err = await self._close_quietly(handle, label)
            if err is not None:
                errors.append(err)
        return errors

    async def _close_quietly(self, handle, label: str) -> Optional[Exception]:
        try:
            await handle.close()
        except Exception as e:
            self.logger.warning(f"Ignoring error while closing {label}: {e}")
            return e
        return None

    # ------------------------------------------------------------------ #
    #  Transmit
    # ------------------------------------------------------------------ #
    async def transmit(self, body: bytes, content_type: str = CONTENT_TYPE_JSON) -> None:
        """
        Fire-and-forget send of `body` to the bound queue via the default exchange.

        Raises SessionClosedError when the channel or connection is gone;
        every other fault propagates unchanged.
        """
        channel = self.channel
        if channel is None or channel.is_closed:
            self.mark_disconnected()
            raise SessionClosedError(f"{self.name}: channel is not open")

        try:
            await channel.default_exchange.publish(
                aio_pika.Message(body=body, content_type=content_type),
                routing_key=self.config.queue,
            )
        except CLOSED_ERRORS as e:
            self.mark_disconnected()
            raise SessionClosedError(f"{self.name}: {e}") from e
