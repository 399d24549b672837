# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
asyncio SSIP client.

Example:
    >>> async with await AsyncSSIPClient.connect() as client:
    ...     await client.set_rate(20)
    ...     message_id = await client.speak("Hello!")
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from . import commands
from .api import SSIPCommands
from .commands import Command
from .engine import ClientState, PendingRequest, SSIPProtocol
from .exceptions import (
    ConnectionClosedError,
    ReplyTimeoutError,
    SSIPError,
    TransportError,
)
from .models import ClientConfig
from .sinks import NotificationCallback, NotificationSink, QueueSink

logger = logging.getLogger(__name__)

RECV_BUFFER_SIZE = 4096


class AsyncSSIPClient(SSIPCommands):
    """
    SSIP client for asyncio applications.

    A background task reads the connection and feeds the protocol engine, so
    notifications are delivered to the sink even while no call is waiting.
    Calls are serialised with an asyncio.Lock. All command methods are
    coroutines.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        *,
        config: ClientConfig | None = None,
        sink: NotificationSink | NotificationCallback | None = None,
    ) -> None:
        """
        Initialize the client over connected streams.

        Args:
            reader: Stream the server replies are read from.
            writer: Stream commands are written to.
            config: Optional ClientConfig object, used for timeouts.
            sink: Notification sink or callable.
        """
        if config is None:
            config = ClientConfig(autoname=False)
        if sink is None and config.notification_queue_size > 0:
            sink = QueueSink(config.notification_queue_size, config.notification_overflow)

        self._reader = reader
        self._writer = writer
        self._config = config
        self._engine = SSIPProtocol(sink)
        self._lock = asyncio.Lock()
        self._reader_task: asyncio.Task[None] | None = None
        self._sink_error: Exception | None = None

    @classmethod
    async def connect(
        cls,
        socket_path: str | None = None,
        *,
        config: ClientConfig | None = None,
        sink: NotificationSink | NotificationCallback | None = None,
        **kwargs: Any,
    ) -> AsyncSSIPClient:
        """
        Open a connection and announce the client name.

        Args:
            socket_path: Unix socket of the server, resolved when omitted.
            config: Optional ClientConfig object.
            sink: Notification sink or callable.
            **kwargs: Override config options.

        Raises:
            TransportError: If the connection fails.
        """
        if config is None:
            config = ClientConfig(socket_path=socket_path, **kwargs)
        elif socket_path is not None:
            config.socket_path = socket_path

        try:
            family, address = config.get_address()
        except ValueError as e:
            raise TransportError(str(e), hint="Pass socket_path or host, or set SPEECHD_ADDRESS") from e

        timeout = config.connect_timeout_ms / 1000.0
        try:
            if family == "unix":
                opening = asyncio.open_unix_connection(address)
            else:
                opening = asyncio.open_connection(*address)
            reader, writer = await asyncio.wait_for(opening, timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(f"Connection to {address} timed out", address) from e
        except OSError as e:
            raise TransportError(f"Failed to connect to {address}: {e}", address) from e
        logger.debug("Connected to %s", address)

        client = cls(reader, writer, config=config, sink=sink)
        client.start()
        if config.autoname:
            try:
                await client.set_client_name(config.client_name())
            except SSIPError:
                await client.close()
                raise
        return client

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def engine(self) -> SSIPProtocol:
        return self._engine

    @property
    def state(self) -> ClientState:
        return self._engine.state

    @property
    def closed(self) -> bool:
        return self._engine.closed

    @property
    def notifications(self) -> QueueSink | None:
        """The notification queue, when the sink is a QueueSink."""
        sink = self._engine.sink
        return sink if isinstance(sink, QueueSink) else None

    def set_sink(self, sink: NotificationSink | NotificationCallback | None) -> None:
        self._engine.set_sink(sink)

    # =========================================================================
    # Reader
    # =========================================================================

    def start(self) -> None:
        """Start the background reader task."""
        if self._reader_task is None:
            self._reader_task = asyncio.create_task(self._read_loop())

    async def _read_loop(self) -> None:
        while not self._engine.closed:
            try:
                data = await self._reader.read(RECV_BUFFER_SIZE)
            except OSError as e:
                self._engine.fail(TransportError(f"Failed to receive: {e}"))
                break
            if not data:
                self._engine.fail(ConnectionClosedError())
                break

            try:
                self._engine.feed(data)
            except Exception as e:
                if self._engine.closed:
                    break
                # Sink error, deferred to the next call()
                if self._sink_error is None:
                    self._sink_error = e
            self._write()

    def _write(self) -> None:
        data = self._engine.drain()
        if data:
            self._writer.write(data)

    # =========================================================================
    # Request/reply
    # =========================================================================

    async def call(self, command: Command, timeout: float | None = None) -> Any:
        """
        Send a command and wait for its decoded reply.

        Args:
            command: A command built by pyssip.commands.
            timeout: Seconds to wait. Defaults to the configured request timeout.

        Returns:
            The decoded reply.

        Raises:
            ServerError: If the server rejected the command.
            ReplyTimeoutError: If no reply arrived in time. The request stays
                pending until wait() consumes its reply.
            NotificationOverflow: If the sink overflowed since the last call.
                Any other error raised by the notification sink is raised
                here too.
        """
        if self._sink_error is not None:
            error, self._sink_error = self._sink_error, None
            raise error

        async with self._lock:
            self.start()
            request = self._engine.submit(command)
            self._write()
            try:
                await self._writer.drain()
            except OSError as e:
                error = TransportError(f"Failed to send: {e}")
                self._engine.fail(error)
                raise error from e
            return await self._wait_for(request, timeout)

    async def _call(self, command: Command) -> Any:
        return await self.call(command)

    async def wait(self, timeout: float | None = None) -> Any:
        """
        Wait for the reply of a request that timed out earlier.

        Returns:
            The decoded reply, or None if no request is pending.
        """
        async with self._lock:
            request = self._engine.pending
            if request is None:
                return None
            return await self._wait_for(request, timeout)

    async def _wait_for(self, request: PendingRequest, timeout: float | None) -> Any:
        if timeout is None:
            timeout = self._config.request_timeout

        if not request.done():
            future: asyncio.Future[None] = asyncio.get_running_loop().create_future()

            def wake(_: PendingRequest) -> None:
                if not future.done():
                    future.set_result(None)

            request.add_done_callback(wake)
            try:
                await asyncio.wait_for(future, timeout)
            except asyncio.TimeoutError:
                raise ReplyTimeoutError(timeout) from None

        return request.result()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def quit(self) -> None:
        """Send QUIT and close the connection."""
        if self._engine.closed:
            return
        try:
            await self.call(commands.quit())
        finally:
            await self.close()

    async def close(self) -> None:
        """Close the connection and stop the reader task."""
        if not self._engine.closed:
            logger.debug("Closing asyncio SSIP client")
        self._engine.close()
        task, self._reader_task = self._reader_task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except OSError:
            pass

    async def __aenter__(self) -> AsyncSSIPClient:
        self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._engine.closed:
            await self.close()
            return
        try:
            await self.quit()
        except SSIPError:
            await self.close()
