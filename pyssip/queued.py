# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Poll-driven SSIP client.

QueuedClient never blocks. Commands are queued with push() and sent one at a
time as the socket becomes writable; replies are collected when it becomes
readable. The caller owns the event loop:

    client = QueuedClient.connect()
    selector = selectors.DefaultSelector()
    client.register(selector)
    client.push(commands.speak("Hello"))
    while client.has_next():
        for key, mask in selector.select():
            if mask & selectors.EVENT_WRITE:
                client.on_writable()
            if mask & selectors.EVENT_READ:
                for request in client.on_readable():
                    print(request.result())
        client.update(selector)
"""

from __future__ import annotations

import logging
import selectors
import socket
from collections import deque
from typing import Any

from . import commands
from .client import open_socket
from .commands import Command
from .engine import ClientState, PendingRequest, SSIPProtocol
from .exceptions import ConnectionClosedError, SSIPError, TransportError
from .models import ClientConfig
from .sinks import NotificationCallback, NotificationSink

logger = logging.getLogger(__name__)

RECV_BUFFER_SIZE = 4096


class QueuedClient:
    """
    Non-blocking client with a FIFO of commands.

    At most one command is on the wire at any time. The next one is
    submitted only after the reply to the previous one has been read.
    """

    def __init__(
        self,
        sock: socket.socket,
        sink: NotificationSink | NotificationCallback | None = None,
    ) -> None:
        """
        Initialize queued client.

        Args:
            sock: Connected socket. It is switched to non-blocking mode.
            sink: Notification sink or callable.
        """
        sock.setblocking(False)
        self._sock = sock
        self._engine = SSIPProtocol(sink)
        self._queue: deque[PendingRequest] = deque()
        self._inflight: PendingRequest | None = None

    @classmethod
    def connect(
        cls,
        config: ClientConfig | None = None,
        sink: NotificationSink | NotificationCallback | None = None,
        **kwargs: Any,
    ) -> QueuedClient:
        """
        Open a connection and queue the client name.

        Args:
            config: Optional ClientConfig object.
            sink: Notification sink or callable.
            **kwargs: Config options when no config is given.
        """
        if config is None:
            config = ClientConfig(**kwargs)
        client = cls(open_socket(config), sink)
        if config.autoname:
            client.push(commands.set_client_name(config.client_name()))
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

    def fileno(self) -> int:
        """File descriptor, so the client can be registered with selectors."""
        return self._sock.fileno()

    # =========================================================================
    # Queue
    # =========================================================================

    def push(self, command: Command) -> PendingRequest:
        """
        Queue a command.

        Returns:
            Request resolved once its reply has been read.

        Raises:
            ConnectionClosedError: If the client is closed.
        """
        if self._engine.closed:
            raise ConnectionClosedError("Client is closed")
        request = PendingRequest(command)
        self._queue.append(request)
        self._submit_next()
        return request

    def has_next(self) -> bool:
        """Check if commands are queued or awaiting their reply."""
        return bool(self._queue) or self._inflight is not None

    def wants_write(self) -> bool:
        """Check if bytes are waiting for a writable socket."""
        return self._engine.has_output

    def interest(self) -> int:
        """Selector event mask the socket should be watched for."""
        events = selectors.EVENT_READ
        if self.wants_write():
            events |= selectors.EVENT_WRITE
        return events

    def register(self, selector: selectors.BaseSelector, data: Any = None) -> selectors.SelectorKey:
        """Register the client with a selector."""
        return selector.register(self, self.interest(), data)

    def update(self, selector: selectors.BaseSelector) -> None:
        """Refresh the registered event mask after reading or writing."""
        if self._engine.closed:
            selector.unregister(self)
            return
        key = selector.get_key(self)
        selector.modify(self, self.interest(), key.data)

    def _submit_next(self) -> None:
        if self._engine.state is not ClientState.IDLE or not self._queue:
            return
        outer = self._queue.popleft()
        inner = self._engine.submit(outer.command)
        self._inflight = outer

        def forward(done: PendingRequest) -> None:
            error = done.exception()
            if error is not None:
                outer._set_error(error)
            else:
                outer._set_result(done.result())

        inner.add_done_callback(forward)

    # =========================================================================
    # Readiness
    # =========================================================================

    def on_writable(self) -> int:
        """
        Write as many queued bytes as the socket accepts.

        Returns:
            Number of bytes written.

        Raises:
            TransportError: If the write failed.
        """
        data = self._engine.pending_output()
        if not data:
            return 0
        try:
            sent = self._sock.send(data)
        except BlockingIOError:
            return 0
        except OSError as e:
            error = TransportError(f"Failed to send: {e}")
            self._fail(error)
            raise error from e
        self._engine.drain(sent)
        return sent

    def on_readable(self) -> list[PendingRequest]:
        """
        Read everything available and process it.

        Returns:
            Queued requests resolved by the data read, in order.

        Raises:
            TransportError: If the read failed.
            ProtocolError: If the stream desynchronized.
            Exception: Whatever the notification sink raised. Requests
                resolved by the same data are still completed and the
                next queued command is submitted.
        """
        resolved: list[PendingRequest] = []
        while not self._engine.closed:
            try:
                data = self._sock.recv(RECV_BUFFER_SIZE)
            except BlockingIOError:
                break
            except OSError as e:
                error = TransportError(f"Failed to receive: {e}")
                self._fail(error)
                raise error from e

            if not data:
                self._fail(ConnectionClosedError())
                break

            try:
                self._engine.feed(data)
            except Exception:
                if self._engine.closed:
                    self._fail_queue(ConnectionClosedError())
                    self._inflight = None
                else:
                    self._advance(resolved)
                raise
            self._advance(resolved)

        if self._engine.closed and self._inflight is not None:
            resolved.append(self._inflight)
            self._inflight = None
        return resolved

    def _advance(self, resolved: list[PendingRequest]) -> None:
        if self._inflight is not None and self._inflight.done():
            resolved.append(self._inflight)
            self._inflight = None
            self._submit_next()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _fail_queue(self, error: SSIPError) -> None:
        while self._queue:
            self._queue.popleft()._set_error(error)

    def _fail(self, error: SSIPError) -> None:
        self._engine.fail(error)
        self._fail_queue(error)

    def close(self) -> None:
        """Close the connection, failing queued commands."""
        if not self._engine.closed:
            logger.debug("Closing queued SSIP client")
        self._engine.close()
        self._fail_queue(ConnectionClosedError("Client is closed"))
        self._inflight = None
        try:
            self._sock.close()
        except OSError:
            pass

    def __enter__(self) -> QueuedClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
