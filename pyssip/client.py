# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
pyssip blocking client.

A client for Speech Dispatcher over its SSIP socket, with support for:
- Unix socket and TCP connections
- Address resolution from SPEECHD_ADDRESS and XDG_RUNTIME_DIR
- Typed replies for every command family
- Notification delivery to queues, callbacks or reactive streams
- Thread-safe operations

Usage Patterns:

    # Pattern 1: Simple usage (recommended for scripts)
    from pyssip import connect
    client = connect()
    message_id = client.speak("Hello!")

    # Pattern 2: Context manager (recommended for applications)
    from pyssip import SSIPClient
    with SSIPClient() as client:
        client.set_rate(20)
        client.speak("Hello!")
    # QUIT is sent and the socket closed when exiting the block

    # Pattern 3: Explicit lifecycle management
    client = SSIPClient("/run/user/1000/speech-dispatcher/speechd.sock")
    try:
        client.speak("Hello!")
    finally:
        client.close()
"""

from __future__ import annotations

import logging
import socket
import threading
import time
from contextlib import contextmanager
from typing import Any, Iterator

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


def open_socket(config: ClientConfig) -> socket.socket:
    """
    Open a connected blocking socket to the configured server.

    Args:
        config: Client configuration, used for the address and timeout.

    Returns:
        Connected socket.

    Raises:
        TransportError: If the address cannot be resolved or reached.
    """
    try:
        family, address = config.get_address()
    except ValueError as e:
        raise TransportError(
            str(e),
            hint="Pass socket_path or host, or set SPEECHD_ADDRESS",
        ) from e

    timeout = config.connect_timeout_ms / 1000.0

    if family == "unix":
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(timeout)
            sock.connect(address)
        except socket.timeout as e:
            sock.close()
            raise TransportError(f"Connection to {address} timed out", address) from e
        except OSError as e:
            sock.close()
            raise TransportError(f"Failed to connect to {address}: {e}", address) from e
        logger.debug("Connected to unix socket %s", address)
        return sock

    host, port = address
    try:
        addrs = socket.getaddrinfo(host, port, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except socket.gaierror as e:
        raise TransportError(f"Failed to resolve {host}: {e}", address) from e

    last_error: TransportError | None = None
    for family_, socktype, proto, _canonname, sockaddr in addrs:
        sock = socket.socket(family_, socktype, proto)
        try:
            sock.settimeout(timeout)
            sock.connect(sockaddr)
        except socket.timeout as e:
            sock.close()
            last_error = TransportError(f"Connection to {host}:{port} timed out", address)
            last_error.__cause__ = e
        except OSError as e:
            sock.close()
            last_error = TransportError(f"Failed to connect to {host}:{port}: {e}", address)
            last_error.__cause__ = e
        else:
            logger.debug("Connected to %s:%s", host, port)
            return sock

    if last_error:
        raise last_error
    raise TransportError(f"No addresses found for {host}", address)


class SSIPClient(SSIPCommands):
    """
    Blocking SSIP client.

    Each method sends one command and blocks until its reply arrives. Events
    read while waiting go to the notification sink.

    Example:
        >>> client = SSIPClient()
        >>> client.set_voice(VoiceType.FEMALE1)
        >>> message_id = client.speak("Hello!")
        >>> client.close()
    """

    def __init__(
        self,
        socket_path: str | None = None,
        *,
        config: ClientConfig | None = None,
        sock: socket.socket | None = None,
        sink: NotificationSink | NotificationCallback | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize and connect the client.

        Args:
            socket_path: Unix socket of the server. Resolved from the
                environment when omitted.
            config: Optional ClientConfig object.
            sock: Already connected socket to use instead of connecting.
            sink: Notification sink or callable. When omitted, a QueueSink is
                created if notification_queue_size is set.
            **kwargs: Override config options (host, port, request_timeout_ms, etc.)
        """
        if config is None:
            config = ClientConfig(socket_path=socket_path, **kwargs)
        else:
            if socket_path is not None:
                config.socket_path = socket_path
            for key, value in kwargs.items():
                if hasattr(config, key):
                    setattr(config, key, value)

        if sink is None and config.notification_queue_size > 0:
            sink = QueueSink(config.notification_queue_size, config.notification_overflow)

        self._config = config
        self._lock = threading.RLock()
        self._engine = SSIPProtocol(sink)
        self._sink_error: Exception | None = None
        self._sock = sock if sock is not None else open_socket(config)

        if config.autoname:
            try:
                self.set_client_name(config.client_name())
            except SSIPError:
                self.close()
                raise

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def engine(self) -> SSIPProtocol:
        """The protocol engine driven by this client."""
        return self._engine

    @property
    def state(self) -> ClientState:
        return self._engine.state

    @property
    def closed(self) -> bool:
        return self._engine.closed

    @property
    def sink(self) -> NotificationSink | None:
        return self._engine.sink

    @property
    def notifications(self) -> QueueSink | None:
        """The notification queue, when the sink is a QueueSink."""
        sink = self._engine.sink
        return sink if isinstance(sink, QueueSink) else None

    def set_sink(self, sink: NotificationSink | NotificationCallback | None) -> None:
        """Attach the notification sink."""
        with self._lock:
            self._engine.set_sink(sink)

    # =========================================================================
    # Request/reply
    # =========================================================================

    def call(self, command: Command, timeout: float | None = None) -> Any:
        """
        Send a command and wait for its decoded reply.

        Args:
            command: A command built by pyssip.commands.
            timeout: Seconds to wait for the reply. Defaults to the configured
                request timeout.

        Returns:
            The decoded reply.

        Raises:
            ServerError: If the server rejected the command.
            ReplyTimeoutError: If no reply arrived in time. The request stays
                pending until wait() consumes its reply.
            RequestPendingError: If an earlier request is still pending.
            TransportError: If the connection failed.
            NotificationOverflow: If the sink overflowed while an earlier
                call was waiting. Any other error raised by the notification
                sink is raised here too.
        """
        with self._lock:
            self._raise_sink_error()
            request = self._engine.submit(command)
            self._flush()
            return self._wait_for(request, timeout)

    def _call(self, command: Command) -> Any:
        return self.call(command)

    def wait(self, timeout: float | None = None) -> Any:
        """
        Wait for the reply of a request that timed out earlier.

        Returns:
            The decoded reply, or None if no request is pending.
        """
        with self._lock:
            request = self._engine.pending
            if request is None:
                return None
            return self._wait_for(request, timeout)

    def poll(self, timeout: float | None = 0.0) -> list[PendingRequest]:
        """
        Read available bytes once and dispatch the events they carry.

        Args:
            timeout: Seconds to wait for data, 0 to return at once, None to
                wait until data arrives.

        Returns:
            Requests resolved by the data read, usually empty.
        """
        with self._lock:
            self._raise_sink_error()
            self._ensure_open()
            data = self._recv(timeout)
            if data is None:
                return []
            return self._feed(data)

    def _raise_sink_error(self) -> None:
        if self._sink_error is not None:
            error, self._sink_error = self._sink_error, None
            raise error

    def _ensure_open(self) -> None:
        if self._engine.closed:
            raise ConnectionClosedError("Client is closed")

    def _flush(self) -> None:
        data = self._engine.drain()
        if not data:
            return
        try:
            self._sock.settimeout(None)
            self._sock.sendall(data)
        except OSError as e:
            error = TransportError(f"Failed to send: {e}")
            self._fail(error)
            raise error from e

    def _recv(self, timeout: float | None) -> bytes | None:
        """Read one chunk. Returns None on timeout."""
        try:
            self._sock.settimeout(timeout)
            data = self._sock.recv(RECV_BUFFER_SIZE)
        except (socket.timeout, BlockingIOError):
            return None
        except OSError as e:
            error = TransportError(f"Failed to receive: {e}")
            self._fail(error)
            raise error from e
        if not data:
            self._fail(ConnectionClosedError())
        return data

    def _feed(self, data: bytes) -> list[PendingRequest]:
        try:
            resolved = self._engine.feed(data)
        except Exception:
            if self._engine.closed:
                self._close_socket()
            elif self._engine.has_output:
                self._flush()
            raise
        if self._engine.has_output:
            self._flush()
        return resolved

    def _wait_for(self, request: PendingRequest, timeout: float | None) -> Any:
        if timeout is None:
            timeout = self._config.request_timeout
        deadline = None if timeout is None else time.monotonic() + timeout

        while not request.done():
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise ReplyTimeoutError(timeout)
            data = self._recv(remaining)
            if data is None:
                raise ReplyTimeoutError(timeout)
            try:
                self._feed(data)
            except Exception as e:
                if self._engine.closed:
                    raise
                # Sink error, deferred to the next call()
                if self._sink_error is None:
                    self._sink_error = e

        return request.result()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _fail(self, error: SSIPError) -> None:
        self._engine.fail(error)
        self._close_socket()

    def _close_socket(self) -> None:
        try:
            self._sock.close()
        except OSError:
            pass

    def quit(self) -> None:
        """Send QUIT and close the connection."""
        with self._lock:
            if self._engine.closed:
                return
            try:
                self.call(commands.quit())
            finally:
                self.close()

    def close(self) -> None:
        """Close the client connection."""
        with self._lock:
            if not self._engine.closed:
                logger.debug("Closing SSIP client")
            self._engine.close()
            self._close_socket()

    @contextmanager
    def block(self) -> Iterator[SSIPClient]:
        """
        Group the messages spoken inside the block into one unit.

        Example:
            >>> with client.block():
            ...     client.speak("First")
            ...     client.speak("Second")
        """
        self.block_begin()
        try:
            yield self
        finally:
            if not self._engine.closed:
                self.block_end()

    def __enter__(self) -> SSIPClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        if self._engine.closed:
            return
        try:
            self.quit()
        except SSIPError:
            self.close()


def connect(
    socket_path: str | None = None,
    *,
    host: str | None = None,
    port: int = 6560,
    application: str = "pyssip",
    component: str = "main",
    sink: NotificationSink | NotificationCallback | None = None,
    **kwargs: Any,
) -> SSIPClient:
    """
    Create and connect an SSIP client.

    This is the simplest way to talk to Speech Dispatcher. The client
    connects and announces its name on creation and can be used immediately.

    Args:
        socket_path: Unix socket of the server. When omitted, SPEECHD_ADDRESS
            and then $XDG_RUNTIME_DIR/speech-dispatcher/speechd.sock are used.
        host: TCP host, for servers started with an inet socket.
        port: TCP port (default: 6560).
        application: Application part of the client name.
        component: Component part of the client name.
        sink: Notification sink or callable.
        **kwargs: Additional configuration options.

    Returns:
        Connected SSIPClient instance.

    Raises:
        TransportError: If the connection fails.
        ServerError: If the server rejects the client name.

    Examples:
        # Default socket
        >>> client = connect()
        >>> client.speak("Hello!")

        # Explicit TCP server
        >>> client = connect(host="localhost", port=6560)

        # With notifications
        >>> client = connect(sink=lambda event: print(event.kind))
        >>> client.set_notification(NotificationType.ALL, True)
    """
    return SSIPClient(
        socket_path,
        host=host,
        port=port,
        application=application,
        component=component,
        sink=sink,
        **kwargs,
    )
