# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
SSIP protocol state machine.

SSIPProtocol sequences requests and replies on one connection without doing
any I/O. The caller moves bytes in both directions:

    engine = SSIPProtocol(sink=QueueSink())
    request = engine.submit(commands.get_rate())
    sock.sendall(engine.drain())
    while not request.done():
        engine.feed(sock.recv(4096))
    rate = request.result()

States:
    IDLE               no request outstanding, submit() is allowed
    PENDING_REPLY      one request awaits its reply (or 230 for SPEAK)
    SENDING_DATA_BLOCK the SPEAK body is queued but not yet drained
    CLOSED             terminal, nothing is accepted

Replies are matched to requests purely by order, so at most one request may
be outstanding. Notifications are routed to the sink in every state except
CLOSED and never change the state.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from .classifier import NotificationClassifier
from .codes import ReturnCode
from .commands import Command, ReplyKind
from .exceptions import (
    ConnectionClosedError,
    InvalidReplyError,
    ProtocolError,
    RequestPendingError,
    ServerError,
    SSIPError,
)
from .models import HistoryClientStatus, NotificationEvent, StatusLine, SynthesisVoice
from .protocol import Reply, ResponseParser
from .sinks import NotificationCallback, NotificationSink, as_sink

logger = logging.getLogger(__name__)


class ClientState(str, Enum):
    """State of the protocol engine."""

    IDLE = "idle"
    PENDING_REPLY = "pending_reply"
    SENDING_DATA_BLOCK = "sending_data_block"
    CLOSED = "closed"


class PendingRequest:
    """
    Future representing a submitted command.

    Resolved by the engine when the matching reply is fed, or failed when
    the engine closes first.
    """

    def __init__(self, command: Command) -> None:
        self.command = command
        self._done = False
        self._result: Any = None
        self._error: BaseException | None = None
        self._callbacks: list[Callable[[PendingRequest], Any]] = []

    def _set_result(self, result: Any) -> None:
        if self._done:
            return
        self._result = result
        self._done = True
        self._run_callbacks()

    def _set_error(self, error: BaseException) -> None:
        if self._done:
            return
        self._error = error
        self._done = True
        self._run_callbacks()

    def _run_callbacks(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    def done(self) -> bool:
        """Check if the request is resolved."""
        return self._done

    def succeeded(self) -> bool:
        """Check if the request resolved with a result."""
        return self._done and self._error is None

    def result(self) -> Any:
        """
        Return the decoded reply.

        Raises:
            RuntimeError: If the request is not resolved yet.
            SSIPError: The error the request resolved with.
        """
        if not self._done:
            raise RuntimeError(f"Request {self.command} has not been answered yet")
        if self._error is not None:
            raise self._error
        return self._result

    def exception(self) -> BaseException | None:
        """Return the error the request resolved with, if any."""
        if not self._done:
            raise RuntimeError(f"Request {self.command} has not been answered yet")
        return self._error

    def add_done_callback(self, callback: Callable[[PendingRequest], Any]) -> None:
        """Call callback(request) on resolution, immediately if already resolved."""
        if self._done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def __repr__(self) -> str:
        status = "done" if self._done else "pending"
        return f"<PendingRequest {self.command} {status}>"


# ============================================================================
# Reply decoding
# ============================================================================


def _single(reply: Reply) -> str:
    body = reply.body
    if len(body) != 1:
        raise InvalidReplyError(
            f"Expected a single value in reply {reply.code}, got {len(body)} line(s)",
            reply.code,
            reply.lines,
        )
    return body[0]


def _decode_status(reply: Reply) -> StatusLine:
    return StatusLine(code=reply.code, message=reply.message)


def _decode_message_id(reply: Reply) -> int:
    value = _single(reply)
    if not value.isdigit():
        raise InvalidReplyError(f"Invalid message id: {value!r}", reply.code, reply.lines)
    return int(value)


def _decode_integer(reply: Reply) -> int:
    value = _single(reply)
    try:
        return int(value)
    except ValueError:
        raise InvalidReplyError(f"Invalid integer: {value!r}", reply.code, reply.lines) from None


def _decode_records(parse: Callable[[str], Any]) -> Callable[[Reply], list[Any]]:
    def decode(reply: Reply) -> list[Any]:
        try:
            return [parse(line) for line in reply.body]
        except ValueError as e:
            raise InvalidReplyError(f"Invalid record in reply {reply.code}: {e}", reply.code, reply.lines) from e

    return decode


_DECODERS: dict[ReplyKind, Callable[[Reply], Any]] = {
    ReplyKind.STATUS: _decode_status,
    ReplyKind.MESSAGE_ID: _decode_message_id,
    ReplyKind.STRING: _single,
    ReplyKind.INTEGER: _decode_integer,
    ReplyKind.LINES: lambda reply: reply.body,
    ReplyKind.VOICES: _decode_records(SynthesisVoice.from_line),
    ReplyKind.HISTORY_CLIENTS: _decode_records(HistoryClientStatus.from_line),
}


def decode_reply(kind: ReplyKind, reply: Reply) -> Any:
    """
    Decode a success reply for a command of the given kind.

    Raises:
        InvalidReplyError: If the reply body does not fit the kind.
    """
    return _DECODERS[kind](reply)


# ============================================================================
# Engine
# ============================================================================


class SSIPProtocol:
    """
    Sans-I/O SSIP client engine.

    Args:
        sink: Receiver of notification events, or a plain callable.
        classifier: Reply/event classifier, built from the default event
            table when omitted.

    The engine is not thread-safe. Adapters serialise access to it.
    """

    def __init__(
        self,
        sink: NotificationSink | NotificationCallback | None = None,
        *,
        classifier: NotificationClassifier | None = None,
    ) -> None:
        self._parser = ResponseParser()
        self._classifier = classifier or NotificationClassifier()
        self._sink = as_sink(sink)
        self._state = ClientState.IDLE
        self._pending: PendingRequest | None = None
        self._awaiting_data = False
        self._output = bytearray()
        self._data_remaining = 0
        self.protocol_errors = 0

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def pending(self) -> PendingRequest | None:
        """The outstanding request, if any."""
        return self._pending

    @property
    def closed(self) -> bool:
        return self._state is ClientState.CLOSED

    @property
    def has_output(self) -> bool:
        """Check if bytes are waiting to be written."""
        return bool(self._output)

    @property
    def sink(self) -> NotificationSink | None:
        return self._sink

    def set_sink(self, sink: NotificationSink | NotificationCallback | None) -> None:
        """Attach the notification sink, replacing any previous one."""
        self._sink = as_sink(sink)

    # -------------------------------------------------------------------------
    # Outgoing
    # -------------------------------------------------------------------------

    def submit(self, command: Command) -> PendingRequest:
        """
        Queue a command for sending.

        Args:
            command: A command built by pyssip.commands.

        Returns:
            The request, resolved once its reply is fed.

        Raises:
            ConnectionClosedError: If the engine is closed.
            RequestPendingError: If another request awaits its reply.
        """
        if self._state is ClientState.CLOSED:
            raise ConnectionClosedError("Connection is closed")
        if self._pending is not None:
            raise RequestPendingError(str(self._pending.command))

        request = PendingRequest(command)
        self._output += command.encode_line()
        self._pending = request
        self._awaiting_data = command.has_data
        logger.debug("SSIP(out): %s", command.line)
        self._transition(ClientState.PENDING_REPLY)
        return request

    def pending_output(self) -> bytes:
        """Return the queued bytes without consuming them."""
        return bytes(self._output)

    def drain(self, max_bytes: int | None = None) -> bytes:
        """
        Take queued bytes for writing.

        Args:
            max_bytes: Upper bound on the returned size, None for everything.

        Returns:
            Bytes the caller must write, in order.
        """
        if max_bytes is None or max_bytes >= len(self._output):
            chunk = bytes(self._output)
            self._output.clear()
        else:
            chunk = bytes(self._output[:max_bytes])
            del self._output[:max_bytes]

        if self._state is ClientState.SENDING_DATA_BLOCK:
            self._data_remaining -= len(chunk)
            if self._data_remaining <= 0:
                self._data_remaining = 0
                self._transition(ClientState.PENDING_REPLY)
        return chunk

    # -------------------------------------------------------------------------
    # Incoming
    # -------------------------------------------------------------------------

    def feed(self, data: bytes) -> list[PendingRequest]:
        """
        Consume bytes read from the connection.

        Args:
            data: Any chunk of the incoming stream.

        Returns:
            Requests resolved by this data, in order.

        Raises:
            ProtocolError: If a reply arrived with no request outstanding.
                The engine is closed.
            Exception: The first error raised by the notification sink,
                such as NotificationOverflow. Raised after the whole chunk
                is processed, so replies in the same chunk still resolve.
        """
        if self._state is ClientState.CLOSED:
            if data:
                logger.debug("Ignoring %d byte(s) received after close", len(data))
            return []

        resolved: list[PendingRequest] = []
        sink_error: Exception | None = None

        for record in self._parser.feed(data):
            if isinstance(record, ProtocolError):
                self._report(record)
                continue

            logger.debug("SSIP(in): %s", "|".join(f"{record.code} {line}" for line in record.lines))
            try:
                item = self._classifier.classify(record)
            except ProtocolError as e:
                self._report(e)
                continue

            if isinstance(item, NotificationEvent):
                try:
                    self._dispatch(item)
                except Exception as e:
                    if sink_error is None:
                        sink_error = e
                    else:
                        logger.warning("Notification sink failed again: %s", e)
                continue

            request = self._on_reply(item)
            if request is not None:
                resolved.append(request)

        if sink_error is not None:
            raise sink_error
        return resolved

    def _on_reply(self, reply: Reply) -> PendingRequest | None:
        request = self._pending
        if self._state is not ClientState.PENDING_REPLY or request is None:
            error = ProtocolError(f"Unexpected reply in state {self._state.value}: {reply}", str(reply))
            self.fail(error)
            raise error

        if self._awaiting_data and not reply.is_error:
            if reply.code == ReturnCode.OK_RECEIVING_DATA:
                self._awaiting_data = False
                data = request.command.encode_data()
                self._output += data
                self._data_remaining = len(self._output)
                logger.debug("SSIP(out): <%d line(s) of data>", len(request.command.data or ()))
                self._transition(ClientState.SENDING_DATA_BLOCK)
                return None
            return self._resolve(request, error=InvalidReplyError(
                f"Expected {int(ReturnCode.OK_RECEIVING_DATA)} before data, got {reply}",
                reply.code,
                reply.lines,
            ))

        if reply.is_error:
            return self._resolve(request, error=ServerError(reply.code, reply.message))
        try:
            value = decode_reply(request.command.reply, reply)
        except InvalidReplyError as e:
            return self._resolve(request, error=e)
        return self._resolve(request, value=value)

    def _resolve(
        self,
        request: PendingRequest,
        value: Any = None,
        error: SSIPError | None = None,
    ) -> PendingRequest:
        self._pending = None
        self._awaiting_data = False
        self._transition(ClientState.IDLE)
        if error is not None:
            request._set_error(error)
        else:
            request._set_result(value)
        return request

    def _dispatch(self, event: NotificationEvent) -> None:
        if self._sink is None:
            logger.debug("Dropping %s event for message %s: no sink attached", event.kind.value, event.message_id)
            return
        self._sink.deliver(event)

    def _report(self, error: ProtocolError) -> None:
        self.protocol_errors += 1
        logger.warning("Skipping malformed input: %s", error)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self, error: BaseException | None = None) -> None:
        """
        Move to CLOSED, failing the outstanding request.

        Args:
            error: Error given to the pending request, ConnectionClosedError
                when omitted.
        """
        if self._state is ClientState.CLOSED:
            return
        request, self._pending = self._pending, None
        self._awaiting_data = False
        self._output.clear()
        self._data_remaining = 0
        self._parser.reset()
        self._transition(ClientState.CLOSED)
        if request is not None:
            request._set_error(error if error is not None else ConnectionClosedError())

    def fail(self, error: BaseException) -> None:
        """Close after a transport or protocol failure."""
        if self._state is not ClientState.CLOSED:
            logger.warning("Closing SSIP connection: %s", error)
        self.close(error)

    def _transition(self, state: ClientState) -> None:
        if state is not self._state:
            logger.debug("SSIP state %s -> %s", self._state.value, state.value)
            self._state = state
