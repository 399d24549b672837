# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Custom exceptions for the pyssip SDK.

All exceptions inherit from SSIPError, making it easy to catch every
SSIP-related error with a single except clause:

    try:
        client.speak("Hello")
    except SSIPError as e:
        print(f"SSIP error: {e}")

For more granular error handling, catch specific exception types:

    try:
        client.set_rate(10)
    except ServerError as e:
        print(f"Server refused with {e.code}: {e.message}")
    except TransportError as e:
        print(f"Connection lost: {e}")

Errors fall in two groups. Recoverable errors (EncodingError, ServerError,
InvalidReplyError, ReplyTimeoutError, RequestPendingError) leave the
connection usable. Fatal errors (TransportError, ProtocolError raised by the
engine) mean the connection must be discarded.
"""

from __future__ import annotations

from typing import Any

from .codes import StatusClass, status_class


class SSIPError(Exception):
    """
    Base exception for all pyssip errors.

    All pyssip exceptions inherit from this class, allowing you to catch
    all SSIP-related errors with a single except clause.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        self.hint = hint
        if hint:
            message = f"{message}\n\n  Hint: {hint}"
        super().__init__(message)


class EncodingError(SSIPError):
    """
    Raised when a request cannot be encoded.

    The error is purely local: no bytes were produced and the connection
    state is unchanged. Common causes:
    - A value outside the accepted set (e.g. a rate above 100)
    - An embedded line terminator that would break framing
    - An empty text payload
    """

    def __init__(self, message: str, parameter: str | None = None, value: Any = None) -> None:
        self.parameter = parameter
        self.value = value
        super().__init__(message)


class TransportError(SSIPError):
    """
    Raised when the underlying byte stream fails.

    The connection is presumed dead and the protocol engine is closed.
    Common causes:
    - Speech Dispatcher is not running
    - Wrong socket path or address
    - The server closed the connection
    """

    def __init__(
        self,
        message: str,
        address: Any = None,
        *,
        hint: str | None = None,
    ) -> None:
        self.address = address
        if hint is None and address:
            hint = f"Check that Speech Dispatcher is listening on {address}"
        super().__init__(message, hint=hint)


class ConnectionClosedError(TransportError):
    """
    Raised when the connection is closed.

    This typically happens when:
    - The server shut down or dropped the client
    - QUIT was sent
    - The client was closed explicitly
    """

    def __init__(self, message: str = "Connection closed by server") -> None:
        super().__init__(message, hint="Open a new connection; commands are never replayed automatically.")


class ReplyTimeoutError(SSIPError):
    """
    Raised when a caller stops waiting for a reply.

    The request is still outstanding. No new command may be submitted until
    the stale reply has been consumed or the connection is closed.
    """

    def __init__(self, timeout: float | None) -> None:
        self.timeout = timeout
        super().__init__(
            f"No reply received within {timeout}s",
            hint="Call wait() to consume the pending reply, or close the client",
        )


class ProtocolError(SSIPError):
    """
    Raised when the byte stream does not follow the protocol.

    Either a line could not be parsed, or a reply arrived while no request
    was outstanding. The latter means the connection is desynchronized and
    must be discarded.
    """

    def __init__(self, message: str, line: str | None = None) -> None:
        self.line = line
        super().__init__(message)


class InvalidReplyError(ProtocolError):
    """
    Raised when a well-framed reply cannot be decoded for its command.

    Only the request the reply belongs to fails; framing is intact and the
    connection stays usable.
    """

    def __init__(self, message: str, code: int | None = None, lines: tuple[str, ...] = ()) -> None:
        self.code = code
        self.lines = lines
        super().__init__(message)


class ServerError(SSIPError):
    """
    Raised when the server answers with an error-class status code.

    This is recoverable: the caller may issue a corrected or retried
    command on the same connection.
    """

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code} {message}")

    @property
    def status_class(self) -> StatusClass:
        """Class of the status code."""
        return status_class(self.code)

    @property
    def is_client_error(self) -> bool:
        """Check if the request itself was rejected (4xx, 5xx)."""
        return self.status_class is StatusClass.CLIENT_ERROR

    @property
    def is_server_error(self) -> bool:
        """Check if the server failed to carry out a valid request (3xx)."""
        return self.status_class is StatusClass.SERVER_ERROR


class RequestPendingError(SSIPError):
    """
    Raised when a command is submitted while another awaits its reply.

    Nothing was written. Replies are matched to requests by order, so only
    one request may be outstanding per connection.
    """

    def __init__(self, pending: str | None = None) -> None:
        self.pending = pending
        msg = "A request is already awaiting its reply"
        if pending:
            msg += f": {pending}"
        super().__init__(msg, hint="Wait for the pending reply before sending another command")


class NotificationOverflow(SSIPError):
    """
    Raised by a notification sink whose capacity is exhausted.

    Only sinks using the RAISE overflow policy raise it, and BLOCK sinks whose
    wait timed out.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(
            f"Notification queue is full ({capacity} events)",
            hint="Consume events faster, enlarge the queue, or choose a dropping overflow policy",
        )
