# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
pyssip - Python client for Speech Dispatcher.

Speaks SSIP, the Speech Synthesis Interface Protocol, with support for:
- Blocking, poll-driven and asyncio clients over one sans-I/O engine
- Typed replies for every command family
- Notification events (begin, end, index marks...) delivered to queues,
  callbacks or reactive streams
- Unix socket and TCP connections

Quick Start (Simplest):
    >>> from pyssip import connect
    >>>
    >>> # Connect and use immediately
    >>> client = connect()
    >>> message_id = client.speak("Hello, world!")

Context Manager (Recommended for applications):
    >>> from pyssip import connect, VoiceType
    >>>
    >>> with connect() as client:
    ...     client.set_voice(VoiceType.FEMALE1)
    ...     client.set_rate(20)
    ...     client.speak("Hello!")
    # QUIT is sent when exiting the block

Notifications:
    >>> from pyssip import connect, NotificationType, QueueSink
    >>>
    >>> events = QueueSink(maxsize=100)
    >>> client = connect(sink=events)
    >>> client.set_notification(NotificationType.ALL, True)
    >>> client.speak("Hello")
    >>> client.poll(1.0)
    >>> print(events.get_nowait())

asyncio:
    >>> from pyssip import AsyncSSIPClient
    >>>
    >>> async with await AsyncSSIPClient.connect() as client:
    ...     voices = await client.list_synthesis_voices()

Sans-I/O engine (bring your own transport):
    >>> from pyssip import SSIPProtocol, commands
    >>>
    >>> engine = SSIPProtocol()
    >>> request = engine.submit(commands.get_rate())
    >>> engine.drain()
    b'GET RATE\\r\\n'
    >>> resolved = engine.feed(b"251-20\\r\\n251 OK GET RETURNED\\r\\n")
    >>> request.result()
    20
"""

from . import commands
from .aio import AsyncSSIPClient
from .classifier import NotificationClassifier
from .client import SSIPClient, connect, open_socket
from .codes import EVENT_KINDS, MEANINGS, ReturnCode, StatusClass, status_class
from .commands import Command, ReplyKind
from .engine import ClientState, PendingRequest, SSIPProtocol, decode_reply
from .exceptions import (
    ConnectionClosedError,
    EncodingError,
    InvalidReplyError,
    NotificationOverflow,
    ProtocolError,
    ReplyTimeoutError,
    RequestPendingError,
    ServerError,
    SSIPError,
    TransportError,
)
from .models import (
    ClientConfig,
    ClientName,
    HistoryClientStatus,
    NotificationEvent,
    OverflowPolicy,
    StatusLine,
    SynthesisVoice,
)
from .protocol import MAX_LINE_LENGTH, Reply, ResponseParser
from .queued import QueuedClient
from .reactive import ObservableSink, ReactiveListener, to_speaker
from .sinks import CallbackSink, NotificationSink, QueueSink
from .types import (
    CapitalLettersMode,
    CursorDirection,
    CursorPosition,
    EventKind,
    KeyName,
    MessageType,
    NotificationType,
    Priority,
    PunctuationMode,
    Scope,
    SortDirection,
    SortKey,
    VoiceType,
)

__version__ = "0.1.0"
__author__ = "Firefly Software Solutions Inc."
__license__ = "Apache-2.0"

__all__ = [
    # Clients
    "SSIPClient",
    "AsyncSSIPClient",
    "QueuedClient",
    "connect",
    "open_socket",
    # Engine
    "SSIPProtocol",
    "ClientState",
    "PendingRequest",
    "decode_reply",
    # Commands
    "commands",
    "Command",
    "ReplyKind",
    # Framing
    "Reply",
    "ResponseParser",
    "MAX_LINE_LENGTH",
    "NotificationClassifier",
    # Status codes
    "ReturnCode",
    "StatusClass",
    "EVENT_KINDS",
    "MEANINGS",
    "status_class",
    # Sinks
    "NotificationSink",
    "CallbackSink",
    "QueueSink",
    "ObservableSink",
    "ReactiveListener",
    "to_speaker",
    # Configuration
    "ClientConfig",
    "OverflowPolicy",
    # Types (Pydantic models)
    "ClientName",
    "StatusLine",
    "SynthesisVoice",
    "HistoryClientStatus",
    "NotificationEvent",
    # Parameters
    "Scope",
    "Priority",
    "PunctuationMode",
    "CapitalLettersMode",
    "NotificationType",
    "EventKind",
    "VoiceType",
    "KeyName",
    "CursorDirection",
    "CursorPosition",
    "SortDirection",
    "SortKey",
    "MessageType",
    # Exceptions
    "SSIPError",
    "EncodingError",
    "TransportError",
    "ConnectionClosedError",
    "ReplyTimeoutError",
    "ProtocolError",
    "InvalidReplyError",
    "ServerError",
    "RequestPendingError",
    "NotificationOverflow",
]
