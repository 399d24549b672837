# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Notification sinks.

A sink receives every NotificationEvent decoded from the connection. The
protocol engine calls deliver() inline while it processes incoming bytes,
so a sink must not block unless it was explicitly configured to.

Example:
    >>> sink = QueueSink(maxsize=100, overflow=OverflowPolicy.DROP_OLDEST)
    >>> client = SSIPClient(sink=sink)
    >>> client.set_notification(NotificationType.ALL, True)
    >>> event = sink.get(timeout=1.0)
"""

from __future__ import annotations

import logging
import queue
from typing import Any, Callable, Protocol, runtime_checkable

from .exceptions import NotificationOverflow
from .models import NotificationEvent, OverflowPolicy

logger = logging.getLogger(__name__)

NotificationCallback = Callable[[NotificationEvent], Any]


@runtime_checkable
class NotificationSink(Protocol):
    """Anything that accepts notification events."""

    def deliver(self, event: NotificationEvent) -> None:
        ...


class CallbackSink:
    """
    Sink that calls a function for every event.

    Exceptions raised by the callback propagate to the caller feeding the
    engine once the rest of the received data has been processed.
    """

    def __init__(self, callback: NotificationCallback) -> None:
        self._callback = callback

    def deliver(self, event: NotificationEvent) -> None:
        self._callback(event)


class QueueSink:
    """
    Thread-safe queue of events with a bounded capacity.

    Args:
        maxsize: Capacity, 0 for unbounded.
        overflow: What to do when a bounded queue is full.
        block_timeout: Longest wait in seconds under OverflowPolicy.BLOCK,
            None to wait forever.
    """

    def __init__(
        self,
        maxsize: int = 0,
        overflow: OverflowPolicy = OverflowPolicy.DROP_OLDEST,
        block_timeout: float | None = None,
    ) -> None:
        if maxsize < 0:
            raise ValueError("maxsize must be >= 0")
        self._queue: queue.Queue[NotificationEvent] = queue.Queue(maxsize)
        self._maxsize = maxsize
        self._overflow = OverflowPolicy(overflow)
        self._block_timeout = block_timeout
        self.dropped = 0

    @property
    def maxsize(self) -> int:
        return self._maxsize

    @property
    def overflow(self) -> OverflowPolicy:
        return self._overflow

    def deliver(self, event: NotificationEvent) -> None:
        """
        Enqueue an event according to the overflow policy.

        Raises:
            NotificationOverflow: Under RAISE when full, or under BLOCK when
                the wait times out.
        """
        if self._overflow is OverflowPolicy.BLOCK:
            try:
                self._queue.put(event, timeout=self._block_timeout)
            except queue.Full:
                raise NotificationOverflow(self._maxsize) from None
            return

        while True:
            try:
                self._queue.put_nowait(event)
                return
            except queue.Full:
                if self._overflow is OverflowPolicy.RAISE:
                    raise NotificationOverflow(self._maxsize) from None
                self.dropped += 1
                if self._overflow is OverflowPolicy.DROP_NEWEST:
                    logger.debug("Notification queue full, dropping %s event", event.kind.value)
                    return
            # DROP_OLDEST: make room and retry
            try:
                old = self._queue.get_nowait()
                logger.debug("Notification queue full, dropping oldest %s event", old.kind.value)
            except queue.Empty:
                pass

    def get(self, timeout: float | None = None) -> NotificationEvent | None:
        """
        Remove and return the next event.

        Args:
            timeout: Seconds to wait, None to wait forever.

        Returns:
            The event, or None if none arrived in time.
        """
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def get_nowait(self) -> NotificationEvent | None:
        """Return the next event if one is queued."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> list[NotificationEvent]:
        """Remove and return every queued event."""
        events = []
        while True:
            event = self.get_nowait()
            if event is None:
                return events
            events.append(event)

    def qsize(self) -> int:
        return self._queue.qsize()

    def empty(self) -> bool:
        return self._queue.empty()

    def __len__(self) -> int:
        return self._queue.qsize()


def as_sink(target: NotificationSink | NotificationCallback | None) -> NotificationSink | None:
    """Wrap a plain callable as a CallbackSink."""
    if target is None or isinstance(target, NotificationSink):
        return target
    if callable(target):
        return CallbackSink(target)
    raise TypeError(f"Expected a notification sink or callable, got {type(target).__name__}")
