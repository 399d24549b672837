# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Reactive Streams support for pyssip.

Provides RxPY-based notification streams and a speaking operator, so event
handling can be composed with the usual reactive operators.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Callable, Sequence

import reactivex as rx
from reactivex import Observable, Subject, operators as ops
from reactivex.scheduler import ThreadPoolScheduler

from .exceptions import SSIPError
from .models import NotificationEvent
from .types import EventKind

if TYPE_CHECKING:
    from .client import SSIPClient


class ObservableSink:
    """
    Notification sink that pushes events to RxPY subscribers.

    Example:
        >>> sink = ObservableSink()
        >>> sink.events().pipe(
        ...     ops.filter(lambda e: e.kind is EventKind.END),
        ...     ops.map(lambda e: e.message),
        ... ).subscribe(on_next=lambda mid: print(f"finished {mid}"))
        >>> client = SSIPClient(sink=sink)
    """

    def __init__(self, scheduler: ThreadPoolScheduler | None = None) -> None:
        """
        Initialize observable sink.

        Args:
            scheduler: Scheduler subscribers are notified on. Without one,
                subscribers run inline on the thread feeding the engine.
        """
        self._subject: Subject[NotificationEvent] = Subject()
        self._scheduler = scheduler

    def deliver(self, event: NotificationEvent) -> None:
        self._subject.on_next(event)

    def events(self, *kinds: EventKind) -> Observable[NotificationEvent]:
        """
        Get observable stream of events.

        Args:
            *kinds: Only emit events of these kinds. All kinds when empty.

        Returns:
            Observable stream of NotificationEvent objects.
        """
        stream: Observable[NotificationEvent] = self._subject
        if kinds:
            wanted = frozenset(kinds)
            stream = stream.pipe(ops.filter(lambda e: e.kind in wanted))
        if self._scheduler is not None:
            stream = stream.pipe(ops.observe_on(self._scheduler))
        return stream

    def complete(self) -> None:
        """Signal the end of the stream to subscribers."""
        self._subject.on_completed()

    def error(self, error: Exception) -> None:
        """Terminate the stream with an error."""
        self._subject.on_error(error)


class ReactiveListener:
    """
    Background listener that polls a blocking client for notifications.

    The listener attaches an ObservableSink to the client and polls it on a
    daemon thread. Calls made on the client from other threads interleave
    with polling through the client lock.

    Example:
        >>> with ReactiveListener(client) as listener:
        ...     listener.events(EventKind.INDEX_MARK).subscribe(print)
        ...     client.speak("Hello <mark name='m1'/> world")
    """

    def __init__(
        self,
        client: SSIPClient,
        poll_interval_ms: int = 100,
        max_workers: int = 1,
        scheduler: ThreadPoolScheduler | None = None,
    ) -> None:
        """
        Initialize reactive listener.

        Args:
            client: Connected blocking client.
            poll_interval_ms: Longest time a single poll holds the client.
            max_workers: Threads used to notify subscribers.
            scheduler: Scheduler to notify subscribers on. The listener
                creates one with max_workers threads when omitted and
                shuts it down in stop(). A scheduler passed in is left
                running.
        """
        self._client = client
        self._poll_interval_ms = poll_interval_ms
        self._owns_scheduler = scheduler is None
        if scheduler is None:
            scheduler = ThreadPoolScheduler(max_workers=max_workers)
        self._scheduler = scheduler
        self._sink = ObservableSink(scheduler)
        self._running = False
        self._thread: threading.Thread | None = None

    @property
    def sink(self) -> ObservableSink:
        return self._sink

    def start(self) -> None:
        """Attach the sink and start polling."""
        if self._running:
            return

        self._running = True
        self._client.set_sink(self._sink)

        def poll_loop() -> None:
            while self._running:
                try:
                    self._client.poll(self._poll_interval_ms / 1000)
                except Exception as e:
                    self._running = False
                    self._sink.error(e)
                    return
            self._sink.complete()

        self._thread = threading.Thread(target=poll_loop, name="pyssip-listener", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """
        Stop polling and complete the stream.

        The listener cannot be started again afterwards.
        """
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        if self._owns_scheduler:
            # Queued notifications still run
            self._scheduler.executor.shutdown(wait=False)

    def events(self, *kinds: EventKind) -> Observable[NotificationEvent]:
        """Observable stream of events, optionally filtered by kind."""
        return self._sink.events(*kinds)

    def __enter__(self) -> ReactiveListener:
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()


def to_speaker(client: SSIPClient) -> Callable[[Observable[str | Sequence[str]]], Observable[int]]:
    """
    Create an operator that speaks every item and emits its message id.

    Example:
        >>> rx.of("one", "two").pipe(to_speaker(client)).subscribe(print)

    Args:
        client: Connected blocking client.

    Returns:
        Operator function for use with pipe().
    """

    def _speak(source: Observable[str | Sequence[str]]) -> Observable[int]:
        def subscribe(observer: Any, scheduler: Any = None) -> Any:
            def on_next(text: str | Sequence[str]) -> None:
                try:
                    observer.on_next(client.speak(text))
                except SSIPError as e:
                    observer.on_error(e)

            return source.subscribe(
                on_next=on_next,
                on_error=observer.on_error,
                on_completed=observer.on_completed,
                scheduler=scheduler,
            )

        return rx.create(subscribe)

    return _speak
