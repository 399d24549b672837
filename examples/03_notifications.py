#!/usr/bin/env python3
"""
03_notifications.py - Notifications and Index Marks

This example demonstrates:
- Enabling event notifications
- Reading events from a bounded QueueSink
- Reacting to index marks with a ReactiveListener
- Filtering event streams by kind

Events are sent by the server while messages are spoken. They arrive in
between replies, so the client has to read the socket for them: either
with poll() or with a listener thread.

Prerequisites:
    - Speech Dispatcher running
    - pyssip installed

Run with:
    python 03_notifications.py
"""

import threading

from pyssip import (
    EventKind,
    NotificationType,
    OverflowPolicy,
    QueueSink,
    ReactiveListener,
    SSIPClient,
)


def queue_example():
    """Poll for events into a queue"""
    print("Queue Example")
    print("-" * 50)

    events = QueueSink(maxsize=100, overflow=OverflowPolicy.DROP_OLDEST)
    with SSIPClient(application="notifications", sink=events) as client:
        client.set_notification(NotificationType.ALL, True)
        message_id = client.speak("Counting one, two, three.")

        finished = False
        while not finished:
            client.poll(0.5)
            for event in events.drain():
                print(f"  {event.kind.value:<10} message={event.message_id}")
                if event.message == message_id and event.kind in (EventKind.END, EventKind.CANCEL):
                    finished = True

    print(f"Dropped events: {events.dropped}")


def reactive_example():
    """Subscribe to index marks"""
    print("\nReactive Example")
    print("-" * 50)

    done = threading.Event()
    with SSIPClient(application="notifications") as client:
        with ReactiveListener(client) as listener:
            listener.events(EventKind.INDEX_MARK).subscribe(
                lambda e: print(f"  reached mark {e.mark_name}")
            )
            listener.events(EventKind.END, EventKind.CANCEL).subscribe(lambda e: done.set())

            client.set_notification(NotificationType.INDEX_MARK, True)
            client.set_notification(NotificationType.END, True)
            client.set_notification(NotificationType.CANCEL, True)
            client.set_ssml_mode(True)
            client.speak('<speak>First <mark name="one"/> second <mark name="two"/> done.</speak>')

            done.wait(30)


if __name__ == "__main__":
    queue_example()
    reactive_example()
