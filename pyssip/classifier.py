# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Separation of asynchronous events from synchronous replies."""

from __future__ import annotations

from typing import Mapping

from .codes import EVENT_KINDS, StatusClass
from .exceptions import ProtocolError
from .models import NotificationEvent
from .protocol import Reply
from .types import EventKind

# Fragments carried before the terminal line: message id, client id and,
# for index marks, the mark name.
_FRAGMENTS: dict[EventKind, int] = {
    EventKind.INDEX_MARK: 3,
    EventKind.BEGIN: 2,
    EventKind.END: 2,
    EventKind.CANCEL: 2,
    EventKind.PAUSE: 2,
    EventKind.RESUME: 2,
}


class NotificationClassifier:
    """
    Routes framed records to the request path or the notification path.

    Args:
        event_kinds: Event code to kind table. Codes of the event class that
            are missing from it are rejected.
    """

    def __init__(self, event_kinds: Mapping[int, EventKind] = EVENT_KINDS) -> None:
        self._event_kinds = dict(event_kinds)

    def classify(self, reply: Reply) -> Reply | NotificationEvent:
        """
        Classify one record.

        Returns:
            The reply unchanged, or the decoded event.

        Raises:
            ProtocolError: If an event code is unknown or has the wrong
                number of fragments.
        """
        if reply.status_class is not StatusClass.EVENT:
            return reply

        kind = self._event_kinds.get(reply.code)
        if kind is None:
            raise ProtocolError(f"Unknown event code {reply.code}", str(reply))

        expected = _FRAGMENTS[kind]
        fragments = reply.data
        if len(fragments) != expected:
            raise ProtocolError(
                f"Event {reply.code} carries {len(fragments)} fragment(s), expected {expected}",
                str(reply),
            )

        return NotificationEvent(
            kind=kind,
            message_id=fragments[0],
            client_id=fragments[1],
            mark_name=fragments[2] if kind is EventKind.INDEX_MARK else None,
        )
