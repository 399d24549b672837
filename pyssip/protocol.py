# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
SSIP response framing.

Reply Format:
    DDD-fragment\\r\\n      (zero or more, same code)
    DDD terminal text\\r\\n  (exactly one)

Line Fields:
    - Code (3 digits): status code, the leading digit selects the class
    - Separator (1 byte): '-' for a fragment, ' ' for the terminal line
    - Text: the rest of the line, possibly empty

Events (7xx) use the same shape and may arrive between any two lines of a
reply, so they are accumulated on a separate track:

    701-<message id>\\r\\n
    701-<client id>\\r\\n
    701 BEGIN\\r\\n

The parser is incremental. Chunk boundaries may fall anywhere, including
inside a code or between CR and LF. Malformed lines are reported as
ProtocolError records in the output and parsing continues.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .codes import MEANINGS, StatusClass, status_class
from .exceptions import ProtocolError

# Longest line accepted before a terminator must appear.
MAX_LINE_LENGTH: int = 64 * 1024

_LINE = re.compile(r"([0-9]{3})(?:([ -])(.*))?", re.DOTALL)
_STATUS_WORDS = ("OK", "ERR")


@dataclass(frozen=True)
class Reply:
    """
    A complete framed reply or event.

    Attributes:
        code: Status code shared by every line.
        lines: Line texts without code and separator, terminal line last.
    """

    code: int
    lines: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        """Text of the terminal line."""
        return self.lines[-1] if self.lines else ""

    @property
    def data(self) -> tuple[str, ...]:
        """Texts of the fragment lines."""
        return self.lines[:-1]

    @property
    def status_class(self) -> StatusClass:
        """Class of the status code."""
        return status_class(self.code)

    @property
    def is_error(self) -> bool:
        """Check if the reply reports a server or client error."""
        return self.status_class in (StatusClass.SERVER_ERROR, StatusClass.CLIENT_ERROR)

    @property
    def is_event(self) -> bool:
        """Check if this is an asynchronous notification."""
        return self.status_class is StatusClass.EVENT

    @property
    def body(self) -> list[str]:
        """
        Content lines of the reply.

        The fragments are always content. The terminal line is content too,
        unless it reads as a status line: empty, starting with OK or ERR, or
        equal to the known meaning of the code.
        """
        body = list(self.data)
        if not _is_status_text(self.code, self.message):
            body.append(self.message)
        return body

    def __str__(self) -> str:
        return f"{self.code} {self.message}"


def _is_status_text(code: int, text: str) -> bool:
    if not text:
        return True
    if text.split(" ", 1)[0] in _STATUS_WORDS:
        return True
    return MEANINGS.get(code) == text


@dataclass
class _Track:
    """Fragments buffered for one reply or event."""

    code: int | None = None
    lines: list[str] = field(default_factory=list)

    def clear(self) -> None:
        self.code = None
        self.lines = []


class ResponseParser:
    """
    Incremental decoder from bytes to Reply records.

    Example:
        >>> parser = ResponseParser()
        >>> parser.feed(b"208 OK CLIENT NAME SET\\r")
        []
        >>> parser.feed(b"\\n")
        [Reply(code=208, lines=('OK CLIENT NAME SET',))]
    """

    def __init__(self, max_line_length: int = MAX_LINE_LENGTH) -> None:
        self._max_line_length = max_line_length
        self._buffer = bytearray()
        self._reply = _Track()
        self._event = _Track()
        self._discarding = False

    @property
    def has_partial(self) -> bool:
        """Check if an incomplete line or reply is buffered."""
        return bool(self._buffer) or self._reply.code is not None or self._event.code is not None

    def reset(self) -> None:
        """Drop all buffered bytes and fragments."""
        self._buffer.clear()
        self._reply.clear()
        self._event.clear()
        self._discarding = False

    def feed(self, data: bytes) -> list[Reply | ProtocolError]:
        """
        Consume a chunk of bytes.

        Args:
            data: Bytes read from the connection, possibly empty.

        Returns:
            Completed replies and events, with ProtocolError records for
            malformed lines, in wire order.
        """
        self._buffer += data
        records: list[Reply | ProtocolError] = []

        while True:
            end = self._buffer.find(b"\n")
            if end < 0:
                if len(self._buffer) > self._max_line_length:
                    if not self._discarding:
                        records.append(ProtocolError(
                            f"Line exceeds {self._max_line_length} bytes without a terminator",
                            bytes(self._buffer[:80]).decode("utf-8", errors="replace"),
                        ))
                    self._discarding = True
                    self._buffer.clear()
                break

            raw = bytes(self._buffer[:end])
            del self._buffer[: end + 1]
            if self._discarding:
                self._discarding = False
                continue
            if raw.endswith(b"\r"):
                raw = raw[:-1]
            if len(raw) > self._max_line_length:
                records.append(ProtocolError(
                    f"Line exceeds {self._max_line_length} bytes",
                    raw[:80].decode("utf-8", errors="replace"),
                ))
                continue

            self._parse_line(raw.decode("utf-8", errors="replace"), records)

        return records

    def _parse_line(self, line: str, records: list[Reply | ProtocolError]) -> None:
        match = _LINE.fullmatch(line)
        if match is None:
            records.append(ProtocolError(f"Malformed line: {line!r}", line))
            return

        code = int(match.group(1))
        try:
            klass = status_class(code)
        except ValueError:
            records.append(ProtocolError(f"Invalid status code in line: {line!r}", line))
            return

        track = self._event if klass is StatusClass.EVENT else self._reply
        if track.code is not None and track.code != code:
            records.append(ProtocolError(
                f"Code {code} interrupts reply {track.code}; {len(track.lines)} fragment(s) dropped",
                line,
            ))
            track.clear()

        text = match.group(3) or ""
        track.code = code
        track.lines.append(text)

        if match.group(2) != "-":
            records.append(Reply(code, tuple(track.lines)))
            track.clear()
