# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
SSIP command encoding.

Every request is a single CRLF-terminated command line:

    VERB [PARAM ...]\\r\\n

SPEAK additionally carries a data block, sent once the server answers
230 OK RECEIVING DATA:

    line 1\\r\\n
    ..line starting with a dot\\r\\n
    .\\r\\n

Commands are built only through the constructors in this module. Each one
validates its parameters and raises EncodingError before any bytes exist,
so a rejected command never reaches the wire.

Example:
    >>> cmd = set_voice(VoiceType.FEMALE1)
    >>> cmd.encode()
    b'SET SELF VOICE female1\\r\\n'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence, TypeVar

from .exceptions import EncodingError
from .models import ClientName
from .types import (
    CapitalLettersMode,
    ClientScope,
    CursorDirection,
    CursorPosition,
    KeyName,
    MessageScope,
    MessageType,
    NotificationType,
    Priority,
    PunctuationMode,
    Scope,
    SortDirection,
    SortKey,
    VoiceType,
)

CRLF = b"\r\n"
END_OF_DATA = b".\r\n"

# Inclusive bounds of the numeric voice parameters.
LEVEL_MIN = -100
LEVEL_MAX = 100

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_FORBIDDEN = ("\r", "\n", "\0")

E = TypeVar("E", bound=Enum)


class ReplyKind(str, Enum):
    """How the reply to a command is decoded."""

    STATUS = "status"
    MESSAGE_ID = "message_id"
    STRING = "string"
    INTEGER = "integer"
    LINES = "lines"
    VOICES = "voices"
    HISTORY_CLIENTS = "history_clients"


@dataclass(frozen=True)
class Command:
    """
    A validated SSIP request.

    Attributes:
        verb: Command keyword, e.g. "SET" or "SPEAK".
        params: Rendered parameters, in wire order.
        data: Payload lines for data commands, None otherwise.
        reply: How the final reply is decoded.
    """

    verb: str
    params: tuple[str, ...] = ()
    data: tuple[str, ...] | None = None
    reply: ReplyKind = ReplyKind.STATUS

    @property
    def has_data(self) -> bool:
        """Check if the command carries a data block."""
        return self.data is not None

    @property
    def line(self) -> str:
        """Command line without terminator."""
        return " ".join((self.verb, *self.params))

    def encode_line(self) -> bytes:
        """Encode the command line."""
        return self.line.encode("utf-8") + CRLF

    def encode_data(self) -> bytes:
        """
        Encode the data block with its terminator.

        Raises:
            EncodingError: If the command carries no data.
        """
        if self.data is None:
            raise EncodingError(f"{self.verb} carries no data block", "data")
        return encode_data_block(self.data)

    def encode(self) -> bytes:
        """Encode the command line, followed by the data block if any."""
        if self.data is None:
            return self.encode_line()
        return self.encode_line() + self.encode_data()

    def __str__(self) -> str:
        if self.data is None:
            return self.line
        return f"{self.line} <{len(self.data)} lines>"


# ============================================================================
# Data blocks
# ============================================================================


def dot_stuff(line: str) -> str:
    """Escape a body line that would be read as the end-of-data marker."""
    return "." + line if line.startswith(".") else line


def dot_unstuff(line: str) -> str:
    """Reverse dot_stuff."""
    return line[1:] if line.startswith("..") else line


def encode_data_block(lines: Iterable[str]) -> bytes:
    """
    Encode payload lines as a dot-stuffed data block.

    Args:
        lines: Body lines without terminators.

    Returns:
        The block, terminated by a line holding a single dot.
    """
    out = bytearray()
    for line in lines:
        out += dot_stuff(line).encode("utf-8")
        out += CRLF
    out += END_OF_DATA
    return bytes(out)


def decode_data_block(data: bytes) -> list[str]:
    """
    Decode a data block back into body lines.

    Args:
        data: Bytes up to and including the end-of-data line.

    Returns:
        The unstuffed body lines.

    Raises:
        ValueError: If the block is not terminated.
    """
    lines = data.decode("utf-8").split("\r\n")
    if len(lines) < 2 or lines[-1] != "" or lines[-2] != ".":
        raise ValueError("Data block is not terminated by a single dot line")
    return [dot_unstuff(line) for line in lines[:-2]]


# ============================================================================
# Parameter validation
# ============================================================================


def _check_text(value: object, parameter: str) -> str:
    if not isinstance(value, str):
        raise EncodingError(f"{parameter} must be a string, got {type(value).__name__}", parameter, value)
    if not value:
        raise EncodingError(f"{parameter} must not be empty", parameter, value)
    if any(c in value for c in _FORBIDDEN):
        raise EncodingError(f"{parameter} must not contain line terminators or NUL", parameter, value)
    return value


def _word(value: object, parameter: str) -> str:
    """A single UTF-8 token."""
    text = _check_text(value, parameter)
    if any(c.isspace() for c in text):
        raise EncodingError(f"{parameter} must be a single word", parameter, value)
    return text


def _token(value: object, parameter: str) -> str:
    """A single 7-bit token."""
    text = _word(value, parameter)
    if not text.isascii():
        raise EncodingError(f"{parameter} must be ASCII", parameter, value)
    return text


def _keyword(value: object, enum_cls: type[E], parameter: str) -> str:
    if isinstance(value, enum_cls):
        return value.value
    if isinstance(value, str):
        try:
            return enum_cls(value).value
        except ValueError:
            pass
    choices = ", ".join(member.value for member in enum_cls)
    raise EncodingError(f"Invalid {parameter} {value!r}, expected one of: {choices}", parameter, value)


def _number(value: object, parameter: str, minimum: int | None = None, maximum: int | None = None) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"{parameter} must be an integer, got {value!r}", parameter, value)
    if minimum is not None and value < minimum:
        raise EncodingError(f"{parameter} {value} is below the minimum of {minimum}", parameter, value)
    if maximum is not None and value > maximum:
        raise EncodingError(f"{parameter} {value} is above the maximum of {maximum}", parameter, value)
    return str(value)


def _level(value: object, parameter: str) -> str:
    return _number(value, parameter, LEVEL_MIN, LEVEL_MAX)


def _scope(value: ClientScope | MessageScope | str, parameter: str = "scope") -> str:
    if isinstance(value, Scope):
        return value.value
    if isinstance(value, str) and value.upper() in Scope.__members__:
        return Scope[value.upper()].value
    if isinstance(value, int) and not isinstance(value, bool):
        return _number(value, parameter, minimum=0)
    raise EncodingError(f"Invalid {parameter} {value!r}, expected SELF, ALL or an id", parameter, value)


def _toggle(value: object, parameter: str) -> str:
    if not isinstance(value, bool):
        raise EncodingError(f"{parameter} must be a bool, got {value!r}", parameter, value)
    return "on" if value else "off"


def _set(scope: ClientScope | str, setting: str, value: str) -> Command:
    return Command("SET", (_scope(scope), setting, value))


# ============================================================================
# Connection
# ============================================================================


def set_client_name(name: ClientName | str) -> Command:
    """SET SELF CLIENT_NAME user:application:component."""
    return Command("SET", (Scope.SELF.value, "CLIENT_NAME", _word(str(name), "client_name")))


def quit() -> Command:
    """QUIT, answered with 231 HAPPY HACKING."""
    return Command("QUIT")


def help() -> Command:
    """HELP, answered with the list of supported commands."""
    return Command("HELP", reply=ReplyKind.LINES)


# ============================================================================
# Speech
# ============================================================================


def speak(text: str | Sequence[str]) -> Command:
    """
    SPEAK with a data block.

    Args:
        text: A string, split on line terminators, or a sequence of lines.

    Returns:
        A data command whose reply is the queued message id.

    Raises:
        EncodingError: If the payload is empty or contains NUL.
    """
    if isinstance(text, str):
        lines = _LINE_BREAK.split(text)
        if len(lines) > 1 and lines[-1] == "":
            lines.pop()
    else:
        lines = list(text)
        for line in lines:
            if not isinstance(line, str):
                raise EncodingError(f"Payload lines must be strings, got {type(line).__name__}", "text", line)
            if "\r" in line or "\n" in line:
                raise EncodingError("Payload lines must not contain line terminators", "text", line)
    if not any(lines):
        raise EncodingError("Nothing to speak: payload is empty", "text", text)
    if any("\0" in line for line in lines):
        raise EncodingError("Payload must not contain NUL", "text", text)
    return Command("SPEAK", data=tuple(lines), reply=ReplyKind.MESSAGE_ID)


def char(ch: str) -> Command:
    """CHAR c. A space is sent as the keyword "space"."""
    if ch == " ":
        return Command("CHAR", (KeyName.SPACE.value,), reply=ReplyKind.MESSAGE_ID)
    return Command("CHAR", (_word(ch, "char"),), reply=ReplyKind.MESSAGE_ID)


def key(name: KeyName | str) -> Command:
    """KEY name. Combinations such as "shift_a" are passed through."""
    value = name.value if isinstance(name, KeyName) else _token(name, "key")
    return Command("KEY", (value,), reply=ReplyKind.MESSAGE_ID)


def sound_icon(name: str) -> Command:
    """SOUND_ICON name."""
    return Command("SOUND_ICON", (_word(name, "sound_icon"),), reply=ReplyKind.MESSAGE_ID)


# ============================================================================
# Flow control
# ============================================================================


def stop(scope: MessageScope = Scope.SELF) -> Command:
    """STOP the current message of a scope."""
    return Command("STOP", (_scope(scope),))


def cancel(scope: MessageScope = Scope.SELF) -> Command:
    """CANCEL the current and queued messages of a scope."""
    return Command("CANCEL", (_scope(scope),))


def pause(scope: MessageScope = Scope.SELF) -> Command:
    """PAUSE speech of a scope."""
    return Command("PAUSE", (_scope(scope),))


def resume(scope: MessageScope = Scope.SELF) -> Command:
    """RESUME paused speech of a scope."""
    return Command("RESUME", (_scope(scope),))


# ============================================================================
# Voice and output parameters
# ============================================================================


def set_priority(priority: Priority | str) -> Command:
    return _set(Scope.SELF, "PRIORITY", _keyword(priority, Priority, "priority"))


def set_language(language: str, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "LANGUAGE", _token(language, "language"))


def set_output_module(name: str, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "OUTPUT_MODULE", _token(name, "output_module"))


def set_voice(voice: VoiceType | str, scope: ClientScope = Scope.SELF) -> Command:
    """SET scope VOICE with a symbolic voice type."""
    return _set(scope, "VOICE", _keyword(voice, VoiceType, "voice"))


def set_synthesis_voice(name: str, scope: ClientScope = Scope.SELF) -> Command:
    """SET scope SYNTHESIS_VOICE with a voice name reported by list_synthesis_voices."""
    return _set(scope, "SYNTHESIS_VOICE", _word(name, "synthesis_voice"))


def set_rate(value: int, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "RATE", _level(value, "rate"))


def set_pitch(value: int, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "PITCH", _level(value, "pitch"))


def set_pitch_range(value: int, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "PITCH_RANGE", _level(value, "pitch_range"))


def set_volume(value: int, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "VOLUME", _level(value, "volume"))


def set_punctuation(mode: PunctuationMode | str, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "PUNCTUATION", _keyword(mode, PunctuationMode, "punctuation"))


def set_capital_letters(mode: CapitalLettersMode | str, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "CAP_LET_RECOGN", _keyword(mode, CapitalLettersMode, "capital_letters"))


def set_spelling(enabled: bool, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "SPELLING", _toggle(enabled, "spelling"))


def set_ssml_mode(enabled: bool) -> Command:
    return _set(Scope.SELF, "SSML_MODE", _toggle(enabled, "ssml_mode"))


def set_pause_context(value: int, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "PAUSE_CONTEXT", _number(value, "pause_context", minimum=0))


def set_debug(enabled: bool) -> Command:
    """SET ALL DEBUG on|off. Debugging is a server-wide switch."""
    return _set(Scope.ALL, "DEBUG", _toggle(enabled, "debug"))


# ============================================================================
# Getters and lists
# ============================================================================


def get_language() -> Command:
    return Command("GET", ("LANGUAGE",), reply=ReplyKind.STRING)


def get_output_module() -> Command:
    return Command("GET", ("OUTPUT_MODULE",), reply=ReplyKind.STRING)


def get_voice() -> Command:
    return Command("GET", ("VOICE_TYPE",), reply=ReplyKind.STRING)


def get_rate() -> Command:
    return Command("GET", ("RATE",), reply=ReplyKind.INTEGER)


def get_pitch() -> Command:
    return Command("GET", ("PITCH",), reply=ReplyKind.INTEGER)


def get_volume() -> Command:
    return Command("GET", ("VOLUME",), reply=ReplyKind.INTEGER)


def list_voices() -> Command:
    """LIST VOICES: symbolic voice types."""
    return Command("LIST", ("VOICES",), reply=ReplyKind.LINES)


def list_synthesis_voices() -> Command:
    """LIST SYNTHESIS_VOICES: voices of the current output module."""
    return Command("LIST", ("SYNTHESIS_VOICES",), reply=ReplyKind.VOICES)


def list_output_modules() -> Command:
    return Command("LIST", ("OUTPUT_MODULES",), reply=ReplyKind.LINES)


# ============================================================================
# Notifications and blocks
# ============================================================================


def set_notification(kind: NotificationType | str, enabled: bool) -> Command:
    """SET SELF NOTIFICATION kind on|off."""
    return _set(
        Scope.SELF,
        "NOTIFICATION",
        _keyword(kind, NotificationType, "notification") + " " + _toggle(enabled, "enabled"),
    )


def block_begin() -> Command:
    """BLOCK BEGIN: group the following messages into one unit."""
    return Command("BLOCK", ("BEGIN",))


def block_end() -> Command:
    return Command("BLOCK", ("END",))


# ============================================================================
# History
# ============================================================================


def set_history(enabled: bool, scope: ClientScope = Scope.SELF) -> Command:
    return _set(scope, "HISTORY", _toggle(enabled, "history"))


def history_get_clients() -> Command:
    return Command("HISTORY", ("GET", "CLIENT_LIST"), reply=ReplyKind.HISTORY_CLIENTS)


def history_get_client_id() -> Command:
    return Command("HISTORY", ("GET", "CLIENT_ID"), reply=ReplyKind.INTEGER)


def history_get_client_messages(scope: ClientScope, start: int, number: int) -> Command:
    """HISTORY GET CLIENT_MESSAGES scope start_number."""
    span = f"{_number(start, 'start', minimum=0)}_{_number(number, 'number', minimum=0)}"
    return Command("HISTORY", ("GET", "CLIENT_MESSAGES", _scope(scope), span), reply=ReplyKind.LINES)


def history_get_last() -> Command:
    return Command("HISTORY", ("GET", "LAST"), reply=ReplyKind.MESSAGE_ID)


def history_get_message(message_id: int) -> Command:
    return Command(
        "HISTORY",
        ("GET", "MESSAGE", _number(message_id, "message_id", minimum=0)),
        reply=ReplyKind.LINES,
    )


def history_get_cursor() -> Command:
    return Command("HISTORY", ("CURSOR", "GET"), reply=ReplyKind.INTEGER)


def history_set_cursor(scope: ClientScope, position: CursorPosition | str | int) -> Command:
    """
    HISTORY CURSOR SET scope position.

    Args:
        scope: Client whose history cursor is moved.
        position: CursorPosition.FIRST, CursorPosition.LAST or an absolute index.
    """
    if isinstance(position, int) and not isinstance(position, bool):
        where = f"pos {_number(position, 'position', minimum=0)}"
    else:
        where = _keyword(position, CursorPosition, "position")
    return Command("HISTORY", ("CURSOR", "SET", _scope(scope), where))


def history_move_cursor(direction: CursorDirection | str) -> Command:
    return Command("HISTORY", ("CURSOR", _keyword(direction, CursorDirection, "direction")))


def history_say(message_id: int) -> Command:
    return Command(
        "HISTORY",
        ("SAY", _number(message_id, "message_id", minimum=0)),
        reply=ReplyKind.MESSAGE_ID,
    )


def history_sort(direction: SortDirection | str, key: SortKey | str) -> Command:
    return Command(
        "HISTORY",
        ("SORT", _keyword(direction, SortDirection, "direction"), _keyword(key, SortKey, "key")),
    )


def history_set_short_message_length(length: int) -> Command:
    return Command("HISTORY", ("SET", "SHORT_MESSAGE_LENGTH", _number(length, "length", minimum=0)))


def history_set_ordering(types: Sequence[MessageType | str]) -> Command:
    """HISTORY SET MESSAGE_TYPE_ORDERING "text sound_icon char key"."""
    if not types:
        raise EncodingError("Message type ordering must not be empty", "ordering", types)
    ordering = " ".join(_keyword(t, MessageType, "message_type") for t in types)
    return Command("HISTORY", ("SET", "MESSAGE_TYPE_ORDERING", f'"{ordering}"'))


def history_search(scope: ClientScope, condition: str) -> Command:
    """HISTORY SEARCH scope "condition"."""
    text = _check_text(condition, "condition")
    if '"' in text:
        raise EncodingError("Search condition must not contain double quotes", "condition", condition)
    return Command("HISTORY", ("SEARCH", _scope(scope), f'"{text}"'), reply=ReplyKind.LINES)
