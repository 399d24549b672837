# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Type definitions for SSIP command parameters."""

from __future__ import annotations

from enum import Enum
from typing import Union


class Scope(str, Enum):
    """Symbolic target of a command: the current client or every client."""

    SELF = "SELF"
    ALL = "ALL"


# A client scope is SELF, ALL or a numeric client id.
ClientScope = Union[Scope, int]

# A message scope is SELF (last message), ALL or a numeric message id.
MessageScope = Union[Scope, int]

MessageId = int
ClientId = int


class Priority(str, Enum):
    """Message priority."""

    IMPORTANT = "important"
    MESSAGE = "message"
    TEXT = "text"
    NOTIFICATION = "notification"
    PROGRESS = "progress"


class PunctuationMode(str, Enum):
    """Punctuation reading mode."""

    NONE = "none"
    SOME = "some"
    MOST = "most"
    ALL = "all"


class CapitalLettersMode(str, Enum):
    """Capital letters recognition mode."""

    NONE = "none"
    SPELL = "spell"
    ICON = "icon"


class NotificationType(str, Enum):
    """Notification class that can be switched on or off."""

    BEGIN = "begin"
    END = "end"
    CANCEL = "cancel"
    PAUSE = "pause"
    RESUME = "resume"
    INDEX_MARK = "index_marks"
    ALL = "all"


class EventKind(str, Enum):
    """Kind of an asynchronous notification received from the server."""

    INDEX_MARK = "index_mark"
    BEGIN = "begin"
    END = "end"
    CANCEL = "cancel"
    PAUSE = "pause"
    RESUME = "resume"


class VoiceType(str, Enum):
    """Symbolic voice names."""

    MALE1 = "male1"
    MALE2 = "male2"
    MALE3 = "male3"
    FEMALE1 = "female1"
    FEMALE2 = "female2"
    FEMALE3 = "female3"
    CHILD_MALE = "child_male"
    CHILD_FEMALE = "child_female"


class CursorDirection(str, Enum):
    """Cursor motion in history."""

    BACKWARD = "backward"
    FORWARD = "forward"


class CursorPosition(str, Enum):
    """Symbolic cursor positions in history."""

    FIRST = "first"
    LAST = "last"


class SortDirection(str, Enum):
    """Sort direction in history."""

    ASCENDING = "asc"
    DESCENDING = "desc"


class SortKey(str, Enum):
    """Property messages are ordered by in history."""

    CLIENT_NAME = "client_name"
    PRIORITY = "priority"
    MESSAGE_TYPE = "message_type"
    TIME = "time"
    USER = "user"


class MessageType(str, Enum):
    """Message types used to order history."""

    TEXT = "text"
    SOUND_ICON = "sound_icon"
    CHAR = "char"
    KEY = "key"


class KeyName(str, Enum):
    """Symbolic key names accepted by the KEY command."""

    SPACE = "space"
    UNDERSCORE = "underscore"
    DOUBLE_QUOTE = "double-quote"
    ALT = "alt"
    CONTROL = "control"
    HYPER = "hyper"
    META = "meta"
    SHIFT = "shift"
    SUPER = "super"
    BACKSPACE = "backspace"
    BREAK = "break"
    DELETE = "delete"
    DOWN = "down"
    END = "end"
    ENTER = "enter"
    ESCAPE = "escape"
    F1 = "f1"
    F2 = "f2"
    F3 = "f3"
    F4 = "f4"
    F5 = "f5"
    F6 = "f6"
    F7 = "f7"
    F8 = "f8"
    F9 = "f9"
    F10 = "f10"
    F11 = "f11"
    F12 = "f12"
    F13 = "f13"
    F14 = "f14"
    F15 = "f15"
    F16 = "f16"
    F17 = "f17"
    F18 = "f18"
    F19 = "f19"
    F20 = "f20"
    F21 = "f21"
    F22 = "f22"
    F23 = "f23"
    F24 = "f24"
    HOME = "home"
    INSERT = "insert"
    KP_MULTIPLY = "kp-*"
    KP_PLUS = "kp-+"
    KP_MINUS = "kp--"
    KP_DOT = "kp-."
    KP_DIVIDE = "kp-/"
    KP_0 = "kp-0"
    KP_1 = "kp-1"
    KP_2 = "kp-2"
    KP_3 = "kp-3"
    KP_4 = "kp-4"
    KP_5 = "kp-5"
    KP_6 = "kp-6"
    KP_7 = "kp-7"
    KP_8 = "kp-8"
    KP_9 = "kp-9"
    KP_ENTER = "kp-enter"
    LEFT = "left"
    MENU = "menu"
    NEXT = "next"
    NUM_LOCK = "num-lock"
    PAUSE = "pause"
    PRINT = "print"
    PRIOR = "prior"
    RETURN = "return"
    RIGHT = "right"
    SCROLL_LOCK = "scroll-lock"
    TAB = "tab"
    UP = "up"
    WINDOW = "window"
