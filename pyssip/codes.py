# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
SSIP status code tables.

Every reply and event line starts with a three digit status code. The
leading digit selects the status class; the full code selects a meaning.
Both mappings are plain lookup tables so they can be extended without
touching the parser or the protocol engine:

    - STATUS_CLASSES: leading digit -> StatusClass
    - EVENT_KINDS: event code -> EventKind
    - MEANINGS: code -> canonical status text
"""

from __future__ import annotations

from enum import Enum, IntEnum

from .types import EventKind


class StatusClass(str, Enum):
    """Class of a status code, selected by its leading digit."""

    SUCCESS = "success"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    EVENT = "event"


STATUS_CLASSES: dict[str, StatusClass] = {
    "1": StatusClass.SUCCESS,
    "2": StatusClass.SUCCESS,
    "3": StatusClass.SERVER_ERROR,
    "4": StatusClass.CLIENT_ERROR,
    "5": StatusClass.CLIENT_ERROR,
    "6": StatusClass.CLIENT_ERROR,
    "7": StatusClass.EVENT,
    "8": StatusClass.SUCCESS,
    "9": StatusClass.SUCCESS,
}


class ReturnCode(IntEnum):
    """Status codes defined by the SSIP protocol."""

    # Success (2xx)
    OK_LANGUAGE_SET = 201
    OK_PRIORITY_SET = 202
    OK_RATE_SET = 203
    OK_PITCH_SET = 204
    OK_PUNCTUATION_SET = 205
    OK_CAP_LET_RECOGN_SET = 206
    OK_SPELLING_SET = 207
    OK_CLIENT_NAME_SET = 208
    OK_VOICE_SET = 209
    OK_STOPPED = 210
    OK_PAUSED = 211
    OK_RESUMED = 212
    OK_CANCELED = 213
    OK_TABLE_SET = 215
    OK_OUTPUT_MODULE_SET = 216
    OK_PAUSE_CONTEXT_SET = 217
    OK_VOLUME_SET = 218
    OK_SSML_MODE_SET = 219
    OK_NOTIFICATION_SET = 220
    OK_CUR_SET_FIRST = 220
    OK_CUR_SET_LAST = 221
    OK_CUR_SET_POS = 222
    OK_CUR_MOV_FOR = 223
    OK_CUR_MOV_BACK = 224
    OK_MESSAGE_QUEUED = 225
    OK_SND_ICON_QUEUED = 226
    OK_MSG_CANCELED = 227
    OK_RECEIVING_DATA = 230
    OK_BYE = 231
    OK_CLIENTS_LIST_SENT = 240
    OK_MSGS_LIST_SENT = 241
    OK_LAST_MSG = 242
    OK_CUR_POS_RET = 243
    OK_TABLE_LIST_SENT = 244
    OK_CLIENT_ID_SENT = 245
    OK_MSG_TEXT_SENT = 246
    OK_HELP_SENT = 248
    OK_VOICES_LIST_SENT = 249
    OK_OUTPUT_MODULES_LIST_SENT = 250
    OK_GET = 251
    OK_INSIDE_BLOCK = 260
    OK_OUTSIDE_BLOCK = 261
    OK_DEBUG_SET = 262
    OK_PITCH_RANGE_SET = 263
    OK_NOT_IMPLEMENTED = 299

    # Server errors (3xx)
    ERR_INTERNAL = 300
    ERR_COULDNT_SET_PRIORITY = 301
    ERR_COULDNT_SET_LANGUAGE = 302
    ERR_COULDNT_SET_RATE = 303
    ERR_COULDNT_SET_PITCH = 304
    ERR_COULDNT_SET_PUNCTUATION = 305
    ERR_COULDNT_SET_CAP_LET_RECOG = 306
    ERR_COULDNT_SET_SPELLING = 308
    ERR_COULDNT_SET_VOICE = 309
    ERR_COULDNT_SET_TABLE = 310
    ERR_COULDNT_SET_CLIENT_NAME = 311
    ERR_COULDNT_SET_OUTPUT_MODULE = 312
    ERR_COULDNT_SET_PAUSE_CONTEXT = 313
    ERR_COULDNT_SET_VOLUME = 314
    ERR_COULDNT_SET_SSML_MODE = 315
    ERR_COULDNT_SET_NOTIFICATION = 316
    ERR_COULDNT_SET_DEBUG = 317
    ERR_NO_SND_ICONS = 320
    ERR_CANT_REPORT_VOICES = 321
    ERR_NO_OUTPUT_MODULE = 321
    ERR_ALREADY_INSIDE_BLOCK = 330
    ERR_ALREADY_OUTSIDE_BLOCK = 331
    ERR_NOT_ALLOWED_INSIDE_BLOCK = 332
    ERR_COULDNT_SET_PITCH_RANGE = 340
    ERR_NOT_IMPLEMENTED = 380

    # Client errors (4xx, 5xx)
    ERR_NO_CLIENT = 401
    ERR_NO_SUCH_CLIENT = 402
    ERR_NO_MESSAGE = 403
    ERR_POS_LOW = 404
    ERR_POS_HIGH = 405
    ERR_ID_NOT_EXIST = 406
    ERR_UNKNOWN_ICON = 407
    ERR_UNKNOWN_PRIORITY = 408
    ERR_RATE_TOO_HIGH = 409
    ERR_RATE_TOO_LOW = 410
    ERR_PITCH_TOO_HIGH = 411
    ERR_PITCH_TOO_LOW = 412
    ERR_VOLUME_TOO_HIGH = 413
    ERR_VOLUME_TOO_LOW = 414
    ERR_PITCH_RANGE_TOO_HIGH = 415
    ERR_PITCH_RANGE_TOO_LOW = 416
    ERR_INVALID_COMMAND = 500
    ERR_INVALID_ENCODING = 501
    ERR_MISSING_PARAMETER = 510
    ERR_NOT_A_NUMBER = 511
    ERR_NOT_A_STRING = 512
    ERR_PARAMETER_NOT_ON_OFF = 513
    ERR_PARAMETER_INVALID = 514

    # Events (7xx)
    EVENT_INDEX_MARK = 700
    EVENT_BEGIN = 701
    EVENT_END = 702
    EVENT_CANCELED = 703
    EVENT_PAUSED = 704
    EVENT_RESUMED = 705


EVENT_KINDS: dict[int, EventKind] = {
    ReturnCode.EVENT_INDEX_MARK: EventKind.INDEX_MARK,
    ReturnCode.EVENT_BEGIN: EventKind.BEGIN,
    ReturnCode.EVENT_END: EventKind.END,
    ReturnCode.EVENT_CANCELED: EventKind.CANCEL,
    ReturnCode.EVENT_PAUSED: EventKind.PAUSE,
    ReturnCode.EVENT_RESUMED: EventKind.RESUME,
}

# 220 and 321 are shared by two meanings each; the first published text wins.
MEANINGS: dict[int, str] = {
    201: "OK LANGUAGE SET",
    202: "OK PRIORITY SET",
    203: "OK RATE SET",
    204: "OK PITCH SET",
    205: "OK PUNCTUATION SET",
    206: "OK CAP LET RECOGNITION SET",
    207: "OK SPELLING SET",
    208: "OK CLIENT NAME SET",
    209: "OK VOICE SET",
    210: "OK STOPPED",
    211: "OK PAUSED",
    212: "OK RESUMED",
    213: "OK CANCELED",
    215: "OK TABLE SET",
    216: "OK OUTPUT MODULE SET",
    217: "OK PAUSE CONTEXT SET",
    218: "OK VOLUME SET",
    219: "OK SSML MODE SET",
    220: "OK NOTIFICATION SET",
    221: "OK CURSOR SET LAST",
    222: "OK CURSOR SET TO POSITION",
    223: "OK CURSOR MOVED FORWARD",
    224: "OK CURSOR MOVED BACKWARD",
    225: "OK MESSAGE QUEUED",
    226: "OK SOUND ICON QUEUED",
    227: "OK MESSAGE CANCELED",
    230: "OK RECEIVING DATA",
    231: "HAPPY HACKING",
    240: "OK CLIENTS LIST SENT",
    241: "OK MSGS LIST SENT",
    242: "OK LAST MSG SAID",
    243: "OK CURSOR POSITION RETURNED",
    244: "OK TABLE LIST SEND",
    245: "OK CLIENT ID SENT",
    246: "OK MESSAGE TEXT SENT",
    248: "OK HELP SENT",
    249: "OK VOICE LIST SENT",
    250: "OK MODULE LIST SENT",
    251: "OK GET RETURNED",
    260: "OK INSIDE BLOCK",
    261: "OK OUTSIDE BLOCK",
    262: "OK DEBUGGING SET",
    263: "OK PITCH RANGE SET",
    299: "OK BUT NOT IMPLEMENTED -- DOES NOTHING",
    300: "ERR INTERNAL",
    301: "ERR COULDNT SET PRIORITY",
    302: "ERR COULDNT SET LANGUAGE",
    303: "ERR COULDNT SET RATE",
    304: "ERR COULDNT SET PITCH",
    305: "ERR COULDNT SET PUNCT MODE",
    306: "ERR COULDNT SET CAP LET RECOGNITION",
    308: "ERR COULDNT SET SPELLING",
    309: "ERR COULDNT SET VOICE",
    310: "ERR COULDNT SET TABLE",
    311: "ERR COULDNT SET CLIENT_NAME",
    312: "ERR COULDNT SET OUTPUT MODULE",
    313: "ERR COULDNT SET PAUSE CONTEXT",
    314: "ERR COULDNT SET VOLUME",
    315: "ERR COULDNT SET SSML MODE",
    316: "ERR COULDNT SET NOTIFICATION",
    317: "ERR COULDNT SET DEBUGGING",
    320: "ERR NO SOUND ICONS",
    321: "ERR MODULE CANT REPORT VOICES",
    330: "ERR ALREADY INSIDE BLOCK",
    331: "ERR ALREADY OUTSIDE BLOCK",
    332: "ERR NOT ALLOWED INSIDE BLOCK",
    340: "ERR COULDNT SET PITCH RANGE",
    380: "ERR NOT YET IMPLEMENTED",
    401: "ERR NO CLIENT",
    402: "ERR NO SUCH CLIENT",
    403: "ERR NO MESSAGE",
    404: "ERR POSITION TOO LOW",
    405: "ERR POSITION TOO HIGH",
    406: "ERR ID DOESNT EXIST",
    407: "ERR UNKNOWN ICON",
    408: "ERR UNKNOWN PRIORITY",
    409: "ERR RATE TOO HIGH",
    410: "ERR RATE TOO LOW",
    411: "ERR PITCH TOO HIGH",
    412: "ERR PITCH TOO LOW",
    413: "ERR VOLUME TOO HIGH",
    414: "ERR VOLUME TOO LOW",
    415: "ERR PITCH RANGE TOO HIGH",
    416: "ERR PITCH RANGE TOO LOW",
    500: "ERR INVALID COMMAND",
    501: "ERR INVALID ENCODING",
    510: "ERR MISSING PARAMETER",
    511: "ERR PARAMETER NOT A NUMBER",
    512: "ERR PARAMETER NOT A STRING",
    513: "ERR PARAMETER NOT ON OR OFF",
    514: "ERR PARAMETER INVALID",
    700: "INDEX MARK",
    701: "BEGIN",
    702: "END",
    703: "CANCELED",
    704: "PAUSED",
    705: "RESUMED",
}


def status_class(code: int) -> StatusClass:
    """Return the class of a status code from its leading digit."""
    if not 100 <= code <= 999:
        raise ValueError(f"Invalid status code: {code!r}")
    try:
        return STATUS_CLASSES[str(code)[0]]
    except KeyError:
        raise ValueError(f"Invalid status code: {code!r}") from None


def is_event(code: int) -> bool:
    """Check whether a code belongs to the event notification family."""
    return status_class(code) is StatusClass.EVENT


def is_error(code: int) -> bool:
    """Check whether a code is a server or client error."""
    return status_class(code) in (StatusClass.SERVER_ERROR, StatusClass.CLIENT_ERROR)


def describe(code: int) -> str:
    """Return the canonical text for a code, or a generic placeholder."""
    return MEANINGS.get(code, f"UNKNOWN STATUS {code}")
