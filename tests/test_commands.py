# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Tests for SSIP command encoding."""

import pytest

from pyssip import commands
from pyssip.commands import ReplyKind, decode_data_block, dot_stuff, dot_unstuff, encode_data_block
from pyssip.exceptions import EncodingError
from pyssip.models import ClientName
from pyssip.types import (
    CapitalLettersMode,
    CursorDirection,
    CursorPosition,
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


class TestCommandLines:
    """Tests for rendered command lines."""

    @pytest.mark.parametrize(
        "command, expected",
        [
            (commands.set_client_name(ClientName(user="joe", application="hello")), b"SET SELF CLIENT_NAME joe:hello:main\r\n"),
            (commands.quit(), b"QUIT\r\n"),
            (commands.help(), b"HELP\r\n"),
            (commands.char("a"), b"CHAR a\r\n"),
            (commands.char(" "), b"CHAR space\r\n"),
            (commands.key(KeyName.KP_PLUS), b"KEY kp-+\r\n"),
            (commands.key("shift_a"), b"KEY shift_a\r\n"),
            (commands.sound_icon("bell"), b"SOUND_ICON bell\r\n"),
            (commands.stop(), b"STOP SELF\r\n"),
            (commands.cancel(Scope.ALL), b"CANCEL ALL\r\n"),
            (commands.pause(42), b"PAUSE 42\r\n"),
            (commands.resume("all"), b"RESUME ALL\r\n"),
            (commands.set_priority(Priority.IMPORTANT), b"SET SELF PRIORITY important\r\n"),
            (commands.set_language("en"), b"SET SELF LANGUAGE en\r\n"),
            (commands.set_output_module("espeak-ng", Scope.ALL), b"SET ALL OUTPUT_MODULE espeak-ng\r\n"),
            (commands.set_voice(VoiceType.FEMALE1), b"SET SELF VOICE female1\r\n"),
            (commands.set_voice("male2", 3), b"SET 3 VOICE male2\r\n"),
            (commands.set_synthesis_voice("en-us"), b"SET SELF SYNTHESIS_VOICE en-us\r\n"),
            (commands.set_rate(-100), b"SET SELF RATE -100\r\n"),
            (commands.set_pitch(100), b"SET SELF PITCH 100\r\n"),
            (commands.set_pitch_range(0), b"SET SELF PITCH_RANGE 0\r\n"),
            (commands.set_volume(80), b"SET SELF VOLUME 80\r\n"),
            (commands.set_punctuation(PunctuationMode.ALL), b"SET SELF PUNCTUATION all\r\n"),
            (commands.set_capital_letters(CapitalLettersMode.SPELL), b"SET SELF CAP_LET_RECOGN spell\r\n"),
            (commands.set_spelling(True), b"SET SELF SPELLING on\r\n"),
            (commands.set_ssml_mode(False), b"SET SELF SSML_MODE off\r\n"),
            (commands.set_pause_context(2), b"SET SELF PAUSE_CONTEXT 2\r\n"),
            (commands.set_debug(True), b"SET ALL DEBUG on\r\n"),
            (commands.get_language(), b"GET LANGUAGE\r\n"),
            (commands.get_output_module(), b"GET OUTPUT_MODULE\r\n"),
            (commands.get_voice(), b"GET VOICE_TYPE\r\n"),
            (commands.get_rate(), b"GET RATE\r\n"),
            (commands.get_pitch(), b"GET PITCH\r\n"),
            (commands.get_volume(), b"GET VOLUME\r\n"),
            (commands.list_voices(), b"LIST VOICES\r\n"),
            (commands.list_synthesis_voices(), b"LIST SYNTHESIS_VOICES\r\n"),
            (commands.list_output_modules(), b"LIST OUTPUT_MODULES\r\n"),
            (commands.set_notification(NotificationType.BEGIN, True), b"SET SELF NOTIFICATION begin on\r\n"),
            (commands.set_notification(NotificationType.INDEX_MARK, False), b"SET SELF NOTIFICATION index_marks off\r\n"),
            (commands.block_begin(), b"BLOCK BEGIN\r\n"),
            (commands.block_end(), b"BLOCK END\r\n"),
            (commands.set_history(True, Scope.ALL), b"SET ALL HISTORY on\r\n"),
            (commands.history_get_clients(), b"HISTORY GET CLIENT_LIST\r\n"),
            (commands.history_get_client_id(), b"HISTORY GET CLIENT_ID\r\n"),
            (commands.history_get_client_messages(Scope.SELF, 0, 10), b"HISTORY GET CLIENT_MESSAGES SELF 0_10\r\n"),
            (commands.history_get_last(), b"HISTORY GET LAST\r\n"),
            (commands.history_get_message(123), b"HISTORY GET MESSAGE 123\r\n"),
            (commands.history_get_cursor(), b"HISTORY CURSOR GET\r\n"),
            (commands.history_set_cursor(Scope.SELF, CursorPosition.LAST), b"HISTORY CURSOR SET SELF last\r\n"),
            (commands.history_set_cursor(5, 12), b"HISTORY CURSOR SET 5 pos 12\r\n"),
            (commands.history_move_cursor(CursorDirection.BACKWARD), b"HISTORY CURSOR backward\r\n"),
            (commands.history_say(7), b"HISTORY SAY 7\r\n"),
            (commands.history_sort(SortDirection.DESCENDING, SortKey.TIME), b"HISTORY SORT desc time\r\n"),
            (commands.history_set_short_message_length(20), b"HISTORY SET SHORT_MESSAGE_LENGTH 20\r\n"),
            (
                commands.history_set_ordering([MessageType.TEXT, MessageType.CHAR]),
                b'HISTORY SET MESSAGE_TYPE_ORDERING "text char"\r\n',
            ),
            (commands.history_search(Scope.ALL, "hello world"), b'HISTORY SEARCH ALL "hello world"\r\n'),
        ],
    )
    def test_encoding(self, command: commands.Command, expected: bytes) -> None:
        """Test each constructor renders its exact command line."""
        assert command.encode() == expected

    def test_reply_kinds(self) -> None:
        """Test constructors declare how their reply is decoded."""
        assert commands.set_rate(10).reply is ReplyKind.STATUS
        assert commands.speak("hi").reply is ReplyKind.MESSAGE_ID
        assert commands.char("x").reply is ReplyKind.MESSAGE_ID
        assert commands.get_language().reply is ReplyKind.STRING
        assert commands.get_rate().reply is ReplyKind.INTEGER
        assert commands.list_voices().reply is ReplyKind.LINES
        assert commands.list_synthesis_voices().reply is ReplyKind.VOICES
        assert commands.history_get_clients().reply is ReplyKind.HISTORY_CLIENTS

    def test_utf8_free_text(self) -> None:
        """Test free text parameters are UTF-8 encoded."""
        assert commands.char("é").encode() == "CHAR é\r\n".encode("utf-8")
        assert commands.history_search(Scope.SELF, "čaj").encode() == 'HISTORY SEARCH SELF "čaj"\r\n'.encode("utf-8")


class TestSpeak:
    """Tests for the SPEAK data block."""

    def test_line_and_block(self) -> None:
        """Test the command line is sent apart from the data block."""
        command = commands.speak("Hello\nworld")
        assert command.has_data
        assert command.encode_line() == b"SPEAK\r\n"
        assert command.encode_data() == b"Hello\r\nworld\r\n.\r\n"

    def test_dot_stuffing(self) -> None:
        """Test body lines starting with a dot are escaped."""
        command = commands.speak([".hidden", "..", "a.b"])
        assert command.encode_data() == b"..hidden\r\n...\r\na.b\r\n.\r\n"

    def test_lone_dot_line(self) -> None:
        """Test a body line holding a single dot cannot end the block."""
        command = commands.speak("first\n.\nlast")
        assert command.encode_data() == b"first\r\n..\r\nlast\r\n.\r\n"

    def test_line_terminators_are_normalized(self) -> None:
        """Test CRLF, CR and LF all split lines, and a trailing one is dropped."""
        assert commands.speak("a\r\nb\rc\n").data == ("a", "b", "c")

    def test_utf8_payload(self) -> None:
        """Test the body is UTF-8."""
        assert commands.speak("žluťoučký").encode_data() == "žluťoučký\r\n.\r\n".encode("utf-8")

    def test_empty_payload(self) -> None:
        """Test empty payloads are rejected."""
        with pytest.raises(EncodingError):
            commands.speak("")
        with pytest.raises(EncodingError):
            commands.speak([])

    def test_nul_in_payload(self) -> None:
        """Test NUL is rejected."""
        with pytest.raises(EncodingError):
            commands.speak("a\0b")

    def test_terminator_inside_sequence_line(self) -> None:
        """Test lines given as a sequence may not hold terminators."""
        with pytest.raises(EncodingError):
            commands.speak(["a\nb"])

    def test_encode_data_without_block(self) -> None:
        """Test encode_data on a plain command fails."""
        with pytest.raises(EncodingError):
            commands.stop().encode_data()


class TestDataBlock:
    """Tests for data block helpers."""

    def test_stuff_and_unstuff(self) -> None:
        """Test dot stuffing only touches leading dots."""
        assert dot_stuff(".x") == "..x"
        assert dot_stuff("x.") == "x."
        assert dot_unstuff("..x") == ".x"
        assert dot_unstuff(".x") == ".x"

    def test_decode_data_block(self) -> None:
        """Test an encoded block decodes to its lines."""
        lines = [".a", "b", "..c"]
        assert decode_data_block(encode_data_block(lines)) == lines

    def test_decode_unterminated(self) -> None:
        """Test an unterminated block is rejected."""
        with pytest.raises(ValueError):
            decode_data_block(b"a\r\nb\r\n")


class TestValidation:
    """Tests for parameter validation."""

    @pytest.mark.parametrize("value", [101, -101, 1000])
    def test_level_out_of_range(self, value: int) -> None:
        """Test numeric parameters are bounded."""
        with pytest.raises(EncodingError) as exc:
            commands.set_rate(value)
        assert exc.value.parameter == "rate"
        assert exc.value.value == value

    @pytest.mark.parametrize("value", [True, 1.5, "10", None])
    def test_level_wrong_type(self, value: object) -> None:
        """Test numeric parameters must be real integers."""
        with pytest.raises(EncodingError):
            commands.set_volume(value)  # type: ignore[arg-type]

    @pytest.mark.parametrize("value", ["en\r\nQUIT", "en\n", "e\0n", "en us", ""])
    def test_token_rejects_framing(self, value: str) -> None:
        """Test tokens may not break the command line."""
        with pytest.raises(EncodingError):
            commands.set_language(value)

    def test_token_must_be_ascii(self) -> None:
        """Test keywords and tokens are 7-bit."""
        with pytest.raises(EncodingError):
            commands.set_output_module("éspeak")

    def test_unknown_keyword(self) -> None:
        """Test symbolic parameters are checked against their enum."""
        with pytest.raises(EncodingError, match="expected one of"):
            commands.set_punctuation("loud")
        with pytest.raises(EncodingError):
            commands.set_voice("robot")

    def test_toggle_requires_bool(self) -> None:
        """Test toggles accept only booleans."""
        with pytest.raises(EncodingError):
            commands.set_spelling("on")  # type: ignore[arg-type]

    @pytest.mark.parametrize("scope", [-1, True, "others", 1.0])
    def test_invalid_scope(self, scope: object) -> None:
        """Test scopes are SELF, ALL or a non-negative id."""
        with pytest.raises(EncodingError):
            commands.stop(scope)  # type: ignore[arg-type]

    def test_search_condition_quote(self) -> None:
        """Test a search condition may not close its quotes."""
        with pytest.raises(EncodingError):
            commands.history_search(Scope.SELF, 'a" QUIT "')

    def test_empty_ordering(self) -> None:
        """Test an ordering needs at least one type."""
        with pytest.raises(EncodingError):
            commands.history_set_ordering([])

    def test_negative_history_range(self) -> None:
        """Test history ranges are non-negative."""
        with pytest.raises(EncodingError):
            commands.history_get_client_messages(Scope.SELF, -1, 10)

    def test_client_name_whitespace(self) -> None:
        """Test client names are a single word."""
        with pytest.raises(EncodingError):
            commands.set_client_name("joe:my app:main")

    def test_multi_character_char(self) -> None:
        """Test CHAR refuses whitespace other than a single space."""
        with pytest.raises(EncodingError):
            commands.char("\t")
