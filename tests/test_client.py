# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Tests for the blocking client against a scripted server."""

import pytest

from pyssip import commands
from pyssip.client import SSIPClient, open_socket
from pyssip.engine import ClientState
from pyssip.exceptions import (
    ConnectionClosedError,
    NotificationOverflow,
    ProtocolError,
    ReplyTimeoutError,
    ServerError,
    TransportError,
)
from pyssip.models import ClientConfig, OverflowPolicy, StatusLine
from pyssip.sinks import QueueSink
from pyssip.types import EventKind, VoiceType


QUEUED = b"225-%d\r\n225 OK MESSAGE QUEUED\r\n"


def make_client(server, **kwargs) -> SSIPClient:
    kwargs.setdefault("autoname", False)
    kwargs.setdefault("request_timeout_ms", 2000)
    return SSIPClient(sock=server.client_sock, **kwargs)


class TestConnect:
    """Tests for connection setup."""

    def test_autoname(self, server) -> None:
        """Test the client name is announced on creation."""
        server.expect(b"SET SELF CLIENT_NAME joe:reader:main\r\n", b"208 OK CLIENT NAME SET\r\n").start()
        client = SSIPClient(sock=server.client_sock, user="joe", application="reader")
        assert client.state is ClientState.IDLE
        assert server.received == [b"SET SELF CLIENT_NAME joe:reader:main\r\n"]
        client.close()

    def test_autoname_rejected(self, server) -> None:
        """Test a rejected name closes the client."""
        server.expect(b"SET SELF CLIENT_NAME joe:reader:main\r\n", b"311 ERR COULDNT SET CLIENT_NAME\r\n").start()
        with pytest.raises(ServerError):
            SSIPClient(sock=server.client_sock, user="joe", application="reader")

    def test_missing_socket(self, tmp_path) -> None:
        """Test connecting to a socket that does not exist."""
        path = str(tmp_path / "missing.sock")
        with pytest.raises(TransportError) as exc_info:
            open_socket(ClientConfig(socket_path=path))
        assert exc_info.value.address == path

    def test_unresolvable_address(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test resolution failures surface as transport errors."""
        monkeypatch.delenv("SPEECHD_ADDRESS", raising=False)
        monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
        with pytest.raises(TransportError, match="XDG_RUNTIME_DIR"):
            open_socket(ClientConfig())

    def test_default_queue_sink(self, server) -> None:
        """Test a queue sink is created from the config."""
        client = make_client(server, notification_queue_size=10)
        assert isinstance(client.notifications, QueueSink)
        assert client.notifications.maxsize == 10
        client.close()

    def test_no_default_sink(self, server) -> None:
        """Test no sink is attached unless asked for."""
        client = make_client(server)
        assert client.sink is None
        assert client.notifications is None
        client.close()


class TestCalls:
    """Tests for request/reply calls."""

    def test_speak(self, server) -> None:
        """Test the two-phase SPEAK exchange."""
        server.expect(b"SPEAK\r\n", b"230 OK RECEIVING DATA\r\n")
        server.expect(b"Hello\r\n..dot\r\n.\r\n", QUEUED % 7)
        server.start()
        client = make_client(server)
        assert client.speak("Hello\n.dot") == 7
        assert client.state is ClientState.IDLE
        client.close()

    def test_set_voice(self, server) -> None:
        """Test a status reply."""
        server.expect(b"SET SELF VOICE female1\r\n", b"209 OK VOICE SET\r\n").start()
        client = make_client(server)
        assert client.set_voice(VoiceType.FEMALE1) == StatusLine(code=209, message="OK VOICE SET")
        client.close()

    def test_list_voices(self, server) -> None:
        """Test a multi-line reply."""
        server.expect(b"LIST VOICES\r\n", b"249-MALE1\r\n249-FEMALE1\r\n249 OK VOICE LIST SENT\r\n").start()
        client = make_client(server)
        assert client.list_voices() == ["MALE1", "FEMALE1"]
        client.close()

    def test_server_error(self, server) -> None:
        """Test an error reply raises and leaves the client usable."""
        server.expect(b"SET SELF OUTPUT_MODULE nope\r\n", b"312 ERR COULDNT SET OUTPUT MODULE\r\n")
        server.expect(b"GET RATE\r\n", b"251-0\r\n251 OK GET RETURNED\r\n")
        server.start()
        client = make_client(server)
        with pytest.raises(ServerError) as exc_info:
            client.set_output_module("nope")
        assert exc_info.value.code == 312
        assert client.get_rate() == 0
        client.close()

    def test_timeout_then_wait(self, server) -> None:
        """Test a timed out request can still be collected."""
        server.expect(b"GET PITCH\r\n").start()
        client = make_client(server)
        with pytest.raises(ReplyTimeoutError):
            client.call(commands.get_pitch(), timeout=0.05)
        assert client.state is ClientState.PENDING_REPLY

        server.send(b"251-15\r\n251 OK GET RETURNED\r\n")
        assert client.wait(2.0) == 15
        assert client.state is ClientState.IDLE
        assert client.wait() is None
        client.close()

    def test_eof_while_waiting(self, server) -> None:
        """Test the server hanging up fails the call and closes the client."""
        server.expect(b"GET VOLUME\r\n", then_close=True).start()
        client = make_client(server)
        with pytest.raises(ConnectionClosedError):
            client.get_volume()
        assert client.closed
        with pytest.raises(ConnectionClosedError):
            client.get_volume()

    def test_block(self, server) -> None:
        """Test block() brackets its body with BLOCK BEGIN and END."""
        server.expect(b"BLOCK BEGIN\r\n", b"260 OK INSIDE BLOCK\r\n")
        server.expect(b"CHAR a\r\n", QUEUED % 3)
        server.expect(b"BLOCK END\r\n", b"261 OK OUTSIDE BLOCK\r\n")
        server.start()
        client = make_client(server)
        with client.block():
            client.char("a")
        server.join()
        assert len(server.received) == 3
        client.close()

    def test_context_manager_quits(self, server) -> None:
        """Test leaving the with block sends QUIT."""
        server.expect(b"QUIT\r\n", b"231 HAPPY HACKING\r\n").start()
        with make_client(server) as client:
            pass
        assert client.closed
        assert server.received == [b"QUIT\r\n"]


class TestNotifications:
    """Tests for event delivery."""

    def test_events_during_call(self, server) -> None:
        """Test events read while waiting reach the sink."""
        server.expect(
            b"STOP SELF\r\n",
            b"703-4\r\n703-1\r\n703 CANCELED\r\n210 OK STOPPED\r\n",
        ).start()
        events = QueueSink()
        client = make_client(server, sink=events)
        client.stop()
        event = events.get_nowait()
        assert event.kind is EventKind.CANCEL
        assert event.message == 4
        client.close()

    def test_poll(self, server) -> None:
        """Test poll delivers events outside any call."""
        seen = []
        client = make_client(server, sink=seen.append)
        server.send(b"700-9\r\n700-1\r\n700-intro\r\n700 INDEX MARK\r\n")
        assert client.poll(2.0) == []
        assert [e.mark_name for e in seen] == ["intro"]
        assert client.poll(0.0) == []
        client.close()

    def test_unsolicited_reply_is_fatal(self, server) -> None:
        """Test a reply with nothing pending closes the client."""
        client = make_client(server)
        server.send(b"210 OK STOPPED\r\n")
        with pytest.raises(ProtocolError):
            client.poll(2.0)
        assert client.closed

    def test_poll_after_hang_up(self, server) -> None:
        """Test EOF seen by poll closes the client."""
        client = make_client(server)
        server.hang_up()
        client.poll(2.0)
        assert client.closed
        with pytest.raises(ConnectionClosedError):
            client.poll()

    def test_overflow_after_reply_keeps_result(self, server) -> None:
        """Test an overflow in the reply chunk surfaces at the next call."""
        server.expect(
            b"GET RATE\r\n",
            b"701-1\r\n701-1\r\n701 BEGIN\r\n702-1\r\n702-1\r\n702 END\r\n251-50\r\n251 OK GET RETURNED\r\n",
        ).expect(b"STOP SELF\r\n", b"210 OK STOPPED\r\n").start()
        events = QueueSink(maxsize=1, overflow=OverflowPolicy.RAISE)
        client = make_client(server, sink=events)
        assert client.get_rate() == 50
        assert client.state is ClientState.IDLE
        with pytest.raises(NotificationOverflow):
            client.stop()
        assert server.received == [b"GET RATE\r\n"]
        client.stop()
        assert events.get_nowait().kind is EventKind.BEGIN
        client.close()

    def test_callback_error_keeps_result(self, server) -> None:
        """Test a failing callback neither loses the reply nor wedges the client."""
        server.expect(
            b"GET RATE\r\n",
            b"702-12\r\n702-3\r\n702 END\r\n251-50\r\n251 OK GET RETURNED\r\n",
        ).expect(b"GET PITCH\r\n", b"251-10\r\n251 OK GET RETURNED\r\n").start()

        def callback(event) -> None:
            raise ValueError("callback failed")

        client = make_client(server, sink=callback)
        assert client.get_rate() == 50
        with pytest.raises(ValueError):
            client.get_pitch()
        assert client.get_pitch() == 10
        client.close()

    def test_callback_error_from_poll(self, server) -> None:
        """Test poll raises a callback error directly."""

        def callback(event) -> None:
            raise ValueError("callback failed")

        client = make_client(server, sink=callback)
        server.send(b"704-1\r\n704-2\r\n704 PAUSED\r\n")
        with pytest.raises(ValueError):
            client.poll(2.0)
        assert not client.closed
        client.close()
