# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Shared fixtures: a scripted SSIP server on one end of a socket pair."""

from __future__ import annotations

import socket
import threading
from typing import Iterator

import pytest


class FakeServer:
    """
    Scripted server speaking raw bytes.

    Each step waits for an exact request and answers with a canned reply.
    Unexpected bytes stop the script and are kept in ``mismatch``.
    """

    def __init__(self) -> None:
        self.client_sock, self._sock = socket.socketpair()
        self.received: list[bytes] = []
        self.mismatch: bytes | None = None
        self._steps: list[tuple[bytes, bytes, bool]] = []
        self._thread: threading.Thread | None = None
        self._send_lock = threading.Lock()

    def expect(self, request: bytes, reply: bytes = b"", then_close: bool = False) -> FakeServer:
        self._steps.append((request, reply, then_close))
        return self

    def start(self) -> FakeServer:
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        return self

    def send(self, data: bytes) -> None:
        """Push unsolicited bytes, e.g. events or a late reply."""
        with self._send_lock:
            self._sock.sendall(data)

    def join(self, timeout: float = 5.0) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def hang_up(self) -> None:
        self._sock.shutdown(socket.SHUT_RDWR)

    def close(self) -> None:
        # shutdown wakes a script thread blocked in recv()
        try:
            self.hang_up()
        except OSError:
            pass
        for sock in (self._sock, self.client_sock):
            try:
                sock.close()
            except OSError:
                pass

    def _run(self) -> None:
        buffer = b""
        for request, reply, then_close in self._steps:
            while len(buffer) < len(request):
                try:
                    chunk = self._sock.recv(4096)
                except OSError:
                    return
                if not chunk:
                    return
                buffer += chunk
            if not buffer.startswith(request):
                self.mismatch = buffer
                return
            buffer = buffer[len(request):]
            self.received.append(request)
            if reply:
                self.send(reply)
            if then_close:
                self.hang_up()
                return


@pytest.fixture
def server() -> Iterator[FakeServer]:
    fake = FakeServer()
    yield fake
    fake.close()
    fake.join()
