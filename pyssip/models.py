# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Pydantic models for the pyssip SDK.

Provides validated data models for decoded replies, notification events and
client configuration.
"""

from __future__ import annotations

import getpass
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import EventKind

SPEECHD_APPLICATION_NAME = "speech-dispatcher"
SPEECHD_SOCKET_NAME = "speechd.sock"
DEFAULT_TCP_PORT = 6560


class OverflowPolicy(str, Enum):
    """What a bounded notification queue does when it is full."""

    DROP_OLDEST = "drop_oldest"
    DROP_NEWEST = "drop_newest"
    RAISE = "raise"
    BLOCK = "block"


def _default_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "user"


# ============================================================================
# Configuration Models
# ============================================================================


class ClientConfig(BaseModel):
    """Configuration for an SSIP client connection."""

    model_config = ConfigDict(validate_assignment=True)

    socket_path: str | None = Field(
        default=None,
        description="Unix socket of the server; resolved from the environment when unset",
    )
    host: str | None = None
    port: int = Field(default=DEFAULT_TCP_PORT, ge=1, le=65535)
    connect_timeout_ms: int = Field(default=5000, ge=100, le=300000)
    request_timeout_ms: int = Field(
        default=10000,
        ge=0,
        le=3600000,
        description="Time to wait for a reply; 0 waits forever",
    )

    # Client identification, sent as SET SELF CLIENT_NAME user:application:component
    user: str = Field(default_factory=_default_user)
    application: str = "pyssip"
    component: str = "main"
    autoname: bool = True

    # Notification delivery
    notification_queue_size: int = Field(default=0, ge=0, description="0 means unbounded")
    notification_overflow: OverflowPolicy = OverflowPolicy.DROP_OLDEST

    @field_validator("user", "application", "component")
    @classmethod
    def validate_name_part(cls, v: str) -> str:
        if not v or any(c in v for c in ": \t\r\n"):
            raise ValueError("Client name parts must be non-empty and free of ':' and whitespace")
        return v

    @property
    def request_timeout(self) -> float | None:
        """Reply timeout in seconds, None to wait forever."""
        if self.request_timeout_ms == 0:
            return None
        return self.request_timeout_ms / 1000.0

    def client_name(self) -> ClientName:
        """Build the client name announced on connect."""
        return ClientName(user=self.user, application=self.application, component=self.component)

    def get_address(self) -> tuple[str, str | tuple[str, int]]:
        """
        Resolve the server address.

        Resolution order:
            1. Explicit socket_path, or host (with port)
            2. SPEECHD_ADDRESS ("unix_socket:/path" or "inet_socket:host:port")
            3. $XDG_RUNTIME_DIR/speech-dispatcher/speechd.sock

        Returns:
            ("unix", path) or ("inet", (host, port)).

        Raises:
            ValueError: If no address can be resolved.
        """
        if self.socket_path:
            return "unix", self.socket_path
        if self.host:
            return "inet", (self.host, self.port)

        address = os.environ.get("SPEECHD_ADDRESS", "").strip()
        if address:
            return parse_address(address, self.port)

        runtime_dir = os.environ.get("XDG_RUNTIME_DIR")
        if not runtime_dir:
            raise ValueError("Cannot locate the Speech Dispatcher socket: XDG_RUNTIME_DIR is not set")
        path = Path(runtime_dir) / SPEECHD_APPLICATION_NAME / SPEECHD_SOCKET_NAME
        return "unix", str(path)


def parse_address(address: str, default_port: int = DEFAULT_TCP_PORT) -> tuple[str, str | tuple[str, int]]:
    """Parse a Speech Dispatcher address string."""
    method, _, rest = address.partition(":")
    if method == "unix_socket" and rest:
        return "unix", rest
    if method == "inet_socket" and rest:
        host, _, port = rest.partition(":")
        try:
            return "inet", (host or "127.0.0.1", int(port) if port else default_port)
        except ValueError:
            raise ValueError(f"Invalid port in address: {address}") from None
    raise ValueError(f"Unsupported Speech Dispatcher address: {address}")


# ============================================================================
# Reply Models
# ============================================================================


class ClientName(BaseModel):
    """Name a client announces to the server."""

    model_config = ConfigDict(frozen=True)

    user: str
    application: str
    component: str = "main"

    def __str__(self) -> str:
        return f"{self.user}:{self.application}:{self.component}"


class StatusLine(BaseModel):
    """Terminal status of a successful command, e.g. 216 OK OUTPUT MODULE SET."""

    model_config = ConfigDict(frozen=True)

    code: int
    message: str

    def __str__(self) -> str:
        return f"{self.code} {self.message}"


class SynthesisVoice(BaseModel):
    """A voice offered by the current output module."""

    model_config = ConfigDict(frozen=True)

    name: str
    language: str | None = None
    variant: str | None = None

    @classmethod
    def from_line(cls, line: str) -> SynthesisVoice:
        """Parse a tab separated "name<TAB>language<TAB>variant" line."""
        parts = line.split("\t")
        if not parts[0]:
            raise ValueError("missing synthesis voice name")

        def token(index: int) -> str | None:
            if index >= len(parts) or parts[index] in ("", "none"):
                return None
            return parts[index]

        return cls(name=parts[0], language=token(1), variant=token(2))


class HistoryClientStatus(BaseModel):
    """A client known to the server history."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    connected: bool

    @classmethod
    def from_line(cls, line: str) -> HistoryClientStatus:
        """Parse an "id name 0|1" line."""
        parts = line.split(" ", 2)
        if not parts[0]:
            raise ValueError("expecting client id")
        try:
            client_id = int(parts[0])
        except ValueError:
            raise ValueError(f"invalid client id: {parts[0]}") from None
        if len(parts) < 2:
            raise ValueError("expecting client name")
        if len(parts) < 3:
            raise ValueError("expecting client status")
        if parts[2] not in ("0", "1"):
            raise ValueError(f"invalid client status: {parts[2]}")
        return cls(id=client_id, name=parts[1], connected=parts[2] == "1")


class NotificationEvent(BaseModel):
    """
    Asynchronous event about the progress of a message.

    Events arrive independently of the request/reply cycle and carry the
    message and client they refer to. Index marks also carry the mark name.
    """

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    message_id: str
    client_id: str
    mark_name: str | None = None

    @property
    def message(self) -> int | None:
        """Message id as an integer when numeric."""
        return int(self.message_id) if self.message_id.isdigit() else None
