# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Command methods shared by the client adapters.

Every method builds a command with pyssip.commands and hands it to
_call(). Blocking clients return the decoded reply; the asyncio client
returns an awaitable of it.
"""

from __future__ import annotations

from typing import Any, Sequence

from . import commands
from .commands import Command
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


class SSIPCommands:
    """Mixin turning command constructors into client methods."""

    def _call(self, command: Command) -> Any:
        raise NotImplementedError

    # =========================================================================
    # Connection
    # =========================================================================

    def set_client_name(self, name: ClientName | str) -> Any:
        """Announce the client name, normally done once on connect."""
        return self._call(commands.set_client_name(name))

    def help(self) -> Any:
        """Returns: list of help lines."""
        return self._call(commands.help())

    # =========================================================================
    # Speech
    # =========================================================================

    def speak(self, text: str | Sequence[str]) -> Any:
        """
        Queue text for speaking.

        Args:
            text: Text or SSML, as a string or a sequence of lines.

        Returns:
            Message id assigned by the server.
        """
        return self._call(commands.speak(text))

    def char(self, ch: str) -> Any:
        """Speak a single character. Returns: message id."""
        return self._call(commands.char(ch))

    def key(self, name: KeyName | str) -> Any:
        """Speak a key name. Returns: message id."""
        return self._call(commands.key(name))

    def sound_icon(self, name: str) -> Any:
        """Play a sound icon. Returns: message id."""
        return self._call(commands.sound_icon(name))

    # =========================================================================
    # Flow control
    # =========================================================================

    def stop(self, scope: MessageScope = Scope.SELF) -> Any:
        return self._call(commands.stop(scope))

    def cancel(self, scope: MessageScope = Scope.SELF) -> Any:
        return self._call(commands.cancel(scope))

    def pause(self, scope: MessageScope = Scope.SELF) -> Any:
        return self._call(commands.pause(scope))

    def resume(self, scope: MessageScope = Scope.SELF) -> Any:
        return self._call(commands.resume(scope))

    # =========================================================================
    # Voice and output parameters
    # =========================================================================

    def set_priority(self, priority: Priority | str) -> Any:
        return self._call(commands.set_priority(priority))

    def set_language(self, language: str, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_language(language, scope))

    def set_output_module(self, name: str, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_output_module(name, scope))

    def set_voice(self, voice: VoiceType | str, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_voice(voice, scope))

    def set_synthesis_voice(self, name: str, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_synthesis_voice(name, scope))

    def set_rate(self, value: int, scope: ClientScope = Scope.SELF) -> Any:
        """Set the speech rate, -100 to 100."""
        return self._call(commands.set_rate(value, scope))

    def set_pitch(self, value: int, scope: ClientScope = Scope.SELF) -> Any:
        """Set the voice pitch, -100 to 100."""
        return self._call(commands.set_pitch(value, scope))

    def set_pitch_range(self, value: int, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_pitch_range(value, scope))

    def set_volume(self, value: int, scope: ClientScope = Scope.SELF) -> Any:
        """Set the volume, -100 to 100."""
        return self._call(commands.set_volume(value, scope))

    def set_punctuation(self, mode: PunctuationMode | str, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_punctuation(mode, scope))

    def set_capital_letters(self, mode: CapitalLettersMode | str, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_capital_letters(mode, scope))

    def set_spelling(self, enabled: bool, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_spelling(enabled, scope))

    def set_ssml_mode(self, enabled: bool) -> Any:
        return self._call(commands.set_ssml_mode(enabled))

    def set_pause_context(self, value: int, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_pause_context(value, scope))

    def set_debug(self, enabled: bool) -> Any:
        return self._call(commands.set_debug(enabled))

    # =========================================================================
    # Getters and lists
    # =========================================================================

    def get_language(self) -> Any:
        return self._call(commands.get_language())

    def get_output_module(self) -> Any:
        return self._call(commands.get_output_module())

    def get_voice(self) -> Any:
        return self._call(commands.get_voice())

    def get_rate(self) -> Any:
        return self._call(commands.get_rate())

    def get_pitch(self) -> Any:
        return self._call(commands.get_pitch())

    def get_volume(self) -> Any:
        return self._call(commands.get_volume())

    def list_voices(self) -> Any:
        """Returns: symbolic voice type names."""
        return self._call(commands.list_voices())

    def list_synthesis_voices(self) -> Any:
        """Returns: list of SynthesisVoice for the current output module."""
        return self._call(commands.list_synthesis_voices())

    def list_output_modules(self) -> Any:
        return self._call(commands.list_output_modules())

    # =========================================================================
    # Notifications and blocks
    # =========================================================================

    def set_notification(self, kind: NotificationType | str, enabled: bool = True) -> Any:
        """Switch a class of notifications on or off."""
        return self._call(commands.set_notification(kind, enabled))

    def block_begin(self) -> Any:
        return self._call(commands.block_begin())

    def block_end(self) -> Any:
        return self._call(commands.block_end())

    # =========================================================================
    # History
    # =========================================================================

    def set_history(self, enabled: bool, scope: ClientScope = Scope.SELF) -> Any:
        return self._call(commands.set_history(enabled, scope))

    def history_get_clients(self) -> Any:
        """Returns: list of HistoryClientStatus."""
        return self._call(commands.history_get_clients())

    def history_get_client_id(self) -> Any:
        return self._call(commands.history_get_client_id())

    def history_get_client_messages(self, scope: ClientScope, start: int, number: int) -> Any:
        return self._call(commands.history_get_client_messages(scope, start, number))

    def history_get_last(self) -> Any:
        """Returns: id of the last message said."""
        return self._call(commands.history_get_last())

    def history_get_message(self, message_id: int) -> Any:
        return self._call(commands.history_get_message(message_id))

    def history_get_cursor(self) -> Any:
        return self._call(commands.history_get_cursor())

    def history_set_cursor(self, scope: ClientScope, position: CursorPosition | str | int) -> Any:
        return self._call(commands.history_set_cursor(scope, position))

    def history_move_cursor(self, direction: CursorDirection | str) -> Any:
        return self._call(commands.history_move_cursor(direction))

    def history_say(self, message_id: int) -> Any:
        return self._call(commands.history_say(message_id))

    def history_sort(self, direction: SortDirection | str, key: SortKey | str) -> Any:
        return self._call(commands.history_sort(direction, key))

    def history_set_short_message_length(self, length: int) -> Any:
        return self._call(commands.history_set_short_message_length(length))

    def history_set_ordering(self, types: Sequence[MessageType | str]) -> Any:
        return self._call(commands.history_set_ordering(types))

    def history_search(self, scope: ClientScope, condition: str) -> Any:
        """Returns: matching history lines."""
        return self._call(commands.history_search(scope, condition))
