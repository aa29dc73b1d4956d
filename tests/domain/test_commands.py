"""Tests for the Command model and the mode/role helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from udpcomm.domain.commands import (
    DELAY_KINDS,
    FLUSH_KINDS,
    ChannelRole,
    Command,
    CommandKind,
    DelayUnit,
    SessionMode,
    role_for_mode,
    select_mode,
)


class TestCommand:
    def test_defaults_to_empty_argument(self) -> None:
        assert Command(kind=CommandKind.READ).argument == ""

    def test_is_immutable(self) -> None:
        command = Command(kind=CommandKind.WRITE, argument="hi")
        with pytest.raises(ValidationError):
            command.argument = "bye"  # type: ignore[misc]

    def test_equality_is_by_value(self) -> None:
        assert Command(kind=CommandKind.WRITE, argument="a") == Command(kind=CommandKind.WRITE, argument="a")
        assert Command(kind=CommandKind.WRITE, argument="a") != Command(kind=CommandKind.WRITE, argument="b")

    def test_argument_is_not_validated(self) -> None:
        command = Command(kind=CommandKind.DELAY_MILLISECONDS, argument="soon")
        assert command.argument == "soon"

    def test_str(self) -> None:
        assert str(Command(kind=CommandKind.LOOP_START, argument="3")) == "loop 3"
        assert str(Command(kind=CommandKind.FLUSH_RX_TX)) == "flush"

    def test_kind_lookup_tables(self) -> None:
        assert DELAY_KINDS[CommandKind.DELAY_MICROSECONDS] is DelayUnit.MICROSECONDS
        assert set(FLUSH_KINDS) == {CommandKind.FLUSH_RX, CommandKind.FLUSH_TX, CommandKind.FLUSH_RX_TX}


class TestSelectMode:
    def test_default_is_async_duplex(self) -> None:
        assert select_mode() is SessionMode.ASYNC_DUPLEX

    @pytest.mark.parametrize(
        ("flags", "expected"),
        [
            ({"send_only": True}, SessionMode.SEND_ONLY),
            ({"receive_only": True}, SessionMode.RECEIVE_ONLY),
            ({"synchronous": True}, SessionMode.SYNCHRONOUS),
        ],
    )
    def test_single_flag(self, flags: dict[str, bool], expected: SessionMode) -> None:
        assert select_mode(**flags) is expected

    def test_flags_are_mutually_exclusive(self) -> None:
        with pytest.raises(ValueError, match="mutually exclusive"):
            select_mode(send_only=True, synchronous=True)


class TestRoleForMode:
    def test_roles(self) -> None:
        assert role_for_mode(SessionMode.RECEIVE_ONLY) is ChannelRole.SERVER
        assert role_for_mode(SessionMode.SEND_ONLY) is ChannelRole.CLIENT
        assert role_for_mode(SessionMode.SYNCHRONOUS) is ChannelRole.DUPLEX
        assert role_for_mode(SessionMode.ASYNC_DUPLEX) is ChannelRole.DUPLEX
