"""Tests for loop unrolling."""

from __future__ import annotations

import pytest

from udpcomm.domain.commands import Command, CommandKind
from udpcomm.domain.errors import InvalidLoopCountError, ScriptError, UnbalancedLoopError
from udpcomm.domain.parser import parse_script
from udpcomm.domain.unroll import find_innermost_loop, parse_loop_count, unroll


def writes(*payloads: str) -> list[Command]:
    return [Command(kind=CommandKind.WRITE, argument=p) for p in payloads]


class TestUnroll:
    def test_loop_free_input_is_unchanged(self) -> None:
        commands = parse_script("write a\nread\ndelay-ms 5\nflush\n")
        assert unroll(commands) == commands

    def test_empty_input(self) -> None:
        assert unroll([]) == []

    def test_flat_loop(self) -> None:
        assert unroll(parse_script("loop 3\nwrite a\nloop-end\n")) == writes("a", "a", "a")

    def test_nested_loops(self) -> None:
        script = "loop 2\nwrite a\nloop 2\nwrite b\nloop-end\nloop-end\n"
        assert unroll(parse_script(script)) == writes("a", "b", "b", "a", "b", "b")

    def test_zero_count_loop_is_removed(self) -> None:
        assert unroll(parse_script("loop 0\nwrite a\nloop-end\n")) == []

    def test_sibling_loops_keep_surrounding_order(self) -> None:
        script = "write start\nloop 2\nwrite a\nloop-end\nwrite mid\nloop 1\nwrite b\nloop-end\nwrite end\n"
        assert unroll(parse_script(script)) == writes("start", "a", "a", "mid", "b", "end")

    def test_input_is_not_modified(self) -> None:
        commands = parse_script("loop 2\nwrite a\nloop-end\n")
        snapshot = list(commands)
        unroll(commands)
        assert commands == snapshot

    def test_output_has_no_loop_markers(self) -> None:
        script = "loop 2\nloop 3\nread\nloop-end\nflush\nloop-end\n"
        kinds = {c.kind for c in unroll(parse_script(script))}
        assert kinds == {CommandKind.READ, CommandKind.FLUSH_RX_TX}


class TestUnbalanced:
    def test_missing_loop_end(self) -> None:
        with pytest.raises(UnbalancedLoopError) as exc_info:
            unroll(parse_script("write a\nloop 2\nwrite b\n"))
        assert exc_info.value.detail == {"index": 1}

    def test_stray_loop_end(self) -> None:
        with pytest.raises(UnbalancedLoopError) as exc_info:
            unroll(parse_script("write a\nloop-end\n"))
        assert exc_info.value.detail == {"stray": 1}

    def test_extra_loop_end_after_loop(self) -> None:
        with pytest.raises(UnbalancedLoopError):
            unroll(parse_script("loop 2\nwrite a\nloop-end\nloop-end\n"))

    def test_is_a_script_error(self) -> None:
        assert issubclass(UnbalancedLoopError, ScriptError)


class TestLoopCount:
    @pytest.mark.parametrize("argument", ["", "three", "2.5", "-1"])
    def test_invalid_counts(self, argument: str) -> None:
        with pytest.raises(InvalidLoopCountError) as exc_info:
            parse_loop_count(Command(kind=CommandKind.LOOP_START, argument=argument))
        assert exc_info.value.code == "INVALID_LOOP_COUNT"

    def test_invalid_count_aborts_unroll(self) -> None:
        with pytest.raises(InvalidLoopCountError):
            unroll(parse_script("loop forever\nwrite a\nloop-end\n"))

    def test_valid_count(self) -> None:
        assert parse_loop_count(Command(kind=CommandKind.LOOP_START, argument=" 12 ")) == 12


class TestFindInnermostLoop:
    def test_picks_last_loop_start(self) -> None:
        commands = parse_script("loop 2\nwrite a\nloop 3\nwrite b\nloop-end\nloop-end\n")
        assert find_innermost_loop(commands) == (2, 4)
