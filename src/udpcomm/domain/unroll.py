"""Loop unrolling — rewrite ``loop n … loop-end`` blocks into flat sequences.

Algorithm (repeat until no ``loop`` remains):

1. Find the *last* ``loop`` marker.  Nothing after it can open a loop, so it
   is always an innermost loop.
2. Find the first ``loop-end`` after it.
3. Replace the whole block, markers included, with ``n`` copies of its body.

Each pass removes exactly one ``loop`` marker, so the rewrite terminates.  The
result is computed once, ahead of execution; the executor never sees loops.
"""

from __future__ import annotations

from udpcomm.domain.commands import Command, CommandKind
from udpcomm.domain.errors import InvalidLoopCountError, UnbalancedLoopError


def contains_loop_start(commands: list[Command]) -> bool:
    """Whether any ``loop`` marker remains in *commands*."""
    return any(c.kind == CommandKind.LOOP_START for c in commands)


def parse_loop_count(command: Command) -> int:
    """Return the repeat count of a ``loop`` command.

    Raises:
        InvalidLoopCountError: The argument is missing, not an integer, or
            negative.  Infinite loops cannot be unrolled and are rejected here.
    """
    text = command.argument.strip()
    try:
        count = int(text, 10)
    except ValueError:
        raise InvalidLoopCountError(
            f"Invalid loop count {command.argument!r}: expected a non-negative integer",
            argument=command.argument,
        ) from None
    if count < 0:
        raise InvalidLoopCountError(
            f"Invalid loop count {count}: infinite or negative loops cannot be unrolled",
            argument=command.argument,
        )
    return count


def find_innermost_loop(commands: list[Command]) -> tuple[int, int]:
    """Return ``(start, end)`` indexes of the innermost loop.

    *start* is the last ``loop`` marker, *end* the first ``loop-end`` after it.
    """
    start = max(i for i, c in enumerate(commands) if c.kind == CommandKind.LOOP_START)
    for end in range(start + 1, len(commands)):
        if commands[end].kind == CommandKind.LOOP_END:
            return start, end
    raise UnbalancedLoopError(
        f"'loop {commands[start].argument}' at position {start} has no matching 'loop-end'",
        index=start,
    )


def unroll(commands: list[Command]) -> list[Command]:
    """Expand every loop in *commands* into repeated literal commands.

    The input list is not modified.

    Raises:
        UnbalancedLoopError: A ``loop`` without ``loop-end`` or the reverse.
        InvalidLoopCountError: A ``loop`` count that is not a non-negative integer.
    """
    flat = list(commands)
    while contains_loop_start(flat):
        start, end = find_innermost_loop(flat)
        count = parse_loop_count(flat[start])
        body = flat[start + 1 : end]
        flat[start : end + 1] = body * count

    # Every remaining loop-end had no loop before it.
    stray = sum(1 for c in flat if c.kind == CommandKind.LOOP_END)
    if stray:
        raise UnbalancedLoopError(f"{stray} 'loop-end' marker(s) without a matching 'loop'", stray=stray)
    return flat
