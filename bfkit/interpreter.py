from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .nodes import Block, Incr, Loop, Move, Node, Write

logger = logging.getLogger(__name__)

DEFAULT_TAPE_LENGTH = 30000
MAX_TAPE_LENGTH = 1 << 24


class TapeBoundsError(IndexError):
    """Raised when a move would place the pointer outside the tape."""

    def __init__(self, pointer: int, tape_length: int) -> None:
        super().__init__(
            f"Pointer moved to {pointer}, outside the tape [0, {tape_length})"
        )
        self.pointer = pointer
        self.tape_length = tape_length


class StepLimitExceeded(RuntimeError):
    """Raised when execution exceeds the configured step budget."""


@dataclass
class Interpreter:
    tape_length: int = DEFAULT_TAPE_LENGTH

    tape: bytearray = field(init=False, repr=False)
    pointer: int = field(init=False, repr=False)
    output_buffer: bytearray = field(init=False, repr=False)
    steps: int = field(init=False, repr=False)
    _max_steps: Optional[int] = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        if not 1 <= self.tape_length <= MAX_TAPE_LENGTH:
            raise ValueError(f"tape_length must be between 1 and {MAX_TAPE_LENGTH}")
        self.reset()

    def reset(self) -> None:
        self.tape = bytearray(self.tape_length)
        self.pointer = 0
        self.output_buffer = bytearray()
        self.steps = 0

    def run(self, node: Node, max_steps: Optional[int] = None) -> bytes:
        self.reset()
        return self.execute(node, max_steps=max_steps)

    def execute(self, node: Node, max_steps: Optional[int] = None) -> bytes:
        """Execute ``node`` against the current tape and return all output so far."""
        self._max_steps = max_steps
        self._execute(node)
        logger.debug(
            "Executed %d steps, pointer=%d, %d bytes written",
            self.steps,
            self.pointer,
            len(self.output_buffer),
        )
        return bytes(self.output_buffer)

    def _execute(self, node: Node) -> None:
        # Nodes still to run, last in first out. A loop whose cell is nonzero
        # re-queues itself beneath its body so the live cell is tested again.
        stack = [node]
        while stack:
            current = stack.pop()
            self.steps += 1
            if self._max_steps is not None and self.steps > self._max_steps:
                raise StepLimitExceeded("Program exceeded allowed step count")

            if isinstance(current, Incr):
                self.tape[self.pointer] = (self.tape[self.pointer] + current.delta) % 256
            elif isinstance(current, Move):
                pointer = self.pointer + current.delta
                if not 0 <= pointer < self.tape_length:
                    raise TapeBoundsError(pointer, self.tape_length)
                self.pointer = pointer
            elif isinstance(current, Write):
                self.output_buffer.append(self.tape[self.pointer])
            elif isinstance(current, Loop):
                if self.tape[self.pointer] != 0:
                    stack.append(current)
                    stack.append(current.body)
            elif isinstance(current, Block):
                stack.extend(reversed(current.children))
            else:
                raise TypeError(f"Unsupported node type: {type(current).__name__}")

    def tape_window(self, radius: int = 10) -> tuple[int, list[int]]:
        start = max(0, self.pointer - radius)
        end = min(self.tape_length, self.pointer + radius + 1)
        return start, list(self.tape[start:end])


def run(
    node: Node,
    tape_length: int = DEFAULT_TAPE_LENGTH,
    max_steps: Optional[int] = None,
) -> bytes:
    return Interpreter(tape_length=tape_length).run(node, max_steps=max_steps)


__all__ = [
    "DEFAULT_TAPE_LENGTH",
    "Interpreter",
    "MAX_TAPE_LENGTH",
    "StepLimitExceeded",
    "TapeBoundsError",
    "run",
]
