from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from .lexer import Token, scan_located
from .nodes import Block, Incr, Loop, Move, Node, Write

logger = logging.getLogger(__name__)


class ParseError(Exception):
    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.position = position


_SIMPLE_NODES = {
    Token.INCREMENT: Incr(1),
    Token.DECREMENT: Incr(-1),
    Token.MOVE_RIGHT: Move(1),
    Token.MOVE_LEFT: Move(-1),
    Token.WRITE: Write(),
}


def _build(located: Iterable[Tuple[int, Token]], unit: str) -> Node:
    operations: List[Node] = []
    # Suspended sibling lists, paired with the position of the '[' that opened
    # the list currently being filled.
    stack: List[Tuple[int, List[Node]]] = []
    count = 0

    for position, token in located:
        count += 1
        simple = _SIMPLE_NODES.get(token)
        if simple is not None:
            operations.append(simple)
        elif token is Token.LOOP_BEGIN:
            stack.append((position, operations))
            operations = []
        elif token is Token.LOOP_END:
            if not stack:
                raise ParseError(f"Unmatched ']' at {unit} {position}", position)
            loop = Loop(Block(tuple(operations)))
            _, operations = stack.pop()
            operations.append(loop)

    if stack:
        position, _ = stack[-1]
        raise ParseError(f"Unmatched '[' at {unit} {position}", position)

    logger.debug("Built AST from %d tokens", count)
    if len(operations) == 1:
        return operations[0]
    return Block(tuple(operations))


def build_ast(tokens: Iterable[Token]) -> Node:
    """Build a tree from a token stream; error positions are token indexes."""
    return _build(enumerate(tokens), "token")


def parse(source: str) -> Node:
    """Build a tree from source text; error positions are character offsets."""
    return _build(scan_located(source), "offset")


__all__ = ["ParseError", "build_ast", "parse"]
