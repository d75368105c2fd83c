from __future__ import annotations

from enum import Enum
from typing import Iterator, Tuple


class Token(str, Enum):
    INCREMENT = "+"
    DECREMENT = "-"
    MOVE_LEFT = "<"
    MOVE_RIGHT = ">"
    WRITE = "."
    LOOP_BEGIN = "["
    LOOP_END = "]"


_SYMBOLS = {token.value: token for token in Token}


def scan_located(source: str) -> Iterator[Tuple[int, Token]]:
    """Yield ``(offset, token)`` pairs; every other character is a comment."""
    for offset, char in enumerate(source):
        token = _SYMBOLS.get(char)
        if token is not None:
            yield offset, token


def scan(source: str) -> Iterator[Token]:
    for _, token in scan_located(source):
        yield token


__all__ = ["Token", "scan", "scan_located"]
