from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


class Node:
    pass


@dataclass(frozen=True)
class Incr(Node):
    delta: int


@dataclass(frozen=True)
class Move(Node):
    delta: int


@dataclass(frozen=True)
class Write(Node):
    pass


@dataclass(frozen=True)
class Loop(Node):
    body: Node


@dataclass(frozen=True)
class Block(Node):
    children: Tuple[Node, ...] = ()


EMPTY = Block()


def node_to_dict(node: Node) -> dict:
    root: dict = {}
    # Each entry pairs a node with the (still empty) dict that will describe it.
    stack = [(node, root)]
    while stack:
        current, target = stack.pop()
        if isinstance(current, Incr):
            target.update(kind="incr", delta=current.delta)
        elif isinstance(current, Move):
            target.update(kind="move", delta=current.delta)
        elif isinstance(current, Write):
            target.update(kind="write")
        elif isinstance(current, Loop):
            body: dict = {}
            target.update(kind="loop", body=body)
            stack.append((current.body, body))
        elif isinstance(current, Block):
            children = [{} for _ in current.children]
            target.update(kind="block", children=children)
            stack.extend(zip(current.children, children))
        else:
            raise TypeError(f"Unsupported node type: {type(current).__name__}")
    return root


def count_nodes(node: Node) -> int:
    count = 0
    stack = [node]
    while stack:
        current = stack.pop()
        count += 1
        if isinstance(current, Loop):
            stack.append(current.body)
        elif isinstance(current, Block):
            stack.extend(current.children)
    return count


__all__ = [
    "Node",
    "Incr",
    "Move",
    "Write",
    "Loop",
    "Block",
    "EMPTY",
    "node_to_dict",
    "count_nodes",
]
