from __future__ import annotations

import logging
from typing import List, Tuple

from .nodes import EMPTY, Block, Incr, Loop, Move, Node, Write, count_nodes

logger = logging.getLogger(__name__)


def optimize(node: Node) -> Node:
    """Return the peephole-normalized form of ``node``.

    Zero deltas are removed, adjacent ``Incr`` and ``Move`` runs are merged
    within a block and loop bodies are optimized recursively. The result is a
    fixed point: optimizing it again returns an equal tree.
    """
    optimized = _optimize(node)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Optimized AST: %d -> %d nodes", count_nodes(node), count_nodes(optimized))
    return optimized


def _optimize(node: Node) -> Node:
    # Post-order walk on an explicit stack; ``results`` holds optimized subtrees
    # in the order their parents will consume them.
    results: List[Node] = []
    stack: List[Tuple[Node, bool]] = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if isinstance(current, (Incr, Move)):
            results.append(EMPTY if current.delta == 0 else current)
        elif isinstance(current, Write):
            results.append(current)
        elif isinstance(current, Loop):
            if expanded:
                results.append(Loop(results.pop()))
            else:
                stack.append((current, True))
                stack.append((current.body, False))
        elif isinstance(current, Block):
            if expanded:
                count = len(current.children)
                children = results[len(results) - count:]
                del results[len(results) - count:]
                merged: List[Node] = []
                for child in children:
                    _append(merged, child)
                results.append(merged[0] if len(merged) == 1 else Block(tuple(merged)))
            else:
                stack.append((current, True))
                stack.extend((child, False) for child in reversed(current.children))
        else:
            raise TypeError(f"Unsupported node type: {type(current).__name__}")
    return results.pop()


def _append(merged: List[Node], node: Node) -> None:
    if isinstance(node, Block):
        # Already normalized, so a surviving block is a plain sequence to splice.
        for child in node.children:
            _append(merged, child)
        return

    if isinstance(node, (Incr, Move)) and merged and type(merged[-1]) is type(node):
        delta = merged.pop().delta + node.delta
        if delta != 0:
            merged.append(type(node)(delta))
        return

    merged.append(node)


__all__ = ["optimize"]
