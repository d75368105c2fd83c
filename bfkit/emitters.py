from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable, Dict, Iterator, List, Tuple, Union

from .interpreter import DEFAULT_TAPE_LENGTH
from .nodes import Block, Incr, Loop, Move, Node, Write


class UnknownTargetError(ValueError):
    pass


@dataclass(frozen=True)
class TargetSyntax:
    """Literal syntax for each node kind plus the program wrapper.

    ``preamble`` and ``postamble`` are formatted with ``tape_length``. An
    empty ``indent`` means the target is a character stream and fragments
    are concatenated without line breaks.
    """

    name: str
    extensions: Tuple[str, ...]
    preamble: str
    postamble: str
    increment: Callable[[int], str]
    move: Callable[[int], str]
    write: str
    loop_open: str
    loop_close: str
    indent: str = ""
    base_depth: int = 0


def _repeat(positive: str, negative: str) -> Callable[[int], str]:
    def render(delta: int) -> str:
        return positive * delta if delta > 0 else negative * -delta

    return render


def _signed(positive: str, negative: str, modulus: int = 0) -> Callable[[int], str]:
    def render(delta: int) -> str:
        template = positive if delta > 0 else negative
        amount = abs(delta)
        if modulus:
            amount %= modulus
        return template.format(amount)

    return render


BRAINFUCK = TargetSyntax(
    name="brainfuck",
    extensions=(".bf", ".b"),
    preamble="",
    postamble="\n",
    increment=_repeat("+", "-"),
    move=_repeat(">", "<"),
    write=".",
    loop_open="[",
    loop_close="]",
)

C = TargetSyntax(
    name="c",
    extensions=(".c",),
    preamble=(
        "#include <stdio.h>\n"
        "\n"
        "static unsigned char tape[{tape_length}];\n"
        "\n"
        "int main(void)\n"
        "{{\n"
        "    unsigned char *ptr = tape;\n"
    ),
    postamble=(
        "    return 0;\n"
        "}}\n"
    ),
    increment=_signed("*ptr += {};", "*ptr -= {};", modulus=256),
    move=_signed("ptr += {};", "ptr -= {};"),
    write="putchar(*ptr);",
    loop_open="while (*ptr) {",
    loop_close="}",
    indent="    ",
    base_depth=1,
)

RUST = TargetSyntax(
    name="rust",
    extensions=(".rs",),
    preamble=(
        "use std::io::Write;\n"
        "\n"
        "fn main() {{\n"
        "    let mut tape = vec![0u8; {tape_length}];\n"
        "    let mut ptr: usize = 0;\n"
        "    let mut out = std::io::stdout().lock();\n"
    ),
    postamble=(
        "    out.flush().unwrap();\n"
        "}}\n"
    ),
    increment=_signed(
        "tape[ptr] = tape[ptr].wrapping_add({});",
        "tape[ptr] = tape[ptr].wrapping_sub({});",
        modulus=256,
    ),
    move=_signed("ptr += {};", "ptr -= {};"),
    write="out.write_all(&[tape[ptr]]).unwrap();",
    loop_open="while tape[ptr] != 0 {",
    loop_close="}",
    indent="    ",
    base_depth=1,
)

TARGETS: Dict[str, TargetSyntax] = {
    target.name: target for target in (BRAINFUCK, C, RUST)
}


def _walk(node: Node, syntax: TargetSyntax, depth: int) -> Iterator[Tuple[int, str]]:
    # Pending work is either a node to expand or a literal fragment to emit.
    stack: List[Tuple[Union[Node, str], int]] = [(node, depth)]
    while stack:
        current, level = stack.pop()
        if isinstance(current, str):
            yield level, current
        elif isinstance(current, Incr):
            yield level, syntax.increment(current.delta)
        elif isinstance(current, Move):
            yield level, syntax.move(current.delta)
        elif isinstance(current, Write):
            yield level, syntax.write
        elif isinstance(current, Loop):
            yield level, syntax.loop_open
            stack.append((syntax.loop_close, level))
            stack.append((current.body, level + 1))
        elif isinstance(current, Block):
            stack.extend((child, level) for child in reversed(current.children))
        else:
            raise TypeError(f"Unsupported node type: {type(current).__name__}")


def emit(
    node: Node,
    target: Union[str, TargetSyntax] = BRAINFUCK,
    tape_length: int = DEFAULT_TAPE_LENGTH,
) -> str:
    syntax = get_target(target) if isinstance(target, str) else target
    fragments = _walk(node, syntax, syntax.base_depth)
    if syntax.indent:
        lines: List[str] = [syntax.indent * depth + text + "\n" for depth, text in fragments]
        body = "".join(lines)
    else:
        body = "".join(text for _, text in fragments)
    return (
        syntax.preamble.format(tape_length=tape_length)
        + body
        + syntax.postamble.format(tape_length=tape_length)
    )


def get_target(name: str) -> TargetSyntax:
    try:
        return TARGETS[name.lower()]
    except KeyError as exc:
        raise UnknownTargetError(f"Unknown target: {name}") from exc


def target_for_path(path: Union[str, PurePath]) -> TargetSyntax:
    suffix = PurePath(path).suffix.lower()
    for target in TARGETS.values():
        if suffix in target.extensions:
            return target
    raise UnknownTargetError(f"Unsupported output file extension: {suffix or '(none)'}")


__all__ = [
    "BRAINFUCK",
    "C",
    "RUST",
    "TARGETS",
    "TargetSyntax",
    "UnknownTargetError",
    "emit",
    "get_target",
    "target_for_path",
]
