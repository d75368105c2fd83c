from .emitters import BRAINFUCK, C, RUST, TARGETS, TargetSyntax, UnknownTargetError, emit, target_for_path
from .interpreter import DEFAULT_TAPE_LENGTH, Interpreter, StepLimitExceeded, TapeBoundsError, run
from .lexer import Token, scan
from .nodes import Block, Incr, Loop, Move, Node, Write
from .optimizer import optimize
from .parser import ParseError, build_ast, parse

__all__ = [
    "BRAINFUCK",
    "C",
    "RUST",
    "TARGETS",
    "DEFAULT_TAPE_LENGTH",
    "Block",
    "Incr",
    "Interpreter",
    "Loop",
    "Move",
    "Node",
    "ParseError",
    "StepLimitExceeded",
    "TapeBoundsError",
    "TargetSyntax",
    "Token",
    "UnknownTargetError",
    "Write",
    "build_ast",
    "emit",
    "optimize",
    "parse",
    "run",
    "scan",
    "target_for_path",
]
