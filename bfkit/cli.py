from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .emitters import BRAINFUCK, UnknownTargetError, emit, target_for_path
from .interpreter import DEFAULT_TAPE_LENGTH, MAX_TAPE_LENGTH, Interpreter, StepLimitExceeded, TapeBoundsError
from .nodes import Node, node_to_dict
from .optimizer import optimize
from .parser import ParseError, parse


def _load_program(path: str) -> str:
    source_path = Path(path)
    if not source_path.is_file():
        raise FileNotFoundError(f"Source file not found: {path}")
    try:
        return source_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"Source file is not valid UTF-8: {path} ({exc.reason})") from exc


def _dump_trees(raw_ast: Node, ast: Node) -> None:
    try:
        text = json.dumps({"raw": node_to_dict(raw_ast), "optimized": node_to_dict(ast)}, indent=2)
    except RecursionError:
        print("AST is nested too deeply to dump as JSON", file=sys.stderr)
        return
    sys.stderr.write(text + "\n")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Compile a Brainfuck program to Brainfuck, C or Rust, or run it directly"
    )
    parser.add_argument("source", help="Path to Brainfuck source file")
    parser.add_argument(
        "output",
        nargs="?",
        help="Destination file; its extension selects the target (.bf, .c, .rs)",
    )
    parser.add_argument(
        "-e",
        "--eval",
        action="store_true",
        help="Execute the compiled program and write its output to stdout",
    )
    parser.add_argument(
        "--tape-length",
        type=_positive_int,
        default=DEFAULT_TAPE_LENGTH,
        help=f"Number of tape cells, at most {MAX_TAPE_LENGTH} (default: {DEFAULT_TAPE_LENGTH})",
    )
    parser.add_argument(
        "--max-steps",
        type=_positive_int,
        default=None,
        help="Abort execution after this many steps (default: unlimited)",
    )
    parser.add_argument(
        "--no-optimize",
        action="store_true",
        help="Skip the peephole optimization pass",
    )
    parser.add_argument(
        "--dump-ast",
        action="store_true",
        help="Print the raw and optimized AST as JSON to stderr",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.tape_length > MAX_TAPE_LENGTH:
        print(f"--tape-length must be at most {MAX_TAPE_LENGTH}", file=sys.stderr)
        return 1

    try:
        source_text = _load_program(args.source)
    except (OSError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    target = None
    if args.output:
        try:
            target = target_for_path(args.output)
        except UnknownTargetError as exc:
            print(str(exc), file=sys.stderr)
            return 1

    try:
        raw_ast = parse(source_text)
    except ParseError as exc:
        print(f"Parse error: {exc}", file=sys.stderr)
        return 1

    ast = raw_ast if args.no_optimize else optimize(raw_ast)

    if args.dump_ast:
        _dump_trees(raw_ast, ast)

    if target is not None:
        code = emit(ast, target, tape_length=args.tape_length)
        try:
            Path(args.output).write_text(code, encoding="utf-8")
        except OSError as exc:
            print(f"Cannot write {args.output}: {exc}", file=sys.stderr)
            return 1
    elif not args.eval:
        sys.stdout.write(emit(ast, BRAINFUCK, tape_length=args.tape_length))

    if args.eval:
        interpreter = Interpreter(tape_length=args.tape_length)
        try:
            output = interpreter.run(ast, max_steps=args.max_steps)
        except (TapeBoundsError, StepLimitExceeded) as exc:
            sys.stdout.write(bytes(interpreter.output_buffer).decode("latin-1"))
            print(f"Runtime error: {exc}", file=sys.stderr)
            return 1
        sys.stdout.write(output.decode("latin-1"))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
