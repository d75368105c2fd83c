import random
import unittest

from bfkit import BRAINFUCK, C, RUST, Block, Incr, Loop, Move, UnknownTargetError, Write, emit, optimize, parse, target_for_path
from bfkit.emitters import TARGETS, get_target
from tests.programs import HELLO_WORLD, random_program


class BrainfuckEmitterTests(unittest.TestCase):
    def test_expands_merged_runs(self) -> None:
        self.assertEqual(emit(Block((Incr(3), Move(-2), Incr(-1), Write()))), "+++<<-.\n")

    def test_loop(self) -> None:
        self.assertEqual(emit(optimize(parse("++[->+<]"))), "++[->+<]\n")

    def test_empty_program(self) -> None:
        self.assertEqual(emit(optimize(parse("only comments"))), "\n")

    def test_comments_and_cancelled_runs_are_dropped(self) -> None:
        self.assertEqual(emit(optimize(parse("+ add -- sub >< ."))), "-.\n")

    def test_round_trip_known_programs(self) -> None:
        for source in (HELLO_WORLD, "+[]", "[[-]]", "+" * 300, "<<>"):
            with self.subTest(source=source):
                tree = optimize(parse(source))
                self.assertEqual(optimize(parse(emit(tree, BRAINFUCK))), tree)

    def test_round_trip_random_programs(self) -> None:
        rng = random.Random(31)
        for _ in range(50):
            tree = optimize(parse(random_program(rng)))
            self.assertEqual(optimize(parse(emit(tree, "brainfuck"))), tree)


class CEmitterTests(unittest.TestCase):
    def test_program_layout(self) -> None:
        code = emit(optimize(parse("+[-].")), C)
        self.assertEqual(
            code,
            "#include <stdio.h>\n"
            "\n"
            "static unsigned char tape[30000];\n"
            "\n"
            "int main(void)\n"
            "{\n"
            "    unsigned char *ptr = tape;\n"
            "    *ptr += 1;\n"
            "    while (*ptr) {\n"
            "        *ptr -= 1;\n"
            "    }\n"
            "    putchar(*ptr);\n"
            "    return 0;\n"
            "}\n",
        )

    def test_moves_and_nesting(self) -> None:
        code = emit(optimize(parse(">>[<[>]]")), C)
        self.assertIn("    ptr += 2;\n", code)
        self.assertIn("    while (*ptr) {\n        ptr -= 1;\n        while (*ptr) {\n", code)
        self.assertIn("            ptr += 1;\n        }\n    }\n", code)

    def test_increment_reduced_modulo_256(self) -> None:
        self.assertIn("*ptr += 44;", emit(Incr(300), C))
        self.assertIn("*ptr -= 4;", emit(Incr(-260), C))

    def test_tape_length(self) -> None:
        self.assertIn("static unsigned char tape[128];", emit(Write(), C, tape_length=128))


class RustEmitterTests(unittest.TestCase):
    def test_program_layout(self) -> None:
        code = emit(optimize(parse("+[-<].")), RUST)
        self.assertTrue(code.startswith("use std::io::Write;\n\nfn main() {\n"))
        self.assertIn("    let mut tape = vec![0u8; 30000];\n", code)
        self.assertIn("    tape[ptr] = tape[ptr].wrapping_add(1);\n", code)
        self.assertIn("    while tape[ptr] != 0 {\n", code)
        self.assertIn("        tape[ptr] = tape[ptr].wrapping_sub(1);\n", code)
        self.assertIn("        ptr -= 1;\n", code)
        self.assertIn("    out.write_all(&[tape[ptr]]).unwrap();\n", code)
        self.assertTrue(code.endswith("    out.flush().unwrap();\n}\n"))

    def test_single_child_block_emits_like_child(self) -> None:
        self.assertEqual(emit(Block((Loop(Incr(-1)),)), RUST), emit(Loop(Incr(-1)), RUST))


class TargetLookupTests(unittest.TestCase):
    def test_registry(self) -> None:
        self.assertEqual(list(TARGETS), ["brainfuck", "c", "rust"])
        self.assertIs(get_target("C"), C)

    def test_unknown_target_name(self) -> None:
        with self.assertRaises(UnknownTargetError):
            get_target("cobol")
        with self.assertRaises(UnknownTargetError):
            emit(Write(), "cobol")

    def test_target_for_path(self) -> None:
        self.assertIs(target_for_path("out.bf"), BRAINFUCK)
        self.assertIs(target_for_path("OUT.B"), BRAINFUCK)
        self.assertIs(target_for_path("dir/prog.c"), C)
        self.assertIs(target_for_path("prog.rs"), RUST)

    def test_unknown_extension(self) -> None:
        with self.assertRaises(UnknownTargetError):
            target_for_path("prog.py")
        with self.assertRaises(ValueError):
            target_for_path("no_extension")


if __name__ == "__main__":
    unittest.main()
