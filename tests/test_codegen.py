import unittest

from bfrv import (
    AdvancePointer,
    BrainfuckCompiler,
    IncrementByte,
    InvalidProgramError,
    LoopEnd,
    LoopStart,
    ParseError,
    RiscVCodeGenerator,
    compile_risc_v,
    parse,
)
from bfrv.codegen import EPILOGUE


CLEAR_LOOP_ASM = """.data
memory: .space 30000

.text
main:
la s0, memory

lbu s1, (s0)
bnez s1, start_0
la t0, end_2
jr t0
start_0:

lbu s1, (s0)
addi s1, s1, -1
sb s1, (s0)

lbu s1, (s0)
beqz s1, end_2
la t0, start_0
jr t0
end_2:

li a0, 0
li a7, 93
ecall
"""


class CodeGeneratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.generator = RiscVCodeGenerator()

    def test_empty_program_is_prologue_and_epilogue(self) -> None:
        assembly = self.generator.generate([])
        self.assertEqual(assembly, self.generator.prologue() + EPILOGUE)
        self.assertTrue(assembly.startswith(".data\nmemory: .space 30000\n"))
        self.assertIn("la s0, memory\n", assembly)
        self.assertTrue(assembly.endswith("li a0, 0\nli a7, 93\necall\n"))

    def test_comment_only_source_compiles_to_empty_program(self) -> None:
        compiler = BrainfuckCompiler()
        self.assertEqual(compiler.compile("just words"), compiler.compile(""))

    def test_clear_loop_exact_output(self) -> None:
        self.assertEqual(compile_risc_v(parse("[-]")), CLEAR_LOOP_ASM)

    def test_pointer_moves(self) -> None:
        assembly = compile_risc_v(parse(">>><"))
        self.assertIn("addi s0, s0, 3\n", assembly)
        self.assertIn("addi s0, s0, -1\n", assembly)

    def test_byte_updates(self) -> None:
        assembly = compile_risc_v(parse("+++++>---"))
        self.assertIn("lbu s1, (s0)\naddi s1, s1, 5\nsb s1, (s0)\n", assembly)
        self.assertIn("lbu s1, (s0)\naddi s1, s1, -3\nsb s1, (s0)\n", assembly)

    def test_read_repeats_syscall(self) -> None:
        assembly = compile_risc_v(parse(",,,"))
        self.assertIn("li a7, 12\necall\necall\necall\nsb a0, (s0)\n", assembly)

    def test_write_repeats_syscall(self) -> None:
        assembly = compile_risc_v(parse(".."))
        self.assertIn("lbu a0, (s0)\nli a7, 11\necall\necall\n\n", assembly)

    def test_large_counts_use_register_operand(self) -> None:
        assembly = compile_risc_v([AdvancePointer(count=2047), AdvancePointer(count=2048)])
        self.assertIn("addi s0, s0, 2047\n", assembly)
        self.assertIn("li t0, 2048\nadd s0, s0, t0\n", assembly)
        assembly = compile_risc_v(parse("<" * 2049))
        self.assertIn("li t0, -2049\nadd s0, s0, t0\n", assembly)

    def test_memory_size_is_configurable(self) -> None:
        assembly = RiscVCodeGenerator(memory_size=4096).generate([])
        self.assertIn("memory: .space 4096\n", assembly)

    def test_example_program_has_one_loop(self) -> None:
        assembly = BrainfuckCompiler().compile("++>+<[-]")
        self.assertEqual(assembly.count("bnez s1,"), 1)
        self.assertEqual(assembly.count("beqz s1,"), 1)
        self.assertIn("bnez s1, start_4\nla t0, end_6\n", assembly)
        self.assertIn("beqz s1, end_6\nla t0, start_4\n", assembly)
        self.assertEqual(assembly.count("start_4:\n"), 1)
        self.assertEqual(assembly.count("end_6:\n"), 1)

    def test_labels_are_unique_per_position(self) -> None:
        assembly = BrainfuckCompiler().compile("[[-]>[-]]")
        labels = [line for line in assembly.splitlines() if line.endswith(":")]
        self.assertEqual(len(labels), len(set(labels)))
        self.assertEqual(len(labels), 7)  # main plus three loops

    def test_output_is_deterministic(self) -> None:
        source = "++++++++[>++++[>++>+++<<-]>+<<-]>>.>."
        compiler = BrainfuckCompiler()
        self.assertEqual(compiler.compile(source), compiler.compile(source))

    def test_compile_propagates_parse_errors(self) -> None:
        with self.assertRaises(ParseError):
            BrainfuckCompiler().compile("+[")


class CodeGeneratorContractTests(unittest.TestCase):
    def test_out_of_range_target(self) -> None:
        with self.assertRaises(InvalidProgramError):
            compile_risc_v([LoopStart(end_index=5), LoopEnd(start_index=0)])

    def test_target_of_wrong_kind(self) -> None:
        with self.assertRaises(InvalidProgramError):
            compile_risc_v([LoopStart(end_index=1), IncrementByte()])

    def test_target_not_pointing_back(self) -> None:
        program = [LoopStart(end_index=3), LoopStart(end_index=2), LoopEnd(start_index=1), LoopEnd(start_index=1)]
        with self.assertRaises(InvalidProgramError):
            compile_risc_v(program)

    def test_reversed_pair(self) -> None:
        with self.assertRaises(InvalidProgramError):
            compile_risc_v([LoopEnd(start_index=1), LoopStart(end_index=0)])

    def test_loop_start_targeting_itself(self) -> None:
        with self.assertRaises(InvalidProgramError):
            compile_risc_v([LoopStart(end_index=0)])

    def test_contract_error_is_assertion(self) -> None:
        self.assertTrue(issubclass(InvalidProgramError, AssertionError))


if __name__ == "__main__":
    unittest.main()
