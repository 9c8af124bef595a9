from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .instruction import (
    AdvancePointer,
    DecrementByte,
    IncrementByte,
    Instruction,
    LoopEnd,
    LoopStart,
    Program,
    ReadByte,
    RetreatPointer,
    WriteByte,
)


logger = logging.getLogger(__name__)

POINTER_REG = "s0"
BYTE_REG = "s1"
SCRATCH_REG = "t0"

SYSCALL_READ_CHAR = 12
SYSCALL_PRINT_CHAR = 11
SYSCALL_EXIT = 93

# addi takes a 12-bit signed immediate
IMMEDIATE_MIN = -2048
IMMEDIATE_MAX = 2047

EPILOGUE = f"li a0, 0\nli a7, {SYSCALL_EXIT}\necall\n"


class InvalidProgramError(AssertionError):
    """A loop marker does not point at its matching partner."""


def start_label(index: int) -> str:
    return f"start_{index}"


def end_label(index: int) -> str:
    return f"end_{index}"


@dataclass
class RiscVCodeGenerator:
    memory_size: int = 30000

    def prologue(self) -> str:
        return (
            ".data\n"
            f"memory: .space {self.memory_size}\n"
            "\n"
            ".text\n"
            "main:\n"
            f"la {POINTER_REG}, memory\n"
            "\n"
        )

    def generate(self, program: Program) -> str:
        output: List[str] = [self.prologue()]
        for index, inst in enumerate(program):
            output.extend(self._emit_instruction(index, inst, program))
            output.append("\n")
        output.append(EPILOGUE)
        logger.debug("Generated assembly for %d instructions", len(program))
        return "".join(output)

    # --- Templates ---

    def _emit_instruction(self, index: int, inst: Instruction, program: Program) -> List[str]:
        if isinstance(inst, AdvancePointer):
            return self._add_immediate(POINTER_REG, inst.count)
        if isinstance(inst, RetreatPointer):
            return self._add_immediate(POINTER_REG, -inst.count)
        if isinstance(inst, IncrementByte):
            return self._update_byte(inst.count)
        if isinstance(inst, DecrementByte):
            return self._update_byte(-inst.count)
        if isinstance(inst, ReadByte):
            lines = [f"li a7, {SYSCALL_READ_CHAR}\n"]
            lines.extend("ecall\n" for _ in range(inst.count))
            lines.append(f"sb a0, ({POINTER_REG})\n")
            return lines
        if isinstance(inst, WriteByte):
            lines = [f"lbu a0, ({POINTER_REG})\n", f"li a7, {SYSCALL_PRINT_CHAR}\n"]
            lines.extend("ecall\n" for _ in range(inst.count))
            return lines
        if isinstance(inst, LoopStart):
            self._check_partner(index, inst.end_index, LoopEnd, program)
            return [
                f"lbu {BYTE_REG}, ({POINTER_REG})\n",
                f"bnez {BYTE_REG}, {start_label(index)}\n",
                f"la {SCRATCH_REG}, {end_label(inst.end_index)}\n",
                f"jr {SCRATCH_REG}\n",
                f"{start_label(index)}:\n",
            ]
        if isinstance(inst, LoopEnd):
            self._check_partner(index, inst.start_index, LoopStart, program)
            return [
                f"lbu {BYTE_REG}, ({POINTER_REG})\n",
                f"beqz {BYTE_REG}, {end_label(index)}\n",
                f"la {SCRATCH_REG}, {start_label(inst.start_index)}\n",
                f"jr {SCRATCH_REG}\n",
                f"{end_label(index)}:\n",
            ]
        raise InvalidProgramError(f"Unknown instruction {inst!r} at index {index}")

    def _update_byte(self, delta: int) -> List[str]:
        lines = [f"lbu {BYTE_REG}, ({POINTER_REG})\n"]
        lines.extend(self._add_immediate(BYTE_REG, delta))
        lines.append(f"sb {BYTE_REG}, ({POINTER_REG})\n")
        return lines

    def _add_immediate(self, register: str, value: int) -> List[str]:
        if IMMEDIATE_MIN <= value <= IMMEDIATE_MAX:
            return [f"addi {register}, {register}, {value}\n"]
        return [
            f"li {SCRATCH_REG}, {value}\n",
            f"add {register}, {register}, {SCRATCH_REG}\n",
        ]

    def _check_partner(self, index: int, target: int, expected: type, program: Program) -> None:
        if not 0 <= target < len(program):
            raise InvalidProgramError(f"Loop target {target} of instruction {index} is out of range")
        # A loop start always precedes its end.
        if (expected is LoopEnd and target <= index) or (expected is LoopStart and target >= index):
            raise InvalidProgramError(
                f"Loop target {target} of instruction {index} is on the wrong side of it"
            )
        partner = program[target]
        if not isinstance(partner, expected):
            raise InvalidProgramError(
                f"Loop target {target} of instruction {index} is {type(partner).__name__}, "
                f"expected {expected.__name__}"
            )
        back = partner.end_index if isinstance(partner, LoopStart) else partner.start_index
        if back != index:
            raise InvalidProgramError(
                f"Loop target {target} of instruction {index} points back to {back}"
            )


def compile_risc_v(program: Program, memory_size: int = 30000) -> str:
    return RiscVCodeGenerator(memory_size=memory_size).generate(program)


__all__ = [
    "EPILOGUE",
    "InvalidProgramError",
    "RiscVCodeGenerator",
    "compile_risc_v",
    "end_label",
    "start_label",
]
