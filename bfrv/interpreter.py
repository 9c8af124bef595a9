from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

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


class StepLimitExceeded(RuntimeError):
    """Raised when execution exceeds the configured step budget."""


@dataclass
class ExecutionState:
    step: int
    pc: int
    symbol: Optional[str]
    pointer: int
    tape_start: int
    tape: List[int]
    output: str
    program_length: int


@dataclass
class BrainfuckInterpreter:
    """Runs a parsed program the way the generated assembly does."""

    tape_length: int = 30000

    tape: List[int] = field(init=False, repr=False)
    pointer: int = field(init=False, repr=False)
    output_buffer: List[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.tape = [0] * self.tape_length
        self.pointer = 0
        self.output_buffer = []

    def run(
        self,
        program: Program,
        input_data: Optional[Iterable[int]] = None,
        max_steps: Optional[int] = None,
    ) -> str:
        for _ in self.step(program, input_data=input_data, max_steps=max_steps):
            pass
        return "".join(self.output_buffer)

    def step(
        self,
        program: Program,
        input_data: Optional[Iterable[int]] = None,
        max_steps: Optional[int] = None,
        tape_window: int = 10,
    ) -> Iterator[ExecutionState]:
        self.reset()
        input_iter = iter(list(input_data or []))
        pc = 0
        steps = 0
        program_length = len(program)

        while pc < program_length:
            if max_steps is not None and steps >= max_steps:
                raise StepLimitExceeded("Program exceeded allowed step count")

            inst = program[pc]
            pc = self._execute_instruction(inst, pc, input_iter)
            steps += 1
            yield self._snapshot(pc, inst.symbol, steps, program_length, tape_window)

        # Final snapshot marks completion
        yield self._snapshot(pc, None, steps, program_length, tape_window)

    def _execute_instruction(self, inst: Instruction, pc: int, input_iter: Iterator[int]) -> int:
        new_pc = pc + 1
        if isinstance(inst, AdvancePointer):
            self._move(inst.count)
        elif isinstance(inst, RetreatPointer):
            self._move(-inst.count)
        elif isinstance(inst, IncrementByte):
            self.tape[self.pointer] = (self.tape[self.pointer] + inst.count) % 256
        elif isinstance(inst, DecrementByte):
            self.tape[self.pointer] = (self.tape[self.pointer] - inst.count) % 256
        elif isinstance(inst, ReadByte):
            value = 0
            for _ in range(inst.count):
                value = next(input_iter, 0)
            self.tape[self.pointer] = value % 256
        elif isinstance(inst, WriteByte):
            self.output_buffer.append(chr(self.tape[self.pointer]) * inst.count)
        elif isinstance(inst, LoopStart):
            if self.tape[self.pointer] == 0:
                new_pc = inst.end_index + 1
        elif isinstance(inst, LoopEnd):
            if self.tape[self.pointer] != 0:
                new_pc = inst.start_index + 1
        return new_pc

    def _move(self, delta: int) -> None:
        self.pointer += delta
        if self.pointer >= self.tape_length:
            raise IndexError("Pointer moved beyond the tape length.")
        if self.pointer < 0:
            raise IndexError("Pointer moved before start of tape.")

    def _snapshot(
        self,
        pc: int,
        symbol: Optional[str],
        step: int,
        program_length: int,
        tape_window: int,
    ) -> ExecutionState:
        start = max(0, self.pointer - tape_window)
        end = min(self.tape_length, self.pointer + tape_window + 1)
        return ExecutionState(
            step=step,
            pc=pc,
            symbol=symbol,
            pointer=self.pointer,
            tape_start=start,
            tape=self.tape[start:end].copy(),
            output="".join(self.output_buffer),
            program_length=program_length,
        )


__all__ = [
    "BrainfuckInterpreter",
    "ExecutionState",
    "StepLimitExceeded",
]
