from .codegen import InvalidProgramError, RiscVCodeGenerator, compile_risc_v
from .compiler import BrainfuckCompiler
from .instruction import (
    AdvancePointer,
    DecrementByte,
    IncrementByte,
    Instruction,
    LoopEnd,
    LoopStart,
    ReadByte,
    RetreatPointer,
    WriteByte,
)
from .interpreter import BrainfuckInterpreter, ExecutionState, StepLimitExceeded
from .parser import ParseError, Parser, UnmatchedLoopEnd, UnmatchedLoopStart, parse

__all__ = [
    "AdvancePointer",
    "BrainfuckCompiler",
    "BrainfuckInterpreter",
    "DecrementByte",
    "ExecutionState",
    "IncrementByte",
    "Instruction",
    "InvalidProgramError",
    "LoopEnd",
    "LoopStart",
    "ParseError",
    "Parser",
    "ReadByte",
    "RetreatPointer",
    "RiscVCodeGenerator",
    "StepLimitExceeded",
    "UnmatchedLoopEnd",
    "UnmatchedLoopStart",
    "WriteByte",
    "compile_risc_v",
    "parse",
]
