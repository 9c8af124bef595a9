from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional, Type


COMMAND_CHARS = "<>+-,.[]"


class Instruction:
    """One operation of a compiled Brainfuck program."""

    symbol: ClassVar[str] = ""
    countable: ClassVar[bool] = False

    def same_kind(self, other: Instruction) -> bool:
        # Folding compares the variant only, never the counts.
        return type(self) is type(other)

    def increment(self) -> None:
        raise TypeError(f"{type(self).__name__} has no count to increment")

    def set_target(self, target: int) -> None:
        raise TypeError(f"{type(self).__name__} has no loop target")


@dataclass
class CountedInstruction(Instruction):
    count: int = 1

    countable: ClassVar[bool] = True

    def increment(self) -> None:
        self.count += 1


@dataclass
class AdvancePointer(CountedInstruction):
    symbol: ClassVar[str] = ">"


@dataclass
class RetreatPointer(CountedInstruction):
    symbol: ClassVar[str] = "<"


@dataclass
class IncrementByte(CountedInstruction):
    symbol: ClassVar[str] = "+"


@dataclass
class DecrementByte(CountedInstruction):
    symbol: ClassVar[str] = "-"


@dataclass
class ReadByte(CountedInstruction):
    symbol: ClassVar[str] = ","


@dataclass
class WriteByte(CountedInstruction):
    symbol: ClassVar[str] = "."


@dataclass
class LoopStart(Instruction):
    end_index: int = 0

    symbol: ClassVar[str] = "["

    def set_target(self, target: int) -> None:
        self.end_index = target


@dataclass
class LoopEnd(Instruction):
    start_index: int = 0

    symbol: ClassVar[str] = "]"

    def set_target(self, target: int) -> None:
        self.start_index = target


Program = List[Instruction]


_BY_CHAR: Dict[str, Type[Instruction]] = {
    cls.symbol: cls
    for cls in (
        AdvancePointer,
        RetreatPointer,
        IncrementByte,
        DecrementByte,
        ReadByte,
        WriteByte,
        LoopStart,
        LoopEnd,
    )
}


def from_char(char: str) -> Optional[Instruction]:
    """Build a fresh instruction for a command character, or ``None`` for comments."""
    cls = _BY_CHAR.get(char)
    if cls is None:
        return None
    return cls()


__all__ = [
    "COMMAND_CHARS",
    "Instruction",
    "CountedInstruction",
    "AdvancePointer",
    "RetreatPointer",
    "IncrementByte",
    "DecrementByte",
    "ReadByte",
    "WriteByte",
    "LoopStart",
    "LoopEnd",
    "Program",
    "from_char",
]
