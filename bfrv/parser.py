from __future__ import annotations

import logging
from typing import List, Tuple

from .instruction import LoopEnd, LoopStart, Program, from_char


logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Base class for errors that abort a translation."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


class UnmatchedLoopEnd(ParseError):
    def __init__(self, position: int) -> None:
        super().__init__(f"Unmatched ']' at position {position}", position)


class UnmatchedLoopStart(ParseError):
    def __init__(self, position: int, unclosed: int = 1) -> None:
        super().__init__(f"Unmatched '[' at position {position}", position)
        self.unclosed = unclosed


class Parser:
    def parse(self, source: str) -> Program:
        program: Program = []
        # (index into program, offset into source) of every open '['
        loop_starts: List[Tuple[int, int]] = []

        for offset, char in enumerate(source):
            candidate = from_char(char)
            if candidate is None:
                continue

            if program:
                previous = program[-1]
                if previous.countable and previous.same_kind(candidate):
                    previous.increment()
                    continue

            if isinstance(candidate, LoopStart):
                program.append(candidate)
                loop_starts.append((len(program) - 1, offset))
            elif isinstance(candidate, LoopEnd):
                if not loop_starts:
                    raise UnmatchedLoopEnd(offset)
                start, _ = loop_starts.pop()
                candidate.set_target(start)
                program.append(candidate)
                program[start].set_target(len(program) - 1)
            else:
                program.append(candidate)

        if loop_starts:
            _, offset = loop_starts[-1]
            raise UnmatchedLoopStart(offset, unclosed=len(loop_starts))

        logger.debug("Parsed %d instructions from %d characters", len(program), len(source))
        return program


def parse(source: str) -> Program:
    return Parser().parse(source)


__all__ = [
    "ParseError",
    "UnmatchedLoopEnd",
    "UnmatchedLoopStart",
    "Parser",
    "parse",
]
