from __future__ import annotations

import logging

from .codegen import RiscVCodeGenerator
from .instruction import Program
from .parser import Parser


logger = logging.getLogger(__name__)


class BrainfuckCompiler:
    """Translate Brainfuck source into RISC-V assembly text.

    Parsing either succeeds completely or raises a ``ParseError``; nothing is
    generated for a program with unbalanced brackets.
    """

    def __init__(self, memory_size: int = 30000) -> None:
        self.parser = Parser()
        self.generator = RiscVCodeGenerator(memory_size=memory_size)

    def parse(self, source: str) -> Program:
        return self.parser.parse(source)

    def compile(self, source: str) -> str:
        program = self.parse(source)
        assembly = self.generator.generate(program)
        logger.debug("Compiled %d instructions into %d bytes of assembly", len(program), len(assembly))
        return assembly


__all__ = ["BrainfuckCompiler"]
