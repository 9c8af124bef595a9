from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .compiler import BrainfuckCompiler
from .interpreter import BrainfuckInterpreter, StepLimitExceeded
from .parser import ParseError


DEFAULT_OUTPUT = "out.asm"

logger = logging.getLogger(__name__)


def _read_source(path: str) -> str:
    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    return source_path.read_text(encoding="utf-8")


def _write_output(path: str, data: str) -> None:
    if path == "-":
        sys.stdout.write(data)
        return
    Path(path).write_text(data, encoding="utf-8")


def _to_input_bytes(data: str) -> List[int]:
    return [ord(ch) for ch in data]


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compile Brainfuck to RISC-V assembly")
    parser.add_argument("source", help="Path to Brainfuck source file")
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_OUTPUT,
        help=f"Destination file for the assembly, '-' for stdout (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--memory-size",
        type=int,
        default=30000,
        help="Bytes reserved for the data tape (default: 30000)",
    )
    parser.add_argument(
        "--run",
        action="store_true",
        help="Also interpret the parsed program and print its output",
    )
    parser.add_argument(
        "--input",
        default="",
        help="Input string supplied to the program when running",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Abort --run after this many executed instructions",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.memory_size < 1:
        parser.error("--memory-size must be positive")
    if args.run and args.output == "-":
        parser.error("--run cannot be combined with -o -; program output would mix with the assembly")

    try:
        source_text = _read_source(args.source)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    compiler = BrainfuckCompiler(memory_size=args.memory_size)
    try:
        program = compiler.parse(source_text)
    except ParseError as exc:
        print(f"Compilation error: {exc}", file=sys.stderr)
        return 1

    assembly = compiler.generator.generate(program)
    _write_output(args.output, assembly)
    logger.debug("Wrote assembly to %s", args.output)

    if args.run:
        interpreter = BrainfuckInterpreter(tape_length=args.memory_size)
        try:
            output = interpreter.run(
                program,
                input_data=_to_input_bytes(args.input),
                max_steps=args.max_steps,
            )
        except (IndexError, StepLimitExceeded) as exc:
            print(f"Runtime error: {exc}", file=sys.stderr)
            return 1
        sys.stdout.write(output)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
