from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel, Field

from bfrv.compiler import BrainfuckCompiler
from bfrv.instruction import CountedInstruction, Instruction, LoopEnd, LoopStart, Program
from bfrv.interpreter import BrainfuckInterpreter, StepLimitExceeded
from bfrv.parser import ParseError


logger = logging.getLogger(__name__)


def _string_to_input_bytes(data: str) -> List[int]:
    return [ord(ch) for ch in data]


def _instruction_to_dict(index: int, inst: Instruction) -> dict:
    payload = {
        "index": index,
        "kind": type(inst).__name__,
        "symbol": inst.symbol,
        "count": None,
        "target": None,
    }
    if isinstance(inst, CountedInstruction):
        payload["count"] = inst.count
    elif isinstance(inst, LoopStart):
        payload["target"] = inst.end_index
    elif isinstance(inst, LoopEnd):
        payload["target"] = inst.start_index
    return payload


def _parse_or_422(compiler: BrainfuckCompiler, source: str) -> Program:
    try:
        return compiler.parse(source)
    except ParseError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "position": exc.position},
        ) from exc


class SourceRequest(BaseModel):
    source: str = ""


class CompileRequest(SourceRequest):
    memory_size: int = Field(default=30000, ge=1)


class RunRequest(SourceRequest):
    input: str = ""
    max_steps: Optional[int] = Field(default=100000, ge=1)


class InstructionPayload(BaseModel):
    index: int
    kind: str
    symbol: str
    count: Optional[int]
    target: Optional[int]


class ParseResponse(BaseModel):
    instructions: List[InstructionPayload]
    instruction_count: int


class CompileResponse(BaseModel):
    assembly: str
    instruction_count: int


class RunResponse(BaseModel):
    output: str
    steps: int


def create_app() -> FastAPI:
    app = FastAPI(title="bfrv compiler API", version="0.1.0")

    @app.post("/api/parse", response_model=ParseResponse)
    def parse_source(payload: SourceRequest) -> ParseResponse:
        program = _parse_or_422(BrainfuckCompiler(), payload.source)
        return ParseResponse(
            instructions=[
                InstructionPayload(**_instruction_to_dict(index, inst))
                for index, inst in enumerate(program)
            ],
            instruction_count=len(program),
        )

    @app.post("/api/compile", response_model=CompileResponse)
    def compile_source(payload: CompileRequest) -> CompileResponse:
        compiler = BrainfuckCompiler(memory_size=payload.memory_size)
        program = _parse_or_422(compiler, payload.source)
        assembly = compiler.generator.generate(program)
        logger.debug("Compiled %d instructions over HTTP", len(program))
        return CompileResponse(assembly=assembly, instruction_count=len(program))

    @app.post("/api/run", response_model=RunResponse)
    def run_source(payload: RunRequest) -> RunResponse:
        program = _parse_or_422(BrainfuckCompiler(), payload.source)
        interpreter = BrainfuckInterpreter()
        steps = 0
        output = ""
        try:
            for state in interpreter.step(
                program,
                input_data=_string_to_input_bytes(payload.input),
                max_steps=payload.max_steps,
                tape_window=0,
            ):
                steps = state.step
                output = state.output
        except StepLimitExceeded as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(exc),
            ) from exc
        except IndexError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            ) from exc
        return RunResponse(output=output, steps=steps)

    return app


__all__ = ["create_app"]
