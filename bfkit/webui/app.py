from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from bfkit.emitters import TARGETS, emit
from bfkit.interpreter import (
    DEFAULT_TAPE_LENGTH,
    MAX_TAPE_LENGTH,
    Interpreter,
    StepLimitExceeded,
    TapeBoundsError,
)
from bfkit.nodes import Node, count_nodes, node_to_dict
from bfkit.optimizer import optimize
from bfkit.parser import ParseError, parse

DEFAULT_MAX_STEPS = 1_000_000


class SourceRequest(BaseModel):
    code: str
    optimize: bool = True


class CompileRequest(SourceRequest):
    target: str = "brainfuck"
    tape_length: int = Field(default=DEFAULT_TAPE_LENGTH, ge=1, le=MAX_TAPE_LENGTH)

    @field_validator("target")
    @classmethod
    def validate_target(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in TARGETS:
            raise ValueError(f"target must be one of: {', '.join(TARGETS)}")
        return normalized


class RunRequest(SourceRequest):
    tape_length: int = Field(default=DEFAULT_TAPE_LENGTH, ge=1, le=MAX_TAPE_LENGTH)
    max_steps: int = Field(default=DEFAULT_MAX_STEPS, ge=1)
    tape_window: int = Field(default=10, ge=0)


class TargetInfo(BaseModel):
    name: str
    extensions: List[str]


class AstResponse(BaseModel):
    ast: dict
    node_count: int


class CompileResponse(BaseModel):
    target: str
    output: str


class RunResponse(BaseModel):
    output: str
    output_bytes: List[int]
    pointer: int
    tape_start: int
    tape: List[int]
    steps: int


def _parse_request(payload: SourceRequest) -> Node:
    try:
        ast = parse(payload.code)
    except ParseError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "position": exc.position},
        ) from exc
    return optimize(ast) if payload.optimize else ast


def create_app(*, title: Optional[str] = None) -> FastAPI:
    app = FastAPI(title=title or "bfkit API", version="0.1.0")

    @app.get("/api/targets", response_model=List[TargetInfo])
    def list_targets() -> List[TargetInfo]:
        return [
            TargetInfo(name=target.name, extensions=list(target.extensions))
            for target in TARGETS.values()
        ]

    @app.post("/api/ast", response_model=AstResponse)
    def build_tree(payload: SourceRequest) -> AstResponse:
        ast = _parse_request(payload)
        return AstResponse(ast=node_to_dict(ast), node_count=count_nodes(ast))

    @app.post("/api/compile", response_model=CompileResponse)
    def compile_source(payload: CompileRequest) -> CompileResponse:
        ast = _parse_request(payload)
        output = emit(ast, payload.target, tape_length=payload.tape_length)
        return CompileResponse(target=payload.target, output=output)

    @app.post("/api/run", response_model=RunResponse)
    def run_source(payload: RunRequest) -> RunResponse:
        ast = _parse_request(payload)
        interpreter = Interpreter(tape_length=payload.tape_length)
        try:
            output = interpreter.run(ast, max_steps=payload.max_steps)
        except (TapeBoundsError, StepLimitExceeded) as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(exc),
            ) from exc

        tape_start, tape = interpreter.tape_window(payload.tape_window)
        return RunResponse(
            output=output.decode("latin-1"),
            output_bytes=list(output),
            pointer=interpreter.pointer,
            tape_start=tape_start,
            tape=tape,
            steps=interpreter.steps,
        )

    return app


__all__ = ["create_app"]
