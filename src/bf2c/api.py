from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .codegen import DEFAULT_TAPE_LENGTH, CGenerator
from .nodes import Program
from .optimizer import MAX_LEVEL, optimize
from .parser import parse_program


@dataclass(frozen=True)
class CompileOptions:
    optimize_level: int = MAX_LEVEL
    tape_length: int = DEFAULT_TAPE_LENGTH


@dataclass(frozen=True)
class CompileResult:
    c_code: str
    program: Program
    buffer_size: int
    origin: int


def compile_string(source: str, *, options: Optional[CompileOptions] = None) -> CompileResult:
    options = options or CompileOptions()
    program = optimize(parse_program(source), level=options.optimize_level)
    generator = CGenerator(tape_length=options.tape_length)
    c_code = generator.generate(program)
    return CompileResult(
        c_code=c_code,
        program=program,
        buffer_size=generator.state.buffer_size,
        origin=generator.state.origin,
    )


def read_source(path: str | Path, *, encoding: str = "utf-8") -> str:
    # only the ASCII instruction characters matter; undecodable comment bytes become U+FFFD
    return Path(path).read_text(encoding=encoding, errors="replace")


def compile_file(path: str | Path, *, options: Optional[CompileOptions] = None, encoding: str = "utf-8") -> CompileResult:
    return compile_string(read_source(path, encoding=encoding), options=options)
