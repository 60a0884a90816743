
from .api import CompileOptions, CompileResult, compile_file, compile_string, read_source
from .codegen import DEFAULT_TAPE_LENGTH, CGenerator, emit, offset_bounds
from .errors import BFCError, ParseError, UnmatchedCloseBracketError, UnterminatedLoopError
from .optimizer import fold_scaled_copies, optimize
from .parser import parse_program

__all__ = [
    'CompileOptions',
    'CompileResult',
    'compile_string',
    'compile_file',
    'read_source',
    'DEFAULT_TAPE_LENGTH',
    'CGenerator',
    'emit',
    'offset_bounds',
    'BFCError',
    'ParseError',
    'UnterminatedLoopError',
    'UnmatchedCloseBracketError',
    'fold_scaled_copies',
    'optimize',
    'parse_program',
]
