from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional

from .api import CompileOptions, compile_string, read_source
from .codegen import DEFAULT_TAPE_LENGTH
from .errors import BFCError
from .nodes import ScaledCopy, format_tree, walk
from .optimizer import MAX_LEVEL


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def _read_stdin() -> str:
    # decode raw bytes ourselves so the locale encoding cannot reject comment bytes
    raw = getattr(sys.stdin, "buffer", None)
    if raw is None:
        return sys.stdin.read()
    return raw.read().decode("utf-8", errors="replace")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bf2c",
        description="Brainfuck to C compiler.",
    )
    parser.add_argument("input", nargs="?", default="-", help="Brainfuck source file (default: stdin)")
    parser.add_argument("-o", "--output", help="Write C code here instead of stdout")
    parser.add_argument("--level", type=int, default=MAX_LEVEL, help=f"0..{MAX_LEVEL} (0 disables loop folding)")
    parser.add_argument("--tape-length", type=_positive_int, default=DEFAULT_TAPE_LENGTH,
                        help=f"Tape cells before offset padding (default {DEFAULT_TAPE_LENGTH})")
    parser.add_argument("--tree", action="store_true", help="Print the optimized tree instead of C code")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print timing and statistics to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.input == "-":
        src = _read_stdin()
    else:
        try:
            src = read_source(args.input)
        except OSError as e:
            sys.stderr.write(f"Couldn't read {args.input}: {e.strerror}\n")
            return 1

    options = CompileOptions(optimize_level=args.level, tape_length=args.tape_length)
    start = time.time()
    try:
        result = compile_string(src, options=options)
    except BFCError as e:
        sys.stderr.write(f"Parse error: {e}\n")
        return 1
    end = time.time()

    if args.verbose:
        nodes = list(walk(result.program))
        folded = sum(1 for n in nodes if isinstance(n, ScaledCopy))
        sys.stderr.write(f"Compilation took {(end - start) * 1000:.2f} ms\n")
        sys.stderr.write(f"Statements: {len(nodes) - 1}, folded loops: {folded}\n")
        sys.stderr.write(f"Buffer: {result.buffer_size} cells, origin {result.origin}\n")

    text = format_tree(result.program) + "\n" if args.tree else result.c_code
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
