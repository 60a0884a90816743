#!/usr/bin/env python3
"""
Command-line driver: input sources, output targets and exit statuses.
"""

import io
import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bf2c import compile_string
from bf2c.cli import main


def test_compiles_file_to_stdout(tmp_path, capsys):
    src = tmp_path / "add.b"
    src.write_text("++[->+<]", encoding="utf-8")
    assert main([str(src)]) == 0
    captured = capsys.readouterr()
    assert captured.out == compile_string("++[->+<]").c_code
    assert captured.err == ""


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("+."))
    assert main([]) == 0
    assert "putchar(buffer[pos]);" in capsys.readouterr().out


def test_writes_output_file(tmp_path, capsys):
    src = tmp_path / "zero.b"
    out = tmp_path / "zero.c"
    src.write_text("+[-]", encoding="utf-8")
    assert main([str(src), "-o", str(out)]) == 0
    assert capsys.readouterr().out == ""
    assert "buffer[pos] = 0;" in out.read_text(encoding="utf-8")


def test_unterminated_loop_exit_status(tmp_path, capsys):
    src = tmp_path / "bad.b"
    out = tmp_path / "bad.c"
    src.write_text("+[", encoding="utf-8")
    assert main([str(src), "-o", str(out)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "UnterminatedLoop" in captured.err
    assert not out.exists()


def test_unmatched_close_exit_status(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("+]"))
    assert main(["-"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "UnmatchedCloseBracket" in captured.err


def test_missing_input_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.b")]) == 1
    assert "Couldn't read" in capsys.readouterr().err


def test_level_zero_keeps_loop(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("+[-]"))
    assert main(["--level", "0"]) == 0
    assert "while (buffer[pos] != 0) {" in capsys.readouterr().out


def test_tape_length_option(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("<+"))
    assert main(["--tape-length", "64"]) == 0
    out = capsys.readouterr().out
    assert "uint8_t buffer[65] = {0};" in out
    assert "int pos = 1;" in out


def test_rejects_non_positive_tape_length(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--tape-length", "0"])
    assert info.value.code == 2


def test_tree_dump(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("++[->+++<]>[>]"))
    assert main(["--tree"]) == 0
    assert capsys.readouterr().out == (
        "Program moves=True\n"
        "  Increment @0 +2\n"
        "  ScaledCopy @0 -> [+1*3]\n"
        "  Loop @1 moves=True\n"
        "    Move +1\n"
        "  Move +1\n"
    )


def test_verbose_statistics(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("+[->+<]"))
    assert main(["-v"]) == 0
    err = capsys.readouterr().err
    assert "Compilation took" in err
    assert "folded loops: 1" in err
    assert "Buffer: 30001 cells, origin 0" in err


def test_non_utf8_comment_bytes_in_file(tmp_path, capsys):
    src = tmp_path / "latin1.b"
    src.write_bytes(b"caf\xe9 +.")
    assert main([str(src)]) == 0
    out = capsys.readouterr().out
    assert "  buffer[pos] += 1;" in out
    assert "  putchar(buffer[pos]);" in out


def test_non_utf8_comment_bytes_on_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"\xff\xfe na\xefve +."), encoding="ascii"))
    assert main([]) == 0
    assert "  putchar(buffer[pos]);" in capsys.readouterr().out


def test_error_column_counts_undecodable_byte_once(tmp_path, capsys):
    src = tmp_path / "bad.b"
    src.write_bytes(b"caf\xe9 [")
    assert main([str(src)]) == 1
    assert "(line 1, column 6)" in capsys.readouterr().err


def test_deeply_nested_program(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("[" * 500 + "-" + "]" * 500))
    assert main(["-v"]) == 0
    captured = capsys.readouterr()
    assert captured.out.count("while (buffer[pos] != 0) {") == 499
    assert "folded loops: 1" in captured.err
