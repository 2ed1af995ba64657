from pathlib import Path

import pytest
from pyv_cachesim.io.trace import TraceRecord, iter_trace, parse_trace_line, read_trace
from pyv_cachesim.errors import TraceFormatError


@pytest.mark.parametrize("line, expected", [
    ("R 7ffd1234", TraceRecord("R", 0x7FFD1234)),
    ("W 0x10", TraceRecord("W", 0x10)),
    ("  I   ffffffffffffffff  \n", TraceRecord("I", 0xFFFFFFFFFFFFFFFF)),
    ("R 40 4 extra", TraceRecord("R", 0x40)),
])
def test_parse_valid_lines(line, expected):
    assert parse_trace_line(line) == expected


@pytest.mark.parametrize("line", ["", "   \n", "# comment", "  # indented comment"])
def test_blank_and_comment_lines_skipped(line):
    assert parse_trace_line(line) is None


@pytest.mark.parametrize("line, message", [
    ("R", "expected"),
    ("R xyz", "not hexadecimal"),
    ("R -1", "64 bits"),
    ("R 10000000000000000", "64 bits"),
])
def test_malformed_lines_rejected(line, message):
    with pytest.raises(TraceFormatError, match=message):
        parse_trace_line(line, "t.trace", 7)


def test_read_trace_preserves_order(tmp_path: Path):
    path = tmp_path / "small.trace"
    path.write_text("# header\nR 20\nW 0\n\nR 10\nI 20\n")

    assert read_trace(str(path)) == [0x20, 0x0, 0x10, 0x20]
    assert [r.access_type for r in iter_trace(str(path))] == ["R", "W", "R", "I"]


def test_error_reports_path_and_line(tmp_path: Path):
    path = tmp_path / "bad.trace"
    path.write_text("R 10\nR 20\nR zz\n")

    with pytest.raises(TraceFormatError) as excinfo:
        read_trace(str(path))
    assert excinfo.value.line_no == 3
    assert excinfo.value.path == str(path)
    assert f"{path}:3:" in str(excinfo.value)


def test_missing_trace_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_trace(str(tmp_path / "missing.trace"))
