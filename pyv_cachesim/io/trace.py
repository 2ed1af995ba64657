from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List

from ..cache.address import MAX_ADDRESS
from ..errors import TraceFormatError


@dataclass
class TraceRecord:
    """One trace line: an access type tag (e.g. "R", "W", "I") and its address."""
    access_type: str
    address: int


def parse_trace_line(line: str, path: str = "<trace>", line_no: int = 0) -> TraceRecord | None:
    """Parses `"<access-type> <hex-address> [...]"`. Returns None for blank and comment lines."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    parts = stripped.split()
    if len(parts) < 2:
        raise TraceFormatError(f"expected '<access-type> <hex-address>', got {stripped!r}", path, line_no)

    try:
        address = int(parts[1], 16)
    except ValueError:
        raise TraceFormatError(f"address {parts[1]!r} is not hexadecimal", path, line_no)
    if not 0 <= address <= MAX_ADDRESS:
        raise TraceFormatError(f"address {parts[1]} does not fit in 64 bits", path, line_no)

    return TraceRecord(access_type=parts[0], address=address)


def iter_trace(path: str) -> Iterator[TraceRecord]:
    """Yields trace records in file order."""
    with open(path, 'r') as f:
        for line_no, line in enumerate(f, start=1):
            record = parse_trace_line(line, path, line_no)
            if record is not None:
                yield record


def read_trace(path: str) -> List[int]:
    """Reads all addresses of a trace file, preserving order."""
    return [record.address for record in iter_trace(path)]
