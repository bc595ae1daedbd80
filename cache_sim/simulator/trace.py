from typing import Generator, Iterable

from cache_sim.entity.model import MemoryAccessInstruction, TraceFormatError
from cache_sim.memory.addr_converter import ADDRESS_MASK

import logging
logger = logging.getLogger(__name__)


def _parse_hex(raw: str, what: str, line_no: int) -> int:
    try:
        value = int(raw, 16)
    except ValueError as e:
        raise TraceFormatError(f"{what} {raw!r} is not hex", line_no) from e
    if value < 0 or value > ADDRESS_MASK:
        raise TraceFormatError(f"{what} {raw!r} does not fit in 64 bits", line_no)
    return value


def parse_trace_line(line: str, line_no: int = 0) -> MemoryAccessInstruction:
    # <pc> <address-hex> <kind-char> <size-decimal>, pc is carried through unread
    parts = line.split()
    if len(parts) < 4:
        raise TraceFormatError(
            f"expected 4 fields, got {len(parts)}: {line.strip()!r}", line_no)
    address = _parse_hex(parts[1], "address", line_no)
    try:
        size = int(parts[3], 10)
    except ValueError as e:
        raise TraceFormatError(f"size {parts[3]!r} is not a decimal number", line_no) from e
    if size < 0:
        raise TraceFormatError(f"size {size} is negative", line_no)
    return MemoryAccessInstruction(
        pc=parts[0],
        address=address,
        operation=parts[2],
        size=size,
        line_no=line_no,
    )


def parse_trace(lines: Iterable[str]) -> Generator[MemoryAccessInstruction, None, None]:
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        yield parse_trace_line(line, line_no)


def _decode_lines(raw_lines: Iterable[bytes]) -> Generator[str, None, None]:
    for line_no, raw in enumerate(raw_lines, start=1):
        try:
            yield raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TraceFormatError(f"record is not valid UTF-8: {raw!r}", line_no) from e


def read_trace(trace_path: str) -> Generator[MemoryAccessInstruction, None, None]:
    logger.info("reading trace %s", trace_path)
    with open(trace_path, "rb") as f:
        yield from parse_trace(_decode_lines(f))


__all__ = ["parse_trace", "parse_trace_line", "read_trace"]
