import math
from dataclasses import dataclass
from typing import List, Tuple

from cache_sim.config import ADDRESS_SIZE, CacheKind
from cache_sim.entity.model import ConfigError, GeometryError, TraceFormatError

ADDRESS_MASK = (1 << ADDRESS_SIZE) - 1


def _is_power_of_two(value: int) -> bool:
    return isinstance(value, int) and value > 0 and value & (value - 1) == 0


def _log2(value: int, what: str) -> int:
    if not _is_power_of_two(value):
        raise GeometryError(f"{what} must be a positive power of two, got {value}")
    return value.bit_length() - 1


@dataclass(frozen=True)
class Geometry:
    set_count: int
    lines_per_set: int
    offset_bits: int
    index_bits: int
    tag_bits: int

    def __post_init__(self):
        total = self.tag_bits + self.index_bits + self.offset_bits
        if total != ADDRESS_SIZE or self.tag_bits < 0:
            raise GeometryError(
                f"tag({self.tag_bits}) + index({self.index_bits}) + "
                f"offset({self.offset_bits}) != {ADDRESS_SIZE}")


def build_geometry(size: int, line_size: int, kind: CacheKind) -> Geometry:
    """
    Derive the set layout and the tag/index/offset split of a cache.

    direct: one line per set, size/line_size sets
    full:   one set holding every line, no index bits
    Nway:   N lines per set, (size/line_size)/N sets
    """
    if not isinstance(kind, CacheKind):
        try:
            kind = CacheKind(kind)
        except ValueError as e:
            raise ConfigError(f"unknown cache kind {kind!r}") from e

    offset_bits = _log2(line_size, "line size")
    _log2(size, "cache size")
    if line_size > size:
        raise GeometryError(
            f"line size {line_size} is larger than cache size {size}")
    cache_lines = size // line_size

    if kind == CacheKind.DIRECT:
        set_count, lines_per_set = cache_lines, 1
    elif kind == CacheKind.FULL:
        set_count, lines_per_set = 1, cache_lines
    else:
        lines_per_set = kind.degree
        if cache_lines < lines_per_set:
            raise GeometryError(
                f"{kind.value} cache needs at least {lines_per_set} lines, got {cache_lines}")
        set_count = cache_lines // lines_per_set

    index_bits = 0 if kind == CacheKind.FULL else _log2(set_count, "set count")
    if offset_bits + index_bits > ADDRESS_SIZE:
        raise GeometryError(
            f"offset({offset_bits}) + index({index_bits}) exceed {ADDRESS_SIZE} bits")
    return Geometry(
        set_count=set_count,
        lines_per_set=lines_per_set,
        offset_bits=offset_bits,
        index_bits=index_bits,
        tag_bits=ADDRESS_SIZE - offset_bits - index_bits,
    )


def to_binary(address: int) -> str:
    if address < 0 or address > ADDRESS_MASK:
        raise TraceFormatError(f"address {address:#x} does not fit in {ADDRESS_SIZE} bits")
    return format(address, f"0{ADDRESS_SIZE}b")


def _check_split(address: str, tag_bits: int, index_bits: int):
    if len(address) != ADDRESS_SIZE:
        raise GeometryError(
            f"address must be {ADDRESS_SIZE} bits, got {len(address)}")
    if tag_bits < 0 or index_bits < 0 or tag_bits + index_bits > ADDRESS_SIZE:
        raise GeometryError(
            f"tag({tag_bits}) + index({index_bits}) exceed {ADDRESS_SIZE} bits")


def decode(address: str, tag_bits: int, index_bits: int,
           kind: CacheKind = CacheKind.DIRECT) -> Tuple[int, int, int]:
    """Split a 64-bit binary address into (index, tag, offset)."""
    _check_split(address, tag_bits, index_bits)
    tag = int(address[:tag_bits] or "0", 2)
    if kind == CacheKind.FULL:
        index = 0
    else:
        index = int(address[tag_bits:tag_bits + index_bits] or "0", 2)
    offset = int(address[tag_bits + index_bits:] or "0", 2)
    return index, tag, offset


def get_offset(address: str, tag_bits: int, index_bits: int) -> int:
    _check_split(address, tag_bits, index_bits)
    return int(address[tag_bits + index_bits:] or "0", 2)


def get_affected_addresses(size: int, line_size: int, offset: int, address: str) -> List[str]:
    # an access spilling past the end of its line also touches the following lines
    addresses = [address]
    initial_bytes = line_size - offset
    if size <= initial_bytes:
        return addresses

    base = int(address, 2)
    remaining = math.ceil((size - initial_bytes) / line_size)
    for i in range(1, remaining + 1):
        addresses.append(to_binary((base + i * line_size) & ADDRESS_MASK))
    return addresses


__all__ = [
    "ADDRESS_MASK",
    "Geometry",
    "build_geometry",
    "decode",
    "get_affected_addresses",
    "get_offset",
    "to_binary",
]
