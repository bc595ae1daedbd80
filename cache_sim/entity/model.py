from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


class CacheSimError(RuntimeError):
    """Base class for every fatal simulation error."""


class ConfigError(CacheSimError):
    """Raised when the hierarchy description is malformed or incomplete."""


class GeometryError(CacheSimError):
    """Raised when size/line size/kind cannot produce a valid 64-bit split."""


class PolicyError(CacheSimError):
    """Raised when a full set asks an empty replacement policy for a victim."""


class TraceFormatError(CacheSimError):
    """Raised for a trace record that cannot be parsed."""

    def __init__(self, message: str, line_no: Optional[int] = None):
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no


@dataclass
class CacheLine:
    tag: int = 0
    valid: bool = False
    freq: int = 0
    slot: int = -1


@dataclass
class MemoryAccessInstruction:
    pc: str
    address: int
    operation: str
    size: int
    line_no: int = 0


@dataclass
class CacheInstruction:
    addresses: List[str] = field(default_factory=list)


__all__ = [
    "CacheInstruction",
    "CacheLine",
    "CacheSimError",
    "ConfigError",
    "GeometryError",
    "MemoryAccessInstruction",
    "PolicyError",
    "TraceFormatError",
]
