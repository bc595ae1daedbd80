from __future__ import annotations

from typing import List, Optional, Tuple

from cache_sim.config import CacheConfig, CacheKind, PolicyName
from cache_sim.entity.model import CacheLine, PolicyError
from cache_sim.entity.report import CacheStat
from cache_sim.memory import ReplacementPolicy
from cache_sim.memory.addr_converter import Geometry, build_geometry, decode
from cache_sim.memory.replacement_policy import NIL, generate_replacement_policy

import logging
logger = logging.getLogger(__name__)


class CacheSet:
    def __init__(self, capacity: int, policy_name: PolicyName):
        self.lines: List[CacheLine] = [CacheLine() for _ in range(capacity)]
        self.policy: ReplacementPolicy = generate_replacement_policy(
            policy_name, self.lines)

    @property
    def capacity(self) -> int:
        return len(self.lines)

    def lookup(self, tag: int) -> Optional[CacheLine]:
        for line in self.lines:
            if line.valid and line.tag == tag:
                return line
        return None

    def insert(self, new_line: CacheLine):
        if self.capacity == 1:
            # direct mapped: the resident line is simply replaced
            new_line.slot = 0
            self.lines[0] = new_line
            return

        slot = NIL
        for i, line in enumerate(self.lines):
            if not line.valid:
                slot = i
                break
        if slot == NIL:
            slot = self.policy.evict()
            if slot == NIL:
                raise PolicyError(
                    f"{type(self.policy).__name__} has no victim for a full set of {self.capacity}")
            logger.debug("evict slot %d (tag %#x)", slot, self.lines[slot].tag)

        new_line.slot = slot
        self.lines[slot] = new_line
        self.policy.insert(new_line)


class Cache:
    def __init__(self, config: CacheConfig):
        self.name = config.name
        self.size = config.size
        self.line_size = config.line_size
        self.kind = CacheKind(config.kind)
        self.policy_name = config.policy
        self.geometry: Geometry = build_geometry(
            self.size, self.line_size, self.kind)
        self.sets = [
            CacheSet(self.geometry.lines_per_set, self.policy_name)
            for _ in range(self.geometry.set_count)
        ]
        self._hits = 0
        self._misses = 0
        logger.debug("%s: %s, %d sets x %d lines, tag/index/offset=%d/%d/%d, policy=%s",
                     self.name, self.kind.value,
                     self.geometry.set_count, self.geometry.lines_per_set,
                     self.geometry.tag_bits, self.geometry.index_bits,
                     self.geometry.offset_bits, self.policy_name.value)

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def tag_bits(self) -> int:
        return self.geometry.tag_bits

    @property
    def index_bits(self) -> int:
        return self.geometry.index_bits

    @property
    def offset_bits(self) -> int:
        return self.geometry.offset_bits

    def record_hit(self):
        self._hits += 1

    def record_miss(self):
        self._misses += 1

    def decode(self, address: str) -> Tuple[int, int, int]:
        return decode(address, self.tag_bits, self.index_bits, self.kind)

    def check_hit_or_miss(self, tag: int, index: int) -> Tuple[bool, Optional[CacheLine]]:
        line = self.sets[index].lookup(tag)
        return line is not None, line

    def insert(self, tag: int, index: int) -> CacheLine:
        line = CacheLine(tag=tag, valid=True, freq=1)
        self.sets[index].insert(line)
        return line

    def stat(self) -> CacheStat:
        return CacheStat(self.name, self._hits, self._misses)


__all__ = ["Cache", "CacheSet"]
