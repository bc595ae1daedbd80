from typing import List

from cache_sim.config import HierarchyConfig
from cache_sim.entity.model import ConfigError
from cache_sim.entity.report import HierarchyStat
from cache_sim.memory.memory_manager import Cache

import logging
logger = logging.getLogger(__name__)


class CacheHierarchy:
    """
    Caches ordered nearest first, backed by main memory.

    Every level that misses allocates the line on the way down and the walk
    stops at the first hit, so a line found at a farther level is already
    present in all nearer levels afterwards without any separate back-fill.
    """

    def __init__(self, caches: List[Cache]):
        if not caches:
            raise ConfigError("a cache hierarchy needs at least one cache")
        self.caches = caches
        self._memory_accesses = 0

    @classmethod
    def from_config(cls, config: HierarchyConfig) -> "CacheHierarchy":
        hierarchy = cls([Cache(c) for c in config.caches])
        logger.info("built hierarchy: %s",
                    " -> ".join(f"{c.name}({c.kind.value})" for c in hierarchy.caches))
        return hierarchy

    @property
    def nearest(self) -> Cache:
        return self.caches[0]

    @property
    def memory_accesses(self) -> int:
        return self._memory_accesses

    def record_memory_access(self):
        self._memory_accesses += 1

    def process(self, address: str) -> bool:
        """Walk one 64-bit binary address through the hierarchy; True on a hit."""
        for cache in self.caches:
            index, tag, _ = cache.decode(address)
            hit, line = cache.check_hit_or_miss(tag, index)
            if hit:
                cache.record_hit()
                cache.sets[index].policy.update(line)
                return True
            cache.record_miss()
            cache.insert(tag, index)

        self.record_memory_access()
        return False

    def stat(self) -> HierarchyStat:
        return HierarchyStat(
            caches=[c.stat() for c in self.caches],
            main_memory_accesses=self._memory_accesses,
        )

    def stat_dict(self):
        return self.stat().to_dict()


__all__ = ["CacheHierarchy"]
