from dataclasses import dataclass, field
from typing import List


@dataclass
class CacheStat:
    name: str
    hits: int = 0
    misses: int = 0

    @property
    def accesses(self):
        return self.hits + self.misses

    @property
    def hit_rate(self):
        return self.hits/self.accesses if self.accesses > 0 else 0

    @property
    def miss_rate(self):
        return self.misses/self.accesses if self.accesses > 0 else 0


@dataclass
class HierarchyStat:
    caches: List[CacheStat] = field(default_factory=list)
    main_memory_accesses: int = 0

    def __getitem__(self, name: str) -> CacheStat:
        for stat in self.caches:
            if stat.name == name:
                return stat
        raise KeyError(name)

    def to_dict(self):
        return {
            "caches": [
                {"name": s.name, "hits": s.hits, "misses": s.misses}
                for s in self.caches
            ],
            "main_memory_accesses": self.main_memory_accesses,
        }


__all__ = ["CacheStat", "HierarchyStat"]
