from dataclasses import dataclass, field
from typing import List, Optional

from cache_sim.entity.model import ConfigError
from cache_sim.utils.config_utils import BaseEnum, load_config

ADDRESS_SIZE = 64
DEFAULT_BUFFER_SIZE = 8000


class CacheKind(str, BaseEnum):
    DIRECT = "direct"
    FULL = "full"
    TWO_WAY = "2way"
    FOUR_WAY = "4way"
    EIGHT_WAY = "8way"

    @property
    def degree(self):
        # lines per set for k-way kinds
        return {
            CacheKind.TWO_WAY: 2,
            CacheKind.FOUR_WAY: 4,
            CacheKind.EIGHT_WAY: 8,
        }.get(self)


class PolicyName(str, BaseEnum):
    LRU = "lru"
    LFU = "lfu"
    RR = "rr"


@dataclass
class CacheConfig:
    name: str
    size: int
    line_size: int
    kind: CacheKind
    replacement_policy: Optional[PolicyName] = field(default=None)

    def __post_init__(self):
        try:
            self.kind = CacheKind(self.kind)
        except ValueError as e:
            raise ConfigError(f"{self.name}: unknown cache kind {self.kind!r}") from e
        if self.replacement_policy is not None:
            try:
                self.replacement_policy = PolicyName(self.replacement_policy)
            except ValueError as e:
                raise ConfigError(
                    f"{self.name}: unknown replacement policy {self.replacement_policy!r}") from e

    @property
    def policy(self) -> PolicyName:
        if self.replacement_policy is None:
            # round robin unless configured otherwise
            return PolicyName.RR
        return self.replacement_policy


@dataclass
class HierarchyConfig:
    caches: List[CacheConfig] = field(default_factory=list)

    def __post_init__(self):
        if not self.caches:
            raise ConfigError("hierarchy config has no caches")
        names = [c.name for c in self.caches]
        if len(set(names)) != len(names):
            raise ConfigError(f"duplicate cache names: {names}")


def load_hierarchy_config(config_path: str) -> HierarchyConfig:
    return load_config(config_path, HierarchyConfig)
