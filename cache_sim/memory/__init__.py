from typing import List

from cache_sim.entity.model import CacheLine


class ReplacementPolicy:
    """
    Per-set eviction state. A policy is bound to the line list of exactly
    one CacheSet; ``evict`` is the only place a resident line is invalidated.
    """

    def __init__(self, lines: List[CacheLine]):
        self.lines = lines

    @property
    def capacity(self) -> int:
        return len(self.lines)

    def insert(self, line: CacheLine):
        raise NotImplementedError

    def update(self, line: CacheLine):
        raise NotImplementedError

    def evict(self) -> int:
        raise NotImplementedError


__all__ = ["ReplacementPolicy"]
