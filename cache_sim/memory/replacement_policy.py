from typing import Dict, List

from cache_sim.config import PolicyName
from cache_sim.entity.model import CacheLine, ConfigError
from cache_sim.memory import ReplacementPolicy

import logging
logger = logging.getLogger(__name__)

NIL = -1


class RoundRobin(ReplacementPolicy):
    """Evicts slots 0, 1, ..., capacity-1, 0, ... regardless of access history."""

    def __init__(self, lines: List[CacheLine]):
        super().__init__(lines)
        self.cursor = 0

    def insert(self, line: CacheLine):
        pass

    def update(self, line: CacheLine):
        pass

    def evict(self) -> int:
        slot = self.cursor
        self.cursor = (self.cursor + 1) % self.capacity
        self.lines[slot].valid = False
        return slot


class LRU(ReplacementPolicy):
    """
    Recency list kept as an arena over slot numbers: ``_prev``/``_next`` hold
    neighbouring slots (NIL at the ends), ``head`` is the most recently used
    slot and ``tail`` the eviction candidate. ``_slots`` maps resident tags
    to their slot so a hit is located in O(1).
    """

    def __init__(self, lines: List[CacheLine]):
        super().__init__(lines)
        self._prev = [NIL] * self.capacity
        self._next = [NIL] * self.capacity
        self._slots: Dict[int, int] = {}
        self.head = NIL
        self.tail = NIL

    def __len__(self):
        return len(self._slots)

    def order(self) -> List[int]:
        """Resident slots, most recent first."""
        res = []
        slot = self.head
        while slot != NIL:
            res.append(slot)
            slot = self._next[slot]
        return res

    def insert(self, line: CacheLine):
        slot = self._slots.get(line.tag)
        if slot is not None:
            self._unlink(slot)
        else:
            slot = line.slot
            self._slots[line.tag] = slot
        self._push_front(slot)

    def update(self, line: CacheLine):
        slot = self._slots.get(line.tag)
        if slot is None:
            return
        self._unlink(slot)
        self._push_front(slot)

    def evict(self) -> int:
        if self.tail == NIL:
            return NIL
        slot = self.tail
        self._unlink(slot)
        victim = self.lines[slot]
        self._slots.pop(victim.tag, None)
        victim.valid = False
        return slot

    def _unlink(self, slot: int):
        prev, nxt = self._prev[slot], self._next[slot]
        if prev != NIL:
            self._next[prev] = nxt
        else:
            self.head = nxt
        if nxt != NIL:
            self._prev[nxt] = prev
        else:
            self.tail = prev
        self._prev[slot] = self._next[slot] = NIL

    def _push_front(self, slot: int):
        self._prev[slot] = NIL
        self._next[slot] = self.head
        if self.head != NIL:
            self._prev[self.head] = slot
        self.head = slot
        if self.tail == NIL:
            self.tail = slot


class LFU(ReplacementPolicy):
    """Evicts the valid line with the lowest access count, lowest slot first on ties."""

    def insert(self, line: CacheLine):
        if line.slot == NIL:
            line.slot = self._free_slot()
            if line.slot == NIL:
                line.slot = self.evict()
            self.lines[line.slot] = line
        line.freq = 1

    def update(self, line: CacheLine):
        for l in self.lines:
            if l.valid and l.tag == line.tag:
                l.freq += 1
                break

    def evict(self) -> int:
        victim = NIL
        min_freq = None
        for i, l in enumerate(self.lines):
            if l.valid and (min_freq is None or l.freq < min_freq):
                min_freq = l.freq
                victim = i
        if victim != NIL:
            self.lines[victim].valid = False
        return victim

    def _free_slot(self) -> int:
        for i, l in enumerate(self.lines):
            if not l.valid:
                return i
        return NIL


POLICY_MAP = {
    PolicyName.LRU: LRU,
    PolicyName.LFU: LFU,
    PolicyName.RR: RoundRobin,
}


def generate_replacement_policy(policy_name, lines: List[CacheLine]) -> ReplacementPolicy:
    try:
        policy_name = PolicyName(policy_name)
    except ValueError as e:
        raise ConfigError(f"unknown replacement policy {policy_name!r}") from e
    return POLICY_MAP[policy_name](lines)


__all__ = [
    "LFU",
    "LRU",
    "NIL",
    "POLICY_MAP",
    "RoundRobin",
    "generate_replacement_policy",
]
