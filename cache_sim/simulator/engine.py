from typing import Iterable

from cache_sim.arch import CacheHierarchy
from cache_sim.entity.model import CacheInstruction, MemoryAccessInstruction
from cache_sim.entity.report import HierarchyStat
from cache_sim.memory.addr_converter import get_affected_addresses, get_offset, to_binary

import logging
logger = logging.getLogger(__name__)


class TraceSimulator:
    def __init__(self, hierarchy: CacheHierarchy):
        self.hierarchy = hierarchy
        self.instruction_count = 0

    def expand(self, access: MemoryAccessInstruction) -> CacheInstruction:
        # the nearest cache decides which lines an access spans
        l1 = self.hierarchy.nearest
        address = to_binary(access.address)
        offset = get_offset(address, l1.tag_bits, l1.index_bits)
        addresses = get_affected_addresses(
            access.size, l1.line_size, offset, address)
        return CacheInstruction(addresses=addresses)

    def execute_instruction(self, instruction: CacheInstruction):
        for address in instruction.addresses:
            self.hierarchy.process(address)
        self.instruction_count += 1

    def run(self, accesses: Iterable[MemoryAccessInstruction]) -> HierarchyStat:
        for access in accesses:
            self.execute_instruction(self.expand(access))
        logger.info("simulated %d instructions", self.instruction_count)
        return self.stat()

    def stat(self) -> HierarchyStat:
        return self.hierarchy.stat()


__all__ = ["TraceSimulator"]
