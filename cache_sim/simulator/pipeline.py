from __future__ import annotations

import time
from queue import Queue
from threading import Event, Thread
from typing import Dict, Iterable

from cache_sim.arch import CacheHierarchy
from cache_sim.config import DEFAULT_BUFFER_SIZE
from cache_sim.entity.model import CacheInstruction, ConfigError, MemoryAccessInstruction
from cache_sim.entity.report import HierarchyStat
from cache_sim.simulator.engine import TraceSimulator
from cache_sim.simulator.trace import read_trace

import logging
logger = logging.getLogger(__name__)

_END_OF_STREAM = object()


class SimulationPipeline:
    """
    Runs a trace through a hierarchy with two threads.

    The producer parses records and expands them into line addresses, the
    consumer walks those addresses through the hierarchy. They only meet at a
    bounded queue, so a slow consumer blocks the producer and vice versa.
    The hierarchy is touched by the consumer thread alone.
    """

    def __init__(self, hierarchy: CacheHierarchy, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ConfigError(f"buffer size must be positive, got {buffer_size}")
        self.simulator = TraceSimulator(hierarchy)
        self.buffer_size = buffer_size

    def run(self, trace_path: str) -> HierarchyStat:
        return self.run_records(read_trace(trace_path))

    def run_records(self, accesses: Iterable[MemoryAccessInstruction]) -> HierarchyStat:
        queue: Queue[CacheInstruction | object] = Queue(maxsize=self.buffer_size)
        abort = Event()
        errors: Dict[str, Exception] = {}

        def produce():
            try:
                for access in accesses:
                    if abort.is_set():
                        break
                    queue.put(self.simulator.expand(access))
            except Exception as e:
                errors["producer"] = e
            finally:
                queue.put(_END_OF_STREAM)

        def consume():
            while True:
                instruction = queue.get()
                if instruction is _END_OF_STREAM:
                    break
                if abort.is_set():
                    # keep draining so the producer never blocks on a full queue
                    continue
                try:
                    self.simulator.execute_instruction(instruction)
                except Exception as e:
                    errors["consumer"] = e
                    abort.set()

        start = time.perf_counter()
        workers = [
            Thread(target=produce, name="trace-producer", daemon=True),
            Thread(target=consume, name="cache-consumer", daemon=True),
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        if errors:
            err = errors.get("producer") or errors["consumer"]
            logger.error("pipeline aborted: %s", err)
            raise err

        logger.info("pipeline finished: %d instructions in %.3fs",
                    self.simulator.instruction_count, time.perf_counter() - start)
        return self.simulator.stat()


__all__ = ["SimulationPipeline"]
