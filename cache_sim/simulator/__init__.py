from cache_sim.simulator.engine import TraceSimulator
from cache_sim.simulator.pipeline import SimulationPipeline
from cache_sim.simulator.trace import parse_trace, parse_trace_line, read_trace

__all__ = [
    "SimulationPipeline",
    "TraceSimulator",
    "parse_trace",
    "parse_trace_line",
    "read_trace",
]
