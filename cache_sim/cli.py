import argparse
import logging
import sys
from typing import List, Optional

from cache_sim.arch import CacheHierarchy
from cache_sim.config import DEFAULT_BUFFER_SIZE, load_hierarchy_config
from cache_sim.entity.model import CacheSimError
from cache_sim.post_processor import PostProcessor, format_stats
from cache_sim.simulator import SimulationPipeline, TraceSimulator, read_trace

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cache-sim",
        description="Trace-driven multi-level cache hierarchy simulator")
    parser.add_argument("config", help="hierarchy description (YAML or JSON)")
    parser.add_argument("trace", help="memory access trace file")
    parser.add_argument("--buffer-size", type=int, default=DEFAULT_BUFFER_SIZE,
                        help="capacity of the producer/consumer queue (default: %(default)s)")
    parser.add_argument("--report", default=None,
                        help="also write a YAML report with hit rates to this path")
    parser.add_argument("--serial", action="store_true",
                        help="simulate on the calling thread instead of the two-stage pipeline")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_hierarchy_config(args.config)
        hierarchy = CacheHierarchy.from_config(config)
        if args.serial:
            stat = TraceSimulator(hierarchy).run(read_trace(args.trace))
        else:
            stat = SimulationPipeline(hierarchy, args.buffer_size).run(args.trace)
        if args.report:
            PostProcessor().generate_report(stat, args.report)
    except (CacheSimError, OSError) as e:
        logger.error("simulation failed: %s", e)
        return 1

    print(format_stats(stat))
    return 0


if __name__ == "__main__":
    sys.exit(main())
