import json
from pathlib import Path

import yaml

from cache_sim.entity.report import HierarchyStat

import logging
logger = logging.getLogger(__name__)


def format_stats(stat: HierarchyStat) -> str:
    return json.dumps(stat.to_dict(), indent=2)


class PostProcessor:
    def build_report(self, stat: HierarchyStat):
        report = {"caches": []}
        for s in stat.caches:
            report["caches"].append({
                "name": s.name,
                "hits": s.hits,
                "misses": s.misses,
                "accesses": s.accesses,
                "hit_rate": s.hit_rate,
                "miss_rate": s.miss_rate,
            })
        report["main_memory_accesses"] = stat.main_memory_accesses
        return report

    def generate_report(self, stat: HierarchyStat, report_path: str):
        report = self.build_report(stat)
        report_str = yaml.dump(report, sort_keys=False, indent=2)

        Path(report_path).parent.mkdir(parents=True, exist_ok=True)
        Path(report_path).write_text(report_str)
        logger.debug(report)
        logger.info("report generated at %s", report_path)
        return report


__all__ = ["PostProcessor", "format_stats"]
