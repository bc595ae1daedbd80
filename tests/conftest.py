from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List

import pytest
import yaml

from cache_sim.arch import CacheHierarchy
from cache_sim.config import CacheConfig, HierarchyConfig


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., str]:
    def _write(caches: List[Dict], name: str = "hierarchy.yaml") -> str:
        path = tmp_path / name
        path.write_text(yaml.safe_dump({"caches": caches}, sort_keys=False))
        return str(path)
    return _write


@pytest.fixture
def write_trace(tmp_path: Path) -> Callable[..., str]:
    def _write(lines: List[str], name: str = "trace.txt") -> str:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n")
        return str(path)
    return _write


@pytest.fixture
def build_hierarchy() -> Callable[..., CacheHierarchy]:
    def _build(*caches: Dict) -> CacheHierarchy:
        config = HierarchyConfig([CacheConfig(**c) for c in caches])
        return CacheHierarchy.from_config(config)
    return _build
