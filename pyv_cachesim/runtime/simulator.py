from __future__ import annotations
from typing import Any, Dict, Iterable, Tuple

from ..cache.hierarchy import CacheHierarchy
from ..config import SimConfig
from ..errors import ConfigurationError
from ..io.trace import read_trace
from ..utils.logging import get_logger

logger = get_logger(__name__)


def run(addresses: Iterable[int], config: SimConfig) -> Tuple[CacheHierarchy, Dict[str, Any]]:
    """
    Runs the simulation for an address trace and configuration.

    A fresh hierarchy is built for every call, so repeated runs over the same
    inputs are independent and produce identical counters.
    """
    if not config.levels:
        raise ConfigurationError("no cache levels configured", field="caches")

    hierarchy = CacheHierarchy.from_configs(config.levels)
    logger.info(f"Running simulation over {len(hierarchy.levels)} cache level(s)")

    count = hierarchy.run(addresses)
    stats = hierarchy.stats()
    logger.info(f"Processed {count} accesses, {stats['main_memory_accesses']} reached main memory")
    return hierarchy, stats


def run_trace_file(config: SimConfig) -> Tuple[CacheHierarchy, Dict[str, Any]]:
    """Reads `config.trace` and runs it through the configured hierarchy."""
    if not config.trace:
        raise ConfigurationError("no trace file given", field="trace")
    addresses = read_trace(config.trace)
    logger.info(f"Loaded {len(addresses)} accesses from {config.trace}")
    return run(addresses, config)
