from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..config import LevelConfig
from ..errors import ConfigurationError
from .level import CacheLevel, build_level


class CacheHierarchy:
    """Ordered cache levels, L1 first. Main memory sits behind the last level.

    Every address is probed from level 0 and stops at the first hit, so a hit
    in L1 never touches L2+. Addresses must be streamed strictly in trace
    order; recency and frequency bookkeeping depend on it.
    """

    def __init__(self, levels: Sequence[CacheLevel]):
        if not levels:
            raise ConfigurationError("a cache hierarchy needs at least one level", field="caches")
        self.levels: List[CacheLevel] = list(levels)

    @classmethod
    def from_configs(cls, configs: Iterable[LevelConfig]) -> CacheHierarchy:
        return cls([build_level(c) for c in configs])

    def probe(self, address: int) -> Optional[int]:
        """Returns the position of the level that hit, or None if main memory served the access."""
        for i, level in enumerate(self.levels):
            if level.visit(address):
                return i
        return None

    def run(self, addresses: Iterable[int]) -> int:
        """Probes every address in order. Returns how many were processed."""
        count = 0
        for address in addresses:
            self.probe(address)
            count += 1
        return count

    @property
    def total_accesses(self) -> int:
        return self.levels[0].visits

    @property
    def main_memory_accesses(self) -> int:
        last = self.levels[-1]
        return last.visits - last.hits

    def stats(self) -> Dict[str, Any]:
        return {
            "caches": [level.stats() for level in self.levels],
            "main_memory_accesses": self.main_memory_accesses,
            "total_accesses": self.total_accesses,
        }
