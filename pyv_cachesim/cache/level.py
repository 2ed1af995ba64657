from __future__ import annotations
from typing import Dict, List, Optional, Union

from ..config import LevelConfig
from ..errors import ConfigurationError, InvariantViolation
from ..utils.logging import get_logger
from .address import AddressDecoder, is_power_of_two
from .policy import CacheSet, ReplacementPolicy, make_set

logger = get_logger(__name__)


def _check_geometry(name: str, size_bytes: int, block_size_bytes: int) -> int:
    """Validates level sizes and returns the block count."""
    for fld, value in (("line_size", block_size_bytes), ("size", size_bytes)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(f"must be a positive integer, got {value!r}", level=name, field=fld)
    if not is_power_of_two(block_size_bytes):
        raise ConfigurationError(f"{block_size_bytes} is not a power of two", level=name, field="line_size")
    if size_bytes % block_size_bytes != 0:
        raise ConfigurationError(f"cache size {size_bytes} is not a multiple of line size {block_size_bytes}",
                                 level=name, field="size")
    if not is_power_of_two(size_bytes):
        raise ConfigurationError(f"cache size {size_bytes} is not a power of two", level=name, field="size")
    return size_bytes // block_size_bytes


class _LevelStats:
    """Hit/visit counters shared by both level variants."""
    name: str
    hits: int
    visits: int

    @property
    def misses(self) -> int:
        return self.visits - self.hits

    @property
    def hit_rate(self) -> float:
        if self.visits == 0:
            return 0.0
        return self.hits / self.visits

    def stats(self) -> Dict[str, Union[str, int, float]]:
        return {
            "name": self.name,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hit_rate,
        }


class DirectMappedLevel(_LevelStats):
    """One tag slot per index. A miss always overwrites the slot."""

    def __init__(self, name: str, size_bytes: int, block_size_bytes: int):
        self.name = name
        self.size_bytes = size_bytes
        self.block_size_bytes = block_size_bytes
        self.num_blocks = _check_geometry(name, size_bytes, block_size_bytes)
        try:
            self.decoder = AddressDecoder(block_size_bytes, self.num_blocks)
        except ValueError as e:
            raise ConfigurationError(str(e), level=name, field="size")
        # None marks an empty slot
        self.tags: List[Optional[int]] = [None] * self.num_blocks
        self.hits = 0
        self.visits = 0

    def visit(self, address: int) -> bool:
        """Looks up `address`, installing its tag on a miss. Returns True on a hit."""
        self.visits += 1
        tag, index = self.decoder.decompose(address)
        if not 0 <= index < self.num_blocks:
            raise InvariantViolation(f"[{self.name}] index {index} out of range for {self.num_blocks} blocks")

        if self.tags[index] == tag:
            self.hits += 1
            return True

        evicted = self.tags[index]
        self.tags[index] = tag
        if evicted is not None:
            logger.debug(f"{self.name}: evict block {self.decoder.block_address(evicted, index):#x} "
                         f"from slot {index}")
        return False


class SetAssociativeLevel(_LevelStats):
    """`associativity` ways per set, victims chosen by a ReplacementPolicy."""

    def __init__(self, name: str, size_bytes: int, block_size_bytes: int,
                 associativity: int, policy: ReplacementPolicy):
        num_blocks = _check_geometry(name, size_bytes, block_size_bytes)
        if associativity <= 0:
            raise ConfigurationError("associativity must be positive", level=name, field="kind")
        self.name = name
        self.size_bytes = size_bytes
        self.block_size_bytes = block_size_bytes
        self.associativity = associativity
        self.policy = policy
        if num_blocks % associativity != 0:
            raise ConfigurationError(f"associativity {associativity} does not divide {num_blocks} blocks",
                                     level=name, field="kind")
        self.num_sets = num_blocks // associativity
        try:
            self.decoder = AddressDecoder(block_size_bytes, self.num_sets)
        except ValueError as e:
            raise ConfigurationError(str(e), level=name, field="kind")
        self.sets: List[CacheSet] = [make_set(policy, associativity) for _ in range(self.num_sets)]
        self.hits = 0
        self.visits = 0

    def visit(self, address: int) -> bool:
        """Looks up `address`, evicting per policy on a miss. Returns True on a hit."""
        self.visits += 1
        tag, index = self.decoder.decompose(address)
        if not 0 <= index < self.num_sets:
            raise InvariantViolation(f"[{self.name}] index {index} out of range for {self.num_sets} sets")

        hit, evicted = self.sets[index].access(tag)
        if hit:
            self.hits += 1
        elif evicted is not None:
            logger.debug(f"{self.name}: {self.policy} evicts block "
                         f"{self.decoder.block_address(evicted, index):#x} from set {index}")
        return hit


CacheLevel = Union[DirectMappedLevel, SetAssociativeLevel]


def build_level(config: LevelConfig) -> CacheLevel:
    """Creates the level variant described by a normalized LevelConfig."""
    if config.is_direct:
        level = DirectMappedLevel(config.name, config.size, config.line_size)
        logger.info(f"{config.name}: direct-mapped, {config.size} B, {config.line_size} B lines, "
                    f"{level.num_blocks} blocks")
        return level

    level = SetAssociativeLevel(config.name, config.size, config.line_size,
                                config.associativity, config.policy)
    logger.info(f"{config.name}: {config.associativity}-way {config.policy}, {config.size} B, "
                f"{config.line_size} B lines, {level.num_sets} sets")
    return level
