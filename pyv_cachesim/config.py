from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import re
import yaml
from pathlib import Path

from .cache.address import is_power_of_two
from .cache.policy import ReplacementPolicy
from .errors import ConfigurationError

_NWAY_RE = re.compile(r"^(\d+)way$")

REQUIRED_LEVEL_KEYS = ("size", "line_size", "kind")


@dataclass
class LevelConfig:
    """Normalized descriptor of one cache level."""
    name: str = "L1"
    size: int = 32 * 1024
    line_size: int = 64
    kind: str = "direct"  # direct, full, <N>way
    replacement_policy: Optional[str] = None  # lru, lfu, rr; None -> FIFO

    # Derived properties
    associativity: Optional[int] = field(init=False, default=None)
    num_blocks: int = field(init=False, default=0)
    num_sets: int = field(init=False, default=0)
    policy: Optional[ReplacementPolicy] = field(init=False, default=None)

    def __post_init__(self):
        def fail(message: str, fld: str):
            raise ConfigurationError(message, level=self.name, field=fld)

        for fld in ("size", "line_size"):
            value = getattr(self, fld)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                fail(f"must be a positive integer, got {value!r}", fld)

        if not is_power_of_two(self.line_size):
            fail(f"{self.line_size} is not a power of two", "line_size")
        if self.size % self.line_size != 0:
            fail(f"cache size {self.size} is not a multiple of line size {self.line_size}", "size")

        self.num_blocks = self.size // self.line_size
        if not is_power_of_two(self.num_blocks):
            fail(f"block count {self.num_blocks} is not a power of two", "size")

        # Policy is validated even for direct-mapped levels so typos never pass silently
        try:
            self.policy = ReplacementPolicy.parse(self.replacement_policy)
        except ValueError as e:
            fail(str(e), "replacement_policy")

        kind = self.kind
        if kind == "direct":
            self.associativity = None
            self.num_sets = self.num_blocks
            return

        if kind == "full":
            associativity = self.num_blocks
        else:
            m = _NWAY_RE.match(kind) if isinstance(kind, str) else None
            if not m:
                fail(f"unknown cache kind {self.kind!r} (expected direct, full or <N>way)", "kind")
            associativity = int(m.group(1))
            if associativity <= 0:
                fail("associativity must be positive", "kind")
            if self.num_blocks % associativity != 0:
                fail(f"associativity {associativity} does not divide {self.num_blocks} blocks", "kind")

        self.associativity = associativity
        self.num_sets = self.num_blocks // associativity
        if not is_power_of_two(self.num_sets):
            fail(f"set count {self.num_sets} is not a power of two", "kind")

    @property
    def is_direct(self) -> bool:
        return self.associativity is None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], position: int = 1) -> LevelConfig:
        """Builds a level from a config-file mapping (keys as in the `caches` list)."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"level entry must be a mapping, got {type(data).__name__}",
                                     level=f"L{position}")
        name = str(data.get("name") or f"L{position}")
        for key in REQUIRED_LEVEL_KEYS:
            if key not in data:
                raise ConfigurationError("missing required key", level=name, field=key)
        return cls(
            name=name,
            size=data["size"],
            line_size=data["line_size"],
            kind=data["kind"],
            replacement_policy=data.get("replacement_policy"),
        )


def parse_levels(entries: Any) -> List[LevelConfig]:
    """Normalizes the `caches` list of a config document."""
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError("config must define a non-empty 'caches' list", field="caches")
    return [LevelConfig.from_dict(entry, position=i + 1) for i, entry in enumerate(entries)]


@dataclass
class SimConfig:
    """PyV-CacheSim run configuration."""
    # Config file (YAML; JSON documents load as well)
    config_file: str = ""

    # Trace file
    trace: str = ""

    # Reporting
    report_dir: str = ""
    plot: str = ""
    ascii_chart: bool = False

    log_level: str = "INFO"

    # Cache hierarchy, closest to the processor first
    levels: List[LevelConfig] = field(default_factory=list)

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        try:
            with open(yaml_path, 'r') as f:
                yaml_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"cannot parse {yaml_path}: {e}")
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"{yaml_path} must contain a mapping at the top level")
        for key, value in yaml_config.items():
            if key == "caches":
                self.levels = parse_levels(value)
            elif key != "levels" and hasattr(self, key):
                setattr(self, key, value)

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if hasattr(args, 'config') and args.config:
            config.config_file = args.config
            if not Path(config.config_file).exists():
                raise ConfigurationError(f"config file {config.config_file} not found")
            config.update_from_yaml(config.config_file)

        # 2. Override with command-line arguments
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and key != "levels" and hasattr(config, key):
                setattr(config, key, value)

        return config
