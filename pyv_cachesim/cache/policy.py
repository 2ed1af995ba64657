from __future__ import annotations
from collections import OrderedDict
from enum import Enum
from typing import Dict, List, Tuple, Type


class ReplacementPolicy(str, Enum):
    """Victim selection rule for a full set-associative set."""

    LRU = "lru"
    LFU = "lfu"
    RR = "rr"
    # Used when a set-associative level names no policy
    FIFO = "fifo"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str | None) -> ReplacementPolicy:
        """Maps a config string to a policy. None means FIFO; unknown strings raise."""
        if value is None:
            return cls.FIFO
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown replacement policy {value!r} (expected one of: {choices})")


class CacheSet:
    """Resident tags of one set plus the bookkeeping its policy needs.

    Subclasses implement `_touch` (hit update), `_victim` (eviction when full)
    and `_insert`. A set never looks at any other set's state.
    """
    policy: ReplacementPolicy

    def __init__(self, associativity: int):
        if associativity <= 0:
            raise ValueError("Associativity must be positive.")
        self.associativity = associativity

    def __contains__(self, tag: int) -> bool:
        raise NotImplementedError

    def __len__(self) -> int:
        raise NotImplementedError

    def resident(self) -> List[int]:
        """Resident tags in the set's bookkeeping order."""
        raise NotImplementedError

    def is_full(self) -> bool:
        return len(self) >= self.associativity

    def access(self, tag: int) -> Tuple[bool, int | None]:
        """Looks up `tag`, installing it on a miss. Returns (hit, evicted_tag)."""
        if tag in self:
            self._touch(tag)
            return True, None
        evicted = None
        if self.is_full():
            evicted = self._victim()
        self._insert(tag)
        return False, evicted

    def _touch(self, tag: int):
        raise NotImplementedError

    def _victim(self) -> int:
        raise NotImplementedError

    def _insert(self, tag: int):
        raise NotImplementedError


class _OrderedSet(CacheSet):
    """Shared storage for policies that keep tags in an OrderedDict."""

    def __init__(self, associativity: int):
        super().__init__(associativity)
        self.lines: OrderedDict[int, int] = OrderedDict()

    def __contains__(self, tag: int) -> bool:
        return tag in self.lines

    def __len__(self) -> int:
        return len(self.lines)

    def resident(self) -> List[int]:
        return list(self.lines)

    def _touch(self, tag: int):
        pass

    def _victim(self) -> int:
        # The first item is the oldest entry
        tag, _ = self.lines.popitem(last=False)
        return tag

    def _insert(self, tag: int):
        self.lines[tag] = 1


class FIFOSet(_OrderedSet):
    """Evicts the oldest inserted tag. Hits do not reorder."""
    policy = ReplacementPolicy.FIFO


class LRUSet(_OrderedSet):
    """Evicts the least recently used tag. The first item is the LRU, the last is the MRU."""
    policy = ReplacementPolicy.LRU

    def _touch(self, tag: int):
        self.lines.move_to_end(tag)


class LFUSet(_OrderedSet):
    """Evicts the least frequently used tag; ties go to the earliest inserted.

    Values in `lines` are access counts. Updating a count keeps the tag's
    insertion position, so iteration order doubles as the tie-breaker.
    """
    policy = ReplacementPolicy.LFU

    def _touch(self, tag: int):
        self.lines[tag] += 1

    def _victim(self) -> int:
        # min() keeps the first of equal keys, i.e. the earliest inserted
        tag = min(self.lines, key=self.lines.__getitem__)
        del self.lines[tag]
        return tag

    def frequency(self, tag: int) -> int:
        return self.lines.get(tag, 0)


class RoundRobinSet(CacheSet):
    """Fixed slots with a rotating eviction pointer, independent of hit history."""
    policy = ReplacementPolicy.RR

    def __init__(self, associativity: int):
        super().__init__(associativity)
        self.slots: List[int] = []
        self.pointer = 0

    def __contains__(self, tag: int) -> bool:
        return tag in self.slots

    def __len__(self) -> int:
        return len(self.slots)

    def resident(self) -> List[int]:
        return list(self.slots)

    def access(self, tag: int) -> Tuple[bool, int | None]:
        if tag in self.slots:
            return True, None
        if not self.is_full():
            self.slots.append(tag)
            return False, None
        # Replace in place so slot positions stay stable for the pointer
        evicted = self.slots[self.pointer]
        self.slots[self.pointer] = tag
        self.pointer = (self.pointer + 1) % self.associativity
        return False, evicted


SET_TYPES: Dict[ReplacementPolicy, Type[CacheSet]] = {
    ReplacementPolicy.LRU: LRUSet,
    ReplacementPolicy.LFU: LFUSet,
    ReplacementPolicy.RR: RoundRobinSet,
    ReplacementPolicy.FIFO: FIFOSet,
}


def make_set(policy: ReplacementPolicy, associativity: int) -> CacheSet:
    """Creates the bookkeeping structure for one set under `policy`."""
    return SET_TYPES[policy](associativity)
