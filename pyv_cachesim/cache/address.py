from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple

ADDRESS_BITS = 64
MAX_ADDRESS = (1 << ADDRESS_BITS) - 1


def is_power_of_two(n: int) -> bool:
    return (n > 0) and (n & (n - 1) == 0)


def exact_log2(n: int) -> int:
    """Returns log2(n) for an exact power of two, using bit scanning instead of floats."""
    if not is_power_of_two(n):
        raise ValueError(f"{n} is not a power of two")
    return n.bit_length() - 1


def decompose(address: int, offset_bits: int, index_bits: int) -> Tuple[int, int]:
    """Splits an address into (tag, index). The offset field is dropped."""
    if not 0 <= address <= MAX_ADDRESS:
        raise ValueError(f"Address {address:#x} is outside the {ADDRESS_BITS}-bit range.")
    index = (address >> offset_bits) & ((1 << index_bits) - 1)
    tag = address >> (offset_bits + index_bits)
    return tag, index


@dataclass(frozen=True)
class AddressDecoder:
    """Tag/index/offset layout for a cache with `num_indices` slots or sets.

    Both sizes must be exact powers of two; otherwise bitmask indexing would
    silently alias addresses, so construction fails with ValueError.
    """
    block_size_bytes: int
    num_indices: int

    offset_bits: int = field(init=False)
    index_bits: int = field(init=False)

    def __post_init__(self):
        # frozen dataclass: derived fields go through object.__setattr__
        object.__setattr__(self, "offset_bits", exact_log2(self.block_size_bytes))
        object.__setattr__(self, "index_bits", exact_log2(self.num_indices))

    @property
    def offset_mask(self) -> int:
        return (1 << self.offset_bits) - 1

    def decompose(self, address: int) -> Tuple[int, int]:
        return decompose(address, self.offset_bits, self.index_bits)

    def offset(self, address: int) -> int:
        return address & self.offset_mask

    def block_address(self, tag: int, index: int) -> int:
        """Reconstructs the block start address from tag and index."""
        return (tag << (self.index_bits + self.offset_bits)) | (index << self.offset_bits)
