"""Bloom filter over a linear congruential hash family.

The filter owns a ``bytearray`` bitset and a hash strategy (``HashFamily`` by
default). Keys go through a pre-hash that maps them to non-negative integers
before the family is applied; integers pass straight through.

There is no locking. Concurrent ``insert`` calls must be serialized by the
caller, and ``contains`` must not race an unsynchronized ``insert``.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List

from bf_lcg.hash_family import (
    DEFAULT_SEED,
    Generator,
    HashFamily,
    HashStrategy,
    KeyFunc,
    murmur_key,
    validate_parameters,
)
from bf_lcg.params import expected_false_positive_rate

logger = logging.getLogger(__name__)


class BloomFilter:
    """Non-counting Bloom filter backed by a bytearray bitset."""

    def __init__(
        self,
        size: int,
        num_hashes: int,
        generator: Generator = DEFAULT_SEED,
        *,
        key_func: KeyFunc = murmur_key,
    ) -> None:
        """Initialize an empty filter with its own hash family.

        Args:
            size: Number of bits in the filter.
            num_hashes: Number of hash functions to use.
            generator: Seed or ``random.Random`` used to draw the family.
            key_func: Pre-hash mapping keys to non-negative integers.

        Raises:
            ValueError: If size or num_hashes is not positive.
        """
        self._init(HashFamily(size, num_hashes, generator), key_func)

    @classmethod
    def from_strategy(cls, strategy: HashStrategy, *, key_func: KeyFunc = murmur_key) -> BloomFilter:
        """Build a filter around an existing hash strategy.

        Raises:
            ValueError: If the strategy reports a non-positive size or hash count.
        """
        bloom = cls.__new__(cls)
        bloom._init(strategy, key_func)
        return bloom

    def _init(self, strategy: HashStrategy, key_func: KeyFunc) -> None:
        validate_parameters(strategy.size, strategy.num_hashes)
        self.size = strategy.size
        self.num_hashes = strategy.num_hashes
        self._hasher = strategy
        self._key_func = key_func
        self._bit_array = bytearray((self.size + 7) // 8)
        logger.debug("created bloom filter: size=%d num_hashes=%d strategy=%r",
                     self.size, self.num_hashes, strategy)

    def positions(self, item: Any) -> List[int]:
        """Return the bit positions ``item`` maps to."""
        return self._hasher.hash(self._key_func(item))

    def insert(self, item: Any) -> None:
        """Insert ``item`` into the filter."""
        for bit_index in self.positions(item):
            self._bit_array[bit_index >> 3] |= 1 << (bit_index & 7)

    add = insert

    def update(self, items: Iterable[Any]) -> None:
        """Insert all ``items`` into the filter."""
        for item in items:
            self.insert(item)

    def contains(self, item: Any) -> bool:
        """Return True if ``item`` may be present, False if definitely absent."""
        for bit_index in self.positions(item):
            if not (self._bit_array[bit_index >> 3] & (1 << (bit_index & 7))):
                return False
        return True

    __contains__ = contains

    def count_set_bits(self) -> int:
        """Return the number of table bits currently set."""
        return sum(bin(byte).count("1") for byte in self._bit_array)

    def fill_ratio(self) -> float:
        """Fraction of table bits currently set."""
        return self.count_set_bits() / self.size

    def estimated_false_positive_rate(self, inserted: int) -> float:
        """Expected false positive rate after ``inserted`` distinct insertions."""
        return expected_false_positive_rate(self.size, self.num_hashes, inserted)

    @property
    def hasher(self) -> HashStrategy:
        """The hash strategy mapping keys to positions."""
        return self._hasher

    @property
    def bit_array(self) -> bytearray:
        """Expose the underlying bit array for inspection."""
        return self._bit_array

    def __repr__(self) -> str:
        return f"BloomFilter(size={self.size}, num_hashes={self.num_hashes})"
