"""Capacity planning helpers for sizing a Bloom filter."""
from __future__ import annotations

import math


def derive_num_hashes(size: int, capacity: int) -> int:
    """Return the hash count minimizing false positives for ``capacity`` items in ``size`` bits.

    ``k = ceil((size / capacity) * ln 2)``, so ``derive_num_hashes(1000, 100)``
    is 7 and ``derive_num_hashes(100, 100)`` is 1.

    Raises:
        ValueError: If size or capacity is not positive.
    """
    if size <= 0:
        raise ValueError("size must be positive")
    if capacity <= 0:
        raise ValueError("capacity must be positive")

    return max(1, math.ceil((size / capacity) * math.log(2)))


def expected_false_positive_rate(size: int, num_hashes: int, inserted: int) -> float:
    """Approximate false positive probability ``(1 - e^(-k*inserted/size))^k``."""
    if size <= 0:
        raise ValueError("size must be positive")
    if num_hashes <= 0:
        raise ValueError("num_hashes must be positive")
    if inserted < 0:
        raise ValueError("inserted must be non-negative")
    if inserted == 0:
        return 0.0

    return (1.0 - math.exp(-num_hashes * inserted / size)) ** num_hashes
