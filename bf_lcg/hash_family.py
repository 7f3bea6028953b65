"""Hash families used to map keys onto Bloom filter bit positions.

The canonical family is a set of ``k`` linear congruential functions
``h(x) = (a*x + b) mod n`` whose coefficients are drawn from a seeded
``random.Random``. For a fixed ``(n, k, seed)`` the family, and therefore every
position it produces, is fully reproducible.

Coefficients are drawn from the closed range ``[1, n-1]``: ``a`` then ``b`` for
each function in order. ``a`` is never zero, so no function degenerates into a
constant. A table of size 1 collapses the range to ``[1, 1]``.

``a*x + b`` is reduced modulo ``2**64`` (``WORD_MASK``) before the final
``mod n``, so the high bits of ``x`` reach every position.

Linear congruential hashes only operate on non-negative integers. Other keys go
through a pre-hash (``murmur_key`` by default) that maps them to one.
"""
from __future__ import annotations

import logging
import random
from typing import Any, Callable, Iterator, List, Protocol, Tuple, Union

import mmh3
import xxhash

logger = logging.getLogger(__name__)

DEFAULT_SEED = 0
WORD_MASK = (1 << 64) - 1

Generator = Union[int, random.Random]
KeyFunc = Callable[[Any], int]


def validate_parameters(size: int, num_hashes: int) -> None:
    """Reject a non-positive table size or hash count."""
    if size <= 0:
        raise ValueError("size must be positive")
    if num_hashes <= 0:
        raise ValueError("num_hashes must be positive")


def as_generator(generator: Generator) -> random.Random:
    """Return ``generator`` itself, or a fresh ``random.Random`` seeded with it."""
    if isinstance(generator, random.Random):
        return generator
    return random.Random(generator)


class LinearCongruentialHash:
    """A single hash ``h(x) = ((a*x + b) mod 2**64) mod size``."""

    __slots__ = ("_size", "_a", "_b")

    def __init__(self, size: int, a: int, b: int) -> None:
        self._size = size
        self._a = a
        self._b = b

    @property
    def size(self) -> int:
        return self._size

    @property
    def a(self) -> int:
        return self._a

    @property
    def b(self) -> int:
        return self._b

    def __call__(self, x: int) -> int:
        return ((self._a * x + self._b) & WORD_MASK) % self._size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinearCongruentialHash):
            return NotImplemented
        return (self._size, self._a, self._b) == (other._size, other._a, other._b)

    def __hash__(self) -> int:
        return hash((self._size, self._a, self._b))

    def __repr__(self) -> str:
        return f"LinearCongruentialHash(size={self._size}, a={self._a}, b={self._b})"


class HashStrategy(Protocol):
    """Anything that turns an integer key into ``num_hashes`` positions in ``[0, size)``."""

    size: int
    num_hashes: int

    def hash(self, x: int) -> List[int]:
        ...


class HashFamily:
    """``num_hashes`` independent linear congruential hashes sharing modulus ``size``."""

    def __init__(self, size: int, num_hashes: int, generator: Generator = DEFAULT_SEED) -> None:
        """Draw the family's coefficients.

        Args:
            size: Modulus shared by every function (the table size).
            num_hashes: Number of functions in the family.
            generator: Seed, or a ``random.Random`` owned by the caller. A
                passed-in generator is advanced by ``2 * num_hashes`` draws.

        Raises:
            ValueError: If size or num_hashes is not positive.
        """
        validate_parameters(size, num_hashes)

        rng = as_generator(generator)
        high = max(size - 1, 1)
        functions = []
        for _ in range(num_hashes):
            a = rng.randint(1, high)
            b = rng.randint(1, high)
            functions.append(LinearCongruentialHash(size, a, b))

        self.size = size
        self.num_hashes = num_hashes
        self._functions: Tuple[LinearCongruentialHash, ...] = tuple(functions)
        logger.debug("built hash family: size=%d num_hashes=%d", size, num_hashes)

    def hash(self, x: int) -> List[int]:
        """Return the position of ``x`` under every function, in family order."""
        return [h(x) for h in self._functions]

    __call__ = hash

    @property
    def coefficients(self) -> Tuple[Tuple[int, int], ...]:
        """The ``(a, b)`` pair of every function, in family order."""
        return tuple((h.a, h.b) for h in self._functions)

    def __iter__(self) -> Iterator[LinearCongruentialHash]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self) -> str:
        return f"HashFamily(size={self.size}, num_hashes={self.num_hashes})"


class DoubleHashFamily:
    """Kirsch-Mitzenmacher double hashing over MurmurHash3 and xxHash64.

    Positions are ``(h1 + i*h2) mod size`` for ``i`` in ``range(num_hashes)``,
    where ``h1`` and ``h2`` digest the little-endian bytes of the key. The
    step ``h2`` is never zero.
    """

    def __init__(self, size: int, num_hashes: int, *, seed1: int = 0, seed2: int = 0) -> None:
        validate_parameters(size, num_hashes)

        self.size = size
        self.num_hashes = num_hashes
        self.seed1 = seed1
        self.seed2 = seed2

    def hash(self, x: int) -> List[int]:
        """Return the ``num_hashes`` positions of ``x`` along its probe sequence."""
        data = _int_to_bytes(x)
        start = mmh3.hash(data, self.seed1, signed=False) % self.size
        step = xxhash.xxh64(data, seed=self.seed2).intdigest() % self.size or 1

        positions = []
        position = start
        for _ in range(self.num_hashes):
            positions.append(position)
            position = (position + step) % self.size
        return positions

    __call__ = hash

    def __repr__(self) -> str:
        return f"DoubleHashFamily(size={self.size}, num_hashes={self.num_hashes})"


def _int_to_bytes(x: int) -> bytes:
    return x.to_bytes(max(8, (x.bit_length() + 7) // 8), "little")


def _key_bytes(key: Any) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    raise TypeError(f"unsupported key type: {type(key).__name__}")


def identity_key(key: Any) -> int:
    """Pass non-negative integers through unchanged; reject everything else."""
    if not isinstance(key, int):
        raise TypeError(f"unsupported key type: {type(key).__name__}")
    if key < 0:
        raise ValueError("integer keys must be non-negative")
    return key


def murmur_key(key: Any) -> int:
    """Map a key to a non-negative integer, hashing text and bytes with MurmurHash3."""
    if isinstance(key, int):
        return identity_key(key)
    return mmh3.hash(_key_bytes(key), DEFAULT_SEED, signed=False)


def xxhash_key(key: Any) -> int:
    """Like ``murmur_key`` but with xxHash64, for a wider integer domain."""
    if isinstance(key, int):
        return identity_key(key)
    return xxhash.xxh64(_key_bytes(key), seed=DEFAULT_SEED).intdigest()
