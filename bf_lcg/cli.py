"""Command-line harness measuring the empirical false positive rate.

Derives the hash count from the table size ``n`` and capacity ``m``, builds a
filter, inserts ``m`` random 64-bit integers and probes ``num_tests`` more::

    bloom-filters 1000 100
    python -m bf_lcg.cli 1000 100 42 --num-tests 5000
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from typing import List, Optional

from bf_lcg.bloom_filter import BloomFilter
from bf_lcg.params import derive_num_hashes

logger = logging.getLogger(__name__)

KEY_BITS = 64


def calculate_false_positive_rate(
    bloom: BloomFilter,
    generator: random.Random,
    capacity: int,
    num_tests: int,
) -> float:
    """Insert ``capacity`` random keys, then return the share of ``num_tests`` fresh probes wrongly accepted.

    Probes that happen to equal an inserted key are true positives and are not
    counted, but still contribute to the denominator.
    """
    if num_tests <= 0:
        raise ValueError("num_tests must be positive")

    added = set()
    for _ in range(capacity):
        element = generator.getrandbits(KEY_BITS)
        bloom.insert(element)
        added.add(element)

    false_positives = 0
    for _ in range(num_tests):
        element = generator.getrandbits(KEY_BITS)
        if element in bloom and element not in added:
            false_positives += 1

    logger.debug("false positives: %d of %d probes", false_positives, num_tests)
    return false_positives / num_tests


def show_properties(bloom: BloomFilter, capacity: int, seed: int) -> None:
    """Display filter configuration and memory usage."""
    bytes_len = len(bloom.bit_array)

    print(f"  Filter size (bits): {bloom.size}")
    print(f"  Filter size (bytes): {bytes_len}")
    print(f"  Capacity (m): {capacity}")
    print(f"  Number of hash functions: {bloom.num_hashes}")
    print(f"  Seed: {seed}")
    print(f"  Expected FPR at capacity: {bloom.estimated_false_positive_rate(capacity):.6f}")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def _seed(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid seed: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"seed must be non-negative: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bloom-filters",
        description="Measure the false positive rate of a linear congruential Bloom filter.",
    )
    parser.add_argument("n", type=_positive_int, help="table size of Bloom filter")
    parser.add_argument("m", type=_positive_int, help="maximum number of items inserted into Bloom filter")
    parser.add_argument("seed", type=_seed, nargs="?", default=None,
                        help="seed for the random number generator (default: current time)")
    parser.add_argument("--num-tests", type=_positive_int, default=None,
                        help="number of probes for the false positive rate (default: n)")
    parser.add_argument("--no-measure", action="store_true",
                        help="only build the filter and print its properties")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    seed = args.seed if args.seed is not None else int(time.time())
    num_tests = args.num_tests if args.num_tests is not None else args.n
    num_hashes = derive_num_hashes(args.n, args.m)
    logger.info("n=%d m=%d k=%d seed=%d", args.n, args.m, num_hashes, seed)

    generator = random.Random(seed)
    bloom = BloomFilter(args.n, num_hashes, generator)

    print("Bloom filter properties")
    show_properties(bloom, args.m, seed)

    if not args.no_measure:
        fpr = calculate_false_positive_rate(bloom, generator, args.m, num_tests)
        print(f"Calculated false positive rate is: {fpr}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
