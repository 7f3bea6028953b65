import math

import pytest

from bf_lcg.params import derive_num_hashes, expected_false_positive_rate


@pytest.mark.parametrize("size,capacity,expected", [
    (1000, 100, 7),
    (100, 100, 1),
    (10, 1000, 1),
    (1440, 100, 10),
])
def test_derive_num_hashes(size, capacity, expected):
    assert derive_num_hashes(size, capacity) == expected


@pytest.mark.parametrize("size,capacity", [(0, 10), (10, 0), (-1, 10)])
def test_derive_num_hashes_rejects_non_positive(size, capacity):
    with pytest.raises(ValueError):
        derive_num_hashes(size, capacity)


def test_expected_false_positive_rate():
    assert expected_false_positive_rate(1000, 7, 0) == 0.0
    assert expected_false_positive_rate(1000, 7, 100) == pytest.approx((1 - math.exp(-0.7)) ** 7)
    assert expected_false_positive_rate(1000, 7, 100) < expected_false_positive_rate(1000, 7, 500)


def test_expected_false_positive_rate_validation():
    with pytest.raises(ValueError):
        expected_false_positive_rate(0, 7, 10)
    with pytest.raises(ValueError):
        expected_false_positive_rate(100, 0, 10)
    with pytest.raises(ValueError):
        expected_false_positive_rate(100, 7, -1)
