"""
Log2-guided approximator tests (scalar host version).
"""

import numpy as np
import pytest

from declog import Log10DomainError, log10_floor
from declog.types import ALL_WIDTHS, U8, U16, U32, U64, U128


class TestLog10Floor:
    def test_zero_is_rejected(self):
        with pytest.raises(Log10DomainError):
            log10_floor(0)

    def test_zero_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            log10_floor(0, U64)

    @pytest.mark.parametrize(
        "x, expected",
        [
            (1, 0),
            (9, 0),
            (10, 1),
            (99, 1),
            (100, 2),
            (999, 2),
            (1_000, 3),
            (9_999, 3),
            (10_000, 4),
            (65_535, 4),
        ],
    )
    def test_known_values(self, x, expected):
        assert log10_floor(x) == expected

    def test_exhaustive_u16(self, reference):
        for x in range(1, 1 << 16):
            assert log10_floor(x) == reference(x), x

    def test_exhaustive_u8(self, reference):
        for x in range(1, 1 << 8):
            assert log10_floor(x, U8) == reference(x)

    def test_monotonic_u16(self):
        previous = 0
        for x in range(1, 1 << 16):
            result = log10_floor(x)
            assert result >= previous
            previous = result

    @pytest.mark.parametrize("width", ALL_WIDTHS, ids=str)
    def test_decade_boundaries(self, width):
        k = 1
        while 10**k <= width.max_value:
            assert log10_floor(10**k - 1, width) == k - 1
            assert log10_floor(10**k, width) == k
            k += 1
        assert log10_floor(width.max_value, width) == len(str(width.max_value)) - 1

    @pytest.mark.parametrize("width", ALL_WIDTHS, ids=str)
    def test_every_bit_length_index(self, width, reference):
        for k in range(width.bits):
            low = 1 << k
            high = (1 << (k + 1)) - 1
            assert log10_floor(low, width) == reference(low)
            assert log10_floor(high, width) == reference(high)

    def test_random_u64_sample(self, reference):
        rng = np.random.default_rng(12345)
        for x in rng.integers(1, 2**64 - 1, size=2000, dtype=np.uint64, endpoint=True):
            assert log10_floor(int(x), U64) == reference(x)

    def test_u128_extremes(self):
        assert log10_floor(2**127, U128) == 38
        assert log10_floor(10**38 - 1, U128) == 37
        assert log10_floor(10**38, U128) == 38
        assert log10_floor(2**128 - 1, U128) == 38

    def test_width_by_bits_and_name(self):
        assert log10_floor(4_000_000_000, 32) == 9
        assert log10_floor(4_000_000_000, "u32") == 9
        assert log10_floor(4_000_000_000, np.uint32) == 9

    def test_numpy_scalars(self):
        assert log10_floor(np.uint16(12_345)) == 4
        assert log10_floor(np.uint64(10**19), U64) == 19

    def test_out_of_range(self):
        with pytest.raises(Log10DomainError):
            log10_floor(65_536)
        with pytest.raises(Log10DomainError):
            log10_floor(2**32, U32)
        with pytest.raises(Log10DomainError):
            log10_floor(-5)

    def test_non_integer(self):
        with pytest.raises(TypeError):
            log10_floor(10.0)
        with pytest.raises(TypeError):
            log10_floor(True)

    def test_unknown_width(self):
        with pytest.raises(ValueError):
            log10_floor(10, 24)
