"""Tests for the UFloat9x56 relative gas price representation."""

from fractions import Fraction

import pytest

from gmp_primitives.ufloat import EXPONENT_BIAS, MANTISSA_BITS, UFloat9x56


class TestUFloat9x56:
    """Test suite for UFloat9x56."""

    def test_zero(self):
        zero = UFloat9x56.from_ratio(0, 5)
        assert zero.raw == 0
        assert zero.is_zero()
        assert zero.to_ratio() == (0, 1)
        assert zero.mul(10**18) == 0

    def test_one_layout(self):
        """Test that 1.0 has an empty mantissa and the bias as exponent."""
        one = UFloat9x56.ONE
        assert one.mantissa == 0
        assert one.exponent == EXPONENT_BIAS
        assert one.raw == EXPONENT_BIAS << MANTISSA_BITS
        assert Fraction(*one.to_ratio()) == 1

    @pytest.mark.parametrize("numerator,denominator", [
        (1, 1),
        (3, 2),
        (1, 1024),
        (10**12, 1),
        (1 << 200, 3),
    ])
    def test_exact_values(self, numerator, denominator):
        """Test that values with a short binary expansion survive unchanged."""
        value = UFloat9x56.from_ratio(numerator, denominator)
        if denominator == 3:
            # not exactly representable: rounded toward zero, relative error < 2**-55
            exact = Fraction(numerator, denominator)
            approx = Fraction(*value.to_ratio())
            assert approx <= exact
            assert (exact - approx) / exact < Fraction(1, 1 << MANTISSA_BITS)
        else:
            assert Fraction(*value.to_ratio()) == Fraction(numerator, denominator)

    def test_rounds_toward_zero(self):
        third = UFloat9x56.from_ratio(1, 3)
        approx = Fraction(*third.to_ratio())

        assert approx < Fraction(1, 3)
        assert third.mul(3) == 0
        assert 99999 <= third.mul(300000) <= 100000

    def test_mul(self):
        assert UFloat9x56.from_ratio(3, 2).mul(100) == 150
        assert UFloat9x56.ONE.mul(12345) == 12345
        assert UFloat9x56.from_ratio(1, 4).mul(10) == 2

    def test_monotonic(self):
        values = [UFloat9x56.from_ratio(n, 7) for n in (1, 2, 3, 50, 51, 10**6)]
        ratios = [Fraction(*value.to_ratio()) for value in values]
        assert ratios == sorted(ratios)
        assert len(set(ratios)) == len(ratios)

    def test_raw_round_trip(self):
        value = UFloat9x56.from_ratio(7, 3)
        assert UFloat9x56.from_raw(value.raw) == value

    def test_invalid_inputs(self):
        with pytest.raises(ValueError, match="denominator must be non-zero"):
            UFloat9x56.from_ratio(1, 0)
        with pytest.raises(ValueError, match="uint64"):
            UFloat9x56.from_raw(1 << 64)
        with pytest.raises(ValueError, match="out of range"):
            # rounds to the smallest magnitude, whose encoding is reserved for zero
            UFloat9x56.from_ratio(1, (1 << 256) - 1)
