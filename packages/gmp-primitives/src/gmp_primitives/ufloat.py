"""
Fixed point representation of the relative gas price.

A UFloat9x56 packs an unsigned floating point number into one 64-bit word:
the top 9 bits hold a biased exponent and the low 55 bits hold the mantissa,
which carries an implicit leading one (56 significant bits in total). The raw
word 0 encodes zero.
"""

from dataclasses import dataclass
from typing import ClassVar

from .utils.conversions import check_uint

MANTISSA_BITS = 55
EXPONENT_BITS = 9
EXPONENT_BIAS = 256

_MANTISSA_MASK = (1 << MANTISSA_BITS) - 1
_IMPLICIT_ONE = 1 << MANTISSA_BITS
_MAX_EXPONENT = (1 << EXPONENT_BITS) - 1


def _scaled(numerator: int, denominator: int, shift: int) -> int:
    # floor(numerator * 2**shift / denominator)
    if shift >= 0:
        return (numerator << shift) // denominator
    return numerator // (denominator << -shift)


@dataclass(frozen=True, slots=True)
class UFloat9x56:
    """Unsigned 64-bit float used for relative gas prices.

    Attributes:
        raw: The packed 64-bit word, as hashed and sent over the wire
    """

    raw: int

    ZERO: ClassVar["UFloat9x56"]
    ONE: ClassVar["UFloat9x56"]

    def __post_init__(self) -> None:
        check_uint("UFloat9x56 raw value", self.raw, 64)

    @classmethod
    def from_raw(cls, raw: int) -> "UFloat9x56":
        return cls(raw)

    @classmethod
    def from_ratio(cls, numerator: int, denominator: int) -> "UFloat9x56":
        """
        Convert numerator / denominator, rounding toward zero.

        Raises:
            ValueError: If the denominator is zero or the value is out of range
        """
        check_uint("numerator", numerator, 256)
        check_uint("denominator", denominator, 256)
        if denominator == 0:
            raise ValueError("denominator must be non-zero")
        if numerator == 0:
            return cls(0)

        shift = MANTISSA_BITS - (numerator.bit_length() - denominator.bit_length())
        significand = _scaled(numerator, denominator, shift)
        while significand < _IMPLICIT_ONE:
            shift += 1
            significand = _scaled(numerator, denominator, shift)
        while significand >= _IMPLICIT_ONE << 1:
            shift -= 1
            significand = _scaled(numerator, denominator, shift)

        exponent = EXPONENT_BIAS + MANTISSA_BITS - shift
        if exponent < 0 or exponent > _MAX_EXPONENT:
            raise ValueError(f"{numerator}/{denominator} is out of range for UFloat9x56")
        raw = (exponent << MANTISSA_BITS) | (significand & _MANTISSA_MASK)
        if raw == 0:
            # smallest representable value collides with the zero encoding
            raise ValueError(f"{numerator}/{denominator} is out of range for UFloat9x56")
        return cls(raw)

    @property
    def exponent(self) -> int:
        return self.raw >> MANTISSA_BITS

    @property
    def mantissa(self) -> int:
        return self.raw & _MANTISSA_MASK

    def is_zero(self) -> bool:
        return self.raw == 0

    def to_ratio(self) -> tuple[int, int]:
        """Return the exact value as a (numerator, denominator) pair."""
        if self.raw == 0:
            return (0, 1)
        significand = _IMPLICIT_ONE | self.mantissa
        shift = self.exponent - EXPONENT_BIAS - MANTISSA_BITS
        if shift >= 0:
            return (significand << shift, 1)
        return (significand, 1 << -shift)

    def mul(self, value: int) -> int:
        """Multiply an unsigned integer by this value, rounding down."""
        check_uint("value", value, 256)
        numerator, denominator = self.to_ratio()
        return value * numerator // denominator

    def __str__(self) -> str:
        numerator, denominator = self.to_ratio()
        return f"UFloat9x56({numerator / denominator:.6g})"


UFloat9x56.ZERO = UFloat9x56(0)
UFloat9x56.ONE = UFloat9x56.from_ratio(1, 1)
