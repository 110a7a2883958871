"""Conversion of typed operand text into fixed-width bit vectors."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .types import DEFAULT_WIDTH, BitWidth, Representation, WidthLike, as_width

logger = logging.getLogger(__name__)

BINARY_DIGITS = frozenset("01")
DECIMAL_DIGITS = frozenset("0123456789")

# int() refuses very long digit strings, so wide numerals are read in pieces.
_DECIMAL_CHUNK = 1000


class NormalizationError(ValueError):
    """Raised when operand text cannot be turned into an Operand."""

    kind = "invalid"

    def __init__(self, raw: str, width: BitWidth, message: str):
        super().__init__(message)
        self.raw = raw
        self.width = width


class EmptyOperand(NormalizationError):
    kind = "empty"


class InvalidNumeral(NormalizationError):
    kind = "invalid"


class OutOfRange(NormalizationError):
    kind = "out_of_range"


class TooLong(NormalizationError):
    kind = "too_long"


def int_to_bits(value: int, width: int) -> List[int]:
    """Convert an integer into MSB-first bits, wrapping to ``width`` bits."""
    value &= (1 << width) - 1
    return [(value >> shift) & 1 for shift in reversed(range(width))]


def bits_to_int(bits: Sequence[int]) -> int:
    """Read MSB-first bits as an unsigned integer."""
    value = 0
    for bit in bits:
        value = (value << 1) | bit
    return value


@dataclass(frozen=True)
class Operand:
    """Unsigned bit vector, most significant bit first."""

    bits: Tuple[int, ...]

    @classmethod
    def from_bits(cls, bits: Sequence[int], width: WidthLike = DEFAULT_WIDTH) -> "Operand":
        """Wrap an MSB-first bit sequence that already has the full width."""
        width = as_width(width)
        bits = tuple(int(bit) for bit in bits)
        if len(bits) != width.bits:
            raise ValueError(f"expected {width.bits} bits, got {len(bits)}")
        if any(bit not in (0, 1) for bit in bits):
            raise ValueError(f"bits must be 0 or 1, got {bits!r}")
        return cls(bits)

    @classmethod
    def from_int(cls, value: int, width: WidthLike = DEFAULT_WIDTH) -> "Operand":
        """Build an operand from an unsigned integer in [0, 2**width - 1]."""
        width = as_width(width)
        if not 0 <= value <= width.max_unsigned():
            raise ValueError(
                f"value {value} does not fit into {width} (range 0..{width.max_unsigned()})"
            )
        return cls(tuple(int_to_bits(value, width.bits)))

    @property
    def width(self) -> int:
        return len(self.bits)

    @property
    def value(self) -> int:
        return bits_to_int(self.bits)

    def to_string(self) -> str:
        return "".join(str(bit) for bit in self.bits)

    def __str__(self) -> str:
        return self.to_string()


def _normalize_binary(text: str, raw: str, width: BitWidth) -> List[int]:
    if not set(text) <= BINARY_DIGITS:
        raise InvalidNumeral(raw, width, f"'{raw}' is not a binary number (only 0 and 1 allowed).")
    if len(text) > width.bits:
        raise TooLong(raw, width, f"'{raw}' has {len(text)} bits, must be <= {width.bits} bits.")
    return [int(ch) for ch in text.rjust(width.bits, "0")]


def _max_decimal_digits(width: BitWidth) -> int:
    # Digit count of 2**bits - 1, plus one to absorb float rounding.
    return int(width.bits * math.log10(2)) + 2


def _describe_max(width: BitWidth) -> str:
    if width.bits <= 64:
        return str(width.max_unsigned())
    return f"2**{width.bits} - 1"


def _parse_decimal(digits: str) -> int:
    value = 0
    for start in range(0, len(digits), _DECIMAL_CHUNK):
        chunk = digits[start : start + _DECIMAL_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk, 10)
    return value


def _normalize_decimal(text: str, raw: str, width: BitWidth) -> List[int]:
    # str.isdigit() also accepts non-ASCII digits, so check against the ASCII set.
    if not set(text) <= DECIMAL_DIGITS:
        raise InvalidNumeral(raw, width, f"'{raw}' is not a decimal number.")
    digits = text.lstrip("0") or "0"
    limit = _describe_max(width)
    if len(digits) > _max_decimal_digits(width):
        raise OutOfRange(raw, width, f"{len(digits)}-digit number must be between 0 and {limit}.")
    value = _parse_decimal(digits)
    if value > width.max_unsigned():
        raise OutOfRange(raw, width, f"{digits} must be between 0 and {limit}.")
    return int_to_bits(value, width.bits)


def normalize(
    raw: str,
    representation: Representation,
    width: WidthLike = DEFAULT_WIDTH,
) -> Operand:
    """Turn operand text into an Operand of exactly ``width`` bits.

    Binary input shorter than the width is padded with leading zeros; longer
    input is rejected with TooLong rather than truncated. Decimal input must
    be plain ASCII digits in [0, 2**width - 1].
    """
    width = as_width(width)
    text = raw.strip()
    if not text:
        raise EmptyOperand(raw, width, "Operand is empty.")

    if representation is Representation.BINARY:
        bits = _normalize_binary(text, raw, width)
    elif representation is Representation.DECIMAL:
        bits = _normalize_decimal(text, raw, width)
    else:
        raise TypeError(f"unknown representation {representation!r}")

    operand = Operand(tuple(bits))
    logger.debug("normalized %r (%s) -> %s", raw, representation.value, operand)
    return operand


def sanitize(
    raw: str,
    representation: Representation,
    width: WidthLike = DEFAULT_WIDTH,
) -> str:
    """Filter text the way an input field does while the user types.

    Binary text keeps only 0/1 characters and at most ``width`` of them;
    decimal text keeps only digits. The result may still be empty or out of
    range, so it must go through ``normalize`` before use.
    """
    width = as_width(width)
    if representation is Representation.BINARY:
        return "".join(ch for ch in raw if ch in BINARY_DIGITS)[: width.bits]
    return "".join(ch for ch in raw if ch in DECIMAL_DIGITS)
