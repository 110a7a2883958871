"""Ripple-carry addition and status flag derivation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .operand import Operand, bits_to_int
from .types import Mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdderStep:
    """Single full-adder step of the ripple-carry chain."""

    bit_index: int  # 0 is the least significant bit
    a_bit: int
    b_bit: int
    carry_in: int
    sum_bit: int
    carry_out: int


@dataclass(frozen=True)
class Flags:
    """Condition codes reported after an addition."""

    carry: bool
    zero: bool
    sign: bool
    overflow: bool

    def as_dict(self) -> Dict[str, int]:
        return {
            "C": int(self.carry),
            "Z": int(self.zero),
            "S": int(self.sign),
            "O": int(self.overflow),
        }

    def __str__(self) -> str:
        return " ".join(f"{name}={value}" for name, value in self.as_dict().items())


@dataclass(frozen=True)
class AdditionResult:
    """Outcome of an addition: wrapped sum, flags and decimal readings."""

    mode: Mode
    result_bits: Tuple[int, ...]  # most significant bit first
    flags: Flags
    unsigned_value: int
    signed_value: Optional[int]
    carry_into_msb: int
    carry_out_of_msb: int
    steps: Tuple[AdderStep, ...]  # least significant bit first

    @property
    def width(self) -> int:
        return len(self.result_bits)

    @property
    def carry(self) -> bool:
        return self.flags.carry

    @property
    def zero(self) -> bool:
        return self.flags.zero

    @property
    def sign(self) -> bool:
        return self.flags.sign

    @property
    def overflow(self) -> bool:
        return self.flags.overflow

    def bit_string(self) -> str:
        return "".join(str(bit) for bit in self.result_bits)


def to_signed(bits: Sequence[int]) -> int:
    """Interpret MSB-first bits as a two's complement integer."""
    unsigned = bits_to_int(bits)
    if not bits or bits[0] == 0:
        return unsigned
    # Negative: invert all bits and add one.
    inverted = unsigned ^ ((1 << len(bits)) - 1)
    return -(inverted + 1)


def add(a: Operand, b: Operand, mode: Mode = Mode.UNSIGNED) -> AdditionResult:
    """Add two operands bit by bit and derive the C, Z, S and O flags."""
    assert a.width == b.width, f"operand widths differ: {a.width} != {b.width}"
    mode = Mode(mode)
    width = a.width

    carry = 0
    carry_into_msb = 0
    steps: List[AdderStep] = []
    sum_bits: List[int] = []

    # Bits are stored MSB first, so walk positions from the right.
    for bit_index in range(width):
        position = width - 1 - bit_index
        a_bit = a.bits[position]
        b_bit = b.bits[position]
        if bit_index == width - 1:
            carry_into_msb = carry

        sum_bit = a_bit ^ b_bit ^ carry
        carry_out = (a_bit & b_bit) | (a_bit & carry) | (b_bit & carry)

        steps.append(
            AdderStep(
                bit_index=bit_index,
                a_bit=a_bit,
                b_bit=b_bit,
                carry_in=carry,
                sum_bit=sum_bit,
                carry_out=carry_out,
            )
        )
        sum_bits.append(sum_bit)
        carry = carry_out

    # The carry beyond the MSB is reported as C and otherwise discarded.
    carry_out_of_msb = carry
    result_bits = tuple(reversed(sum_bits))

    if mode is Mode.SIGNED:
        overflow = bool(carry_into_msb ^ carry_out_of_msb)
    else:
        overflow = False

    flags = Flags(
        carry=bool(carry_out_of_msb),
        zero=not any(result_bits),
        sign=bool(result_bits[0]),
        overflow=overflow,
    )

    unsigned_value = bits_to_int(result_bits)
    signed_value = to_signed(result_bits) if mode is Mode.SIGNED else None

    result = AdditionResult(
        mode=mode,
        result_bits=result_bits,
        flags=flags,
        unsigned_value=unsigned_value,
        signed_value=signed_value,
        carry_into_msb=carry_into_msb,
        carry_out_of_msb=carry_out_of_msb,
        steps=tuple(steps),
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s + %s (%s) -> %s [%s]", a, b, mode.value, result.bit_string(), flags)
    return result
