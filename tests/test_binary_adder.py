"""
Ripple-carry adder and flag tests.

Scenario values are the classic 8-bit ADD cases; the property checks walk
every operand pair of a 4-bit register and compare against integer math.
"""

import pytest

from cpuflags.binary_adder import add, to_signed
from cpuflags.operand import Operand, bits_to_int, int_to_bits, normalize
from cpuflags.types import Mode, Representation

BIN = Representation.BINARY


def _add(a: str, b: str, mode: Mode = Mode.UNSIGNED):
    return add(normalize(a, BIN), normalize(b, BIN), mode)


class TestScenarios:
    def test_wraparound_to_zero(self):
        """255 + 1 -> 00000000, C=1 Z=1 S=0 O=0"""
        result = _add("11111111", "1", Mode.SIGNED)
        assert result.bit_string() == "00000000"
        assert result.carry and result.zero
        assert not result.sign
        assert not result.overflow
        assert result.carry_into_msb == 1
        assert result.carry_out_of_msb == 1

    def test_unsigned_overflow(self):
        """200 + 100 -> 44, C=1 Z=0 S=0 O=0"""
        result = _add("11001000", "01100100")
        assert result.bit_string() == "00101100"
        assert result.unsigned_value == 44
        assert result.flags.as_dict() == {"C": 1, "Z": 0, "S": 0, "O": 0}
        assert result.signed_value is None

    def test_signed_positive_overflow(self):
        """100 + 50 -> 150 / -106, C=0 Z=0 S=1 O=1"""
        result = _add("01100100", "00110010", Mode.SIGNED)
        assert result.bit_string() == "10010110"
        assert result.unsigned_value == 150
        assert result.signed_value == -106
        assert result.flags.as_dict() == {"C": 0, "Z": 0, "S": 1, "O": 1}

    def test_zero_by_signed_cancellation(self):
        """50 + (-50) -> 0, C=1 Z=1 S=0 O=0"""
        result = _add("00110010", "11001110", Mode.SIGNED)
        assert result.bit_string() == "00000000"
        assert result.flags.as_dict() == {"C": 1, "Z": 1, "S": 0, "O": 0}
        assert result.signed_value == 0

    def test_signed_negative_overflow(self):
        """-128 + -1 -> 127, O=1"""
        result = _add("10000000", "11111111", Mode.SIGNED)
        assert result.bit_string() == "01111111"
        assert result.signed_value == 127
        assert result.overflow and result.carry

    def test_overflow_is_zero_in_unsigned_mode(self):
        result = _add("01100100", "00110010", Mode.UNSIGNED)
        assert result.sign
        assert not result.overflow

    def test_unsigned_value_reported_in_both_modes(self):
        assert _add("10000000", "0").unsigned_value == 128
        signed = _add("10000000", "0", Mode.SIGNED)
        assert signed.unsigned_value == 128
        assert signed.signed_value == -128


class TestCarryChain:
    def test_steps_run_lsb_first(self):
        result = _add("00000001", "00000011")
        assert [step.bit_index for step in result.steps] == list(range(8))
        first = result.steps[0]
        assert (first.a_bit, first.b_bit, first.carry_in) == (1, 1, 0)
        assert (first.sum_bit, first.carry_out) == (0, 1)
        assert result.steps[1].carry_in == 1

    def test_each_step_is_a_full_adder(self):
        result = _add("10110110", "01101101")
        for step in result.steps:
            total = step.a_bit + step.b_bit + step.carry_in
            assert step.sum_bit == total & 1
            assert step.carry_out == total >> 1
        assert result.steps[-1].carry_in == result.carry_into_msb
        assert result.steps[-1].carry_out == result.carry_out_of_msb

    def test_single_bit_width(self):
        a = Operand.from_int(1, 1)
        result = add(a, a, Mode.SIGNED)
        assert result.result_bits == (0,)
        assert result.carry_into_msb == 0
        assert result.carry and result.zero and result.overflow

    def test_add_is_pure(self):
        a = normalize("200", Representation.DECIMAL)
        b = normalize("100", Representation.DECIMAL)
        assert add(a, b, Mode.SIGNED) == add(a, b, Mode.SIGNED)

    def test_result_is_hashable(self):
        result = _add("01100100", "00110010", Mode.SIGNED)
        assert isinstance(result.steps, tuple)
        assert hash(result) == hash(_add("01100100", "00110010", Mode.SIGNED))

    def test_mode_given_as_text(self):
        result = add(Operand.from_int(100), Operand.from_int(50), "signed")
        assert result.mode is Mode.SIGNED
        assert result.overflow
        assert result.signed_value == -106

    def test_unknown_mode_text(self):
        with pytest.raises(ValueError):
            add(Operand.from_int(1), Operand.from_int(1), "saturating")

    def test_width_mismatch_asserts(self):
        with pytest.raises(AssertionError):
            add(Operand.from_int(1, 4), Operand.from_int(1, 8))


class TestProperties:
    WIDTH = 4

    def _pairs(self):
        limit = 1 << self.WIDTH
        for x in range(limit):
            for y in range(limit):
                yield x, y, Operand.from_int(x, self.WIDTH), Operand.from_int(y, self.WIDTH)

    def test_unsigned_flags_match_integer_math(self):
        modulus = 1 << self.WIDTH
        for x, y, a, b in self._pairs():
            result = add(a, b, Mode.UNSIGNED)
            wrapped = (x + y) % modulus
            assert result.unsigned_value == wrapped
            assert result.carry == (x + y >= modulus)
            assert result.zero == (wrapped == 0)
            assert result.sign == bool((wrapped >> (self.WIDTH - 1)) & 1)
            assert result.overflow is False

    def test_signed_overflow_matches_range_check(self):
        low, high = -(1 << (self.WIDTH - 1)), (1 << (self.WIDTH - 1)) - 1
        modulus = 1 << self.WIDTH
        for x, y, a, b in self._pairs():
            result = add(a, b, Mode.SIGNED)
            wrapped = (x + y) % modulus
            assert result.unsigned_value == wrapped
            assert result.carry == (x + y >= modulus)
            assert result.zero == (wrapped == 0)
            assert result.sign == bool((wrapped >> (self.WIDTH - 1)) & 1)
            sx, sy = to_signed(a.bits), to_signed(b.bits)
            assert result.overflow == (not low <= sx + sy <= high)
            assert result.signed_value == to_signed(result.result_bits)
            assert low <= result.signed_value <= high

    def test_eight_bit_carry_and_zero(self):
        for x in range(0, 256, 7):
            for y in range(0, 256, 5):
                result = add(Operand.from_int(x), Operand.from_int(y))
                assert result.carry == (x + y >= 256)
                assert result.zero == ((x + y) % 256 == 0)


class TestBitHelpers:
    def test_int_to_bits_wraps(self):
        assert int_to_bits(5, 4) == [0, 1, 0, 1]
        assert int_to_bits(-1, 4) == [1, 1, 1, 1]

    def test_bits_to_int(self):
        assert bits_to_int([1, 0, 0, 1, 0, 1, 1, 0]) == 150

    def test_to_signed(self):
        assert to_signed([1, 0, 0, 1, 0, 1, 1, 0]) == -106
        assert to_signed([0, 1, 1, 1, 1, 1, 1, 1]) == 127
        assert to_signed([1, 0, 0, 0, 0, 0, 0, 0]) == -128
        assert to_signed([1, 1, 1, 1, 1, 1, 1, 1]) == -1
