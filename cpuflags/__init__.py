"""Fixed-width binary addition with CPU status flags."""

from . import types, operand, binary_adder
from .binary_adder import AdditionResult, Flags, add
from .operand import NormalizationError, Operand, normalize
from .types import DEFAULT_WIDTH, BitWidth, Mode, Representation

__all__ = [
    "types",
    "operand",
    "binary_adder",
    "AdditionResult",
    "BitWidth",
    "DEFAULT_WIDTH",
    "Flags",
    "Mode",
    "NormalizationError",
    "Operand",
    "Representation",
    "add",
    "normalize",
]
