"""Width, mode and representation metadata used by the flag calculator."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple, Union


class Mode(enum.Enum):
    """How the Overflow flag and the signed decimal value are computed."""

    UNSIGNED = "unsigned"
    SIGNED = "signed"


class Representation(enum.Enum):
    """Textual form an operand is typed in."""

    BINARY = "binary"
    DECIMAL = "decimal"


@dataclass(frozen=True)
class BitWidth:
    """Register width shared by both operands and the result."""

    bits: int

    def __post_init__(self) -> None:
        if isinstance(self.bits, bool) or not isinstance(self.bits, int):
            raise TypeError(f"bit width must be an int, got {self.bits!r}")
        if self.bits < 1:
            raise ValueError(f"bit width must be positive, got {self.bits}")

    def mask(self) -> int:
        return (1 << self.bits) - 1

    def max_unsigned(self) -> int:
        """Return the largest value an operand may hold."""
        return self.mask()

    def signed_range(self) -> Tuple[int, int]:
        """Return the (min, max) inclusive two's complement range."""
        half = 1 << (self.bits - 1)
        return (-half, half - 1)

    def __str__(self) -> str:
        return f"{self.bits}-bit"


DEFAULT_WIDTH = BitWidth(8)

WidthLike = Union[BitWidth, int]


def as_width(width: WidthLike) -> BitWidth:
    """Accept either a BitWidth or a plain positive int."""
    if isinstance(width, BitWidth):
        return width
    return BitWidth(width)


def _make_widths() -> Dict[str, BitWidth]:
    widths: Dict[str, BitWidth] = {}

    def add(name: str, bits: int, aliases: Iterable[str] = ()):
        width = BitWidth(bits)
        widths[name] = width
        for alias in aliases:
            widths[alias] = width

    add("nibble", 4, aliases=("u4", "int4"))
    add("byte", 8, aliases=("u8", "int8", "uint8_t", "int8_t"))
    add("word", 16, aliases=("u16", "int16", "uint16_t", "int16_t"))
    add("dword", 32, aliases=("u32", "int32", "uint32_t", "int32_t"))
    add("qword", 64, aliases=("u64", "int64", "uint64_t", "int64_t"))

    return widths


WIDTHS: Dict[str, BitWidth] = _make_widths()


def get_width(name: str) -> BitWidth:
    """Lookup a width by name or bit count, raising a helpful error if unknown."""
    normalized = name.strip().lower()
    if normalized.isdigit() and normalized.isascii():
        return BitWidth(int(normalized))
    try:
        return WIDTHS[normalized]
    except KeyError as exc:
        available = ", ".join(sorted(WIDTHS))
        raise KeyError(f"Unknown width '{name}'. Known widths: {available}") from exc
