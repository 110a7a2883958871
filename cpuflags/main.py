"""Command line entry point for the CPU flags calculator."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from .binary_adder import AdditionResult, add
from .operand import NormalizationError, Operand, normalize
from .types import DEFAULT_WIDTH, BitWidth, Mode, Representation, as_width, get_width

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BAD_OPERAND = 2

# (title, a, b, mode) -- all given in binary.
EXAMPLES: Tuple[Tuple[str, str, str, Mode], ...] = (
    ("Unsigned overflow", "11001000", "01100100", Mode.UNSIGNED),
    ("Signed positive overflow", "01100100", "00110010", Mode.SIGNED),
    ("Zero result", "00110010", "11001110", Mode.SIGNED),
)

FLAG_HELP = """\
C (Carry):    set if there is a carry out of the most significant bit.
              Indicates an unsigned overflow.
Z (Zero):     set if every bit of the result is zero.
S (Sign):     equal to the most significant bit of the result.
              Indicates a negative result in signed mode.
O (Overflow): set if the signed result does not fit in the register.
              Computed as carry into the MSB XOR carry out of the MSB.
              Always 0 in unsigned mode."""


def format_bits(bits: Sequence[int], group: int = 4) -> str:
    """Render MSB-first bits with a space every ``group`` digits from the left."""
    digits = "".join(str(bit) for bit in bits)
    if group <= 0:
        return digits
    return " ".join(digits[i : i + group] for i in range(0, len(digits), group))


def render(result: AdditionResult, *, trace: bool = False) -> str:
    """Describe an addition result as plain text."""
    lines = [f"Result:       {format_bits(result.result_bits)}"]
    lines.append(f"Unsigned dec: {result.unsigned_value}")
    if result.signed_value is not None:
        low, high = as_width(result.width).signed_range()
        lines.append(f"Signed dec:   {result.signed_value}  (range {low}..{high})")
    lines.append(f"Flags:        {result.flags}")

    if trace:
        lines.append("Carry chain (LSB first):")
        for step in result.steps:
            lines.append(
                f"  bit {step.bit_index:>2}: {step.a_bit} + {step.b_bit} + c{step.carry_in}"
                f" -> s{step.sum_bit} c{step.carry_out}"
            )
    return "\n".join(lines)


def render_examples() -> str:
    blocks: List[str] = []
    for index, (title, a_text, b_text, mode) in enumerate(EXAMPLES, start=1):
        a = normalize(a_text, Representation.BINARY)
        b = normalize(b_text, Representation.BINARY)
        result = add(a, b, mode)
        blocks.append(
            f"{index}. {title} ({mode.value}):\n"
            f"   A = {a.value} ({a}) + B = {b.value} ({b})\n"
            f"   Result: {result.bit_string()}  {result.flags}"
        )
    return "\n".join(blocks)


def _width_arg(text: str) -> BitWidth:
    try:
        return get_width(text)
    except (KeyError, ValueError) as exc:
        raise argparse.ArgumentTypeError(str(exc.args[0]) if exc.args else str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpuflags",
        description="Add two fixed-width numbers and show the C, Z, S and O flags.",
    )
    parser.add_argument("a", nargs="?", help="first operand")
    parser.add_argument("b", nargs="?", help="second operand")
    formats = [rep.value for rep in Representation]
    parser.add_argument(
        "--a-format", choices=formats, default=Representation.BINARY.value,
        help="how operand A is written (default: binary)",
    )
    parser.add_argument(
        "--b-format", choices=formats, default=Representation.BINARY.value,
        help="how operand B is written (default: binary)",
    )
    parser.add_argument(
        "--signed", action="store_true",
        help="signed mode: compute the O flag and the signed decimal result",
    )
    parser.add_argument(
        "--width", type=_width_arg, default=DEFAULT_WIDTH,
        help="register width as a bit count or name such as byte/word (default: 8)",
    )
    parser.add_argument("--trace", action="store_true", help="print the carry chain")
    parser.add_argument("--examples", action="store_true", help="show illustrative examples")
    parser.add_argument("--explain", action="store_true", help="describe the flags")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _read_operand(
    label: str, raw: str, fmt: str, width: BitWidth
) -> Optional[Operand]:
    try:
        return normalize(raw, Representation(fmt), width)
    except NormalizationError as exc:
        logger.debug("operand %s rejected (%s): %r", label, exc.kind, raw)
        print(f"error: operand {label}: {exc}", file=sys.stderr)
        return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.explain:
        print(FLAG_HELP)
        return EXIT_OK
    if args.examples:
        print(render_examples())
        return EXIT_OK
    if args.a is None or args.b is None:
        parser.error("two operands are required")

    a = _read_operand("A", args.a, args.a_format, args.width)
    b = _read_operand("B", args.b, args.b_format, args.width)
    if a is None or b is None:
        return EXIT_BAD_OPERAND

    mode = Mode.SIGNED if args.signed else Mode.UNSIGNED
    result = add(a, b, mode)

    print(f"A:            {format_bits(a.bits)}  ({a.value})")
    print(f"B:            {format_bits(b.bits)}  ({b.value})")
    print(render(result, trace=args.trace))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
