"""
binary / decimal / hex conversion and integer operations
"""

import re
from dataclasses import dataclass
from typing import Callable, Literal

OperandBase = Literal["dec", "hex", "bin"]

RADIX: dict[str, int] = {"dec": 10, "hex": 16, "bin": 2}

BASE_REGEX: dict[str, re.Pattern] = {
    "dec": re.compile(r"^\d*$"),
    "hex": re.compile(r"^[0-9a-fA-F]*$"),
    "bin": re.compile(r"^[01]*$"),
}


class CalculatorError(ValueError):
    pass


@dataclass(frozen=True)
class Conversion:
    binary: str
    decimal: str
    hex: str


def _shift_left(a: int, b: int) -> int:
    if b < 0:
        raise CalculatorError("Negative shift count")
    return a << b


def _shift_right(a: int, b: int) -> int:
    if b < 0:
        raise CalculatorError("Negative shift count")
    return a >> b


def _div(a: int, b: int) -> int:
    "truncate toward zero"
    if b == 0:
        raise CalculatorError("Division by zero")
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _mod(a: int, b: int) -> int:
    "the sign of the result follows the dividend"
    if b == 0:
        raise CalculatorError("Division by zero")
    return a - b * _div(a, b)


OPERATIONS: dict[str, Callable[[int, int], int]] = {
    "shiftLeft": _shift_left,
    "shiftRight": _shift_right,
    "add": lambda a, b: a + b,
    "sub": lambda a, b: a - b,
    "or": lambda a, b: a | b,
    "xor": lambda a, b: a ^ b,
    "and": lambda a, b: a & b,
    "mult": lambda a, b: a * b,
    "div": _div,
    "mod": _mod,
    "not": lambda a, _: ~a,
}
UNARY_OPERATIONS = {"not"}


def _radix(base: str) -> int:
    try:
        return RADIX[base]
    except KeyError:
        raise CalculatorError(f"Unknown operand base: {base}")


def is_valid_operand(value: str, base: OperandBase) -> bool:
    """
    check the operand against the selected base, the base is passed in
    explicitly since the user can switch it after typing the operand.
    """
    _radix(base)
    return BASE_REGEX[base].match(value) is not None


def parse_operand(value: str, base: OperandBase) -> int:
    "empty operand means zero"
    if not is_valid_operand(value, base):
        raise CalculatorError(f"Invalid operand for selected base ({base}): {value}")
    return int(value, _radix(base)) if value else 0


def to_base(value: int, base: OperandBase) -> str:
    sign = "-" if value < 0 else ""
    digits = format(abs(value), {"dec": "d", "hex": "X", "bin": "b"}[base])
    return sign + digits


def convert(value: str, base: OperandBase) -> Conversion:
    """
    convert a value typed in one field into all three representations,
    empty input clears every field.
    """
    if value == "":
        return Conversion("", "", "")
    return from_int(parse_operand(value, base))


def from_int(n: int) -> Conversion:
    return Conversion(
        binary=to_base(n, "bin"), decimal=to_base(n, "dec"), hex=to_base(n, "hex")
    )


def apply(op: str, value: int, operand: int = 0) -> int:
    try:
        fn = OPERATIONS[op]
    except KeyError:
        raise CalculatorError(f"Unknown operation: {op}")
    return fn(value, 0 if op in UNARY_OPERATIONS else operand)


def format_decimal(value: str) -> str:
    "1234567 -> 1,234,567"
    return re.sub(r"\B(?=(\d{3})+(?!\d))", ",", value)


def format_binary(value: str) -> str:
    "group by 4 digits from the left: 10110 -> 1011_0"
    return re.sub(r"_+$", "", re.sub(r"(.{4})", r"\1_", value))


def format_hex(value: str) -> str:
    return re.sub(r"_+$", "", re.sub(r"(.{2})", r"\1_", value))


def unformat(value: str) -> str:
    "strip the separators added by the format helpers"
    return value.replace(",", "").replace("_", "")
