"""
parse human-readable solidity signatures into json abi format
"""

import re
from typing import cast

from eth_typing import (
    ABIComponent,
    ABIComponentIndexed,
    ABIConstructor,
    ABIError,
    ABIEvent,
    ABIFunction,
)

IDENTIFIER = r"[a-zA-Z$_][a-zA-Z0-9$_]*"
ARRAY = r"( \[ \d* \] )+"

# Signature regexes adapted from:
# https://github.com/wevm/abitype/tree/main/packages/abitype/src/human-readable
ERROR_SIGNATURE_REGEX = re.compile(
    rf"""^error\s+      # 'error' keyword
(?P<name>{IDENTIFIER})  # name
\s*\(
  (?P<parameters>.*?)   # inputs
\)
$""",
    re.VERBOSE,
)

EVENT_SIGNATURE_REGEX = re.compile(
    rf"""^event\s+      # 'event' keyword
(?P<name>{IDENTIFIER})  # name
\s*\(
    (?P<parameters>.*?) # inputs
\)
(\s* (?P<anonymous>anonymous) )?
$""",
    re.VERBOSE,
)

FUNCTION_SIGNATURE_REGEX = re.compile(
    rf"""^function\s+   # 'function' keyword
(?P<name>{IDENTIFIER})  # name
\s*\(
  (?P<parameters>.*?)   # inputs
\)
(\s* (?P<scope>external|public) )?
(\s+ (?P<stateMutability>pure|view|nonpayable|payable) )?
(\s+ returns \s* \(
    (?P<returns>.*?)    # outputs
\) )?
$""",
    re.VERBOSE,
)

CONSTRUCTOR_SIGNATURE_REGEX = re.compile(
    r"""^constructor    # 'constructor' keyword
\s*\(
    (?P<parameters>.*?) # inputs
\)
(\s*
    (?P<stateMutability>payable)
)?
$""",
    re.VERBOSE,
)

# bare parameter list without any keyword, e.g. `(uint,address)`
TUPLE_SIGNATURE_REGEX = re.compile(r"^\((?P<parameters>.*)\)$", re.DOTALL)
TUPLE_ENTRY_REGEX = re.compile(r"^[A-Za-z0-9_\[\]]+$")

# Parameter regexes
ABI_PARAMETER_WITHOUT_TUPLE_REGEX = re.compile(
    rf"""^
(?P<type>{IDENTIFIER} (\s+payable)?)
(?P<array>{ARRAY})?
(\s+ (?P<modifier>calldata|indexed|memory|storage) )?
(\s+ (?P<name>{IDENTIFIER}) )?
$""",
    re.VERBOSE,
)
ABI_PARAMETER_WITH_TUPLE_REGEX = re.compile(
    rf"""^
(tuple\s*)?
\( (?P<type>.+?) \)
(?P<array>{ARRAY})?
(\s+ (?P<modifier>calldata|indexed|memory|storage) )?
(\s+ (?P<name>{IDENTIFIER}) )?
$""",
    re.VERBOSE,
)

DYNAMIC_INTEGER_REGEX = re.compile(r"^u?int$")
DYNAMIC_FIXED_REGEX = re.compile(r"^u?fixed$")

INTEGER_REGEX = re.compile(
    r"^u?int(8|16|24|32|40|48|56|64|72|80|88|96|104|112|120|128|136|144|152|160|168"
    r"|176|184|192|200|208|216|224|232|240|248|256)$"
)
BYTES_REGEX = re.compile(r"^bytes([1-9]|[12][0-9]|3[0-2])$")
FIXED_REGEX = re.compile(r"^u?fixed(\d+x\d+)?$")

# Modifier sets
EVENT_MODIFIERS = {"indexed"}
FUNCTION_MODIFIERS = {"calldata", "memory", "storage"}


def is_solidity_type(type_name: str) -> bool:
    """Check if a type is a valid Solidity primitive type."""
    # Basic types
    if type_name in ["address", "bool", "string", "bytes", "function"]:
        return True

    # Fixed-size bytes (bytes1 to bytes32)
    if BYTES_REGEX.match(type_name):
        return True

    # Integers (int8 to int256, uint8 to uint256, in steps of 8)
    if INTEGER_REGEX.match(type_name):
        return True

    return FIXED_REGEX.match(type_name) is not None


def split_parameters(params: str) -> list[str]:
    """Split comma-separated parameters respecting parentheses."""
    result: list[str] = []
    current = ""
    depth = 0
    for char in params.strip():
        if char == "," and depth == 0:
            result.append(current.strip())
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise ValueError(
                    f"Invalid parenthesis: depth={depth}, current={current}"
                )
        current += char

    if depth != 0:
        raise ValueError(f"Invalid parenthesis: depth={depth}, current={current}")
    if current.strip():
        result.append(current.strip())
    return result


def is_tuple(s: str) -> bool:
    return bool(s) and (s[0] == "(" or s.startswith("tuple(")) and ")" in s


def parse_abi_parameter(
    param: str,
    modifiers: set[str] | None = None,
    abi_type: str | None = None,
) -> ABIComponentIndexed:
    """Parse a single ABI parameter string into a structured object."""
    tuple_param = is_tuple(param)
    regex = (
        ABI_PARAMETER_WITH_TUPLE_REGEX
        if tuple_param
        else ABI_PARAMETER_WITHOUT_TUPLE_REGEX
    )
    match = regex.match(param)

    if not match:
        raise ValueError(f"Invalid parameter: {param}")

    groups = match.groupdict()
    name = groups.get("name")
    modifier = groups.get("modifier")
    array = groups.get("array") or ""

    # Build result
    result: dict = {}

    if name:
        result["name"] = name

    if modifier == "indexed":
        result["indexed"] = True

    # Determine type
    if tuple_param:
        result["type"] = "tuple"
        params = split_parameters(groups["type"])
        # members of a tuple take no modifiers
        result["components"] = [
            parse_abi_parameter(p, set(), "tuple component") for p in params
        ]
    elif DYNAMIC_INTEGER_REGEX.match(groups["type"]):
        result["type"] = f"{groups['type']}256"
    elif DYNAMIC_FIXED_REGEX.match(groups["type"]):
        result["type"] = f"{groups['type']}128x18"
    elif re.match(r"^address\s+payable$", groups["type"]):
        result["type"] = "address"
    elif is_solidity_type(groups["type"]):
        result["type"] = groups["type"]
    else:
        raise ValueError(f"Unknown type: {groups['type']}")

    # Add array suffix
    result["type"] = result["type"] + array

    # Validate modifier
    if modifier and modifiers is not None and modifier not in modifiers:
        raise ValueError(f"Invalid modifier '{modifier}' for type {abi_type}")

    return cast(ABIComponentIndexed, result)


def parse_function_signature(signature: str) -> ABIFunction:
    """Parse a function signature."""
    match = FUNCTION_SIGNATURE_REGEX.match(signature)
    if not match:
        raise ValueError(f"Invalid function signature: {signature}")

    groups = match.groupdict()
    params = split_parameters(groups["parameters"])

    return {
        "type": "function",
        "name": groups["name"],
        "stateMutability": groups.get("stateMutability")  # type: ignore
        or "nonpayable",
        "inputs": [
            parse_abi_parameter(p, FUNCTION_MODIFIERS, "function") for p in params
        ],
        "outputs": (
            [
                parse_abi_parameter(p, FUNCTION_MODIFIERS, "function")
                for p in split_parameters(groups.get("returns") or "")
            ]
            if groups.get("returns")
            else []
        ),
    }


def parse_event_signature(signature: str) -> ABIEvent:
    """Parse an event signature."""
    match = EVENT_SIGNATURE_REGEX.match(signature)
    if not match:
        raise ValueError(f"Invalid event signature: {signature}")

    groups = match.groupdict()
    params = split_parameters(groups["parameters"])

    return {
        "type": "event",
        "name": groups["name"],
        "inputs": [parse_abi_parameter(p, EVENT_MODIFIERS, "event") for p in params],
        "anonymous": groups.get("anonymous") is not None,
    }


def parse_error_signature(signature: str) -> ABIError:
    """Parse an error signature."""
    match = ERROR_SIGNATURE_REGEX.match(signature)
    if not match:
        raise ValueError(f"Invalid error signature: {signature}")

    groups = match.groupdict()
    params = split_parameters(groups["parameters"])

    return {
        "type": "error",
        "name": groups["name"],
        "inputs": [
            parse_abi_parameter(p, FUNCTION_MODIFIERS, "error") for p in params
        ],
    }


def parse_constructor_signature(signature: str) -> ABIConstructor:
    """Parse a constructor signature."""
    match = CONSTRUCTOR_SIGNATURE_REGEX.match(signature)
    if not match:
        raise ValueError(f"Invalid constructor signature: {signature}")

    groups = match.groupdict()
    params = split_parameters(groups["parameters"])

    return {
        "type": "constructor",
        "stateMutability": groups.get("stateMutability")  # type: ignore
        or "nonpayable",
        "inputs": [
            parse_abi_parameter(p, FUNCTION_MODIFIERS, "constructor") for p in params
        ],
    }


def parse_tuple_signature(signature: str) -> list[ABIComponent]:
    """
    Parse a bare parameter list like `(uint,address)` into its components.

    Entries are trimmed and empty ones dropped; what remains must be plain
    type names (or nested parenthesized tuples), names and modifiers are not
    accepted here.
    """
    match = TUPLE_SIGNATURE_REGEX.match(signature)
    if not match:
        raise ValueError(f"Invalid tuple signature: {signature}")

    components = []
    for entry in split_parameters(match.group("parameters")):
        if not entry:
            continue
        if not is_tuple(entry) and not TUPLE_ENTRY_REGEX.match(entry):
            raise ValueError(f"Invalid tuple entry: {entry!r}")
        components.append(cast(ABIComponent, parse_abi_parameter(entry)))

    if not components:
        raise ValueError(f"Invalid tuple signature (no types): {signature}")
    return components
