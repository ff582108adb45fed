import json
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

from eth_abi.exceptions import ParseError
from eth_abi.grammar import ABIType, TupleType, parse
from eth_utils import is_address, to_bytes, to_checksum_address
from hexbytes import HexBytes

from .errors import ArgumentError

TRUE_STRINGS = {"true", "1", "yes"}
FALSE_STRINGS = {"false", "0", "no"}


def parse_abi_type(type_str: str) -> ABIType:
    try:
        return parse(type_str)
    except ParseError as e:
        raise ArgumentError(f"Invalid abi type {type_str!r}: {e}") from e


def parse_int(arg: str | int) -> int:
    """
    Parse a command line integer, `0x` prefixed strings are hex,
    `_` separators are allowed like python literals.
    """
    if isinstance(arg, bool):
        raise ValueError("expect integer, got bool")
    if isinstance(arg, int):
        return arg
    s = arg.strip().replace("_", "")
    negative = s.startswith("-")
    if negative:
        s = s[1:]
    value = int(s[2:], 16) if s.lower().startswith("0x") else int(s, 10)
    return -value if negative else value


def parse_bool(arg: str | bool) -> bool:
    if isinstance(arg, bool):
        return arg
    s = str(arg).strip().lower()
    if s in TRUE_STRINGS:
        return True
    if s in FALSE_STRINGS:
        return False
    raise ValueError(f"expect boolean, got {arg!r}")


def parse_bytes(arg: str | bytes) -> bytes:
    if isinstance(arg, (bytes, bytearray)):
        return bytes(arg)
    s = arg.strip()
    if not s.startswith(("0x", "0X")):
        raise ValueError(f"expect 0x-prefixed hex string, got {arg!r}")
    return to_bytes(hexstr=s)


def parse_address(arg: str) -> str:
    if not isinstance(arg, str) or not is_address(arg.strip()):
        raise ValueError(f"expect address, got {arg!r}")
    return to_checksum_address(arg.strip())


def _parse_list(arg: str | Sequence) -> list:
    if isinstance(arg, str):
        arg = json.loads(arg)
    if not isinstance(arg, (list, tuple)):
        raise ValueError(f"expect a json array, got {arg!r}")
    return list(arg)


def _parse_arg(abi_type: ABIType, arg: Any) -> Any:
    if abi_type.is_array:
        items = _parse_list(arg)
        dim = abi_type.arrlist[-1]
        if dim and len(items) != dim[0]:
            raise ValueError(f"expect {dim[0]} items, got {len(items)}")
        return [_parse_arg(abi_type.item_type, item) for item in items]

    if isinstance(abi_type, TupleType):
        items = _parse_list(arg)
        if len(items) != len(abi_type.components):
            raise ValueError(
                f"expect {len(abi_type.components)} tuple items, got {len(items)}"
            )
        return tuple(_parse_arg(t, item) for t, item in zip(abi_type.components, items))

    base = abi_type.base
    if base in ("uint", "int"):
        return parse_int(arg)
    elif base == "bool":
        return parse_bool(arg)
    elif base == "address":
        return parse_address(arg)
    elif base in ("bytes", "function"):
        return parse_bytes(arg)
    elif base in ("fixed", "ufixed"):
        return Decimal(str(arg).strip())
    elif base == "string":
        if not isinstance(arg, str):
            raise ValueError(f"expect string, got {arg!r}")
        return arg
    raise ValueError(f"unsupported type {abi_type.to_type_str()}")


def parse_arg(type_str: str, arg: Any) -> Any:
    """
    Convert a user supplied argument into the python value eth_abi expects,
    arrays and tuples are given as json arrays, e.g. `[1, 2]` or
    `["0x..", 1]`. Already typed python values pass through.
    """
    try:
        return _parse_arg(parse_abi_type(type_str), arg)
    except ArgumentError:
        raise
    except (ValueError, TypeError, InvalidOperation) as e:
        raise ArgumentError(f"Invalid argument for {type_str}: {e}") from e


def format_value(type_str: str, value: Any) -> Any:
    """
    Format a value returned by eth_abi for display:
    addresses checksummed, bytes as 0x-prefixed hex, tuples and arrays as lists.
    """
    return _format_value(parse_abi_type(type_str), value)


def _format_value(abi_type: ABIType, value: Any) -> Any:
    if abi_type.is_array:
        return [_format_value(abi_type.item_type, v) for v in value]
    if isinstance(abi_type, TupleType):
        return [_format_value(t, v) for t, v in zip(abi_type.components, value)]
    if abi_type.base == "address":
        return to_checksum_address(value)
    if isinstance(value, (bytes, bytearray)):
        return HexBytes(value).to_0x_hex()
    return value
