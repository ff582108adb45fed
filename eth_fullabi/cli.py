"""
command line entry, e.g.

    eth-fullabi encode "transfer(address,uint256)" 0x...01 1000
    eth-fullabi decode "(uint,address)" 0x...
    eth-fullabi decode @artifact.json 0x... --identifier Transfer --topic 0x..
    eth-fullabi calc ff --base hex --op add --operand 1
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from eth_utils import to_bytes
from hexbytes import HexBytes

from . import calculator
from .classifier import find_abi_item, load_item
from .codec import decode, decode_output, encode, parameter_names, parameters_of
from .errors import FullAbiError, NotFoundError
from .types import AbiItem, Constructor, Error, Event, Function

logger = logging.getLogger(__name__)


def get_log_level() -> str:
    """
    The log level of the cli, `$FULLABI_LOG_LEVEL` or WARNING.
    """
    level = os.getenv("FULLABI_LOG_LEVEL", "WARNING").upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Invalid FULLABI_LOG_LEVEL: {level}")
    return level


def get_bytecode(artifact: dict) -> bytes:
    """
    Extract the bytecode from a compiler artifact,
    `{"bytecode": "0x.."}` and `{"bytecode": {"object": "0x.."}}` are supported.
    """
    bytecode = artifact.get("bytecode") or artifact.get("byte") or "0x"
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object") or "0x"
    return to_bytes(hexstr=bytecode)


def load(source: str, identifier: str | None = None) -> tuple[AbiItem, bytes]:
    """
    Load the abi item from a signature, a json abi, or `@path` to a json abi or
    compiler artifact, also return the artifact's bytecode if any.
    """
    bytecode = b""
    if source.startswith("@"):
        obj = json.loads(Path(source[1:]).read_text())
        if isinstance(obj, dict) and "abi" in obj:
            bytecode = get_bytecode(obj)
            obj = obj["abi"]
        item = find_abi_item(obj, identifier)
    else:
        item = load_item(source, identifier)

    if item is None:
        raise NotFoundError(
            f"No abi item found in {source}"
            + (f" for identifier: {identifier}" if identifier else "")
        )
    return item, bytecode


def _json_default(obj: Any) -> Any:
    if isinstance(obj, bytes):
        return HexBytes(obj).to_0x_hex()
    return str(obj)


def _print_json(obj: Any) -> None:
    print(json.dumps(obj, indent=2, default=_json_default))


def cmd_params(args: argparse.Namespace) -> None:
    item, _ = load(args.signature, args.identifier)
    for name, param in zip(parameter_names(item), parameters_of(item)):
        print(f"{name}\t{param.canonical_type}" + ("\tindexed" if param.indexed else ""))


def cmd_selector(args: argparse.Namespace) -> None:
    item, _ = load(args.signature, args.identifier)
    if isinstance(item, Event):
        print(f"{item.signature}\t{HexBytes(item.topic).to_0x_hex()}")
    elif isinstance(item, (Function, Error)):
        print(f"{item.signature}\t{HexBytes(item.selector).to_0x_hex()}")
    else:
        raise FullAbiError(f"{item.kind} has no selector")


def cmd_encode(args: argparse.Namespace) -> None:
    item, bytecode = load(args.signature, args.identifier)
    result = encode(
        item, args.args, packed=args.packed, bytecode=args.bytecode or bytecode
    )
    if isinstance(result, str):
        print(result)
    else:
        _print_json(result)


def cmd_decode(args: argparse.Namespace) -> None:
    item, bytecode = load(args.signature, args.identifier)
    payload: Any = args.data
    if isinstance(item, Event):
        payload = {"topics": args.topic, "data": args.data}
    elif isinstance(item, Constructor):
        payload = {
            "bytecode": args.bytecode or HexBytes(bytecode).to_0x_hex(),
            "data": args.data,
        }

    if args.output:
        if not isinstance(item, Function):
            raise FullAbiError("--output only applies to functions")
        _print_json(decode_output(item, args.data))
    else:
        _print_json(decode(item, payload, named=args.named))


def cmd_calc(args: argparse.Namespace) -> None:
    conversion = calculator.convert(calculator.unformat(args.value), args.base)
    if args.op:
        value = calculator.apply(
            args.op,
            int(conversion.decimal or "0"),
            calculator.parse_operand(args.operand, args.operand_base),
        )
        conversion = calculator.from_int(value)
    print(f"bin\t{calculator.format_binary(conversion.binary)}")
    print(f"dec\t{calculator.format_decimal(conversion.decimal)}")
    print(f"hex\t{calculator.format_hex(conversion.hex)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eth-fullabi",
        description="Encode and decode evm call data, event logs, errors "
        "and constructor arguments",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_signature(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "signature",
            help="Signature like 'transfer(address,uint256)', '(uint,address)', "
            "a json abi, or @path to a json abi or compiler artifact",
        )
        p.add_argument(
            "--identifier",
            help="Name, 4-byte selector or 32-byte topic to select from a json abi",
        )

    p = subparsers.add_parser("params", help="List the parameters")
    add_signature(p)
    p.set_defaults(func=cmd_params)

    p = subparsers.add_parser("selector", help="Print the selector or event topic")
    add_signature(p)
    p.set_defaults(func=cmd_selector)

    p = subparsers.add_parser("encode", help="Encode arguments")
    add_signature(p)
    p.add_argument("args", nargs="*", help="Arguments, json arrays for tuples")
    p.add_argument("--packed", action="store_true", help="Packed tuple encoding")
    p.add_argument("--bytecode", help="Bytecode prepended to constructor arguments")
    p.set_defaults(func=cmd_encode)

    p = subparsers.add_parser("decode", help="Decode data")
    add_signature(p)
    p.add_argument("data", nargs="?", default="0x", help="Hex data")
    p.add_argument(
        "--topic", action="append", default=[], help="Event topic, repeatable"
    )
    p.add_argument("--bytecode", help="Bytecode the constructor data starts with")
    p.add_argument("--named", action="store_true", help="Output name to value map")
    p.add_argument(
        "--output", action="store_true", help="Decode function return data"
    )
    p.set_defaults(func=cmd_decode)

    p = subparsers.add_parser("calc", help="Binary / decimal / hex calculator")
    p.add_argument("value", help="The value to convert")
    p.add_argument("--base", choices=list(calculator.RADIX), default="dec")
    p.add_argument("--op", choices=list(calculator.OPERATIONS))
    p.add_argument("--operand", default="", help="The second operand")
    p.add_argument(
        "--operand-base", choices=list(calculator.RADIX), default="dec"
    )
    p.set_defaults(func=cmd_calc)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        logging.basicConfig(level="DEBUG" if args.verbose else get_log_level())
        args.func(args)
    except (FullAbiError, calculator.CalculatorError, OSError, ValueError) as e:
        logger.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
