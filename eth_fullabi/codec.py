"""
uniform encode/decode across the abi item kinds

| kind        | encode output              | decode payload                  |
|-------------|----------------------------|---------------------------------|
| function    | selector + args            | flat hex                        |
| error       | selector + args            | flat hex                        |
| event       | {"topics": .., "data": ..} | {"topics": .., "data": ..}      |
| constructor | bytecode + args            | {"bytecode": .., "data": ..}    |
| tuple       | args (optionally packed)   | flat hex, standard encoding only|
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_abi.exceptions import ParseError
from eth_abi.grammar import TupleType
from eth_abi.packed import encode_packed
from eth_utils import keccak, to_bytes
from hexbytes import HexBytes
from typing_extensions import assert_never

from .errors import (
    ArityError,
    DecodingError,
    EncodingError,
    PackedEncodingError,
    PayloadShapeError,
    SelectorMismatchError,
)
from .types import AbiItem, Constructor, Error, Event, Function, Parameter, Tuple
from .utils import format_value, parse_abi_type, parse_arg

Payload = Union[str, bytes, Mapping[str, Any]]

# exceptions eth_abi raises on bad types or values, besides its own hierarchy
ENCODE_ERRORS = (AbiEncodingError, ParseError, ValueError, TypeError, OverflowError)
DECODE_ERRORS = (AbiDecodingError, ParseError, ValueError, TypeError, OverflowError)


def parameters_of(item: AbiItem) -> tuple[Parameter, ...]:
    "the positional parameters the item's arguments are matched against"
    if isinstance(item, (Function, Event, Error, Constructor)):
        return item.inputs
    elif isinstance(item, Tuple):
        return item.components
    else:
        assert_never(item)


def parameter_names(item: AbiItem) -> list[str]:
    "parameter names, unnamed ones are called `arg<index>`"
    return [p.name or f"arg{i}" for i, p in enumerate(parameters_of(item))]


def _types(params: Sequence[Parameter]) -> list[str]:
    return [p.canonical_type for p in params]


def _parse_args(params: Sequence[Parameter], args: Sequence[Any]) -> list[Any]:
    return [parse_arg(p.canonical_type, arg) for p, arg in zip(params, args)]


def _encode(types: Sequence[str], values: Sequence[Any]) -> bytes:
    try:
        return abi_encode(types, values)
    except ENCODE_ERRORS as e:
        raise EncodingError(f"Failed to encode {list(types)}: {e}") from e


def _decode(params: Sequence[Parameter], data: bytes) -> list[Any]:
    types = _types(params)
    try:
        values = abi_decode(types, data)
    except DECODE_ERRORS as e:
        raise DecodingError(f"Failed to decode {types}: {e}") from e
    return [format_value(t, v) for t, v in zip(types, values)]


def _hex(data: bytes) -> str:
    return HexBytes(data).to_0x_hex()


def _to_bytes(data: str | bytes, kind: str) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if not isinstance(data, str):
        raise PayloadShapeError(f"{kind} decoding requires hex data, got {data!r}")
    try:
        return to_bytes(hexstr=data.strip())
    except ValueError as e:
        raise PayloadShapeError(f"{kind} decoding requires hex data: {e}") from e


def _flat_payload(payload: Payload, kind: str) -> bytes:
    if isinstance(payload, Mapping):
        raise PayloadShapeError(
            f"{kind} decoding requires a flat hex string, not a topics/data object"
        )
    return _to_bytes(payload, kind)


def _check_arity(item: AbiItem, args: Sequence[Any]) -> None:
    params = parameters_of(item)
    if len(args) != len(params):
        raise ArityError(
            f"{item.kind.capitalize()} expects {len(params)} arguments, "
            f"got {len(args)}"
        )


def is_hashed_topic(param: Parameter) -> bool:
    "indexed values logged as the keccak hash of their encoding"
    abi_type = parse_abi_type(param.canonical_type)
    return abi_type.is_dynamic or abi_type.is_array or isinstance(abi_type, TupleType)


def encode_topic(param: Parameter, value: Any) -> bytes:
    """
    encode an indexed event argument into its 32 bytes topic,
    `string` and `bytes` are hashed, arrays and tuples are not supported.
    """
    if param.type == "string":
        return keccak(text=value)
    if param.type == "bytes":
        return keccak(value)
    if is_hashed_topic(param):
        raise EncodingError(f"Indexed {param.canonical_type} is not supported")
    return _encode([param.canonical_type], [value])


# a log carries at most 4 topics, topic0 is the signature unless anonymous
MAX_TOPICS = 4


def encode_event(event: Event, args: Sequence[Any]) -> dict[str, Any]:
    indexed = sum(1 for p in event.inputs if p.indexed)
    max_indexed = MAX_TOPICS if event.anonymous else MAX_TOPICS - 1
    if indexed > max_indexed:
        raise EncodingError(
            f"Event {event.name} has {indexed} indexed parameters, "
            f"at most {max_indexed} are allowed"
        )
    topics = [] if event.anonymous else [event.topic]
    data_types, data_values = [], []
    for param, value in zip(event.inputs, _parse_args(event.inputs, args)):
        if param.indexed:
            topics.append(encode_topic(param, value))
        else:
            data_types.append(param.canonical_type)
            data_values.append(value)
    return {
        "topics": [_hex(t) for t in topics],
        "data": _hex(_encode(data_types, data_values)),
    }


def _encode_packed_value(type_str: str, value: Any) -> bytes:
    "array elements are padded to 32 bytes, everything else is tightly packed"
    abi_type = parse_abi_type(type_str)
    if abi_type.is_array:
        item_type = abi_type.item_type.to_type_str()
        return b"".join(abi_encode([item_type], [v]) for v in value)
    return encode_packed([type_str], [value])


def encode_tuple_packed(item: Tuple, args: Sequence[Any]) -> str:
    """
    solidity's `abi.encodePacked`, it's not self-describing and can't be decoded.
    """
    for param in item.components:
        abi_type = parse_abi_type(param.canonical_type)
        if param.components is not None:
            raise PackedEncodingError(
                f"Packed encoding doesn't support tuple type {param.canonical_type}"
            )
        if abi_type.is_array and (
            abi_type.item_type.is_dynamic or abi_type.item_type.is_array
        ):
            raise PackedEncodingError(
                "Packed encoding doesn't support arrays of dynamic type "
                f"{param.canonical_type}"
            )
    values = _parse_args(item.components, args)
    try:
        return _hex(
            b"".join(
                _encode_packed_value(param.canonical_type, value)
                for param, value in zip(item.components, values)
            )
        )
    except ENCODE_ERRORS as e:
        raise PackedEncodingError(f"Failed to encode packed {item.types}: {e}") from e


def encode(
    item: AbiItem,
    args: Sequence[Any],
    *,
    packed: bool = False,
    bytecode: str | bytes = b"",
) -> str | dict[str, Any]:
    """
    Encode the positional arguments for the item.

    args: one value per parameter, strings are converted according to the
          parameter type, see `utils.parse_arg`.
    packed: only for tuples, use the non-standard packed encoding.
    bytecode: only for constructors, prepended to the encoded arguments,
              empty by default.
    """
    _check_arity(item, args)
    if isinstance(item, (Function, Error)):
        values = _parse_args(item.inputs, args)
        return _hex(item.selector + _encode(_types(item.inputs), values))
    elif isinstance(item, Event):
        return encode_event(item, args)
    elif isinstance(item, Constructor):
        code = parse_arg("bytes", bytecode) if bytecode else b""
        values = _parse_args(item.inputs, args)
        return _hex(code + _encode(_types(item.inputs), values))
    elif isinstance(item, Tuple):
        if packed:
            return encode_tuple_packed(item, args)
        values = _parse_args(item.components, args)
        return _hex(_encode(item.types, values))
    else:
        assert_never(item)


def _decode_selector_prefixed(item: Function | Error, payload: Payload) -> list[Any]:
    kind = item.kind.capitalize()
    data = _flat_payload(payload, kind)
    if len(data) < 4:
        raise DecodingError(f"{kind} data is shorter than a selector: {_hex(data)}")
    if data[:4] != item.selector:
        raise SelectorMismatchError(
            f"Selector {_hex(data[:4])} doesn't match {item.signature} "
            f"({_hex(item.selector)})"
        )
    return _decode(item.inputs, data[4:])


def decode_event(event: Event, payload: Payload) -> list[Any]:
    if not isinstance(payload, Mapping) or "topics" not in payload:
        raise PayloadShapeError("Event decoding requires topics and data object")

    topics = [_to_bytes(t, "Event") for t in payload["topics"] or ()]
    if not event.anonymous:
        if not topics:
            raise PayloadShapeError("Event decoding requires the signature topic")
        if topics[0] != event.topic:
            raise SelectorMismatchError(
                f"Topic {_hex(topics[0])} doesn't match {event.signature} "
                f"({_hex(event.topic)})"
            )
        topics = topics[1:]

    indexed = [p for p in event.inputs if p.indexed]
    if len(topics) != len(indexed):
        raise PayloadShapeError(
            f"Event {event.name} expects {len(indexed)} indexed topics, "
            f"got {len(topics)}"
        )

    non_indexed = [p for p in event.inputs if not p.indexed]
    data = _to_bytes(payload.get("data") or "0x", "Event")
    data_values = iter(_decode(non_indexed, data))
    topic_values = iter(topics)

    values = []
    for param in event.inputs:
        if not param.indexed:
            values.append(next(data_values))
            continue
        topic = next(topic_values)
        if is_hashed_topic(param):
            # only the hash is logged, the value can't be recovered
            values.append(_hex(topic))
        else:
            values.extend(_decode([param], topic))
    return values


def decode_constructor(ctor: Constructor, payload: Payload) -> list[Any]:
    if not isinstance(payload, Mapping) or "bytecode" not in payload:
        raise PayloadShapeError(
            "Constructor decoding requires { bytecode, data } object"
        )
    bytecode = _to_bytes(payload["bytecode"] or "0x", "Constructor")
    data = _to_bytes(payload.get("data") or "0x", "Constructor")
    if not data.startswith(bytecode):
        raise PayloadShapeError("Constructor data doesn't start with the bytecode")
    return _decode(ctor.inputs, data[len(bytecode) :])


def decode(
    item: AbiItem, payload: Payload, *, named: bool = False
) -> list[Any] | dict[str, Any]:
    """
    Decode the wire payload back into the item's arguments.

    payload: flat hex for functions, errors and tuples,
             `{"topics": [...], "data": ...}` for events,
             `{"bytecode": ..., "data": ...}` for constructors.
    named: return a mapping from parameter name to value instead of a list.
    """
    if isinstance(item, (Function, Error)):
        values = _decode_selector_prefixed(item, payload)
    elif isinstance(item, Event):
        values = decode_event(item, payload)
    elif isinstance(item, Constructor):
        values = decode_constructor(item, payload)
    elif isinstance(item, Tuple):
        values = _decode(item.components, _flat_payload(payload, "Tuple"))
    else:
        assert_never(item)

    if named:
        return dict(zip(parameter_names(item), values))
    return values


def decode_output(fn: Function, payload: str | bytes) -> list[Any]:
    "decode the return data of a function call"
    return _decode(fn.outputs, _flat_payload(payload, "Function"))
