"""
the closed set of abi item kinds the dispatch layer works with
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping, Sequence, Union, cast

from eth_typing import (
    ABIComponent,
    ABIComponentIndexed,
    ABIConstructor,
    ABIError,
    ABIEvent,
    ABIFunction,
)
from eth_utils import (
    collapse_if_tuple,
    event_signature_to_log_topic,
    function_signature_to_4byte_selector,
)

from .errors import ClassificationError

# `uint`, `int`, `fixed` and `ufixed` without a size, possibly with array suffixes
DYNAMIC_TYPE_REGEX = re.compile(r"^(?P<base>u?int|u?fixed)(?P<array>(\[\d*\])*)$")


def canonicalize_type(type_str: str) -> str:
    "widen sizeless numeric types the way solidity does, e.g. `uint[]` -> `uint256[]`"
    match = DYNAMIC_TYPE_REGEX.match(type_str)
    if not match:
        return type_str
    base = match["base"]
    size = "256" if base.endswith("int") else "128x18"
    return base + size + match["array"]


@dataclass(frozen=True)
class Parameter:
    type: str
    name: str | None = None
    components: tuple[Parameter, ...] | None = None
    indexed: bool = False

    @classmethod
    def from_abi(cls, abi: Mapping[str, Any]) -> Parameter:
        if not isinstance(abi, Mapping):
            raise ClassificationError(f"Invalid abi parameter: {abi!r}")
        type_str = abi.get("type")
        if not isinstance(type_str, str):
            raise ClassificationError(f"Parameter without type: {dict(abi)}")
        components = abi.get("components")
        return cls(
            type=canonicalize_type(type_str),
            name=abi.get("name") or None,
            components=_parameters(components) if components is not None else None,
            indexed=bool(abi.get("indexed", False)),
        )

    def to_abi(self) -> ABIComponentIndexed:
        result: dict[str, Any] = {"type": self.type}
        if self.name is not None:
            result["name"] = self.name
        if self.components is not None:
            result["components"] = [c.to_abi() for c in self.components]
        if self.indexed:
            result["indexed"] = True
        return cast(ABIComponentIndexed, result)

    @property
    def canonical_type(self) -> str:
        """
        the type as it appears in signatures and in eth_abi type strings,
        tuples are expanded, e.g. `(uint256,address)[]`
        """
        return collapse_if_tuple(cast(dict, self.to_abi()))


def _parameters(abis: Sequence[Mapping[str, Any]] | None) -> tuple[Parameter, ...]:
    if abis is None:
        return ()
    if not isinstance(abis, (list, tuple)):
        raise ClassificationError(f"Invalid abi parameter list: {abis!r}")
    return tuple(Parameter.from_abi(p) for p in abis)


def _name(abi: Mapping[str, Any]) -> str:
    name = abi.get("name")
    if not isinstance(name, str) or not name:
        raise ClassificationError(f"Abi {abi.get('type')} without name: {dict(abi)}")
    return name


def _signature(name: str, params: Sequence[Parameter]) -> str:
    return f"{name}({','.join(p.canonical_type for p in params)})"


@dataclass(frozen=True)
class Function:
    kind: ClassVar[str] = "function"

    name: str
    inputs: tuple[Parameter, ...] = ()
    outputs: tuple[Parameter, ...] = ()
    state_mutability: str = "nonpayable"

    @property
    def signature(self) -> str:
        return _signature(self.name, self.inputs)

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def to_abi(self) -> ABIFunction:
        return {
            "type": "function",
            "name": self.name,
            "inputs": [p.to_abi() for p in self.inputs],
            "outputs": [p.to_abi() for p in self.outputs],
            "stateMutability": self.state_mutability,  # type: ignore
        }


@dataclass(frozen=True)
class Event:
    kind: ClassVar[str] = "event"

    name: str
    inputs: tuple[Parameter, ...] = ()
    anonymous: bool = False

    @property
    def signature(self) -> str:
        return _signature(self.name, self.inputs)

    @property
    def topic(self) -> bytes:
        return event_signature_to_log_topic(self.signature)

    def to_abi(self) -> ABIEvent:
        return {
            "type": "event",
            "name": self.name,
            "inputs": [
                {**p.to_abi(), "indexed": p.indexed}  # type: ignore
                for p in self.inputs
            ],
            "anonymous": self.anonymous,
        }


@dataclass(frozen=True)
class Error:
    kind: ClassVar[str] = "error"

    name: str
    inputs: tuple[Parameter, ...] = ()

    @property
    def signature(self) -> str:
        return _signature(self.name, self.inputs)

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def to_abi(self) -> ABIError:
        return {
            "type": "error",
            "name": self.name,
            "inputs": [p.to_abi() for p in self.inputs],
        }


@dataclass(frozen=True)
class Constructor:
    kind: ClassVar[str] = "constructor"

    inputs: tuple[Parameter, ...] = ()
    state_mutability: str = "nonpayable"

    @property
    def signature(self) -> str:
        return _signature("constructor", self.inputs)

    def to_abi(self) -> ABIConstructor:
        return {
            "type": "constructor",
            "inputs": [p.to_abi() for p in self.inputs],
            "stateMutability": self.state_mutability,  # type: ignore
        }


@dataclass(frozen=True)
class Tuple:
    """
    anonymous parameter list, e.g. `(uint256,address)`,
    it has no selector and encodes to the bare parameter encoding.
    """

    kind: ClassVar[str] = "tuple"

    components: tuple[Parameter, ...] = field(default_factory=tuple)

    @property
    def types(self) -> list[str]:
        return [p.canonical_type for p in self.components]

    def to_abi(self) -> ABIComponent:
        return {
            "type": "tuple",
            "components": [p.to_abi() for p in self.components],  # type: ignore
        }


AbiItem = Union[Function, Event, Error, Constructor, Tuple]


def from_abi(abi: Mapping[str, Any]) -> AbiItem:
    """
    Build an item from a standard json abi element,
    raise `ClassificationError` for element types we don't handle,
    like `fallback` and `receive`.
    """
    if not isinstance(abi, Mapping):
        raise ClassificationError(f"Invalid abi element: {abi!r}")
    abi_type = abi.get("type", "function")
    if abi_type == "function":
        return Function(
            name=_name(abi),
            inputs=_parameters(abi.get("inputs")),
            outputs=_parameters(abi.get("outputs")),
            state_mutability=abi.get("stateMutability", "nonpayable"),
        )
    elif abi_type == "event":
        return Event(
            name=_name(abi),
            inputs=_parameters(abi.get("inputs")),
            anonymous=bool(abi.get("anonymous", False)),
        )
    elif abi_type == "error":
        return Error(name=_name(abi), inputs=_parameters(abi.get("inputs")))
    elif abi_type == "constructor":
        return Constructor(
            inputs=_parameters(abi.get("inputs")),
            state_mutability=abi.get("stateMutability", "nonpayable"),
        )
    elif abi_type == "tuple":
        return Tuple(components=_parameters(abi.get("components")))
    raise ClassificationError(f"Unsupported abi element type: {abi_type}")
