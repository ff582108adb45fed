__all__ = [
    "AbiItem",
    "Constructor",
    "Error",
    "Event",
    "Function",
    "Parameter",
    "Tuple",
    "classify",
    "decode",
    "encode",
    "find_abi_item",
    "get_abi_item",
    "load_item",
    "parameters_of",
]

from .classifier import classify, find_abi_item, get_abi_item, load_item
from .codec import decode, encode, parameters_of
from .types import AbiItem, Constructor, Error, Event, Function, Parameter, Tuple
