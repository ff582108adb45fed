"""
decide which kind of abi item a signature string describes and build it
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, Mapping, Sequence

from eth_utils import to_bytes

from . import human
from .errors import ClassificationError, InvalidTupleError, NotFoundError
from .types import AbiItem, Constructor, Error, Event, Function, from_abi

logger = logging.getLogger(__name__)

SELECTOR_REGEX = re.compile(r"^0x[0-9a-fA-F]{8}$")
TOPIC_REGEX = re.compile(r"^0x[0-9a-fA-F]{64}$")

# abi element types `find_abi_item` picks from, in the order of preference
# when no identifier is given.
SELECTABLE_TYPES = ("function", "event", "error", "constructor")


def classify(raw: str) -> AbiItem:
    """
    Parse a human-readable signature into an abi item, the first matching
    grammar wins:

    >>> classify("(uint,address)").types
    ['uint256', 'address']
    >>> classify("approve(address,uint256)").signature
    'approve(address,uint256)'
    """
    signature = raw.strip()

    if human.TUPLE_SIGNATURE_REGEX.match(signature):
        logger.debug("classified %r as tuple", signature)
        try:
            components = human.parse_tuple_signature(signature)
        except ValueError as e:
            raise InvalidTupleError(str(e)) from e
        return from_abi({"type": "tuple", "components": components})

    try:
        if human.ERROR_SIGNATURE_REGEX.match(signature):
            logger.debug("classified %r as error", signature)
            return from_abi(human.parse_error_signature(signature))
        if human.EVENT_SIGNATURE_REGEX.match(signature):
            logger.debug("classified %r as event", signature)
            return from_abi(human.parse_event_signature(signature))
        if human.FUNCTION_SIGNATURE_REGEX.match(signature):
            logger.debug("classified %r as function", signature)
            return from_abi(human.parse_function_signature(signature))
        if human.CONSTRUCTOR_SIGNATURE_REGEX.match(signature):
            logger.debug("classified %r as constructor", signature)
            return from_abi(human.parse_constructor_signature(signature))
    except ClassificationError:
        raise
    except ValueError as e:
        raise ClassificationError(str(e)) from e

    # keyword-less signatures like `approve(address,uint256)`
    logger.debug("no grammar matched %r, retry as function", signature)
    try:
        return from_abi(human.parse_function_signature(f"function {signature}"))
    except ClassificationError:
        raise
    except ValueError as e:
        raise ClassificationError(str(e)) from e


def _matches(item: AbiItem, identifier: str) -> bool:
    if SELECTOR_REGEX.match(identifier):
        if isinstance(item, (Function, Error)):
            return item.selector == to_bytes(hexstr=identifier)
        return False
    if TOPIC_REGEX.match(identifier):
        if isinstance(item, Event):
            return item.topic == to_bytes(hexstr=identifier)
        return False
    if isinstance(item, (Function, Event, Error)):
        return item.name == identifier
    return isinstance(item, Constructor) and identifier == "constructor"


def _iter_items(
    abi: Sequence[Mapping[str, Any]] | Mapping[str, Any], kind: str | None
) -> Iterable[AbiItem]:
    elements = [abi] if isinstance(abi, Mapping) else abi
    for element in elements:
        if not isinstance(element, Mapping):
            continue
        abi_type = element.get("type", "function")
        if abi_type not in SELECTABLE_TYPES or (kind and abi_type != kind):
            continue
        try:
            yield from_abi(element)
        except ClassificationError as e:
            logger.debug("skip malformed abi element: %s", e)


def find_abi_item(
    abi: Sequence[Mapping[str, Any]] | Mapping[str, Any],
    identifier: str | None = None,
    kind: str | None = None,
) -> AbiItem | None:
    """
    Select an item from a json abi (a list of elements or a single element).

    identifier: a 4-byte selector matches functions and errors, a 32-byte topic
                matches events, anything else is compared with the item name.
                Without identifier, the first selectable item is returned.
    kind: restrict the candidates to one element type, e.g. `"event"`.

    Returns None when nothing matches, partially typed identifiers are expected.
    """
    identifier = identifier.strip() if identifier else None
    for item in _iter_items(abi, kind):
        if not identifier or _matches(item, identifier):
            return item
    return None


def get_abi_item(
    abi: Sequence[Mapping[str, Any]] | Mapping[str, Any],
    identifier: str | None = None,
    kind: str | None = None,
) -> AbiItem:
    "same as `find_abi_item`, but raise `NotFoundError` if nothing matches"
    item = find_abi_item(abi, identifier, kind)
    if item is None:
        raise NotFoundError(
            f"No abi {kind or 'item'} found"
            + (f" for identifier: {identifier}" if identifier else "")
        )
    return item


def looks_like_json(source: str) -> bool:
    return source[:1] in ("[", "{")


def load_item(
    source: str,
    identifier: str | None = None,
    candidates: Iterable[str] = (),
) -> AbiItem | None:
    """
    Load an item from user input, either a json abi or a signature string.

    candidates: signature names suggested by an external selector lookup,
                the first one is used when `source` is blank.

    Returns None when a json abi has no matching item, or when there's nothing
    to load at all.
    """
    source = source.strip()
    if not source:
        source = next((c.strip() for c in candidates if c and c.strip()), "")
        if not source:
            return None

    if looks_like_json(source):
        try:
            abi = json.loads(source)
        except json.JSONDecodeError:
            logger.debug("not a json abi, parse as signature: %r", source)
        else:
            if isinstance(abi, (list, Mapping)):
                return find_abi_item(abi, identifier)

    return classify(source)
