class FullAbiError(ValueError):
    "base class of all errors raised by the abi dispatch layer"


class ClassificationError(FullAbiError):
    "no signature grammar matched the input"


class InvalidTupleError(ClassificationError):
    "empty or malformed bare type list, e.g. `()` or `(uint256,foo bar)`"


class ArityError(FullAbiError):
    "argument count doesn't match the parameter count"


class ArgumentError(FullAbiError):
    "an argument string can't be converted to its declared type"


class PayloadShapeError(FullAbiError):
    "the payload composite doesn't fit the item kind"


class PackedEncodingError(FullAbiError):
    "packed encoding attempted on an incompatible type or value"


class EncodingError(FullAbiError):
    pass


class DecodingError(FullAbiError):
    pass


class SelectorMismatchError(DecodingError):
    "the payload's selector or topic0 belongs to a different item"


class NotFoundError(FullAbiError, LookupError):
    "no matching item in an abi array"
