"""
TypeReflect Value Encoder

This module turns probed runtime values into literal text. The dispatch is
a closed enumeration of primitive kinds; the notation for each kind comes
from a data table that a language profile may override entry by entry.

Default Notation:
    character  'v'         double   vd        string   "v"
    decimal    vm          int64    vL        uint32   vU
    single     vf          uint64   vUL       object   typeof(v)
    other      v           None     null

Python scalars carry no declared width, so the width-specific kinds are
selected by the small wrapper types defined here (Char, Int64, UInt32,
UInt64, Single). Plain `int` and `bool` encode unadorned, `float` is a
double and `decimal.Decimal` a decimal.

Nested annotation instances encode recursively as
`TypeName(Prop=<value>, Field=<value>)`.
"""

import dataclasses
import datetime
import logging
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Optional

from typereflect.probe import ABSENT, try_getattr
from typereflect.schema import AnnotationInstance, qualified_name

logger = logging.getLogger(__name__)

# Nested annotations deeper than this encode as their type name only
MAX_NESTING = 8

EXCEPTION_MARKER = "<exception/>"


class ValueKind(Enum):
    """Primitive kinds that select a literal notation."""
    CHARACTER = auto()
    DECIMAL = auto()
    DOUBLE = auto()
    INT64 = auto()
    SINGLE = auto()
    STRING = auto()
    UINT32 = auto()
    UINT64 = auto()
    OBJECT = auto()
    OTHER = auto()


class Char(str):
    """A single character."""

    def __new__(cls, value: str):
        if len(value) != 1:
            raise ValueError(f"Char requires exactly one character, got {value!r}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Char({str.__repr__(self)})"


class _SizedInt(int):
    """Integer restricted to a fixed range."""
    minimum: int = 0
    maximum: int = 0

    def __new__(cls, value: int = 0):
        instance = super().__new__(cls, value)
        if not cls.minimum <= instance <= cls.maximum:
            raise ValueError(
                f"{cls.__name__} out of range [{cls.minimum}, {cls.maximum}]: {int(instance)}"
            )
        return instance

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"


class Int64(_SizedInt):
    minimum = -(2 ** 63)
    maximum = 2 ** 63 - 1


class UInt32(_SizedInt):
    minimum = 0
    maximum = 2 ** 32 - 1


class UInt64(_SizedInt):
    minimum = 0
    maximum = 2 ** 64 - 1


class Single(float):
    """Single-precision floating point value."""

    def __repr__(self) -> str:
        return f"Single({float(self)!r})"


DEFAULT_LITERAL_FORMATS: dict[ValueKind, str] = {
    ValueKind.CHARACTER: "'{0}'",
    ValueKind.DECIMAL: "{0}m",
    ValueKind.DOUBLE: "{0}d",
    ValueKind.INT64: "{0}L",
    ValueKind.SINGLE: "{0}f",
    ValueKind.STRING: '"{0}"',
    ValueKind.UINT32: "{0}U",
    ValueKind.UINT64: "{0}UL",
    ValueKind.OBJECT: "typeof({0})",
    ValueKind.OTHER: "{0}",
}

# Types that render as their plain text even though they are not primitives
_PLAIN_TYPES = (
    bytes,
    bytearray,
    complex,
    Enum,
    datetime.date,
    datetime.time,
    datetime.timedelta,
)


def classify_value(value: Any) -> ValueKind:
    """
    Select the primitive kind of a non-None value.

    Order matters: the wrapper types subclass str/int/float and bool
    subclasses int, so the narrower checks come first.

    Args:
        value: Any runtime value except None

    Returns:
        The ValueKind used to pick a literal notation
    """
    if isinstance(value, Char):
        return ValueKind.CHARACTER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, bool):
        return ValueKind.OTHER
    if isinstance(value, Int64):
        return ValueKind.INT64
    if isinstance(value, UInt32):
        return ValueKind.UINT32
    if isinstance(value, UInt64):
        return ValueKind.UINT64
    if isinstance(value, int):
        return ValueKind.OTHER
    if isinstance(value, Single):
        return ValueKind.SINGLE
    if isinstance(value, float):
        return ValueKind.DOUBLE
    if isinstance(value, Decimal):
        return ValueKind.DECIMAL
    if isinstance(value, _PLAIN_TYPES):
        return ValueKind.OTHER
    return ValueKind.OBJECT


def _text(value: Any) -> str:
    """Default text form of a value; classes use their qualified name."""
    if isinstance(value, type):
        return qualified_name(value)
    try:
        return str(value)
    except Exception:
        logger.debug("str() failed for %s; using default repr", type(value).__name__, exc_info=True)
        return object.__repr__(value)


def _as_annotation(value: Any) -> Any:
    """Dataclass instances read out of an annotation are nested annotations."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return AnnotationInstance.from_object(value)
    return value


class ValueEncoder:
    """
    Stringifies runtime values with a kind-directed literal notation.

    `encode` is total: it returns a string for every input and never raises.

    Usage:
        encoder = ValueEncoder()
        encoder.encode(Int64(42))         # '42L'
        encoder.encode("Bob")             # '"Bob"'

        # A profile may override individual entries
        vb = ValueEncoder({ValueKind.DOUBLE: "{0}R"})
    """

    def __init__(self, literal_formats: Optional[dict[ValueKind, str]] = None):
        """
        Initialize the encoder.

        Args:
            literal_formats: Per-kind templates layered over the defaults
        """
        self.literal_formats = dict(DEFAULT_LITERAL_FORMATS)
        if literal_formats:
            self.literal_formats.update(literal_formats)

    def encode(self, value: Any, _depth: int = 0) -> str:
        """
        Encode one value as literal text.

        Args:
            value: The value to encode (may be None or an AnnotationInstance)

        Returns:
            The literal text; "null" for None
        """
        if value is None:
            return "null"

        if isinstance(value, AnnotationInstance):
            return self.encode_annotation(value, _depth)

        kind = classify_value(value)
        template = self.literal_formats.get(kind, "{0}")
        return template.format(_text(value))

    def encode_annotation(self, annotation: AnnotationInstance, _depth: int = 0) -> str:
        """Encode a nested annotation as `TypeName(P=..., F=...)`."""
        if not annotation.has_members or _depth >= MAX_NESTING:
            return annotation.type.full_name
        return f"{annotation.type.full_name}({self.encode_members(annotation, _depth)})"

    def encode_members(self, annotation: AnnotationInstance, _depth: int = 0) -> str:
        """
        Encode an annotation's values as `name=value` pairs.

        Properties come first, then fields, both in declared order. A value
        whose read raises is rendered as "<exception/>".

        Args:
            annotation: The annotation instance to read

        Returns:
            Comma-joined pairs, e.g. 'Message="x", IsError=False'
        """
        pairs = []
        for name in annotation.property_names + annotation.field_names:
            value = try_getattr(annotation.target, name)
            if value is ABSENT:
                pairs.append(f"{name}={EXCEPTION_MARKER}")
            else:
                pairs.append(f"{name}={self.encode(_as_annotation(value), _depth + 1)}")
        return ", ".join(pairs)
