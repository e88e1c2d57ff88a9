"""
Type tags for the closed set of bindable field types.

Every field of a record type resolves to exactly one tag. Numeric tags carry
their bit width (integers) or precision (floats) and double as ``Annotated``
metadata, so ``U32`` below is both a usable annotation and the tag the
coercer dispatches on.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from envstruct.schema import Schema


@dataclass(frozen=True)
class StringType:
    """Raw string, taken verbatim."""

    def __str__(self) -> str:
        return "str"


@dataclass(frozen=True)
class BoolType:
    """Boolean with a total, allow-list truthiness rule."""

    def __str__(self) -> str:
        return "bool"


@dataclass(frozen=True)
class SignedInt:
    """Two's-complement integer of a fixed bit width."""

    bits: int = 64

    def __post_init__(self) -> None:
        if self.bits < 1:
            msg = f"Integer width must be positive, got {self.bits}"
            raise ValueError(msg)

    @property
    def min_value(self) -> int:
        """Smallest representable value."""
        return -(1 << (self.bits - 1))

    @property
    def max_value(self) -> int:
        """Largest representable value."""
        return (1 << (self.bits - 1)) - 1

    def __str__(self) -> str:
        return f"i{self.bits}"


@dataclass(frozen=True)
class UnsignedInt:
    """Unsigned integer of a fixed bit width."""

    bits: int = 64

    def __post_init__(self) -> None:
        if self.bits < 1:
            msg = f"Integer width must be positive, got {self.bits}"
            raise ValueError(msg)

    @property
    def min_value(self) -> int:
        """Smallest representable value."""
        return 0

    @property
    def max_value(self) -> int:
        """Largest representable value."""
        return (1 << self.bits) - 1

    def __str__(self) -> str:
        return f"u{self.bits}"


FLOAT_PRECISIONS = (16, 32, 64)


@dataclass(frozen=True)
class FloatType:
    """IEEE 754 binary float of the given precision."""

    bits: int = 64

    def __post_init__(self) -> None:
        if self.bits not in FLOAT_PRECISIONS:
            msg = f"Float precision must be one of {FLOAT_PRECISIONS}, got {self.bits}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return f"f{self.bits}"


@dataclass(frozen=True)
class OptionalType:
    """A field that may be absent from the bound value."""

    inner: "TypeTag"

    def __str__(self) -> str:
        return f"?{self.inner}"


@dataclass(frozen=True)
class RecordType:
    """A nested record, bound recursively against the same snapshot."""

    schema: "Schema"

    def __str__(self) -> str:
        return self.schema.name


PrimitiveType = StringType | BoolType | SignedInt | UnsignedInt | FloatType
TypeTag = PrimitiveType | OptionalType | RecordType

IntegerType = SignedInt | UnsignedInt

# Annotation aliases
I8 = Annotated[int, SignedInt(8)]
I16 = Annotated[int, SignedInt(16)]
I32 = Annotated[int, SignedInt(32)]
I64 = Annotated[int, SignedInt(64)]
I128 = Annotated[int, SignedInt(128)]
U8 = Annotated[int, UnsignedInt(8)]
U16 = Annotated[int, UnsignedInt(16)]
U32 = Annotated[int, UnsignedInt(32)]
U64 = Annotated[int, UnsignedInt(64)]
U128 = Annotated[int, UnsignedInt(128)]
F16 = Annotated[float, FloatType(16)]
F32 = Annotated[float, FloatType(32)]
F64 = Annotated[float, FloatType(64)]


def is_primitive(tag: TypeTag) -> bool:
    """Return True if the tag is coerced directly from a raw string."""
    return isinstance(tag, PrimitiveType)
