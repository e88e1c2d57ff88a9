"""
Value coercion from raw environment strings to typed primitives.

Numeric parsing is strict: ASCII digits only, no surrounding whitespace, no
digit separators. Boolean parsing is total and never fails: only the
truthy allow-list maps to True, every other string maps to False.
"""

import re
from decimal import Decimal
from typing import Any

import numpy as np

from envstruct.errors import InvalidValueError, SchemaError
from envstruct.tags import (
    BoolType,
    FloatType,
    IntegerType,
    SignedInt,
    StringType,
    TypeTag,
    UnsignedInt,
)

TRUTHY_VALUES = frozenset({"true", "1", "yes"})

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"""
    [+-]?
    (?:
        (?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?
        | inf(?:inity)?
        | nan
    )
    """,
    re.VERBOSE | re.IGNORECASE,
)

_FLOAT_DTYPES = {
    16: np.float16,
    32: np.float32,
    64: np.float64,
}


def coerce(raw: str, target: TypeTag, key: str) -> Any:
    """
    Convert one raw string to the primitive type named by ``target``.

    Args:
        raw: Raw environment value.
        target: Primitive type tag.
        key: Environment key the value came from, for error reporting.

    Returns:
        The typed value.

    Raises:
        InvalidValueError: If the string is not a valid literal of the
            target type or is out of range for its width.
        SchemaError: If ``target`` is a structural tag.
    """
    if isinstance(target, StringType):
        return raw
    if isinstance(target, BoolType):
        return parse_bool(raw)
    if isinstance(target, SignedInt | UnsignedInt):
        return _parse_int(raw, target, key)
    if isinstance(target, FloatType):
        return _parse_float(raw, target, key)

    msg = f"Cannot coerce a raw string to structural type {target}"
    raise SchemaError(msg)


def parse_bool(raw: str) -> bool:
    """Return True only for a case-insensitive match of ``true``, ``1`` or ``yes``."""
    return raw.lower() in TRUTHY_VALUES


def _parse_int(raw: str, target: IntegerType, key: str) -> int:
    if _INT_PATTERN.fullmatch(raw) is None:
        raise InvalidValueError(key, target, raw)
    negative = raw.startswith("-")
    digits = raw.lstrip("+-").lstrip("0") or "0"
    # Reject by length before int() so huge inputs never hit the str->int limit
    bound = abs(target.min_value) if negative else target.max_value
    if len(digits) > len(str(bound)):
        raise InvalidValueError(key, target, raw)
    value = -int(digits) if negative else int(digits)
    if not target.min_value <= value <= target.max_value:
        raise InvalidValueError(key, target, raw)
    return value


def _parse_float(raw: str, target: FloatType, key: str) -> float:
    if _FLOAT_PATTERN.fullmatch(raw) is None:
        raise InvalidValueError(key, target, raw)
    value = float(raw)
    if target.bits == 64:
        return value
    # Narrow precisions round to nearest and overflow to infinity
    dtype = _FLOAT_DTYPES[target.bits]
    with np.errstate(over="ignore"):
        narrowed = dtype(value)
    if not np.isfinite(narrowed) or float(narrowed) == value:
        return float(narrowed)

    toward = dtype(np.inf) if value > float(narrowed) else dtype(-np.inf)
    neighbor = np.nextafter(narrowed, toward)
    if not np.isfinite(neighbor):
        return float(narrowed)
    low, high = sorted((float(narrowed), float(neighbor)))
    if value != (low + high) / 2:
        return float(narrowed)

    # value sits on a narrow halfway point, possibly after rounding the
    # decimal string once already; settle the tie against the exact input
    exact = Decimal(raw)
    if exact > Decimal(value):
        return high
    if exact < Decimal(value):
        return low
    return float(narrowed)
