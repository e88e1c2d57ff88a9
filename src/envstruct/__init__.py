"""
envstruct: bind environment variables into typed configuration records.

Declare a pydantic model or dataclass, optionally map its fields to
environment keys with an ``env`` class attribute, and call ``load`` to get
a fully typed, validated instance in one pass.
"""

from importlib.metadata import version

from envstruct.binder import bind, has_any_bound_key
from envstruct.coerce import coerce, parse_bool
from envstruct.errors import (
    BindError,
    EnvStructError,
    InvalidValueError,
    MissingVariableError,
    SchemaError,
)
from envstruct.loader import (
    FieldReport,
    capture_environ,
    describe,
    load,
    load_env_file,
    load_from_map,
)
from envstruct.schema import SKIP, FieldDescriptor, Schema, build_schema
from envstruct.tags import (
    F16,
    F32,
    F64,
    I8,
    I16,
    I32,
    I64,
    I128,
    U8,
    U16,
    U32,
    U64,
    U128,
    BoolType,
    FloatType,
    OptionalType,
    RecordType,
    SignedInt,
    StringType,
    TypeTag,
    UnsignedInt,
)

__version__ = version("envstruct")

__all__ = [
    "F16",
    "F32",
    "F64",
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
    "SKIP",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "BindError",
    "BoolType",
    "EnvStructError",
    "FieldDescriptor",
    "FieldReport",
    "FloatType",
    "InvalidValueError",
    "MissingVariableError",
    "OptionalType",
    "RecordType",
    "Schema",
    "SchemaError",
    "SignedInt",
    "StringType",
    "TypeTag",
    "UnsignedInt",
    "__version__",
    "bind",
    "build_schema",
    "capture_environ",
    "coerce",
    "describe",
    "has_any_bound_key",
    "load",
    "load_env_file",
    "load_from_map",
    "parse_bool",
]
