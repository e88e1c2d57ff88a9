"""
Exception hierarchy for schema reflection and environment binding.

Binding failures are terminal for the call that raised them: the first
field in declaration order that cannot be resolved aborts the bind.
"""

from typing import Any


class EnvStructError(Exception):
    """Base class for all envstruct errors."""


class SchemaError(EnvStructError, TypeError):
    """A record type cannot be described by the supported type set."""


class BindError(EnvStructError, ValueError):
    """Binding a schema against an environment snapshot failed."""

    def __init__(self, msg: str, key: str) -> None:
        super().__init__(msg)
        self.key = key


class MissingVariableError(BindError):
    """A required field has no value in the snapshot and no default."""

    def __init__(self, key: str) -> None:
        msg = f"Missing required environment variable: {key}"
        super().__init__(msg, key)


class InvalidValueError(BindError):
    """A raw string could not be coerced to the field's declared type."""

    def __init__(self, key: str, target_type: Any, raw_value: str) -> None:
        msg = f"Invalid value for {key}: cannot parse {raw_value!r} as {target_type}"
        super().__init__(msg, key)
        self.target_type = target_type
        self.raw_value = raw_value
