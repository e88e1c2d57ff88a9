"""
Type-directed binding of a schema against an environment snapshot.

Walks a schema's fields in declaration order and decides per field whether
to read and coerce, recurse into a nested record, apply a default, or fail.
The snapshot is only ever read; sibling fields never influence each other.
"""

from collections.abc import Mapping
from typing import Any

from envstruct.coerce import coerce
from envstruct.errors import MissingVariableError
from envstruct.schema import FieldDescriptor, Schema
from envstruct.tags import OptionalType, RecordType


def bind(schema: Schema, snapshot: Mapping[str, str]) -> Any:
    """
    Produce a bound value for ``schema`` from ``snapshot``.

    Args:
        schema: Schema of the record type to build.
        snapshot: Environment keys and raw string values.

    Returns:
        A fully populated instance of the schema's record type.

    Raises:
        MissingVariableError: A required field has no value and no default.
        InvalidValueError: A present value does not parse as its declared type.
    """
    values: dict[str, Any] = {}
    for field in schema.fields:
        values[field.init_name] = _bind_field(field, snapshot)
    return schema.build(values)


def has_any_bound_key(schema: Schema, snapshot: Mapping[str, str]) -> bool:
    """
    Check whether any primitive field of ``schema`` has its key in ``snapshot``.

    Nested records, optional or not, are searched recursively. Only key
    membership is tested; values are neither read nor validated.
    """
    for field in schema.fields:
        tag = field.type_tag
        if isinstance(tag, OptionalType):
            tag = tag.inner
        if isinstance(tag, RecordType):
            if has_any_bound_key(tag.schema, snapshot):
                return True
        elif _is_bound(field, snapshot):
            return True
    return False


def _bind_field(field: FieldDescriptor, snapshot: Mapping[str, str]) -> Any:
    tag = field.type_tag

    if isinstance(tag, RecordType):
        return bind(tag.schema, snapshot)

    if isinstance(tag, OptionalType):
        inner = tag.inner
        if isinstance(inner, RecordType):
            if has_any_bound_key(inner.schema, snapshot):
                return bind(inner.schema, snapshot)
            return _default_or_none(field)
        if _is_bound(field, snapshot):
            return coerce(snapshot[field.env_key], inner, field.env_key)
        return _default_or_none(field)

    if _is_bound(field, snapshot):
        return coerce(snapshot[field.env_key], tag, field.env_key)
    if field.has_default:
        return field.get_default()
    raise MissingVariableError(field.name if field.is_skipped else field.env_key)


def _is_bound(field: FieldDescriptor, snapshot: Mapping[str, str]) -> bool:
    return not field.is_skipped and field.env_key in snapshot


def _default_or_none(field: FieldDescriptor) -> Any:
    return field.get_default() if field.has_default else None
