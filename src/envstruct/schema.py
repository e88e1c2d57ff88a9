"""
Schema reflection for record types.

Turns a pydantic model or a dataclass into an explicit, ordered list of
field descriptors so the binder walks plain data instead of class
machinery. Schemas are fixed once a class is defined and are cached per
class.
"""

import dataclasses
import functools
import types
import typing
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Union

from pydantic import BaseModel

from envstruct.errors import SchemaError
from envstruct.tags import (
    BoolType,
    FloatType,
    OptionalType,
    RecordType,
    SignedInt,
    StringType,
    TypeTag,
    UnsignedInt,
    is_primitive,
)

SKIP = "-"
"""Mapping value that disables environment lookup for a field."""

ENV_MAPPING_ATTR = "env"

_NO_DEFAULT: Any = object()

# Records whose schema is currently being reflected
_IN_PROGRESS: set[type] = set()


@dataclass(frozen=True)
class FieldDescriptor:
    """Metadata for one field of a record type."""

    name: str
    type_tag: TypeTag
    env_key: str | None
    init_name: str
    default: Any = _NO_DEFAULT
    default_factory: Callable[[], Any] | None = None

    @property
    def has_default(self) -> bool:
        """Whether the field declares a default value or factory."""
        return self.default is not _NO_DEFAULT or self.default_factory is not None

    @property
    def is_skipped(self) -> bool:
        """Whether environment lookup is disabled for this field."""
        return self.env_key is None

    @property
    def is_required(self) -> bool:
        """Whether binding fails when the field has no environment value."""
        return not self.has_default and not isinstance(
            self.type_tag, OptionalType | RecordType
        )

    def get_default(self) -> Any:
        """
        Return the declared default, calling the factory if there is one.

        Raises:
            LookupError: If the field declares no default.
        """
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is _NO_DEFAULT:
            msg = f"Field {self.name!r} has no default"
            raise LookupError(msg)
        return self.default


@dataclass(frozen=True)
class Schema:
    """Ordered field descriptors of one record type."""

    model: type
    fields: tuple[FieldDescriptor, ...]

    @property
    def name(self) -> str:
        """Name of the record type."""
        return self.model.__name__

    def build(self, values: Mapping[str, Any]) -> Any:
        """Construct an instance of the record type from bound values."""
        return self.model(**values)


def is_record_type(obj: Any) -> bool:
    """Return True if ``obj`` is a class envstruct can bind."""
    if not isinstance(obj, type):
        return False
    return issubclass(obj, BaseModel) or dataclasses.is_dataclass(obj)


@functools.cache
def build_schema(model: type) -> Schema:
    """
    Reflect a pydantic model or dataclass into a Schema.

    Args:
        model: Record type to describe.

    Returns:
        Schema with one descriptor per field, in declaration order.

    Raises:
        SchemaError: If the type is not a record, a field's type is outside
            the supported set, or the key mapping names unknown fields.
    """
    if not is_record_type(model):
        msg = f"Expected a pydantic model or dataclass, got {model!r}"
        raise SchemaError(msg)

    mapping = _env_mapping(model)
    if issubclass(model, BaseModel):
        raw_fields = _pydantic_fields(model)
    else:
        raw_fields = _dataclass_fields(model)

    unknown = sorted(set(mapping) - {name for name, *_ in raw_fields})
    if unknown:
        msg = f"{model.__name__}.{ENV_MAPPING_ATTR} maps unknown fields: {unknown}"
        raise SchemaError(msg)

    _IN_PROGRESS.add(model)
    try:
        type_tags = [
            resolve_type_tag(annotation, owner=f"{model.__name__}.{name}")
            for name, annotation, *_ in raw_fields
        ]
    finally:
        _IN_PROGRESS.discard(model)

    descriptors = []
    for (name, _, init_name, default, default_factory), type_tag in zip(
        raw_fields, type_tags
    ):
        mapped = mapping.get(name, name)
        descriptors.append(
            FieldDescriptor(
                name=name,
                type_tag=type_tag,
                env_key=None if mapped == SKIP else mapped,
                init_name=init_name,
                default=default,
                default_factory=default_factory,
            )
        )
    return Schema(model=model, fields=tuple(descriptors))


def resolve_type_tag(annotation: Any, owner: str = "<field>") -> TypeTag:
    """
    Map a type annotation onto the closed tag set.

    Args:
        annotation: The field's annotation, with ``Annotated`` extras kept.
        owner: ``Class.field`` label used in error messages.

    Returns:
        The matching type tag.

    Raises:
        SchemaError: If the annotation has no matching tag.
    """
    origin = typing.get_origin(annotation)

    if origin is Annotated:
        base, *metadata = typing.get_args(annotation)
        for item in metadata:
            if isinstance(item, SignedInt | UnsignedInt):
                _check_base(base, int, item, owner)
                return item
            if isinstance(item, FloatType):
                _check_base(base, float, item, owner)
                return item
        return resolve_type_tag(base, owner)

    if origin is Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) != 1:
            msg = f"{owner}: unions other than Optional[X] are not supported"
            raise SchemaError(msg)
        inner = resolve_type_tag(members[0], owner)
        if isinstance(inner, OptionalType):
            return inner
        return OptionalType(inner)

    # bool before int: bool is an int subclass
    if annotation is bool:
        return BoolType()
    if annotation is str:
        return StringType()
    if annotation is int:
        return SignedInt(64)
    if annotation is float:
        return FloatType(64)
    if is_record_type(annotation):
        if annotation in _IN_PROGRESS:
            msg = f"{owner}: recursive record types are not supported"
            raise SchemaError(msg)
        return RecordType(build_schema(annotation))

    msg = f"{owner}: unsupported field type {annotation!r}"
    raise SchemaError(msg)


def iter_primitive_fields(
    schema: Schema, prefix: str = ""
) -> Iterator[tuple[str, FieldDescriptor]]:
    """Yield ``(dotted_path, descriptor)`` for every primitive field, depth first."""
    for field in schema.fields:
        path = f"{prefix}{field.name}"
        tag = field.type_tag
        if isinstance(tag, OptionalType):
            tag = tag.inner
        if isinstance(tag, RecordType):
            yield from iter_primitive_fields(tag.schema, prefix=f"{path}.")
        elif is_primitive(tag):
            yield path, field


def _check_base(base: Any, expected: type, tag: TypeTag, owner: str) -> None:
    if base is not expected:
        msg = f"{owner}: {tag} requires a {expected.__name__} annotation, got {base!r}"
        raise SchemaError(msg)


def _env_mapping(model: type) -> dict[str, str]:
    mapping = getattr(model, ENV_MAPPING_ATTR, None)
    if mapping is None:
        return {}
    if not isinstance(mapping, Mapping):
        msg = f"{model.__name__}.{ENV_MAPPING_ATTR} must be a mapping, got {type(mapping)}"
        raise SchemaError(msg)
    for field_name, key in mapping.items():
        if not isinstance(key, str):
            msg = f"{model.__name__}.{ENV_MAPPING_ATTR}[{field_name!r}] must be a string"
            raise SchemaError(msg)
    return dict(mapping)


def _pydantic_fields(
    model: type[BaseModel],
) -> list[tuple[str, Any, str, Any, Callable[[], Any] | None]]:
    fields = []
    for name, info in model.model_fields.items():
        # pydantic strips the outer Annotated into FieldInfo.metadata
        annotation = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        if info.default_factory is not None:
            default, factory = _NO_DEFAULT, info.default_factory
        elif info.is_required():
            default, factory = _NO_DEFAULT, None
        else:
            default, factory = info.default, None
        fields.append((name, annotation, info.alias or name, default, factory))
    return fields


def _dataclass_fields(
    model: type,
) -> list[tuple[str, Any, str, Any, Callable[[], Any] | None]]:
    hints = typing.get_type_hints(model, include_extras=True)
    fields = []
    for f in dataclasses.fields(model):
        if not f.init:
            continue
        default = _NO_DEFAULT if f.default is dataclasses.MISSING else f.default
        factory = None if f.default_factory is dataclasses.MISSING else f.default_factory
        fields.append((f.name, hints[f.name], f.name, default, factory))
    return fields
