"""
Entry points that bind a record type against an environment.

Each call captures one immutable snapshot up front and binds against it;
nothing is cached between calls.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, TypeVar

from dotenv import dotenv_values

from envstruct.binder import bind
from envstruct.errors import BindError
from envstruct.schema import build_schema, iter_primitive_fields
from envstruct.utils.logging import get_logger, log_context

log = get_logger(__name__)

T = TypeVar("T")


def load(model: type[T]) -> T:
    """
    Bind ``model`` against the live process environment.

    Args:
        model: Pydantic model or dataclass describing the configuration.

    Returns:
        A populated instance of ``model``.

    Raises:
        MissingVariableError: A required field has no value and no default.
        InvalidValueError: A present value does not parse as its declared type.
        SchemaError: ``model`` cannot be described by the supported types.
    """
    return _bind_snapshot(model, capture_environ(), source="environ")


def load_from_map(model: type[T], snapshot: Mapping[str, str]) -> T:
    """
    Bind ``model`` against a caller-supplied mapping.

    The mapping is copied before binding, so it is never mutated and later
    changes to it do not affect this call.

    Args:
        model: Pydantic model or dataclass describing the configuration.
        snapshot: Keys and raw string values to bind against.

    Returns:
        A populated instance of ``model``.
    """
    return _bind_snapshot(model, MappingProxyType(dict(snapshot)), source="mapping")


def load_env_file(
    model: type[T],
    path: Path | str,
    *,
    override_environ: bool = False,
) -> T:
    """
    Bind ``model`` against the contents of a dotenv file.

    Args:
        model: Pydantic model or dataclass describing the configuration.
        path: Path to the dotenv file.
        override_environ: If True, layer the file over the live process
            environment, with file entries taking precedence.

    Returns:
        A populated instance of ``model``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Env file not found: {path}"
        raise FileNotFoundError(msg)

    # Keys declared without a value ("KEY" alone) come back as None
    file_values = {k: v for k, v in dotenv_values(path).items() if v is not None}
    if override_environ:
        merged = {**os.environ, **file_values}
    else:
        merged = file_values
    return _bind_snapshot(model, MappingProxyType(merged), source=str(path))


def capture_environ() -> Mapping[str, str]:
    """Return a read-only copy of the current process environment."""
    return MappingProxyType(dict(os.environ))


@dataclass(frozen=True)
class FieldReport:
    """One primitive field of a schema, as shown to users."""

    path: str
    env_key: str | None
    type_name: str
    required: bool
    default: str | None


def describe(model: type) -> list[FieldReport]:
    """
    List every primitive field reachable from ``model``.

    Nested records are flattened into dotted paths.

    Args:
        model: Pydantic model or dataclass.

    Returns:
        Reports in declaration order, depth first.
    """
    reports = []
    for path, field in iter_primitive_fields(build_schema(model)):
        default = None
        if field.default_factory is not None:
            default = "<factory>"
        elif field.has_default:
            default = repr(field.default)
        reports.append(
            FieldReport(
                path=path,
                env_key=field.env_key,
                type_name=str(field.type_tag),
                required=field.is_required,
                default=default,
            )
        )
    return reports


def _bind_snapshot(model: type[T], snapshot: Mapping[str, str], source: str) -> T:
    schema = build_schema(model)
    with log_context(model=schema.name, source=source):
        log.debug("Binding schema", n_fields=len(schema.fields), n_keys=len(snapshot))
        try:
            result: Any = bind(schema, snapshot)
        except BindError as e:
            log.debug("Binding failed", error=type(e).__name__, key=e.key)
            raise
        log.debug("Binding complete")
    return result
