"""Wire codec for configuration dataclasses.

Python models use snake_case attribute names while persisted
configuration uses the camelCase names declared through
:func:`wire_field`.  Both directions go through a pydantic
``TypeAdapter`` per dataclass, with the wire name as the field alias.
Encoding drops fields that are ``None`` or still hold their empty
default, so a value which was never set stays unset after a round trip.

A field declared with ``inline=True`` is flattened into its parent on
the wire, the way credential selectors sit beside ``source``.  Types
holding such a field are annotated with :data:`WithInline`.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from functools import lru_cache
from typing import Annotated, Any, TypeVar, cast

from pydantic import GetCoreSchemaHandler, SerializerFunctionWrapHandler, TypeAdapter, ValidationError
from pydantic_core import core_schema

from connection_secrets.core.exceptions import InvalidConfigError

T = TypeVar("T")

_INLINE_WIRE_NAMES: set[str] = set()

_OBJECT_ERRORS = frozenset({"dataclass_type", "dataclass_exact_type", "dict_type", "model_type"})


def wire_field(name: str, *, inline: bool = False, **kwargs: Any) -> Any:
    """Declare a dataclass field together with its persisted name."""
    if inline:
        _INLINE_WIRE_NAMES.add(name)
    return dataclasses.field(metadata={"alias": name, "inline": inline}, **kwargs)


def _wire_name(f: dataclasses.Field[Any]) -> str:
    return str(f.metadata.get("alias", f.name))


class _InlineFields:
    """Nests inline fields before validation and flattens them after serialization."""

    def __get_pydantic_core_schema__(self, source: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        fields = dataclasses.fields(source)
        inline = [_wire_name(f) for f in fields if f.metadata.get("inline")]
        own = {_wire_name(f) for f in fields if not f.metadata.get("inline")}

        def nest(value: Any) -> Any:
            if not inline or not isinstance(value, Mapping):
                return value
            nested: dict[str, Any] = {k: v for k, v in value.items() if k in own}
            rest = {k: v for k, v in value.items() if k not in own}
            for name in inline:
                nested[name] = rest
            return nested

        def flatten(value: Any, serialize: SerializerFunctionWrapHandler) -> Any:
            data = serialize(value)
            if isinstance(data, dict):
                for name in inline:
                    data.update(data.pop(name, None) or {})
            return data

        schema = handler(source)
        schema["serialization"] = core_schema.wrap_serializer_function_ser_schema(flatten)
        return core_schema.no_info_before_validator_function(nest, schema)


WithInline = Annotated[T, _InlineFields()]
"""A dataclass whose ``inline`` fields are flattened into it on the wire."""


@lru_cache(maxsize=None)
def _adapter(cls: type[Any]) -> TypeAdapter[Any]:
    return TypeAdapter(WithInline[cls])  # type: ignore[valid-type]


def to_wire(obj: Any) -> dict[str, Any]:
    """Encode a configuration dataclass into a JSON-compatible dict."""
    if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"to_wire() expects a dataclass instance, got {type(obj).__name__}")
    data = _adapter(type(obj)).dump_python(
        obj,
        mode="json",
        by_alias=True,
        exclude_none=True,
        exclude_defaults=True,
    )
    return cast(dict[str, Any], data)


def from_wire(cls: type[T], data: Any) -> T:
    """Decode a persisted mapping into an instance of *cls*.

    Args:
        cls: Target configuration dataclass.
        data: Mapping produced by a JSON/HOCON parser or :func:`to_wire`.

    Raises:
        InvalidConfigError: If a required field is missing, a value has
            the wrong shape, or an enum value is outside its domain.
    """
    try:
        return cast(T, _adapter(cls).validate_python(data))
    except ValidationError as exc:
        raise _invalid_config(cls, exc) from exc


def _invalid_config(cls: type[Any], exc: ValidationError) -> InvalidConfigError:
    error = exc.errors()[0]
    path = ".".join(str(part) for part in error["loc"] if part not in _INLINE_WIRE_NAMES)
    subject = path or cls.__name__
    kind = error["type"]

    if kind == "missing":
        message = f"{subject} is required"
    elif kind == "enum":
        message = f"{subject}: unsupported value {error['input']!r} (expected {error['ctx']['expected']})"
    elif kind in _OBJECT_ERRORS:
        message = f"{subject}: expected an object, got {type(error['input']).__name__}"
    elif kind == "string_type":
        message = f"{subject}: expected a string"
    else:
        message = f"{subject}: {error['msg']}"

    if exc.error_count() > 1:
        message += f" (and {exc.error_count() - 1} more)"
    return InvalidConfigError(message, field=path or None)
