"""Tag-driven decoding of nested records into typed targets with pydantic."""

from __future__ import annotations

import dataclasses
import re
import types
import typing
from collections.abc import Callable, Sequence
from datetime import datetime
from functools import partial
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PydanticSchemaGenerationError,
    PydanticUserError,
    TypeAdapter,
    ValidationError,
    create_model,
)

from .errors import DecodeError


_T = TypeVar("_T")

_RFC3339 = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}[Tt][0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]+)?([Zz]|[+-][0-9]{2}:[0-9]{2})")


@dataclasses.dataclass(frozen=True)
class ConversionRule:
    """Convert a ``source``-typed value wherever the declared type is ``target``."""

    target: Any
    source: type
    convert: Callable[[Any], Any]


def parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp such as ``2021-03-04T05:06:07Z``."""
    if not _RFC3339.fullmatch(text):
        msg = f"not an RFC 3339 timestamp: {text!r}"
        raise ValueError(msg)
    return datetime.fromisoformat(text.upper())


STRING_TO_DATETIME = ConversionRule(target=datetime, source=str, convert=parse_rfc3339)

DEFAULT_RULES: tuple[ConversionRule, ...] = (STRING_TO_DATETIME,)


def _apply_rules(rules: tuple[ConversionRule, ...], value: Any) -> Any:
    for rule in rules:
        if isinstance(value, rule.source):
            try:
                return rule.convert(value)
            except (TypeError, ValueError) as error:
                raise ValueError(str(error)) from error
    return value


def _format_loc(loc: tuple[int | str, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else part
    return path or "<root>"


def _decode_error(error: ValidationError) -> DecodeError:
    details = "; ".join(
        f"{_format_loc(item['loc'])}: {item['msg']} [type={item['type']}]" for item in error.errors()
    )
    return DecodeError(details)


class Decoder:
    """Decode plain dict/list/str data into typed targets.

    Validation runs through a strict pydantic ``TypeAdapter``. Dataclass
    fields are read from the key stored in the field's
    ``metadata[tag_name]`` (text before the first comma), falling back to
    the field name; a tag of ``"-"`` leaves the field at its default.
    Conversion rules run as before-validators wherever the declared type
    is the rule's target. Pydantic models are validated as declared.
    """

    def __init__(self, tag_name: str = "json", rules: Sequence[ConversionRule] = DEFAULT_RULES) -> None:
        super().__init__()
        if not tag_name:
            msg = "tag_name must not be empty"
            raise ValueError(msg)
        self.tag_name = tag_name
        self.rules = tuple(rules)
        self._adapters: dict[Any, TypeAdapter[Any]] = {}
        self._models: dict[type[Any], Any] = {}

    def decode(self, data: Any, target: type[_T] | Any) -> _T:
        """Decode ``data`` into ``target``, raising DecodeError on mismatch."""
        adapter = self._adapter(target)
        try:
            return adapter.validate_python(data, strict=True)
        except ValidationError as error:
            raise _decode_error(error) from error

    def _adapter(self, target: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(target)
        if adapter is None:
            try:
                adapter = TypeAdapter(self._prepare(target))
            except (PydanticSchemaGenerationError, PydanticUserError) as error:
                msg = f"cannot decode into {target!r}: {error}"
                raise DecodeError(msg) from error
            self._adapters[target] = adapter
        return adapter

    def _prepare(self, target: Any) -> Any:
        """Rewrite ``target`` so dataclasses use tag aliases and rules apply."""
        origin = get_origin(target)
        prepared = target
        if origin is Union or origin is types.UnionType:
            prepared = Union[tuple(self._prepare(arg) for arg in get_args(target))]  # noqa: UP007
        elif origin is not None and origin is not Annotated and get_args(target):
            args = tuple(arg if arg is Ellipsis else self._prepare(arg) for arg in get_args(target))
            prepared = origin[args]
        elif isinstance(target, type) and dataclasses.is_dataclass(target):
            prepared = self._dataclass_model(target)

        rules = tuple(rule for rule in self.rules if rule.target is target)
        if rules:
            return Annotated[prepared, BeforeValidator(partial(_apply_rules, rules))]
        return prepared

    def _dataclass_model(self, target: type[Any]) -> Any:
        if target in self._models:
            return self._models[target]

        try:
            hints = typing.get_type_hints(target)
        except (NameError, TypeError) as error:
            msg = f"cannot resolve type hints of {target.__name__}: {error}"
            raise DecodeError(msg) from error

        definitions: dict[str, Any] = {}
        for field in dataclasses.fields(target):
            if not field.init:
                continue
            has_default = field.default is not dataclasses.MISSING or field.default_factory is not dataclasses.MISSING
            alias = self._source_name(field)
            if alias is None:
                if not has_default:
                    msg = f"{target.__name__}.{field.name}: field skipped by its tag has no default"
                    raise DecodeError(msg)
                continue

            if field.default_factory is not dataclasses.MISSING:
                info = Field(default_factory=field.default_factory, alias=alias)
            elif field.default is not dataclasses.MISSING:
                info = Field(default=field.default, alias=alias)
            else:
                info = Field(alias=alias)
            definitions[field.name] = (self._prepare(hints[field.name]), info)

        model: type[BaseModel] = create_model(
            f"{target.__name__}Fields",
            __config__=ConfigDict(strict=True, arbitrary_types_allowed=True),
            **definitions,
        )

        def build(instance: BaseModel) -> Any:
            return target(**{name: getattr(instance, name) for name in definitions})

        annotated = Annotated[model, AfterValidator(build)]
        self._models[target] = annotated
        return annotated

    def _source_name(self, field: dataclasses.Field[Any]) -> str | None:
        tag = field.metadata.get(self.tag_name)
        if tag is None:
            return field.name
        name = str(tag).split(",", 1)[0]
        if name == "-":
            return None
        return name or field.name
