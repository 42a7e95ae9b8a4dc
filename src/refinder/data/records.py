"""Generic record model produced by save archive decoders.

A decoded save is a flat list of :class:`Record` objects whose properties are
tagged :data:`Value` variants. Some struct values wrap a nested
:class:`Archive`, which is how per-character blobs and per-session containers
are organised. Nothing here knows what a zone or an item is; the services
layer reads the shapes it expects through the ``require_*`` helpers, which
raise :class:`ParseError` with a dotted context path on a variant mismatch.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Mapping, Tuple, Type, TypeVar, Union

from refinder.data.errors import ParseError


@dataclass(frozen=True, slots=True)
class Int32Value:
    variant: ClassVar[str] = "Int32"

    value: int


@dataclass(frozen=True, slots=True)
class UInt64Value:
    variant: ClassVar[str] = "UInt64"

    value: int


@dataclass(frozen=True, slots=True)
class BoolValue:
    variant: ClassVar[str] = "Bool"

    value: bool


@dataclass(frozen=True, slots=True)
class StrValue:
    variant: ClassVar[str] = "String"

    value: str


@dataclass(frozen=True, slots=True)
class TextValue:
    """Localized text; either literal data or a text property with a source string."""

    variant: ClassVar[str] = "Text"

    literal: str | None = None
    source_string: str | None = None

    def resolve(self) -> str:
        if self.literal is not None:
            return self.literal
        if self.source_string is not None:
            return self.source_string
        return ""


@dataclass(frozen=True, slots=True)
class EnumValue:
    variant: ClassVar[str] = "Enum"

    name: str


@dataclass(frozen=True, slots=True)
class ObjectRefValue:
    """Reference to a blueprint class, e.g. an inventory item."""

    variant: ClassVar[str] = "Object"

    class_name: str


@dataclass(frozen=True, slots=True)
class StructValue:
    """Struct property: either plain named fields or a wrapped nested archive."""

    variant: ClassVar[str] = "Struct"

    fields: Mapping[str, "Value"] = field(default_factory=dict)
    archive: "Archive | None" = None


@dataclass(frozen=True, slots=True)
class ArrayOfStruct:
    variant: ClassVar[str] = "ArrayStruct"

    items: Tuple[StructValue, ...] = ()


@dataclass(frozen=True, slots=True)
class VariablesValue:
    """Named gameplay variables attached to a quest actor."""

    variant: ClassVar[str] = "Variables"

    properties: Mapping[str, "Value"] = field(default_factory=dict)


Value = Union[
    Int32Value,
    UInt64Value,
    BoolValue,
    StrValue,
    TextValue,
    EnumValue,
    ObjectRefValue,
    StructValue,
    ArrayOfStruct,
    VariablesValue,
]


@dataclass(frozen=True, slots=True)
class Component:
    """Named component attached to a record, e.g. ``Loot`` or ``Reward_0``."""

    key: str
    properties: Mapping[str, Value] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Record:
    """One decoded object.

    ``archive`` holds the record's own sub-records when the record is an
    actor; top-level records usually carry their nested containers in a
    ``Blob`` struct property instead.
    """

    key: str = ""
    class_name: str = ""
    properties: Mapping[str, Value] = field(default_factory=dict)
    components: Tuple[Component, ...] = ()
    archive: "Archive | None" = None

    @property
    def sub_records(self) -> Tuple["Record", ...]:
        if self.archive is None:
            return ()
        return self.archive.objects

    def component(self, key: str) -> Component | None:
        for component in self.components:
            if component.key == key:
                return component
        return None


@dataclass(frozen=True, slots=True)
class Archive:
    """Ordered collection of records."""

    objects: Tuple[Record, ...] = ()


V = TypeVar("V")


def describe(value: object) -> str:
    variant = getattr(value, "variant", None)
    if isinstance(variant, str):
        return variant
    return type(value).__name__


def require(value: object, expected: Type[V], context: str) -> V:
    """Return ``value`` if it is the expected variant, else raise ParseError."""
    if not isinstance(value, expected):
        expected_name = getattr(expected, "variant", expected.__name__)
        raise ParseError(f"{context} must be {expected_name}, got {describe(value)}.")
    return value


def optional(
    properties: Mapping[str, Value], name: str, expected: Type[V], context: str
) -> V | None:
    """Return the named property if present, checking its variant."""
    value = properties.get(name)
    if value is None:
        return None
    return require(value, expected, f"{context}.{name}")


def require_archive(value: object, context: str) -> Archive:
    """Unwrap a struct value that must carry a nested archive."""
    struct = require(value, StructValue, context)
    if struct.archive is None:
        raise ParseError(f"{context} must wrap a nested archive.")
    return struct.archive


def optional_int(properties: Mapping[str, Value], name: str, context: str) -> int | None:
    found = optional(properties, name, Int32Value, context)
    return None if found is None else found.value


def optional_text(properties: Mapping[str, Value], name: str, context: str) -> str | None:
    found = optional(properties, name, TextValue, context)
    return None if found is None else found.resolve()


def require_field(
    fields: Mapping[str, Value], name: str, expected: Type[V], context: str
) -> V:
    """Return a mandatory struct field, raising ParseError when absent or mistyped."""
    value = fields.get(name)
    if value is None:
        raise ParseError(f"{context}.{name} is missing.")
    return require(value, expected, f"{context}.{name}")


def blueprint_name(path: str) -> str:
    """Return the segment after the namespace separator of a blueprint path.

    ``/Game/Items/Sword.Sword_C`` becomes ``Sword_C``; paths without a
    separator are returned unchanged.
    """
    parts = path.split(".")
    if len(parts) > 1:
        return parts[1]
    return path
