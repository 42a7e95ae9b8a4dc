"""Tagged JSON representation of decoded save archives.

The binary save decoder lives outside this package. Archives it produces can
be dumped to, and read back from, a JSON document of the form::

    {"objects": [
        {"key": "...", "className": "...",
         "properties": {"ID": {"type": "Int32", "value": 7}},
         "components": [{"key": "Loot", "properties": {...}}],
         "archive": {"objects": [...]}}
    ]}

Every property value is an object with a ``type`` tag naming its variant.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping

from refinder.data.errors import ArchiveDecodeError
from refinder.data.records import (
    Archive,
    ArrayOfStruct,
    BoolValue,
    Component,
    EnumValue,
    Int32Value,
    ObjectRefValue,
    Record,
    StrValue,
    StructValue,
    TextValue,
    UInt64Value,
    Value,
    VariablesValue,
)


class JsonArchiveDecoder:
    """Decodes tagged JSON bytes into an :class:`Archive`."""

    def decode(self, data: bytes) -> Archive:
        try:
            raw = json.loads(data.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise ArchiveDecodeError(f"Archive is not UTF-8 text: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ArchiveDecodeError(f"Invalid archive JSON: {exc}") from exc
        return self._build_archive(raw, "archive")

    def _build_archive(self, raw: object, context: str) -> Archive:
        container = self._require_mapping(raw, context)
        raw_objects = self._require_list(container.get("objects", []), f"{context}.objects")
        objects = tuple(
            self._build_record(entry, f"{context}.objects[{index}]")
            for index, entry in enumerate(raw_objects)
        )
        return Archive(objects=objects)

    def _build_record(self, raw: object, context: str) -> Record:
        record_map = self._require_mapping(raw, context)
        key = self._require_str(record_map.get("key", ""), f"{context}.key")
        class_name = self._require_str(record_map.get("className", ""), f"{context}.className")
        properties = self._build_properties(record_map.get("properties", {}), f"{context}.properties")
        raw_components = self._require_list(record_map.get("components", []), f"{context}.components")
        components: List[Component] = []
        for index, entry in enumerate(raw_components):
            component_context = f"{context}.components[{index}]"
            component_map = self._require_mapping(entry, component_context)
            components.append(
                Component(
                    key=self._require_str(component_map.get("key"), f"{component_context}.key"),
                    properties=self._build_properties(
                        component_map.get("properties", {}), f"{component_context}.properties"
                    ),
                )
            )
        raw_archive = record_map.get("archive")
        archive = None
        if raw_archive is not None:
            archive = self._build_archive(raw_archive, f"{context}.archive")
        return Record(
            key=key,
            class_name=class_name,
            properties=properties,
            components=tuple(components),
            archive=archive,
        )

    def _build_properties(self, raw: object, context: str) -> Dict[str, Value]:
        property_map = self._require_mapping(raw, context)
        return {
            self._require_str(name, f"{context} key"): self._build_value(value, f"{context}.{name}")
            for name, value in property_map.items()
        }

    def _build_value(self, raw: object, context: str) -> Value:
        value_map = self._require_mapping(raw, context)
        tag = value_map.get("type")
        if tag == "Int32":
            return Int32Value(self._require_int(value_map.get("value"), f"{context}.value"))
        if tag == "UInt64":
            number = self._require_int(value_map.get("value"), f"{context}.value")
            if number < 0:
                raise ArchiveDecodeError(f"{context}.value must not be negative.")
            return UInt64Value(number)
        if tag == "Bool":
            flag = value_map.get("value")
            if not isinstance(flag, bool):
                raise ArchiveDecodeError(f"{context}.value must be a boolean.")
            return BoolValue(flag)
        if tag == "String":
            return StrValue(self._require_str(value_map.get("value"), f"{context}.value"))
        if tag == "Text":
            return TextValue(
                literal=self._optional_str(value_map.get("literal"), f"{context}.literal"),
                source_string=self._optional_str(
                    value_map.get("sourceString"), f"{context}.sourceString"
                ),
            )
        if tag == "Enum":
            return EnumValue(self._require_str(value_map.get("name"), f"{context}.name"))
        if tag == "Object":
            return ObjectRefValue(
                self._require_str(value_map.get("className"), f"{context}.className")
            )
        if tag == "Struct":
            return self._build_struct(value_map, context)
        if tag == "ArrayStruct":
            raw_items = self._require_list(value_map.get("items", []), f"{context}.items")
            items = []
            for index, entry in enumerate(raw_items):
                item_context = f"{context}.items[{index}]"
                item = self._build_value(entry, item_context)
                if not isinstance(item, StructValue):
                    raise ArchiveDecodeError(f"{item_context} must be a Struct value.")
                items.append(item)
            return ArrayOfStruct(items=tuple(items))
        if tag == "Variables":
            return VariablesValue(
                properties=self._build_properties(
                    value_map.get("properties", {}), f"{context}.properties"
                )
            )
        raise ArchiveDecodeError(f"{context} has unknown value type {tag!r}.")

    def _build_struct(self, value_map: Mapping[str, object], context: str) -> StructValue:
        raw_archive = value_map.get("archive")
        if raw_archive is not None:
            return StructValue(archive=self._build_archive(raw_archive, f"{context}.archive"))
        return StructValue(
            fields=self._build_properties(value_map.get("fields", {}), f"{context}.fields")
        )

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise ArchiveDecodeError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise ArchiveDecodeError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise ArchiveDecodeError(f"{context} must be a string.")
        return value

    @staticmethod
    def _optional_str(value: object, context: str) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ArchiveDecodeError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ArchiveDecodeError(f"{context} must be an integer.")
        return value


def archive_to_json(archive: Archive) -> Dict[str, Any]:
    """Return the tagged JSON payload for an archive (used for debug dumps)."""
    return {"objects": [_record_to_json(record) for record in archive.objects]}


def _record_to_json(record: Record) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "key": record.key,
        "className": record.class_name,
        "properties": _properties_to_json(record.properties),
        "components": [
            {"key": component.key, "properties": _properties_to_json(component.properties)}
            for component in record.components
        ],
    }
    if record.archive is not None:
        payload["archive"] = archive_to_json(record.archive)
    return payload


def _properties_to_json(properties: Mapping[str, Value]) -> Dict[str, Any]:
    return {name: _value_to_json(value) for name, value in properties.items()}


def _value_to_json(value: Value) -> Dict[str, Any]:
    if isinstance(value, (Int32Value, UInt64Value, BoolValue, StrValue)):
        return {"type": value.variant, "value": value.value}
    if isinstance(value, TextValue):
        payload: Dict[str, Any] = {"type": value.variant}
        if value.literal is not None:
            payload["literal"] = value.literal
        if value.source_string is not None:
            payload["sourceString"] = value.source_string
        return payload
    if isinstance(value, EnumValue):
        return {"type": value.variant, "name": value.name}
    if isinstance(value, ObjectRefValue):
        return {"type": value.variant, "className": value.class_name}
    if isinstance(value, StructValue):
        if value.archive is not None:
            return {"type": value.variant, "archive": archive_to_json(value.archive)}
        return {"type": value.variant, "fields": _properties_to_json(value.fields)}
    if isinstance(value, ArrayOfStruct):
        return {"type": value.variant, "items": [_value_to_json(item) for item in value.items]}
    return {"type": value.variant, "properties": _properties_to_json(value.properties)}
