"""Converts raw zone actors into typed zone nodes."""
from __future__ import annotations

from typing import List

from refinder.data.records import (
    ArrayOfStruct,
    EnumValue,
    Int32Value,
    Record,
    StrValue,
    StructValue,
    TextValue,
    optional,
    optional_int,
    optional_text,
)
from refinder.domain.zone import NO_LINK, ZoneLink, ZoneNode


def extract_zone(record: Record) -> ZoneNode:
    """Build a ZoneNode from a zone actor's sub-records.

    Values accumulate across sub-records; a sub-record lacking a field never
    clears what an earlier one provided. Raises ParseError for a present
    field with the wrong variant.
    """
    zone = ZoneNode(id=0)
    for index, sub_record in enumerate(record.sub_records):
        properties = sub_record.properties
        if not properties:
            continue
        context = f"ZoneActor[{index}]"

        zone_id = optional_int(properties, "ID", context)
        if zone_id is not None:
            zone.id = zone_id
        parent_id = optional_int(properties, "ParentZoneID", context)
        if parent_id is not None:
            zone.parent_id = parent_id
        quest_id = optional_int(properties, "QuestID", context)
        if quest_id is not None:
            zone.quest_id = quest_id
        label = optional_text(properties, "Label", context)
        if label is not None:
            zone.label = label

        links = optional(properties, "ZoneLinks", ArrayOfStruct, context)
        if links is not None:
            zone.links.extend(_extract_links(links, f"{context}.ZoneLinks"))
    return zone


def _extract_links(links: ArrayOfStruct, context: str) -> List[ZoneLink]:
    result: List[ZoneLink] = []
    for index, entry in enumerate(links.items):
        link_context = f"{context}[{index}]"
        fields = entry.fields
        target = optional(fields, "ZoneID", Int32Value, link_context)
        label = optional(fields, "Label", TextValue, link_context)
        link_type = optional(fields, "Type", EnumValue, link_context)
        result.append(
            ZoneLink(
                target_zone_id=target.value if target is not None else 0,
                label=label.resolve() if label is not None else "",
                link_type=link_type.name if link_type is not None else "",
                destination_link=_link_name(entry, "DestinationLink", link_context),
                destination_zone=_link_name(entry, "DestinationZone", link_context),
                name_id=_link_name(entry, "NameID", link_context),
            )
        )
    return result


def _link_name(entry: StructValue, name: str, context: str) -> str:
    found = optional(entry.fields, name, StrValue, context)
    if found is None:
        return NO_LINK
    return found.value
