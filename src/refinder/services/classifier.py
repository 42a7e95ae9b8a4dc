"""Classifies non-zone actors into collectible items or narrative events."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Iterable, List, Mapping

from refinder.data.errors import ParseError
from refinder.data.records import (
    ArrayOfStruct,
    EnumValue,
    Int32Value,
    Record,
    StrValue,
    StructValue,
    UInt64Value,
    Value,
    blueprint_name,
    optional,
    optional_int,
    require,
    require_field,
)
from refinder.domain.loot import (
    UNKNOWN_EVENT_REWARD,
    Event,
    Item,
    LootReward,
    PersistenceKey,
    ZoneEntry,
)

logger = logging.getLogger(__name__)

REWARD_COMPONENT_PREFIX = "Reward_"
QUEST_OBJECTIVE_COMPONENT_PREFIX = "QuestObjective_"


@dataclass(slots=True)
class EntryProperties:
    id: int
    zone_id: int | None = None
    parent_quest_id: int = 0


@dataclass(slots=True)
class EntryComponents:
    """Components gathered from every sub-record of an actor.

    ``poi`` and ``quest_objectives`` are carried through unread.
    """

    loot_spawns: ArrayOfStruct | None = None
    zone: Mapping[str, Value] | None = None
    poi: Mapping[str, Value] | None = None
    rewards: List[Mapping[str, Value]] = field(default_factory=list)
    quest_objectives: List[Mapping[str, Value]] = field(default_factory=list)

    @property
    def has_loot(self) -> bool:
        return self.loot_spawns is not None and bool(self.loot_spawns.items)


def read_entry_properties(record: Record) -> EntryProperties:
    """Read ID, ZoneID and ParentQuestID from the first property-bearing sub-record."""
    for sub_record in record.sub_records:
        properties = sub_record.properties
        if not properties:
            continue
        context = record.class_name or "actor"
        entry_id = properties.get("ID")
        if entry_id is None:
            raise ParseError(f"{context}.ID is missing.")
        return EntryProperties(
            id=require(entry_id, Int32Value, f"{context}.ID").value,
            zone_id=optional_int(properties, "ZoneID", context),
            parent_quest_id=optional_int(properties, "ParentQuestID", context) or 0,
        )
    raise ParseError(f"{record.class_name or 'actor'} has no properties.")


def read_entry_components(record: Record) -> EntryComponents:
    components = EntryComponents()
    for sub_record in record.sub_records:
        for component in sub_record.components:
            key = component.key
            if key == "Loot":
                spawns = optional(component.properties, "Spawns", ArrayOfStruct, "Loot")
                if spawns is not None:
                    components.loot_spawns = spawns
            elif key == "Zone":
                components.zone = component.properties
            elif key == "POI":
                components.poi = component.properties
            elif key.startswith(REWARD_COMPONENT_PREFIX):
                components.rewards.append(component.properties)
            elif key.startswith(QUEST_OBJECTIVE_COMPONENT_PREFIX):
                components.quest_objectives.append(component.properties)
    return components


def resolve_zone_id(properties: EntryProperties, components: EntryComponents) -> int | None:
    """Return the owning zone id; a Zone component overrides the top-level ZoneID."""
    if components.zone is not None:
        zone_id = components.zone.get("ZoneID")
        if zone_id is None:
            raise ParseError("Zone.ZoneID is missing.")
        return require(zone_id, Int32Value, "Zone.ZoneID").value
    return properties.zone_id


def classify_record(record: Record, owned_item_ids: AbstractSet[str]) -> ZoneEntry | None:
    """Turn one actor into an Item or an Event.

    Returns None when the actor cannot be tied to any zone. Raises ParseError
    for malformed actors.
    """
    properties = read_entry_properties(record)
    components = read_entry_components(record)
    zone_id = resolve_zone_id(properties, components)
    if zone_id is None:
        return None

    if components.has_loot:
        assert components.loot_spawns is not None
        return _build_item(properties, zone_id, components.loot_spawns, owned_item_ids)
    return _build_event(record.class_name, properties, zone_id, components, owned_item_ids)


def classify_records(
    records: Iterable[Record], owned_item_ids: AbstractSet[str]
) -> List[ZoneEntry]:
    """Classify every record, skipping malformed or zoneless ones with a log entry."""
    entries: List[ZoneEntry] = []
    for record in records:
        try:
            entry = classify_record(record, owned_item_ids)
        except ParseError as exc:
            logger.warning("Skipping actor %s: %s", record.class_name, exc)
            continue
        if entry is None:
            logger.debug("Actor %s has no zone id; skipped.", record.class_name)
            continue
        entries.append(entry)
    return entries


def _build_item(
    properties: EntryProperties,
    zone_id: int,
    spawns: ArrayOfStruct,
    owned_item_ids: AbstractSet[str],
) -> Item:
    spawn_entry = require_field(spawns.items[0].fields, "SpawnEntry", StructValue, "Loot.Spawns[0]")
    context = "Loot.Spawns[0].SpawnEntry"
    actor_bp = require_field(spawn_entry.fields, "ActorBP", StrValue, context).value
    quantity = require_field(spawn_entry.fields, "Quantity", Int32Value, context).value
    name = blueprint_name(actor_bp)
    return Item(
        id=properties.id,
        name=name,
        source_zone_id=zone_id,
        quantity=quantity,
        owned_by_character=name in owned_item_ids,
        parent_quest_id=properties.parent_quest_id,
    )


def _build_event(
    class_name: str,
    properties: EntryProperties,
    zone_id: int,
    components: EntryComponents,
    owned_item_ids: AbstractSet[str],
) -> Event:
    event = Event(id=properties.id, name=class_name, zone_id=zone_id)
    for group_index, reward in enumerate(components.rewards):
        context = f"Reward[{group_index}]"
        spawns = optional(reward, "Spawns", ArrayOfStruct, context)
        if spawns is None:
            continue
        for sequence_index, spawn in enumerate(spawns.items):
            event.rewards.append(
                _build_reward(
                    spawn,
                    sequence_index,
                    group_index,
                    owned_item_ids,
                    f"{context}.Spawns[{sequence_index}]",
                )
            )
    return event


def _build_reward(
    spawn: StructValue,
    sequence_id: int,
    reward_group_id: int,
    owned_item_ids: AbstractSet[str],
    context: str,
) -> LootReward:
    spawn_entry = require_field(spawn.fields, "SpawnEntry", StructValue, context)
    key = require_field(spawn.fields, "Key", StructValue, context)
    entry_context = f"{context}.SpawnEntry"
    key_context = f"{context}.Key"

    actor_bp = blueprint_name(
        require_field(spawn_entry.fields, "ActorBP", StrValue, entry_context).value
    )
    if len(actor_bp) < 2:
        actor_bp = UNKNOWN_EVENT_REWARD
    return LootReward(
        sequence_id=sequence_id,
        reward_group_id=reward_group_id,
        type=require_field(spawn_entry.fields, "Type", EnumValue, entry_context).name,
        actor_blueprint_id=actor_bp,
        quantity=require_field(spawn_entry.fields, "Quantity", Int32Value, entry_context).value,
        persistence_key=PersistenceKey(
            container_key=require_field(key.fields, "ContainerKey", StrValue, key_context).value,
            persistent_id=require_field(key.fields, "PersistentID", UInt64Value, key_context).value,
        ),
        owned_by_character=actor_bp in owned_item_ids,
    )
