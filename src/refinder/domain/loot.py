"""Collectible items, narrative events and their loot rewards."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

UNKNOWN_EVENT_REWARD = "Unknown Event Reward"


@dataclass(slots=True)
class PersistenceKey:
    """Address of a spawned actor inside the game's own persistence system."""

    container_key: str
    persistent_id: int


@dataclass(slots=True)
class LootReward:
    """One spawn granted by an event's reward component."""

    sequence_id: int
    reward_group_id: int
    type: str
    actor_blueprint_id: str
    quantity: int
    persistence_key: PersistenceKey
    owned_by_character: bool = False


@dataclass(slots=True)
class Item:
    """Collectible lying in a zone."""

    id: int
    name: str
    source_zone_id: int
    quantity: int
    owned_by_character: bool = False
    parent_quest_id: int = 0


@dataclass(slots=True)
class Event:
    """Narrative event (quest, dungeon, encounter) with its rewards."""

    id: int
    name: str
    zone_id: int
    rewards: List[LootReward] = field(default_factory=list)


ZoneEntry = Union[Item, Event]
