"""Domain exports."""

from .character import Character, CharacterUpdate
from .loot import Event, Item, LootReward, PersistenceKey
from .zone import ZoneInfo, ZoneLink, ZoneNode

__all__ = [
    "Character",
    "CharacterUpdate",
    "Event",
    "Item",
    "LootReward",
    "PersistenceKey",
    "ZoneInfo",
    "ZoneLink",
    "ZoneNode",
]
