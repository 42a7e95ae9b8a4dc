"""Reads the character roster and inventories from the profile archive."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List

from refinder.data.errors import NotFoundError, ParseError
from refinder.data.records import (
    Archive,
    ArrayOfStruct,
    EnumValue,
    ObjectRefValue,
    Record,
    StrValue,
    blueprint_name,
    optional,
    optional_int,
    require,
    require_archive,
)
from refinder.domain.character import (
    NO_ACTIVE_CHARACTER,
    STANDARD_CHARACTER_TYPE,
    Character,
)

logger = logging.getLogger(__name__)

PROFILE_CLASS_NAME = "BP_RemnantSaveGameProfile_C"
CHARACTER_CLASS_NAME = "SavedCharacter"
MASTER_PLAYER_CLASS_NAME = "Character_Master_Player_C"
_ARCHETYPE_PREFIX = "Archetype_"
_ARCHETYPE_SUFFIX = "_UI_C"


@dataclass(slots=True)
class ProfileSnapshot:
    """Roster and active character id read from one profile archive."""

    characters: Dict[int, Character] = field(default_factory=dict)
    active_character_id: int = NO_ACTIVE_CHARACTER

    @property
    def active_character(self) -> Character | None:
        return self.characters.get(self.active_character_id)


def resolve_profile(archive: Archive) -> ProfileSnapshot:
    """Extract every saved character and the active character id.

    Raises NotFoundError when the archive has no profile record and ParseError
    when a present property carries the wrong variant.
    """
    snapshot = ProfileSnapshot(active_character_id=read_active_character_id(archive))
    for record in archive.objects:
        if record.class_name != CHARACTER_CLASS_NAME:
            continue
        character = read_character(record)
        if character.id in snapshot.characters:
            logger.warning("Duplicate character id %d; the later record wins.", character.id)
        snapshot.characters[character.id] = character
    logger.debug(
        "Profile: %d characters, active id %d",
        len(snapshot.characters),
        snapshot.active_character_id,
    )
    return snapshot


def read_active_character_id(archive: Archive) -> int:
    found_profile = False
    for record in archive.objects:
        if record.class_name != PROFILE_CLASS_NAME:
            continue
        found_profile = True
        active_index = optional_int(record.properties, "ActiveCharacterIndex", PROFILE_CLASS_NAME)
        if active_index is not None:
            return active_index
    if not found_profile:
        raise NotFoundError("Could not find the save game profile record.")
    return NO_ACTIVE_CHARACTER


def read_character(record: Record) -> Character:
    properties = record.properties
    context = CHARACTER_CLASS_NAME
    character_id = optional_int(properties, "ID", context)
    character_type = optional(properties, "CharacterType", EnumValue, context)
    context = f"{CHARACTER_CLASS_NAME}[{character_id}]"
    return Character(
        id=character_id or 0,
        archetype=(
            archetype_name(optional(properties, "Archetype", StrValue, context)),
            archetype_name(optional(properties, "SecondaryArchetype", StrValue, context)),
        ),
        type=character_type.name if character_type is not None else STANDARD_CHARACTER_TYPE,
        owned_item_ids=read_owned_items(record, context),
    )


def archetype_name(value: StrValue | None) -> str:
    """``/Game/.../Archetype_Hunter_UI.Archetype_Hunter_UI_C`` becomes ``Hunter``."""
    if value is None:
        return ""
    name = blueprint_name(value.value)
    if name.startswith(_ARCHETYPE_PREFIX):
        name = name[len(_ARCHETYPE_PREFIX):]
    if name.endswith(_ARCHETYPE_SUFFIX):
        name = name[: -len(_ARCHETYPE_SUFFIX)]
    return name


def read_owned_items(record: Record, context: str) -> FrozenSet[str]:
    character_data = record.properties.get("CharacterData")
    if character_data is None:
        return frozenset()
    archive = require_archive(character_data, f"{context}.CharacterData")
    for sub_record in archive.objects:
        if sub_record.class_name != MASTER_PLAYER_CLASS_NAME:
            continue
        return frozenset(_inventory_blueprints(sub_record, f"{context}.{MASTER_PLAYER_CLASS_NAME}"))
    return frozenset()


def _inventory_blueprints(player: Record, context: str) -> List[str]:
    blueprints: List[str] = []
    for component in player.components:
        if component.key != "Inventory":
            continue
        inventory_context = f"{context}.Inventory"
        items = optional(component.properties, "Items", ArrayOfStruct, inventory_context)
        if items is None:
            continue
        for index, entry in enumerate(items.items):
            item_context = f"{inventory_context}.Items[{index}]"
            item_bp = entry.fields.get("ItemBP")
            if item_bp is None:
                raise ParseError(f"{item_context}.ItemBP is missing.")
            reference = require(item_bp, ObjectRefValue, f"{item_context}.ItemBP")
            blueprints.append(blueprint_name(reference.class_name))
    return blueprints
