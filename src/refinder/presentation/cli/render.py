"""Console rendering for published character updates."""
from __future__ import annotations

import json
import re
from typing import List

from refinder.domain.character import CharacterUpdate
from refinder.domain.zone import ZoneNode
from refinder.services.payloads import update_to_payload

_CLEAR_SCREEN = "\033[2J"
_CHARACTER_TYPE_PREFIX = "ERemnantCharacterType::"
_EQUIPMENT_PREFIXES = ("Amulet_", "Armor_", "Ring_", "Weapon_")
_QUEST_TAGS = {
    "Injectable": "Injectable",
    "SideD": "Side Dungeon",
    "OverworldPOI": "Point of Interest",
    "Miniboss": "Miniboss",
}
_ENGRAM_PREFIX = "Item_HiddenContainer_Material_Engram_"
_GEM_CONTAINER_PREFIX = "GemContainer_"
_RELIC_FRAGMENTS = {
    "BlueGems": "Blue Relic Fragment",
    "YellowGems": "Yellow Relic Fragment",
    "RedGems": "Red Relic Fragment",
}
_CAPITALIZED_WORD = re.compile(r"[A-Z][^A-Z]*")


def split_by_capital(text: str) -> str:
    return " ".join(_CAPITALIZED_WORD.findall(text)).strip()


def printable_name(name: str) -> str:
    """Turn a blueprint class name into something readable.

    Only ``*_C`` class names are rewritten; anything else is shown as-is.
    """
    if not name.endswith("_C"):
        return name
    base = name[: -len("_C")]
    if base.startswith("Material_"):
        return split_by_capital(base[len("Material_"):])
    if base.startswith(_ENGRAM_PREFIX):
        return f"{{Archetype Item}} {split_by_capital(base[len(_ENGRAM_PREFIX):])}"
    if base.startswith(_GEM_CONTAINER_PREFIX):
        gems = base[len(_GEM_CONTAINER_PREFIX):]
        return _RELIC_FRAGMENTS.get(gems) or split_by_capital(gems)
    if base.startswith(_EQUIPMENT_PREFIXES):
        kind, _, rest = base.partition("_")
        return f"{{{kind}}} {split_by_capital(rest.replace('_', ''))}"
    if base.startswith("Quest_"):
        parts = base[len("Quest_"):].split("_")
        prefix = ""
        if parts and parts[0] in _QUEST_TAGS:
            prefix = f"{{{_QUEST_TAGS[parts[0]]}}} "
            parts = parts[1:]
        return prefix + split_by_capital("".join(parts))
    return name


def _owned_mark(owned: bool) -> str:
    return "✅" if owned else "❌"


def render_zone(zone: ZoneNode, indent: str = "") -> List[str]:
    """Return the indented tree lines for a zone and its descendants."""
    lines = [f"{indent} {zone.label}" if indent else zone.label]
    for link in zone.links:
        if link.is_waypoint:
            lines.append(f"{indent}--- || [Waypoint] {link.label}")
    for item in zone.items:
        if item.name.startswith("Material_"):
            lines.append(f"{indent}--- || [Material] x{item.quantity} {printable_name(item.name)}")
        else:
            lines.append(
                f"{indent}--- || [Item] {_owned_mark(item.owned_by_character)} "
                f"x{item.quantity} {printable_name(item.name)}"
            )
    for event in zone.events:
        lines.append(f"{indent}--- || [Event] {printable_name(event.name)}")
        for reward in event.rewards:
            lines.append(
                f"{indent}------ || [Reward] {_owned_mark(reward.owned_by_character)} "
                f"x{reward.quantity} {printable_name(reward.actor_blueprint_id)}"
            )
    for child in zone.children:
        lines.extend(render_zone(child, indent + "---"))
    return lines


def render_update(update: CharacterUpdate) -> List[str]:
    character = update.character
    zone = update.zone
    character_type = character.type
    if character_type.startswith(_CHARACTER_TYPE_PREFIX):
        character_type = character_type[len(_CHARACTER_TYPE_PREFIX):]
    lines = [
        f"{'Archetype:':<11} {character.archetype_label}",
        f"{'Character:':<11} {character_type}",
        f"{'Biome:':<11} {zone.biome}",
    ]
    if zone.biome == "Jungle":
        lines.append(f"{'Blood Moon:':<11} {zone.blood_moon}")
    lines.append("")
    if zone.root is None:
        lines.append("No active adventure.")
    else:
        lines.extend(render_zone(zone.root))
    return lines


def print_update(update: CharacterUpdate) -> None:
    """Clear the terminal and print the update as a tree."""
    print(_CLEAR_SCREEN, end="")
    print("\n".join(render_update(update)))


def print_json_update(update: CharacterUpdate) -> None:
    """Print the update as a single JSON line."""
    print(json.dumps(update_to_payload(update), ensure_ascii=False), flush=True)
