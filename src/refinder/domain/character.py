"""Character roster structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

from refinder.domain.zone import ZoneInfo

NO_ACTIVE_CHARACTER = -1
STANDARD_CHARACTER_TYPE = "ERemnantCharacterType::Standard"


@dataclass(slots=True)
class Character:
    """Saved character and the item blueprints it owns."""

    id: int
    archetype: Tuple[str, str] = ("", "")
    type: str = STANDARD_CHARACTER_TYPE
    owned_item_ids: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def archetype_label(self) -> str:
        primary, secondary = self.archetype
        return f"{primary} / {secondary}"

    def owns(self, blueprint_id: str) -> bool:
        return blueprint_id in self.owned_item_ids

    @classmethod
    def placeholder(cls, character_id: int) -> "Character":
        """Stand-in for a character id missing from the current roster."""
        return cls(id=character_id)


@dataclass(slots=True)
class CharacterUpdate:
    """Complete state published to subscribers for the active character."""

    character: Character
    zone: ZoneInfo
