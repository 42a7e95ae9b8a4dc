"""Zone hierarchy structures for a reconstructed session."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from refinder.domain.loot import Event, Item

NO_PARENT = 0
NO_LINK = "None"
WAYPOINT_LINK_TYPE = "EZoneLinkType::Waypoint"


@dataclass(slots=True)
class ZoneLink:
    """Traversable connection out of a zone."""

    target_zone_id: int
    label: str
    link_type: str
    destination_link: str = NO_LINK
    destination_zone: str = NO_LINK
    name_id: str = NO_LINK

    @property
    def is_connected(self) -> bool:
        """True unless both destination fields are the ``None`` sentinel."""
        return self.destination_link != NO_LINK or self.destination_zone != NO_LINK

    @property
    def is_waypoint(self) -> bool:
        return self.link_type == WAYPOINT_LINK_TYPE


@dataclass(slots=True)
class ZoneNode:
    id: int
    parent_id: int = NO_PARENT
    quest_id: int = 0
    label: str = ""
    links: List[ZoneLink] = field(default_factory=list)
    items: List[Item] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    children: List["ZoneNode"] = field(default_factory=list)

    def walk(self) -> Iterator["ZoneNode"]:
        """Yield this node and its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(slots=True)
class ZoneInfo:
    """Published view of one character's current session.

    ``root`` is None when no zone qualifies as the entry point; consumers
    treat that as "no active instance".
    """

    root: ZoneNode | None
    biome: str = ""
    blood_moon: bool = False
