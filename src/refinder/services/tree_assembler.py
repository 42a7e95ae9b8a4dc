"""Links zone nodes into a rooted tree and hangs items and events off them."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Sequence

from refinder.data.errors import AmbiguousRootError
from refinder.domain.loot import Event, Item, ZoneEntry
from refinder.domain.zone import NO_PARENT, ZoneNode

logger = logging.getLogger(__name__)


def index_zones(zones: Iterable[ZoneNode]) -> Dict[int, ZoneNode]:
    """Index nodes by id; on a duplicate id the first node is kept."""
    index: Dict[int, ZoneNode] = {}
    for zone in zones:
        if zone.id in index:
            logger.warning("Duplicate zone id %d; keeping the first occurrence.", zone.id)
            continue
        index[zone.id] = zone
    return index


def is_root_candidate(zone: ZoneNode) -> bool:
    """A parentless zone with at least one connected link.

    This mirrors the game's layout rather than any declared flag; a save with
    several such zones is reported as ambiguous instead of guessed at.
    """
    return zone.parent_id == NO_PARENT and any(link.is_connected for link in zone.links)


def select_root(index: Dict[int, ZoneNode]) -> ZoneNode | None:
    candidates = [zone for zone in index.values() if is_root_candidate(zone)]
    if not candidates:
        return None
    if len(candidates) > 1:
        ids = ", ".join(str(zone.id) for zone in candidates)
        raise AmbiguousRootError(f"Multiple root zone candidates: {ids}.")
    return candidates[0]


def assign_entries(index: Dict[int, ZoneNode], entries: Sequence[ZoneEntry]) -> None:
    """Partition entries into each zone's items and events by zone id."""
    for entry in entries:
        zone_id = entry.source_zone_id if isinstance(entry, Item) else entry.zone_id
        zone = index.get(zone_id)
        if zone is None:
            continue
        if isinstance(entry, Event):
            zone.events.append(entry)
        else:
            zone.items.append(entry)


def build_tree(zones: Sequence[ZoneNode], entries: Sequence[ZoneEntry] = ()) -> ZoneNode | None:
    """Assemble the zone tree.

    Returns None when no zone qualifies as the root. Zones whose parent id is
    unknown are left out of the tree.
    """
    index = index_zones(zones)
    for zone in index.values():
        zone.children = []
        zone.items = []
        zone.events = []

    for zone in index.values():
        if zone.parent_id == NO_PARENT:
            continue
        parent = index.get(zone.parent_id)
        if parent is None or parent is zone:
            logger.debug("Zone %d references unknown parent %d.", zone.id, zone.parent_id)
            continue
        parent.children.append(zone)

    assign_entries(index, entries)
    return select_root(index)
