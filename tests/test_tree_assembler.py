from __future__ import annotations

import pytest

from refinder.data.errors import AmbiguousRootError
from refinder.domain.loot import Event, Item
from refinder.domain.zone import ZoneLink, ZoneNode
from refinder.services.tree_assembler import build_tree, is_root_candidate


def _connected() -> ZoneLink:
    return ZoneLink(target_zone_id=0, label="", link_type="", destination_link="X", destination_zone="Y")


def test_root_child_and_item_are_linked() -> None:
    root = ZoneNode(id=1, links=[_connected()])
    child = ZoneNode(id=2, parent_id=1)
    item = Item(id=10, name="Sword", source_zone_id=2, quantity=1)
    tree = build_tree([root, child], [item])
    assert tree is root
    assert tree.children == [child]
    assert tree.children[0].items[0].name == "Sword"


def test_link_with_one_destination_still_connects() -> None:
    zone = ZoneNode(id=1, links=[ZoneLink(0, "", "", destination_link="X")])
    assert is_root_candidate(zone)


def test_link_with_no_destinations_does_not_make_root() -> None:
    zone = ZoneNode(id=1, links=[ZoneLink(0, "", "")])
    assert not is_root_candidate(zone)
    assert build_tree([zone]) is None


def test_parented_zone_is_never_root() -> None:
    zone = ZoneNode(id=3, parent_id=1, links=[_connected()])
    assert not is_root_candidate(zone)


def test_multiple_root_candidates_raise() -> None:
    with pytest.raises(AmbiguousRootError, match="1, 2"):
        build_tree([ZoneNode(id=1, links=[_connected()]), ZoneNode(id=2, links=[_connected()])])


def test_orphans_and_unknown_entries_are_dropped() -> None:
    root = ZoneNode(id=1, links=[_connected()])
    orphan = ZoneNode(id=5, parent_id=99)
    stray = Item(id=11, name="Gem", source_zone_id=42, quantity=1)
    tree = build_tree([root, orphan], [stray])
    assert tree is root
    assert tree.children == []
    assert list(tree.walk()) == [root]
    assert orphan.items == []


def test_events_and_items_go_to_their_own_lists() -> None:
    root = ZoneNode(id=1, links=[_connected()])
    event = Event(id=20, name="Quest_Bell_C", zone_id=1)
    item = Item(id=10, name="Sword", source_zone_id=1, quantity=1)
    build_tree([root], [event, item])
    assert root.events == [event]
    assert root.items == [item]


def test_self_parent_is_not_attached() -> None:
    root = ZoneNode(id=1, links=[_connected()])
    loop = ZoneNode(id=2, parent_id=2)
    build_tree([root, loop])
    assert loop.children == []


def test_rebuilding_does_not_duplicate_children() -> None:
    root = ZoneNode(id=1, links=[_connected()])
    child = ZoneNode(id=2, parent_id=1)
    item = Item(id=10, name="Sword", source_zone_id=2, quantity=1)
    build_tree([root, child], [item])
    build_tree([root, child], [item])
    assert root.children == [child]
    assert child.items == [item]


def test_duplicate_zone_ids_keep_first() -> None:
    first = ZoneNode(id=1, label="first", links=[_connected()])
    second = ZoneNode(id=1, label="second", links=[_connected()])
    assert build_tree([first, second]) is first
