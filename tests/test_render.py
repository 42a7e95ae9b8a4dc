"""Tests for CLI rendering utilities."""
import json

import pytest

from refinder.domain.character import Character, CharacterUpdate
from refinder.domain.loot import Event, Item, LootReward, PersistenceKey
from refinder.domain.zone import ZoneInfo, ZoneLink, ZoneNode
from refinder.presentation.cli.render import (
    print_json_update,
    print_update,
    printable_name,
    render_update,
    render_zone,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Material_LumeniteCrystal_C", "Lumenite Crystal"),
        ("Ring_BandOfStrength_C", "{Ring} Band Of Strength"),
        ("Quest_SideD_ForgottenField_C", "{Side Dungeon} Forgotten Field"),
        ("Quest_Boss_Nightweaver_C", "Boss Nightweaver"),
        ("Item_HiddenContainer_Material_Engram_Invader_C", "{Archetype Item} Invader"),
        ("GemContainer_BlueGems_C", "Blue Relic Fragment"),
        ("GemContainer_RedGems_C", "Red Relic Fragment"),
        ("GemContainer_GreenShards_C", "Green Shards"),
        ("Sword", "Sword"),
    ],
)
def test_printable_name(name: str, expected: str) -> None:
    assert printable_name(name) == expected


def test_render_zone_nests_children_and_marks_ownership() -> None:
    root = ZoneNode(
        id=1,
        label="Entrance",
        links=[ZoneLink(2, "Ward 13", "EZoneLinkType::Waypoint")],
        items=[Item(id=10, name="Sword", source_zone_id=1, quantity=1, owned_by_character=True)],
    )
    root.children.append(
        ZoneNode(
            id=2,
            parent_id=1,
            label="Cave",
            items=[Item(id=11, name="Material_Scrap_C", source_zone_id=2, quantity=5)],
        )
    )
    assert render_zone(root) == [
        "Entrance",
        "--- || [Waypoint] Ward 13",
        "--- || [Item] ✅ x1 Sword",
        "--- Cave",
        "------ || [Material] x5 Scrap",
    ]


def test_render_zone_lists_event_rewards() -> None:
    reward = LootReward(
        sequence_id=0,
        reward_group_id=0,
        type="ESpawnType::Actor",
        actor_blueprint_id="Amulet_Fang_C",
        quantity=1,
        persistence_key=PersistenceKey("/Game/Quest_1_Container", 1),
    )
    root = ZoneNode(id=1, label="Hall", events=[Event(id=20, name="Quest_Miniboss_Gorge_C", zone_id=1, rewards=[reward])])
    assert render_zone(root)[1:] == [
        "--- || [Event] {Miniboss} Gorge",
        "------ || [Reward] ❌ x1 {Amulet} Fang",
    ]


def test_render_update_header_shows_blood_moon_only_in_jungle() -> None:
    character = Character(id=1, archetype=("Hunter", "Medic"), type="ERemnantCharacterType::Hardcore")
    jungle = render_update(CharacterUpdate(character, ZoneInfo(root=None, biome="Jungle", blood_moon=True)))
    assert jungle[:4] == [
        "Archetype:  Hunter / Medic",
        "Character:  Hardcore",
        "Biome:      Jungle",
        "Blood Moon: True",
    ]
    assert jungle[-1] == "No active adventure."

    nerud = render_update(CharacterUpdate(character, ZoneInfo(root=None, biome="Nerud")))
    assert not any(line.startswith("Blood Moon") for line in nerud)


def test_print_update_clears_screen(capsys: pytest.CaptureFixture[str]) -> None:
    print_update(CharacterUpdate(Character(id=1), ZoneInfo(root=ZoneNode(id=1, label="Entrance"))))
    out = capsys.readouterr().out
    assert out.startswith("\033[2J")
    assert "Entrance" in out


def test_print_json_update_emits_one_line(capsys: pytest.CaptureFixture[str]) -> None:
    print_json_update(CharacterUpdate(Character(id=4), ZoneInfo(root=None)))
    out = capsys.readouterr().out
    assert out.count("\n") == 1
    assert json.loads(out)["character"]["id"] == 4
