from __future__ import annotations

import pytest

from refinder.data.errors import NotFoundError, ParseError
from refinder.data.records import (
    Archive,
    ArrayOfStruct,
    Component,
    Record,
    StrValue,
    StructValue,
)
from refinder.domain.character import NO_ACTIVE_CHARACTER
from refinder.services.character_resolver import archetype_name, resolve_profile

from tests.helpers.archive_builders import character_record, profile_archive


def test_resolve_profile_reads_roster_and_active_id() -> None:
    archive = profile_archive(
        3,
        [
            character_record(3, archetype="Hunter", secondary="Medic", items=["/Game/Items/Sword.Sword_C"]),
            character_record(5, archetype="Gunslinger", character_type="ERemnantCharacterType::Hardcore"),
        ],
    )
    snapshot = resolve_profile(archive)
    assert snapshot.active_character_id == 3
    assert set(snapshot.characters) == {3, 5}
    active = snapshot.active_character
    assert active is not None
    assert active.archetype == ("Hunter", "Medic")
    assert active.archetype_label == "Hunter / Medic"
    assert active.owns("Sword_C")
    assert snapshot.characters[5].type == "ERemnantCharacterType::Hardcore"
    assert snapshot.characters[5].owned_item_ids == frozenset()


def test_missing_active_index_means_no_active_character() -> None:
    snapshot = resolve_profile(profile_archive(None, [character_record(1)]))
    assert snapshot.active_character_id == NO_ACTIVE_CHARACTER
    assert snapshot.active_character is None


def test_missing_profile_record_raises() -> None:
    with pytest.raises(NotFoundError, match="profile record"):
        resolve_profile(Archive(objects=(character_record(1),)))


def test_archetype_name_strips_path_and_affixes() -> None:
    assert archetype_name(StrValue("/Game/A/Archetype_Hunter_UI.Archetype_Hunter_UI_C")) == "Hunter"
    assert archetype_name(None) == ""


def test_inventory_entry_without_item_bp_raises() -> None:
    player = Record(
        class_name="Character_Master_Player_C",
        components=(
            Component(key="Inventory", properties={"Items": ArrayOfStruct(items=(StructValue(fields={}),))}),
        ),
    )
    character = Record(
        class_name="SavedCharacter",
        properties={"CharacterData": StructValue(archive=Archive(objects=(player,)))},
    )
    with pytest.raises(ParseError, match=r"Items\[0\]\.ItemBP is missing"):
        resolve_profile(profile_archive(0, [character]))


def test_character_without_inventory_owns_nothing() -> None:
    character = Record(class_name="SavedCharacter", properties={})
    snapshot = resolve_profile(profile_archive(0, [character]))
    assert snapshot.characters[0].owned_item_ids == frozenset()
    assert snapshot.characters[0].archetype == ("", "")


def test_mistyped_active_index_raises_parse_error() -> None:
    profile = Record(
        class_name="BP_RemnantSaveGameProfile_C",
        properties={"ActiveCharacterIndex": StrValue("3")},
    )
    with pytest.raises(ParseError, match="ActiveCharacterIndex must be Int32, got String"):
        resolve_profile(Archive(objects=(profile, character_record(3))))
