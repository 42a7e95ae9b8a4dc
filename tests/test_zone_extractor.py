from __future__ import annotations

import pytest

from refinder.data.errors import ParseError
from refinder.data.records import (
    Archive,
    ArrayOfStruct,
    Int32Value,
    Record,
    StrValue,
    StructValue,
    TextValue,
)
from refinder.domain.zone import NO_LINK
from refinder.services.zone_extractor import extract_zone

from tests.helpers.archive_builders import zone_actor, zone_link


def test_extract_zone_reads_fields_and_links() -> None:
    record = zone_actor(
        4,
        parent_id=1,
        quest_id=9,
        label="Forgotten Field",
        links=[zone_link(5, label="Ward", link_type="EZoneLinkType::Waypoint", name_id="WP1")],
    )
    zone = extract_zone(record)
    assert (zone.id, zone.parent_id, zone.quest_id, zone.label) == (4, 1, 9, "Forgotten Field")
    assert len(zone.links) == 1
    link = zone.links[0]
    assert link.target_zone_id == 5
    assert link.label == "Ward"
    assert link.is_waypoint
    assert link.name_id == "WP1"
    assert not link.is_connected


def test_later_sub_records_do_not_clear_earlier_values() -> None:
    record = Record(
        class_name="ZoneActor",
        archive=Archive(
            objects=(
                Record(properties={"ID": Int32Value(3), "Label": TextValue(literal="Hall")}),
                Record(properties={"ParentZoneID": Int32Value(1)}),
            )
        ),
    )
    zone = extract_zone(record)
    assert zone.id == 3
    assert zone.label == "Hall"
    assert zone.parent_id == 1


def test_missing_link_names_default_to_none_sentinel() -> None:
    link = StructValue(fields={"ZoneID": Int32Value(2)})
    record = Record(
        archive=Archive(
            objects=(Record(properties={"ID": Int32Value(1), "ZoneLinks": ArrayOfStruct(items=(link,))}),)
        )
    )
    zone = extract_zone(record)
    assert zone.links[0].destination_link == NO_LINK
    assert zone.links[0].destination_zone == NO_LINK
    assert zone.links[0].label == ""


def test_zone_without_sub_records_is_blank() -> None:
    zone = extract_zone(Record(class_name="ZoneActor"))
    assert zone.id == 0
    assert zone.links == []


def test_wrong_variant_raises_parse_error() -> None:
    record = Record(archive=Archive(objects=(Record(properties={"ID": StrValue("1")}),)))
    with pytest.raises(ParseError, match=r"ZoneActor\[0\]\.ID must be Int32"):
        extract_zone(record)
