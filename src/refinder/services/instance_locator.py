"""Locates the active adventure instance inside a session archive."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Tuple

from refinder.data.errors import NotFoundError
from refinder.data.records import (
    Archive,
    BoolValue,
    Int32Value,
    Record,
    StrValue,
    VariablesValue,
    require_archive,
)

logger = logging.getLogger(__name__)

PERSISTENT_LEVEL_SUFFIX = "Main.Main:PersistentLevel"
ADVENTURE_CLASS_PREFIX = "Quest_AdventureMode_"
GLOBAL_CLASS_PREFIX = "Quest_Global_"
ZONE_CLASS_NAME = "ZoneActor"
BLOOD_MOON_VARIABLE = "IsBloodMoon"


def container_key_prefix(instance_id: int) -> str:
    return f"/Game/Quest_{instance_id}_Container"


@dataclass(slots=True)
class SessionInstance:
    """Actors of one adventure instance, split into zones and everything else."""

    instance_id: int
    adventure: Record
    zone_records: List[Record] = field(default_factory=list)
    entry_records: List[Record] = field(default_factory=list)

    @property
    def biome(self) -> str:
        name = self.adventure.class_name
        if name.startswith(ADVENTURE_CLASS_PREFIX):
            name = name[len(ADVENTURE_CLASS_PREFIX):]
        if name.endswith("_C"):
            name = name[: -len("_C")]
        return name

    @property
    def blood_moon(self) -> bool:
        for sub_record in self.adventure.sub_records:
            for component in sub_record.components:
                if component.key != "Variables":
                    continue
                variables = component.properties.get("Variables")
                if not isinstance(variables, VariablesValue):
                    continue
                flag = variables.properties.get(BLOOD_MOON_VARIABLE)
                if isinstance(flag, BoolValue):
                    return flag.value
        return False


def locate_instance(archive: Archive) -> SessionInstance:
    """Find the adventure actor and split its container into zone and entry records.

    Raises NotFoundError when any anchor is missing and ParseError when an
    anchor's ``Blob`` does not wrap an archive.
    """
    level = _find_by_key(archive, lambda key: key.endswith(PERSISTENT_LEVEL_SUFFIX))
    if level is None:
        raise NotFoundError("Could not find the persistent level record.")
    level_actors = require_archive(level.properties.get("Blob"), "PersistentLevel.Blob")

    adventure = _find_adventure(level_actors)
    if adventure is None:
        raise NotFoundError("Could not find the adventure mode actor.")

    instance_id = _find_instance_id(adventure)
    if instance_id is None:
        raise NotFoundError(f"Adventure actor {adventure.class_name} has no ID property.")

    prefix = container_key_prefix(instance_id)
    container = _find_by_key(archive, lambda key: key.startswith(prefix))
    if container is None:
        raise NotFoundError(f"Could not find the container record {prefix}.")
    actors = require_archive(container.properties.get("Blob"), f"{prefix}.Blob")

    instance = SessionInstance(instance_id=instance_id, adventure=adventure)
    zones, entries = _split_actors(actors.objects)
    instance.zone_records.extend(zones)
    instance.entry_records.extend(entries)
    logger.debug(
        "Instance %d (%s): %d zones, %d entries",
        instance_id,
        adventure.class_name,
        len(zones),
        len(entries),
    )
    return instance


def _find_by_key(archive: Archive, matches: Callable[[str], bool]) -> Record | None:
    for record in archive.objects:
        key = record.properties.get("Key")
        if isinstance(key, StrValue) and matches(key.value):
            return record
    return None


def _find_adventure(actors: Archive) -> Record | None:
    for actor in actors.objects:
        if actor.class_name.startswith(ADVENTURE_CLASS_PREFIX) and actor.sub_records:
            return actor
    return None


def _find_instance_id(adventure: Record) -> int | None:
    for sub_record in adventure.sub_records:
        value = sub_record.properties.get("ID")
        if isinstance(value, Int32Value):
            return value.value
    return None


def _split_actors(actors: Tuple[Record, ...]) -> Tuple[List[Record], List[Record]]:
    zones: List[Record] = []
    entries: List[Record] = []
    for actor in actors:
        if actor.class_name.startswith(GLOBAL_CLASS_PREFIX):
            continue
        if actor.class_name == ZONE_CLASS_NAME:
            zones.append(actor)
        else:
            entries.append(actor)
    return zones, entries
