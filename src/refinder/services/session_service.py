"""Runs the full reconstruction pipeline for profile and session saves."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import AbstractSet, Iterable, List

from refinder.data.archive_reader import ArchiveDecoder, dump_archive, read_archive
from refinder.data.errors import ParseError
from refinder.data.records import Archive, Record
from refinder.domain.character import Character
from refinder.domain.zone import ZoneInfo, ZoneNode
from refinder.services.character_resolver import ProfileSnapshot, resolve_profile
from refinder.services.classifier import classify_records
from refinder.services.instance_locator import locate_instance
from refinder.services.tree_assembler import build_tree
from refinder.services.zone_extractor import extract_zone

logger = logging.getLogger(__name__)


def extract_zones(records: Iterable[Record]) -> List[ZoneNode]:
    """Extract every zone actor, skipping malformed ones with a warning."""
    zones: List[ZoneNode] = []
    for record in records:
        try:
            zones.append(extract_zone(record))
        except ParseError as exc:
            logger.warning("Skipping zone actor: %s", exc)
    return zones


def reconstruct_session(archive: Archive, owned_item_ids: AbstractSet[str]) -> ZoneInfo:
    """Build the ZoneInfo for one session archive.

    Locator failures (NotFoundError, ParseError on an anchor) and an ambiguous
    root abort the pass; individual malformed actors are skipped.
    """
    instance = locate_instance(archive)
    zones = extract_zones(instance.zone_records)
    entries = classify_records(instance.entry_records, owned_item_ids)
    root = build_tree(zones, entries)
    if root is None:
        logger.info("No root zone found in instance %d.", instance.instance_id)
    return ZoneInfo(root=root, biome=instance.biome, blood_moon=instance.blood_moon)


class SessionService:
    """Reads save files through a decoder and reconstructs their contents."""

    def __init__(self, *, decoder: ArchiveDecoder, dump_dir: Path | None = None) -> None:
        self._decoder = decoder
        self._dump_dir = dump_dir

    def read(self, path: Path) -> Archive:
        archive = read_archive(path, self._decoder)
        if self._dump_dir is not None:
            target = self._dump_dir / f"{path.stem}.json"
            try:
                dump_archive(archive, target)
            except OSError as exc:
                logger.warning("Could not write archive dump %s: %s", target, exc)
        return archive

    def load_profile(self, path: Path) -> ProfileSnapshot:
        return resolve_profile(self.read(path))

    def load_session(self, path: Path, character: Character) -> ZoneInfo:
        return reconstruct_session(self.read(path), character.owned_item_ids)
