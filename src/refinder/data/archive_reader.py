"""Low-level helpers for turning save files into archives."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from refinder.data.errors import ArchiveDecodeError, ArchiveIOError
from refinder.data.json_archive import archive_to_json
from refinder.data.records import Archive


class ArchiveDecoder(Protocol):
    """Anything that turns raw save bytes into an archive.

    Implementations raise ArchiveDecodeError for corrupt input.
    """

    def decode(self, data: bytes) -> Archive:
        ...


def read_archive(path: Path, decoder: ArchiveDecoder) -> Archive:
    """Read and decode a save file.

    Raises ArchiveIOError when the file is unreadable and ArchiveDecodeError for
    anything the decoder rejects, whatever exception type it raised.
    """
    try:
        data = path.read_bytes()
    except FileNotFoundError as exc:
        raise ArchiveIOError(f"Save file not found: {path}") from exc
    except OSError as exc:
        raise ArchiveIOError(f"Unable to read save file: {path}") from exc
    try:
        return decoder.decode(data)
    except ArchiveDecodeError:
        raise
    except Exception as exc:
        raise ArchiveDecodeError(f"Unable to decode save file {path}: {exc}") from exc


def dump_archive(archive: Archive, path: Path) -> None:
    """Write the tagged JSON form of an archive for offline inspection."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(archive_to_json(archive), indent=2), encoding="utf-8")
