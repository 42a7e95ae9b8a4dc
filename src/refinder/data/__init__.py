"""Data layer: generic record model, archive decoding and save paths."""

from .archive_reader import ArchiveDecoder, read_archive
from .errors import (
    AmbiguousRootError,
    ArchiveDecodeError,
    ArchiveIOError,
    NotFoundError,
    ParseError,
    RefinderError,
)
from .json_archive import JsonArchiveDecoder
from .records import Archive, Component, Record

__all__ = [
    "AmbiguousRootError",
    "Archive",
    "ArchiveDecodeError",
    "ArchiveDecoder",
    "ArchiveIOError",
    "Component",
    "JsonArchiveDecoder",
    "NotFoundError",
    "ParseError",
    "Record",
    "RefinderError",
    "read_archive",
]
