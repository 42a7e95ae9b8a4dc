"""Custom exceptions for archive reading and record extraction."""


class RefinderError(Exception):
    """Base exception for the data and reconstruction layers."""


class NotFoundError(RefinderError):
    """Raised when a required anchor record or instance cannot be located."""


class ParseError(RefinderError):
    """Raised when a property exists but carries an unexpected value variant."""


class AmbiguousRootError(RefinderError):
    """Raised when more than one zone qualifies as the tree root."""


class ArchiveIOError(RefinderError):
    """Raised when a save file cannot be read from disk."""


class ArchiveDecodeError(RefinderError):
    """Raised when the decoder rejects the bytes of a save file."""
