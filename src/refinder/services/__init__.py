"""Service layer exports."""

from .character_resolver import ProfileSnapshot, resolve_profile
from .errors import BootstrapError
from .live_sync import LiveSyncService, SyncState
from .session_service import SessionService, reconstruct_session

__all__ = [
    "BootstrapError",
    "LiveSyncService",
    "ProfileSnapshot",
    "SessionService",
    "SyncState",
    "reconstruct_session",
    "resolve_profile",
]
