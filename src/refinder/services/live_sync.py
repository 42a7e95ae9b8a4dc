"""Keeps reconstructed sessions in step with the save directory.

A watchdog observer feeds file paths into a bounded queue; a single consumer
thread routes each path to a profile or character refresh and publishes a
CharacterUpdate whenever the active character's view changes.
"""
from __future__ import annotations

import logging
import os
import queue
import threading
import time
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from refinder.data import paths
from refinder.data.errors import RefinderError
from refinder.domain.character import NO_ACTIVE_CHARACTER, Character, CharacterUpdate
from refinder.domain.zone import ZoneInfo
from refinder.services.character_resolver import ProfileSnapshot
from refinder.services.errors import BootstrapError
from refinder.services.session_service import SessionService

logger = logging.getLogger(__name__)

Subscriber = Callable[[CharacterUpdate], None]

DEFAULT_QUEUE_SIZE = 256
_POLL_SECONDS = 0.25


class SyncState:
    """Roster, active id and last zone info per character.

    Written only by the consumer thread; writes swap in fresh mappings.
    """

    def __init__(self) -> None:
        self._characters: Dict[int, Character] = {}
        self._active_character_id = NO_ACTIVE_CHARACTER
        self._zones: Dict[int, ZoneInfo] = {}

    @property
    def characters(self) -> Mapping[int, Character]:
        return MappingProxyType(self._characters)

    @property
    def active_character_id(self) -> int:
        return self._active_character_id

    def character(self, character_id: int) -> Character:
        found = self._characters.get(character_id)
        if found is None:
            return Character.placeholder(character_id)
        return found

    def zone(self, character_id: int) -> ZoneInfo | None:
        return self._zones.get(character_id)

    def replace_roster(self, snapshot: ProfileSnapshot) -> None:
        self._characters = dict(snapshot.characters)
        self._active_character_id = snapshot.active_character_id

    def store_zone(self, character_id: int, zone: ZoneInfo) -> None:
        zones = dict(self._zones)
        zones[character_id] = zone
        self._zones = zones


class SaveDirectoryHandler(FileSystemEventHandler):
    """Forwards file creations, writes and rename targets to a queue."""

    def __init__(self, sink: Callable[[Path], None]) -> None:
        super().__init__()
        self._sink = sink

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._sink(Path(os.fsdecode(event.src_path)))

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._sink(Path(os.fsdecode(event.src_path)))

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._sink(Path(os.fsdecode(event.dest_path)))


class LiveSyncService:
    """Bootstraps the roster and session, then follows changes on disk."""

    def __init__(
        self,
        *,
        save_dir: Path,
        session_service: SessionService,
        subscriber: Subscriber,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        debounce_seconds: float = 0.0,
        observer_factory: Callable[[], BaseObserver] = Observer,
    ) -> None:
        self._save_dir = save_dir
        self._session_service = session_service
        self._subscriber = subscriber
        self._queue: "queue.Queue[Path]" = queue.Queue(maxsize=queue_size)
        self._debounce_seconds = max(0.0, debounce_seconds)
        self._observer_factory = observer_factory
        self._state = SyncState()

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def save_dir(self) -> Path:
        return self._save_dir

    def bootstrap(self) -> CharacterUpdate:
        """Read the profile and the active character's session, then publish.

        Any failure here is fatal to the caller and raised as BootstrapError.
        """
        try:
            snapshot = self._session_service.load_profile(paths.profile_path(self._save_dir))
        except RefinderError as exc:
            raise BootstrapError(f"Could not read the profile: {exc}") from exc
        self._state.replace_roster(snapshot)

        active_id = snapshot.active_character_id
        if active_id == NO_ACTIVE_CHARACTER:
            raise BootstrapError("The profile has no active character.")
        try:
            update = self._refresh_character(active_id)
        except RefinderError as exc:
            raise BootstrapError(f"Could not read the session of character {active_id}: {exc}") from exc
        assert update is not None
        return update

    def submit(self, path: Path) -> None:
        """Queue a changed path; drops it with a warning when the queue is full."""
        try:
            self._queue.put_nowait(path)
        except queue.Full:
            logger.warning("Notification queue full; dropping %s", path)

    def handle_path(self, path: Path) -> CharacterUpdate | None:
        """Route one changed path and return the published update, if any.

        Failures are logged and the notification dropped; state for other
        characters is left untouched.
        """
        if path.suffix != paths.SAVE_EXTENSION:
            logger.debug("Ignoring non-save file %s", path.name)
            return None
        try:
            if path.name == paths.PROFILE_FILENAME:
                return self._refresh_profile()
            character_id = paths.parse_character_id(path.name)
            if character_id is None:
                logger.debug("Ignoring unrecognised save file %s", path.name)
                return None
            return self._refresh_character(character_id)
        except RefinderError as exc:
            logger.error("Refresh for %s failed: %s", path.name, exc)
            return None

    def run(self, stop_event: threading.Event) -> None:
        """Watch the save directory until ``stop_event`` is set.

        The stop flag is checked between notifications, never during a pass.
        """
        observer = self._observer_factory()
        observer.schedule(SaveDirectoryHandler(self.submit), str(self._save_dir), recursive=False)
        observer.start()
        logger.info("Watching %s", self._save_dir)
        try:
            while not stop_event.is_set():
                try:
                    first = self._queue.get(timeout=_POLL_SECONDS)
                except queue.Empty:
                    continue
                for path in self._drain(first):
                    if stop_event.is_set():
                        break
                    self.handle_path(path)
        finally:
            observer.stop()
            observer.join()
            logger.info("Stopped watching %s", self._save_dir)

    def start(self, stop_event: threading.Event) -> threading.Thread:
        """Run the watch loop on a background thread."""
        thread = threading.Thread(
            target=self.run, args=(stop_event,), name="refinder-live-sync", daemon=True
        )
        thread.start()
        return thread

    def _drain(self, first: Path) -> List[Path]:
        pending = [first]
        if self._debounce_seconds <= 0:
            return pending
        deadline = time.monotonic() + self._debounce_seconds
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            try:
                path = self._queue.get(timeout=remaining)
            except queue.Empty:
                break
            if path not in pending:
                pending.append(path)
        return pending

    def _refresh_profile(self) -> CharacterUpdate | None:
        logger.info("Profile changed; reloading roster")
        snapshot = self._session_service.load_profile(paths.profile_path(self._save_dir))
        self._state.replace_roster(snapshot)
        if snapshot.active_character_id == NO_ACTIVE_CHARACTER:
            logger.info("Profile has no active character; nothing to publish")
            return None
        return self._refresh_character(snapshot.active_character_id)

    def _refresh_character(self, character_id: int) -> CharacterUpdate | None:
        character = self._state.character(character_id)
        zone = self._session_service.load_session(
            paths.character_save_path(self._save_dir, character_id), character
        )
        self._state.store_zone(character_id, zone)

        active_id = self._state.active_character_id
        if character_id != active_id:
            logger.warning("Inactive character update %d (active %d)", character_id, active_id)
            return None
        update = CharacterUpdate(character=character, zone=zone)
        self._publish(update)
        return update

    def _publish(self, update: CharacterUpdate) -> None:
        logger.info("Publishing character %d", update.character.id)
        try:
            self._subscriber(update)
        except Exception:
            logger.exception("Subscriber failed for character %d; update skipped", update.character.id)
