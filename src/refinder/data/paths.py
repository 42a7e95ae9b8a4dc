"""Helpers for resolving save file locations."""
from __future__ import annotations

import os
import re
from pathlib import Path

from refinder.data.errors import NotFoundError

SAVE_EXTENSION = ".sav"
PROFILE_FILENAME = f"profile{SAVE_EXTENSION}"
_CHARACTER_SAVE_PATTERN = re.compile(r"^save_(-?\d+)\.sav$")


def get_saved_games_root() -> Path:
    """Return the platform folder holding the game's save directories."""
    base = os.environ.get("USERPROFILE")
    if base:
        return Path(base) / "Saved Games" / "Remnant2"
    return Path.home() / "Saved Games" / "Remnant2"


def find_user_save_dir(root: Path | None = None) -> Path:
    """Return the first user folder containing saves.

    The Steam layout (``Remnant2/Steam/<user id>``) is tried first, then the
    plain ``Remnant2/<user id>`` layout. When several user folders exist the
    first one in sorted order wins.
    """
    saved_games = root if root is not None else get_saved_games_root()
    for base in (saved_games / "Steam", saved_games):
        user_folders = _list_user_folders(base)
        if user_folders:
            return user_folders[0]
    raise NotFoundError(f"Could not find a user save folder under {saved_games}")


def _list_user_folders(base: Path) -> list[Path]:
    try:
        entries = sorted(base.iterdir())
    except FileNotFoundError:
        return []
    except NotADirectoryError:
        return []
    return [entry for entry in entries if entry.is_dir() and entry.name != "Steam"]


def profile_path(save_dir: Path) -> Path:
    return save_dir / PROFILE_FILENAME


def character_save_path(save_dir: Path, character_id: int) -> Path:
    return save_dir / f"save_{character_id}{SAVE_EXTENSION}"


def parse_character_id(filename: str) -> int | None:
    """Return the character id encoded in ``save_<id>.sav``, else None."""
    match = _CHARACTER_SAVE_PATTERN.match(filename)
    if match is None:
        return None
    return int(match.group(1))
