"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Mapping

_DEFAULT_DEBOUNCE_SECONDS = 0.5
_DEFAULT_QUEUE_SIZE = 256


@dataclass(slots=True)
class CliConfig:
    """User-tunable options for the watcher."""

    save_dir: str | None = None
    debounce_seconds: float = _DEFAULT_DEBOUNCE_SECONDS
    queue_size: int = _DEFAULT_QUEUE_SIZE
    dump_archives: bool = False


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "refinder"
        return Path.home() / "refinder"
    return Path.home() / ".config" / "refinder"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def debug_enabled(environ: Mapping[str, str] | None = None) -> bool:
    """Return True only when REFINDER_DEBUG is explicitly set to '1'."""
    env = os.environ if environ is None else environ
    return env.get("REFINDER_DEBUG") == "1"


def _normalize(raw: Mapping[str, object]) -> CliConfig:
    config = CliConfig()
    save_dir = raw.get("save_dir")
    if isinstance(save_dir, str) and save_dir.strip():
        config.save_dir = save_dir
    debounce = raw.get("debounce_seconds")
    if isinstance(debounce, (int, float)) and not isinstance(debounce, bool) and debounce >= 0:
        config.debounce_seconds = float(debounce)
    queue_size = raw.get("queue_size")
    if isinstance(queue_size, int) and not isinstance(queue_size, bool) and queue_size >= 1:
        config.queue_size = queue_size
    if isinstance(raw.get("dump_archives"), bool):
        config.dump_archives = bool(raw["dump_archives"])
    return config


def load_config(path: Path | None = None) -> CliConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return CliConfig()
    except (OSError, ValueError):
        return CliConfig()
    if not isinstance(raw, dict):
        return CliConfig()
    return _normalize(raw)


def apply_env_overrides(config: CliConfig, environ: Mapping[str, str] | None = None) -> CliConfig:
    """Return a copy of ``config`` with REFINDER_SAVE_DIR and DEBUG_SAVE_JSON applied."""
    env = os.environ if environ is None else environ
    updated = replace(config)
    save_dir = env.get("REFINDER_SAVE_DIR")
    if save_dir:
        updated.save_dir = save_dir
    if env.get("DEBUG_SAVE_JSON"):
        updated.dump_archives = True
    return updated


def save_config(config: CliConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = asdict(_normalize(asdict(config)))
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
