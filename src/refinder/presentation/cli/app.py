"""Command-line entry for watching a save directory."""
from __future__ import annotations

import argparse
import importlib
import logging
import threading
from pathlib import Path
from typing import Sequence

from refinder import __version__
from refinder.data.archive_reader import ArchiveDecoder
from refinder.data.errors import NotFoundError
from refinder.data.json_archive import JsonArchiveDecoder
from refinder.data.paths import find_user_save_dir
from refinder.presentation.cli.config import (
    CliConfig,
    apply_env_overrides,
    debug_enabled,
    load_config,
)
from refinder.presentation.cli.render import print_json_update, print_update
from refinder.services import BootstrapError, LiveSyncService, SessionService

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"
_JOIN_SECONDS = 0.5


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refinder",
        description="Follow the active character's session and print its zones and loot.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--save-dir", type=Path, help="Folder holding profile.sav and save_<id>.sav")
    parser.add_argument("--config", type=Path, help="Path to a JSON config file")
    parser.add_argument(
        "--decoder",
        default=None,
        help="Archive decoder as module:attribute (default: tagged JSON decoder)",
    )
    parser.add_argument("--json", action="store_true", help="Print one JSON payload per update")
    parser.add_argument("--once", action="store_true", help="Print the initial state and exit")
    parser.add_argument("--debounce", type=float, help="Seconds to coalesce bursts of file events")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or debug_enabled() else logging.INFO
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def load_decoder(reference: str | None) -> ArchiveDecoder:
    """Resolve ``module:attribute`` to a decoder, instantiating classes."""
    if not reference:
        return JsonArchiveDecoder()
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Decoder must be given as module:attribute, got {reference!r}.")
    target = getattr(importlib.import_module(module_name), attribute)
    decoder = target() if isinstance(target, type) else target
    if not callable(getattr(decoder, "decode", None)):
        raise ValueError(f"Decoder {reference!r} has no decode method.")
    return decoder


def resolve_save_dir(cli_value: Path | None, config: CliConfig) -> Path:
    """CLI flag first, then config, then the platform default folder."""
    if cli_value is not None:
        return cli_value
    if config.save_dir:
        return Path(config.save_dir)
    return find_user_save_dir()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    config = apply_env_overrides(load_config(args.config))
    if args.debounce is not None:
        config.debounce_seconds = max(0.0, args.debounce)

    try:
        decoder = load_decoder(args.decoder)
    except (ImportError, AttributeError, ValueError) as exc:
        logger.error("Could not load decoder: %s", exc)
        return 2
    try:
        save_dir = resolve_save_dir(args.save_dir, config)
    except NotFoundError as exc:
        logger.error("%s", exc)
        return 1

    dump_dir = save_dir / "debug" if config.dump_archives else None
    service = LiveSyncService(
        save_dir=save_dir,
        session_service=SessionService(decoder=decoder, dump_dir=dump_dir),
        subscriber=print_json_update if args.json else print_update,
        queue_size=config.queue_size,
        debounce_seconds=config.debounce_seconds,
    )
    try:
        service.bootstrap()
    except BootstrapError as exc:
        logger.error("%s", exc)
        return 1
    if args.once:
        return 0

    stop = threading.Event()
    worker = service.start(stop)
    try:
        while worker.is_alive():
            worker.join(_JOIN_SECONDS)
    except KeyboardInterrupt:
        logger.info("Interrupted; stopping")
        stop.set()
        worker.join()
    return 0
