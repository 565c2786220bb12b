"""Console entry point: forwards strike/restart commands to the turn engine."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TextIO

from seabattle.game.app.projection import encode_view, project
from seabattle.game.app.store import GameStore
from seabattle.game.core.actions import Action, Restart, Strike
from seabattle.game.core.errors import SeaBattleError
from seabattle.game.core.field import RandomFieldGenerator
from seabattle.game.core.models import DEFAULT_MANIFEST, Manifest
from seabattle.game.infra.app_data import ensure_app_data_dirs
from seabattle.game.infra.config import GameSettings, load_default_env_files
from seabattle.game.infra.logging import setup_logging, shutdown_logging
from seabattle.game.presets.manifest import load_manifest

logger = logging.getLogger(__name__)

QUIT_COMMANDS = frozenset({"quit", "exit", "q"})
RESTART_COMMANDS = frozenset({"restart", "reset", "r"})


class CommandError(ValueError):
    """Console input could not be parsed into an action."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seabattle",
        description="Strike cells of a hidden fleet. Commands: 'x y', 'restart', 'quit'.",
    )
    parser.add_argument("--size", type=int, default=None, help="Field side length.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for ship placement.")
    parser.add_argument("--manifest", type=Path, default=None, help="Ship manifest JSON file.")
    parser.add_argument(
        "--no-touching",
        action="store_true",
        help="Keep a one-cell gap between ships when the manifest allows it.",
    )
    return parser


def parse_command(line: str) -> Action | None:
    """Parse one console line; ``None`` means quit."""
    text = line.strip().lower()
    if text in QUIT_COMMANDS:
        return None
    if text in RESTART_COMMANDS:
        return Restart()
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        raise CommandError(f"Expected 'x y', 'restart' or 'quit', got {line.strip()!r}.")
    try:
        return Strike(int(parts[0]), int(parts[1]))
    except ValueError as exc:
        raise CommandError(f"Coordinates must be integers, got {line.strip()!r}.") from exc


def run(store: GameStore, lines: Iterable[str], out: TextIO) -> int:
    """Process commands until input ends or a quit command arrives."""
    _emit(store, out)
    for line in lines:
        if not line.strip():
            continue
        try:
            action = parse_command(line)
            if action is None:
                break
            store.dispatch(action)
        except (CommandError, SeaBattleError) as exc:
            logger.warning("command_rejected reason=%s", exc)
            out.write(f"error: {exc}\n")
            continue
        _emit(store, out)
    return 0


def resolve_settings(args: argparse.Namespace) -> tuple[GameSettings, Manifest]:
    """Merge CLI flags over environment settings and load the manifest."""
    env_settings = GameSettings.from_env()
    settings = GameSettings(
        field_size=args.size if args.size is not None else env_settings.field_size,
        seed=args.seed if args.seed is not None else env_settings.seed,
        manifest_path=args.manifest if args.manifest is not None else env_settings.manifest_path,
        allow_touching=env_settings.allow_touching and not args.no_touching,
    )
    manifest = DEFAULT_MANIFEST
    if settings.manifest_path is not None:
        name, manifest = load_manifest(settings.manifest_path)
        logger.info("manifest_loaded name=%s path=%s", name, settings.manifest_path)
    return settings, manifest


def main(argv: Sequence[str] | None = None) -> int:
    """Run the console game."""
    args = build_parser().parse_args(argv)
    load_default_env_files()
    paths = ensure_app_data_dirs()
    setup_logging()
    logger.info("app_data_paths root=%s logs=%s", paths["root"], paths["logs"])
    try:
        settings, manifest = resolve_settings(args)
        generator = RandomFieldGenerator(
            random.Random(settings.seed), allow_touching=settings.allow_touching
        )
        store = GameStore(settings.field_size, manifest, generator=generator)
    except (SeaBattleError, ValueError, OSError) as exc:
        logger.error("startup_failed reason=%s", exc)
        sys.stderr.write(f"error: {exc}\n")
        shutdown_logging()
        return 2
    try:
        return run(store, sys.stdin, sys.stdout)
    finally:
        shutdown_logging()


def _emit(store: GameStore, out: TextIO) -> None:
    out.write(encode_view(project(store.state)).decode("utf-8") + "\n")
    out.flush()


if __name__ == "__main__":
    raise SystemExit(main())
