"""Application configuration and env loading."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from seabattle.game.core.models import DEFAULT_FIELD_SIZE

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class GameSettings:
    """Game setup resolved from the environment."""

    field_size: int = DEFAULT_FIELD_SIZE
    seed: int | None = None
    manifest_path: Path | None = None
    allow_touching: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GameSettings:
        """Build settings from ``SEABATTLE_*`` variables."""
        env = os.environ if environ is None else environ
        field_size = _read_int(env, "SEABATTLE_FIELD_SIZE")
        manifest_raw = env.get("SEABATTLE_MANIFEST", "").strip()
        allow_touching = _read_bool(env, "SEABATTLE_ALLOW_TOUCHING")
        settings = cls(
            field_size=DEFAULT_FIELD_SIZE if field_size is None else field_size,
            seed=_read_int(env, "SEABATTLE_SEED"),
            manifest_path=Path(manifest_raw) if manifest_raw else None,
            allow_touching=True if allow_touching is None else allow_touching,
        )
        if settings.field_size <= 0:
            raise ValueError(f"SEABATTLE_FIELD_SIZE must be positive, got {settings.field_size}.")
        return settings


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Load KEY=VALUE pairs from an env file into process environment.

    By default, values from the env file overwrite existing environment variables.
    """
    env_path = _resolve_env_path(path)
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue

        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]

        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files with optional local overrides.

    Later files win. Default order:
    1) appdata/config/.env
    2) appdata/config/.env.local
    3) .env
    4) .env.local
    """
    to_load = (
        tuple(paths)
        if paths is not None
        else (
            "appdata/config/.env",
            "appdata/config/.env.local",
            ".env",
            ".env.local",
        )
    )
    for path in to_load:
        load_env_file(path, override_existing=override_existing)


def _read_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc


def _read_bool(env: Mapping[str, str], name: str) -> bool | None:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return None
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}.")


def _resolve_env_path(path: str) -> Path:
    """Resolve env path from cwd, frozen exe dir, then project root."""
    candidate = Path(path)
    if candidate.exists():
        return candidate

    if getattr(sys, "frozen", False):
        executable = getattr(sys, "executable", "")
        if executable:
            frozen_dir_candidate = Path(executable).resolve().parent / path
            if frozen_dir_candidate.exists():
                return frozen_dir_candidate

    # Fallback for IDE run configs with different working directory.
    project_root = Path(__file__).resolve().parents[3]
    return project_root / path
