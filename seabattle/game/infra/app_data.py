"""Unified SeaBattle app-data paths."""

from __future__ import annotations

import os
import sys
from pathlib import Path


def resolve_app_data_root() -> Path:
    """Resolve app-data root directory for runtime state."""
    configured = os.getenv("SEABATTLE_APP_DATA_DIR", "").strip()
    if configured:
        candidate = Path(configured)
        if candidate.is_absolute():
            return candidate
        return resolve_project_root() / candidate
    return resolve_project_root() / "appdata"


def resolve_project_root() -> Path:
    """Resolve the directory the game runs from."""
    if getattr(sys, "frozen", False):
        executable = getattr(sys, "executable", "")
        if executable:
            return Path(executable).resolve().parent
    return Path(__file__).resolve().parents[3]


def resolve_logs_dir() -> Path:
    """Resolve logs directory under app-data root."""
    return resolve_app_data_root() / "logs"


def resolve_manifests_dir() -> Path:
    """Resolve ship manifest directory under app-data root."""
    return resolve_app_data_root() / "manifests"


def ensure_app_data_dirs() -> dict[str, Path]:
    """Create app-data directories and return resolved paths."""
    paths = {
        "root": resolve_app_data_root(),
        "logs": resolve_logs_dir(),
        "manifests": resolve_manifests_dir(),
    }
    for path in paths.values():
        path.mkdir(parents=True, exist_ok=True)
    return paths
