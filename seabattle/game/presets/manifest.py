"""Ship manifest file schema, validation and persistence."""

from __future__ import annotations

from pathlib import Path

from seabattle.game.core.errors import ManifestFormatError
from seabattle.game.core.models import Manifest, ManifestEntry
from seabattle.game.infra.json_codec import JSONDecodeError, dumps_bytes, loads

MANIFEST_VERSION = 1


def manifest_to_payload(name: str, manifest: Manifest) -> dict[str, object]:
    """Convert a manifest to a JSON-serializable payload."""
    return {
        "version": MANIFEST_VERSION,
        "name": name,
        "ships": [
            {"type": entry.type, "size": entry.size, "count": entry.count} for entry in manifest
        ],
    }


def payload_to_manifest(payload: object) -> tuple[str, Manifest]:
    """Convert a loaded payload into a named manifest."""
    if not isinstance(payload, dict):
        raise ManifestFormatError("Manifest payload must be an object.")
    raw_version = payload.get("version", -1)
    if not isinstance(raw_version, (int, str)):
        raise ManifestFormatError("Manifest version must be int-compatible.")
    try:
        version = int(raw_version)
    except ValueError as exc:
        raise ManifestFormatError("Manifest version must be int-compatible.") from exc
    if version != MANIFEST_VERSION:
        raise ManifestFormatError(f"Unsupported manifest version: {version}.")
    name = str(payload.get("name", "")).strip()
    if not name:
        raise ManifestFormatError("Manifest name is required.")

    raw_ships = payload.get("ships")
    if not isinstance(raw_ships, list) or not raw_ships:
        raise ManifestFormatError("Manifest ships must be a non-empty list.")

    entries: list[ManifestEntry] = []
    for item in raw_ships:
        if not isinstance(item, dict):
            raise ManifestFormatError("Each manifest ship must be an object.")
        try:
            ship_type = str(item["type"]).strip()
            size = int(item["size"])
            count = int(item.get("count", 1))
        except (KeyError, TypeError, ValueError) as exc:
            raise ManifestFormatError("Malformed ship entry in manifest payload.") from exc
        if not ship_type:
            raise ManifestFormatError("Manifest ship type cannot be empty.")
        if size <= 0 or count <= 0:
            raise ManifestFormatError(f"Ship '{ship_type}' needs a positive size and count.")
        entries.append(ManifestEntry(type=ship_type, size=size, count=count))
    return name, tuple(entries)


def load_manifest(path: Path) -> tuple[str, Manifest]:
    """Load a named manifest from a JSON file."""
    try:
        payload = loads(path.read_bytes())
    except JSONDecodeError as exc:
        raise ManifestFormatError(f"Manifest file {path} is not valid JSON.") from exc
    return payload_to_manifest(payload)


def save_manifest(path: Path, name: str, manifest: Manifest) -> None:
    """Write a named manifest to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_bytes(manifest_to_payload(name, manifest), pretty=True))
