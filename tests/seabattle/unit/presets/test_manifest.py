import pytest

from seabattle.game.core.errors import InvalidManifestError, ManifestFormatError
from seabattle.game.core.models import DEFAULT_MANIFEST, ManifestEntry
from seabattle.game.presets.manifest import (
    load_manifest,
    manifest_to_payload,
    payload_to_manifest,
    save_manifest,
)


def test_save_and_load_manifest(tmp_path) -> None:
    path = tmp_path / "manifests" / "classic.json"
    save_manifest(path, "classic", DEFAULT_MANIFEST)
    name, manifest = load_manifest(path)
    assert name == "classic"
    assert manifest == DEFAULT_MANIFEST


def test_payload_count_defaults_to_one() -> None:
    name, manifest = payload_to_manifest(
        {"version": 1, "name": "solo", "ships": [{"type": "cruiser", "size": 3}]}
    )
    assert name == "solo"
    assert manifest == (ManifestEntry("cruiser", 3, 1),)


def test_manifest_to_payload_shape() -> None:
    payload = manifest_to_payload("tiny", (ManifestEntry("dot", 1, 2),))
    assert payload == {
        "version": 1,
        "name": "tiny",
        "ships": [{"type": "dot", "size": 1, "count": 2}],
    }


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"version": 2, "name": "x", "ships": [{"type": "a", "size": 1}]},
        {"version": "one", "name": "x", "ships": [{"type": "a", "size": 1}]},
        {"version": 1, "name": " ", "ships": [{"type": "a", "size": 1}]},
        {"version": 1, "name": "x", "ships": []},
        {"version": 1, "name": "x", "ships": ["a"]},
        {"version": 1, "name": "x", "ships": [{"size": 1}]},
        {"version": 1, "name": "x", "ships": [{"type": "a", "size": "big"}]},
        {"version": 1, "name": "x", "ships": [{"type": "a", "size": 2, "count": 0}]},
    ],
)
def test_payload_to_manifest_rejects_malformed(payload) -> None:
    with pytest.raises(ManifestFormatError):
        payload_to_manifest(payload)


def test_load_manifest_rejects_invalid_json(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(InvalidManifestError):
        load_manifest(path)
