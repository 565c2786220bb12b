"""Field generation: manifest validation and ship placement."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from seabattle.game.core.errors import FieldGenerationError, InvalidManifestError
from seabattle.game.core.models import (
    NO_SHIP,
    Cell,
    CellState,
    Field,
    Manifest,
    Ship,
    manifest_cell_count,
)

logger = logging.getLogger(__name__)


class Orientation(StrEnum):
    """Ship orientation; horizontal ships extend along y."""

    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"


@dataclass(frozen=True, slots=True)
class Coord:
    """Field coordinate."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class ShipPlacement:
    """Placement of a single ship."""

    type: str
    size: int
    bow: Coord
    orientation: Orientation = Orientation.HORIZONTAL


class FieldGenerator(Protocol):
    """Produces an initial field and fleet for a size and manifest."""

    def __call__(self, size: int, manifest: Manifest) -> tuple[Field, tuple[Ship, ...]]: ...


def cells_for_placement(placement: ShipPlacement) -> list[Coord]:
    """Compute occupied cells for a ship placement."""
    result: list[Coord] = []
    for i in range(placement.size):
        if placement.orientation is Orientation.HORIZONTAL:
            result.append(Coord(placement.bow.x, placement.bow.y + i))
        else:
            result.append(Coord(placement.bow.x + i, placement.bow.y))
    return result


def validate_manifest(size: int, manifest: Manifest) -> None:
    """Raise InvalidManifestError unless the manifest can populate the field."""
    if size <= 0:
        raise InvalidManifestError(f"Field size must be positive, got {size}.")
    if not manifest:
        raise InvalidManifestError("Manifest must contain at least one ship class.")
    for entry in manifest:
        if entry.size <= 0:
            raise InvalidManifestError(f"Ship '{entry.type}' must have a positive size.")
        if entry.count <= 0:
            raise InvalidManifestError(f"Ship '{entry.type}' must have a positive count.")
        if entry.size > size:
            raise InvalidManifestError(
                f"Ship '{entry.type}' of size {entry.size} does not fit a {size}x{size} field."
            )
    total = manifest_cell_count(manifest)
    if total > size * size:
        raise InvalidManifestError(
            f"Manifest requests {total} ship cells but the field only has {size * size}."
        )


def expand_manifest(manifest: Manifest) -> list[tuple[str, int]]:
    """Return ``(type, size)`` per ship in manifest order."""
    return [(entry.type, entry.size) for entry in manifest for _ in range(entry.count)]


def build_field(size: int, placements: Sequence[ShipPlacement]) -> tuple[Field, tuple[Ship, ...]]:
    """Create a field and fleet from explicit placements.

    Ship indices follow placement order.
    """
    if size <= 0:
        raise FieldGenerationError(f"Field size must be positive, got {size}.")
    owners = np.full((size, size), NO_SHIP, dtype=np.int32)
    for index, placement in enumerate(placements):
        if placement.size <= 0:
            raise FieldGenerationError(f"Ship '{placement.type}' must have a positive size.")
        for cell in cells_for_placement(placement):
            if not (0 <= cell.x < size and 0 <= cell.y < size):
                raise FieldGenerationError(
                    f"Ship '{placement.type}' leaves the field at ({cell.x}, {cell.y})."
                )
            if owners[cell.x, cell.y] != NO_SHIP:
                raise FieldGenerationError(
                    f"Ship '{placement.type}' overlaps another ship at ({cell.x}, {cell.y})."
                )
            owners[cell.x, cell.y] = index

    field: Field = tuple(
        tuple(
            Cell(x, y, CellState.EMPTY if owner == NO_SHIP else CellState.SHIP, owner)
            for y, owner in enumerate(row)
        )
        for x, row in enumerate(owners.tolist())
    )
    ships = tuple(Ship(placement.type, placement.size, placement.size) for placement in placements)
    return field, ships


class RandomFieldGenerator:
    """Random placement generator backed by a numpy occupancy grid."""

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        allow_touching: bool = True,
        attempts: int = 64,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._allow_touching = allow_touching
        self._attempts = max(1, attempts)

    def __call__(self, size: int, manifest: Manifest) -> tuple[Field, tuple[Ship, ...]]:
        validate_manifest(size, manifest)
        ships = expand_manifest(manifest)
        placements: list[ShipPlacement] | None = None
        if not self._allow_touching:
            placements = self._layout(size, ships, spaced=True)
            if placements is None:
                # Dense manifests cannot keep a gap between every ship.
                logger.warning(
                    "spaced_layout_failed size=%d ships=%d attempts=%d",
                    size,
                    len(ships),
                    self._attempts,
                )
        if placements is None:
            placements = self._layout(size, ships, spaced=False)
        if placements is None:
            raise FieldGenerationError(
                f"Failed to place {len(ships)} ships on a {size}x{size} field."
            )
        return build_field(size, placements)

    def _layout(
        self, size: int, ships: list[tuple[str, int]], *, spaced: bool
    ) -> list[ShipPlacement] | None:
        order = sorted(range(len(ships)), key=lambda index: ships[index][1], reverse=True)
        for _ in range(self._attempts):
            placements = self._try_layout(size, ships, order, spaced)
            if placements is not None:
                return placements
        return None

    def _try_layout(
        self,
        size: int,
        ships: list[tuple[str, int]],
        order: list[int],
        spaced: bool,
    ) -> list[ShipPlacement] | None:
        occupied = np.zeros((size, size), dtype=bool)
        by_index: dict[int, ShipPlacement] = {}
        for index in order:
            ship_type, length = ships[index]
            blocked = _dilate(occupied) if spaced else occupied
            candidates = _free_placements(blocked, length)
            if not candidates:
                return None
            bow, orientation = self._rng.choice(candidates)
            placement = ShipPlacement(ship_type, length, bow, orientation)
            for cell in cells_for_placement(placement):
                occupied[cell.x, cell.y] = True
            by_index[index] = placement
        return [by_index[index] for index in range(len(ships))]


def _free_placements(blocked: np.ndarray, length: int) -> list[tuple[Coord, Orientation]]:
    candidates: list[tuple[Coord, Orientation]] = []
    horizontal = ~sliding_window_view(blocked, length, axis=1).any(axis=-1)
    for x, y in np.argwhere(horizontal):
        candidates.append((Coord(int(x), int(y)), Orientation.HORIZONTAL))
    if length > 1:
        vertical = ~sliding_window_view(blocked, length, axis=0).any(axis=-1)
        for x, y in np.argwhere(vertical):
            candidates.append((Coord(int(x), int(y)), Orientation.VERTICAL))
    return candidates


def _dilate(mask: np.ndarray) -> np.ndarray:
    """Grow a mask by one cell in all eight directions."""
    rows, cols = mask.shape
    padded = np.pad(mask, 1)
    grown = np.zeros_like(mask)
    for dx in range(3):
        for dy in range(3):
            grown |= padded[dx : dx + rows, dy : dy + cols]
    return grown
