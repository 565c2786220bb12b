"""Core domain models used by the turn engine."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TypeAlias

DEFAULT_FIELD_SIZE = 10
NO_SHIP = -1


class CellState(StrEnum):
    """Lifecycle of a single field cell."""

    EMPTY = "EMPTY"
    SHIP = "SHIP"
    MISS = "MISS"
    HIT = "HIT"

    @property
    def struck(self) -> bool:
        return self in (CellState.MISS, CellState.HIT)


class GamePhase(StrEnum):
    """Top-level game phase."""

    IN_PROGRESS = "IN_PROGRESS"
    OVER = "OVER"


@dataclass(frozen=True, slots=True)
class Cell:
    """Immutable field cell; identity is ``(x, y)``."""

    x: int
    y: int
    state: CellState = CellState.EMPTY
    ship: int = NO_SHIP

    def struck(self) -> Cell:
        """Return the cell as it looks after a strike."""
        if self.state is CellState.SHIP:
            return replace(self, state=CellState.HIT)
        if self.state is CellState.EMPTY:
            return replace(self, state=CellState.MISS)
        return self


Field: TypeAlias = tuple[tuple[Cell, ...], ...]


@dataclass(frozen=True, slots=True)
class Ship:
    """Ship with remaining life."""

    type: str
    size: int
    life: int

    def __post_init__(self) -> None:
        if not 0 <= self.life <= self.size:
            raise ValueError(f"Ship life must be within [0, {self.size}], got {self.life}.")

    @property
    def destroyed(self) -> bool:
        return self.life == 0

    def hit(self) -> Ship:
        """Return a copy with one less life."""
        if self.destroyed:
            raise ValueError(f"Ship '{self.type}' is already destroyed.")
        return replace(self, life=self.life - 1)


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """One ship class of a manifest: ``count`` ships of ``size`` cells."""

    type: str
    size: int
    count: int = 1


Manifest: TypeAlias = tuple[ManifestEntry, ...]

DEFAULT_MANIFEST: Manifest = (
    ManifestEntry("aircraft", 5, 1),
    ManifestEntry("battleship", 4, 2),
    ManifestEntry("cruiser", 3, 3),
    ManifestEntry("submarine", 2, 4),
    ManifestEntry("carrier", 1, 5),
)


@dataclass(frozen=True, slots=True)
class PlayerState:
    """Field and fleet owned by the turn engine."""

    field: Field
    ships: tuple[Ship, ...]


@dataclass(frozen=True, slots=True)
class GameState:
    """Immutable top-level game state.

    ``manifest`` records the manifest the field was generated from so that a
    restart can replay the same setup.
    """

    size: int
    phase: GamePhase
    player: PlayerState
    manifest: Manifest = DEFAULT_MANIFEST

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.OVER


def manifest_cell_count(manifest: Manifest) -> int:
    """Return the number of ship cells a manifest requests."""
    return sum(entry.size * entry.count for entry in manifest)
