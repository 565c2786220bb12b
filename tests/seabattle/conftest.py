from __future__ import annotations

import random
from collections.abc import Callable, Sequence

import pytest

from seabattle.game.core.field import Coord, Orientation, ShipPlacement, build_field
from seabattle.game.core.models import GameState, Manifest, ManifestEntry
from seabattle.game.core.rules import reset


class FixedLayout:
    """Generator stub that always returns the same placements."""

    def __init__(self, placements: Sequence[ShipPlacement]) -> None:
        self.placements = list(placements)
        self.calls: list[tuple[int, Manifest]] = []

    def __call__(self, size: int, manifest: Manifest):
        self.calls.append((size, manifest))
        return build_field(size, self.placements)


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def fixed_layout() -> Callable[[Sequence[ShipPlacement]], FixedLayout]:
    return FixedLayout


@pytest.fixture
def single_ship_layout() -> FixedLayout:
    return FixedLayout([ShipPlacement("carrier", 1, Coord(0, 0))])


@pytest.fixture
def single_ship_state(single_ship_layout: FixedLayout) -> GameState:
    return reset(2, (ManifestEntry("carrier", 1, 1),), generator=single_ship_layout)


@pytest.fixture
def two_cell_ship_layout() -> FixedLayout:
    return FixedLayout([ShipPlacement("submarine", 2, Coord(0, 0), Orientation.HORIZONTAL)])


@pytest.fixture
def two_cell_ship_state(two_cell_ship_layout: FixedLayout) -> GameState:
    return reset(2, (ManifestEntry("submarine", 2, 1),), generator=two_cell_ship_layout)
