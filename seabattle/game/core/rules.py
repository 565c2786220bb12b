"""Turn resolution: strikes, ship-life bookkeeping, win detection and reset."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from seabattle.game.core.errors import OutOfBoundsError
from seabattle.game.core.field import FieldGenerator, RandomFieldGenerator
from seabattle.game.core.models import (
    DEFAULT_MANIFEST,
    NO_SHIP,
    Cell,
    CellState,
    Field,
    GamePhase,
    GameState,
    Manifest,
    PlayerState,
    Ship,
)


class StrikeOutcome(StrEnum):
    """Result of a single strike action."""

    MISS = "MISS"
    HIT = "HIT"
    SUNK = "SUNK"
    REPEAT = "REPEAT"
    RESTART = "RESTART"


@dataclass(frozen=True, slots=True)
class StrikeResolution:
    """New state plus what the strike did to reach it."""

    state: GameState
    outcome: StrikeOutcome
    ship: int | None = None


def reset(
    size: int,
    manifest: Manifest = DEFAULT_MANIFEST,
    *,
    generator: FieldGenerator | None = None,
) -> GameState:
    """Start a fresh game from a newly generated field."""
    generate = generator if generator is not None else RandomFieldGenerator()
    field, ships = generate(size, manifest)
    return GameState(
        size=size,
        phase=GamePhase.IN_PROGRESS,
        player=PlayerState(field=field, ships=tuple(ships)),
        manifest=tuple(manifest),
    )


def in_bounds(size: int, x: int, y: int) -> bool:
    """Return whether the coordinate is inside a ``size`` x ``size`` field."""
    return 0 <= x < size and 0 <= y < size


def resolve_strike(
    state: GameState,
    x: int,
    y: int,
    *,
    generator: FieldGenerator | None = None,
) -> StrikeResolution:
    """Apply a strike and report its outcome.

    A strike on a finished game restarts it with the same size and manifest
    and ignores the coordinate. Re-striking a struck cell returns ``state``
    itself.
    """
    if state.phase is GamePhase.OVER:
        return StrikeResolution(
            state=reset(state.size, state.manifest, generator=generator),
            outcome=StrikeOutcome.RESTART,
        )
    if not in_bounds(state.size, x, y):
        raise OutOfBoundsError(x, y, state.size)

    player = state.player
    cell = player.field[x][y]
    if cell.state.struck:
        return StrikeResolution(state=state, outcome=StrikeOutcome.REPEAT)

    field = _replace_cell(player.field, cell.struck())
    ships = player.ships
    outcome = StrikeOutcome.MISS
    ship_index: int | None = None
    if cell.state is CellState.SHIP and cell.ship != NO_SHIP:
        ship_index = cell.ship
        ships = _replace_ship(ships, ship_index, ships[ship_index].hit())
        outcome = StrikeOutcome.SUNK if ships[ship_index].destroyed else StrikeOutcome.HIT

    phase = GamePhase.OVER if all_destroyed(ships) else GamePhase.IN_PROGRESS
    return StrikeResolution(
        state=GameState(
            size=state.size,
            phase=phase,
            player=PlayerState(field=field, ships=ships),
            manifest=state.manifest,
        ),
        outcome=outcome,
        ship=ship_index,
    )


def apply_strike(
    state: GameState,
    x: int,
    y: int,
    *,
    generator: FieldGenerator | None = None,
) -> GameState:
    """Return the state that follows a strike at ``(x, y)``."""
    return resolve_strike(state, x, y, generator=generator).state


def visible_strikes(field: Field) -> tuple[Cell, ...]:
    """Return struck cells in row-major order; unstruck cells stay hidden."""
    return tuple(cell for row in field for cell in row if cell.state.struck)


def score(ships: Iterable[Ship]) -> int:
    """Return the number of hits landed across the fleet."""
    return sum(ship.size - ship.life for ship in ships)


def all_destroyed(ships: Iterable[Ship]) -> bool:
    """Return whether every ship has been destroyed."""
    return all(ship.destroyed for ship in ships)


def ships_remaining(ships: Iterable[Ship]) -> int:
    """Return the number of ships still afloat."""
    return sum(1 for ship in ships if not ship.destroyed)


def _replace_cell(field: Field, cell: Cell) -> Field:
    row = field[cell.x]
    new_row = row[: cell.y] + (cell,) + row[cell.y + 1 :]
    return field[: cell.x] + (new_row,) + field[cell.x + 1 :]


def _replace_ship(ships: tuple[Ship, ...], index: int, ship: Ship) -> tuple[Ship, ...]:
    return ships[:index] + (ship,) + ships[index + 1 :]
