"""Read-only projection of game state for the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass

from seabattle.game.core.models import CellState, GamePhase, GameState
from seabattle.game.core.rules import score, ships_remaining, visible_strikes
from seabattle.game.infra.json_codec import dumps_bytes


@dataclass(frozen=True, slots=True)
class StrikeView:
    """Revealed cell."""

    x: int
    y: int
    state: CellState


@dataclass(frozen=True, slots=True)
class ShipView:
    """Fleet entry for the ship board."""

    type: str
    size: int
    life: int
    destroyed: bool


@dataclass(frozen=True, slots=True)
class BoardView:
    """Everything a renderer is allowed to see."""

    size: int
    phase: GamePhase
    score: int
    strikes: tuple[StrikeView, ...]
    ships: tuple[ShipView, ...]
    ships_remaining: int

    @property
    def game_over(self) -> bool:
        return self.phase is GamePhase.OVER


def project(state: GameState) -> BoardView:
    """Build the renderer view; unstruck cells are never included."""
    ships = state.player.ships
    return BoardView(
        size=state.size,
        phase=state.phase,
        score=score(ships),
        strikes=tuple(
            StrikeView(x=cell.x, y=cell.y, state=cell.state)
            for cell in visible_strikes(state.player.field)
        ),
        ships=tuple(
            ShipView(type=ship.type, size=ship.size, life=ship.life, destroyed=ship.destroyed)
            for ship in ships
        ),
        ships_remaining=ships_remaining(ships),
    )


def view_to_payload(view: BoardView) -> dict[str, object]:
    """Convert a board view into a JSON-serializable payload."""
    return {
        "size": view.size,
        "phase": view.phase.value,
        "game_over": view.game_over,
        "score": view.score,
        "ships_remaining": view.ships_remaining,
        "strikes": [[strike.x, strike.y, strike.state.value] for strike in view.strikes],
        "ships": [
            {
                "type": ship.type,
                "size": ship.size,
                "life": ship.life,
                "destroyed": ship.destroyed,
            }
            for ship in view.ships
        ],
    }


def encode_view(view: BoardView) -> bytes:
    return dumps_bytes(view_to_payload(view))
