"""Player actions and the reducer that applies them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from seabattle.game.core.field import FieldGenerator
from seabattle.game.core.models import GameState
from seabattle.game.core.rules import StrikeOutcome, StrikeResolution, reset, resolve_strike


@dataclass(frozen=True, slots=True)
class Strike:
    """Fire at one field coordinate."""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class Restart:
    """Start a new game with the current size and manifest."""


Action: TypeAlias = Strike | Restart


def dispatch(
    state: GameState,
    action: Action,
    *,
    generator: FieldGenerator | None = None,
) -> StrikeResolution:
    """Apply one action to ``state`` and return the resulting transition."""
    if isinstance(action, Strike):
        return resolve_strike(state, action.x, action.y, generator=generator)
    if isinstance(action, Restart):
        return StrikeResolution(
            state=reset(state.size, state.manifest, generator=generator),
            outcome=StrikeOutcome.RESTART,
        )
    raise TypeError(f"Unsupported action: {action!r}")
