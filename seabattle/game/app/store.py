"""Caller-side holder for the current game state."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from seabattle.game.core.actions import Action, Restart, Strike, dispatch
from seabattle.game.core.field import FieldGenerator
from seabattle.game.core.models import DEFAULT_MANIFEST, GameState, Manifest
from seabattle.game.core.rules import StrikeOutcome, StrikeResolution, reset, score

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StateSnapshot:
    """Versioned game state snapshot."""

    value: GameState
    revision: int


class GameStore:
    """Versioned store that swaps in each state the engine returns.

    States are immutable, so snapshots share the current value by reference.
    A failed action leaves the current state and revision untouched.
    """

    def __init__(
        self,
        size: int,
        manifest: Manifest = DEFAULT_MANIFEST,
        *,
        generator: FieldGenerator | None = None,
    ) -> None:
        self._generator = generator
        self._value = reset(size, manifest, generator=generator)
        self._revision = 0
        logger.info(
            "game_started size=%d ships=%d",
            size,
            len(self._value.player.ships),
            extra={"revision": self._revision},
        )

    @property
    def state(self) -> GameState:
        return self._value

    @property
    def revision(self) -> int:
        return self._revision

    def snapshot(self) -> StateSnapshot:
        """Return current state with its revision."""
        return StateSnapshot(value=self._value, revision=self._revision)

    def strike(self, x: int, y: int) -> StrikeResolution:
        return self.dispatch(Strike(x, y))

    def restart(self) -> StrikeResolution:
        return self.dispatch(Restart())

    def dispatch(self, action: Action) -> StrikeResolution:
        """Apply an action and swap in the resulting state."""
        resolution = dispatch(self._value, action, generator=self._generator)
        if resolution.state is not self._value:
            self._value = resolution.state
            self._revision += 1
        logger.info(
            "action_resolved action=%s outcome=%s phase=%s",
            type(action).__name__,
            resolution.outcome.value,
            resolution.state.phase.value,
            extra={
                "revision": self._revision,
                "ship": resolution.ship,
                "score": score(resolution.state.player.ships),
            },
        )
        if resolution.outcome is StrikeOutcome.SUNK and resolution.state.is_over:
            logger.info("game_over revision=%d", self._revision)
        return resolution
