import random

import pytest

from seabattle.game.core.errors import OutOfBoundsError
from seabattle.game.core.field import RandomFieldGenerator
from seabattle.game.core.models import DEFAULT_MANIFEST, CellState, GamePhase, ManifestEntry
from seabattle.game.core.rules import (
    StrikeOutcome,
    all_destroyed,
    apply_strike,
    reset,
    resolve_strike,
    score,
    ships_remaining,
    visible_strikes,
)


def test_single_ship_strike_ends_game(single_ship_state) -> None:
    state = apply_strike(single_ship_state, 0, 0)
    assert state.player.field[0][0].state is CellState.HIT
    assert state.player.ships[0].life == 0
    assert state.phase is GamePhase.OVER


def test_strike_after_game_over_restarts_and_ignores_coordinate(
    single_ship_state, single_ship_layout
) -> None:
    over = apply_strike(single_ship_state, 0, 0)
    resolution = resolve_strike(over, 0, 1, generator=single_ship_layout)
    assert resolution.outcome is StrikeOutcome.RESTART
    restarted = resolution.state
    assert restarted.phase is GamePhase.IN_PROGRESS
    assert restarted.size == 2
    assert restarted.manifest == over.manifest
    assert visible_strikes(restarted.player.field) == ()
    assert restarted.player.field[0][1].state is CellState.EMPTY
    assert single_ship_layout.calls[-1] == (2, over.manifest)


def test_two_cell_ship_scenario(two_cell_ship_state) -> None:
    first = apply_strike(two_cell_ship_state, 0, 0)
    assert first.player.field[0][0].state is CellState.HIT
    assert first.player.ships[0].life == 1
    assert first.phase is GamePhase.IN_PROGRESS

    second = apply_strike(first, 1, 1)
    assert second.player.field[1][1].state is CellState.MISS
    assert second.player.ships[0].life == 1
    assert second.phase is GamePhase.IN_PROGRESS

    third = apply_strike(second, 0, 1)
    assert third.player.field[0][1].state is CellState.HIT
    assert third.player.ships[0].life == 0
    assert third.phase is GamePhase.OVER
    assert score(third.player.ships) == 2


def test_resolve_strike_reports_outcomes(two_cell_ship_state) -> None:
    miss = resolve_strike(two_cell_ship_state, 1, 0)
    assert miss.outcome is StrikeOutcome.MISS and miss.ship is None
    hit = resolve_strike(miss.state, 0, 0)
    assert hit.outcome is StrikeOutcome.HIT and hit.ship == 0
    sunk = resolve_strike(hit.state, 0, 1)
    assert sunk.outcome is StrikeOutcome.SUNK and sunk.ship == 0


def test_restrike_returns_same_state(two_cell_ship_state) -> None:
    missed = apply_strike(two_cell_ship_state, 1, 1)
    hit = apply_strike(missed, 0, 0)
    assert apply_strike(hit, 1, 1) is hit
    assert apply_strike(hit, 0, 0) is hit
    assert resolve_strike(hit, 0, 0).outcome is StrikeOutcome.REPEAT


def test_miss_keeps_ship_tuple_and_untouched_rows(two_cell_ship_state) -> None:
    missed = apply_strike(two_cell_ship_state, 1, 0)
    assert missed.player.ships is two_cell_ship_state.player.ships
    assert missed.player.field[0] is two_cell_ship_state.player.field[0]
    assert missed.player.field[1] is not two_cell_ship_state.player.field[1]


def test_strike_does_not_touch_previous_state(two_cell_ship_state) -> None:
    apply_strike(two_cell_ship_state, 0, 0)
    assert two_cell_ship_state.player.field[0][0].state is CellState.SHIP
    assert two_cell_ship_state.player.ships[0].life == 2


@pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (2, 0), (0, 2), (5, 5)])
def test_out_of_bounds_strike_raises(two_cell_ship_state, x: int, y: int) -> None:
    with pytest.raises(OutOfBoundsError) as excinfo:
        apply_strike(two_cell_ship_state, x, y)
    assert (excinfo.value.x, excinfo.value.y, excinfo.value.size) == (x, y, 2)


def test_out_of_bounds_strike_is_an_index_error(two_cell_ship_state) -> None:
    with pytest.raises(IndexError):
        apply_strike(two_cell_ship_state, 9, 9)


def test_game_over_exactly_on_last_ship_destroyed(seeded_rng) -> None:
    state = reset(10, DEFAULT_MANIFEST, generator=RandomFieldGenerator(seeded_rng))
    previous_lives = [ship.life for ship in state.player.ships]
    strikes = 0
    for x in range(state.size):
        for y in range(state.size):
            assert state.phase is GamePhase.IN_PROGRESS
            state = apply_strike(state, x, y)
            strikes += 1
            lives = [ship.life for ship in state.player.ships]
            assert all(0 <= now <= before for now, before in zip(lives, previous_lives))
            previous_lives = lives
            if state.phase is GamePhase.OVER:
                break
        if state.phase is GamePhase.OVER:
            break
    assert state.phase is GamePhase.OVER
    assert all_destroyed(state.player.ships)
    assert ships_remaining(state.player.ships) == 0
    assert score(state.player.ships) == 35
    assert state.player.field[x][y].state is CellState.HIT
    assert strikes <= 100


def test_visible_strikes_hide_unstruck_cells(seeded_rng) -> None:
    state = reset(10, DEFAULT_MANIFEST, generator=RandomFieldGenerator(seeded_rng))
    assert visible_strikes(state.player.field) == ()
    rng = random.Random(7)
    coords = [(x, y) for x in range(10) for y in range(10)]
    rng.shuffle(coords)
    for x, y in coords[:40]:
        state = apply_strike(state, x, y)
    visible = visible_strikes(state.player.field)
    assert len(visible) == 40
    assert all(cell.state in (CellState.MISS, CellState.HIT) for cell in visible)
    assert [(cell.x, cell.y) for cell in visible] == sorted((x, y) for x, y in coords[:40])


def test_score_sums_lost_life(two_cell_ship_state) -> None:
    assert score(two_cell_ship_state.player.ships) == 0
    state = apply_strike(two_cell_ship_state, 0, 1)
    assert score(state.player.ships) == 1


def test_reset_produces_independent_states(single_ship_layout) -> None:
    manifest = (ManifestEntry("carrier", 1, 1),)
    first = reset(2, manifest, generator=single_ship_layout)
    second = reset(2, manifest, generator=single_ship_layout)
    assert first == second
    assert first.player.field is not second.player.field
    struck = apply_strike(first, 0, 0)
    assert struck.player.field[0][0].state is CellState.HIT
    assert second.player.field[0][0].state is CellState.SHIP


def test_reset_starts_in_progress_with_full_life(seeded_rng) -> None:
    state = reset(10, generator=RandomFieldGenerator(seeded_rng))
    assert state.phase is GamePhase.IN_PROGRESS
    assert state.manifest == DEFAULT_MANIFEST
    assert all(ship.life == ship.size for ship in state.player.ships)
