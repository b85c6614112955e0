import random

import pytest

from crunch.components.swap import Swap
from crunch.components.turn_state import TurnPhase
from crunch.events.bus import (EVENT_SWAP_INVALID, EVENT_SWAP_PERFORMED, EVENT_SWAP_REQUEST, EVENT_SWAP_VALID,
                               EVENT_SWIPE, EVENT_TURN_PHASE_CHANGED)
from crunch.level import Level
from crunch.systems.board_ops import detect_possible_swaps, perform_swap
from crunch.systems.turn_state_utils import get_or_create_turn_state
from tests.helpers import ONE_MOVE_5X5, fill_rows, make_systems, snapshot


def _one_move_systems():
    bus, world, board_system, resolution = make_systems(5, 5, seed=77)
    fill_rows(board_system.board, ONE_MOVE_5X5)
    detect_possible_swaps(board_system.board)
    return bus, world, board_system, resolution


def test_perform_swap_moves_slots_and_coordinates_together():
    level = Level(None, 5, 5, rng=random.Random(0))
    fill_rows(level.board, ONE_MOVE_5X5)
    a = level.cookie_at(2, 0)
    b = level.cookie_at(3, 0)
    level.perform_swap(Swap(a, b))
    assert level.cookie_at(3, 0) is a and (a.column, a.row) == (3, 0)
    assert level.cookie_at(2, 0) is b and (b.column, b.row) == (2, 0)


@pytest.mark.parametrize("seed", range(5))
def test_performing_a_swap_twice_restores_the_board(seed):
    level = Level(None, 6, 6, rng=random.Random(seed))
    level.shuffle()
    for swap in list(level.possible_swaps):
        before = snapshot(level.board)
        level.perform_swap(swap)
        assert snapshot(level.board) != before
        level.perform_swap(swap)
        assert snapshot(level.board) == before


def test_perform_swap_on_empty_cell_fails():
    level = Level(None, 5, 5, rng=random.Random(0))
    fill_rows(level.board, ONE_MOVE_5X5)
    swap = Swap(level.cookie_at(0, 0), level.cookie_at(1, 0))
    level.board.cookies.set(1, 0, None)
    with pytest.raises(ValueError):
        perform_swap(level.board, swap)


def test_valid_swap_applies_and_resolves():
    bus, world, board_system, resolution = _one_move_systems()
    received = []
    for name in (EVENT_SWAP_VALID, EVENT_SWAP_INVALID, EVENT_SWAP_PERFORMED):
        bus.subscribe(name, lambda sender, _name=name, **kw: received.append(_name))
    phases = []
    bus.subscribe(EVENT_TURN_PHASE_CHANGED, lambda sender, **kw: phases.append(kw['phase']))
    board = board_system.board
    bus.emit(EVENT_SWAP_REQUEST, swap=Swap(board.cookies.get(2, 0), board.cookies.get(3, 0)))
    assert received == [EVENT_SWAP_VALID, EVENT_SWAP_PERFORMED]
    assert phases == [TurnPhase.VALIDATING, TurnPhase.APPLYING, TurnPhase.RESOLVING, TurnPhase.IDLE]
    assert resolution.last_resolution is not None
    assert resolution.last_resolution.depth >= 1
    state = get_or_create_turn_state(world)
    assert state.turns_played == 1


def test_invalid_swap_leaves_board_untouched():
    bus, world, board_system, _ = _one_move_systems()
    board = board_system.board
    before = snapshot(board)
    received = []
    bus.subscribe(EVENT_SWAP_INVALID, lambda sender, **kw: received.append(kw['swap']))
    swap = Swap(board.cookies.get(0, 4), board.cookies.get(1, 4))
    bus.emit(EVENT_SWAP_REQUEST, swap=swap)
    assert received == [swap]
    assert snapshot(board) == before
    assert get_or_create_turn_state(world).phase == TurnPhase.IDLE


def test_swap_ignored_while_board_is_settling():
    bus, world, board_system, _ = _one_move_systems()
    board = board_system.board
    get_or_create_turn_state(world).phase = TurnPhase.RESOLVING
    received = []
    bus.subscribe(EVENT_SWAP_VALID, lambda sender, **kw: received.append(kw))
    bus.subscribe(EVENT_SWAP_INVALID, lambda sender, **kw: received.append(kw))
    before = snapshot(board)
    bus.emit(EVENT_SWAP_REQUEST, swap=Swap(board.cookies.get(2, 0), board.cookies.get(3, 0)))
    assert received == []
    assert snapshot(board) == before


def test_swipe_becomes_swap_request():
    bus, _, board_system, _ = _one_move_systems()
    board = board_system.board
    requests = []
    bus.subscribe(EVENT_SWAP_REQUEST, lambda sender, **kw: requests.append(kw['swap']))
    expected = Swap(board.cookies.get(2, 0), board.cookies.get(3, 0))
    bus.emit(EVENT_SWIPE, column=2, row=0, horz_delta=1, vert_delta=0)
    assert requests == [expected]


@pytest.mark.parametrize("column,row,dx,dy", [
    (4, 0, 1, 0),    # off the right edge
    (0, 0, -1, 0),   # off the left edge
    (0, 4, 0, 1),    # off the top
    (0, 0, 0, -1),   # off the bottom
    (1, 1, 1, 1),    # diagonal
    (1, 1, 0, 0),    # no movement
])
def test_swipes_off_the_board_are_dropped(column, row, dx, dy):
    bus, _, board_system, _ = _one_move_systems()
    requests = []
    bus.subscribe(EVENT_SWAP_REQUEST, lambda sender, **kw: requests.append(kw))
    bus.emit(EVENT_SWIPE, column=column, row=row, horz_delta=dx, vert_delta=dy)
    assert requests == []


def test_swipe_into_a_gap_is_dropped():
    layout = [
        [1, 1, 1],
        [1, 0, 1],
        [1, 1, 1],
    ]
    level = Level(layout, 3, 3, rng=random.Random(0))
    level.create_initial_cookies()
    assert level.swap_for_swipe(0, 1, 1, 0) is None
    assert level.swap_for_swipe(0, 1, 0, 1) is not None
